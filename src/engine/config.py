"""
Settings for the bracket/ranking wrappers, loaded from YAML with defaults.
"""
import os
import yaml

SETTINGS_FILE_ENV = 'ENGINE_SETTINGS_FILE'
PLACEMENT_ROUND_ENV = 'ENGINE_PLACEMENT_ROUND'


def get_default_settings():
    """Return default settings."""
    return {
        'placement_round': None,
        'warn_unknown_rounds': True,
        'log_level': 'INFO',
    }


def load_settings(path=None):
    """
    Load settings from YAML, merging with defaults.

    The file is `path`, else $ENGINE_SETTINGS_FILE, else none.
    $ENGINE_PLACEMENT_ROUND overrides placement_round when set.
    """
    settings = get_default_settings()
    path = path or os.environ.get(SETTINGS_FILE_ENV)

    if path and os.path.exists(path):
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
        if data:
            if not isinstance(data, dict):
                raise ValueError(f"Settings file {path} must contain a mapping")
            settings.update(data)

    placement_round = os.environ.get(PLACEMENT_ROUND_ENV)
    if placement_round:
        settings['placement_round'] = placement_round

    return settings
