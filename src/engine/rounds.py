"""
Canonical knockout rounds and label classification.
"""
from typing import List, Optional

ROUND_ORDER = ['Preliminary', 'Quarterfinal', 'Semifinal', 'Bronze', 'Final']

_ROUND_INDEX = {name: idx for idx, name in enumerate(ROUND_ORDER)}


def classify_round(round_label) -> Optional[str]:
    """Map a round label to its canonical round name, or None if it is not one (exact match)."""
    if not isinstance(round_label, str):
        return None
    return round_label if round_label in _ROUND_INDEX else None


def canonical_order() -> List[str]:
    """Return the rounds in processing/display order."""
    return list(ROUND_ORDER)


def round_index(round_name: str) -> int:
    """Position of a canonical round in ROUND_ORDER."""
    return _ROUND_INDEX[round_name]
