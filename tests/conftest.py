"""
Shared pytest fixtures for bracket and ranking engine tests.

Running tests:
    pytest tests/
"""
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.models import Match, Participant, Performance, PLAYER, SCHEDULED


def make_match(id, round_label, display_name='', refs=(), status=SCHEDULED, winner_ref=None, **kwargs):
    """Build a Match from plain player refs (None entries are skipped)."""
    participants = [Participant(PLAYER, ref) for ref in refs if ref is not None]
    return Match(id=id, round_label=round_label, display_name=display_name, participants=participants,
                 status=status, winner_ref=winner_ref, **kwargs)


def make_performance(ref, order, final_score=None, place=None, round_label='First Round'):
    return Performance(id=f"perf-{ref}", round_label=round_label, performer_ref=ref,
                       performance_order=order, final_score=final_score, place=place)


@pytest.fixture
def scenario_a_matches():
    """Two semifinals (out of name order) and an empty final."""
    return [
        make_match('m-sf2', 'Semifinal', 'SF2', refs=('P3', 'P4')),
        make_match('m-sf1', 'Semifinal', 'SF1', refs=('P1', 'P2'), status='Completed', winner_ref='P1'),
        make_match('m-f1', 'Final', 'F1'),
    ]


@pytest.fixture
def client():
    """Create a test client for the JSON wrapper."""
    from app import app
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


@pytest.fixture
def clean_settings_env(monkeypatch):
    """Remove settings environment overrides."""
    monkeypatch.delenv('ENGINE_SETTINGS_FILE', raising=False)
    monkeypatch.delenv('ENGINE_PLACEMENT_ROUND', raising=False)
