"""
Slot resolution and winner detection for a single match.
"""
from typing import Optional, Tuple

from engine.models import BYE

SLOT_LABELS = ('Player 1', 'Player 2')

FIRST = 'first'
SECOND = 'second'


def normalize_ref(value) -> Optional[str]:
    """Stringify and trim an identifier for comparison. Case is kept."""
    if value is None:
        return None
    return str(value).strip()


def resolve_slots(match) -> Tuple:
    """
    Return (first, second) for a match, each a Participant or BYE.

    A participant whose position label matches the slot wins that slot.
    Slots left over are filled from the unlabelled entries in list order,
    so without labels slot 1 is index 0 and slot 2 is index 1. Missing
    entries are BYE.
    """
    participants = list(match.participants)
    by_position = {}
    for idx, p in enumerate(participants):
        if p is BYE or p.position not in SLOT_LABELS:
            continue
        # first entry claiming a label keeps it
        by_position.setdefault(p.position, idx)

    claimed = set(by_position.values())
    leftovers = [p for idx, p in enumerate(participants) if idx not in claimed]

    slots = []
    for label in SLOT_LABELS:
        if label in by_position:
            slots.append(participants[by_position[label]])
        elif leftovers:
            slots.append(leftovers.pop(0))
        else:
            slots.append(BYE)

    first, second = slots
    return first, second


def winner_slot(match, first, second) -> Optional[str]:
    """Return FIRST, SECOND or None when no single slot matches winner_ref."""
    winner = normalize_ref(match.winner_ref)
    if not winner:
        return None

    first_wins = first is not BYE and normalize_ref(first.ref) == winner
    second_wins = second is not BYE and normalize_ref(second.ref) == winner
    if first_wins and not second_wins:
        return FIRST
    if second_wins and not first_wins:
        return SECOND
    return None
