"""
Knockout bracket assembly from flat match records.
"""
import logging
from typing import Dict, List, Optional

from engine.models import BYE, COMPLETED, Match
from engine.participants import FIRST, SECOND, normalize_ref, resolve_slots, winner_slot
from engine.rounds import canonical_order, classify_round

logger = logging.getLogger(__name__)

MEDALS = {1: 'Gold', 2: 'Silver', 3: 'Bronze'}

BRONZE = 'Bronze'


def _slot_data(slot, is_winner: bool) -> Dict:
    if slot is BYE:
        return {'kind': None, 'ref': None, 'position': None, 'is_bye': True, 'is_winner': False}
    data = slot.to_dict()
    data.update(is_bye=False, is_winner=is_winner)
    return data


def _match_data(match: Match, round_name: str) -> Dict:
    """Build the output record for one match, resolving slots and winner."""
    first, second = resolve_slots(match)
    winner = winner_slot(match, first, second)
    return {
        'id': match.id,
        'round_label': match.round_label,
        'round': round_name,
        'display_name': match.display_name,
        'status': match.status,
        'winner_ref': match.winner_ref,
        'scheduled_time': match.scheduled_time,
        'completed_time': match.completed_time,
        'slots': [_slot_data(first, winner == FIRST), _slot_data(second, winner == SECOND)],
        'winner_slot': winner,
    }


def _winning_slot(match_data: Dict) -> Dict:
    return match_data['slots'][0] if match_data['winner_slot'] == FIRST else match_data['slots'][1]


def count_participants(matches: List[Match]) -> int:
    """Count distinct non-bye refs across all matches, whatever their round."""
    refs = set()
    for match in matches:
        for p in match.participants:
            if p is BYE:
                continue
            refs.add(normalize_ref(p.ref))
    return len(refs)


def build_bracket(matches: List[Match], warn_unknown_rounds: bool = True) -> Dict:
    """
    Group matches into canonical rounds and resolve slots and winners.

    Returns dict with:
    - 'rounds': list of {'round', 'matches', 'advanced'} in canonical order,
      rounds without matches omitted
    - 'participant_count': distinct non-bye refs over the whole input
    - 'dropped_matches': ids of matches whose round label is not a known round
    """
    if not isinstance(matches, list):
        raise TypeError(f"Expected a list of matches, got {type(matches).__name__}")
    for match in matches:
        if not isinstance(match, Match):
            raise TypeError(f"Expected Match, got {type(match).__name__}")

    buckets = {name: [] for name in canonical_order()}
    dropped = []
    unknown_labels = []
    for match in matches:
        round_name = classify_round(match.round_label)
        if round_name is None:
            dropped.append(match.id)
            if match.round_label not in unknown_labels:
                unknown_labels.append(match.round_label)
            continue
        buckets[round_name].append(match)

    if warn_unknown_rounds:
        for label in unknown_labels:
            logger.warning(f"Dropping matches with unknown round label {label!r}")

    rounds = []
    for round_name in canonical_order():
        round_matches = buckets[round_name]
        if not round_matches:
            continue
        # sorted() is stable: equal names keep input order
        ordered = sorted(round_matches, key=lambda m: m.display_name)
        matches_data = [_match_data(m, round_name) for m in ordered]

        advanced = [
            _winning_slot(m)['ref'] for m in matches_data
            if m['status'] == COMPLETED and m['winner_slot'] is not None
        ]
        rounds.append({
            'round': round_name,
            'matches': matches_data,
            'advanced': advanced,
        })

    participant_count = count_participants(matches)
    logger.debug(f"Built bracket: {len(rounds)} rounds, {len(matches) - len(dropped)} matches, "
                 f"{len(dropped)} dropped, {participant_count} participants")

    return {
        'rounds': rounds,
        'participant_count': participant_count,
        'dropped_matches': dropped,
    }


def _find_round(bracket: Dict, round_name: str) -> Optional[Dict]:
    for group in bracket['rounds']:
        if group['round'] == round_name:
            return group
    return None


def get_final_standings(bracket: Dict) -> List[Dict]:
    """
    Podium places from a built bracket.

    Place 1 is the winner of the decided Final, place 2 the other slot of that
    match, and each decided Bronze match contributes a place 3.
    Empty until a Final has been decided.
    """
    final_round = _find_round(bracket, 'Final')
    if not final_round:
        return []

    final_match = next(
        (m for m in final_round['matches'] if m['status'] == COMPLETED and m['winner_slot'] is not None),
        None
    )
    if final_match is None:
        return []

    standings = []
    for slot in final_match['slots']:
        if slot['is_bye']:
            continue
        place = 1 if slot['is_winner'] else 2
        standings.append({'place': place, 'ref': slot['ref'], 'kind': slot['kind'], 'medal': MEDALS[place]})
    standings.sort(key=lambda s: s['place'])

    bronze_round = _find_round(bracket, BRONZE)
    if bronze_round:
        for match in bronze_round['matches']:
            if match['status'] != COMPLETED or match['winner_slot'] is None:
                continue
            winner = _winning_slot(match)
            standings.append({'place': 3, 'ref': winner['ref'], 'kind': winner['kind'], 'medal': MEDALS[3]})

    return standings


def get_bracket_connectors(bracket: Dict) -> List[Dict]:
    """
    Pair adjacent matches of each round with the match they feed visually.

    Matches 2k and 2k+1 of a round connect to match k of the next present
    round. Bronze sits beside the main tree and takes no connectors, so the
    semifinals feed the Final. A pair whose target index is past the end of
    the next round gets no connector. This is a drawing aid only; it says
    nothing about real progression.
    """
    connectors = []
    rounds = [group for group in bracket['rounds'] if group['round'] != BRONZE]
    for round_idx in range(len(rounds) - 1):
        current = rounds[round_idx]
        following = rounds[round_idx + 1]
        match_ids = [m['id'] for m in current['matches']]
        for i in range(0, len(match_ids), 2):
            target_idx = i // 2
            if target_idx >= len(following['matches']):
                break
            connectors.append({
                'from_round': current['round'],
                'from_matches': match_ids[i:i + 2],
                'to_round': following['round'],
                'to_match': following['matches'][target_idx]['id'],
            })
    return connectors
