"""
Round-by-round leaderboards for judged (score-based) events.
"""
import logging
from typing import Dict, List, Optional, Tuple

from engine.models import Performance

logger = logging.getLogger(__name__)


def ranking_sort_key(performance: Performance, use_place: bool = False) -> Tuple:
    """
    Composite ordering key, most significant first:
    placed entries by place (only when use_place), then scored before
    unscored, higher score first, then performance_order.
    """
    if use_place and performance.place is not None:
        placement = (0, performance.place)
    else:
        placement = (1, 0)

    if performance.final_score is None:
        score = (1, 0)
    else:
        score = (0, -performance.final_score)

    return placement + score + (performance.performance_order,)


def group_by_round(performances: List[Performance]) -> Dict[str, List[Performance]]:
    """Group by raw round label, groups in first-appearance order."""
    groups = {}
    for performance in performances:
        groups.setdefault(performance.round_label, []).append(performance)
    return groups


def rank_performances(performances: List[Performance],
                      placement_round: Optional[str] = None) -> Dict[str, List[Performance]]:
    """
    Order each round's performances into a leaderboard.

    placement_round names the one round (raw label) whose explicit places
    take priority over scores. Returns {round_label: [Performance, ...]}.
    """
    if not isinstance(performances, list):
        raise TypeError(f"Expected a list of performances, got {type(performances).__name__}")
    for performance in performances:
        if not isinstance(performance, Performance):
            raise TypeError(f"Expected Performance, got {type(performance).__name__}")

    rankings = {}
    for round_label, group in group_by_round(performances).items():
        use_place = placement_round is not None and round_label == placement_round
        rankings[round_label] = sorted(group, key=lambda p: ranking_sort_key(p, use_place))

    logger.debug(f"Ranked {len(performances)} performances across {len(rankings)} rounds")
    return rankings


def get_ranking_table(performances: List[Performance], placement_round: Optional[str] = None) -> Dict[str, List[Dict]]:
    """
    Leaderboard rows per round with a derived rank.

    The rank is the explicit place where the placement override applies,
    otherwise the 1-based position in the round's ordering.
    """
    table = {}
    for round_label, ordered in rank_performances(performances, placement_round).items():
        use_place = placement_round is not None and round_label == placement_round
        rows = []
        for position, performance in enumerate(ordered, start=1):
            if use_place and performance.place is not None:
                rank = performance.place
            else:
                rank = position
            rows.append({
                'rank': rank,
                'id': performance.id,
                'performer_ref': performance.performer_ref,
                'performance_order': performance.performance_order,
                'final_score': performance.final_score,
                'place': performance.place,
            })
        table[round_label] = rows
    return table


def suggest_places(performances: List[Performance]) -> List[Tuple]:
    """
    Derive podium places for a final round from its scores.

    Four scored entries get 1, 2, 3, 3 (two shared bronzes). With fewer,
    equal consecutive scores share a place, and the entry reaching place 3
    shares it with the next one. Unscored entries get no place.
    Returns [(performance_id, place), ...]; performances are not modified.
    """
    scored = sorted(
        (p for p in performances if p.final_score is not None),
        key=lambda p: (-p.final_score, p.performance_order)
    )

    if len(scored) == 4:
        return [(p.id, place) for p, place in zip(scored, (1, 2, 3, 3))]

    places = []
    current_place = 1
    i = 0
    while i < len(scored):
        performance = scored[i]
        next_performance = scored[i + 1] if i + 1 < len(scored) else None

        if current_place == 3:
            places.append((performance.id, 3))
            if next_performance is not None:
                places.append((next_performance.id, 3))
            break

        places.append((performance.id, current_place))
        is_tie = next_performance is not None and next_performance.final_score == performance.final_score
        if not is_tie:
            current_place += 1
        i += 1

    return places
