"""
Record types for matches, participants and scored performances.

Records arrive as plain dicts (decoded JSON/YAML) and are parsed into the
classes below. Malformed records raise InvalidRecordError.
"""
import math
from numbers import Real

BYE = 'BYE'

PLAYER = 'Player'
TEAM = 'Team'
PARTICIPANT_KINDS = (PLAYER, TEAM)

SCHEDULED = 'Scheduled'
IN_PROGRESS = 'In Progress'
COMPLETED = 'Completed'
MATCH_STATUSES = (SCHEDULED, IN_PROGRESS, COMPLETED)

# Accepted spellings on input
_STATUS_ALIASES = {
    'Scheduled': SCHEDULED,
    'In Progress': IN_PROGRESS,
    'InProgress': IN_PROGRESS,
    'Completed': COMPLETED,
}


class InvalidRecordError(ValueError):
    """A record violates the input contract (broken upstream producer)."""


class Participant:
    def __init__(self, kind, ref, position=None):
        if kind not in PARTICIPANT_KINDS:
            raise InvalidRecordError(f"Unknown participant kind: {kind!r}")
        if ref is None or str(ref).strip() == '':
            raise InvalidRecordError(f"{kind} participant is missing a ref")
        self.kind = kind
        self.ref = ref
        self.position = position

    def to_dict(self):
        return {'kind': self.kind, 'ref': self.ref, 'position': self.position}

    def __repr__(self):
        return f"Participant(kind={self.kind}, ref={self.ref}, position={self.position})"


class Match:
    def __init__(self, id, round_label, display_name='', participants=None, status=SCHEDULED,
                 winner_ref=None, scheduled_time=None, completed_time=None):
        if id is None:
            raise InvalidRecordError("Match is missing an id")
        if status not in MATCH_STATUSES:
            raise InvalidRecordError(f"Match {id}: unknown status {status!r}")
        participants = list(participants) if participants else []
        if len(participants) > 2:
            raise InvalidRecordError(f"Match {id}: expected at most 2 participants, got {len(participants)}")
        for p in participants:
            if p is not BYE and not isinstance(p, Participant):
                raise TypeError(f"Match {id}: participants must be Participant or BYE, got {type(p).__name__}")
        self.id = id
        self.round_label = round_label
        self.display_name = str(display_name) if display_name is not None else ''
        self.participants = tuple(participants)
        self.status = status
        self.winner_ref = winner_ref
        self.scheduled_time = scheduled_time
        self.completed_time = completed_time

    def __repr__(self):
        return (f"Match(id={self.id}, round_label={self.round_label}, "
                f"display_name={self.display_name}, status={self.status})")


class Performance:
    def __init__(self, id, round_label, performer_ref, performance_order, scores=None,
                 final_score=None, place=None):
        if id is None:
            raise InvalidRecordError("Performance is missing an id")
        if performer_ref is None:
            raise InvalidRecordError(f"Performance {id}: missing performer_ref")
        if isinstance(performance_order, bool) or not isinstance(performance_order, int):
            raise InvalidRecordError(f"Performance {id}: performance_order must be an integer")
        if final_score is not None and (isinstance(final_score, bool) or not isinstance(final_score, Real)):
            raise InvalidRecordError(f"Performance {id}: final_score must be numeric or null")
        if final_score is not None and not math.isfinite(final_score):
            raise InvalidRecordError(f"Performance {id}: final_score must be finite, got {final_score}")
        if round_label is not None and not isinstance(round_label, str):
            raise InvalidRecordError(f"Performance {id}: round_label must be a string")
        if place is not None:
            if isinstance(place, bool) or not isinstance(place, int) or place < 1:
                raise InvalidRecordError(f"Performance {id}: place must be a positive integer or null")
        self.id = id
        self.round_label = round_label
        self.performer_ref = performer_ref
        self.performance_order = performance_order
        self.scores = tuple(scores) if scores else ()
        self.final_score = final_score
        self.place = place

    def to_dict(self):
        return {
            'id': self.id,
            'round_label': self.round_label,
            'performer_ref': self.performer_ref,
            'performance_order': self.performance_order,
            'scores': list(self.scores),
            'final_score': self.final_score,
            'place': self.place,
        }

    def __repr__(self):
        return (f"Performance(id={self.id}, round_label={self.round_label}, "
                f"performer_ref={self.performer_ref}, final_score={self.final_score}, place={self.place})")


def participant_from_dict(data, match_id=None):
    """
    Parse one participant entry.

    Accepts either the tagged form {'kind': 'Player', 'ref': ...} or the
    stored form with exactly one of 'player_id' / 'team_id'. An entry with
    kind 'Bye' or is_bye true resolves to BYE.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Match {match_id}: participant must be a mapping, got {type(data).__name__}")

    position = data.get('position')
    kind = data.get('kind')
    if kind == 'Bye' or data.get('is_bye'):
        return BYE

    player_id = data.get('player_id')
    team_id = data.get('team_id')
    if player_id is not None and team_id is not None:
        raise InvalidRecordError(f"Match {match_id}: participant has both player_id and team_id")

    if kind is not None:
        return Participant(kind, data.get('ref'), position)
    if player_id is not None:
        return Participant(PLAYER, player_id, position)
    if team_id is not None:
        return Participant(TEAM, team_id, position)
    raise InvalidRecordError(f"Match {match_id}: participant has no ref and is not a Bye")


def match_from_dict(data):
    """Parse a serialized match record into a Match."""
    if not isinstance(data, dict):
        raise TypeError(f"Match record must be a mapping, got {type(data).__name__}")
    match_id = data.get('id')
    status = data.get('status') or SCHEDULED
    if status not in _STATUS_ALIASES:
        raise InvalidRecordError(f"Match {match_id}: unknown status {status!r}")
    raw_participants = data.get('participants') or []
    if not isinstance(raw_participants, list):
        raise TypeError(f"Match {match_id}: participants must be a list")
    return Match(
        id=match_id,
        round_label=data.get('round_label'),
        display_name=data.get('display_name'),
        participants=[participant_from_dict(p, match_id) for p in raw_participants],
        status=_STATUS_ALIASES[status],
        winner_ref=data.get('winner_ref'),
        scheduled_time=data.get('scheduled_time'),
        completed_time=data.get('completed_time'),
    )


def performance_from_dict(data):
    """Parse a serialized performance record into a Performance."""
    if not isinstance(data, dict):
        raise TypeError(f"Performance record must be a mapping, got {type(data).__name__}")
    return Performance(
        id=data.get('id'),
        round_label=data.get('round_label'),
        performer_ref=data.get('performer_ref'),
        performance_order=data.get('performance_order'),
        scores=data.get('scores') or [],
        final_score=data.get('final_score'),
        place=data.get('place'),
    )


def parse_matches(records):
    if not isinstance(records, list):
        raise TypeError(f"Expected a list of match records, got {type(records).__name__}")
    return [match_from_dict(r) for r in records]


def parse_performances(records):
    if not isinstance(records, list):
        raise TypeError(f"Expected a list of performance records, got {type(records).__name__}")
    return [performance_from_dict(r) for r in records]
