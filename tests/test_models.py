"""
Unit tests for the record models and parsing (Participant, Match, Performance).
"""
import json
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.models import (
    BYE, PLAYER, TEAM, IN_PROGRESS, COMPLETED,
    InvalidRecordError, Participant, Match, Performance,
    participant_from_dict, match_from_dict, performance_from_dict,
    parse_matches, parse_performances,
)


class TestParticipant:
    """Tests for participant parsing."""

    def test_tagged_form(self):
        """Test the kind/ref form."""
        p = participant_from_dict({'kind': 'Team', 'ref': 't1', 'position': 'Player 1'})
        assert p.kind == TEAM
        assert p.ref == 't1'
        assert p.position == 'Player 1'

    def test_player_id_form(self):
        """Test the stored player_id form."""
        p = participant_from_dict({'player_id': 'p9'})
        assert p.kind == PLAYER
        assert p.ref == 'p9'

    def test_team_id_form(self):
        """Test the stored team_id form."""
        p = participant_from_dict({'team_id': 't2'})
        assert p.kind == TEAM

    def test_both_refs_rejected(self):
        """Test that player_id and team_id together are a contract violation."""
        with pytest.raises(InvalidRecordError):
            participant_from_dict({'player_id': 'p1', 'team_id': 't1'})

    def test_no_ref_rejected(self):
        """Test that an entry with no ref and no bye flag is rejected."""
        with pytest.raises(InvalidRecordError):
            participant_from_dict({'position': 'Player 1'})

    def test_explicit_bye(self):
        """Test that explicit bye entries resolve to BYE."""
        assert participant_from_dict({'kind': 'Bye'}) is BYE
        assert participant_from_dict({'is_bye': True}) is BYE

    def test_unknown_kind_rejected(self):
        with pytest.raises(InvalidRecordError):
            Participant('Coach', 'c1')

    def test_blank_ref_rejected(self):
        with pytest.raises(InvalidRecordError):
            Participant(PLAYER, '   ')

    def test_non_mapping_rejected(self):
        with pytest.raises(TypeError):
            participant_from_dict('p1')

    def test_repr(self):
        """Test participant string representation."""
        assert 'p1' in repr(Participant(PLAYER, 'p1'))


class TestMatch:
    """Tests for match parsing."""

    def test_match_from_dict(self):
        """Test a full match record."""
        match = match_from_dict({
            'id': 'm1',
            'round_label': 'Final',
            'display_name': 'F1',
            'participants': [{'player_id': 'a'}, {'player_id': 'b'}],
            'status': 'Completed',
            'winner_ref': 'a',
            'scheduled_time': '2026-07-01T10:00:00',
        })
        assert match.id == 'm1'
        assert match.status == COMPLETED
        assert [p.ref for p in match.participants] == ['a', 'b']
        assert match.scheduled_time == '2026-07-01T10:00:00'
        assert match.completed_time is None

    def test_status_alias(self):
        """Test that the InProgress spelling is accepted."""
        match = match_from_dict({'id': 'm1', 'round_label': 'Final', 'status': 'InProgress'})
        assert match.status == IN_PROGRESS

    def test_defaults(self):
        """Test defaults for optional fields."""
        match = match_from_dict({'id': 'm1', 'round_label': 'Final'})
        assert match.display_name == ''
        assert match.participants == ()
        assert match.winner_ref is None

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidRecordError):
            match_from_dict({'id': 'm1', 'round_label': 'Final', 'status': 'Cancelled'})

    def test_missing_id_rejected(self):
        with pytest.raises(InvalidRecordError):
            match_from_dict({'round_label': 'Final'})

    def test_too_many_participants_rejected(self):
        with pytest.raises(InvalidRecordError):
            match_from_dict({
                'id': 'm1', 'round_label': 'Final',
                'participants': [{'player_id': 'a'}, {'player_id': 'b'}, {'player_id': 'c'}],
            })

    def test_participants_must_be_list(self):
        with pytest.raises(TypeError):
            match_from_dict({'id': 'm1', 'round_label': 'Final', 'participants': 'a,b'})

    def test_parse_matches_requires_list(self):
        """Test that a non-list input fails fast."""
        with pytest.raises(TypeError):
            parse_matches({'id': 'm1'})

    def test_parse_matches(self):
        matches = parse_matches([{'id': 'm1', 'round_label': 'Final'}, {'id': 'm2', 'round_label': 'Bronze'}])
        assert [m.id for m in matches] == ['m1', 'm2']
        assert all(isinstance(m, Match) for m in matches)


class TestPerformance:
    """Tests for performance parsing."""

    def test_performance_from_dict(self):
        perf = performance_from_dict({
            'id': 'k1', 'round_label': 'First Round', 'performer_ref': 'A',
            'performance_order': 3, 'scores': [7.0, 7.5, 8.0], 'final_score': 22.5,
        })
        assert perf.performance_order == 3
        assert perf.scores == (7.0, 7.5, 8.0)
        assert perf.final_score == 22.5
        assert perf.place is None

    def test_to_dict(self):
        perf = Performance('k1', 'First Round', 'A', 1, final_score=7, place=2)
        data = perf.to_dict()
        assert data['place'] == 2
        assert data['scores'] == []

    def test_order_must_be_integer(self):
        with pytest.raises(InvalidRecordError):
            Performance('k1', 'First Round', 'A', '1')

    def test_score_must_be_numeric(self):
        with pytest.raises(InvalidRecordError):
            Performance('k1', 'First Round', 'A', 1, final_score='7.5')

    @pytest.mark.parametrize('score', [float('nan'), float('inf'), float('-inf')])
    def test_score_must_be_finite(self, score):
        """Test that non-finite scores are rejected so ranking keeps a total order."""
        with pytest.raises(InvalidRecordError):
            Performance('k1', 'First Round', 'A', 1, final_score=score)

    def test_nan_from_json_rejected(self):
        """Test that a NaN decoded from JSON fails parsing instead of reaching the ranking."""
        records = json.loads(
            '[{"id": "a", "round_label": "R", "performer_ref": "A", "performance_order": 1, "final_score": 7.5},'
            ' {"id": "n", "round_label": "R", "performer_ref": "N", "performance_order": 2, "final_score": NaN},'
            ' {"id": "b", "round_label": "R", "performer_ref": "B", "performance_order": 3, "final_score": 9.0}]'
        )
        with pytest.raises(InvalidRecordError):
            parse_performances(records)

    def test_round_label_must_be_string(self):
        with pytest.raises(InvalidRecordError):
            Performance('k1', ['First Round'], 'A', 1)

    def test_place_must_be_positive(self):
        with pytest.raises(InvalidRecordError):
            Performance('k1', 'First Round', 'A', 1, place=0)

    def test_missing_performer_rejected(self):
        with pytest.raises(InvalidRecordError):
            performance_from_dict({'id': 'k1', 'round_label': 'First Round', 'performance_order': 1})

    def test_parse_performances_requires_list(self):
        with pytest.raises(TypeError):
            parse_performances(None)
