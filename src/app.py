"""
Flask JSON wrapper around the bracket and ranking engine.
"""
import logging
from flask import Flask, request, jsonify
from engine.models import InvalidRecordError, parse_matches, parse_performances
from engine.bracket import build_bracket, get_final_standings
from engine.ranking import get_ranking_table, suggest_places
from engine.rounds import canonical_order
from engine.config import load_settings

app = Flask(__name__)
# Round groups are returned in input order
app.json.sort_keys = False

SETTINGS = load_settings()
_log_level = getattr(logging, str(SETTINGS.get('log_level', 'INFO')).upper(), logging.INFO)
app.logger.setLevel(_log_level)
logging.getLogger('engine').setLevel(_log_level)


def _records(key):
    """Pull the list under `key` from the JSON body."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRecordError('Request body must be a JSON object.')
    return data, data.get(key, [])


def _parse(parser, records):
    """Run a record parser, reporting wrong shapes as invalid records."""
    try:
        return parser(records)
    except TypeError as e:
        raise InvalidRecordError(str(e)) from e


@app.errorhandler(InvalidRecordError)
def handle_invalid_records(e):
    app.logger.warning(f'Rejected request to {request.path}: {e}')
    return jsonify({'success': False, 'error': str(e)}), 400


@app.route('/api/rounds', methods=['GET'])
def api_rounds():
    """Canonical round order."""
    return jsonify({'success': True, 'rounds': canonical_order()})


@app.route('/api/bracket', methods=['POST'])
def api_bracket():
    """Build the bracket and podium for the posted matches."""
    _, records = _records('matches')
    matches = _parse(parse_matches, records)
    bracket = build_bracket(matches, warn_unknown_rounds=SETTINGS.get('warn_unknown_rounds', True))
    if bracket['dropped_matches']:
        app.logger.info(f"Bracket request dropped {len(bracket['dropped_matches'])} matches with unknown rounds")
    return jsonify({
        'success': True,
        'bracket': bracket,
        'standings': get_final_standings(bracket),
    })


@app.route('/api/rankings', methods=['POST'])
def api_rankings():
    """Leaderboard per round for the posted performances."""
    data, records = _records('performances')
    performances = _parse(parse_performances, records)
    placement_round = data.get('placement_round', SETTINGS.get('placement_round'))
    return jsonify({
        'success': True,
        'placement_round': placement_round,
        'rankings': get_ranking_table(performances, placement_round),
    })


@app.route('/api/rankings/suggest-places', methods=['POST'])
def api_suggest_places():
    """Suggested podium places for one final round."""
    _, records = _records('performances')
    performances = _parse(parse_performances, records)
    places = [{'id': perf_id, 'place': place} for perf_id, place in suggest_places(performances)]
    return jsonify({'success': True, 'places': places})


if __name__ == '__main__':
    app.run(debug=True, port=5000)
