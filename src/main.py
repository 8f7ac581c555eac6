# Command line entry point: build a bracket or leaderboard from a records file

import argparse
import json
import logging
import sys
import yaml
from engine.models import InvalidRecordError, parse_matches, parse_performances
from engine.bracket import build_bracket, get_final_standings
from engine.ranking import get_ranking_table
from engine.config import load_settings


def load_records(file_path, key):
    """Read a YAML/JSON file holding a list, or a mapping with the list under `key`."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if data is None:
        return []
    if isinstance(data, dict):
        return data.get(key, [])
    return data


def format_bracket(bracket, standings):
    lines = []
    for group in bracket['rounds']:
        lines.append(f"\n{group['round']}")
        for match in group['matches']:
            names = []
            for slot in match['slots']:
                if slot['is_bye']:
                    names.append('BYE')
                else:
                    names.append(f"{slot['ref']}*" if slot['is_winner'] else str(slot['ref']))
            label = match['display_name'] or match['id']
            lines.append(f"  {label}: {names[0]} vs {names[1]} [{match['status']}]")
    lines.append(f"\nParticipants: {bracket['participant_count']}")
    if bracket['dropped_matches']:
        lines.append(f"Dropped (unknown round): {', '.join(str(i) for i in bracket['dropped_matches'])}")
    for entry in standings:
        lines.append(f"{entry['medal']}: {entry['ref']}")
    return '\n'.join(lines)


def format_rankings(table):
    lines = []
    for round_label, rows in table.items():
        lines.append(f"\n{round_label}")
        for row in rows:
            score = '-' if row['final_score'] is None else row['final_score']
            lines.append(f"  {row['rank']}. {row['performer_ref']} ({score})")
    return '\n'.join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Build tournament brackets and leaderboards from record files')
    parser.add_argument('command', choices=['bracket', 'rankings'])
    parser.add_argument('file', help='YAML or JSON file with match or performance records')
    parser.add_argument('--placement-round', help='Round label whose explicit places override scores')
    parser.add_argument('--format', choices=['text', 'json'], default='text')
    parser.add_argument('--settings', help='Settings YAML file')
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: Cannot load settings: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(level=getattr(logging, str(settings['log_level']).upper(), logging.INFO),
                        format='%(levelname)s %(name)s: %(message)s')

    key = 'matches' if args.command == 'bracket' else 'performances'
    try:
        records = load_records(args.file, key)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error: Cannot read {args.file}: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == 'bracket':
            bracket = build_bracket(parse_matches(records), warn_unknown_rounds=settings['warn_unknown_rounds'])
            standings = get_final_standings(bracket)
            output = {'bracket': bracket, 'standings': standings}
            text = format_bracket(bracket, standings)
        else:
            placement_round = args.placement_round or settings['placement_round']
            table = get_ranking_table(parse_performances(records), placement_round)
            output = {'placement_round': placement_round, 'rankings': table}
            text = format_rankings(table)
    except (InvalidRecordError, TypeError) as e:
        print(f"Error: Invalid records in {args.file}: {e}", file=sys.stderr)
        return 2

    if args.format == 'json':
        print(json.dumps(output, indent=2, default=str))
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
