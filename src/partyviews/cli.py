"""Command-line interface for partyviews."""

import argparse
import json
import logging

from .core.config import settings
from .core.constants import FileConstants
from .core.compass import project
from .core.merge import merge_snapshot
from .core.models import Snapshot, SurveyAnswer, NoData
from .core.payloads import parse_delta_payload
from .core.baseline import build_baseline
from .core.scoring import build_aggregate, party_summary_prompt
from .services.oracle import OracleServiceFactory
from .services.store import ViewsStore
from .utils.data_prep import prepare_export, export_to_json

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT
    )


def _load_json(filename):
    with open(filename, 'r', encoding='utf-8') as f:
        return json.load(f)


def _emit(result, out):
    payload = prepare_export(result)
    if out:
        export_to_json(payload, out)
        print(f"Results exported to {out}")
    else:
        print(json.dumps(payload["data"], indent=2, ensure_ascii=False))


def cmd_merge(args):
    """Merge a raw delta payload into a snapshot."""
    prior = Snapshot.from_dict(_load_json(args.snapshot)) if args.snapshot else None
    delta = parse_delta_payload(_load_json(args.delta))
    merged = merge_snapshot(prior, delta)
    _emit(merged, args.out)


def cmd_baseline(args):
    """Build a baseline snapshot from survey answers via the oracle."""
    raw_answers = _load_json(args.answers)
    answers = [
        SurveyAnswer(question_id=str(a.get("question_id", "")), choice=str(a.get("choice", "")), text=a.get("text"))
        for a in raw_answers if isinstance(a, dict)
    ]
    oracle = OracleServiceFactory.create()
    snapshot = build_baseline(answers, oracle.analyze_survey(answers))
    _emit(snapshot, args.out)


def cmd_compass(args):
    """Print the compass point of a snapshot."""
    point = project(Snapshot.from_dict(_load_json(args.snapshot)))
    print(json.dumps(point.to_dict()))


def cmd_aggregate(args):
    """Build the party aggregate from a store dump."""
    store = ViewsStore.load_json(args.data)
    result = build_aggregate(store.all_snapshots(), store.activity(), store.active_profiles())

    if isinstance(result, NoData):
        print(f"No data: {result.reason}")
        return

    if not args.no_summary:
        oracle = OracleServiceFactory.create()
        summary = oracle.summarize_party(
            party_summary_prompt(result.member_count, result.pillar_means, result.top_issues)
        )
        if summary:
            result.party_summary = summary

    _emit(result, args.out)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="partyviews - political profile merge and party aggregation")
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Merge command
    merge_parser = subparsers.add_parser('merge', help='Apply a delta to a snapshot')
    merge_parser.add_argument('--snapshot', help='Prior snapshot JSON file (omit for a first merge)')
    merge_parser.add_argument('--delta', required=True, help='Delta or analyzer JSON file')
    merge_parser.add_argument('--out', help='Output JSON file')

    # Baseline command
    baseline_parser = subparsers.add_parser('baseline', help='Build a baseline snapshot from survey answers')
    baseline_parser.add_argument('--answers', required=True, help='Survey answers JSON file')
    baseline_parser.add_argument('--out', help='Output JSON file')

    # Compass command
    compass_parser = subparsers.add_parser('compass', help='Project a snapshot onto the compass')
    compass_parser.add_argument('--snapshot', required=True, help='Snapshot JSON file')

    # Aggregate command
    aggregate_parser = subparsers.add_parser('aggregate', help='Build the party aggregate')
    aggregate_parser.add_argument('--data', required=True, help='Store JSON dump')
    aggregate_parser.add_argument('--out', help='Output JSON file')
    aggregate_parser.add_argument('--no-summary', action='store_true', help='Skip the oracle party summary')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    if args.command == 'merge':
        cmd_merge(args)
    elif args.command == 'baseline':
        cmd_baseline(args)
    elif args.command == 'compass':
        cmd_compass(args)
    elif args.command == 'aggregate':
        cmd_aggregate(args)


if __name__ == "__main__":
    main()
