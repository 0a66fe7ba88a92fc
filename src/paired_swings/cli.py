"""CLI entrypoint: squared-up trend and cohort projections from CSV exports."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from datetime import date
import json

from .aggregation import TimeWindow, window_start
from .config import default_engine_config
from .logging_utils import setup_logging
from .matching import MATCH_STRATEGIES
from .pipeline import run_paired_analysis
from .records import read_records_csv


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Pair bat-motion and ball-contact swings and project carry distance."
    )
    parser.add_argument("--motion", required=True, help="CSV of bat-motion sensor swings.")
    parser.add_argument("--contact", required=True, help="CSV of ball-contact sensor swings.")
    parser.add_argument("--sessions", required=True, help="CSV of contact sessions (id, session_date).")
    parser.add_argument("--level", default=None, help="Free-text play level, e.g. 'High School'.")
    parser.add_argument(
        "--window",
        default=TimeWindow.ALL.value,
        choices=[window.value for window in TimeWindow],
        help="Look-back window ending today (ignored when --since is given).",
    )
    parser.add_argument("--since", type=date.fromisoformat, default=None, help="First day, YYYY-MM-DD.")
    parser.add_argument("--until", type=date.fromisoformat, default=None, help="Last day, YYYY-MM-DD.")
    parser.add_argument("--strategy", default="greedy", choices=MATCH_STRATEGIES)
    parser.add_argument(
        "--no-points",
        action="store_true",
        help="Omit trajectory sample points from the output.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = default_engine_config()
    setup_logging(config.logging.level)

    since = args.since if args.since is not None else window_start(args.window, date.today())
    results = run_paired_analysis(
        read_records_csv(args.motion),
        read_records_csv(args.contact),
        read_records_csv(args.sessions),
        level_text=args.level,
        since=since,
        until=args.until,
        strategy=args.strategy,
        config=config,
    )

    cohorts = []
    for cohort in results.cohorts:
        payload = asdict(cohort)
        if args.no_points:
            payload.pop("sample_points")
        else:
            payload["sample_points"] = [list(point) for point in cohort.sample_points]
        cohorts.append(payload)

    output = {
        "since": since.isoformat() if since else None,
        "until": args.until.isoformat() if args.until else None,
        "pairs": len(results.pairs),
        "summary": results.rate_summary,
        "daily_rates": [
            {**asdict(rate), "day_key": rate.day_key.isoformat()} for rate in results.daily_rates
        ],
        "athlete": asdict(results.athlete),
        "level": results.level.value if results.level else None,
        "cohorts": cohorts,
    }
    print(json.dumps(output, indent=2))


if __name__ == "__main__":
    main()
