#!/usr/bin/env python3
"""Weekly tee sheet builder.

    teesheet [config.yaml] --week N [--history FILE] [-o DIR] [--no-record]

Generates one week's foursomes from the YAML config and writes:
  {DIR}/schedule.txt   - Human-readable tee sheet
  {DIR}/schedule.csv   - One row per scheduled player
  {DIR}/stats.txt      - Validation report + pairing statistics

Pairing history is read from and written back to the history file, so run
each week once. Use --no-record to preview a week without counting it.

Examples:
    teesheet --week 1                         # default config.yaml
    teesheet league.yaml --week 3 -o week3    # custom config and output dir
    teesheet --week 3 --no-record             # preview only
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from teesheet.config import load_config
from teesheet.constraints import format_validation_report, validate_schedule
from teesheet.exceptions import TeesheetError
from teesheet.history import YamlPairingHistoryStore
from teesheet.output import write_schedule
from teesheet.scheduler import ScheduleGenerator
from teesheet.stats import compute_stats, format_stats_report
from teesheet.tracker import PairingHistoryTracker


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(
        description="Weekly tee sheet builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Exit codes:
  0  Schedule generated and valid
  1  Config error, unknown week, or constraint violations
""",
    )
    parser.add_argument(
        "config", nargs="?", default="config.yaml",
        help="Path to config YAML file (default: config.yaml)"
    )
    parser.add_argument(
        "--week", "-w", type=int, required=True,
        help="Week number to schedule"
    )
    parser.add_argument(
        "--history", default="pairing_history.yaml",
        help="Pairing history YAML file (default: pairing_history.yaml)"
    )
    parser.add_argument(
        "--output-prefix", "-o", default="output",
        help="Output directory for generated files (default: output/)"
    )
    parser.add_argument(
        "--no-record", action="store_true",
        help="Do not add this week's pairings to the history file"
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Log every generation step"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config_path = args.config
    if not Path(config_path).exists():
        print(f"Error: config file {config_path} not found")
        sys.exit(1)

    try:
        print(f"Loading config from {config_path}...")
        config = load_config(config_path)

        week = config["weeks"].get(args.week)
        if week is None:
            print(f"Error: week {args.week} not in config "
                  f"(have {sorted(config['weeks'])})")
            sys.exit(1)

        season_id = config["season"]["id"]
        players = list(config["players"].values())
        options = config["options"]
        if args.no_record:
            options = replace(options, record_pairings=False)

        tracker = PairingHistoryTracker(YamlPairingHistoryStore(args.history))
        generator = ScheduleGenerator(
            options=replace(options, record_pairings=False),
            tracker=tracker,
        )

        print(f"Generating week {week.week_number} ({week.date})...")
        schedule = generator.generate_schedule_for_week(week, players)
        info = generator.last_debug_info
        print(f"  {len(info.available_players)} of {info.total_players} players available")
        for w in info.warnings:
            print(f"  Warning: {w}")

        print("\nValidating...")
        result = validate_schedule(schedule, week, players)
        report = format_validation_report(result)
        print(report)

        # Stats before recording, so repeats reflect prior weeks only
        stats = compute_stats(schedule, tracker, season_id)
        stats_text = format_stats_report(stats)
        print("\n" + stats_text)

        print("\nWriting output files...")
        write_schedule(schedule, week, output_prefix=args.output_prefix,
                       season_name=config["season"]["name"])
        stats_path = Path(args.output_prefix) / "stats.txt"
        stats_path.write_text(report + "\n\n" + stats_text + "\n")
        print(f"Written: {stats_path}")

        if not result["valid"]:
            print(f"\nSchedule has {len(result['errors'])} constraint violations.")
            sys.exit(1)

        if options.record_pairings and options.optimize_pairings:
            recorded = generator.finalize_schedule(schedule, season_id)
            print(f"Recorded {recorded} pairings in {args.history}")
    except TeesheetError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print("\nSchedule generated successfully!")


if __name__ == "__main__":
    main()
