#!/usr/bin/env python3
"""Analyze a Pokemon Showdown battle log.

Prints the battle summary as JSON on stdout. Logs go to stderr.

Usage:
    python scripts/analyze_replay.py battle.log
    python scripts/analyze_replay.py battle.log --basic
    python scripts/analyze_replay.py battle.log --config config/default.yaml
    python scripts/analyze_replay.py battle.log --set scoring.turning_point_threshold=20
    python scripts/analyze_replay.py battle.log --timeline-csv timeline.csv
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loguru import logger

from vgccorner.analysis.timeline import timeline_frame
from vgccorner.config import LoggingConfig, load_config
from vgccorner.data.parsers import ReplayParseError, ReplayParser


def configure_logging(cfg: LoggingConfig):
    """Send logs to stderr so stdout stays valid JSON."""
    logger.remove()
    logger.add(sys.stderr, level=cfg.level, format=cfg.format)


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Analyze a Pokemon Showdown battle log",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "log_file",
        type=Path,
        help="Battle log to analyze"
    )
    parser.add_argument(
        "--basic",
        action="store_true",
        help="Coarse actions only (no order, impact or details)"
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config to merge over the defaults"
    )
    parser.add_argument(
        "--set",
        dest="overrides",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Config override, e.g. scoring.momentum_margin=10 (repeatable)"
    )
    parser.add_argument(
        "--timeline-csv",
        type=Path,
        default=None,
        help="Also write the per-turn timeline as CSV"
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation"
    )

    args = parser.parse_args(argv)

    config = load_config(args.config, args.overrides)
    configure_logging(config.logging)

    if not args.log_file.exists():
        logger.error(f"Battle log not found: {args.log_file}")
        return 1

    log = args.log_file.read_text(encoding="utf-8", errors="replace")

    try:
        summary = ReplayParser(config).parse(log, detailed=not args.basic)
    except ReplayParseError as e:
        logger.error(f"Could not analyze {args.log_file}: {e}")
        return 1

    if args.timeline_csv is not None:
        args.timeline_csv.parent.mkdir(parents=True, exist_ok=True)
        timeline_frame(summary).to_csv(args.timeline_csv, index=False)
        logger.info(f"Wrote timeline to {args.timeline_csv}")

    print(summary.model_dump_json(indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
