from __future__ import annotations

import argparse
import json
import logging
import re
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from worklog.config import settings
from worklog.logging_utils import setup_logging
from worklog.report import build_report

logger = logging.getLogger("worklog.scripts.balance_report")

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def parse_month(value: str) -> tuple[int, int]:
    match = MONTH_PATTERN.match(value)
    if not match or not 1 <= int(match.group(2)) <= 12:
        raise argparse.ArgumentTypeError(f"Invalid month '{value}', expected YYYY-MM")
    return int(match.group(1)), int(match.group(2))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print overtime, vacation and month balances from a work log export."
    )
    parser.add_argument(
        "--input",
        type=Path,
        required=True,
        help='JSON file with {"contract": {...}, "entries": [...]}.',
    )
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Balance date YYYY-MM-DD (default: today).",
    )
    parser.add_argument(
        "--month",
        type=parse_month,
        default=None,
        help="Month YYYY-MM for the month report (default: month of --as-of).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log intermediate figures.")
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()

    level = "DEBUG" if args.verbose or settings.debug else settings.log_level
    setup_logging(level, json_output=settings.log_json)

    input_path: Path = args.input
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")

    as_of = args.as_of or date.today()
    year, month = args.month or (as_of.year, as_of.month)

    try:
        report = build_report(load_json(input_path), as_of=as_of, year=year, month=month)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise SystemExit(f"Invalid input in {input_path}:\n{exc}") from exc

    logger.info(
        "Report built for %s as of %s",
        input_path,
        as_of,
        extra={"input_path": str(input_path), "as_of": as_of, "month": f"{year:04d}-{month:02d}"},
    )
    print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
