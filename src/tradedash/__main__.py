from __future__ import annotations

import argparse
from datetime import datetime
from pathlib import Path

from tradedash.calendar.market_calendar import DEFAULT_CALENDAR_HOLDER
from tradedash.calendar.schedule import next_market_open
from tradedash.config import load_config, load_market_settings
from tradedash.logging_config import setup_logging
from tradedash.market.status import MarketStatusCalculator
from tradedash.timeutils import eastern_now, format_market_time, to_eastern


def _iso_datetime(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Invalid ISO datetime: {value}") from exc


def main() -> int:
    parser = argparse.ArgumentParser(prog="tradedash", description="US equities market status.")
    parser.add_argument("--config", default=None, help="YAML config with session bounds and calendar overrides")
    parser.add_argument("--at", type=_iso_datetime, default=None, help="ISO datetime; naive values are Eastern")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default="WARNING",
    )
    args = parser.parse_args()

    setup_logging(args.log_level)

    if args.config:
        calendar, bounds = load_market_settings(load_config(Path(args.config)))
        DEFAULT_CALENDAR_HOLDER.swap(calendar)
        calculator = MarketStatusCalculator(DEFAULT_CALENDAR_HOLDER, bounds)
    else:
        calculator = MarketStatusCalculator()

    now = eastern_now(calculator.bounds.tz) if args.at is None else to_eastern(args.at, calculator.bounds.tz)
    status = calculator.determine_market_status(now)

    print(f"Market Time: {format_market_time(now)}")
    print(status.headline)
    print(status.next_status_description)
    print(f"Next regular open: {next_market_open(now, calculator.calendar, calculator.bounds):%Y-%m-%d %H:%M %Z}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
