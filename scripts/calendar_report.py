#!/usr/bin/env python3
"""
Print the trading session schedule for a date range.

Usage:
    python scripts/calendar_report.py --start 2025-06-30 --end 2025-07-08 --config configs/dashboard.yaml

Lists every trading day with its pre-market, regular and post-market
boundaries, marks early-close days, and lists the holidays skipped.
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from tradedash.calendar import DEFAULT_CALENDAR, trading_schedule
from tradedash.config import load_config, load_market_settings
from tradedash.logging_config import setup_logging
from tradedash.timeutils import DEFAULT_SESSION_BOUNDS


def main():
    parser = argparse.ArgumentParser(description="Print the trading session schedule")
    parser.add_argument("--config", default=None, help="Path to config file")
    parser.add_argument("--start", required=True, type=date.fromisoformat, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--end", required=True, type=date.fromisoformat, help="End date (YYYY-MM-DD)")
    args = parser.parse_args()

    setup_logging("INFO")

    if args.config:
        calendar, bounds = load_market_settings(load_config(project_root / args.config))
    else:
        calendar, bounds = DEFAULT_CALENDAR, DEFAULT_SESSION_BOUNDS

    schedule = trading_schedule(args.start, args.end, calendar, bounds)

    print(f"Trading schedule {args.start} to {args.end}")
    print(f"  Trading days: {len(schedule)}")
    print(f"  Early closes: {int(schedule['early_close'].sum()) if len(schedule) else 0}")
    print()

    for d, row in schedule.iterrows():
        flag = "  (early close)" if row["early_close"] else ""
        print(
            f"  {d:%a %Y-%m-%d}  pre {row['pre_market_open']:%H:%M}  open {row['market_open']:%H:%M}"
            f"  close {row['market_close']:%H:%M}  post {row['post_market_close']:%H:%M}{flag}"
        )

    skipped = []
    for year in range(args.start.year, args.end.year + 1):
        for h in calendar.holidays.get(year, ()):
            d = date(year, h.month, h.day)
            if args.start <= d <= args.end:
                skipped.append((d, h.name))
    if skipped:
        print("\nHolidays:")
        for d, name in sorted(skipped):
            print(f"  {d:%a %Y-%m-%d}  {name}")


if __name__ == "__main__":
    main()
