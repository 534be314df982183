from __future__ import annotations

from datetime import date, datetime, timedelta

import pandas as pd

from tradedash.calendar.market_calendar import (
    DEFAULT_CALENDAR_HOLDER,
    CalendarError,
    MarketCalendar,
    get_trading_days,
    is_trading_day,
)
from tradedash.timeutils import DEFAULT_SESSION_BOUNDS, SessionBounds, to_eastern

# A year of calendar days always holds a trading day unless the tables are broken.
_MAX_SEARCH_DAYS = 366

SCHEDULE_COLUMNS = ["pre_market_open", "market_open", "market_close", "post_market_close", "early_close"]


def next_market_open(
    from_time: datetime,
    calendar: MarketCalendar | None = None,
    bounds: SessionBounds = DEFAULT_SESSION_BOUNDS,
) -> datetime:
    """
    Find the next regular-session open strictly after ``from_time``.

    Naive input is read as Eastern wall-clock. The result is tz-aware in the
    session timezone.
    """
    calendar = calendar or DEFAULT_CALENDAR_HOLDER.get()
    local = to_eastern(from_time, bounds.tz)
    if local.tzinfo is None:
        local = local.replace(tzinfo=bounds.tz)

    d = local.date()
    for _ in range(_MAX_SEARCH_DAYS):
        if is_trading_day(d, calendar):
            candidate = bounds.dt(d, bounds.market_open)
            if candidate > local:
                return candidate
        d += timedelta(days=1)
    raise CalendarError(f"No trading day found within {_MAX_SEARCH_DAYS} days of {from_time.isoformat()}")


def trading_schedule(
    start: date,
    end: date,
    calendar: MarketCalendar | None = None,
    bounds: SessionBounds = DEFAULT_SESSION_BOUNDS,
) -> pd.DataFrame:
    """
    Build a per-day session schedule for all trading days in [start, end].

    Returns a DataFrame indexed by date with tz-aware session boundaries.
    ``market_close`` is the early close on early-close days.
    """
    calendar = calendar or DEFAULT_CALENDAR_HOLDER.get()
    rows = []
    for d in get_trading_days(start, end, calendar):
        early = calendar.early_close_on(d) is not None
        rows.append(
            {
                "date": d,
                "pre_market_open": pd.Timestamp(bounds.dt(d, bounds.pre_market_open)),
                "market_open": pd.Timestamp(bounds.dt(d, bounds.market_open)),
                "market_close": pd.Timestamp(bounds.dt(d, bounds.early_close if early else bounds.market_close)),
                "post_market_close": pd.Timestamp(bounds.dt(d, bounds.post_market_close)),
                "early_close": early,
            }
        )
    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS, index=pd.Index([], name="date"))
    return pd.DataFrame(rows).set_index("date")
