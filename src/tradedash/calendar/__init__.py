"""Market calendar utilities."""

from tradedash.calendar.market_calendar import (
    CalendarError,
    CalendarHolder,
    EarlyCloseDay,
    Holiday,
    MarketCalendar,
    is_market_holiday,
    is_weekend,
    is_trading_day,
    get_trading_days,
    DEFAULT_CALENDAR,
    DEFAULT_CALENDAR_HOLDER,
    US_EARLY_CLOSES,
    US_MARKET_HOLIDAYS,
)
from tradedash.calendar.schedule import next_market_open, trading_schedule

__all__ = [
    "CalendarError",
    "CalendarHolder",
    "EarlyCloseDay",
    "Holiday",
    "MarketCalendar",
    "is_market_holiday",
    "is_weekend",
    "is_trading_day",
    "get_trading_days",
    "next_market_open",
    "trading_schedule",
    "DEFAULT_CALENDAR",
    "DEFAULT_CALENDAR_HOLDER",
    "US_EARLY_CLOSES",
    "US_MARKET_HOLIDAYS",
]
