"""
Market session status for US equities.

Classifies an Eastern wall-clock time as OPEN, EXTENDED_HOURS or CLOSED and
describes the next transition. Decision order (first match wins), shown
with the default session bounds; messages name the configured times:

1. Saturday or Sunday                          -> CLOSED
2. Listed holiday                              -> CLOSED
3. Early-close day at or after the early close -> CLOSED
4. Regular session [09:30, 16:00)              -> OPEN
5. Pre-market [04:00, 09:30) or post-market [16:00, 20:00) -> EXTENDED_HOURS
6. Anything else                               -> CLOSED

Minutes 09:30-12:59 on an early-close day read OPEN; there is no separate
"closing early" state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from tradedash.calendar.market_calendar import DEFAULT_CALENDAR_HOLDER, CalendarHolder, MarketCalendar
from tradedash.timeutils import DEFAULT_SESSION_BOUNDS, SessionBounds, eastern_now, format_clock, to_eastern


class SessionState(Enum):
    OPEN = "OPEN"
    EXTENDED_HOURS = "EXTENDED_HOURS"
    CLOSED = "CLOSED"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


@dataclass(frozen=True)
class MarketStatus:
    status: SessionState
    next_status_description: str

    @property
    def headline(self) -> str:
        return f"The market is: {self.status.label}"

    @property
    def is_open(self) -> bool:
        return self.status is SessionState.OPEN

    def to_dict(self) -> dict[str, str]:
        return {"status": self.status.value, "next_status": self.next_status_description}


@dataclass(frozen=True)
class EarlyCloseCheck:
    is_early_close: bool
    close_time_label: str | None = None


NEXT_OPEN_MONDAY = "Next open on Monday at {open} ET"
CLOSED_FOR_HOLIDAY = "Market closed for holiday"
CLOSED_EARLY = "Market closed early at {label}"
EXTENDED_HOURS_BEGIN = "Extended hours begin at {close} ET"
MARKET_OPENS = "Market opens at {open} ET"
MARKET_CLOSES = "Market closes at {post_close} ET"
NEXT_OPEN_TOMORROW = "Next open at {open} ET tomorrow"


class MarketStatusCalculator:
    """
    Stateless market-status classifier over an injected calendar.

    ``calendar`` may be a fixed MarketCalendar or a CalendarHolder whose
    table can be swapped at runtime; each call reads one snapshot.
    """

    def __init__(
        self,
        calendar: MarketCalendar | CalendarHolder | None = None,
        bounds: SessionBounds = DEFAULT_SESSION_BOUNDS,
    ) -> None:
        if calendar is None:
            calendar = DEFAULT_CALENDAR_HOLDER
        elif isinstance(calendar, MarketCalendar):
            calendar = CalendarHolder(calendar)
        elif not isinstance(calendar, CalendarHolder):
            raise TypeError("`calendar` must be a MarketCalendar or CalendarHolder")
        self._holder = calendar
        self.bounds = bounds

    @property
    def calendar(self) -> MarketCalendar:
        return self._holder.get()

    def is_market_holiday(self, d: date) -> bool:
        return self.calendar.holiday_on(d) is not None

    def is_early_close_day(self, d: date) -> EarlyCloseCheck:
        closure = self.calendar.early_close_on(d)
        if closure is None:
            return EarlyCloseCheck(is_early_close=False)
        label = closure.close_time_label or format_clock(self.bounds.early_close)
        return EarlyCloseCheck(is_early_close=True, close_time_label=label)

    def determine_market_status(self, time: datetime | None = None) -> MarketStatus:
        b = self.bounds
        now = eastern_now(b.tz) if time is None else to_eastern(time, b.tz)
        calendar = self.calendar
        opens_at = format_clock(b.market_open)

        if now.weekday() >= 5:
            return MarketStatus(SessionState.CLOSED, NEXT_OPEN_MONDAY.format(open=opens_at))

        if calendar.holiday_on(now) is not None:
            return MarketStatus(SessionState.CLOSED, CLOSED_FOR_HOLIDAY)

        minute = b.minute_of_day(now)
        pre_open = b.minute_of_day(b.pre_market_open)
        market_open = b.minute_of_day(b.market_open)
        market_close = b.minute_of_day(b.market_close)
        post_close = b.minute_of_day(b.post_market_close)

        closure = calendar.early_close_on(now)
        if closure is not None and minute >= b.minute_of_day(b.early_close):
            label = closure.close_time_label or format_clock(b.early_close)
            return MarketStatus(SessionState.CLOSED, CLOSED_EARLY.format(label=label))

        if market_open <= minute < market_close:
            return MarketStatus(SessionState.OPEN, EXTENDED_HOURS_BEGIN.format(close=format_clock(b.market_close)))

        if pre_open <= minute < market_open:
            return MarketStatus(SessionState.EXTENDED_HOURS, MARKET_OPENS.format(open=opens_at))
        if market_close <= minute < post_close:
            return MarketStatus(
                SessionState.EXTENDED_HOURS, MARKET_CLOSES.format(post_close=format_clock(b.post_market_close))
            )

        return MarketStatus(SessionState.CLOSED, NEXT_OPEN_TOMORROW.format(open=opens_at))


_default_calculator = MarketStatusCalculator()


def determine_market_status(time: datetime | None = None) -> MarketStatus:
    return _default_calculator.determine_market_status(time)


def is_market_holiday(d: date) -> bool:
    return _default_calculator.is_market_holiday(d)


def is_early_close_day(d: date) -> EarlyCloseCheck:
    return _default_calculator.is_early_close_day(d)
