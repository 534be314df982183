"""US Stock Market Calendar.

Defines market holidays, early-close days and trading day validation.
Tables are keyed by year and must be extended explicitly; a year with no
entry has no known holidays or early closes.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import date, timedelta
from types import MappingProxyType
from typing import Iterable, Mapping

import structlog

log = structlog.get_logger(__name__)


class CalendarError(ValueError):
    pass


def _check_month_day(month: int, day: int) -> None:
    if not 1 <= month <= 12:
        raise CalendarError(f"Invalid month: {month}")
    if not 1 <= day <= 31:
        raise CalendarError(f"Invalid day: {day}")


@dataclass(frozen=True)
class Holiday:
    name: str
    month: int
    day: int

    def __post_init__(self) -> None:
        _check_month_day(self.month, self.day)


@dataclass(frozen=True)
class EarlyCloseDay:
    month: int
    day: int
    close_time_label: str | None = None  # None: the session early close

    def __post_init__(self) -> None:
        _check_month_day(self.month, self.day)


def _freeze(table: Mapping[int, Iterable], entry_type: type, kind: str) -> Mapping[int, tuple]:
    frozen: dict[int, tuple] = {}
    for year, entries in table.items():
        entries = tuple(entries)
        seen: set[tuple[int, int]] = set()
        for entry in entries:
            if not isinstance(entry, entry_type):
                raise CalendarError(
                    f"Expected {entry_type.__name__} in {kind} table for {year}, got {type(entry).__name__}"
                )
            key = (entry.month, entry.day)
            if key in seen:
                raise CalendarError(f"Duplicate {kind} {entry.month:02d}-{entry.day:02d} in {year}")
            try:
                date(int(year), entry.month, entry.day)
            except ValueError as exc:
                raise CalendarError(f"Invalid {kind} date {year}-{entry.month:02d}-{entry.day:02d}") from exc
            seen.add(key)
        frozen[int(year)] = entries
    return MappingProxyType(frozen)


@dataclass(frozen=True)
class MarketCalendar:
    """
    Read-only holiday and early-close tables.

    Both mappings go from four-digit year to the entries for that year.
    Construction validates that each (month, day) appears at most once per
    year and per table.
    """

    holidays: Mapping[int, tuple[Holiday, ...]] = field(default_factory=dict)
    early_closes: Mapping[int, tuple[EarlyCloseDay, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "holidays", _freeze(self.holidays, Holiday, "holiday"))
        object.__setattr__(self, "early_closes", _freeze(self.early_closes, EarlyCloseDay, "early close"))

    def holiday_on(self, d: date) -> Holiday | None:
        for holiday in self.holidays.get(d.year, ()):
            if holiday.month == d.month and holiday.day == d.day:
                return holiday
        return None

    def early_close_on(self, d: date) -> EarlyCloseDay | None:
        for closure in self.early_closes.get(d.year, ()):
            if closure.month == d.month and closure.day == d.day:
                return closure
        return None

    def years(self) -> list[int]:
        return sorted(set(self.holidays) | set(self.early_closes))

    def merged_with(self, other: MarketCalendar) -> MarketCalendar:
        """Return a new calendar where ``other``'s years replace ours."""
        return MarketCalendar(
            holidays={**self.holidays, **other.holidays},
            early_closes={**self.early_closes, **other.early_closes},
        )


class CalendarHolder:
    """
    Process-wide reference to the active calendar.

    ``swap`` replaces the whole table in a single assignment, so a reader
    calling ``get`` sees either the old calendar or the new one.
    """

    def __init__(self, calendar: MarketCalendar) -> None:
        self._calendar = calendar
        self._write_lock = threading.Lock()

    def get(self) -> MarketCalendar:
        return self._calendar

    def swap(self, calendar: MarketCalendar) -> MarketCalendar:
        if not isinstance(calendar, MarketCalendar):
            raise TypeError("`calendar` must be a MarketCalendar")
        with self._write_lock:
            previous = self._calendar
            self._calendar = calendar
        log.info("calendar_swapped", years=calendar.years())
        return previous


# US Stock Market Holidays (NYSE/NASDAQ)
# Source: https://www.nyse.com/markets/hours-calendars
US_MARKET_HOLIDAYS: dict[int, tuple[Holiday, ...]] = {
    2024: (
        Holiday("New Year's Day", 1, 1),
        Holiday("Martin Luther King, Jr. Day", 1, 15),
        Holiday("Washington's Birthday", 2, 19),
        Holiday("Good Friday", 3, 29),
        Holiday("Memorial Day", 5, 27),
        Holiday("Juneteenth National Independence Day", 6, 19),
        Holiday("Independence Day", 7, 4),
        Holiday("Labor Day", 9, 2),
        Holiday("Thanksgiving Day", 11, 28),
        Holiday("Christmas Day", 12, 25),
    ),
    2025: (
        Holiday("New Year's Day", 1, 1),
        Holiday("Martin Luther King, Jr. Day", 1, 20),
        Holiday("Washington's Birthday", 2, 17),
        Holiday("Good Friday", 4, 18),
        Holiday("Memorial Day", 5, 26),
        Holiday("Juneteenth National Independence Day", 6, 19),
        Holiday("Independence Day", 7, 4),
        Holiday("Labor Day", 9, 1),
        Holiday("Thanksgiving Day", 11, 27),
        Holiday("Christmas Day", 12, 25),
    ),
    2026: (
        Holiday("New Year's Day", 1, 1),
        Holiday("Martin Luther King, Jr. Day", 1, 19),
        Holiday("Washington's Birthday", 2, 16),
        Holiday("Good Friday", 4, 3),
        Holiday("Memorial Day", 5, 25),
        Holiday("Juneteenth National Independence Day", 6, 19),
        Holiday("Independence Day", 7, 3),  # observed
        Holiday("Labor Day", 9, 7),
        Holiday("Thanksgiving Day", 11, 26),
        Holiday("Christmas Day", 12, 25),
    ),
}

US_EARLY_CLOSES: dict[int, tuple[EarlyCloseDay, ...]] = {
    2024: (
        EarlyCloseDay(7, 3),    # Independence Day eve
        EarlyCloseDay(11, 29),  # Day after Thanksgiving
        EarlyCloseDay(12, 24),  # Christmas Eve
    ),
    2025: (
        EarlyCloseDay(7, 3),
        EarlyCloseDay(11, 28),
        EarlyCloseDay(12, 24),
    ),
    2026: (
        EarlyCloseDay(11, 27),
        EarlyCloseDay(12, 24),
    ),
}

DEFAULT_CALENDAR = MarketCalendar(holidays=US_MARKET_HOLIDAYS, early_closes=US_EARLY_CLOSES)
DEFAULT_CALENDAR_HOLDER = CalendarHolder(DEFAULT_CALENDAR)


def is_market_holiday(d: date, calendar: MarketCalendar | None = None) -> bool:
    """
    Check if a date is a US stock market holiday.

    Args:
        d: The date to check.
        calendar: Calendar to consult. Defaults to the active process calendar.

    Returns:
        True if the market is closed for a holiday, False otherwise.
    """
    calendar = calendar or DEFAULT_CALENDAR_HOLDER.get()
    return calendar.holiday_on(d) is not None


def is_weekend(d: date) -> bool:
    """
    Check if a date is a weekend.

    Args:
        d: The date to check.

    Returns:
        True if Saturday (5) or Sunday (6), False otherwise.
    """
    return d.weekday() >= 5


def is_trading_day(d: date, calendar: MarketCalendar | None = None) -> bool:
    """
    Check if a date is a valid trading day.

    A trading day is a weekday that is not a market holiday. Early-close
    days are trading days.
    """
    return not is_weekend(d) and not is_market_holiday(d, calendar)


def get_trading_days(start: date, end: date, calendar: MarketCalendar | None = None) -> list[date]:
    """
    Get all trading days in a date range.

    Args:
        start: Start date (inclusive).
        end: End date (inclusive).
        calendar: Calendar to consult. Defaults to the active process calendar.

    Returns:
        List of dates where the market is open.
    """
    calendar = calendar or DEFAULT_CALENDAR_HOLDER.get()
    days = []
    current = start
    while current <= end:
        if is_trading_day(current, calendar):
            days.append(current)
        current += timedelta(days=1)
    return days
