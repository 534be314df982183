from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

EASTERN = ZoneInfo("America/New_York")


@dataclass(frozen=True)
class SessionBounds:
    """Boundary times of the US equities trading day, Eastern wall-clock."""

    pre_market_open: time = time(4, 0)
    market_open: time = time(9, 30)
    market_close: time = time(16, 0)
    post_market_close: time = time(20, 0)
    early_close: time = time(13, 0)
    tz: ZoneInfo = EASTERN

    def __post_init__(self) -> None:
        ordered = (self.pre_market_open, self.market_open, self.market_close, self.post_market_close)
        if list(ordered) != sorted(ordered) or len(set(ordered)) != len(ordered):
            raise ValueError(f"Session bounds out of order: {[t.strftime('%H:%M') for t in ordered]}")
        if not self.market_open < self.early_close < self.market_close:
            raise ValueError(f"Early close {self.early_close} must fall inside the regular session")

    def dt(self, d: date, t: time) -> datetime:
        return datetime(d.year, d.month, d.day, t.hour, t.minute, t.second, tzinfo=self.tz)

    @staticmethod
    def minute_of_day(t: time | datetime) -> int:
        return t.hour * 60 + t.minute


DEFAULT_SESSION_BOUNDS = SessionBounds()


def parse_hhmm(value: str) -> time:
    parts = value.split(":")
    if len(parts) != 2:
        raise ValueError(f"Invalid time: {value}")
    return time(int(parts[0]), int(parts[1]))


def format_clock(t: time) -> str:
    """12-hour clock label, e.g. '9:30 AM', '1:00 PM'."""
    return f"{t.hour % 12 or 12}:{t.minute:02d} {'AM' if t.hour < 12 else 'PM'}"


def eastern_now(tz: ZoneInfo = EASTERN) -> datetime:
    return datetime.now(tz)


def to_eastern(value: datetime, tz: ZoneInfo = EASTERN) -> datetime:
    """
    Normalize a datetime to Eastern wall-clock time.

    Aware datetimes are converted to ``tz`` (America/New_York by default).
    Naive datetimes are taken to already be Eastern wall-clock and are
    returned unchanged.
    """
    if not isinstance(value, datetime):
        raise TypeError(f"Expected datetime, got {type(value).__name__}")
    if value.tzinfo is None or value.utcoffset() is None:
        return value
    return value.astimezone(tz)


def format_market_time(value: datetime) -> str:
    """Format as e.g. 'Wednesday, Jan 15, 2025, at 10:00:00'."""
    return f"{value:%A}, {value:%b} {value.day}, {value.year}, at {value:%H:%M:%S}"


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}{'' if n == 1 else 's'} ago"


def time_ago(last_updated: datetime, now: datetime | None = None) -> str:
    """Human-readable elapsed time since ``last_updated`` ('5 minutes ago')."""
    if now is None:
        now = eastern_now() if last_updated.tzinfo is not None else eastern_now().replace(tzinfo=None)
    seconds = int((now - last_updated).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return _plural(seconds, "second")
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    return _plural(days, "day")
