from __future__ import annotations

from dataclasses import dataclass
from datetime import time
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog
import yaml

from tradedash.calendar.market_calendar import (
    DEFAULT_CALENDAR,
    CalendarError,
    EarlyCloseDay,
    Holiday,
    MarketCalendar,
)
from tradedash.timeutils import DEFAULT_SESSION_BOUNDS, SessionBounds, parse_hhmm

log = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Config:
    raw: dict[str, Any]

    def get(self, *path: str, default: Any | None = None) -> Any:
        node: Any = self.raw
        for key in path:
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node


def load_config(path: Path) -> Config:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Invalid config root in {path}")
    return Config(raw=data)


def _year_table(section: Any, kind: str) -> dict[int, list[dict[str, Any]]]:
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise CalendarError(f"`{kind}` must map year -> list of entries, got {type(section).__name__}")
    table: dict[int, list[dict[str, Any]]] = {}
    for year, entries in section.items():
        try:
            year_int = int(year)
        except (TypeError, ValueError) as exc:
            raise CalendarError(f"Invalid year in `{kind}`: {year!r}") from exc
        if not isinstance(entries, list) or not all(isinstance(e, dict) for e in entries):
            raise CalendarError(f"`{kind}` for {year_int} must be a list of mappings")
        table[year_int] = entries
    return table


def _int_field(entry: dict[str, Any], key: str, kind: str, year: int) -> int:
    value = entry.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise CalendarError(f"{kind} in {year} has invalid `{key}`: {value!r}")
    return value


def _label_field(entry: dict[str, Any]) -> str | None:
    value = entry.get("close_time_label")
    return None if value is None else str(value)


def parse_calendar(section: dict[str, Any] | None) -> MarketCalendar:
    """Build a MarketCalendar from a ``calendar`` config section."""
    section = section or {}
    if not isinstance(section, dict):
        raise CalendarError("`calendar` section must be a mapping")

    holidays: dict[int, list[Holiday]] = {}
    for year, entries in _year_table(section.get("holidays"), "holidays").items():
        holidays[year] = [
            Holiday(
                name=str(e.get("name", "Market holiday")),
                month=_int_field(e, "month", "Holiday", year),
                day=_int_field(e, "day", "Holiday", year),
            )
            for e in entries
        ]

    early_closes: dict[int, list[EarlyCloseDay]] = {}
    for year, entries in _year_table(section.get("early_closes"), "early_closes").items():
        early_closes[year] = [
            EarlyCloseDay(
                month=_int_field(e, "month", "Early close", year),
                day=_int_field(e, "day", "Early close", year),
                close_time_label=_label_field(e),
            )
            for e in entries
        ]

    return MarketCalendar(holidays=holidays, early_closes=early_closes)


def _session_time(config: Config, key: str, default: str) -> time:
    value = str(config.get("session", key, default=default))
    try:
        return parse_hhmm(value)
    except ValueError as exc:
        raise CalendarError(f"Invalid session.{key}: {value!r}") from exc


def load_session_bounds(config: Config) -> SessionBounds:
    tz_name = str(config.get("timezone", default="America/New_York"))
    try:
        tz = ZoneInfo(tz_name)
    except ZoneInfoNotFoundError as exc:
        raise CalendarError(f"Invalid timezone: {tz_name!r}") from exc
    d = DEFAULT_SESSION_BOUNDS
    try:
        return SessionBounds(
            pre_market_open=_session_time(config, "pre_market_open", d.pre_market_open.strftime("%H:%M")),
            market_open=_session_time(config, "market_open", d.market_open.strftime("%H:%M")),
            market_close=_session_time(config, "market_close", d.market_close.strftime("%H:%M")),
            post_market_close=_session_time(config, "post_market_close", d.post_market_close.strftime("%H:%M")),
            early_close=_session_time(config, "early_close", d.early_close.strftime("%H:%M")),
            tz=tz,
        )
    except CalendarError:
        raise
    except ValueError as exc:
        raise CalendarError(str(exc)) from exc


def load_market_settings(config: Config) -> tuple[MarketCalendar, SessionBounds]:
    """
    Resolve the calendar and session bounds from config.

    Years listed under ``calendar`` replace the same years of the compiled-in
    tables; other years keep their defaults.
    """
    overrides = parse_calendar(config.get("calendar"))
    calendar = DEFAULT_CALENDAR.merged_with(overrides)
    bounds = load_session_bounds(config)
    log.info("calendar_loaded", years=calendar.years(), override_years=overrides.years())
    return calendar, bounds
