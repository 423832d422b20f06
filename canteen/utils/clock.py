"""Time helpers.

Timestamps are persisted as UTC ISO-8601 strings. Calendar-day questions (token
sequence, daily reports, "today" dashboards) are answered in the canteen's
configured timezone.
"""
from __future__ import annotations
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Union
from zoneinfo import ZoneInfo

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def resolve_timezone(name: str | None) -> tzinfo:
    if not name or name.upper() == 'UTC':
        return timezone.utc
    return ZoneInfo(name)


def to_iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def parse_iso(value: Union[str, datetime]) -> datetime:
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def calendar_day(value: Union[str, datetime], tz: tzinfo = timezone.utc) -> date:
    """Return the local calendar day a timestamp falls on."""
    return parse_iso(value).astimezone(tz).date()


def parse_day(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None
