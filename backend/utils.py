# utils.py
# Helpers: wall clock, ISO parsing, the date windows every time filter uses

from __future__ import annotations
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo


def now_local(tz: tzinfo | None = None) -> datetime:
    """
    Current wall-clock time as an aware datetime. Pass a ZoneInfo so that
    boundaries computed from it pick up the right offset across DST changes;
    without one this falls back to the server's current fixed offset.
    """
    if tz is not None:
        return datetime.now(tz)
    return datetime.now().astimezone()


def parse_iso(value: str | None, tz=None) -> datetime | None:
    """
    Parse an ISO-8601 string. Returns None for absent or unparseable input.
    Naive results get `tz` attached so they compare against an aware `now`.
    """
    if not value:
        return None
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if dt.tzinfo is None and tz is not None:
        dt = dt.replace(tzinfo=tz)
    return dt


def _end_of(dt: datetime) -> datetime:
    return dt.replace(hour=23, minute=59, second=59, microsecond=999000)


@dataclass(frozen=True)
class DateWindows:
    start_of_day: datetime
    end_of_day: datetime
    end_of_week: datetime
    end_of_month: datetime
    end_of_next_month: datetime


def compute_windows(now: datetime) -> DateWindows:
    """
    Boundary instants for the time filters, in now's own timezone. With a
    ZoneInfo tz each boundary is local wall-clock time on its own date, so a
    window ending after a DST change carries that date's offset.

    end_of_week is start_of_day plus (7 - dow) days with dow 0=Sunday, at
    midnight. On a Sunday that is the following Sunday, a full week ahead.
    """
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    end_of_day = _end_of(now)

    dow = (start_of_day.weekday() + 1) % 7  # Sun=0..Sat=6
    end_of_week = start_of_day + timedelta(days=7 - dow)

    last = calendar.monthrange(now.year, now.month)[1]
    end_of_month = _end_of(now.replace(day=last))

    year, month = (now.year + 1, 1) if now.month == 12 else (now.year, now.month + 1)
    last_next = calendar.monthrange(year, month)[1]
    end_of_next_month = _end_of(now.replace(year=year, month=month, day=last_next))

    return DateWindows(
        start_of_day=start_of_day,
        end_of_day=end_of_day,
        end_of_week=end_of_week,
        end_of_month=end_of_month,
        end_of_next_month=end_of_next_month,
    )


def add_months(dt: datetime, months: int) -> datetime:
    """Shift by whole months, clamping the day to the target month's length."""
    total = dt.month - 1 + months
    year, month = dt.year + total // 12, total % 12 + 1
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)
