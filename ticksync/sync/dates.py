"""Date helpers shared by the formatter, the parser and the sync engine.

All day arithmetic happens on local calendar days. Instants are returned as
timezone-aware datetimes in the local zone.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Optional, Union

from dateutil import parser as date_parser

DateLike = Union[str, datetime, None]

END_OF_DAY = time(23, 59, 59, 999000)


class Bucket(str, Enum):
    TODAY = "today"
    YESTERDAY = "yesterday"
    TOMORROW = "tomorrow"
    NONE = "none"


@dataclass(frozen=True)
class DayWindow:
    """Reference days for one sync pass, computed once so every task sees the same window."""

    today: date

    @property
    def yesterday(self) -> date:
        return self.today - timedelta(days=1)

    @property
    def tomorrow(self) -> date:
        return self.today + timedelta(days=1)

    @classmethod
    def from_reference(cls, now: Optional[datetime] = None) -> "DayWindow":
        now = to_local(now) if now is not None else datetime.now().astimezone()
        return cls(today=now.date())

    def start_of(self, day: date) -> datetime:
        return datetime.combine(day, time.min).astimezone()

    def cutoff(self, days: int) -> datetime:
        """Midnight ``days`` days before the reference day."""
        return self.start_of(self.today - timedelta(days=days))


def to_local(dt: datetime) -> datetime:
    """Aware datetime in the local zone; naive input is read as local wall time."""
    return dt.astimezone()


def parse_date(value: DateLike) -> Optional[datetime]:
    """
    Parse anything dateutil understands into a local, aware datetime.
    Returns None instead of raising when the value is empty or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_local(value)
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return to_local(date_parser.parse(value.strip()))
    except (ValueError, OverflowError, TypeError):
        return None


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, END_OF_DAY).astimezone()


def bucket(timestamp: DateLike, window: DayWindow) -> Bucket:
    """Classify an instant against the reference window. Never raises."""
    dt = parse_date(timestamp)
    if dt is None:
        return Bucket.NONE
    day = dt.date()
    if day == window.today:
        return Bucket.TODAY
    if day == window.yesterday:
        return Bucket.YESTERDAY
    if day == window.tomorrow:
        return Bucket.TOMORROW
    return Bucket.NONE


def bucket_task(task, window: DayWindow) -> Bucket:
    """Bucket by dueDate, falling back to startDate."""
    return bucket(task.dueDate or task.startDate, window)


def format_date_for_display(value: DateLike) -> str:
    """``YYYY-MM-DD`` for local midnight, ``YYYY-MM-DD HH:MM`` otherwise."""
    dt = parse_date(value)
    if dt is None:
        return "" if value is None else str(value)
    if dt.time() == time.min:
        return dt.strftime("%Y-%m-%d")
    return dt.strftime("%Y-%m-%d %H:%M")


def to_api_datetime(dt: datetime) -> str:
    """Format an instant the way the TickTick API expects (UTC, millisecond precision)."""
    utc = to_local(dt).astimezone(timezone.utc)
    return f"{utc:%Y-%m-%dT%H:%M:%S}.{utc.microsecond // 1000:03d}+0000"


def format_last_synced(now: datetime) -> str:
    return to_local(now).strftime("%Y-%m-%d %H:%M:%S")
