"""Mapping between Wordle puzzle numbers and calendar days in the reference timezone."""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo

# Wordle #1283 was published on 2024-12-23. Puzzles advance by one per calendar day.
SENTINEL_DATE = date(2024, 12, 23)
SENTINEL_DAY = 1283

STALE_AFTER = timedelta(hours=24)
WARNING_LEAD = timedelta(hours=1)


def reference_tz(name: str) -> tzinfo:
    return ZoneInfo(name)


def date_for_puzzle(puzzle_day: int) -> date:
    return SENTINEL_DATE + timedelta(days=puzzle_day - SENTINEL_DAY)


def puzzle_for_date(day: date) -> int:
    return SENTINEL_DAY + (day - SENTINEL_DATE).days


def puzzle_for_now(now: datetime, tz: tzinfo) -> int:
    return puzzle_for_date(now.astimezone(tz).date())


def start_of_puzzle_day(puzzle_day: int, tz: tzinfo) -> datetime:
    return datetime.combine(date_for_puzzle(puzzle_day), time(0), tzinfo=tz)


def _utc(moment: datetime) -> datetime:
    # Aware datetimes sharing a tzinfo subtract and compare by wall clock, which is off on DST days
    return moment.astimezone(timezone.utc)


def seconds_between(start: datetime, end: datetime) -> float:
    return (_utc(end) - _utc(start)).total_seconds()


def is_stale(puzzle_day: int, now: datetime, tz: tzinfo) -> bool:
    """True when the puzzle's calendar day started more than 24 hours before ``now``."""
    return _utc(start_of_puzzle_day(puzzle_day, tz)) < _utc(now) - STALE_AFTER


def deadline_for(puzzle_day: int, now: datetime, tz: tzinfo, hour: int) -> datetime:
    """Deadline on the puzzle's calendar day, rolled to the next day if it has already passed."""
    deadline = datetime.combine(date_for_puzzle(puzzle_day), time(hour), tzinfo=tz)
    if _utc(now) > _utc(deadline):
        deadline = datetime.combine(deadline.date() + timedelta(days=1), time(hour), tzinfo=tz)
    return deadline


def warning_for(deadline: datetime) -> datetime:
    return (_utc(deadline) - WARNING_LEAD).astimezone(deadline.tzinfo)
