"""
Calendar Day Normalization

All day-granularity comparisons go through this module:
1. A "day" is a ``datetime.date``; timestamps are cut down with start_of_day()
2. Aware timestamps are converted to TRACKER_TIMEZONE first, naive ones are
   taken as already local
3. Day gaps are counted on the calendar (ordinal difference), never derived
   from wall-clock durations, so DST and leap days cannot skew them
"""

import logging
from datetime import datetime, date
from enum import IntEnum
from typing import Union
from zoneinfo import ZoneInfo

from habit_tracker import config

logger = logging.getLogger(__name__)

DayLike = Union[date, datetime]


class Weekday(IntEnum):
    """ISO weekday, Monday first"""
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def from_sunday_first(cls, raw: int) -> "Weekday":
        """
        Remap a Sunday-first weekday number (Sunday=1 .. Saturday=7)

        Args:
            raw: Weekday number where Sunday is 1

        Returns:
            ISO Weekday (raw 1 -> SUNDAY, raw n -> n - 1 otherwise)

        Raises:
            ValueError: If raw is outside 1-7
        """
        if raw < 1 or raw > 7:
            raise ValueError(f"Invalid weekday number: {raw}. Must be 1-7")
        return cls.SUNDAY if raw == 1 else cls(raw - 1)

    @property
    def short_name(self) -> str:
        return self.name[:3].capitalize()


def get_timezone() -> ZoneInfo:
    """Zone used to interpret aware timestamps"""
    try:
        return ZoneInfo(config.TRACKER_TIMEZONE)
    except Exception as e:
        logger.error(f"Invalid timezone '{config.TRACKER_TIMEZONE}': {e}")
        return ZoneInfo("UTC")


def now_local() -> datetime:
    """Current datetime in the tracker timezone"""
    return datetime.now(get_timezone())


def today() -> date:
    """Current calendar day in the tracker timezone"""
    return now_local().date()


def start_of_day(timestamp: DayLike) -> date:
    """
    Normalize a timestamp to its calendar day

    Args:
        timestamp: date or datetime (naive or aware)

    Returns:
        The calendar day the timestamp falls on
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is not None:
            timestamp = timestamp.astimezone(get_timezone())
        return timestamp.date()
    return timestamp


def weekday_of(day: DayLike) -> Weekday:
    """ISO weekday of a day (Monday=1 .. Sunday=7)"""
    return Weekday(start_of_day(day).isoweekday())


def days_between(start: DayLike, end: DayLike) -> int:
    """
    Signed number of calendar days from start to end

    Args:
        start: First day
        end: Second day

    Returns:
        Positive when end is after start, 0 on the same day
    """
    return start_of_day(end).toordinal() - start_of_day(start).toordinal()
