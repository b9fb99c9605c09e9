"""Recurrence patterns - pure data, validated at construction."""

from dataclasses import dataclass
from datetime import date
from enum import IntEnum

from .errors import PatternRangeError

MAX_DAY_OF_MONTH = 31
MAX_ORDINAL = 5


class Weekday(IntEnum):
    """Day of week. Values match ``date.weekday()``."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def ical(self) -> str:
        """Two-letter RFC 5545 code (MO, TU, ...)."""
        return self.name[:2]

    @classmethod
    def from_ical(cls, code: str) -> "Weekday":
        code = code.strip().upper()
        for day in cls:
            if day.ical == code:
                return day
        raise ValueError(f"Unknown weekday code: {code!r}")

    @classmethod
    def of(cls, d: date) -> "Weekday":
        return cls(d.weekday())

    @classmethod
    def parse(cls, text: str) -> "Weekday":
        """Parse a full name, a three-letter prefix or an RFC 5545 code."""
        value = text.strip().upper()
        if len(value) == 2:
            return cls.from_ical(value)
        for day in cls:
            if len(value) >= 3 and day.name.startswith(value):
                return day
        raise ValueError(f"Unknown weekday: {text!r}")


@dataclass(frozen=True)
class Weekly:
    """Every N weeks on one weekday."""

    weekday: Weekday
    interval_weeks: int = 1

    def __post_init__(self):
        object.__setattr__(self, "weekday", Weekday(self.weekday))
        if self.interval_weeks < 1:
            raise PatternRangeError(f"Interval must be a positive number of weeks: {self.interval_weeks}")


@dataclass(frozen=True)
class MonthlyByDay:
    """
    A fixed day of each month.

    Positive values count from the start of the month (1 = first day),
    negative values from the end (-1 = last day, -2 = second-to-last).
    """

    day_of_month: int

    def __post_init__(self):
        if self.day_of_month == 0:
            raise PatternRangeError("No such day of month: 0")
        if self.day_of_month > MAX_DAY_OF_MONTH:
            raise PatternRangeError(f"Maximum day of month value (31) exceeded: {self.day_of_month}")
        if self.day_of_month < -MAX_DAY_OF_MONTH:
            raise PatternRangeError(f"Minimum day of month value (-31) exceeded: {self.day_of_month}")

    @property
    def from_end(self) -> bool:
        return self.day_of_month < 0


@dataclass(frozen=True)
class MonthlyByWeekdayOrdinal:
    """The Nth (or Nth-from-last) weekday of each month."""

    weekday: Weekday
    ordinal: int

    def __post_init__(self):
        object.__setattr__(self, "weekday", Weekday(self.weekday))
        if self.ordinal == 0:
            raise PatternRangeError("No such weekday ordinal: 0")
        if self.ordinal > MAX_ORDINAL:
            raise PatternRangeError(f"Maximum weekday ordinal value (5) exceeded: {self.ordinal}")
        if self.ordinal < -MAX_ORDINAL:
            raise PatternRangeError(f"Minimum weekday ordinal value (-5) exceeded: {self.ordinal}")

    @property
    def from_end(self) -> bool:
        return self.ordinal < 0


RecurrencePattern = Weekly | MonthlyByDay | MonthlyByWeekdayOrdinal

PATTERN_TYPES = (Weekly, MonthlyByDay, MonthlyByWeekdayOrdinal)
