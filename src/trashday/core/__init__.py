"""Functional core - pure recurrence logic with no I/O."""

from .errors import (
    TrashDayError,
    PatternRangeError,
    EventShapeError,
    UnsatisfiableSearchError,
    ScheduleFormatError,
)
from .recurrence import Weekday, Weekly, MonthlyByDay, MonthlyByWeekdayOrdinal, RecurrencePattern
from .datemath import next_occurrence as next_pattern_occurrence
from .pickup import PickupName, PickupEvent
from .schedule import (
    Schedule,
    validate,
    add_weekly,
    add_biweekly,
    add_monthly_by_day,
    add_monthly_by_weekday_ordinal,
    delete_weekly,
    delete_biweekly,
    delete_monthly_by_day,
    delete_monthly_by_weekday_ordinal,
    delete_all_for_name,
    next_occurrence,
    list_events,
)
from .next_pickups import NextPickups

__all__ = [
    # Errors
    "TrashDayError",
    "PatternRangeError",
    "EventShapeError",
    "UnsatisfiableSearchError",
    "ScheduleFormatError",
    # Patterns
    "Weekday",
    "Weekly",
    "MonthlyByDay",
    "MonthlyByWeekdayOrdinal",
    "RecurrencePattern",
    "next_pattern_occurrence",
    # Events
    "PickupName",
    "PickupEvent",
    # Schedule
    "Schedule",
    "validate",
    "add_weekly",
    "add_biweekly",
    "add_monthly_by_day",
    "add_monthly_by_weekday_ordinal",
    "delete_weekly",
    "delete_biweekly",
    "delete_monthly_by_day",
    "delete_monthly_by_weekday_ordinal",
    "delete_all_for_name",
    "next_occurrence",
    "list_events",
    # Next pickups
    "NextPickups",
]
