"""
Next-occurrence calendar arithmetic - no I/O dependencies.

Every function answers "earliest date-time on or after ``search_start``
matching the pattern", with ``time_of_day`` substituted for the time. The
search is inclusive: a ``search_start`` that already matches is returned
unchanged.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta

from .errors import UnsatisfiableSearchError
from .recurrence import (
    MonthlyByDay,
    MonthlyByWeekdayOrdinal,
    RecurrencePattern,
    Weekday,
    Weekly,
)

logger = logging.getLogger(__name__)

# Any ordinal in [-5, 5] recurs within a year in the Gregorian calendar.
MONTH_SEARCH_HORIZON = 12

# The 31st (or the -31st) is at most two months past the search month.
DAY_OF_MONTH_HORIZON = 3


def _at(d: date, time_of_day: time) -> datetime:
    return datetime.combine(d, time_of_day.replace(second=0, microsecond=0, tzinfo=None))


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_months(year: int, month: int, n: int) -> tuple[int, int]:
    """Shift (year, month) by n months, rolling the year over."""
    index = year * 12 + (month - 1) + n
    return index // 12, index % 12 + 1


def nth_weekday_of_month(year: int, month: int, weekday: Weekday, ordinal: int) -> date | None:
    """
    Date of the ``ordinal``-th ``weekday`` in the month, or None if the
    month has fewer occurrences. Negative ordinals count from month end.
    """
    last_day = days_in_month(year, month)
    if ordinal > 0:
        first_dow = date(year, month, 1).weekday()
        day = 1 + (weekday - first_dow) % 7 + 7 * (ordinal - 1)
    else:
        last_dow = date(year, month, last_day).weekday()
        day = last_day - (last_dow - weekday) % 7 - 7 * (-ordinal - 1)
    if day < 1 or day > last_day:
        return None
    return date(year, month, day)


def next_weekly(search_start: datetime, weekday: Weekday, time_of_day: time) -> datetime:
    """Next occurrence of a weekly (interval 1) pattern."""
    days_ahead = (weekday - search_start.weekday()) % 7
    candidate = _at(search_start.date() + timedelta(days=days_ahead), time_of_day)
    if candidate < search_start:
        candidate += timedelta(days=7)
    logger.debug(f"next_weekly({search_start}, {weekday.name}, {time_of_day}) = {candidate}")
    return candidate


def next_weekly_interval(
    search_start: datetime,
    weekday: Weekday,
    time_of_day: time,
    anchor: datetime,
    interval_weeks: int,
) -> datetime:
    """
    Next occurrence of an every-N-weeks pattern.

    The first weekly match on or after ``anchor`` fixes which weeks are in
    phase and is also the earliest occurrence. Candidates step forward one
    week at a time until they land a whole number of intervals away from
    that first match.
    """
    first = next_weekly(anchor, weekday, time_of_day)
    candidate = next_weekly(max(search_start, first), weekday, time_of_day)
    for _ in range(interval_weeks):
        weeks_apart = (candidate.date() - first.date()).days // 7
        if weeks_apart % interval_weeks == 0:
            logger.debug(f"next_weekly_interval: {candidate} (anchor {first}, every {interval_weeks} weeks)")
            return candidate
        candidate += timedelta(days=7)
    # Unreachable: N consecutive weeks always contain one in-phase week.
    raise UnsatisfiableSearchError(
        f"No {weekday.name.title()} in phase with {first} within {interval_weeks} weeks of {search_start}"
    )


def next_day_of_month(search_start: datetime, day_of_month: int, time_of_day: time) -> datetime:
    """Next occurrence of a day-of-month pattern (negative counts from month end)."""
    year, month = search_start.year, search_start.month
    for offset in range(DAY_OF_MONTH_HORIZON):
        y, m = add_months(year, month, offset)
        length = days_in_month(y, m)
        if day_of_month > 0:
            day = day_of_month
        else:
            day = length - (-day_of_month - 1)
        if day < 1 or day > length:
            logger.debug(f"Not enough days in {y}-{m:02d} for day {day_of_month}")
            continue
        candidate = _at(date(y, m, day), time_of_day)
        if candidate >= search_start:
            logger.debug(f"next_day_of_month({search_start}, {day_of_month}) = {candidate}")
            return candidate
    raise UnsatisfiableSearchError(f"Cannot find day {day_of_month} of a month after {search_start}")


def next_weekday_of_month(
    search_start: datetime,
    weekday: Weekday,
    ordinal: int,
    time_of_day: time,
) -> datetime:
    """
    Next occurrence of the Nth (or Nth-from-last) weekday of a month.

    Months without that occurrence are skipped, never clamped. The search
    gives up after ``MONTH_SEARCH_HORIZON`` months.
    """
    year, month = search_start.year, search_start.month
    for offset in range(MONTH_SEARCH_HORIZON):
        y, m = add_months(year, month, offset)
        found = nth_weekday_of_month(y, m, weekday, ordinal)
        if found is None:
            logger.debug(f"No {ordinal} {weekday.name.title()} in {y}-{m:02d}")
            continue
        candidate = _at(found, time_of_day)
        if candidate >= search_start:
            logger.debug(f"next_weekday_of_month({search_start}, {weekday.name}, {ordinal}) = {candidate}")
            return candidate
    raise UnsatisfiableSearchError(
        f"Cannot find the {ordinal} {weekday.name.title()} within {MONTH_SEARCH_HORIZON} months of {search_start}"
    )


def next_occurrence(
    pattern: RecurrencePattern,
    search_start: datetime,
    time_of_day: time,
    anchor: datetime | None = None,
) -> datetime:
    """
    Earliest occurrence of ``pattern`` on or after ``search_start``.

    ``anchor`` is only consulted by weekly patterns with an interval above
    one, where it fixes the active weeks.
    """
    match pattern:
        case Weekly(weekday=weekday, interval_weeks=1):
            return next_weekly(search_start, weekday, time_of_day)
        case Weekly(weekday=weekday, interval_weeks=interval):
            if anchor is None:
                raise ValueError("Multi-week patterns need an anchor date")
            return next_weekly_interval(search_start, weekday, time_of_day, anchor, interval)
        case MonthlyByDay(day_of_month=day):
            return next_day_of_month(search_start, day, time_of_day)
        case MonthlyByWeekdayOrdinal(weekday=weekday, ordinal=ordinal):
            return next_weekday_of_month(search_start, weekday, ordinal, time_of_day)
    raise TypeError(f"Unsupported recurrence pattern: {pattern!r}")
