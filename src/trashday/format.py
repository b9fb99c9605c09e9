"""Printable text for schedules and next pickups."""

from datetime import datetime, time

from .core.next_pickups import NextPickups
from .core.pickup import PickupEvent
from .core.recurrence import MonthlyByDay, MonthlyByWeekdayOrdinal, RecurrencePattern, Weekly
from .core.schedule import Schedule

WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

ORDINAL_WORDS = {1: "first", 2: "second", 3: "third", 4: "fourth", 5: "fifth"}


def ordinal_suffix(n: int) -> str:
    """1 -> 1st, 2 -> 2nd, 11 -> 11th, 23 -> 23rd."""
    if 10 <= n % 100 <= 20:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def format_time(t: time) -> str:
    """12-hour clock, e.g. 7:30 AM."""
    hour = t.hour % 12 or 12
    meridiem = "AM" if t.hour < 12 else "PM"
    return f"{hour}:{t.minute:02d} {meridiem}"


def format_date(d: datetime) -> str:
    """e.g. Tuesday, February 7."""
    return f"{d.strftime('%A, %B')} {d.day}"


def describe_pattern(pattern: RecurrencePattern) -> str:
    match pattern:
        case Weekly(weekday=weekday, interval_weeks=1):
            return f"every {WEEKDAY_NAMES[weekday]}"
        case Weekly(weekday=weekday, interval_weeks=2):
            return f"every other {WEEKDAY_NAMES[weekday]}"
        case Weekly(weekday=weekday, interval_weeks=interval):
            return f"every {interval} weeks on {WEEKDAY_NAMES[weekday]}"
        case MonthlyByDay(day_of_month=-1):
            return "on the last day"
        case MonthlyByDay(day_of_month=day) if day < 0:
            return f"on the {ordinal_suffix(-day)}-to-last day"
        case MonthlyByDay(day_of_month=day):
            return f"on the {ordinal_suffix(day)}"
        case MonthlyByWeekdayOrdinal(weekday=weekday, ordinal=-1):
            return f"on the last {WEEKDAY_NAMES[weekday]}"
        case MonthlyByWeekdayOrdinal(weekday=weekday, ordinal=ordinal) if ordinal < 0:
            return f"on the {ORDINAL_WORDS[-ordinal]}-to-last {WEEKDAY_NAMES[weekday]}"
        case MonthlyByWeekdayOrdinal(weekday=weekday, ordinal=ordinal):
            return f"on the {ORDINAL_WORDS[ordinal]} {WEEKDAY_NAMES[weekday]}"
    raise TypeError(f"Unsupported recurrence pattern: {pattern!r}")


def describe_event(event: PickupEvent) -> str:
    return f"{describe_pattern(event.pattern)} at {format_time(event.time_of_day)}"


def format_schedule(schedule: Schedule) -> str:
    """One line per pickup name, listing every event for that name."""
    if schedule.is_empty():
        return "No pickups are scheduled."
    lines = []
    for name in schedule.names():
        descriptions = ", ".join(describe_event(e) for e in schedule.events(name))
        lines.append(f"{name.display}: {descriptions}")
    return "\n".join(lines)


def format_next_pickups(next_pickups: NextPickups) -> str:
    if next_pickups.is_empty():
        return "No pickups are scheduled."
    return "\n".join(
        f"Next {name.display} pickup is {format_date(occurrence)} at {format_time(occurrence.time())}."
        for name, occurrence in next_pickups
    )
