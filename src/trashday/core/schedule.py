"""Pickup schedule - pure domain logic, no I/O dependencies."""

import logging
from datetime import datetime, time, timedelta
from typing import Iterator

from . import datemath
from .errors import EventShapeError, UnsatisfiableSearchError
from .pickup import PickupEvent, PickupName
from .recurrence import (
    PATTERN_TYPES,
    MonthlyByDay,
    MonthlyByWeekdayOrdinal,
    RecurrencePattern,
    Weekday,
    Weekly,
)

logger = logging.getLogger(__name__)


def validate(event: PickupEvent) -> None:
    """Structural checks for events built outside the add_* helpers."""
    if not isinstance(event, PickupEvent):
        raise EventShapeError(f"Not a pickup event: {event!r}")
    if event.name is None or not event.name.key:
        raise EventShapeError("Will not accept events without names.")
    if event.pattern is None:
        raise EventShapeError(f"Will not accept events without a recurrence pattern: {event.name}")
    if isinstance(event.pattern, (list, tuple, set)):
        raise EventShapeError(
            f"Will not accept events without exactly one recurrence pattern: {event.name} has {len(event.pattern)}"
        )
    if not isinstance(event.pattern, PATTERN_TYPES):
        raise EventShapeError(f"Unsupported recurrence pattern: {event.pattern!r}")
    if not isinstance(event.anchor, datetime):
        raise EventShapeError(f"Event anchor must be a date-time: {event.anchor!r}")


class Schedule:
    """
    Ordered collection of pickup events.

    Order only matters for presentation. A name may have several events
    (e.g. trash on Tuesday and again on Friday), but never two events in
    the same slot.
    """

    def __init__(self, events: list[PickupEvent] | None = None):
        self._events: list[PickupEvent] = []
        for event in events or []:
            self.add(event)

    def __repr__(self) -> str:
        return f"Schedule({self._events!r})"

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[PickupEvent]:
        return iter(list(self._events))

    def is_empty(self) -> bool:
        return not self._events

    def events(self, name: "str | PickupName | None" = None) -> list[PickupEvent]:
        """All events, or only those for one pickup name."""
        if name is None:
            return list(self._events)
        key = PickupName.of(name)
        return [e for e in self._events if e.name == key]

    def names(self) -> list[PickupName]:
        """Distinct pickup names in order of first appearance."""
        seen: dict[PickupName, PickupName] = {}
        for event in self._events:
            seen.setdefault(event.name, event.name)
        return list(seen.values())

    def has(self, event: PickupEvent) -> bool:
        return any(existing.same_slot(event) for existing in self._events)

    def add(self, event: PickupEvent) -> bool:
        """Add an event. Returns False if the same slot already exists."""
        validate(event)
        if self.has(event):
            logger.debug(f"Duplicate {event.name} pickup not added: {event.pattern}")
            return False
        self._events.append(event)
        logger.info(f"Added {event.name} pickup: {event.pattern} at {event.time_of_day}")
        return True

    def delete(self, name: "str | PickupName", pattern: RecurrencePattern, time_of_day: time) -> bool:
        """Remove the first event matching name, pattern and time of day."""
        for index, event in enumerate(self._events):
            if event.matches(name, pattern, time_of_day):
                del self._events[index]
                logger.info(f"Deleted {event.name} pickup: {pattern} at {event.time_of_day}")
                return True
        logger.debug(f"No {name} pickup matches {pattern} at {time_of_day}")
        return False

    def delete_all(self, name: "str | PickupName") -> bool:
        """Remove every event for a pickup name."""
        key = PickupName.of(name)
        remaining = [e for e in self._events if e.name != key]
        removed = len(self._events) - len(remaining)
        self._events = remaining
        if removed:
            logger.info(f"Deleted all {removed} {key.display} pickup(s)")
        return removed > 0

    def clear(self) -> bool:
        """Delete the entire schedule."""
        had_events = bool(self._events)
        self._events = []
        return had_events

    def next_occurrence(self, name: "str | PickupName", after: datetime) -> datetime | None:
        """
        Earliest next occurrence across all events for ``name``.

        Events whose search horizon runs out contribute nothing.
        """
        occurrences = []
        for event in self.events(name):
            try:
                occurrences.append(event.next_occurrence(after))
            except UnsatisfiableSearchError as e:
                logger.warning(f"Skipping {event.name} pickup: {e}")
        if not occurrences:
            return None
        return min(occurrences)


# Functional API used by the request-handling layer.


def add_weekly(
    schedule: Schedule,
    request_time: datetime,
    name: str,
    weekday: Weekday,
    time_of_day: time,
) -> bool:
    """Add a pickup every week on ``weekday``."""
    anchor = datemath.next_weekly(request_time, Weekday(weekday), time_of_day)
    return schedule.add(PickupEvent.create(name, anchor, Weekly(weekday, 1)))


def add_biweekly(
    schedule: Schedule,
    request_time: datetime,
    name: str,
    weekday: Weekday,
    time_of_day: time,
    prefer_next_week: bool = False,
) -> bool:
    """
    Add a pickup every other week on ``weekday``.

    The upcoming ``weekday`` (on or after ``request_time``) is the first
    pickup, unless ``prefer_next_week`` skips to the one after it.
    """
    anchor = datemath.next_weekly(request_time, Weekday(weekday), time_of_day)
    if prefer_next_week:
        anchor += timedelta(days=7)
    return schedule.add(PickupEvent.create(name, anchor, Weekly(weekday, 2)))


def add_monthly_by_day(
    schedule: Schedule,
    request_time: datetime,
    name: str,
    day_of_month: int,
    time_of_day: time,
) -> bool:
    """Add a pickup on a day of the month (negative counts from month end)."""
    pattern = MonthlyByDay(day_of_month)
    anchor = datemath.next_occurrence(pattern, request_time, time_of_day)
    return schedule.add(PickupEvent.create(name, anchor, pattern))


def add_monthly_by_weekday_ordinal(
    schedule: Schedule,
    request_time: datetime,
    name: str,
    ordinal: int,
    weekday: Weekday,
    time_of_day: time,
) -> bool:
    """Add a pickup on the Nth (or Nth-from-last) weekday of the month."""
    pattern = MonthlyByWeekdayOrdinal(weekday, ordinal)
    anchor = datemath.next_occurrence(pattern, request_time, time_of_day)
    return schedule.add(PickupEvent.create(name, anchor, pattern))


def delete_weekly(schedule: Schedule, name: str, weekday: Weekday, time_of_day: time) -> bool:
    return schedule.delete(name, Weekly(weekday, 1), time_of_day)


def delete_biweekly(schedule: Schedule, name: str, weekday: Weekday, time_of_day: time) -> bool:
    return schedule.delete(name, Weekly(weekday, 2), time_of_day)


def delete_monthly_by_day(schedule: Schedule, name: str, day_of_month: int, time_of_day: time) -> bool:
    return schedule.delete(name, MonthlyByDay(day_of_month), time_of_day)


def delete_monthly_by_weekday_ordinal(
    schedule: Schedule,
    name: str,
    ordinal: int,
    weekday: Weekday,
    time_of_day: time,
) -> bool:
    return schedule.delete(name, MonthlyByWeekdayOrdinal(weekday, ordinal), time_of_day)


def delete_all_for_name(schedule: Schedule, name: str) -> bool:
    return schedule.delete_all(name)


def next_occurrence(schedule: Schedule, name: str, after: datetime) -> datetime | None:
    return schedule.next_occurrence(name, after)


def list_events(schedule: Schedule, name: str | None = None) -> list[PickupEvent]:
    return schedule.events(name)


def example_schedule(kind: str = "basic") -> Schedule:
    """
    Demo schedules.

    basic: trash Tuesday and Friday mornings, recycling every other Friday.
    complex: adds monthly pickups of every shape.
    """
    schedule = Schedule()
    schedule.add(PickupEvent.create("Trash", datetime(2017, 1, 31, 7, 30), Weekly(Weekday.TUESDAY)))
    schedule.add(PickupEvent.create("Trash", datetime(2017, 2, 3, 7, 30), Weekly(Weekday.FRIDAY)))
    schedule.add(PickupEvent.create("Recycling", datetime(2017, 2, 3, 7, 30), Weekly(Weekday.FRIDAY, 2)))
    if kind == "basic":
        return schedule
    if kind != "complex":
        raise ValueError(f"Unknown example schedule: {kind}")

    schedule.add(PickupEvent.create("Lawn Waste", datetime(2017, 2, 1, 12, 0), MonthlyByDay(1)))
    schedule.add(PickupEvent.create("Lawn Waste", datetime(2017, 2, 15, 12, 0), MonthlyByDay(15)))
    schedule.add(PickupEvent.create("scrap metal", datetime(2017, 2, 28, 12, 0), MonthlyByDay(-1)))
    schedule.add(PickupEvent.create("mortgage", datetime(2017, 2, 24, 12, 0), MonthlyByDay(-5)))
    schedule.add(
        PickupEvent.create(
            "dry cleaning", datetime(2017, 3, 11, 12, 0), MonthlyByWeekdayOrdinal(Weekday.SATURDAY, 2)
        )
    )
    schedule.add(
        PickupEvent.create(
            "hockey team", datetime(2017, 2, 18, 9, 0), MonthlyByWeekdayOrdinal(Weekday.SATURDAY, -2)
        )
    )
    return schedule
