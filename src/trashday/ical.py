"""
RFC 5545 codec for pickup schedules.

One VEVENT per pickup event, one RRULE per event:

    RRULE:FREQ=WEEKLY;BYDAY=TU
    RRULE:FREQ=WEEKLY;INTERVAL=2;BYDAY=FR
    RRULE:FREQ=MONTHLY;BYMONTHDAY=-3
    RRULE:FREQ=MONTHLY;BYDAY=2SA

Date-times are floating (no time zone); callers own localization.
"""

import logging
import re
from datetime import date, datetime, time, timezone
from hashlib import md5

from icalendar import Calendar as ICalendar
from icalendar import Event as IEvent

from .core.errors import EventShapeError, ScheduleFormatError
from .core.pickup import PickupEvent, PickupName
from .core.recurrence import (
    MonthlyByDay,
    MonthlyByWeekdayOrdinal,
    RecurrencePattern,
    Weekday,
    Weekly,
)
from .core.schedule import Schedule

logger = logging.getLogger(__name__)

PRODID = "-//trashday//pickup schedule//EN"

_BYDAY_PATTERN = re.compile(r"^(?P<ordinal>[+-]?\d{1,2})?(?P<day>[A-Z]{2})$")


def pattern_to_rrule(pattern: RecurrencePattern) -> dict:
    """Recurrence rule fields for one pattern."""
    match pattern:
        case Weekly(weekday=weekday, interval_weeks=interval):
            rule = {"FREQ": "WEEKLY"}
            if interval != 1:
                rule["INTERVAL"] = interval
            rule["BYDAY"] = weekday.ical
            return rule
        case MonthlyByDay(day_of_month=day):
            return {"FREQ": "MONTHLY", "BYMONTHDAY": day}
        case MonthlyByWeekdayOrdinal(weekday=weekday, ordinal=ordinal):
            return {"FREQ": "MONTHLY", "BYDAY": f"{ordinal}{weekday.ical}"}
    raise TypeError(f"Unsupported recurrence pattern: {pattern!r}")


def rrule_text(rule: dict) -> str:
    """FREQ=WEEKLY;BYDAY=TU style text for a rule dict."""
    return ";".join(f"{key}={value}" for key, value in rule.items())


def event_uid(event: PickupEvent) -> str:
    """The event's own UID, or a stable digest of its content."""
    if event.uid:
        return event.uid
    content = f"{event.name.key}|{event.anchor.isoformat()}|{rrule_text(pattern_to_rrule(event.pattern))}"
    return f"{md5(content.encode()).hexdigest()}@trashday"


def to_ical(schedule: Schedule, stamp: datetime | None = None) -> str:
    """
    Serialize a schedule as iCalendar text.

    DTSTAMP is always written in UTC. A naive ``stamp`` is taken to be UTC
    already; an aware one is converted.
    """
    if stamp is None:
        stamp = datetime.now(timezone.utc).replace(microsecond=0)
    elif stamp.tzinfo is None:
        stamp = stamp.replace(tzinfo=timezone.utc)
    else:
        stamp = stamp.astimezone(timezone.utc)

    cal = ICalendar()
    cal.add("prodid", PRODID)
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")

    for event in schedule:
        component = IEvent()
        component.add("summary", event.name.display)
        component.add("dtstart", event.anchor)
        component.add("dtend", event.anchor)
        component.add("dtstamp", stamp)
        component.add("uid", event_uid(event))
        component.add("rrule", pattern_to_rrule(event.pattern))
        cal.add_component(component)

    return cal.to_ical().decode("utf-8")


def _values(rule, key: str) -> list:
    value = rule.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _int(value, key: str, summary: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise EventShapeError(f"Unreadable {key} value {value!r} for {summary}") from e


def _parse_byday(token: str, summary: str) -> tuple[int | None, Weekday]:
    found = _BYDAY_PATTERN.match(str(token).strip().upper())
    if not found:
        raise EventShapeError(f"Unreadable BYDAY entry {token!r} for {summary}")
    ordinal = found.group("ordinal")
    try:
        weekday = Weekday.from_ical(found.group("day"))
    except ValueError as e:
        raise EventShapeError(f"Unreadable BYDAY entry {token!r} for {summary}") from e
    return (int(ordinal) if ordinal else None), weekday


def rrule_to_pattern(rule, summary: str = "event") -> RecurrencePattern:
    """
    Convert one parsed RRULE into a pattern.

    Raises EventShapeError for any rule shape outside the three supported
    patterns.
    """
    freqs = [str(f).upper() for f in _values(rule, "FREQ")]
    if len(freqs) != 1:
        raise EventShapeError(f"Will not accept RRULEs without exactly one FREQ: {summary}")
    freq = freqs[0]

    intervals = _values(rule, "INTERVAL")
    interval = _int(intervals[0], "INTERVAL", summary) if intervals else 1
    by_day = _values(rule, "BYDAY")
    by_month_day = _values(rule, "BYMONTHDAY")

    if freq == "WEEKLY":
        if len(by_day) != 1:
            raise EventShapeError(f"Will not accept WEEKLY RRULEs without exactly one BYDAY entry: {summary}")
        if by_month_day:
            raise EventShapeError(f"Will not accept WEEKLY RRULEs with BYMONTHDAY entries: {summary}")
        ordinal, weekday = _parse_byday(by_day[0], summary)
        if ordinal is not None:
            raise EventShapeError(f"Will not accept WEEKLY RRULEs with a positional BYDAY entry: {summary}")
        return Weekly(weekday, interval)

    if freq == "MONTHLY":
        if interval != 1:
            raise EventShapeError(f"Will not accept MONTHLY RRULEs with INTERVAL={interval}: {summary}")
        if bool(by_day) == bool(by_month_day):
            raise EventShapeError(
                f"Will not accept MONTHLY RRULEs without exactly one of BYDAY or BYMONTHDAY: {summary}"
            )
        if len(by_day) > 1 or len(by_month_day) > 1:
            raise EventShapeError(f"Will not accept MONTHLY RRULEs with more than one day entry: {summary}")
        if by_month_day:
            return MonthlyByDay(_int(by_month_day[0], "BYMONTHDAY", summary))
        ordinal, weekday = _parse_byday(by_day[0], summary)
        if ordinal is None:
            raise EventShapeError(f"Will not accept MONTHLY BYDAY entries without a week number: {summary}")
        return MonthlyByWeekdayOrdinal(weekday, ordinal)

    raise EventShapeError(f"Will not accept RRULEs that are not WEEKLY or MONTHLY frequency: {freq}")


def _anchor(component, summary: str) -> datetime:
    if component.get("DTSTART") is None:
        raise EventShapeError(f"Will not accept events without DTSTART: {summary}")
    value = component.decoded("DTSTART")
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time())
    raise EventShapeError(f"Unreadable DTSTART for {summary}: {value!r}")


def component_to_event(component) -> PickupEvent:
    """Build a pickup event from one VEVENT component."""
    summary = str(component.get("SUMMARY", "")).strip()
    if not summary:
        raise EventShapeError("Will not accept events without names.")

    rrules = _values(component, "RRULE")
    if len(rrules) != 1:
        raise EventShapeError(f"Will not accept events without exactly one RRULE: {summary} has {len(rrules)}")

    uid = component.get("UID")
    return PickupEvent(
        name=PickupName.of(summary),
        anchor=_anchor(component, summary),
        pattern=rrule_to_pattern(rrules[0], summary),
        uid=str(uid) if uid else None,
    )


def from_ical(text: str | bytes | None) -> Schedule:
    """Parse iCalendar text into a schedule. Empty text is an empty schedule."""
    schedule = Schedule()
    if not text or not text.strip():
        return schedule

    try:
        cal = ICalendar.from_ical(text)
    except ValueError as e:
        raise ScheduleFormatError(f"Unable to read calendar text: {e}") from e

    for component in cal.walk("VEVENT"):
        event = component_to_event(component)
        if not schedule.add(event):
            logger.warning(f"Skipping duplicate {event.name} event in calendar text: {event.uid}")
    return schedule
