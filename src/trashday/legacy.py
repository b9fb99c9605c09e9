"""Importer for the version-1 JSON schedule format."""

import json
import logging
from datetime import datetime, time

from .core import datemath
from .core.errors import ScheduleFormatError
from .core.pickup import PickupEvent
from .core.recurrence import Weekday, Weekly
from .core.schedule import Schedule

logger = logging.getLogger(__name__)

SUPPORTED_MODEL_VERSION = "1"


def _parse_time(tod, name: str) -> time:
    """Accepts [6, 30] or "06:30"."""
    try:
        if isinstance(tod, str):
            hour, _, minute = tod.partition(":")
            return time(int(hour), int(minute or 0))
        if isinstance(tod, (list, tuple)) and len(tod) == 2:
            return time(int(tod[0]), int(tod[1]))
    except (TypeError, ValueError) as e:
        raise ScheduleFormatError(f"Unreadable time of day for {name}: {tod!r}") from e
    raise ScheduleFormatError(f"Unreadable time of day for {name}: {tod!r}")


def _parse_weekday(dow, name: str) -> Weekday:
    if not isinstance(dow, str):
        raise ScheduleFormatError(f"Unreadable day of week for {name}: {dow!r}")
    try:
        return Weekday.parse(dow)
    except ValueError as e:
        raise ScheduleFormatError(f"Unreadable day of week for {name}: {dow!r}") from e


def from_legacy_json(data: str | dict, reference: datetime) -> Schedule:
    """
    Build a schedule from a version-1 JSON document.

    Each entry becomes a weekly pickup anchored on the first matching
    weekday on or after ``reference``.
    """
    if isinstance(data, (str, bytes)):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ScheduleFormatError(f"Legacy schedule is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ScheduleFormatError("Legacy schedule must be a JSON object")

    version = str(data.get("modelVersion", SUPPORTED_MODEL_VERSION))
    if version != SUPPORTED_MODEL_VERSION:
        raise ScheduleFormatError(f"Unsupported legacy model version: {version}")

    names = data.get("pickupNames", [])
    pickup_schedule = data.get("pickupSchedule", {})
    if not isinstance(names, list) or not isinstance(pickup_schedule, dict):
        raise ScheduleFormatError("Legacy schedule has unexpected pickupNames or pickupSchedule")

    ordered = list(names) + [n for n in pickup_schedule if n not in names]
    for name in ordered:
        if not isinstance(name, str):
            raise ScheduleFormatError(f"Legacy pickup names must be strings: {name!r}")

    schedule = Schedule()
    for name in ordered:
        entries = pickup_schedule.get(name) or []
        if not isinstance(entries, list):
            raise ScheduleFormatError(f"Unreadable legacy times for {name}: {entries!r}")
        if not entries:
            logger.warning(f"Legacy pickup {name} has no times, skipping")
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                raise ScheduleFormatError(f"Unreadable legacy entry for {name}: {entry!r}")
            weekday = _parse_weekday(entry.get("dow"), name)
            time_of_day = _parse_time(entry.get("tod"), name)
            anchor = datemath.next_weekly(reference, weekday, time_of_day)
            schedule.add(PickupEvent.create(name, anchor, Weekly(weekday)))

    logger.info(f"Imported {len(schedule)} legacy pickup event(s)")
    return schedule
