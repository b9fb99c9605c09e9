"""Pickup events - a named recurrence anchored at a date-time."""

from dataclasses import dataclass, field
from datetime import datetime, time

from . import datemath
from .recurrence import RecurrencePattern, Weekly


@dataclass(frozen=True)
class PickupName:
    """
    Case-insensitive pickup name.

    ``key`` is used for every comparison; ``display`` keeps the casing the
    user supplied.
    """

    key: str
    display: str = field(compare=False)

    @classmethod
    def of(cls, text: "str | PickupName") -> "PickupName":
        if isinstance(text, PickupName):
            return text
        display = (text or "").strip()
        return cls(key=display.lower(), display=display)

    def __str__(self) -> str:
        return self.display


@dataclass(frozen=True)
class PickupEvent:
    """
    One recurring pickup.

    The anchor's time of day is the time of every occurrence. For weekly
    patterns with an interval above one, the anchor's date also decides
    which weeks are active.
    """

    name: PickupName
    anchor: datetime
    pattern: RecurrencePattern
    uid: str | None = field(default=None, compare=False)

    def __post_init__(self):
        if isinstance(self.anchor, datetime):
            object.__setattr__(self, "anchor", self.anchor.replace(second=0, microsecond=0, tzinfo=None))

    @classmethod
    def create(
        cls,
        name: str,
        anchor: datetime,
        pattern: RecurrencePattern,
        uid: str | None = None,
    ) -> "PickupEvent":
        return cls(name=PickupName.of(name), anchor=anchor, pattern=pattern, uid=uid)

    @property
    def time_of_day(self) -> time:
        return self.anchor.time()

    def next_occurrence(self, after: datetime) -> datetime:
        """Earliest occurrence on or after ``after``."""
        return datemath.next_occurrence(self.pattern, after, self.time_of_day, self.anchor)

    def first_occurrence(self) -> datetime:
        """First occurrence on or after the anchor."""
        return self.next_occurrence(self.anchor)

    def same_slot(self, other: "PickupEvent") -> bool:
        """
        Structural identity used to reject duplicate adds.

        Same name, pattern and time of day. Multi-week patterns must also
        share their phase.
        """
        if self.name != other.name or self.pattern != other.pattern:
            return False
        if self.time_of_day != other.time_of_day:
            return False
        if isinstance(self.pattern, Weekly) and self.pattern.interval_weeks > 1:
            weeks_apart = (self.first_occurrence().date() - other.first_occurrence().date()).days // 7
            return weeks_apart % self.pattern.interval_weeks == 0
        return True

    def matches(self, name: "str | PickupName", pattern: RecurrencePattern, time_of_day: time) -> bool:
        """Delete matching: name, pattern and time of day (phase ignored)."""
        return (
            self.name == PickupName.of(name)
            and self.pattern == pattern
            and self.time_of_day == time_of_day.replace(second=0, microsecond=0, tzinfo=None)
        )
