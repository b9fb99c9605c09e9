"""Next-pickup snapshot across a whole schedule."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator

from .pickup import PickupName
from .schedule import Schedule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NextPickups:
    """
    Read-only answer to "when is each pickup next?".

    Entries are ordered by occurrence time; ties keep the order in which
    the names first appear in the schedule.
    """

    starting_point: datetime
    entries: tuple[tuple[PickupName, datetime], ...] = ()

    @classmethod
    def build(
        cls,
        schedule: Schedule,
        starting_point: datetime,
        name: str | None = None,
    ) -> "NextPickups":
        """
        Compute the next occurrence of every pickup name (or just ``name``).

        Pure function - no I/O. Names with no occurrence are omitted.
        """
        if name is None:
            names = schedule.names()
        else:
            names = [n for n in schedule.names() if n == PickupName.of(name)]

        found = []
        for order, pickup in enumerate(names):
            occurrence = schedule.next_occurrence(pickup, starting_point)
            if occurrence is None:
                continue
            found.append((occurrence, order, pickup))

        found.sort(key=lambda item: (item[0], item[1]))
        entries = tuple((pickup, occurrence) for occurrence, _, pickup in found)
        logger.debug(f"Next pickups after {starting_point}: {entries}")
        return cls(starting_point=starting_point, entries=entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[PickupName, datetime]]:
        return iter(self.entries)

    def is_empty(self) -> bool:
        return not self.entries

    def get(self, name: str) -> datetime | None:
        key = PickupName.of(name)
        for pickup, occurrence in self.entries:
            if pickup == key:
                return occurrence
        return None

    def as_dict(self) -> dict[str, datetime]:
        """Display name -> next occurrence, in chronological order."""
        return {pickup.display: occurrence for pickup, occurrence in self.entries}
