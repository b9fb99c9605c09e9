"""File-based schedule storage adapter."""

import logging
from pathlib import Path

from ..core.schedule import Schedule
from ..ical import from_ical, to_ical

logger = logging.getLogger(__name__)


class FileScheduleStore:
    """
    File-based schedule storage.

    Implements ScheduleStore protocol. The whole schedule is one iCalendar
    file; an empty schedule is stored as no file at all.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> Schedule:
        if not self.path.exists():
            return Schedule()
        schedule = from_ical(self.path.read_text())
        logger.debug(f"Loaded {len(schedule)} event(s) from {self.path}")
        return schedule

    def save(self, schedule: Schedule) -> None:
        if schedule.is_empty():
            if self.path.exists():
                self.path.unlink()
                logger.info(f"Removed empty schedule {self.path}")
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(to_ical(schedule))
        logger.debug(f"Saved {len(schedule)} event(s) to {self.path}")

    def exists(self) -> bool:
        return self.path.exists()
