"""Schedule storage interface."""

from typing import Protocol

from ..core.schedule import Schedule


class ScheduleStore(Protocol):
    """Interface for loading and saving the pickup schedule."""

    def load(self) -> Schedule:
        """Load the stored schedule. An absent schedule loads as empty."""
        ...

    def save(self, schedule: Schedule) -> None:
        """Replace the stored schedule."""
        ...

    def exists(self) -> bool:
        """Check if a schedule has been stored."""
        ...
