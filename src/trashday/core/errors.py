"""Error taxonomy for the recurrence core."""


class TrashDayError(Exception):
    """Base class for all trashday errors."""


class PatternRangeError(TrashDayError, ValueError):
    """A recurrence pattern field is outside its legal domain."""


class EventShapeError(TrashDayError, ValueError):
    """An event fails structural validation."""


class UnsatisfiableSearchError(TrashDayError, LookupError):
    """A bounded occurrence search found nothing within its horizon."""


class ScheduleFormatError(TrashDayError, ValueError):
    """Persisted schedule text could not be read."""
