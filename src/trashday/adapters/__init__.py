"""Adapters - I/O implementations of ports."""

from .file_store import FileScheduleStore

__all__ = [
    "FileScheduleStore",
]
