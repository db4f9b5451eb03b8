"""Exception types for since-when."""

from __future__ import annotations


class SinceWhenError(Exception):
    """Base class for all since-when errors."""


class DataFormatError(SinceWhenError, ValueError):
    """A stored occurrence date could not be parsed."""


class InvalidDateError(SinceWhenError, ValueError):
    """A year/month/day triple does not name a real calendar date."""


class StorageError(SinceWhenError):
    """The event store could not be opened or queried."""


class DuplicateEventError(SinceWhenError):
    """An event with this name is already tracked."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Event already exists: {name}")
        self.name = name


class UnknownEventError(SinceWhenError):
    """No event with this name is tracked."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No such event: {name}")
        self.name = name
