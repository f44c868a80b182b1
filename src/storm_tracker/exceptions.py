"""Application exception classes."""

from __future__ import annotations


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class StormSourceError(Exception):
    """Raised when a storm track source cannot be read."""


class StormLookupError(Exception):
    """Raised when a storm query cannot be answered."""


class StormNotFoundError(StormLookupError):
    """Raised when no source produced a non-empty track for the query."""

    def __init__(self, name: str, year: str | None = None) -> None:
        self.name = name
        self.year = year or None
        message = f'Could not find storm "{name}"'
        if self.year:
            message += f" in {self.year}"
        message += ". Please check the storm name and year."
        super().__init__(message)


class NarrativeServiceError(Exception):
    """Raised when the narrative service fails or breaks the response contract."""
