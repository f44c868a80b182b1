"""Source-agnostic storm track interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .models import SourceFormat, StormIndexEntry, StormRecord


class TrackSource(ABC):
    """Base contract for storm track sources used by the locator."""

    source_format: SourceFormat

    @abstractmethod
    async def find(self, name: str, year: str | None = None) -> StormRecord | None:
        """Return the storm's raw record, or None when the source has no match."""

    @abstractmethod
    async def list_storms(self) -> list[StormIndexEntry]:
        """Return the distinct storms this source knows about."""
