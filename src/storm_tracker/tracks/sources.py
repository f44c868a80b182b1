"""File-backed track sources for the two supported formats."""

from __future__ import annotations

from .base import TrackSource
from .bst import list_bst_storms, parse_bst
from .fetch import SourceReader
from .ibtracs import list_ibtracs_storms, parse_ibtracs_csv
from .models import StormIndexEntry, StormRecord


class IBTrACSSource(TrackSource):
    """Comma-separated IBTrACS export."""

    source_format = "ibtracs"

    def __init__(self, reader: SourceReader, location: str) -> None:
        self.reader = reader
        self.location = location

    async def find(self, name: str, year: str | None = None) -> StormRecord | None:
        text = await self.reader.read_text(self.location)
        return parse_ibtracs_csv(text, name, year)

    async def list_storms(self) -> list[StormIndexEntry]:
        text = await self.reader.read_text(self.location)
        return list_ibtracs_storms(text)


class BSTSource(TrackSource):
    """RSMC Tokyo best-track file."""

    source_format = "bst"

    def __init__(self, reader: SourceReader, location: str) -> None:
        self.reader = reader
        self.location = location

    async def find(self, name: str, year: str | None = None) -> StormRecord | None:
        text = await self.reader.read_text(self.location)
        return parse_bst(text, name, year)

    async def list_storms(self) -> list[StormIndexEntry]:
        text = await self.reader.read_text(self.location)
        return list_bst_storms(text)
