"""Multi-source storm lookup with fixed source precedence."""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import StormLookupError, StormNotFoundError, StormSourceError
from ..log_setup import storm_context
from .base import TrackSource
from .fetch import SourceReader
from .models import Storm, StormIndexEntry, StormRecord
from .normalizer import normalize
from .sources import BSTSource, IBTrACSSource

MAX_INDEX_ENTRIES = 100


def keep_measured(record: StormRecord) -> StormRecord:
    """Drop observations carrying neither a measured wind nor a measured pressure."""
    kept = tuple(
        item
        for item in record.observations
        if item.has_measured_wind or item.has_measured_pressure
    )
    return record.model_copy(update={"observations": kept})


class StormLocator:
    """Finds a storm in the tabular source first, then the fixed-width source.

    The IBTrACS table is the richer structured source and always wins when it
    holds measured data for the query; the best-track file is the fallback.
    """

    def __init__(
        self,
        tabular: TrackSource,
        fixed_width: TrackSource,
        logger: logging.Logger,
    ) -> None:
        self.tabular = tabular
        self.fixed_width = fixed_width
        self.logger = logger

    @classmethod
    def from_settings(
        cls, settings: Any, reader: SourceReader, logger: logging.Logger
    ) -> StormLocator:
        return cls(
            tabular=IBTrACSSource(reader, settings.ibtracs_source),
            fixed_width=BSTSource(reader, settings.bst_source),
            logger=logger,
        )

    async def locate(self, name: str, year: str | None = None) -> Storm:
        """Return the normalized storm or raise StormNotFoundError."""
        name = name.strip()
        year = (year or "").strip() or None
        if not name:
            raise StormLookupError("Please provide a storm name.")

        record = await self._find(self.tabular, name, year)
        if record is not None:
            total = len(record.observations)
            record = keep_measured(record)
            if record.observations:
                self.logger.info(
                    "Using IBTrACS track for %s: %d/%d points with data",
                    name, len(record.observations), total,
                    extra=storm_context(storm_name=name, season=record.season, source="ibtracs"),
                )
                return normalize(record)

        record = await self._find(self.fixed_width, name, year)
        if record is not None and record.observations:
            self.logger.info(
                "Using best-track file for %s: %d points",
                name, len(record.observations),
                extra=storm_context(storm_name=name, season=record.season, source="bst"),
            )
            return normalize(record)

        raise StormNotFoundError(name, year)

    async def _find(
        self, source: TrackSource, name: str, year: str | None
    ) -> StormRecord | None:
        try:
            return await source.find(name, year)
        except StormSourceError as exc:
            self.logger.warning(
                "Track source %s unavailable; skipping: %s", source.source_format, exc,
                extra=storm_context(storm_name=name, season=year, source=source.source_format),
            )
            return None

    async def available_storms(self, limit: int = MAX_INDEX_ENTRIES) -> list[StormIndexEntry]:
        """Storms known to either source, newest season first."""
        entries: list[StormIndexEntry] = []
        seen: set[tuple[str, str]] = set()
        for source in (self.tabular, self.fixed_width):
            try:
                listed = await source.list_storms()
            except StormSourceError as exc:
                self.logger.warning(
                    "Track source %s unavailable for listing: %s", source.source_format, exc,
                    extra=storm_context(source=source.source_format),
                )
                continue
            for entry in listed:
                key = (entry.name, entry.year)
                if key in seen:
                    continue
                seen.add(key)
                entries.append(entry)
        entries.sort(key=lambda item: item.year, reverse=True)
        return entries[:limit]
