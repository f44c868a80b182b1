"""End-to-end storm lookup: locate, normalize, enrich, optionally translate."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from .exceptions import StormLookupError
from .narrative.enricher import NarrativeEnricher
from .narrative.groq_client import GroqChatClient
from .narrative.models import EnrichmentResult
from .tracks.fetch import SourceReader
from .tracks.locator import StormLocator
from .tracks.models import Storm, StormIndexEntry
from .translation import Translator, translate_storm


def parse_query(query: str) -> tuple[str, str | None]:
    """Split a free-text query of the form ``NAME [YEAR]``."""
    parts = query.split()
    if not parts:
        raise StormLookupError("Please provide a storm name.")
    return parts[0], parts[1] if len(parts) > 1 else None


class StormTrackService:
    """Facade used by the CLI and embedding applications."""

    def __init__(
        self,
        locator: StormLocator,
        enricher: NarrativeEnricher | None,
        logger: logging.Logger,
        translator: Translator | None = None,
        target_lang: str | None = None,
    ) -> None:
        self.locator = locator
        self.enricher = enricher
        self.logger = logger
        self.translator = translator
        self.target_lang = target_lang

    @classmethod
    @asynccontextmanager
    async def open(
        cls,
        settings: Any,
        logger: logging.Logger,
        translator: Translator | None = None,
        target_lang: str | None = None,
    ) -> AsyncIterator[StormTrackService]:
        """Build a service whose HTTP clients are closed on exit."""
        async with SourceReader(settings, logger) as reader, GroqChatClient(
            settings, logger
        ) as chat:
            enricher = NarrativeEnricher(chat, logger) if settings.enrichment_enabled else None
            yield cls(
                locator=StormLocator.from_settings(settings, reader, logger),
                enricher=enricher,
                logger=logger,
                translator=translator,
                target_lang=target_lang,
            )

    async def track_with_result(
        self, name: str, year: str | None = None, *, enrich: bool = True
    ) -> EnrichmentResult:
        """Locate the storm and report which enrichment path was taken.

        Raises StormNotFoundError; enrichment problems only show up in the result.
        """
        storm = await self.locator.locate(name, year)
        if enrich and self.enricher is not None:
            result = await self.enricher.enrich_with_result(storm)
        else:
            result = EnrichmentResult(status="fallback", storm=storm, reason="disabled")

        if self.translator is not None and self.target_lang:
            translated = await translate_storm(result.storm, self.translator, self.target_lang)
            result = result.model_copy(update={"storm": translated})
        return result

    async def track(self, name: str, year: str | None = None) -> Storm:
        return (await self.track_with_result(name, year)).storm

    async def search(self, query: str) -> Storm:
        name, year = parse_query(query)
        return await self.track(name, year)

    async def available_storms(self) -> list[StormIndexEntry]:
        return await self.locator.available_storms()
