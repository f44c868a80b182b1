"""Async text loader for track source files (local paths or http(s) URLs)."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import httpx

from ..exceptions import StormSourceError
from ..redaction import sanitize_text


def is_remote(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


class SourceReader:
    """Reads a whole source file as UTF-8 text."""

    def __init__(
        self,
        settings: Any,
        logger: logging.Logger,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings
        self.logger = logger
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=settings.source_timeout_seconds,
            headers={"User-Agent": settings.source_user_agent},
            follow_redirects=True,
        )

    async def __aenter__(self) -> SourceReader:
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def read_text(self, location: str) -> str:
        if is_remote(location):
            return await self._fetch(location)
        return await self._read_file(Path(location))

    async def _fetch(self, url: str) -> str:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise StormSourceError(
                f"Source fetch failed with status {exc.response.status_code} at {url}: "
                f"{sanitize_text(exc.response.text[:300])}"
            ) from exc
        except httpx.HTTPError as exc:
            raise StormSourceError(
                f"Source request failed at {url}: {sanitize_text(str(exc))}"
            ) from exc
        return response.content.decode("utf-8", errors="replace")

    async def _read_file(self, path: Path) -> str:
        try:
            return await asyncio.to_thread(path.read_text, encoding="utf-8", errors="replace")
        except OSError as exc:
            raise StormSourceError(f"Failed reading source file {path}: {exc}") from exc
