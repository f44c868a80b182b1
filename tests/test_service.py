"""End-to-end service tests: query parsing, enrichment paths, translation seam."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from storm_tracker.exceptions import StormLookupError, StormNotFoundError
from storm_tracker.narrative.enricher import NarrativeEnricher
from storm_tracker.narrative.groq_client import GroqChatClient
from storm_tracker.service import StormTrackService, parse_query
from storm_tracker.tracks.fetch import SourceReader
from storm_tracker.tracks.locator import StormLocator
from storm_tracker.translation import translate_storm

_LOGGER = logging.getLogger("test_service")

CSV_TEXT = (
    "ISO_TIME,SID,SEASON,NUMBER,NAME,LAT,LON,USA_WIND,USA_PRES,BASIN\n"
    " ,,Year,,,degrees_north,degrees_east,kts,mb,\n"
    "2005-08-23 18:00:00,2005236N23285,2005,12,KATRINA,23.1,-75.1,65,999,NA\n"
    "2005-08-24 00:00:00,2005236N23285,2005,12,KATRINA,23.4,-75.7,70,,NA\n"
)


def _make_settings(tmp_path: Path, **overrides: Any) -> Any:
    csv_path = tmp_path / "ibtracs.csv"
    bst_path = tmp_path / "bst_all.txt"
    csv_path.write_text(CSV_TEXT, encoding="utf-8")
    bst_path.write_text("", encoding="utf-8")
    defaults = {
        "ibtracs_source": str(csv_path),
        "bst_source": str(bst_path),
        "source_timeout_seconds": 5.0,
        "source_user_agent": "storm-tracker-tests/0.1",
        "groq_api_key": "gsk_testkey1234567890",
        "groq_api_url": "https://api.groq.com/openai/v1/chat/completions",
        "groq_model": "llama-3.1-8b-instant",
        "groq_temperature": 0.7,
        "groq_max_tokens": 4000,
        "groq_timeout_seconds": 5.0,
        "enrichment_enabled": True,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


class _UpperTranslator:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    async def translate(self, text: str, target_lang: str, source_lang: str = "en") -> str:
        self.calls.append((text, target_lang, source_lang))
        return text.upper()


def _build_service(
    settings: Any,
    http: httpx.AsyncClient,
    reader: SourceReader,
    **kwargs: Any,
) -> StormTrackService:
    enricher = NarrativeEnricher(GroqChatClient(settings, _LOGGER, client=http), _LOGGER)
    return StormTrackService(
        locator=StormLocator.from_settings(settings, reader, _LOGGER),
        enricher=enricher,
        logger=_LOGGER,
        **kwargs,
    )


def _groq_handler(request: httpx.Request) -> httpx.Response:
    entries = [
        {"name": "Bahamas Genesis", "description": "Formed near the Bahamas.", "funFact": "F1"},
        {"name": "Florida Approach", "description": "Headed west.", "funFact": "F2"},
    ]
    content = json.dumps({"points": entries})
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("Katrina 2005", ("Katrina", "2005")),
        ("  Katrina   ", ("Katrina", None)),
        ("Katrina 2005 extra", ("Katrina", "2005")),
    ],
)
def test_parse_query(query: str, expected: tuple[str, str | None]) -> None:
    assert parse_query(query) == expected


def test_parse_query_rejects_blank() -> None:
    with pytest.raises(StormLookupError):
        parse_query("   ")


def test_search_runs_locate_then_enrich(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)

    async def _run() -> Any:
        http = httpx.AsyncClient(transport=httpx.MockTransport(_groq_handler))
        async with http, SourceReader(settings, _LOGGER) as reader:
            return await _build_service(settings, http, reader).search("katrina 2005")

    storm = asyncio.run(_run())

    assert [p.name for p in storm.points] == ["Bahamas Genesis", "Florida Approach"]
    assert storm.points[0].category == 1


def test_enrich_flag_off_keeps_seed_text(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)

    async def _run() -> Any:
        http = httpx.AsyncClient(transport=httpx.MockTransport(_groq_handler))
        async with http, SourceReader(settings, _LOGGER) as reader:
            service = _build_service(settings, http, reader)
            return await service.track_with_result("KATRINA", "2005", enrich=False)

    result = asyncio.run(_run())

    assert result.reason == "disabled"
    assert [p.name for p in result.storm.points] == ["Formation", "Dissipation"]


def test_translator_is_applied_after_enrichment(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path)
    translator = _UpperTranslator()

    async def _run() -> Any:
        http = httpx.AsyncClient(transport=httpx.MockTransport(_groq_handler))
        async with http, SourceReader(settings, _LOGGER) as reader:
            service = _build_service(
                settings, http, reader, translator=translator, target_lang="es"
            )
            return await service.track("KATRINA", "2005")

    storm = asyncio.run(_run())

    assert storm.points[0].description == "FORMED NEAR THE BAHAMAS."
    assert storm.points[1].fun_fact == "F2"
    assert storm.points[0].name == "Bahamas Genesis"
    assert len(translator.calls) == 4
    assert all(call[1:] == ("es", "en") for call in translator.calls)


def test_translate_storm_is_noop_for_same_language(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path, enrichment_enabled=False)

    async def _run() -> Any:
        async with StormTrackService.open(settings, _LOGGER) as service:
            assert service.enricher is None
            storm = await service.track("KATRINA")
            return storm, await translate_storm(storm, _UpperTranslator(), "en")

    storm, translated = asyncio.run(_run())

    assert translated is storm


def test_open_service_reports_missing_key_without_raising(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path, groq_api_key=None)

    async def _run() -> Any:
        async with StormTrackService.open(settings, _LOGGER) as service:
            return await service.track_with_result("KATRINA", "2005")

    result = asyncio.run(_run())

    assert result.reason == "configuration_missing"
    assert result.storm.points[0].name == "Formation"


def test_not_found_propagates_to_caller(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path, groq_api_key=None)

    async def _run() -> Any:
        async with StormTrackService.open(settings, _LOGGER) as service:
            return await service.search("Nonexistent 1800")

    with pytest.raises(StormNotFoundError, match="Nonexistent"):
        asyncio.run(_run())


def test_available_storms_via_service(tmp_path: Path) -> None:
    settings = _make_settings(tmp_path, groq_api_key=None)

    async def _run() -> Any:
        async with StormTrackService.open(settings, _LOGGER) as service:
            return await service.available_storms()

    entries = asyncio.run(_run())

    assert [(e.name, e.year) for e in entries] == [("KATRINA", "2005")]
