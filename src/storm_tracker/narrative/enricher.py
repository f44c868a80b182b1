"""Per-point narrative enrichment with a one-entry-per-point contract."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from ..exceptions import ConfigError, NarrativeServiceError
from ..log_setup import storm_context
from ..tracks.models import Storm, TrackPoint
from .groq_client import GroqChatClient
from .models import EnrichmentResult, FallbackReason

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")

# TrackPoint field -> accepted response keys, in preference order.
_ENTRY_FIELDS: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "description": ("description",),
    "fun_fact": ("funFact", "fun_fact"),
}


def extract_json(content: str) -> str:
    """Strip an optional fenced code block around a JSON document."""
    match = _CODE_FENCE_RE.search(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def format_point_line(index: int, point: TrackPoint) -> str:
    return (
        f"{index + 1}. {point.timestamp}: Lat {point.lat:.2f}, Lng {point.lng:.2f}, "
        f"Cat {point.category}, {point.wind_speed:.0f} mph, {point.pressure:g} mb"
    )


def build_messages(storm: Storm) -> list[dict[str, str]]:
    count = len(storm.points)
    summary = "\n".join(format_point_line(i, p) for i, p in enumerate(storm.points))
    system_prompt = (
        "You are a meteorological expert specializing in tropical cyclones.\n"
        "You analyze storm tracking data and provide detailed, educational descriptions.\n"
        "Always respond with valid JSON only, no text outside the JSON.\n"
        f"IMPORTANT: You must return exactly {count} points in your response."
    )
    user_prompt = (
        f"Analyze the following storm tracking data for {storm.name} "
        f"({count} total tracking points):\n\n"
        f"STORM TRACKING POINTS:\n{summary}\n\n"
        "INSTRUCTIONS:\n"
        "1. Provide a detailed 2-3 sentence description for EACH AND EVERY tracking point\n"
        "2. Create an interesting, educational fun fact for each point\n"
        "3. For milestone points (formation, peak intensity, landfall, dissipation), "
        "make the description more detailed\n\n"
        f"CRITICAL: You MUST return exactly {count} points in the JSON array, "
        "one for each tracking point listed above, in the same order.\n\n"
        "Return ONLY a valid JSON object:\n"
        '{"points": [{"name": "Descriptive milestone name", '
        '"description": "2-3 sentences describing what happened", '
        '"funFact": "Interesting educational fact"}]}'
    )
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def parse_entries(content: str) -> list[Any]:
    """Return the response's `points` list; raises NarrativeServiceError otherwise."""
    try:
        parsed = json.loads(extract_json(content))
    except ValueError as exc:
        raise NarrativeServiceError(f"Narrative response is not valid JSON: {exc}") from exc
    entries = parsed.get("points") if isinstance(parsed, dict) else None
    if not isinstance(entries, list) or not entries:
        raise NarrativeServiceError("Narrative response contained no points.")
    return entries


def _entry_value(entry: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def merge_entries(storm: Storm, entries: list[Any]) -> tuple[Storm, int]:
    """Apply entry i to point i; missing entries or empty fields keep the original."""
    applied = 0
    points: list[TrackPoint] = []
    for index, point in enumerate(storm.points):
        entry = entries[index] if index < len(entries) else None
        if not isinstance(entry, dict):
            points.append(point)
            continue
        applied += 1
        update = {}
        for field_name, keys in _ENTRY_FIELDS.items():
            value = _entry_value(entry, keys)
            if value is not None:
                update[field_name] = value
        points.append(point.model_copy(update=update) if update else point)
    return storm.model_copy(update={"points": tuple(points)}), applied


class NarrativeEnricher:
    """Best-effort enrichment: never raises past `enrich`/`enrich_with_result`."""

    def __init__(self, client: GroqChatClient, logger: logging.Logger) -> None:
        self.client = client
        self.logger = logger

    async def enrich(self, storm: Storm) -> Storm:
        return (await self.enrich_with_result(storm)).storm

    async def enrich_with_result(self, storm: Storm) -> EnrichmentResult:
        try:
            content = await self.client.complete(build_messages(storm), json_mode=True)
        except ConfigError as exc:
            return self._fallback(storm, "configuration_missing", str(exc))
        except NarrativeServiceError as exc:
            return self._fallback(storm, "service_error", str(exc))

        try:
            entries = parse_entries(content)
        except NarrativeServiceError as exc:
            return self._fallback(storm, "invalid_response", str(exc))

        enriched, applied = merge_entries(storm, entries)
        if applied == 0:
            return self._fallback(storm, "empty_response", "No usable point entries returned.")
        if applied < len(storm.points):
            self.logger.warning(
                "Narrative service returned %d/%d usable entries for %s; "
                "remaining points keep seed text",
                applied, len(storm.points), storm.id,
                extra=storm_context(storm_id=storm.id),
            )
        return EnrichmentResult(status="enriched", storm=enriched, entries_applied=applied)

    def _fallback(self, storm: Storm, reason: FallbackReason, detail: str) -> EnrichmentResult:
        self.logger.warning(
            "Narrative enrichment skipped for %s (%s): %s", storm.id, reason, detail,
            extra=storm_context(storm_id=storm.id, reason=reason),
        )
        return EnrichmentResult(status="fallback", storm=storm, reason=reason, detail=detail)
