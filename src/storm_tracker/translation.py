"""Seam for the external free-text translation collaborator."""

from __future__ import annotations

from typing import Protocol

from .tracks.models import Storm


class Translator(Protocol):
    """Returns translated text, or the original text unchanged on failure."""

    async def translate(self, text: str, target_lang: str, source_lang: str = "en") -> str:
        ...


async def translate_storm(
    storm: Storm,
    translator: Translator,
    target_lang: str,
    source_lang: str = "en",
) -> Storm:
    """Translate each point's description and fun fact, one point at a time."""
    if target_lang == source_lang:
        return storm
    points = []
    for point in storm.points:
        description = await translator.translate(point.description, target_lang, source_lang)
        fun_fact = await translator.translate(point.fun_fact, target_lang, source_lang)
        points.append(
            point.model_copy(
                update={
                    "description": description or point.description,
                    "fun_fact": fun_fact or point.fun_fact,
                }
            )
        )
    return storm.model_copy(update={"points": tuple(points)})
