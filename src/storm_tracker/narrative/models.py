"""Typed outcome of a narrative enrichment attempt."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from ..tracks.models import Storm

EnrichmentStatus = Literal["enriched", "fallback"]
FallbackReason = Literal[
    "disabled",
    "configuration_missing",
    "service_error",
    "invalid_response",
    "empty_response",
]


class EnrichmentResult(BaseModel):
    """Either the enriched storm or the untouched input with the reason it was kept."""

    model_config = ConfigDict(frozen=True)

    status: EnrichmentStatus
    storm: Storm
    reason: FallbackReason | None = None
    detail: str | None = None
    entries_applied: int = 0

    @property
    def enriched(self) -> bool:
        return self.status == "enriched"
