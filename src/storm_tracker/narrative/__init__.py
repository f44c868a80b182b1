"""Generative narrative enrichment for storm tracks."""

from .enricher import NarrativeEnricher
from .groq_client import GroqChatClient
from .models import EnrichmentResult

__all__ = [
    "EnrichmentResult",
    "GroqChatClient",
    "NarrativeEnricher",
]
