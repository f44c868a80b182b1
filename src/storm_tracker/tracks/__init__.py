"""Storm track sources, parsers and normalization."""

from .base import TrackSource
from .classify import category_from_wind, estimate_wind_from_pressure, sample_category
from .locator import StormLocator
from .models import RawObservation, Storm, StormIndexEntry, StormRecord, TrackPoint
from .normalizer import normalize

__all__ = [
    "RawObservation",
    "Storm",
    "StormIndexEntry",
    "StormLocator",
    "StormRecord",
    "TrackPoint",
    "TrackSource",
    "category_from_wind",
    "estimate_wind_from_pressure",
    "normalize",
    "sample_category",
]
