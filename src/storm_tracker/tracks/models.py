"""Typed models for raw and normalized storm tracks."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SourceFormat = Literal["ibtracs", "bst"]


class RawObservation(BaseModel):
    """One timestamped reading scanned from a source file line."""

    model_config = ConfigDict(frozen=True)

    timestamp: str
    lat: float
    lng: float
    wind_speed_mph: float | None = None
    pressure_mb: float | None = None
    has_measured_wind: bool = False
    has_measured_pressure: bool = False


class StormRecord(BaseModel):
    """All raw observations for a single name+season key from one source."""

    model_config = ConfigDict(frozen=True)

    name: str
    season: str
    basin: str = "Unknown"
    source: SourceFormat
    observations: tuple[RawObservation, ...] = ()


class TrackPoint(BaseModel):
    """Normalized track point handed to the presentation layer."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(description="Milestone label, e.g. 'Formation'")
    lat: float
    lng: float
    category: int = Field(ge=-1, le=5)
    wind_speed: float = Field(description="Sustained wind in mph")
    pressure: float = Field(description="Central pressure in mb")
    description: str
    fun_fact: str
    timestamp: str


class Storm(BaseModel):
    """Normalized storm with its chronological track."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    emoji: str
    color: str
    points: tuple[TrackPoint, ...] = Field(min_length=1)


class StormIndexEntry(BaseModel):
    """Distinct name+year key advertised by a source."""

    model_config = ConfigDict(frozen=True)

    name: str
    year: str
    source: SourceFormat
