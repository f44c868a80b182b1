"""IBTrACS-style comma-separated track parser."""

from __future__ import annotations

import math

from .models import RawObservation, StormIndexEntry, StormRecord

KNOTS_TO_MPH = 1.15078
HEADER_LINES = 2
MIN_FIELDS = 10

# Column positions in the CSV export.
COL_TIMESTAMP = 0
COL_SEASON = 2
COL_NAME = 4
COL_LAT = 5
COL_LNG = 6
COL_WIND = 7
COL_PRESSURE = 8
COL_BASIN = 9


def _parse_float(value: str) -> float | None:
    try:
        parsed = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _data_lines(text: str) -> list[str]:
    lines = [line for line in text.splitlines() if line.strip()]
    return lines[HEADER_LINES:]


def parse_ibtracs_csv(text: str, name: str, year: str | None = None) -> StormRecord | None:
    """Collect every row for `name` (and `year`, when given) into a StormRecord.

    Wind is converted from knots to mph only when present and positive. Rows
    without usable coordinates are dropped; wind and pressure are flagged
    independently so callers can decide which partial rows to keep.
    """
    search_name = name.strip().upper()
    search_year = (year or "").strip()

    season: str | None = None
    basin: str | None = None
    display_name: str | None = None
    observations: list[RawObservation] = []

    for line in _data_lines(text):
        values = line.split(",")
        if len(values) < MIN_FIELDS:
            continue

        row_name = values[COL_NAME].strip().upper()
        row_season = values[COL_SEASON].strip()
        if row_name != search_name:
            continue
        if search_year and row_season != search_year:
            continue

        if display_name is None:
            display_name = values[COL_NAME].strip() or name.strip()
            season = row_season
            basin = values[COL_BASIN].strip() or "Unknown"

        lat = _parse_float(values[COL_LAT])
        lng = _parse_float(values[COL_LNG])
        if lat is None or lng is None:
            continue

        wind_knots = _parse_float(values[COL_WIND])
        pressure = _parse_float(values[COL_PRESSURE])
        has_wind = wind_knots is not None and wind_knots > 0
        observations.append(
            RawObservation(
                timestamp=values[COL_TIMESTAMP].strip(),
                lat=lat,
                lng=lng,
                wind_speed_mph=wind_knots * KNOTS_TO_MPH if has_wind else None,
                pressure_mb=pressure,
                has_measured_wind=has_wind,
                has_measured_pressure=pressure is not None,
            )
        )

    if not observations or display_name is None:
        return None
    return StormRecord(
        name=display_name,
        season=season or "",
        basin=basin or "Unknown",
        source="ibtracs",
        observations=tuple(observations),
    )


def list_ibtracs_storms(text: str) -> list[StormIndexEntry]:
    """Distinct name+season keys in file order."""
    seen: set[tuple[str, str]] = set()
    entries: list[StormIndexEntry] = []
    for line in _data_lines(text):
        values = line.split(",")
        if len(values) <= COL_NAME:
            continue
        storm_name = values[COL_NAME].strip().upper()
        season = values[COL_SEASON].strip()
        if not storm_name or not season or (storm_name, season) in seen:
            continue
        seen.add((storm_name, season))
        entries.append(StormIndexEntry(name=storm_name, year=season, source="ibtracs"))
    return entries
