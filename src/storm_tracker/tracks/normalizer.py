"""Turn raw source observations into a normalized Storm."""

from __future__ import annotations

import math
import zlib
from typing import Literal

from .classify import category_from_wind, estimate_wind_from_pressure
from .models import RawObservation, Storm, StormRecord, TrackPoint

Trend = Literal["strengthening", "weakening", "steady"]

DEFAULT_PRESSURE_MB = 1005.0

STORM_COLORS = (
    "#FF6B6B", "#4ECDC4", "#A855F7", "#3B82F6",
    "#F59E0B", "#10B981", "#EF4444", "#8B5CF6",
)
STORM_EMOJIS = ("🌀", "🌪️", "⛈️", "🌊", "💨", "🌧️", "⚡", "🔥")

FUN_FACTS = {
    "ibtracs": (
        "Tropical cyclones get their energy from warm ocean waters. "
        "Category 5 hurricanes can produce winds over 157 mph!"
    ),
    "bst": (
        "Historical storm records help scientists understand climate patterns "
        "and improve forecasting. Lower pressure means stronger storms!"
    ),
}


def _has_valid_position(observation: RawObservation) -> bool:
    return math.isfinite(observation.lat) and math.isfinite(observation.lng)


def resolve_wind(observation: RawObservation) -> float:
    """Measured wind when positive, else the pressure-based estimate."""
    wind = observation.wind_speed_mph
    if wind is not None and wind > 0:
        return wind
    return estimate_wind_from_pressure(resolve_pressure(observation))


def resolve_pressure(observation: RawObservation) -> float:
    if observation.pressure_mb is not None:
        return observation.pressure_mb
    return DEFAULT_PRESSURE_MB


def milestone_label(index: int, count: int) -> str:
    if index == 0:
        return "Formation"
    if index == count - 1:
        return "Dissipation"
    return f"Position {index + 1}"


def classify_trend(
    record: StormRecord,
    *,
    category: int,
    pressure: float,
    previous_category: int,
    previous_pressure: float,
) -> Trend:
    """Compare a point with its predecessor.

    IBTrACS tracks compare category. Best-track categories are themselves
    derived from pressure, so those tracks compare pressure directly.
    """
    if record.source == "bst":
        if pressure < previous_pressure:
            return "strengthening"
        if pressure > previous_pressure:
            return "weakening"
        return "steady"
    if category > previous_category:
        return "strengthening"
    if category < previous_category:
        return "weakening"
    return "steady"


def _where(record: StormRecord) -> str:
    return f"the {record.basin} basin during the {record.season} season"


def seed_description(
    record: StormRecord,
    *,
    trend: Trend | None,
    category: int,
    wind: float,
    pressure: float,
) -> str:
    """Templated description; `trend` is None for the first point."""
    name = record.name
    where = _where(record)
    if trend is None:
        return (
            f"{name} formed at this location in {where}. Initial intensity was "
            f"category {category} with winds of {wind:.0f} mph and a central "
            f"pressure of {pressure:.0f} mb."
        )
    if trend == "strengthening":
        return (
            f"{name} strengthened to category {category} at this location in {where}. "
            f"Winds increased to {wind:.0f} mph as pressure fell to {pressure:.0f} mb."
        )
    if trend == "weakening":
        return (
            f"{name} weakened to category {category} at this location in {where}. "
            f"Winds dropped to {wind:.0f} mph as pressure rose to {pressure:.0f} mb."
        )
    return (
        f"{name} maintained category {category} intensity at this location in {where}, "
        f"with winds of {wind:.0f} mph and a pressure of {pressure:.0f} mb."
    )


def dissipation_description(
    record: StormRecord,
    *,
    wind: float,
    pressure: float,
    peak_category: int,
    lowest_pressure: float,
) -> str:
    """Closing sentence for the last point, summarizing the track's peak.

    IBTrACS tracks report the highest category reached; best-track tracks
    report the lowest central pressure.
    """
    name = record.name
    where = _where(record)
    if record.source == "bst":
        peak = f"Lowest recorded central pressure was {lowest_pressure:.0f} mb."
    else:
        peak = f"The storm reached a maximum intensity of category {peak_category}."
    return (
        f"{name} dissipated at this location in {where}, marking the end of its track "
        f"with winds of {wind:.0f} mph and a pressure of {pressure:.0f} mb. {peak}"
    )


def storm_id(record: StormRecord) -> str:
    return f"{record.name.lower()}-{record.season}"


def _pick(options: tuple[str, ...], key: str) -> str:
    return options[zlib.crc32(key.encode("utf-8")) % len(options)]


def normalize(record: StormRecord) -> Storm:
    """Build the public Storm for a located record.

    Raises ValueError when the record has no usable observations; Storm
    requires at least one point.
    """
    observations = [item for item in record.observations if _has_valid_position(item)]
    count = len(observations)
    base_id = storm_id(record)
    fun_fact = FUN_FACTS[record.source]

    resolved = []
    for observation in observations:
        wind = resolve_wind(observation)
        pressure = resolve_pressure(observation)
        resolved.append((observation, wind, pressure, category_from_wind(wind)))
    if not resolved:
        raise ValueError(f"Storm record {base_id} has no observations with valid coordinates.")
    peak_category = max(item[3] for item in resolved)
    lowest_pressure = min(item[2] for item in resolved)

    points: list[TrackPoint] = []
    for index, (observation, wind, pressure, category) in enumerate(resolved):
        if index == 0:
            description = seed_description(
                record, trend=None, category=category, wind=wind, pressure=pressure
            )
        elif index == count - 1:
            description = dissipation_description(
                record,
                wind=wind,
                pressure=pressure,
                peak_category=peak_category,
                lowest_pressure=lowest_pressure,
            )
        else:
            _, _, previous_pressure, previous_category = resolved[index - 1]
            trend = classify_trend(
                record,
                category=category,
                pressure=pressure,
                previous_category=previous_category,
                previous_pressure=previous_pressure,
            )
            description = seed_description(
                record, trend=trend, category=category, wind=wind, pressure=pressure
            )

        points.append(
            TrackPoint(
                id=f"{base_id}-{index}",
                name=milestone_label(index, count),
                lat=observation.lat,
                lng=observation.lng,
                category=category,
                wind_speed=wind,
                pressure=pressure,
                description=description,
                fun_fact=fun_fact,
                timestamp=observation.timestamp,
            )
        )

    return Storm(
        id=base_id,
        name=record.name,
        emoji=_pick(STORM_EMOJIS, base_id),
        color=_pick(STORM_COLORS, base_id),
        points=tuple(points),
    )
