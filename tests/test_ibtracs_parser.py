"""IBTrACS CSV parser tests."""

from __future__ import annotations

import pytest

from storm_tracker.tracks.ibtracs import (
    KNOTS_TO_MPH,
    list_ibtracs_storms,
    parse_ibtracs_csv,
)

HEADER = (
    "ISO_TIME,SID,SEASON,NUMBER,NAME,LAT,LON,USA_WIND,USA_PRES,BASIN\n"
    " ,,Year,,,degrees_north,degrees_east,kts,mb,\n"
)


def _csv(*rows: str) -> str:
    return HEADER + "\n".join(rows) + "\n"


def test_matching_rows_convert_wind_to_mph_and_flag_fields() -> None:
    text = _csv(
        "2005-08-23 18:00:00,2005236N23285,2005,12,KATRINA,23.1,-75.1,65,999,NA",
        "2005-08-24 00:00:00,2005236N23285,2005,12,KATRINA,23.4,-75.7,70,,NA",
    )
    record = parse_ibtracs_csv(text, "Katrina", "2005")

    assert record is not None
    assert record.name == "KATRINA"
    assert record.season == "2005"
    assert record.basin == "NA"
    assert record.source == "ibtracs"
    assert len(record.observations) == 2

    first, second = record.observations
    assert first.timestamp == "2005-08-23 18:00:00"
    assert first.wind_speed_mph == pytest.approx(65 * KNOTS_TO_MPH)
    assert first.pressure_mb == 999
    assert first.has_measured_wind and first.has_measured_pressure
    assert second.wind_speed_mph == pytest.approx(70 * KNOTS_TO_MPH)
    assert second.pressure_mb is None
    assert second.has_measured_wind
    assert not second.has_measured_pressure


def test_zero_or_missing_wind_is_not_measured() -> None:
    text = _csv(
        "2005-08-23 18:00:00,X,2005,12,KATRINA,23.1,-75.1,0,1002,NA",
        "2005-08-24 00:00:00,X,2005,12,KATRINA,23.4,-75.7, ,1001,NA",
    )
    record = parse_ibtracs_csv(text, "KATRINA")

    assert record is not None
    assert [o.wind_speed_mph for o in record.observations] == [None, None]
    assert [o.has_measured_wind for o in record.observations] == [False, False]
    assert [o.pressure_mb for o in record.observations] == [1002, 1001]


def test_rows_with_unparsable_coordinates_are_dropped() -> None:
    text = _csv(
        "2005-08-23 18:00:00,X,2005,12,KATRINA,,-75.1,65,999,NA",
        "2005-08-24 00:00:00,X,2005,12,KATRINA,23.4,abc,70,995,NA",
        "2005-08-24 06:00:00,X,2005,12,KATRINA,23.6,-76.0,75,990,NA",
    )
    record = parse_ibtracs_csv(text, "KATRINA", "2005")

    assert record is not None
    assert len(record.observations) == 1
    assert record.observations[0].timestamp == "2005-08-24 06:00:00"


def test_name_match_is_exact_and_case_insensitive() -> None:
    text = _csv(
        "2022-09-23 00:00:00,X,2022,9,IAN,13.0,-71.0,30,1008,NA",
        "2022-09-23 00:00:00,Y,2022,9,IANTHE,14.0,-60.0,30,1008,NA",
        "2022-09-23 00:00:00,Z,2022,9, ian ,13.5,-71.5,35,1006,NA",
    )
    record = parse_ibtracs_csv(text, "  Ian ")

    assert record is not None
    assert [o.lat for o in record.observations] == [13.0, 13.5]


def test_year_filter_is_exact_when_given() -> None:
    text = _csv(
        "2023-08-01 00:00:00,A,2023,1,DORA,12.0,-120.0,50,995,EP",
        "2024-08-01 00:00:00,B,2024,1,DORA,13.0,-121.0,55,990,EP",
    )
    record = parse_ibtracs_csv(text, "DORA", "2024")

    assert record is not None
    assert record.season == "2024"
    assert len(record.observations) == 1
    assert parse_ibtracs_csv(text, "DORA", "202") is None
    assert len(parse_ibtracs_csv(text, "DORA").observations) == 2  # type: ignore[union-attr]


def test_short_rows_and_header_lines_are_skipped() -> None:
    text = (
        "KATRINA,KATRINA,2005,1,KATRINA,1,1,1,1,NA\n"
        "KATRINA,KATRINA,2005,1,KATRINA,1,1,1,1,NA\n"
        "2005-08-23 18:00:00,X,2005,12,KATRINA,23.1,-75.1,65\n"
    )
    assert parse_ibtracs_csv(text, "KATRINA") is None


def test_missing_basin_defaults_to_unknown() -> None:
    text = _csv("2005-08-23 18:00:00,X,2005,12,KATRINA,23.1,-75.1,65,999,")
    record = parse_ibtracs_csv(text, "KATRINA")

    assert record is not None
    assert record.basin == "Unknown"


def test_no_match_returns_none() -> None:
    text = _csv("2005-08-23 18:00:00,X,2005,12,KATRINA,23.1,-75.1,65,999,NA")
    assert parse_ibtracs_csv(text, "RITA") is None
    assert parse_ibtracs_csv("", "KATRINA") is None


def test_list_storms_returns_distinct_name_season_keys() -> None:
    text = _csv(
        "2005-08-23 18:00:00,X,2005,12,KATRINA,23.1,-75.1,65,999,NA",
        "2005-08-24 00:00:00,X,2005,12,katrina,23.4,-75.7,70,995,NA",
        "2005-09-18 00:00:00,Y,2005,18,RITA,22.0,-70.0,40,1005,NA",
    )
    entries = list_ibtracs_storms(text)

    assert [(e.name, e.year, e.source) for e in entries] == [
        ("KATRINA", "2005", "ibtracs"),
        ("RITA", "2005", "ibtracs"),
    ]
