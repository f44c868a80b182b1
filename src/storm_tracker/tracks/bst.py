"""RSMC Tokyo best-track (fixed-width, multi-record) parser.

Layout: a header line starting with ``66666`` opens a storm block and closes
the previous one; the following data lines carry one analysis each::

    66666 0513  041 0011 0513 0 6 KATRINA                   20051023
    05082318 002 2 231 751 1007
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .models import RawObservation, StormIndexEntry, StormRecord

BOUNDARY_TOKEN = "66666"
BST_BASIN = "WP"
NAME_TOKEN_INDEX = 7
MIN_DATA_TOKENS = 6
MIN_DATETIME_LENGTH = 8
YEAR_PIVOT = 50


class ScanState(Enum):
    """Parser states while walking the file."""

    SCANNING = "scanning_for_boundary"
    ACCUMULATING = "accumulating_points"
    MATCH_FOUND = "match_found_skip_points"


@dataclass
class _Block:
    name: str
    season: str
    observations: list[RawObservation] = field(default_factory=list)


def _is_boundary(line: str) -> bool:
    return line.lstrip().startswith(BOUNDARY_TOKEN)


def _open_block(line: str) -> _Block:
    parts = line.split()
    season = parts[-1][:4]
    name = ""
    if len(parts) > NAME_TOKEN_INDEX and len(parts[NAME_TOKEN_INDEX]) > 4:
        name = parts[NAME_TOKEN_INDEX].strip().upper()
    return _Block(name=name, season=season)


def expand_two_digit_year(two_digit_year: int) -> int:
    """Pivot: values above 50 are 19xx, everything else 20xx."""
    if two_digit_year > YEAR_PIVOT:
        return 1900 + two_digit_year
    return 2000 + two_digit_year


def _parse_data_line(line: str) -> RawObservation | None:
    parts = line.split()
    if len(parts) < MIN_DATA_TOKENS:
        return None
    stamp = parts[0]
    if len(stamp) < MIN_DATETIME_LENGTH:
        return None
    try:
        lat_tenths = int(parts[3])
        lng_tenths = int(parts[4])
        pressure = int(parts[5])
        year = expand_two_digit_year(int(stamp[0:2]))
        month = int(stamp[2:4])
        day = int(stamp[4:6])
        hour = int(stamp[6:8])
    except ValueError:
        return None

    return RawObservation(
        timestamp=f"{year}-{month:02d}-{day:02d} {hour:02d}:00:00",
        lat=lat_tenths / 10,
        lng=lng_tenths / 10,
        pressure_mb=float(pressure),
        has_measured_pressure=True,
    )


def _matches(block: _Block | None, search_name: str, search_year: str) -> bool:
    if block is None or not block.observations:
        return False
    if block.name != search_name:
        return False
    return not search_year or block.season == search_year


def parse_bst(text: str, name: str, year: str | None = None) -> StormRecord | None:
    """Return the first block matching `name` (and `year`, when given).

    Once a block matches, data lines are no longer parsed; boundary lines are
    still recognised so the open block is closed correctly. The trailing block
    is checked after the scan ends.
    """
    search_name = name.strip().upper()
    search_year = (year or "").strip()

    state = ScanState.SCANNING
    block: _Block | None = None
    matched: _Block | None = None

    for line in text.splitlines():
        if not line.strip():
            continue

        if _is_boundary(line):
            if state is ScanState.ACCUMULATING and _matches(block, search_name, search_year):
                matched = block
                state = ScanState.MATCH_FOUND
            if state is not ScanState.MATCH_FOUND:
                block = _open_block(line)
                state = ScanState.ACCUMULATING
            continue

        if state is not ScanState.ACCUMULATING or block is None:
            continue
        observation = _parse_data_line(line)
        if observation is not None:
            block.observations.append(observation)

    if state is ScanState.ACCUMULATING and _matches(block, search_name, search_year):
        matched = block

    if matched is None:
        return None
    return StormRecord(
        name=matched.name,
        season=matched.season,
        basin=BST_BASIN,
        source="bst",
        observations=tuple(matched.observations),
    )


def list_bst_storms(text: str) -> list[StormIndexEntry]:
    """Named storm blocks in file order."""
    entries: list[StormIndexEntry] = []
    for line in text.splitlines():
        if not _is_boundary(line):
            continue
        block = _open_block(line)
        if block.name:
            entries.append(StormIndexEntry(name=block.name, year=block.season, source="bst"))
    return entries
