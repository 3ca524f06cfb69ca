"""Down-sampled 3-D flight paths for the globe view."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Iterable, Optional

from .domain import DEFAULT_PROFILE, FlightRecord, GlobePath, ProcessingProfile
from .telemetry import TextSource, as_text, decode_row

logger = logging.getLogger(__name__)


PATH_COLOR = "rgba(0, 255, 255, 0.8)"  # cyan

Coord = tuple[float, float, float]


def normalize_altitude(altitude_ft: float, profile: ProcessingProfile = DEFAULT_PROFILE) -> float:
    """Map feet onto the small offset drawn above a unit globe, never below 0."""
    if not math.isfinite(altitude_ft):
        return 0.0
    return max(0.0, (altitude_ft / profile.globe_ceiling_ft) * profile.globe_max_altitude)


def reduce_path(source: TextSource, profile: ProcessingProfile = DEFAULT_PROFILE) -> list[Coord]:
    """
    Sample every Nth data line of a raw telemetry log.

    Lines 1, 1 + N, 1 + 2N, ... are looked at (line 0 is the header). A
    sampled line that is blank, short or lacks readable coordinates is
    skipped, not replaced by its neighbour.
    """
    lines = as_text(source).split("\n")

    coords: list[Coord] = []
    for line in lines[1::profile.globe_stride]:
        row = decode_row(line)
        if row is None or not row.has_position:
            continue
        coords.append((row.latitude, row.longitude, normalize_altitude(row.altitude_ft, profile)))
    return coords


def _read_utf8(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")


def load_globe_paths(
    flights: Iterable[FlightRecord],
    read_text: Optional[Callable[[str], str]] = None,
    profile: ProcessingProfile = DEFAULT_PROFILE,
) -> list[GlobePath]:
    """
    Build one GlobePath per stored flight.

    Args:
        flights: Stored flight records; those without a csv_path are ignored
        read_text: File access, path -> text. Defaults to reading UTF-8 from disk.
        profile: Sampling and altitude normalisation settings

    Returns:
        Paths in flight order. Flights whose file cannot be read (whatever
        read_text raises), or that have no usable coordinates, are left out.
    """
    read_text = read_text or _read_utf8
    paths: list[GlobePath] = []

    for flight in flights:
        if not flight.csv_path:
            continue

        try:
            coords = reduce_path(read_text(flight.csv_path), profile)
        except Exception as e:
            logger.warning(f"Could not load path for flight {flight.id} ({flight.csv_path}): {e}")
            continue

        if not coords:
            continue

        paths.append(
            GlobePath(
                coords=tuple(coords),
                label=f"{flight.departed_code} -> {flight.arrived_code}",
                color=PATH_COLOR,
            )
        )

    return paths
