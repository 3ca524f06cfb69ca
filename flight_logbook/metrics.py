"""Flight metrics: direct distance, flown distance and airborne duration."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Union

import numpy as np

from .domain import DEFAULT_PROFILE, FlightMetrics, ProcessingProfile, TrackLog, TrackPoint
from .geodesy import surface_distance


SECONDS_PER_MINUTE = 60.0


def round_half_up(x: float) -> int:
    """Round to the nearest integer, halves away from zero for positive x."""
    return int(math.floor(x + 0.5))


def airborne_mask(altitude_m: np.ndarray) -> np.ndarray:
    """
    Mark adjacent point pairs where both samples report positive altitude.

    Element i describes the pair (i, i + 1), so the result is one shorter
    than the input. NaN altitudes are never airborne.
    """
    alt = np.asarray(altitude_m, dtype=float)
    if len(alt) < 2:
        return np.zeros(0, dtype=bool)
    return (alt[:-1] > 0) & (alt[1:] > 0)


def segment_distances_3d(lat: np.ndarray, lon: np.ndarray, altitude_m: np.ndarray) -> np.ndarray:
    """Euclidean combination of surface distance and altitude change, per adjacent pair."""
    dist_h = surface_distance(lat[:-1], lon[:-1], lat[1:], lon[1:])
    dist_v = np.abs(np.diff(altitude_m))
    return np.sqrt(dist_h * dist_h + dist_v * dist_v)


def airborne_window(timestamps: np.ndarray, airborne: np.ndarray) -> tuple[int, int]:
    """
    Start and end time of the airborne part of a track.

    Start is the first sample of the first airborne pair, end is the
    second sample of the last airborne pair. Ground gaps in between do not
    reset either end. A zero timestamp counts as "not set yet", so the
    start moves on to the next airborne pair in that case.

    Returns:
        (start_time, end_time), both 0 if nothing was airborne
    """
    idx = np.flatnonzero(airborne)
    if len(idx) == 0:
        return 0, 0

    starts = timestamps[idx]
    starts = starts[starts != 0]
    start_time = int(starts[0]) if len(starts) else 0
    end_time = int(timestamps[idx[-1] + 1])
    return start_time, end_time


def compute_metrics(
    points: Union[TrackLog, Sequence[TrackPoint]],
    date: Optional[str] = None,
    profile: ProcessingProfile = DEFAULT_PROFILE,
) -> FlightMetrics:
    """
    Summarise one flight from its track points.

    Args:
        points: Parsed TrackLog or any sequence of TrackPoint in source order
        date: Date token for the result; defaults to the TrackLog's date
        profile: Thresholds (noise floor for flown distance)

    Returns:
        FlightMetrics with distances rounded to whole meters. Tracks with
        fewer than 2 points give zero metrics carrying the date.
    """
    if not isinstance(points, TrackLog):
        points = TrackLog(points=tuple(points))
    if date is None:
        date = points.date

    if len(points) < 2:
        return FlightMetrics(date=date)

    df = points.to_frame()
    lat = df["latitude"].to_numpy(float)
    lon = df["longitude"].to_numpy(float)
    alt = df["altitude_m"].to_numpy(float)
    ts = df["timestamp"].to_numpy(np.int64)

    airborne = airborne_mask(alt)
    # NaN altitudes only ever sit in non-airborne pairs, which are masked out
    with np.errstate(invalid="ignore"):
        dist_3d = segment_distances_3d(lat, lon, alt)
        counted = airborne & (dist_3d > profile.noise_floor_m)
    flown = float(dist_3d[counted].sum())

    start_time, end_time = airborne_window(ts, airborne)
    duration = 0
    if start_time > 0 and end_time > start_time:
        duration = round_half_up((end_time - start_time) / SECONDS_PER_MINUTE)

    direct = surface_distance(lat[0], lon[0], lat[-1], lon[-1])

    return FlightMetrics(
        direct_distance_m=round_half_up(direct),
        flown_distance_m=round_half_up(flown),
        duration_minutes=duration,
        date=date,
    )
