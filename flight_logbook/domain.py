from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterator, Optional, Tuple

import pandas as pd


# -----------------------------
# Configuration / "Processing Profile"
# -----------------------------
@dataclass(frozen=True)     # immutable dataclass (frozen=True means immutable)
class ProcessingProfile:
    feet_to_m: float = 0.3048   # telemetry altitude arrives in feet, everything downstream is meters

    noise_floor_m: float = 5.0  # a 3-D segment must be longer than this to count as flown distance (GPS jitter while taxiing)

    globe_stride: int = 20      # keep every 20th data line for the globe view
    globe_ceiling_ft: float = 45000.0   # altitude that maps to the top of the rendering range
    globe_max_altitude: float = 0.07    # rendering offset above a unit sphere at the ceiling


DEFAULT_PROFILE = ProcessingProfile()


@dataclass(frozen=True)
class TrackPoint:   # One telemetry sample
    latitude: float     # degrees, signed
    longitude: float    # degrees, signed
    altitude_m: float   # meters (converted from feet at parse time, NaN if unreadable)
    timestamp: int      # unix seconds, 0 if unreadable


@dataclass(frozen=True)
class TrackLog:
    """
    Parsed telemetry: the valid track points in source order plus the
    date token of the first row that carried one.

    Behaves like a read-only sequence of TrackPoint.
    """
    points: Tuple[TrackPoint, ...] = ()
    date: str = ""

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[TrackPoint]:
        return iter(self.points)

    def __getitem__(self, idx):
        return self.points[idx]

    def to_frame(self) -> pd.DataFrame:
        """One row per point; the date token rides along in frame.attrs."""
        df = pd.DataFrame(
            {
                "latitude": [p.latitude for p in self.points],
                "longitude": [p.longitude for p in self.points],
                "altitude_m": [p.altitude_m for p in self.points],
                "timestamp": [p.timestamp for p in self.points],
            },
            columns=["latitude", "longitude", "altitude_m", "timestamp"],
        )
        df = df.astype({"latitude": float, "longitude": float, "altitude_m": float, "timestamp": "int64"})
        df.attrs["date"] = self.date
        return df


@dataclass(frozen=True)
class FlightMetrics:
    direct_distance_m: int = 0  # great circle, first to last raw point
    flown_distance_m: int = 0   # 3-D distance summed over airborne pairs
    duration_minutes: int = 0   # first to last airborne sample
    date: str = ""              # passed through from the telemetry, unmodified


@dataclass(frozen=True)
class FlightMetadata:   # Empty string always means "not found"
    airline: str = ""
    flight_number: str = ""
    aircraft_model: str = ""
    registration: str = ""
    external_link_url: str = ""


@dataclass(frozen=True)
class GlobePath:
    coords: Tuple[Tuple[float, float, float], ...]  # (lat, lon, normalized altitude)
    label: str
    color: str


@dataclass(frozen=True)
class FlightRecord:
    date: str
    departed_code: str
    arrived_code: str
    airline: str = ""
    flight_number: str = ""
    aircraft_model: str = ""
    registration: str = ""
    distance_direct_m: int = 0
    distance_flown_m: int = 0
    duration_minutes: int = 0
    csv_path: str = ""
    kml_path: str = ""
    external_link_url: str = ""
    id: Optional[int] = None    # assigned by storage
    chronological_id: Optional[int] = field(default=None, compare=False)   # rank by date, computed on read

"""
Everything in this module is a value object.

The parser produces a TrackLog, the metrics engine turns it into
FlightMetrics, the metadata extractor produces FlightMetadata from the
annotation file, and the importer merges both into a FlightRecord that the
storage layer persists. GlobePath is rebuilt from the stored telemetry file
every time the globe is drawn and never stored.
"""
