from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Optional, Union

from .domain import DEFAULT_PROFILE, ProcessingProfile, TrackLog, TrackPoint
from .errors import TelemetryDecodeError

# Column positions in the flight tracker CSV export:
# Timestamp,UTC,Callsign,Position,Altitude,...
# "Position" is a quoted "lat,lon" pair, so the naive comma split puts
# latitude and longitude in two fields with a stray quote on each.
COL_UNIX_TS = 0
COL_DISPLAY_TS = 1
COL_LAT = 3
COL_LON = 4
COL_ALT_FT = 5
MIN_FIELDS = 6

# timestamps outside int64 are treated as unreadable
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

TextSource = Union[str, bytes]


# -----------------------------
# Helpers
# -----------------------------

def as_text(source: TextSource, error_cls: type = TelemetryDecodeError) -> str:
    """Return source as str, decoding bytes as UTF-8 (a leading BOM is dropped)."""
    if isinstance(source, (bytes, bytearray)):
        try:
            return bytes(source).decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise error_cls(f"Input is not valid UTF-8 text: {e}") from e
    return source

def _strip_quotes(raw: str) -> str:
    return raw.strip().strip("\"'").strip()

def _parse_coord(raw: str) -> Optional[float]:
    try:
        value = float(_strip_quotes(raw))
    except ValueError:
        return None
    return value if math.isfinite(value) else None

def _parse_float(raw: str) -> float:
    try:
        return float(raw.strip())
    except ValueError:
        return float("nan")

def _parse_timestamp(raw: str) -> int:
    raw = raw.strip()
    try:
        value = int(raw)
    except ValueError:
        pass
    else:
        return value if INT64_MIN <= value <= INT64_MAX else 0
    # some exports write "1700000000.0"
    try:
        value = float(raw)
    except ValueError:
        return 0
    if not math.isfinite(value) or not INT64_MIN <= value < INT64_MAX:
        return 0
    return int(value)


@dataclass(frozen=True)
class TelemetryRow:
    """One decoded CSV line. Coordinates are None when unreadable."""
    timestamp: int
    display_time: str
    latitude: Optional[float]
    longitude: Optional[float]
    altitude_ft: float

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None


def decode_row(line: str) -> Optional[TelemetryRow]:
    """
    Decode one telemetry line into named fields.

    This is the only place that knows the positional column layout.
    Returns None for blank lines and lines with fewer than 6 fields.
    """
    line = line.strip()
    if not line:
        return None

    parts = line.split(",")
    if len(parts) < MIN_FIELDS:
        return None

    return TelemetryRow(
        timestamp=_parse_timestamp(parts[COL_UNIX_TS]),
        display_time=parts[COL_DISPLAY_TS].strip(),
        latitude=_parse_coord(parts[COL_LAT]),
        longitude=_parse_coord(parts[COL_LON]),
        altitude_ft=_parse_float(parts[COL_ALT_FT]),
    )


# -----------------------------
# Core pipeline
# -----------------------------
def parse_telemetry(source: TextSource, profile: ProcessingProfile = DEFAULT_PROFILE) -> TrackLog:
    """
    Parse a raw telemetry log into a TrackLog.

    The first line is a header and is always skipped. Blank lines, short
    lines and lines whose latitude or longitude are not finite numbers are
    dropped without error, so an empty or fully malformed log gives an
    empty TrackLog. The first non-empty display timestamp becomes the
    flight date, even when its row is dropped for bad coordinates.

    Raises TelemetryDecodeError only when bytes are not UTF-8.
    """
    text = as_text(source)
    lines = text.split("\n")

    points: list[TrackPoint] = []
    flight_date = ""

    for line in lines[1:]:
        row = decode_row(line)
        if row is None:
            continue

        if not flight_date and row.display_time:
            flight_date = row.display_time

        if not row.has_position:
            continue

        points.append(
            TrackPoint(
                latitude=row.latitude,
                longitude=row.longitude,
                altitude_m=row.altitude_ft * profile.feet_to_m,
                timestamp=row.timestamp,
            )
        )

    return TrackLog(points=tuple(points), date=flight_date)
