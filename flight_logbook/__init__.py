"""
Flight Logbook - Personal Flight Tracker Import

Turns a flight tracker's CSV position log and KML annotation file into a
compact flight record: direct and flown distance, airborne duration,
airline, flight number, aircraft and registration. Also reduces stored
tracks to light-weight paths for drawing many flights at once.
"""

from .domain import (
    DEFAULT_PROFILE,
    FlightMetadata,
    FlightMetrics,
    FlightRecord,
    GlobePath,
    ProcessingProfile,
    TrackLog,
    TrackPoint,
)
from .errors import FlightLogbookError, MetadataDecodeError, TelemetryDecodeError
from .geodesy import surface_distance
from .telemetry import decode_row, parse_telemetry
from .metrics import compute_metrics
from .metadata import extract_metadata
from .globe import reduce_path, load_globe_paths
from .storage import FlightStore
from .importer import build_flight_record, import_flight

__all__ = [
    # Domain models
    "DEFAULT_PROFILE",
    "FlightMetadata",
    "FlightMetrics",
    "FlightRecord",
    "GlobePath",
    "ProcessingProfile",
    "TrackLog",
    "TrackPoint",
    # Errors
    "FlightLogbookError",
    "MetadataDecodeError",
    "TelemetryDecodeError",
    # Geodesy
    "surface_distance",
    # Telemetry parsing
    "decode_row",
    "parse_telemetry",
    # Metrics
    "compute_metrics",
    # Metadata
    "extract_metadata",
    # Globe paths
    "reduce_path",
    "load_globe_paths",
    # Storage
    "FlightStore",
    # Pipeline
    "build_flight_record",
    "import_flight",
]

__version__ = "0.1.0"
