"""Pipeline orchestration for importing one flight."""

from __future__ import annotations

import logging
import shutil
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .domain import DEFAULT_PROFILE, FlightRecord, ProcessingProfile
from .metadata import extract_metadata
from .metrics import compute_metrics
from .storage import FlightStore
from .telemetry import TextSource, parse_telemetry

logger = logging.getLogger(__name__)


# Stored in place of fields the KML did not provide
DEFAULT_FLIGHT_NUMBER = "Imported"
DEFAULT_AIRLINE = "Unknown Airline"
DEFAULT_AIRCRAFT_FIELD = "-"

PathLike = Union[str, Path]


def build_flight_record(
    telemetry: TextSource,
    annotation: TextSource,
    departed_code: str,
    arrived_code: str,
    csv_path: str = "",
    kml_path: str = "",
    now: Optional[datetime] = None,
    profile: ProcessingProfile = DEFAULT_PROFILE,
) -> FlightRecord:
    """
    Merge telemetry metrics and KML metadata into one storable record.

    Args:
        telemetry: Raw CSV telemetry log
        annotation: Raw KML document
        departed_code: Departure airport code as entered by the user
        arrived_code: Arrival airport code as entered by the user
        csv_path: Where the telemetry file is kept (for the globe view)
        kml_path: Where the KML file is kept
        now: Import time, used as the date when the log carries none
        profile: Processing thresholds

    Returns:
        FlightRecord without an id
    """
    track = parse_telemetry(telemetry, profile=profile)
    metrics = compute_metrics(track, profile=profile)
    metadata = extract_metadata(annotation)

    date = metrics.date
    if not date:
        date = (now or datetime.now(timezone.utc)).isoformat()

    return FlightRecord(
        date=date,
        departed_code=departed_code.strip().upper(),
        arrived_code=arrived_code.strip().upper(),
        airline=metadata.airline or DEFAULT_AIRLINE,
        flight_number=metadata.flight_number or DEFAULT_FLIGHT_NUMBER,
        aircraft_model=metadata.aircraft_model or DEFAULT_AIRCRAFT_FIELD,
        registration=metadata.registration or DEFAULT_AIRCRAFT_FIELD,
        distance_direct_m=metrics.direct_distance_m,
        distance_flown_m=metrics.flown_distance_m,
        duration_minutes=metrics.duration_minutes,
        csv_path=csv_path,
        kml_path=kml_path,
        external_link_url=metadata.external_link_url,
    )


def store_source_file(source: PathLike, data_dir: PathLike, name: str) -> Path:
    """Copy a picked file into the app's data directory, creating it if needed."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    destination = data_dir / name
    shutil.copyfile(source, destination)
    return destination


def import_flight(
    csv_file: PathLike,
    kml_file: PathLike,
    departed_code: str,
    arrived_code: str,
    store: FlightStore,
    data_dir: PathLike,
    profile: ProcessingProfile = DEFAULT_PROFILE,
) -> FlightRecord:
    """
    Copy both files into data_dir, analyse them and persist the flight.

    Copy and storage errors propagate after the copies are removed again;
    malformed file contents do not (they give zero metrics and default
    metadata).
    """
    stamp = int(time.time() * 1000)
    data_dir = Path(data_dir)
    saved_csv = data_dir / f"flight_{stamp}.csv"
    saved_kml = data_dir / f"flight_{stamp}.kml"

    try:
        store_source_file(csv_file, data_dir, saved_csv.name)
        store_source_file(kml_file, data_dir, saved_kml.name)
        record = build_flight_record(
            saved_csv.read_bytes(),
            saved_kml.read_bytes(),
            departed_code,
            arrived_code,
            csv_path=str(saved_csv),
            kml_path=str(saved_kml),
            profile=profile,
        )
        record = store.add_flight(record)
    except Exception:
        # no stored flight refers to the copies
        saved_csv.unlink(missing_ok=True)
        saved_kml.unlink(missing_ok=True)
        raise

    logger.info(
        f"Imported flight {record.flight_number} {record.departed_code} -> {record.arrived_code} "
        f"(id={record.id}, {record.distance_flown_m} m flown, {record.duration_minutes} min)"
    )
    return record
