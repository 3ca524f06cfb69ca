"""
Configuration for the flight logbook application.

Settings come from environment variables (a local .env file is loaded
first). Algorithm thresholds are not configured here; they live in
domain.ProcessingProfile.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    db_url: str
    data_dir: Path  # copied telemetry and KML files
    log_level: str


def load_config() -> AppConfig:
    """Read configuration from the environment."""
    load_dotenv()
    return AppConfig(
        db_url=os.getenv('FLIGHT_LOGBOOK_DB_URL', 'sqlite:///flights.db'),
        data_dir=Path(os.getenv('FLIGHT_LOGBOOK_DATA_DIR', 'my_flight_logs')),
        log_level=os.getenv('FLIGHT_LOGBOOK_LOG_LEVEL', 'INFO').upper(),
    )
