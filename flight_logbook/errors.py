"""Exceptions raised by flight_logbook.

Malformed rows, missing metadata and short tracks are not errors; they
degrade to empty or zero results. Only input that is not text at all is
surfaced to the caller.
"""


class FlightLogbookError(Exception):
    """Base class for all flight_logbook errors."""


class TelemetryDecodeError(FlightLogbookError, ValueError):
    """Telemetry bytes could not be decoded as text."""


class MetadataDecodeError(FlightLogbookError, ValueError):
    """Annotation bytes could not be decoded as text."""
