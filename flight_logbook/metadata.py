"""
Flight metadata extraction from the tracker's KML annotation file.

The KML export is not parsed as XML. The fields we need live inside
HTML-ish description snippets whose layout changed between exports, so
each field is found with its own pattern and a missing field is simply
left empty.

Aircraft type and registration come in two layouts:

- combined: ``Aircraft: Airbus A321-131 (D-AIRP)``
- labelled: ``Aircraft<br><span>...</span>`` and
  ``Registration<br><span><a>...</a></span>``

The combined layout is tried first; each field that it leaves empty is
filled from the labelled layout.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Tuple, Union

from .domain import FlightMetadata
from .errors import MetadataDecodeError
from .telemetry import as_text

logger = logging.getLogger(__name__)


LINK_RE = re.compile(r"""href=["'](https?://(?:www\.)?flightradar24\.com/flight/[^"']+)["']""")
FLIGHT_NAME_RE = re.compile(r"<name>([A-Z0-9]+/[A-Z0-9]+)</name>")
AIRLINE_RE = re.compile(r"<br\s*/>([A-Za-z0-9 .&'-]+)</div>")

# registration is the last parenthesised token before a tag or line end
COMBINED_AIRCRAFT_RE = re.compile(r"Aircraft:[ \t]*([^<>\n]+?)\s*\(([^()<>\s]+)\)(?=[ \t]*(?:<|$))", re.MULTILINE)
LABELLED_MODEL_RE = re.compile(r"Aircraft[\s\S]*?<br>\s*<span[^>]*>([\s\S]*?)</span>", re.IGNORECASE)
LABELLED_REGISTRATION_RE = re.compile(
    r"Registration<br>\s*<span[^>]*>\s*<a[^>]*>([\s\S]*?)</a>", re.IGNORECASE
)


@dataclass(frozen=True)
class AircraftIdentity:
    model: str = ""
    registration: str = ""

    def merged_with(self, fallback: "AircraftIdentity") -> "AircraftIdentity":
        return AircraftIdentity(
            model=self.model or fallback.model,
            registration=self.registration or fallback.registration,
        )


def _first_group(pattern: re.Pattern, text: str) -> str:
    m = pattern.search(text)
    return m.group(1).strip() if m else ""


def combined_aircraft(text: str) -> AircraftIdentity:
    m = COMBINED_AIRCRAFT_RE.search(text)
    if not m:
        return AircraftIdentity()
    return AircraftIdentity(model=m.group(1).strip(), registration=m.group(2).strip())


def labelled_aircraft(text: str) -> AircraftIdentity:
    return AircraftIdentity(
        model=_first_group(LABELLED_MODEL_RE, text),
        registration=_first_group(LABELLED_REGISTRATION_RE, text),
    )


# Tried in order; later layouts only fill fields earlier ones left empty.
AIRCRAFT_LAYOUTS: Tuple[Tuple[str, Callable[[str], AircraftIdentity]], ...] = (
    ("combined", combined_aircraft),
    ("labelled", labelled_aircraft),
)


def extract_aircraft(text: str) -> AircraftIdentity:
    identity = AircraftIdentity()
    for _name, layout in AIRCRAFT_LAYOUTS:
        if identity.model and identity.registration:
            break
        identity = identity.merged_with(layout(text))
    return identity


def extract_flight_number(text: str) -> str:
    """``<name>LH400/DLH400</name>`` -> ``LH400``"""
    name = _first_group(FLIGHT_NAME_RE, text)
    return name.split("/")[0] if name else ""


def extract_metadata(document: Union[str, bytes]) -> FlightMetadata:
    """
    Pull airline, flight number, aircraft and tracker link out of a KML document.

    Never raises for text input: a field that is not found is an empty
    string, and any unexpected failure is logged and gives an all-empty
    result. Bytes that are not UTF-8 raise MetadataDecodeError.
    """
    text = as_text(document, error_cls=MetadataDecodeError)

    try:
        aircraft = extract_aircraft(text)
        return FlightMetadata(
            airline=_first_group(AIRLINE_RE, text),
            flight_number=extract_flight_number(text),
            aircraft_model=aircraft.model,
            registration=aircraft.registration,
            external_link_url=_first_group(LINK_RE, text),
        )
    except Exception as e:
        logger.warning(f"KML metadata extraction failed: {e!r}")
        return FlightMetadata()
