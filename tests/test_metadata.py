"""Tests for KML metadata extraction in metadata.py"""

import logging

import pytest

from flight_logbook import metadata as metadata_module
from flight_logbook.domain import FlightMetadata
from flight_logbook.errors import MetadataDecodeError
from flight_logbook.metadata import (
    AircraftIdentity,
    combined_aircraft,
    extract_aircraft,
    extract_flight_number,
    extract_metadata,
    labelled_aircraft,
)


class TestExtractFlightNumber:
    """Tests for the extract_flight_number function."""

    def test_part_before_slash(self):
        assert extract_flight_number("<name>LH400/DLH400</name>") == "LH400"

    def test_name_without_slash_ignored(self):
        """A plain <name> is not a flight designator."""
        assert extract_flight_number("<name>My flights</name>") == ""


class TestAircraftLayouts:
    """Tests for the combined and labelled aircraft layouts."""

    def test_combined(self):
        identity = combined_aircraft("Aircraft: Airbus A321-131 (D-AIRP)")
        assert identity == AircraftIdentity("Airbus A321-131", "D-AIRP")

    def test_combined_model_with_parentheses(self):
        """The registration is the last bracketed token, not the first."""
        identity = combined_aircraft("<p>Aircraft: Airbus A320 (sharklets) (D-AIZA)</p>")
        assert identity == AircraftIdentity("Airbus A320 (sharklets)", "D-AIZA")

    def test_combined_absent(self):
        assert combined_aircraft("Aircraft<br><span>A320</span>") == AircraftIdentity()

    def test_labelled(self, labelled_kml):
        identity = labelled_aircraft(labelled_kml)
        assert identity == AircraftIdentity("Boeing 747-830", "D-ABYA")

    def test_combined_preferred(self):
        """When both layouts are present the combined one wins."""
        text = (
            "Aircraft: Airbus A321-131 (D-AIRP)"
            "<div>Aircraft<br><span>Boeing 737</span></div>"
            "<div>Registration<br><span><a href='#'>N12345</a></span></div>"
        )
        assert extract_aircraft(text) == AircraftIdentity("Airbus A321-131", "D-AIRP")

    def test_fields_fall_back_independently(self):
        """Only a labelled registration: model stays empty, registration is found."""
        text = "<div>Registration<br><span><a href='#'>OE-LBO</a></span></div>"
        assert extract_aircraft(text) == AircraftIdentity("", "OE-LBO")


class TestExtractMetadata:
    """Tests for the extract_metadata function."""

    def test_labelled_document(self, labelled_kml):
        """Every field is found in a labelled-layout export."""
        md = extract_metadata(labelled_kml)
        assert md == FlightMetadata(
            airline="Lufthansa",
            flight_number="LH400",
            aircraft_model="Boeing 747-830",
            registration="D-ABYA",
            external_link_url="https://www.flightradar24.com/flight/lh400/3a1b2c3d",
        )

    def test_combined_document(self, combined_kml):
        """Aircraft: Airbus A321-131 (D-AIRP) gives model and registration."""
        md = extract_metadata(combined_kml)
        assert md.aircraft_model == "Airbus A321-131"
        assert md.registration == "D-AIRP"
        assert md.flight_number == "LH1234"
        assert md.airline == ""
        assert md.external_link_url == ""

    def test_empty_document(self):
        """Empty input gives all-empty metadata."""
        assert extract_metadata("") == FlightMetadata()

    def test_unrecognised_document(self):
        """A document with none of the patterns gives all-empty metadata."""
        md = extract_metadata("<kml><Document><name>Track</name></Document></kml>")
        assert md == FlightMetadata()
        for value in (md.airline, md.flight_number, md.aircraft_model, md.registration, md.external_link_url):
            assert value == ""

    def test_other_sites_not_linked(self):
        """Only tracker flight permalinks count as the external link."""
        md = extract_metadata('<a href="https://example.com/flight/123">x</a>')
        assert md.external_link_url == ""

    def test_airline_trimmed(self):
        assert extract_metadata("<div><br/>  Austrian Airlines </div>").airline == "Austrian Airlines"

    def test_accepts_bytes(self, combined_kml):
        assert extract_metadata(combined_kml.encode("utf-8")).registration == "D-AIRP"

    def test_undecodable_bytes_raise(self):
        with pytest.raises(MetadataDecodeError):
            extract_metadata(b"\xff\xfe\xfa")

    def test_internal_error_gives_empty_result(self, monkeypatch, caplog, combined_kml):
        """Unexpected failures are logged, not raised."""
        def boom(text):
            raise RuntimeError("pattern engine exploded")

        monkeypatch.setattr(metadata_module, "extract_aircraft", boom)
        with caplog.at_level(logging.WARNING, logger="flight_logbook.metadata"):
            md = extract_metadata(combined_kml)

        assert md == FlightMetadata()
        assert "pattern engine exploded" in caplog.text

    def test_non_text_input_gives_empty_result(self):
        """None is not a document; the result is empty rather than an exception."""
        assert extract_metadata(None) == FlightMetadata()

    def test_idempotent(self, labelled_kml):
        assert extract_metadata(labelled_kml) == extract_metadata(labelled_kml)
