"""Shared telemetry and KML samples."""

import pytest

CSV_HEADER = "Timestamp,UTC,Callsign,Position,Altitude,Speed,Direction"


def make_csv(rows):
    """
    Build a tracker CSV from (timestamp, utc, lat, lon, alt_ft) tuples.

    Position is written quoted, the way the tracker exports it.
    """
    lines = [CSV_HEADER]
    for ts, utc, lat, lon, alt in rows:
        lines.append(f'{ts},{utc},DLH400,"{lat},{lon}",{alt},250,90')
    return "\n".join(lines) + "\n"


@pytest.fixture
def two_point_csv():
    """Scenario: climbing from 1000 to 2000 ft over one minute, 0.01 deg north."""
    return make_csv([
        (1000, "2024-05-01T10:00:00Z", 50.0, 8.0, 1000),
        (1060, "2024-05-01T10:01:00Z", 50.01, 8.0, 2000),
    ])


@pytest.fixture
def labelled_kml():
    """KML with the labelled aircraft layout (separate Aircraft / Registration blocks)."""
    return """<?xml version="1.0" encoding="UTF-8"?>
<kml xmlns="http://www.opengis.net/kml/2.2">
<Document>
<name>LH400/DLH400</name>
<description><![CDATA[
<div><a href="https://www.flightradar24.com/flight/lh400/3a1b2c3d">View flight</a></div>
<div>Operated by<br/>Lufthansa</div>
<div>Aircraft<br><span class="value">Boeing 747-830</span></div>
<div>Registration<br><span class="value"><a href="/data/reg">D-ABYA</a></span></div>
]]></description>
</Document>
</kml>
"""


@pytest.fixture
def combined_kml():
    """KML with the combined "Aircraft: model (registration)" layout."""
    return """<kml><Document>
<name>LH1234/DLH1234</name>
<description>Aircraft: Airbus A321-131 (D-AIRP)</description>
</Document></kml>
"""
