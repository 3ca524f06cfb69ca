"""Tests for globe path reduction in globe.py"""

import logging
import math

import pytest

from flight_logbook.domain import FlightRecord, GlobePath, ProcessingProfile
from flight_logbook.globe import PATH_COLOR, load_globe_paths, normalize_altitude, reduce_path

from conftest import CSV_HEADER, make_csv


def _long_csv(n, alt=30000):
    """n data lines, latitude stepping 0.01 deg per line."""
    return make_csv([(1000 + 10 * i, "d", 50.0 + 0.01 * i, 8.0, alt) for i in range(n)])


class TestNormalizeAltitude:
    """Tests for the normalize_altitude function."""

    def test_ceiling_maps_to_max(self):
        assert normalize_altitude(45000) == pytest.approx(0.07)

    def test_linear(self):
        assert normalize_altitude(22500) == pytest.approx(0.035)

    def test_negative_clamped(self):
        """Below sea level is drawn on the surface."""
        assert normalize_altitude(-100) == 0.0

    def test_nan_clamped(self):
        assert normalize_altitude(float("nan")) == 0.0


class TestReducePath:
    """Tests for the reduce_path function."""

    def test_samples_every_twentieth_line(self):
        """45 data lines -> lines 1, 21 and 41 are kept."""
        coords = reduce_path(_long_csv(45))
        assert len(coords) == 3
        assert [c[0] for c in coords] == pytest.approx([50.0, 50.2, 50.4])

    def test_bounded_by_line_count(self):
        """At most ceil(lines / 20) triples, all with non-negative altitude."""
        text = _long_csv(101, alt=-50)
        coords = reduce_path(text)
        assert len(coords) <= math.ceil(len(text.split("\n")) / 20)
        assert all(c[2] >= 0 for c in coords)

    def test_triples(self):
        """Each entry is (lat, lon, normalized altitude)."""
        coords = reduce_path(_long_csv(1, alt=45000))
        assert coords == [(50.0, 8.0, pytest.approx(0.07))]

    def test_bad_sampled_line_skipped(self):
        """A sampled line without coordinates is dropped, not replaced by a neighbour."""
        lines = _long_csv(25).split("\n")
        lines[21] = '1200,d,DLH400,"?,?",30000,250,90'
        coords = reduce_path("\n".join(lines))
        assert len(coords) == 1
        assert coords[0][0] == pytest.approx(50.0)

    def test_custom_stride(self):
        coords = reduce_path(_long_csv(10), profile=ProcessingProfile(globe_stride=5))
        assert len(coords) == 2

    def test_empty_input(self):
        assert reduce_path("") == []
        assert reduce_path(CSV_HEADER) == []

    def test_idempotent(self):
        text = _long_csv(60)
        assert reduce_path(text) == reduce_path(text)


class TestLoadGlobePaths:
    """Tests for the load_globe_paths function."""

    @pytest.fixture
    def flights(self, tmp_path):
        good = tmp_path / "good.csv"
        good.write_text(_long_csv(30), encoding="utf-8")
        empty = tmp_path / "empty.csv"
        empty.write_text(CSV_HEADER + "\n", encoding="utf-8")
        return [
            FlightRecord(id=1, date="2024-05-01", departed_code="FRA", arrived_code="JFK", csv_path=str(good)),
            FlightRecord(id=2, date="2024-05-02", departed_code="JFK", arrived_code="FRA", csv_path=""),
            FlightRecord(id=3, date="2024-05-03", departed_code="VIE", arrived_code="LHR",
                         csv_path=str(tmp_path / "missing.csv")),
            FlightRecord(id=4, date="2024-05-04", departed_code="LHR", arrived_code="VIE", csv_path=str(empty)),
        ]

    def test_builds_labelled_paths(self, flights):
        """Only readable flights with coordinates produce a path."""
        paths = load_globe_paths(flights)
        assert len(paths) == 1
        path = paths[0]
        assert isinstance(path, GlobePath)
        assert path.label == "FRA -> JFK"
        assert path.color == PATH_COLOR
        assert len(path.coords) == 2

    def test_unreadable_file_logged(self, flights, caplog):
        """A missing file is logged and the batch carries on."""
        with caplog.at_level(logging.WARNING, logger="flight_logbook.globe"):
            load_globe_paths(flights)
        assert "missing.csv" in caplog.text

    def test_custom_reader(self):
        """File access can be supplied by the caller."""
        files = {"a.csv": _long_csv(5)}
        flights = [FlightRecord(date="d", departed_code="A", arrived_code="B", csv_path="a.csv")]
        paths = load_globe_paths(flights, read_text=files.__getitem__)
        assert len(paths) == 1
        assert paths[0].coords[0][:2] == (50.0, 8.0)

    def test_reader_error_skips_only_that_flight(self, caplog):
        """Any error from the reader drops that flight; the rest of the batch still loads."""
        files = {"kept.csv": _long_csv(5)}
        flights = [
            FlightRecord(id=1, date="d", departed_code="A", arrived_code="B", csv_path="gone.csv"),
            FlightRecord(id=2, date="d", departed_code="C", arrived_code="D", csv_path="kept.csv"),
        ]
        with caplog.at_level(logging.WARNING, logger="flight_logbook.globe"):
            paths = load_globe_paths(flights, read_text=files.__getitem__)
        assert [p.label for p in paths] == ["C -> D"]
        assert "gone.csv" in caplog.text
