"""
Tests for KML coordinate text parsing.
"""

from kmzlens.core.parsers import parse_coordinate_group, parse_kml_coordinates
from kmzlens.models import Coordinate


class TestParseCoordinateGroup:
    """Tests for single lon,lat[,alt] groups."""

    def test_longitude_comes_first(self):
        """Test the KML lon,lat order is mapped to lat/lng fields."""
        coordinate = parse_coordinate_group("-122.08,37.42,10")

        assert coordinate == Coordinate(lat=37.42, lng=-122.08, alt=10.0)

    def test_without_altitude(self):
        coordinate = parse_coordinate_group("20.5,10.25")

        assert coordinate is not None
        assert coordinate.lat == 10.25
        assert coordinate.lng == 20.5
        assert coordinate.alt is None

    def test_extra_components_ignored(self):
        assert parse_coordinate_group("1,2,3,4") == Coordinate(lat=2, lng=1, alt=3)

    def test_single_component_rejected(self):
        assert parse_coordinate_group("12.5") is None

    def test_non_numeric_rejected(self):
        assert parse_coordinate_group("notanumber,20") is None
        assert parse_coordinate_group("20,") is None

    def test_non_finite_rejected(self):
        """Test NaN and infinity are not accepted as positions."""
        assert parse_coordinate_group("nan,10") is None
        assert parse_coordinate_group("10,inf") is None

    def test_bad_altitude_keeps_position(self):
        coordinate = parse_coordinate_group("1,2,high")

        assert coordinate == Coordinate(lat=2, lng=1)


class TestParseKmlCoordinates:
    """Tests for whole <coordinates> text blocks."""

    def test_mixed_whitespace(self):
        """Test groups separated by spaces, tabs and newlines."""
        text = "\n  1,2,0\t3,4,0\n\n   5,6  "

        coordinates = parse_kml_coordinates(text)

        assert [(c.lng, c.lat) for c in coordinates] == [(1, 2), (3, 4), (5, 6)]

    def test_malformed_group_dropped(self):
        """Test a bad group is dropped and the rest are kept in order."""
        coordinates = parse_kml_coordinates("0,0 notanumber,20 1,1")

        assert coordinates == [Coordinate(lat=0, lng=0), Coordinate(lat=1, lng=1)]

    def test_all_groups_malformed(self):
        assert parse_kml_coordinates("a,b c,d") == []

    def test_empty_input(self):
        assert parse_kml_coordinates(None) == []
        assert parse_kml_coordinates("") == []
        assert parse_kml_coordinates("   \n ") == []
