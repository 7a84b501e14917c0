"""Tests for the WKT reader and writer."""

import pytest

from conftest import SAMPLE_CASES, build_samples
from geo_interchange import (
    CoordinateSystem,
    GeometryCollection,
    InvalidGeometryError,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    UnsupportedTypeError,
    WKTSyntaxError,
)
from geo_interchange.io.wkt import WKTWriter, read_wkt, write_wkt


class TestRoundTrip:
    """read(write(g)) must give back an equal geometry."""

    @pytest.mark.parametrize("cs,name", SAMPLE_CASES)
    def test_round_trip(self, cs, name):
        """Every kind, empty and non-empty, in every dimensionality."""
        geometry = build_samples(cs)[name]
        assert read_wkt(write_wkt(geometry)) == geometry

    @pytest.mark.parametrize("cs,name", SAMPLE_CASES)
    def test_round_trip_compact(self, cs, name):
        """The compact form reads back the same."""
        geometry = build_samples(cs)[name]
        assert read_wkt(write_wkt(geometry, pretty_print=False)) == geometry

    def test_float_precision_survives(self):
        """Ordinates keep every bit through text."""
        point = Point.xy(0.1 + 0.2, 1 / 3)
        assert read_wkt(point.as_text()) == point

    def test_linestring_empty_literal(self):
        """LINESTRING EMPTY reads to an empty line and writes back verbatim."""
        geometry = read_wkt("LINESTRING EMPTY")
        assert isinstance(geometry, LineString)
        assert geometry.num_points() == 0
        assert write_wkt(geometry) == "LINESTRING EMPTY"


class TestReader:
    """Tests for WKT parsing."""

    def test_point(self):
        """A 2D point."""
        assert read_wkt("POINT (1 2)") == Point.xy(1, 2)

    def test_keywords_are_case_insensitive(self):
        """Type and dimension keywords ignore case."""
        assert read_wkt("point z (1 2 3)") == Point.xyz(1, 2, 3)
        assert read_wkt("Point Empty") == Point.empty()

    def test_whitespace_is_insignificant(self):
        """Tokens may be separated by any whitespace or none."""
        assert read_wkt("  LINESTRING(1 2,3 4)\n") == read_wkt("LINESTRING ( 1  2 ,\t3 4 )")

    def test_dimension_suffixes(self):
        """Z, M and ZM set the coordinate system flags."""
        assert read_wkt("POINT Z (1 2 3)").cs == CoordinateSystem.xyz()
        assert read_wkt("POINT M (1 2 3)").cs == CoordinateSystem.xym()
        assert read_wkt("POINT ZM (1 2 3 4)").cs == CoordinateSystem.xyzm()

    def test_measured_point_ordinates(self):
        """The third value of a POINT M is the measure."""
        point = read_wkt("POINT M (1 2 3)")
        assert point.z is None
        assert point.m == 3.0

    def test_dimension_propagates_to_nested_points(self):
        """Every point of a Z polygon carries the Z flag."""
        polygon = read_wkt("POLYGON Z ((0 0 1, 1 0 2, 1 1 3, 0 0 1))")
        assert all(p.cs.has_z for ring in polygon for p in ring)

    def test_empty_keeps_dimension(self):
        """An empty point keeps its dimension flags."""
        point = read_wkt("POINT ZM EMPTY")
        assert point.is_empty
        assert point.is_3d and point.is_measured

    def test_srid_defaults_to_zero(self):
        """SRID is not part of WKT; the default is 0."""
        assert read_wkt("POINT (1 2)").srid == 0

    def test_srid_applies_to_whole_tree(self):
        """A caller SRID is applied to every nested geometry."""
        collection = read_wkt("GEOMETRYCOLLECTION (POINT (1 2), LINESTRING (0 0, 1 1))", srid=4326)
        assert collection.srid == 4326
        assert all(child.srid == 4326 for child in collection)
        assert collection.geometry_n(2).start_point().srid == 4326

    def test_multipoint_both_forms(self):
        """Bare and parenthesized multipoint members are both accepted."""
        expected = MultiPoint.of(Point.xy(1, 2), Point.xy(3, 4))
        assert read_wkt("MULTIPOINT (1 2, 3 4)") == expected
        assert read_wkt("MULTIPOINT ((1 2), (3 4))") == expected

    def test_multipoint_with_empty_member(self):
        """EMPTY is accepted as a multipoint member."""
        multipoint = read_wkt("MULTIPOINT (EMPTY, 1 2)")
        assert multipoint.geometry_n(1).is_empty
        assert multipoint.geometry_n(2) == Point.xy(1, 2)

    def test_multilinestring(self):
        """Multilinestrings nest one level deeper than linestrings."""
        geometry = read_wkt("MULTILINESTRING ((0 0, 1 1), EMPTY)")
        assert isinstance(geometry, MultiLineString)
        assert geometry.num_geometries() == 2
        assert geometry.geometry_n(2).is_empty

    def test_multipolygon(self):
        """Multipolygons nest polygon texts."""
        geometry = read_wkt("MULTIPOLYGON (((0 0, 1 0, 1 1, 0 0)), ((5 5, 6 5, 6 6, 5 5)))")
        assert isinstance(geometry, MultiPolygon)
        assert all(isinstance(p, Polygon) for p in geometry)

    def test_collection_children_inherit_dimension(self):
        """Children may omit the parent's suffix."""
        collection = read_wkt("GEOMETRYCOLLECTION Z (POINT (1 2 3), POINT Z (4 5 6))")
        assert isinstance(collection, GeometryCollection)
        assert [p.z for p in collection] == [3.0, 6.0]

    def test_exponent_numbers(self):
        """Scientific notation is accepted."""
        assert read_wkt("POINT (1e3 -2.5E-2)") == Point.xy(1000, -0.025)


class TestReaderErrors:
    """Malformed WKT must raise, never return a geometry."""

    def test_unmatched_parenthesis(self):
        """A missing ')' is a syntax error."""
        with pytest.raises(WKTSyntaxError):
            read_wkt("LINESTRING (0 0, 1 1")

    def test_extra_closing_parenthesis(self):
        """Trailing tokens are rejected."""
        with pytest.raises(WKTSyntaxError) as exc_info:
            read_wkt("POINT (1 2))")
        assert exc_info.value.token == ")"
        assert exc_info.value.position == 11

    def test_malformed_number(self):
        """The offending numeric token is reported."""
        with pytest.raises(WKTSyntaxError) as exc_info:
            read_wkt("POINT (1.2.3 4)")
        assert exc_info.value.token == "1.2.3"
        assert exc_info.value.position == 7

    def test_overflowing_number(self):
        """A literal beyond the float range is rejected at its token."""
        with pytest.raises(WKTSyntaxError) as exc_info:
            read_wkt("POINT (1e400 2)")
        assert exc_info.value.token == "1e400"
        assert exc_info.value.position == 7

    def test_unknown_keyword(self):
        """An unknown word is a syntax error."""
        with pytest.raises(WKTSyntaxError) as exc_info:
            read_wkt("BLOB (1 2)")
        assert exc_info.value.token == "BLOB"

    def test_unsupported_type(self):
        """Known OGC types the model does not have raise UnsupportedTypeError."""
        with pytest.raises(UnsupportedTypeError) as exc_info:
            read_wkt("CircularString (0 0, 1 1, 2 0)")
        assert exc_info.value.type_name == "CircularString"

    def test_ordinate_count_follows_suffix(self):
        """Three ordinates without Z are an error."""
        with pytest.raises(WKTSyntaxError):
            read_wkt("POINT (1 2 3)")
        with pytest.raises(WKTSyntaxError):
            read_wkt("POINT Z (1 2)")

    def test_child_dimension_mismatch(self):
        """A child suffix that contradicts the parent is rejected."""
        with pytest.raises(WKTSyntaxError):
            read_wkt("GEOMETRYCOLLECTION Z (POINT M (1 2 3))")

    def test_empty_input(self):
        """Empty text is a syntax error."""
        with pytest.raises(WKTSyntaxError):
            read_wkt("")

    def test_non_string_input(self):
        """Bytes are not WKT."""
        with pytest.raises(TypeError):
            read_wkt(b"POINT (1 2)")


class TestWriter:
    """Tests for WKT serialization."""

    def test_point_z(self):
        """The dimension suffix precedes the coordinates."""
        assert write_wkt(Point.xyz(1, 2, 3)) == "POINT Z (1 2 3)"

    def test_empty_with_suffix(self):
        """Empty geometries keep their suffix."""
        assert write_wkt(LineString(CoordinateSystem.xym())) == "LINESTRING M EMPTY"

    def test_compact_form(self):
        """pretty_print=False drops the optional spaces."""
        line = LineString.of(Point.xy(0, 0), Point.xy(1.5, 2))
        assert WKTWriter(pretty_print=False).write(line) == "LINESTRING(0 0,1.5 2)"

    def test_polygon(self):
        """Rings are parenthesized inside the polygon."""
        polygon = read_wkt("POLYGON ((0 0, 1 0, 1 1, 0 0))")
        assert write_wkt(polygon) == "POLYGON ((0 0, 1 0, 1 1, 0 0))"

    def test_multipoint(self):
        """Multipoint members are written without inner parentheses."""
        multipoint = MultiPoint.of(Point.xy(1, 2), Point.xy(3, 4))
        assert write_wkt(multipoint) == "MULTIPOINT (1 2, 3 4)"

    def test_collection_children_carry_suffix(self):
        """Collection children repeat the dimension suffix."""
        collection = GeometryCollection.of(Point.xyz(1, 2, 3))
        assert write_wkt(collection) == "GEOMETRYCOLLECTION Z (POINT Z (1 2 3))"

    def test_numbers_are_locale_free(self):
        """Decimal separators are always dots, integral values have no fraction."""
        assert write_wkt(Point.xy(-0.5, 2.0)) == "POINT (-0.5 2)"

    def test_non_finite_ordinate_rejected(self):
        """Infinities cannot be written as text."""
        with pytest.raises(InvalidGeometryError):
            write_wkt(Point.xy(float("inf"), 1))
