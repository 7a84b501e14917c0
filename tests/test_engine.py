"""Tests for geometry engine delegation."""

import pytest

from conftest import StubEngine
from geo_interchange import (
    EngineNotConfiguredError,
    LineString,
    MultiLineString,
    MultiPolygon,
    Point,
    Polygon,
    ShapelyEngine,
    get_default_engine,
    set_default_engine,
)


def _square(size: float) -> LineString:
    return LineString.of(
        Point.xy(0, 0), Point.xy(size, 0), Point.xy(size, size), Point.xy(0, size), Point.xy(0, 0)
    )


class TestDelegation:
    """Geometric operations go through the engine, never the model."""

    def test_no_engine_configured(self, no_engine):
        """Without an engine, operations fail loudly."""
        with pytest.raises(EngineNotConfiguredError):
            _square(1).length()

    def test_default_engine_is_used(self, stub_engine):
        """The registered engine answers length and is_simple."""
        line = _square(1)
        assert line.length() == 1.0
        assert line.is_simple() is True
        assert stub_engine.calls == ["length", "is_simple"]
        assert get_default_engine() is stub_engine

    def test_explicit_engine_wins(self, stub_engine):
        """An engine passed to the call replaces the default."""
        other = StubEngine(length=42.0)
        assert _square(1).length(engine=other) == 42.0
        assert stub_engine.calls == []

    def test_is_ring_needs_closed_and_simple(self):
        """is_ring only asks the engine once the line is closed."""
        engine = StubEngine(simple=False)
        assert _square(1).is_ring(engine) is False
        open_line = LineString.of(Point.xy(0, 0), Point.xy(1, 1))
        assert open_line.is_ring(engine) is False
        assert engine.calls == ["is_simple"]

    def test_area_and_distance(self, stub_engine):
        """Areal and distance operations delegate too."""
        polygon = Polygon.of(_square(2))
        assert polygon.area() == 2.0
        assert MultiPolygon.of(polygon).area() == 2.0
        assert polygon.distance(Point.xy(5, 5)) == 0.0
        assert polygon.is_valid() is True
        assert stub_engine.calls == ["area", "area", "distance", "is_valid"]


class TestShapelyEngine:
    """The shapely-backed engine computes real answers."""

    @pytest.fixture
    def engine(self):
        """A ShapelyEngine instance."""
        return ShapelyEngine()

    def test_length(self, engine):
        """Perimeter of a 3x3 square."""
        assert _square(3).length(engine) == pytest.approx(12.0)

    def test_multilinestring_length(self, engine):
        """Lengths of members add up."""
        lines = MultiLineString.of(
            LineString.of(Point.xy(0, 0), Point.xy(3, 4)),
            LineString.of(Point.xy(0, 0), Point.xy(0, 1)),
        )
        assert lines.length(engine) == pytest.approx(6.0)

    def test_area_with_hole(self, engine):
        """Holes are subtracted."""
        hole = LineString.of(Point.xy(1, 1), Point.xy(2, 1), Point.xy(2, 2), Point.xy(1, 2), Point.xy(1, 1))
        assert Polygon.of(_square(4), hole).area(engine) == pytest.approx(15.0)

    def test_is_simple(self, engine):
        """A bow tie crosses itself."""
        bow_tie = LineString.of(Point.xy(0, 0), Point.xy(1, 1), Point.xy(1, 0), Point.xy(0, 1))
        assert bow_tie.is_simple(engine) is False
        assert _square(1).is_ring(engine) is True

    def test_distance(self, engine):
        """Point to point distance."""
        assert Point.xy(0, 0).distance(Point.xy(3, 4), engine) == pytest.approx(5.0)

    def test_set_default_engine(self, no_engine):
        """A shapely engine can be the process default."""
        set_default_engine(ShapelyEngine())
        assert _square(2).length() == pytest.approx(8.0)
