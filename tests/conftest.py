"""Pytest configuration and fixtures for geometry tests."""

import pytest

from geo_interchange import (
    CoordinateSystem,
    GeometryCollection,
    GeometryEngine,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    set_default_engine,
)


def _ring(cs: CoordinateSystem, *coords: tuple) -> LineString:
    return LineString(cs, [Point(cs, c) for c in coords])


def build_samples(cs: CoordinateSystem) -> dict[str, object]:
    """One non-empty and one empty geometry of every kind in ``cs``."""
    n = cs.coordinate_dimension

    def c(x: float, y: float) -> tuple:
        # Extra ordinates follow a fixed pattern so Z and M differ from X/Y
        return (x, y, x + 0.5, y - 0.25)[:n]

    square = _ring(cs, c(0, 0), c(10, 0), c(10, 10), c(0, 10), c(0, 0))
    hole = _ring(cs, c(2, 2), c(4, 2), c(4, 4), c(2, 2))
    polygon = Polygon(cs, [square, hole])
    line = LineString(cs, [Point(cs, c(1.5, 2.25)), Point(cs, c(-3, 4e-7))])

    return {
        "point": Point(cs, c(1.25, -2.5)),
        "point_empty": Point(cs),
        "linestring": line,
        "linestring_empty": LineString(cs),
        "polygon": polygon,
        "polygon_empty": Polygon(cs),
        "multipoint": MultiPoint(cs, [Point(cs, c(1, 2)), Point(cs, c(3, 4))]),
        "multipoint_empty": MultiPoint(cs),
        "multilinestring": MultiLineString(cs, [line, LineString(cs)]),
        "multilinestring_empty": MultiLineString(cs),
        "multipolygon": MultiPolygon(cs, [polygon, Polygon(cs, [square])]),
        "multipolygon_empty": MultiPolygon(cs),
        "geometrycollection": GeometryCollection(
            cs,
            [
                Point(cs, c(7, 8)),
                line,
                polygon,
                MultiPoint(cs, [Point(cs, c(1, 1))]),
                GeometryCollection(cs, [Point(cs)]),
            ],
        ),
        "geometrycollection_empty": GeometryCollection(cs),
    }


COORDINATE_SYSTEMS = {
    "xy": CoordinateSystem.xy(),
    "xyz": CoordinateSystem.xyz(),
    "xym": CoordinateSystem.xym(),
    "xyzm": CoordinateSystem.xyzm(),
}

SAMPLE_CASES = [
    pytest.param(cs, name, id=f"{dim}-{name}")
    for dim, cs in COORDINATE_SYSTEMS.items()
    for name in build_samples(cs)
]


class StubEngine(GeometryEngine):
    """Engine that records calls and returns canned answers."""

    def __init__(self, length: float = 1.0, area: float = 2.0, simple: bool = True) -> None:
        self.calls: list[str] = []
        self.operands: tuple = ()
        self._length = length
        self._area = area
        self._simple = simple

    def length(self, geometry):
        self.calls.append("length")
        return self._length

    def area(self, geometry):
        self.calls.append("area")
        return self._area

    def is_simple(self, geometry):
        self.calls.append("is_simple")
        return self._simple

    def is_valid(self, geometry):
        self.calls.append("is_valid")
        return True

    def distance(self, a, b):
        self.calls.append("distance")
        self.operands = (a, b)
        return 0.0


@pytest.fixture
def stub_engine():
    """A StubEngine registered as the default engine for one test."""
    engine = StubEngine()
    set_default_engine(engine)
    yield engine
    set_default_engine(None)


@pytest.fixture
def no_engine():
    """Make sure no default engine is registered."""
    set_default_engine(None)
    yield
    set_default_engine(None)
