"""Geometry model with WKT, WKB and GeoJSON codecs."""

from geo_interchange.coordinates import CoordinateSystem
from geo_interchange.engine import (
    GeometryEngine,
    ShapelyEngine,
    get_default_engine,
    set_default_engine,
)
from geo_interchange.exceptions import (
    EngineNotConfiguredError,
    GeoJSONStructuralError,
    GeometryError,
    InvalidGeometryError,
    TypeMismatchError,
    UnsupportedTypeError,
    WKBDecodingError,
    WKTSyntaxError,
)
from geo_interchange.geometry import (
    Geometry,
    GeometryCollection,
    GeometryType,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from geo_interchange.proxy import GeometryProxy, PayloadFormat

__version__ = "0.1.0"
__all__ = [
    "CoordinateSystem",
    "EngineNotConfiguredError",
    "GeoJSONStructuralError",
    "Geometry",
    "GeometryCollection",
    "GeometryEngine",
    "GeometryError",
    "GeometryProxy",
    "GeometryType",
    "InvalidGeometryError",
    "LineString",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "PayloadFormat",
    "Point",
    "Polygon",
    "ShapelyEngine",
    "TypeMismatchError",
    "UnsupportedTypeError",
    "WKBDecodingError",
    "WKTSyntaxError",
    "get_default_engine",
    "set_default_engine",
]
