"""GeoJSON reader and writer.

GeoJSON positions are always WGS84 (SRID 4326) and never carry M values.
Whether a geometry has Z is inferred from its coordinates: the first numeric
position found depth-first decides for the whole geometry, and a structure
with no position at all (only empty arrays) is 2D.
"""

import json
import logging
import math
from collections.abc import Mapping
from numbers import Real
from typing import Any

from geo_interchange.config import settings
from geo_interchange.coordinates import CoordinateSystem
from geo_interchange.exceptions import GeoJSONStructuralError, UnsupportedTypeError
from geo_interchange.geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
    unwrap_geometry,
)

logger = logging.getLogger(__name__)

GEOJSON_SRID = 4326

# Recognized GeoJSON types in their standard case, keyed by lowercase name
_TYPES = {
    "feature": "Feature",
    "featurecollection": "FeatureCollection",
    "point": "Point",
    "multipoint": "MultiPoint",
    "linestring": "LineString",
    "multilinestring": "MultiLineString",
    "polygon": "Polygon",
    "multipolygon": "MultiPolygon",
}

_GEOMETRY_TYPES = frozenset({
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
})


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _child(path: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{path}[{key}]"
    return f"{path}.{key}" if path else key


class GeoJSONReader:
    """Builds geometries out of GeoJSON.

    Args:
        lenient: Match type names case-insensitively (``POINT`` for
            ``Point``). The standard is case-sensitive, so this is off unless
            ``settings.geojson_lenient`` says otherwise.
        ignore_z: Read every geometry as 2D, dropping any third ordinate.
    """

    def __init__(self, lenient: bool | None = None, ignore_z: bool | None = None) -> None:
        self.lenient = settings.geojson_lenient if lenient is None else lenient
        self.ignore_z = settings.geojson_ignore_z if ignore_z is None else ignore_z

    def read(self, geojson: str) -> Geometry:
        """Parse GeoJSON text."""
        try:
            document = json.loads(geojson)
        except json.JSONDecodeError as e:
            raise GeoJSONStructuralError("", f"Invalid JSON: {e}") from e
        return self.read_geojson(document)

    def read_geojson(self, document: Any) -> Geometry:
        """Read an already decoded GeoJSON object."""
        if not isinstance(document, Mapping):
            raise GeoJSONStructuralError("", "GeoJSON document must be an object")

        raw_type = self._type_of(document, "")
        geo_type = self._normalize_type(raw_type)
        logger.debug("Reading GeoJSON %s", geo_type)

        if geo_type == "Feature":
            return self._feature(document, "")
        if geo_type == "FeatureCollection":
            return self._feature_collection(document)
        if geo_type in _GEOMETRY_TYPES:
            return self._geometry(document, "")
        raise UnsupportedTypeError(raw_type, "GeoJSON")

    # --- Objects ---

    @staticmethod
    def _type_of(obj: Mapping, path: str) -> str:
        value = obj.get("type")
        if not isinstance(value, str):
            raise GeoJSONStructuralError(_child(path, "type"), 'Missing or malformed "type" member')
        return value

    def _normalize_type(self, geo_type: str) -> str:
        """Return the standard spelling in lenient mode, the input otherwise."""
        if self.lenient:
            return _TYPES.get(geo_type.lower(), geo_type)
        return geo_type

    def _feature_collection(self, document: Mapping) -> GeometryCollection:
        features = document.get("features")
        if not isinstance(features, list):
            raise GeoJSONStructuralError("features", 'Missing or malformed "features" member')

        geometries = []
        for i, feature in enumerate(features):
            path = _child("features", i)
            if not isinstance(feature, Mapping):
                raise GeoJSONStructuralError(path, "Feature must be an object")
            geometry = self._feature(feature, path)
            if geometries and geometry.cs != geometries[0].cs:
                raise GeoJSONStructuralError(
                    _child(path, "geometry.coordinates"),
                    f"Feature has {geometry.cs.dimension_suffix or 'XY'} coordinates, "
                    f"earlier features have {geometries[0].cs.dimension_suffix or 'XY'}",
                )
            geometries.append(geometry)

        if not geometries:
            return GeometryCollection(CoordinateSystem.xy(GEOJSON_SRID))
        return GeometryCollection.of(*geometries)

    def _feature(self, feature: Mapping, path: str) -> Geometry:
        value = feature.get("type")
        if not isinstance(value, str) or self._normalize_type(value) != "Feature":
            raise GeoJSONStructuralError(_child(path, "type"), 'Expected "type": "Feature"')

        geometry = feature.get("geometry")
        if not isinstance(geometry, Mapping):
            raise GeoJSONStructuralError(
                _child(path, "geometry"), 'Missing or malformed "geometry" member'
            )
        return self._geometry(geometry, _child(path, "geometry"))

    def _geometry(self, geometry: Mapping, path: str) -> Geometry:
        raw_type = self._type_of(geometry, path)
        geo_type = self._normalize_type(raw_type)
        if geo_type not in _GEOMETRY_TYPES:
            raise UnsupportedTypeError(raw_type, "GeoJSON")

        coords_path = _child(path, "coordinates")
        coords = geometry.get("coordinates")
        if not isinstance(coords, list):
            raise GeoJSONStructuralError(coords_path, 'Missing or malformed "coordinates" member')

        cs = CoordinateSystem(self._has_z(coords), False, GEOJSON_SRID)

        if geo_type == "Point":
            return self._point(cs, coords, coords_path)
        if geo_type == "MultiPoint":
            return MultiPoint(cs, self._positions(cs, coords, coords_path))
        if geo_type == "LineString":
            return self._linestring(cs, coords, coords_path)
        if geo_type == "MultiLineString":
            return MultiLineString(cs, self._linestrings(cs, coords, coords_path))
        if geo_type == "Polygon":
            return self._polygon(cs, coords, coords_path)
        return MultiPolygon(
            cs,
            [
                self._polygon(cs, c, _child(coords_path, i))
                for i, c in enumerate(self._arrays(coords, coords_path))
            ],
        )

    # --- Coordinates ---

    def _has_z(self, coords: list) -> bool:
        if self.ignore_z:
            return False
        leaf = _first_position(coords)
        return leaf is not None and len(leaf) == 3

    @staticmethod
    def _arrays(coords: list, path: str) -> list[list]:
        for i, item in enumerate(coords):
            if not isinstance(item, list):
                raise GeoJSONStructuralError(_child(path, i), "Expected an array")
        return coords

    def _point(self, cs: CoordinateSystem, position: list, path: str) -> Point:
        """[x, y] or [x, y, z]."""
        if not position:
            return Point(cs)
        values = []
        for i, value in enumerate(position):
            if not _is_number(value):
                raise GeoJSONStructuralError(_child(path, i), f"Expected a number, got {value!r}")
            try:
                value = float(value)
            except OverflowError:
                value = math.inf
            # json.loads also accepts NaN and Infinity
            if not math.isfinite(value):
                raise GeoJSONStructuralError(_child(path, i), "Ordinate is not a finite number")
            values.append(value)
        position = values

        if self.ignore_z:
            position = position[:2] + position[3:]
        n = cs.coordinate_dimension
        if len(position) < n:
            raise GeoJSONStructuralError(
                path, f"Position needs {n} ordinates, got {len(position)}"
            )
        # Ordinates beyond the inferred dimension are dropped.
        return Point(cs, position[:n])

    def _positions(self, cs: CoordinateSystem, coords: list, path: str) -> list[Point]:
        """[[x, y], ...]"""
        return [
            self._point(cs, position, _child(path, i))
            for i, position in enumerate(self._arrays(coords, path))
        ]

    def _linestring(self, cs: CoordinateSystem, coords: list, path: str) -> LineString:
        points = self._positions(cs, coords, path)
        for i, point in enumerate(points):
            if point.is_empty:
                raise GeoJSONStructuralError(_child(path, i), "Empty position in a line")
        return LineString(cs, points)

    def _linestrings(self, cs: CoordinateSystem, coords: list, path: str) -> list[LineString]:
        """[[[x, y], ...], ...]"""
        return [
            self._linestring(cs, c, _child(path, i))
            for i, c in enumerate(self._arrays(coords, path))
        ]

    def _polygon(self, cs: CoordinateSystem, coords: list, path: str) -> Polygon:
        return Polygon(cs, self._linestrings(cs, coords, path))


def _first_position(coords: list) -> list | None:
    """Depth-first search for the first array whose first item is a number."""
    if not coords:
        return None
    if not isinstance(coords[0], list):
        return coords
    for item in coords:
        if isinstance(item, list):
            leaf = _first_position(item)
            if leaf is not None:
                return leaf
    return None


class GeoJSONWriter:
    """Serializes geometries to GeoJSON.

    M ordinates have no GeoJSON representation and are dropped. A
    GeometryCollection is written as a FeatureCollection, which is what the
    reader folds back into a GeometryCollection.
    """

    def write(self, geometry: Geometry) -> str:
        return json.dumps(self.to_mapping(geometry))

    def to_mapping(self, geometry: Geometry) -> dict[str, Any]:
        geometry = unwrap_geometry(geometry)
        if geometry.cs.has_m:
            logger.debug("Dropping M ordinates from %s for GeoJSON", geometry.geometry_type.value)
        if isinstance(geometry, GeometryCollection):
            return {
                "type": "FeatureCollection",
                "features": [
                    {"type": "Feature", "geometry": self._geometry(member), "properties": None}
                    for member in geometry.geometries
                ],
            }
        return self._geometry(geometry)

    def _geometry(self, geometry: Geometry) -> dict[str, Any]:
        if isinstance(geometry, GeometryCollection):
            raise UnsupportedTypeError(
                geometry.geometry_type.value, "GeoJSON", "nested collections cannot be written"
            )
        return {"type": geometry.geometry_type.value, "coordinates": self._coordinates(geometry)}

    def _coordinates(self, geometry: Geometry) -> list:
        if isinstance(geometry, Point):
            return list(geometry.coords[: geometry.cs.spatial_dimension])
        if isinstance(geometry, LineString):
            return [self._coordinates(p) for p in geometry.points]
        if isinstance(geometry, Polygon):
            return [self._coordinates(ring) for ring in geometry.rings]
        return [self._coordinates(member) for member in geometry.geometries]


def read_geojson(geojson: str, lenient: bool | None = None, ignore_z: bool | None = None) -> Geometry:
    return GeoJSONReader(lenient=lenient, ignore_z=ignore_z).read(geojson)


def write_geojson(geometry: Geometry) -> str:
    return GeoJSONWriter().write(geometry)
