"""Geometry model: the seven OGC simple-feature kinds.

Each kind is a frozen dataclass that carries its own ``CoordinateSystem`` in
the ``cs`` field. Behaviour shared by all kinds lives in ``_GeometryOps``,
which holds no state. Geometries are immutable; parents own their children.
"""

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar, Iterator

from geo_interchange.coordinates import CoordinateSystem
from geo_interchange.engine import resolve_engine
from geo_interchange.exceptions import InvalidGeometryError, TypeMismatchError

if TYPE_CHECKING:
    from geo_interchange.engine import GeometryEngine
    from geo_interchange.io.wkb import ByteOrder


class GeometryType(StrEnum):
    """Geometry kinds, valued by their GeoJSON / OGC camel-case name."""

    POINT = "Point"
    LINESTRING = "LineString"
    POLYGON = "Polygon"
    MULTIPOINT = "MultiPoint"
    MULTILINESTRING = "MultiLineString"
    MULTIPOLYGON = "MultiPolygon"
    GEOMETRYCOLLECTION = "GeometryCollection"

    @property
    def wkt_keyword(self) -> str:
        return self.value.upper()

    @property
    def wkb_code(self) -> int:
        """Base WKB type code, before the Z/M offsets."""
        return _WKB_BASE_CODES[self]


_WKB_BASE_CODES = {
    GeometryType.POINT: 1,
    GeometryType.LINESTRING: 2,
    GeometryType.POLYGON: 3,
    GeometryType.MULTIPOINT: 4,
    GeometryType.MULTILINESTRING: 5,
    GeometryType.MULTIPOLYGON: 6,
    GeometryType.GEOMETRYCOLLECTION: 7,
}


class _GeometryOps:
    """Operations common to every geometry kind."""

    geometry_type: ClassVar[GeometryType]
    cs: CoordinateSystem

    @property
    def srid(self) -> int:
        return self.cs.srid

    @property
    def is_3d(self) -> bool:
        return self.cs.has_z

    @property
    def is_measured(self) -> bool:
        return self.cs.has_m

    @property
    def coordinate_dimension(self) -> int:
        return self.cs.coordinate_dimension

    @property
    def spatial_dimension(self) -> int:
        return self.cs.spatial_dimension

    @property
    def is_empty(self) -> bool:
        raise NotImplementedError

    # --- Serialization ---

    def as_text(self, pretty_print: bool | None = None) -> str:
        """Serialize to WKT."""
        from geo_interchange.io.wkt import WKTWriter

        return WKTWriter(pretty_print=pretty_print).write(self)

    def as_binary(self, byte_order: "ByteOrder | None" = None) -> bytes:
        """Serialize to WKB."""
        from geo_interchange.io.wkb import WKBWriter

        return WKBWriter(byte_order=byte_order).write(self)

    def as_geojson(self) -> str:
        """Serialize to GeoJSON text. M ordinates are dropped."""
        from geo_interchange.io.geojson import GeoJSONWriter

        return GeoJSONWriter().write(self)

    @classmethod
    def from_text(cls, wkt: str, srid: int | None = None):
        """Read WKT, requiring the result to be of this kind."""
        from geo_interchange.io.wkt import read_wkt

        return cls._expect(read_wkt(wkt, srid=srid))

    @classmethod
    def from_binary(cls, wkb: bytes, srid: int | None = None):
        """Read WKB, requiring the result to be of this kind."""
        from geo_interchange.io.wkb import read_wkb

        return cls._expect(read_wkb(wkb, srid=srid))

    @classmethod
    def from_geojson(cls, geojson: str, lenient: bool | None = None, ignore_z: bool | None = None):
        """Read GeoJSON text, requiring the result to be of this kind."""
        from geo_interchange.io.geojson import GeoJSONReader

        return cls._expect(GeoJSONReader(lenient=lenient, ignore_z=ignore_z).read(geojson))

    @classmethod
    def _expect(cls, geometry: "Geometry"):
        if not isinstance(geometry, cls):
            raise TypeMismatchError(cls.geometry_type.value, geometry.geometry_type.value)
        return geometry

    # --- Engine-backed operations ---

    def is_simple(self, engine: "GeometryEngine | None" = None) -> bool:
        return resolve_engine(engine).is_simple(self)

    def is_valid(self, engine: "GeometryEngine | None" = None) -> bool:
        return resolve_engine(engine).is_valid(self)

    def distance(self, other: "Geometry", engine: "GeometryEngine | None" = None) -> float:
        return resolve_engine(engine).distance(self, unwrap_geometry(other))


def unwrap_geometry(value):
    """Return the decoded geometry behind a ``GeometryProxy``, or ``value`` itself."""
    from geo_interchange.proxy import GeometryProxy

    if isinstance(value, GeometryProxy):
        return value.geometry
    return value


def _check_children(
    owner: str,
    cs: CoordinateSystem,
    children,
    allowed: tuple[type, ...],
) -> tuple:
    """Validate members and return them as a tuple with proxies decoded."""
    children = tuple(unwrap_geometry(child) for child in children)
    for child in children:
        if not isinstance(child, allowed):
            kind = getattr(child, "geometry_type", type(child).__name__)
            raise InvalidGeometryError(f"{owner} cannot contain {kind}")
        if child.cs != cs:
            raise InvalidGeometryError(
                f"{owner} mixes coordinate systems: {child.cs} in a {cs} geometry"
            )
    return children


@dataclass(frozen=True)
class Point(_GeometryOps):
    """A single position; ``coords`` is empty for the empty point."""

    cs: CoordinateSystem
    coords: tuple[float, ...] = ()

    geometry_type: ClassVar[GeometryType] = GeometryType.POINT

    def __post_init__(self) -> None:
        coords = tuple(float(c) for c in self.coords)
        if coords and len(coords) != self.cs.coordinate_dimension:
            raise InvalidGeometryError(
                f"Point needs {self.cs.coordinate_dimension} ordinates for "
                f"{self.cs.dimension_suffix or 'XY'} coordinates, got {len(coords)}"
            )
        # NaN ordinates are how WKB spells the empty point
        if any(math.isnan(c) for c in coords):
            raise InvalidGeometryError("Point ordinates cannot be NaN; use an empty Point")
        object.__setattr__(self, "coords", coords)

    @classmethod
    def xy(cls, x: float, y: float, srid: int = 0) -> "Point":
        return cls(CoordinateSystem.xy(srid), (x, y))

    @classmethod
    def xyz(cls, x: float, y: float, z: float, srid: int = 0) -> "Point":
        return cls(CoordinateSystem.xyz(srid), (x, y, z))

    @classmethod
    def xym(cls, x: float, y: float, m: float, srid: int = 0) -> "Point":
        return cls(CoordinateSystem.xym(srid), (x, y, m))

    @classmethod
    def xyzm(cls, x: float, y: float, z: float, m: float, srid: int = 0) -> "Point":
        return cls(CoordinateSystem.xyzm(srid), (x, y, z, m))

    @classmethod
    def empty(cls, cs: CoordinateSystem | None = None) -> "Point":
        return cls(cs or CoordinateSystem.xy())

    @property
    def is_empty(self) -> bool:
        return not self.coords

    @property
    def x(self) -> float | None:
        return self.coords[0] if self.coords else None

    @property
    def y(self) -> float | None:
        return self.coords[1] if self.coords else None

    @property
    def z(self) -> float | None:
        if not self.coords or not self.cs.has_z:
            return None
        return self.coords[2]

    @property
    def m(self) -> float | None:
        if not self.coords or not self.cs.has_m:
            return None
        return self.coords[3 if self.cs.has_z else 2]


@dataclass(frozen=True)
class LineString(_GeometryOps):
    """An ordered sequence of points with linear interpolation between them.

    Closure is not enforced here; ring consumers check ``is_closed()``.
    """

    cs: CoordinateSystem
    points: tuple[Point, ...] = ()

    geometry_type: ClassVar[GeometryType] = GeometryType.LINESTRING

    def __post_init__(self) -> None:
        points = _check_children("LineString", self.cs, self.points, (Point,))
        for point in points:
            if point.is_empty:
                raise InvalidGeometryError("LineString cannot contain an empty Point")
        object.__setattr__(self, "points", points)

    @classmethod
    def of(cls, *points: Point, cs: CoordinateSystem | None = None) -> "LineString":
        return cls(_derive_cs("LineString", points, cs), points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    def start_point(self) -> Point | None:
        return self.points[0] if self.points else None

    def end_point(self) -> Point | None:
        return self.points[-1] if self.points else None

    def num_points(self) -> int:
        return len(self.points)

    def point_n(self, n: int) -> Point:
        """Return the Nth point, 1-based."""
        if not 1 <= n <= len(self.points):
            raise IndexError(f"Point {n} out of range 1..{len(self.points)}")
        return self.points[n - 1]

    def is_closed(self) -> bool:
        return bool(self.points) and self.points[0] == self.points[-1]

    def is_ring(self, engine: "GeometryEngine | None" = None) -> bool:
        """Closed and simple."""
        return self.is_closed() and self.is_simple(engine)

    def length(self, engine: "GeometryEngine | None" = None) -> float:
        return resolve_engine(engine).length(self)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class Polygon(_GeometryOps):
    """An exterior ring followed by zero or more interior rings."""

    cs: CoordinateSystem
    rings: tuple[LineString, ...] = ()

    geometry_type: ClassVar[GeometryType] = GeometryType.POLYGON

    def __post_init__(self) -> None:
        rings = _check_children("Polygon", self.cs, self.rings, (LineString,))
        object.__setattr__(self, "rings", rings)

    @classmethod
    def of(cls, *rings: LineString, cs: CoordinateSystem | None = None) -> "Polygon":
        return cls(_derive_cs("Polygon", rings, cs), rings)

    @property
    def is_empty(self) -> bool:
        return not self.rings

    def exterior_ring(self) -> LineString | None:
        return self.rings[0] if self.rings else None

    def num_interior_rings(self) -> int:
        return max(0, len(self.rings) - 1)

    def interior_ring_n(self, n: int) -> LineString:
        """Return the Nth interior ring, 1-based."""
        if not 1 <= n <= self.num_interior_rings():
            raise IndexError(f"Interior ring {n} out of range 1..{self.num_interior_rings()}")
        return self.rings[n]

    def area(self, engine: "GeometryEngine | None" = None) -> float:
        return resolve_engine(engine).area(self)

    def __iter__(self) -> Iterator[LineString]:
        return iter(self.rings)

    def __len__(self) -> int:
        return len(self.rings)


@dataclass(frozen=True)
class _Collection(_GeometryOps):
    """Shared shape of the Multi* kinds and GeometryCollection."""

    cs: CoordinateSystem
    geometries: tuple = ()

    member_types: ClassVar[tuple[type, ...]] = ()

    def __post_init__(self) -> None:
        geometries = _check_children(
            self.geometry_type.value, self.cs, self.geometries, self.member_types
        )
        object.__setattr__(self, "geometries", geometries)

    @classmethod
    def of(cls, *geometries, cs: CoordinateSystem | None = None):
        return cls(_derive_cs(cls.geometry_type.value, geometries, cs), geometries)

    @property
    def is_empty(self) -> bool:
        return not self.geometries

    def num_geometries(self) -> int:
        return len(self.geometries)

    def geometry_n(self, n: int):
        """Return the Nth member, 1-based."""
        if not 1 <= n <= len(self.geometries):
            raise IndexError(f"Geometry {n} out of range 1..{len(self.geometries)}")
        return self.geometries[n - 1]

    def __iter__(self) -> Iterator:
        return iter(self.geometries)

    def __len__(self) -> int:
        return len(self.geometries)


@dataclass(frozen=True)
class MultiPoint(_Collection):
    geometry_type: ClassVar[GeometryType] = GeometryType.MULTIPOINT
    member_types: ClassVar[tuple[type, ...]] = (Point,)


@dataclass(frozen=True)
class MultiLineString(_Collection):
    geometry_type: ClassVar[GeometryType] = GeometryType.MULTILINESTRING
    member_types: ClassVar[tuple[type, ...]] = (LineString,)

    def length(self, engine: "GeometryEngine | None" = None) -> float:
        return resolve_engine(engine).length(self)


@dataclass(frozen=True)
class MultiPolygon(_Collection):
    geometry_type: ClassVar[GeometryType] = GeometryType.MULTIPOLYGON
    member_types: ClassVar[tuple[type, ...]] = (Polygon,)

    def area(self, engine: "GeometryEngine | None" = None) -> float:
        return resolve_engine(engine).area(self)


@dataclass(frozen=True)
class GeometryCollection(_Collection):
    """A heterogeneous collection; members may themselves be collections."""

    geometry_type: ClassVar[GeometryType] = GeometryType.GEOMETRYCOLLECTION


GeometryCollection.member_types = (
    Point,
    LineString,
    Polygon,
    MultiPoint,
    MultiLineString,
    MultiPolygon,
    GeometryCollection,
)

Geometry = Point | LineString | Polygon | MultiPoint | MultiLineString | MultiPolygon | GeometryCollection

GEOMETRY_CLASSES: dict[GeometryType, type] = {
    GeometryType.POINT: Point,
    GeometryType.LINESTRING: LineString,
    GeometryType.POLYGON: Polygon,
    GeometryType.MULTIPOINT: MultiPoint,
    GeometryType.MULTILINESTRING: MultiLineString,
    GeometryType.MULTIPOLYGON: MultiPolygon,
    GeometryType.GEOMETRYCOLLECTION: GeometryCollection,
}


def _derive_cs(owner: str, children: tuple, cs: CoordinateSystem | None) -> CoordinateSystem:
    if cs is not None:
        return cs
    if not children:
        raise InvalidGeometryError(f"{owner}.of() needs a coordinate system when empty")
    return unwrap_geometry(children[0]).cs
