"""Well-Known Binary reader and writer (ISO type codes).

Type codes are the base code 1..7 plus 1000 for Z, 2000 for M and 3000 for
ZM. Each nested geometry carries its own byte-order flag, which the reader
honours independently of its parent.
"""

import logging
import math
import struct
from enum import IntEnum

from geo_interchange.config import settings
from geo_interchange.coordinates import CoordinateSystem
from geo_interchange.exceptions import UnsupportedTypeError, WKBDecodingError
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
    unwrap_geometry,
)

logger = logging.getLogger(__name__)

_TYPES_BY_CODE = {t.wkb_code: t for t in GeometryType}

# CircularString .. Triangle: valid ISO codes without a model counterpart
_UNSUPPORTED_CODES = range(8, 18)

# Byte-order flag + type code + the smallest payload (a uint32 count)
_MIN_GEOMETRY_SIZE = 9

_DIMENSION_OFFSETS = {
    0: (False, False),
    1: (True, False),
    2: (False, True),
    3: (True, True),
}

_MEMBER_TYPES = {
    GeometryType.MULTIPOINT: Point,
    GeometryType.MULTILINESTRING: LineString,
    GeometryType.MULTIPOLYGON: Polygon,
}


class ByteOrder(IntEnum):
    """WKB byte-order flag values."""

    BIG_ENDIAN = 0  # XDR
    LITTLE_ENDIAN = 1  # NDR

    @property
    def struct_prefix(self) -> str:
        return "<" if self is ByteOrder.LITTLE_ENDIAN else ">"

    @classmethod
    def from_name(cls, name: str) -> "ByteOrder":
        """Map the configured name ("little"/"big") to a flag."""
        return cls.LITTLE_ENDIAN if name == "little" else cls.BIG_ENDIAN


def _type_code(geometry: Geometry) -> int:
    return geometry.geometry_type.wkb_code + 1000 * geometry.cs.has_z + 2000 * geometry.cs.has_m


def _check_not_nan(values: tuple[float, ...], offset: int) -> None:
    for i, value in enumerate(values):
        if math.isnan(value):
            raise WKBDecodingError("NaN ordinate outside an empty point", offset + 8 * i)


class _Buffer:
    """Read cursor over a WKB byte string."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def unpack(self, fmt: str, what: str) -> tuple:
        size = struct.calcsize(fmt)
        if size > self.remaining:
            raise WKBDecodingError(
                f"Truncated data reading {what}: need {size} bytes, {self.remaining} left",
                self.offset,
            )
        values = struct.unpack_from(fmt, self.data, self.offset)
        self.offset += size
        return values

    def read_count(self, prefix: str, what: str, item_size: int) -> int:
        """Read a uint32 count and check that that many items can still fit."""
        count_offset = self.offset
        (count,) = self.unpack(prefix + "I", f"{what} count")
        if count * item_size > self.remaining:
            raise WKBDecodingError(
                f"{what.capitalize()} count {count} exceeds the {self.remaining} remaining bytes",
                count_offset,
            )
        return count


class WKBReader:
    """Builds geometries out of WKB byte strings."""

    def read(self, wkb: bytes | bytearray | memoryview, srid: int | None = None) -> Geometry:
        """Decode WKB; ``srid`` defaults to ``settings.default_srid``."""
        if not isinstance(wkb, (bytes, bytearray, memoryview)):
            raise TypeError(f"WKB must be bytes, got {type(wkb).__name__}")
        if srid is None:
            srid = settings.default_srid
        buffer = _Buffer(bytes(wkb))
        logger.debug("Reading WKB (%d bytes, srid=%d)", len(buffer.data), srid)

        geometry = self._geometry(buffer, None, srid)
        if buffer.remaining:
            raise WKBDecodingError(f"{buffer.remaining} unexpected trailing bytes", buffer.offset)
        return geometry

    def _geometry(self, buffer: _Buffer, parent_cs: CoordinateSystem | None, srid: int) -> Geometry:
        flag_offset = buffer.offset
        (flag,) = buffer.unpack("B", "byte order")
        if flag not in (ByteOrder.BIG_ENDIAN, ByteOrder.LITTLE_ENDIAN):
            raise WKBDecodingError(f"Invalid byte order flag {flag}", flag_offset)
        prefix = ByteOrder(flag).struct_prefix

        type_offset = buffer.offset
        (code,) = buffer.unpack(prefix + "I", "geometry type")
        geometry_type, has_z, has_m = self._decode_type(code, type_offset)

        cs = CoordinateSystem(has_z, has_m, srid)
        if parent_cs is not None and cs != parent_cs:
            raise WKBDecodingError(
                f"Nested {geometry_type.value} has {cs.dimension_suffix or 'XY'} coordinates "
                f"inside a {parent_cs.dimension_suffix or 'XY'} geometry",
                type_offset,
            )

        if geometry_type is GeometryType.POINT:
            return self._point(buffer, prefix, cs)
        if geometry_type is GeometryType.LINESTRING:
            return self._linestring(buffer, prefix, cs)
        if geometry_type is GeometryType.POLYGON:
            return self._polygon(buffer, prefix, cs)
        return self._collection(buffer, prefix, cs, geometry_type)

    @staticmethod
    def _decode_type(code: int, offset: int) -> tuple[GeometryType, bool, bool]:
        dimension, base = divmod(code, 1000)
        if dimension in _DIMENSION_OFFSETS:
            if base in _TYPES_BY_CODE:
                return (_TYPES_BY_CODE[base], *_DIMENSION_OFFSETS[dimension])
            if base in _UNSUPPORTED_CODES:
                raise UnsupportedTypeError(str(code), "WKB", f"at byte offset {offset}")
        raise WKBDecodingError(f"Unknown geometry type code {code}", offset)

    def _point(self, buffer: _Buffer, prefix: str, cs: CoordinateSystem) -> Point:
        offset = buffer.offset
        values = buffer.unpack(prefix + "d" * cs.coordinate_dimension, "point ordinates")
        # An empty point is encoded with NaN ordinates
        if all(math.isnan(v) for v in values):
            return Point(cs)
        _check_not_nan(values, offset)
        return Point(cs, values)

    def _points(self, buffer: _Buffer, prefix: str, cs: CoordinateSystem) -> list[Point]:
        n = cs.coordinate_dimension
        count = buffer.read_count(prefix, "point", 8 * n)
        offset = buffer.offset
        values = buffer.unpack(f"{prefix}{count * n}d", "point ordinates")
        _check_not_nan(values, offset)
        return [Point(cs, values[i : i + n]) for i in range(0, count * n, n)]

    def _linestring(self, buffer: _Buffer, prefix: str, cs: CoordinateSystem) -> LineString:
        return LineString(cs, self._points(buffer, prefix, cs))

    def _polygon(self, buffer: _Buffer, prefix: str, cs: CoordinateSystem) -> Polygon:
        count = buffer.read_count(prefix, "ring", 4)
        return Polygon(cs, [LineString(cs, self._points(buffer, prefix, cs)) for _ in range(count)])

    def _collection(
        self,
        buffer: _Buffer,
        prefix: str,
        cs: CoordinateSystem,
        geometry_type: GeometryType,
    ) -> Geometry:
        count = buffer.read_count(prefix, "part", _MIN_GEOMETRY_SIZE)
        member_type = _MEMBER_TYPES.get(geometry_type)
        members = []
        for _ in range(count):
            member_offset = buffer.offset
            member = self._geometry(buffer, cs, cs.srid)
            if member_type is not None and not isinstance(member, member_type):
                raise WKBDecodingError(
                    f"{geometry_type.value} cannot contain {member.geometry_type.value}",
                    member_offset,
                )
            members.append(member)

        if geometry_type is GeometryType.MULTIPOINT:
            return MultiPoint(cs, members)
        if geometry_type is GeometryType.MULTILINESTRING:
            return MultiLineString(cs, members)
        if geometry_type is GeometryType.MULTIPOLYGON:
            return MultiPolygon(cs, members)
        return GeometryCollection(cs, members)


class WKBWriter:
    """Serializes geometries to WKB in a single byte order."""

    def __init__(self, byte_order: ByteOrder | None = None) -> None:
        if byte_order is None:
            byte_order = ByteOrder.from_name(settings.wkb_byte_order)
        self.byte_order = ByteOrder(byte_order)

    def write(self, geometry: Geometry) -> bytes:
        parts: list[bytes] = []
        self._geometry(unwrap_geometry(geometry), parts)
        return b"".join(parts)

    def _geometry(self, geometry: Geometry, out: list[bytes]) -> None:
        prefix = self.byte_order.struct_prefix
        out.append(struct.pack(prefix + "BI", self.byte_order, _type_code(geometry)))

        if isinstance(geometry, Point):
            values = geometry.coords or (math.nan,) * geometry.cs.coordinate_dimension
            out.append(struct.pack(prefix + "d" * len(values), *values))
        elif isinstance(geometry, LineString):
            self._points(geometry, out)
        elif isinstance(geometry, Polygon):
            out.append(struct.pack(prefix + "I", len(geometry.rings)))
            for ring in geometry.rings:
                self._points(ring, out)
        else:
            out.append(struct.pack(prefix + "I", len(geometry.geometries)))
            for member in geometry.geometries:
                self._geometry(member, out)

    def _points(self, linestring: LineString, out: list[bytes]) -> None:
        prefix = self.byte_order.struct_prefix
        values = [v for point in linestring.points for v in point.coords]
        out.append(struct.pack(f"{prefix}I{len(values)}d", len(linestring.points), *values))


def read_wkb(wkb: bytes | bytearray | memoryview, srid: int | None = None) -> Geometry:
    return WKBReader().read(wkb, srid=srid)


def write_wkb(geometry: Geometry, byte_order: ByteOrder | None = None) -> bytes:
    return WKBWriter(byte_order=byte_order).write(geometry)
