"""SQLAlchemy column type storing geometries as WKB.

Loaded values come back as ``GeometryProxy`` objects, so rows that are read
and written back untouched never pay for decoding.
"""

from sqlalchemy import LargeBinary
from sqlalchemy.types import TypeDecorator

from geo_interchange.exceptions import TypeMismatchError
from geo_interchange.geometry import GEOMETRY_CLASSES
from geo_interchange.proxy import GeometryProxy

# Stored geometries are assumed to be WGS84 lon/lat
WGS84_SRID = 4326

_GEOMETRY_CLASSES = tuple(GEOMETRY_CLASSES.values())


class GeometryColumn(TypeDecorator):
    """WKB-backed geometry column.

    Args:
        geometry_type: Geometry class every value must have, or None for any.
        srid: SRID attached to loaded geometries.
    """

    impl = LargeBinary
    cache_ok = True

    def __init__(self, geometry_type: type | None = None, srid: int = WGS84_SRID) -> None:
        super().__init__()
        self.geometry_type = geometry_type
        self.srid = srid

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, GeometryProxy):
            # A proxy already bound to this column's kind is written undecoded
            if self.geometry_type is not None and (
                value.is_loaded or value.expected is not self.geometry_type
            ):
                self._check_kind(value.geometry)
            return value.as_binary()
        if isinstance(value, _GEOMETRY_CLASSES):
            self._check_kind(value)
            return value.as_binary()
        raise TypeError(f"Expected a geometry, got {type(value).__name__}")

    def _check_kind(self, geometry) -> None:
        if self.geometry_type is not None and not isinstance(geometry, self.geometry_type):
            raise TypeMismatchError(
                self.geometry_type.geometry_type.value, geometry.geometry_type.value
            )

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return GeometryProxy.from_binary(value, expected=self.geometry_type, srid=self.srid)
