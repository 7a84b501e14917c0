"""Geometry engine seam.

The codecs never compute anything geometric. Lengths, areas and predicates go
through a ``GeometryEngine``, either passed explicitly or registered as the
process-wide default.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from geo_interchange.exceptions import EngineNotConfiguredError

if TYPE_CHECKING:
    from geo_interchange.geometry import Geometry

logger = logging.getLogger(__name__)


class GeometryEngine(ABC):
    """Computational geometry operations required by the model."""

    @abstractmethod
    def length(self, geometry: "Geometry") -> float: ...

    @abstractmethod
    def area(self, geometry: "Geometry") -> float: ...

    @abstractmethod
    def is_simple(self, geometry: "Geometry") -> bool: ...

    @abstractmethod
    def is_valid(self, geometry: "Geometry") -> bool: ...

    @abstractmethod
    def distance(self, a: "Geometry", b: "Geometry") -> float: ...


class ShapelyEngine(GeometryEngine):
    """Engine backed by shapely/GEOS, fed through WKB."""

    def _to_shapely(self, geometry: "Geometry"):
        import shapely

        from geo_interchange.io.wkb import write_wkb

        return shapely.from_wkb(write_wkb(geometry))

    def length(self, geometry: "Geometry") -> float:
        return float(self._to_shapely(geometry).length)

    def area(self, geometry: "Geometry") -> float:
        return float(self._to_shapely(geometry).area)

    def is_simple(self, geometry: "Geometry") -> bool:
        return bool(self._to_shapely(geometry).is_simple)

    def is_valid(self, geometry: "Geometry") -> bool:
        return bool(self._to_shapely(geometry).is_valid)

    def distance(self, a: "Geometry", b: "Geometry") -> float:
        return float(self._to_shapely(a).distance(self._to_shapely(b)))


_default_engine: GeometryEngine | None = None
_engine_lock = threading.Lock()


def set_default_engine(engine: GeometryEngine | None) -> None:
    """Register the engine used when an operation is not given one."""
    global _default_engine
    with _engine_lock:
        _default_engine = engine
    logger.debug("Default geometry engine set to %s", type(engine).__name__ if engine else None)


def get_default_engine() -> GeometryEngine:
    """Return the registered default engine."""
    engine = _default_engine
    if engine is None:
        raise EngineNotConfiguredError(
            "No geometry engine configured; call set_default_engine() or pass engine="
        )
    return engine


def resolve_engine(engine: GeometryEngine | None) -> GeometryEngine:
    return engine if engine is not None else get_default_engine()
