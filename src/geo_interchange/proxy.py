"""Lazy geometry proxy.

A proxy holds a WKT or WKB payload and decodes it the first time the
geometry content is needed. Asking for the payload in its own format
(``as_text()`` on WKT, ``as_binary()`` on WKB) never decodes, so values that
are only passed through stay cheap.
"""

import logging
import threading
from collections.abc import Callable
from enum import StrEnum
from typing import Any

from geo_interchange.exceptions import TypeMismatchError
from geo_interchange.geometry import Geometry
from geo_interchange.io.wkb import ByteOrder, read_wkb
from geo_interchange.io.wkt import read_wkt

logger = logging.getLogger(__name__)

Reader = Callable[[Any, int | None], Geometry]


class PayloadFormat(StrEnum):
    """Encoding of a proxy payload."""

    WKT = "wkt"
    WKB = "wkb"


class GeometryProxy:
    """Stand-in for a geometry that decodes its payload on first use.

    Args:
        payload: WKT text or WKB bytes.
        fmt: Encoding of ``payload``.
        expected: Geometry class the payload must decode to, e.g.
            ``LineString``. ``None`` accepts any kind.
        srid: SRID given to the decoded geometry; the reader default if None.
        reader: Replaces the codec for ``fmt``; called as
            ``reader(payload, srid)``.
    """

    def __init__(
        self,
        payload: str | bytes,
        fmt: PayloadFormat | str,
        expected: type | None = None,
        srid: int | None = None,
        reader: Reader | None = None,
    ) -> None:
        self._format = PayloadFormat(fmt)
        if self._format is PayloadFormat.WKB:
            payload = bytes(payload)
        self._payload = payload
        self._expected = expected
        self._srid = srid
        self._reader = reader
        self._geometry: Geometry | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_text(cls, wkt: str, expected: type | None = None, **kwargs) -> "GeometryProxy":
        return cls(wkt, PayloadFormat.WKT, expected, **kwargs)

    @classmethod
    def from_binary(cls, wkb: bytes, expected: type | None = None, **kwargs) -> "GeometryProxy":
        return cls(wkb, PayloadFormat.WKB, expected, **kwargs)

    @property
    def payload(self) -> str | bytes:
        return self._payload

    @property
    def format(self) -> PayloadFormat:
        return self._format

    @property
    def expected(self) -> type | None:
        return self._expected

    @property
    def is_loaded(self) -> bool:
        return self._geometry is not None

    @property
    def geometry(self) -> Geometry:
        """The decoded geometry, decoding the payload on first access."""
        geometry = self._geometry
        if geometry is None:
            with self._lock:
                if self._geometry is None:
                    self._geometry = self._load()
                geometry = self._geometry
        return geometry

    def _load(self) -> Geometry:
        reader = self._reader
        if reader is None:
            reader = read_wkt if self._format is PayloadFormat.WKT else read_wkb
        logger.debug("Decoding %s proxy payload (%d)", self._format.value, len(self._payload))

        geometry = reader(self._payload, self._srid)
        if self._expected is not None and not isinstance(geometry, self._expected):
            raise TypeMismatchError(self._expected.geometry_type.value, geometry.geometry_type.value)
        return geometry

    # --- Serialization ---

    def as_text(self, pretty_print: bool | None = None) -> str:
        if self._format is PayloadFormat.WKT and pretty_print is None:
            return self._payload
        return self.geometry.as_text(pretty_print)

    def as_binary(self, byte_order: ByteOrder | None = None) -> bytes:
        if self._format is PayloadFormat.WKB and byte_order is None:
            return self._payload
        return self.geometry.as_binary(byte_order)

    def as_geojson(self) -> str:
        return self.geometry.as_geojson()

    # --- Delegation ---

    def __getattr__(self, name: str) -> Any:
        # Only reached for names the proxy itself does not define.
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self.geometry, name)

    def __iter__(self):
        return iter(self.geometry)

    def __len__(self) -> int:
        return len(self.geometry)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GeometryProxy):
            other = other.geometry
        return self.geometry == other

    def __hash__(self) -> int:
        return hash(self.geometry)

    def __repr__(self) -> str:
        state = "loaded" if self.is_loaded else "unloaded"
        expected = self._expected.__name__ if self._expected is not None else "Geometry"
        return f"<GeometryProxy {expected} {self._format.value} {state}>"
