"""Well-Known Text reader and writer."""

import logging
import math
import re
from typing import NamedTuple

from geo_interchange.config import settings
from geo_interchange.coordinates import CoordinateSystem
from geo_interchange.exceptions import InvalidGeometryError, UnsupportedTypeError, WKTSyntaxError
from geo_interchange.geometry import (
    GEOMETRY_CLASSES,
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

_KEYWORDS = {t.wkt_keyword: t for t in GeometryType}

# OGC types that are valid WKT but have no counterpart in the model
_UNSUPPORTED_KEYWORDS = frozenset({
    "GEOMETRY",
    "CURVE",
    "SURFACE",
    "MULTICURVE",
    "MULTISURFACE",
    "CIRCULARSTRING",
    "COMPOUNDCURVE",
    "CURVEPOLYGON",
    "POLYHEDRALSURFACE",
    "TIN",
    "TRIANGLE",
})

_DIMENSIONS = {
    "Z": (True, False),
    "M": (False, True),
    "ZM": (True, True),
}

_ATOM_RE = re.compile(r"[^\s(),]+|[(),]")
_WORD_RE = re.compile(r"[A-Za-z]+")
_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")

_WORD = "word"
_NUMBER = "number"
_PUNCT = "punct"
_END = "end"


class _Token(NamedTuple):
    kind: str
    text: str
    position: int


def _tokenize(text: str) -> list[_Token]:
    tokens: list[_Token] = []
    for match in _ATOM_RE.finditer(text):
        atom = match.group()
        position = match.start()
        if atom in "(),":
            tokens.append(_Token(_PUNCT, atom, position))
        elif _WORD_RE.fullmatch(atom):
            tokens.append(_Token(_WORD, atom, position))
        elif _NUMBER_RE.fullmatch(atom):
            tokens.append(_Token(_NUMBER, atom, position))
        elif atom[0] in "+-.0123456789":
            raise WKTSyntaxError(f"Malformed number {atom!r}", atom, position)
        else:
            raise WKTSyntaxError(f"Unexpected token {atom!r}", atom, position)
    tokens.append(_Token(_END, "", len(text)))
    return tokens


class _Parser:
    """Recursive-descent parser over the token list of one WKT string."""

    def __init__(self, text: str, srid: int) -> None:
        self._tokens = _tokenize(text)
        self._index = 0
        self._srid = srid

    # --- Token helpers ---

    def _peek(self) -> _Token:
        return self._tokens[self._index]

    def _next(self) -> _Token:
        token = self._tokens[self._index]
        if token.kind != _END:
            self._index += 1
        return token

    def _error(self, message: str, token: _Token) -> WKTSyntaxError:
        if token.kind == _END:
            return WKTSyntaxError(f"{message}, got end of input", None, token.position)
        return WKTSyntaxError(f"{message}, got {token.text!r}", token.text, token.position)

    def _expect(self, text: str) -> None:
        token = self._next()
        if token.text != text:
            raise self._error(f"Expected {text!r}", token)

    def _accept_word(self, word: str) -> bool:
        token = self._peek()
        if token.kind == _WORD and token.text.upper() == word:
            self._index += 1
            return True
        return False

    def _more(self) -> bool:
        """Consume ',' and return True, or consume ')' and return False."""
        token = self._next()
        if token.text == ",":
            return True
        if token.text == ")":
            return False
        raise self._error("Expected ',' or ')'", token)

    # --- Grammar ---

    def parse(self) -> Geometry:
        geometry = self._geometry(None)
        token = self._peek()
        if token.kind != _END:
            raise self._error("Expected end of input", token)
        return geometry

    def _geometry(self, parent_cs: CoordinateSystem | None) -> Geometry:
        token = self._next()
        if token.kind != _WORD:
            raise self._error("Expected geometry type", token)
        keyword = token.text.upper()
        geometry_type = _KEYWORDS.get(keyword)
        if geometry_type is None:
            if keyword in _UNSUPPORTED_KEYWORDS:
                raise UnsupportedTypeError(token.text, "WKT")
            raise WKTSyntaxError(f"Unknown geometry type {token.text!r}", token.text, token.position)

        cs = self._dimension(parent_cs)
        if self._accept_word("EMPTY"):
            return GEOMETRY_CLASSES[geometry_type](cs)

        if geometry_type is GeometryType.POINT:
            self._expect("(")
            point = Point(cs, self._coordinates(cs))
            self._expect(")")
            return point
        if geometry_type is GeometryType.LINESTRING:
            return self._linestring_text(cs)
        if geometry_type is GeometryType.POLYGON:
            return self._polygon_text(cs)
        if geometry_type is GeometryType.MULTIPOINT:
            return MultiPoint(cs, self._list(self._multipoint_member, cs))
        if geometry_type is GeometryType.MULTILINESTRING:
            return MultiLineString(cs, self._list(self._maybe_empty(LineString, self._linestring_text), cs))
        if geometry_type is GeometryType.MULTIPOLYGON:
            return MultiPolygon(cs, self._list(self._maybe_empty(Polygon, self._polygon_text), cs))
        return GeometryCollection(cs, self._list(self._geometry, cs))

    def _dimension(self, parent_cs: CoordinateSystem | None) -> CoordinateSystem:
        token = self._peek()
        flags = None
        if token.kind == _WORD and token.text.upper() in _DIMENSIONS:
            self._index += 1
            flags = _DIMENSIONS[token.text.upper()]

        if parent_cs is None:
            has_z, has_m = flags or (False, False)
            return CoordinateSystem(has_z, has_m, self._srid)
        if flags is not None and flags != (parent_cs.has_z, parent_cs.has_m):
            raise WKTSyntaxError(
                f"Dimension {token.text.upper()!r} does not match the enclosing "
                f"{parent_cs.dimension_suffix or 'XY'} geometry",
                token.text,
                token.position,
            )
        return parent_cs

    def _coordinates(self, cs: CoordinateSystem) -> tuple[float, ...]:
        values = []
        for _ in range(cs.coordinate_dimension):
            token = self._next()
            if token.kind != _NUMBER:
                raise self._error(f"Expected {cs.coordinate_dimension} ordinates", token)
            value = float(token.text)
            if not math.isfinite(value):
                raise WKTSyntaxError(
                    f"Ordinate {token.text!r} is out of range", token.text, token.position
                )
            values.append(value)
        token = self._peek()
        if token.kind == _NUMBER:
            raise self._error(
                f"Too many ordinates for {cs.dimension_suffix or 'XY'} coordinates", token
            )
        return tuple(values)

    def _list(self, member, cs: CoordinateSystem) -> list:
        self._expect("(")
        items = [member(cs)]
        while self._more():
            items.append(member(cs))
        return items

    def _maybe_empty(self, kind: type, builder):
        def member(cs: CoordinateSystem):
            if self._accept_word("EMPTY"):
                return kind(cs)
            return builder(cs)

        return member

    def _linestring_text(self, cs: CoordinateSystem) -> LineString:
        return LineString(cs, self._list(lambda c: Point(c, self._coordinates(c)), cs))

    def _polygon_text(self, cs: CoordinateSystem) -> Polygon:
        return Polygon(cs, self._list(self._maybe_empty(LineString, self._linestring_text), cs))

    def _multipoint_member(self, cs: CoordinateSystem) -> Point:
        # Both "MULTIPOINT (1 2, 3 4)" and "MULTIPOINT ((1 2), (3 4))" are in use.
        if self._accept_word("EMPTY"):
            return Point(cs)
        if self._peek().text == "(":
            self._next()
            point = Point(cs, self._coordinates(cs))
            self._expect(")")
            return point
        return Point(cs, self._coordinates(cs))


class WKTReader:
    """Builds geometries out of WKT strings."""

    def read(self, wkt: str, srid: int | None = None) -> Geometry:
        """Parse WKT; ``srid`` defaults to ``settings.default_srid``."""
        if not isinstance(wkt, str):
            raise TypeError(f"WKT must be str, got {type(wkt).__name__}")
        if srid is None:
            srid = settings.default_srid
        logger.debug("Reading WKT (%d chars, srid=%d)", len(wkt), srid)
        return _Parser(wkt, srid).parse()


def _format_number(value: float) -> str:
    if not math.isfinite(value):
        raise InvalidGeometryError(f"WKT cannot represent ordinate {value!r}")
    if value.is_integer() and abs(value) < 1e15:
        return str(int(value))
    # repr() gives the shortest string that reads back to the same float
    return repr(value)


class WKTWriter:
    """Serializes geometries to WKT."""

    def __init__(self, pretty_print: bool | None = None) -> None:
        self.pretty_print = settings.wkt_pretty_print if pretty_print is None else pretty_print

    def write(self, geometry: Geometry) -> str:
        return self._geometry(unwrap_geometry(geometry))

    def _geometry(self, geometry: Geometry) -> str:
        text = geometry.geometry_type.wkt_keyword
        suffix = geometry.cs.dimension_suffix
        if suffix:
            text = f"{text} {suffix}"
        if geometry.is_empty:
            return f"{text} EMPTY"
        separator = " " if self.pretty_print else ""
        return f"{text}{separator}{self._body(geometry)}"

    def _join(self, parts) -> str:
        comma = ", " if self.pretty_print else ","
        return "(" + comma.join(parts) + ")"

    def _coordinates(self, point: Point) -> str:
        return " ".join(_format_number(v) for v in point.coords)

    def _member(self, geometry: Geometry) -> str:
        return "EMPTY" if geometry.is_empty else self._body(geometry)

    def _body(self, geometry: Geometry) -> str:
        if isinstance(geometry, Point):
            return self._join([self._coordinates(geometry)])
        if isinstance(geometry, LineString):
            return self._join(self._coordinates(p) for p in geometry.points)
        if isinstance(geometry, Polygon):
            return self._join(self._member(ring) for ring in geometry.rings)
        if isinstance(geometry, MultiPoint):
            return self._join(
                "EMPTY" if p.is_empty else self._coordinates(p) for p in geometry.geometries
            )
        if isinstance(geometry, (MultiLineString, MultiPolygon)):
            return self._join(self._member(child) for child in geometry.geometries)
        if isinstance(geometry, GeometryCollection):
            return self._join(self._geometry(child) for child in geometry.geometries)
        raise TypeError(f"Not a geometry: {type(geometry).__name__}")


def read_wkt(wkt: str, srid: int | None = None) -> Geometry:
    return WKTReader().read(wkt, srid=srid)


def write_wkt(geometry: Geometry, pretty_print: bool | None = None) -> str:
    return WKTWriter(pretty_print=pretty_print).write(geometry)
