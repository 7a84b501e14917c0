"""Errors raised by the geometry model, the codecs and the proxy.

Every reader either returns a complete geometry or raises one of these; no
partially built geometry is ever handed back.
"""


class GeometryError(ValueError):
    """Base class for all geometry errors."""


class InvalidGeometryError(GeometryError):
    """A geometry would violate a structural invariant of the model."""


class WKTSyntaxError(GeometryError):
    """Malformed WKT text."""

    def __init__(self, message: str, token: str | None = None, position: int | None = None) -> None:
        self.token = token
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class WKBDecodingError(GeometryError):
    """Malformed or truncated WKB data."""

    def __init__(self, message: str, offset: int) -> None:
        self.offset = offset
        super().__init__(f"{message} (at byte offset {offset})")


class GeoJSONStructuralError(GeometryError):
    """A GeoJSON member is missing or has the wrong shape."""

    def __init__(self, path: str, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class UnsupportedTypeError(GeometryError):
    """A type token the format knows about but this library does not handle."""

    def __init__(self, type_name: str, fmt: str, detail: str | None = None) -> None:
        self.type_name = type_name
        self.format = fmt
        message = f"Unsupported {fmt} geometry type: {type_name}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class TypeMismatchError(GeometryError):
    """Decoded geometry is not of the expected kind."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected {expected}, got {actual}")


class EngineNotConfiguredError(GeometryError):
    """A geometric operation was requested but no engine is available."""
