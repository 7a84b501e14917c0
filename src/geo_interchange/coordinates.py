"""Coordinate system shared by every coordinate of a geometry tree."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class CoordinateSystem:
    """Dimensionality flags and SRID of a geometry.

    The SRID is an opaque tag; no reprojection happens anywhere in the library.
    """

    has_z: bool
    has_m: bool
    srid: int = 0

    @classmethod
    def xy(cls, srid: int = 0) -> "CoordinateSystem":
        return cls(has_z=False, has_m=False, srid=srid)

    @classmethod
    def xyz(cls, srid: int = 0) -> "CoordinateSystem":
        return cls(has_z=True, has_m=False, srid=srid)

    @classmethod
    def xym(cls, srid: int = 0) -> "CoordinateSystem":
        return cls(has_z=False, has_m=True, srid=srid)

    @classmethod
    def xyzm(cls, srid: int = 0) -> "CoordinateSystem":
        return cls(has_z=True, has_m=True, srid=srid)

    @property
    def coordinate_dimension(self) -> int:
        """Number of ordinates per point (2 to 4)."""
        return 2 + self.has_z + self.has_m

    @property
    def spatial_dimension(self) -> int:
        """Number of spatial ordinates per point, M excluded."""
        return 2 + self.has_z

    @property
    def dimension_suffix(self) -> str:
        """WKT suffix for this dimensionality: "", "Z", "M" or "ZM"."""
        return ("Z" if self.has_z else "") + ("M" if self.has_m else "")

    def with_srid(self, srid: int) -> "CoordinateSystem":
        """Return a copy tagged with another SRID."""
        return replace(self, srid=srid)
