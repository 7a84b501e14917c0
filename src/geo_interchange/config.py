"""Library configuration."""

import logging
import sys

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_BYTE_ORDER_ALIASES = {
    "little": "little",
    "ndr": "little",
    "big": "big",
    "xdr": "big",
}


class Settings(BaseSettings):
    """Codec defaults loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="GEO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # SRID applied by the WKT and WKB readers when the caller passes none
    default_srid: int = 0

    # Byte order used by the WKB writer: little/ndr or big/xdr
    wkb_byte_order: str = "little"

    # GeoJSON reader defaults
    geojson_lenient: bool = False
    geojson_ignore_z: bool = False

    # WKT writer: "POINT (1 2)" vs "POINT(1 2)"
    wkt_pretty_print: bool = True

    # Logging
    log_level: str = "info"

    @field_validator("wkb_byte_order", mode="before")
    @classmethod
    def normalize_byte_order(cls, v):
        """Accept the NDR/XDR names as aliases for little/big endian."""
        if isinstance(v, str):
            normalized = _BYTE_ORDER_ALIASES.get(v.strip().lower())
            if normalized is None:
                raise ValueError(f"Unknown WKB byte order: {v}")
            return normalized
        return v


def setup_logging() -> None:
    """Configure logging for applications embedding the library."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


settings = Settings()
