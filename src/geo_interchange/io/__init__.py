"""WKT, WKB and GeoJSON codecs."""

from geo_interchange.io.geojson import GeoJSONReader, GeoJSONWriter, read_geojson, write_geojson
from geo_interchange.io.wkb import ByteOrder, WKBReader, WKBWriter, read_wkb, write_wkb
from geo_interchange.io.wkt import WKTReader, WKTWriter, read_wkt, write_wkt

__all__ = [
    "ByteOrder",
    "GeoJSONReader",
    "GeoJSONWriter",
    "WKBReader",
    "WKBWriter",
    "WKTReader",
    "WKTWriter",
    "read_geojson",
    "read_wkb",
    "read_wkt",
    "write_geojson",
    "write_wkb",
    "write_wkt",
]
