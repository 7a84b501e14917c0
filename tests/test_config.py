"""Tests for geo_interchange.config."""

import logging

import pytest
from pydantic import ValidationError

from geo_interchange.config import Settings, setup_logging


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("GEO_DEFAULT_SRID", "GEO_WKB_BYTE_ORDER", "GEO_GEOJSON_LENIENT", "GEO_GEOJSON_IGNORE_Z"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.default_srid == 0
        assert settings.wkb_byte_order == "little"
        assert settings.geojson_lenient is False
        assert settings.geojson_ignore_z is False
        assert settings.wkt_pretty_print is True

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GEO_DEFAULT_SRID", "4326")
        monkeypatch.setenv("GEO_GEOJSON_LENIENT", "true")
        settings = Settings(_env_file=None)
        assert settings.default_srid == 4326
        assert settings.geojson_lenient is True

    @pytest.mark.parametrize("value,expected", [("NDR", "little"), ("xdr", "big"), (" Big ", "big")])
    def test_byte_order_aliases(self, value, expected):
        assert Settings(_env_file=None, wkb_byte_order=value).wkb_byte_order == expected

    def test_unknown_byte_order(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, wkb_byte_order="middle")


class TestSetupLogging:
    def test_uses_configured_level(self, monkeypatch):
        from geo_interchange.config import settings

        monkeypatch.setattr(settings, "log_level", "debug")
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        root.handlers = []
        try:
            setup_logging()
            assert root.level == logging.DEBUG
        finally:
            root.handlers, level = saved
            root.setLevel(level)
