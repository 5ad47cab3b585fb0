"""Tests for Settings and editor construction from settings."""
from __future__ import annotations

import pytest

from greenside.geo.geolocation import HttpPositionSource, NullPositionSource
from greenside_web.config import Settings
from greenside_web.main import create_editor


@pytest.mark.unit
class TestSettings:

    def test_defaults(self):
        config = Settings(_env_file=None)
        assert config.readonly is False
        assert config.settle_delay == 0.5
        assert config.geolocation_timeout == 10.0
        assert (config.map_center_lng, config.map_center_lat) == (20.0, 0.0)
        assert config.map_style == "Standard"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("READONLY", "true")
        monkeypatch.setenv("SETTLE_DELAY", "1.5")
        monkeypatch.setenv("MAP_STYLE", "Standard Satellite")
        config = Settings(_env_file=None)
        assert config.readonly is True
        assert config.settle_delay == 1.5
        assert config.map_style == "Standard Satellite"


@pytest.mark.unit
class TestCreateEditor:

    def test_viewport_and_position_source(self):
        config = Settings(_env_file=None, map_center_lng=-80.0, map_center_lat=26.0, map_zoom=15.0)
        editor = create_editor(config)
        assert editor.map.get_center() == (-80.0, 26.0)
        assert editor.map.get_zoom() == 15.0
        assert isinstance(editor.position_source, NullPositionSource)

    def test_gps_relay(self):
        config = Settings(_env_file=None, geolocation_url="http://gps.local/fix")
        editor = create_editor(config)
        assert isinstance(editor.position_source, HttpPositionSource)
        assert editor.position_source.url == "http://gps.local/fix"

    def test_read_only(self):
        editor = create_editor(Settings(_env_file=None, readonly=True))
        assert editor.controller.writable is False

    def test_data_path(self, tmp_path):
        path = tmp_path / "course.geojson"
        editor = create_editor(Settings(_env_file=None, data_path=str(path)))
        editor.store.set({"map": {"type": "FeatureCollection", "features": []}})
        assert path.exists()
