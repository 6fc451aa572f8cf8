"""Tests for configuration, app assembly and usage logging."""

import json
import logging

import pytest
from starlette.testclient import TestClient

from elitemindset.config import Settings, Variant, get_settings
from elitemindset.logging_middleware import configure_usage_logging
from elitemindset.main import create_app
from elitemindset.mcp.resources import WidgetAssetsError


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    """Tests for environment-based settings."""

    def test_port_defaults_per_variant(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        settings = Settings()
        assert settings.resolve_port(Variant.ELITE_MINDSET) == 8000
        assert settings.resolve_port(Variant.COACH) == 8080

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "9123")
        assert Settings().resolve_port(Variant.COACH) == 9123

    @pytest.mark.parametrize("value", ["abc", "", "80a"])
    def test_non_numeric_port_falls_back(self, monkeypatch, value):
        monkeypatch.setenv("PORT", value)
        assert Settings().resolve_port(Variant.ELITE_MINDSET) == 8000

    def test_assets_dir_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ASSETS_DIR", str(tmp_path))
        assert Settings().assets_dir == tmp_path.resolve()

    def test_variant_from_environment(self, monkeypatch):
        monkeypatch.setenv("VARIANT", "coach")
        assert get_settings().VARIANT == Variant.COACH


class TestCreateApp:
    """Tests for assembling the ASGI app."""

    def test_missing_assets_fail_fast(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ASSETS_DIR", str(tmp_path / "missing"))
        with pytest.raises(WidgetAssetsError):
            create_app(Variant.ELITE_MINDSET)

    def test_coach_needs_no_assets(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ASSETS_DIR", str(tmp_path / "missing"))
        client = TestClient(create_app(Variant.COACH))
        assert client.get("/healthz").text == "OK"

    def test_elite_mindset_descriptor(self, monkeypatch, tmp_path):
        (tmp_path / "kitchen-sink-lite.html").write_text("<html></html>")
        monkeypatch.setenv("ASSETS_DIR", str(tmp_path))
        client = TestClient(create_app(Variant.ELITE_MINDSET))
        assert client.get("/").json()["name"] == "elite-mindset"


class TestUsageLogging:
    """Tests for the usage logging middleware."""

    @pytest.fixture
    def usage_records(self):
        configure_usage_logging(destination="external")
        records = []

        class Collect(logging.Handler):
            def emit(self, record):
                records.append(json.loads(record.getMessage()))

        logger = logging.getLogger("elitemindset.usage")
        handler = Collect()
        logger.addHandler(handler)
        yield records
        logger.removeHandler(handler)

    def test_logs_request(self, usage_records):
        client = TestClient(create_app(Variant.COACH))
        client.get("/nope?x=1", headers={"User-Agent": "pytest"})

        [entry] = usage_records
        assert entry["http"]["request"]["method"] == "GET"
        assert entry["http"]["response"]["status_code"] == 404
        assert entry["event"]["outcome"] == "failure"
        assert entry["url"] == {"path": "/nope", "query": "x=1"}
        assert entry["user_agent"]["original"] == "pytest"

    def test_skips_health_checks(self, usage_records):
        client = TestClient(create_app(Variant.COACH))
        client.get("/healthz")
        assert usage_records == []
