"""
Unit tests for application settings.
"""

import runpy

import pytest
import uvicorn

from src.config.settings import Settings, settings


class TestSettings:
    """Test Settings loading and validation."""

    def test_api_address_from_environment(self, monkeypatch):
        monkeypatch.setenv("API_HOST", "127.0.0.1")
        monkeypatch.setenv("API_PORT", "9001")

        loaded = Settings()

        assert loaded.API_HOST == "127.0.0.1"
        assert loaded.API_PORT == 9001

    def test_invalid_store_backend(self):
        with pytest.raises(ValueError):
            Settings(STORE_BACKEND="redis")

    def test_cors_origins_split(self):
        assert Settings(CORS_ORIGINS="http://a.test, http://b.test").CORS_ORIGINS == [
            "http://a.test",
            "http://b.test",
        ]


class TestEntryPoint:
    def test_server_binds_configured_address(self, monkeypatch):
        calls = []
        monkeypatch.setattr(uvicorn, "run", lambda *args, **kwargs: calls.append(kwargs))
        monkeypatch.setattr(settings, "API_HOST", "127.0.0.1")
        monkeypatch.setattr(settings, "API_PORT", 9002)

        runpy.run_module("src.main", run_name="__main__")

        assert calls[0]["host"] == "127.0.0.1"
        assert calls[0]["port"] == 9002
