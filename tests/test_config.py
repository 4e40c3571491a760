"""Tests for the config module."""

from pathlib import Path

import pytest

from gridcalc.config import Settings, _parse_cors_origins


class TestParseCorsOrigins:
    """Test CORS origins parsing."""

    def test_parse_cors_origins_with_value(self, monkeypatch):
        """Test parsing CORS origins from environment variable."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://localhost:8080")
        result = _parse_cors_origins()
        assert result == ["http://localhost:3000", "http://localhost:8080"]

    def test_parse_cors_origins_without_value(self, monkeypatch):
        """Test default CORS origins when not set."""
        monkeypatch.delenv("CORS_ALLOW_ORIGINS", raising=False)
        result = _parse_cors_origins()
        assert result == ["*"]

    def test_parse_cors_origins_empty_string(self, monkeypatch):
        """Test parsing empty CORS origins defaults to wildcard."""
        monkeypatch.setenv("CORS_ALLOW_ORIGINS", "")
        result = _parse_cors_origins()
        assert result == ["*"]


class TestSettings:
    """Test Settings configuration."""

    def test_settings_defaults(self):
        """Test Settings default values."""
        settings = Settings()

        assert settings.database_path == Path("data/gridcalc.db")
        assert settings.port == 5000
        assert settings.debug is False
        assert settings.max_formula_length == 1000
        assert settings.honor_sqrt_root is False

    def test_settings_explicit_values(self, tmp_path):
        """Test Settings built from explicit parameters."""
        db_path = tmp_path / "cells.db"

        settings = Settings(
            database_path=db_path,
            host="0.0.0.0",
            port=9000,
            debug=True,
            log_level="DEBUG",
            max_formula_length=50,
            honor_sqrt_root=True,
        )

        assert settings.database_path == db_path
        assert settings.host == "0.0.0.0"
        assert settings.port == 9000
        assert settings.debug is True
        assert settings.log_level == "DEBUG"
        assert settings.max_formula_length == 50
        assert settings.honor_sqrt_root is True

    def test_settings_path_handling(self, tmp_path):
        """Test that string paths are converted to Path objects."""
        settings = Settings(database_path=str(tmp_path / "db.db"))

        assert isinstance(settings.database_path, Path)

    def test_settings_cors_origins(self):
        """Test CORS origins are kept as given."""
        settings = Settings(
            cors_allow_origins=["http://localhost:3000", "http://example.com"]
        )

        assert settings.cors_allow_origins == ["http://localhost:3000", "http://example.com"]

    def test_mock_settings_fixture(self, mock_settings, tmp_path):
        """Test the shared settings fixture points at the temp directory."""
        assert mock_settings.database_path == tmp_path / "test.db"
        assert mock_settings.honor_sqrt_root is False
