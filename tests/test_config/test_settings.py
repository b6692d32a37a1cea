"""Tests for environment-driven application settings."""

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, get_settings


class TestSettings:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("ENVIRONMENT", "LOG_LEVEL", "DEBUG", "REFERENCE_YEAR"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.environment == "development"
        assert settings.log_level == "INFO"
        assert settings.reference_year is None
        assert not settings.is_production

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("REFERENCE_YEAR", "2026")
        settings = Settings(_env_file=None)
        assert settings.is_production
        assert settings.reference_year == 2026

    @pytest.mark.parametrize("year", [1899, 10000])
    def test_reference_year_bounds(self, year: int) -> None:
        with pytest.raises(ValidationError):
            Settings(reference_year=year)

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level="VERBOSE")

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()
