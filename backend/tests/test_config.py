"""Tests for settings and settings-driven defaults."""

from carmatch import config
from carmatch.config import Settings
from carmatch.schemas.matching import FallbackConfig


class TestSettings:
    def test_defaults(self, monkeypatch):
        for key in ("FALLBACK_MAX_RESULTS", "FALLBACK_PRICE_TOLERANCE_PERCENT", "FUZZY_MATCH_THRESHOLD"):
            monkeypatch.delenv(key, raising=False)
        settings = Settings(_env_file=None)
        assert settings.fallback_max_results == 5
        assert settings.fallback_price_tolerance_percent == 20
        assert settings.fallback_max_year_distance == 5
        assert settings.suggestion_price_tolerance_percent == 30
        assert settings.suggestion_year_window == 3
        assert settings.fuzzy_match_threshold == 60
        assert settings.debug is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("FALLBACK_MAX_RESULTS", "3")
        monkeypatch.setenv("debug", "true")
        settings = Settings(_env_file=None)
        assert settings.fallback_max_results == 3
        assert settings.debug is True


class TestFallbackConfigFromSettings:
    def test_reads_global_settings(self, monkeypatch):
        monkeypatch.setattr(config.settings, "fallback_max_results", 7)
        assert FallbackConfig.from_settings().max_results == 7

    def test_explicit_config_ignores_settings(self, monkeypatch):
        monkeypatch.setattr(config.settings, "fallback_max_results", 7)
        assert FallbackConfig(max_results=2).max_results == 2
