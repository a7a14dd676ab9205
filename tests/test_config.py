"""Tests for environment-driven configuration."""

import pytest

from config import Config
from exceptions import ConfigurationError


class TestConfig:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("BALLOT_INSIGHT_MODEL", raising=False)
        monkeypatch.delenv("BALLOT_INSIGHT_TEMPERATURE", raising=False)
        cfg = Config()
        assert cfg.INSIGHT_MODEL == "gemini-3-flash-preview"
        assert cfg.INSIGHT_TEMPERATURE == 0.7

    def test_api_key_falls_back_to_llm_key(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        monkeypatch.setenv("LLM_API_KEY", "fallback-key")
        assert Config().get_api_key() == "fallback-key"

    def test_summary_excludes_secrets(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "super-secret")
        summary = Config().summary()
        assert summary["has_api_key"] is True
        assert "super-secret" not in str(summary)

    @pytest.mark.parametrize("key,value", [
        ("BALLOT_PORT", "0"),
        ("BALLOT_INSIGHT_TEMPERATURE", "3.5"),
        ("BALLOT_INSIGHT_TOP_P", "0"),
        ("BALLOT_INSIGHT_TIMEOUT_SECONDS", "-1"),
        ("BALLOT_SIMULATION_INTERVAL_SECONDS", "0"),
        ("BALLOT_SIMULATION_SKIP_PROBABILITY", "1.0"),
    ])
    def test_out_of_range_value_names_its_key(self, monkeypatch, key, value):
        monkeypatch.setenv(key, value)

        with pytest.raises(ConfigurationError) as exc_info:
            Config()

        assert exc_info.value.config_key == key
