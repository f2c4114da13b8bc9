"""Tests for tokenpulse.config module."""

import pytest


class TestSettings:
    """Test Settings configuration loading."""

    def test_default_settings_load(self, monkeypatch):
        """Settings should load with defaults (no .env file needed)."""
        from tokenpulse.config import Settings

        for name in ("TOKENPULSE_ENV", "TOKENPULSE_DEBUG", "TOKENPULSE_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        s = Settings(_env_file=None)
        assert s.env == "development"
        assert s.debug is True
        assert s.log_level == "INFO"
        assert s.is_local is True

    def test_environment_values(self):
        """Settings should accept valid environment values."""
        from tokenpulse.config import Settings

        for env in ["development", "staging", "production"]:
            s = Settings(TOKENPULSE_ENV=env)
            assert s.env == env

    def test_llm_config_defaults(self, monkeypatch):
        """LLMConfig carries the fixed sampling policy."""
        from tokenpulse.config import LLMConfig

        monkeypatch.delenv("GROQ_API_KEY", raising=False)
        monkeypatch.delenv("GROQ_TEMPERATURE", raising=False)
        monkeypatch.delenv("GROQ_MAX_TOKENS", raising=False)

        c = LLMConfig()
        assert c.temperature == 0.7
        assert c.max_tokens == 1000
        assert c.api_key == ""
        assert c.is_configured is False

    def test_llm_key_from_environment(self, monkeypatch):
        from tokenpulse.config import LLMConfig

        monkeypatch.setenv("GROQ_API_KEY", "gsk_test")
        assert LLMConfig().is_configured is True

    def test_blank_key_is_not_configured(self):
        from tokenpulse.config import LLMConfig

        assert LLMConfig(api_key="   ").is_configured is False

    def test_dexscreener_config_defaults(self, monkeypatch):
        from tokenpulse.config import DexScreenerConfig

        monkeypatch.delenv("DEXSCREENER_BASE_URL", raising=False)
        assert DexScreenerConfig().base_url == "https://api.dexscreener.com"

    def test_client_chart_template(self):
        from tokenpulse.config import ClientConfig

        c = ClientConfig()
        assert "{address}" in c.chart_url_template
