"""
TEST DOC: Settings

WHAT: Tests for environment-driven settings and their conversion to options
WHY: The CLI builds its client from these settings
HOW: Set environment variables with monkeypatch

CASES:
- Defaults
- CHATGPT_CLIENT_LLM_* overrides
- OPENAI_API_KEY fallback
- to_options() with CLI overrides

EDGE CASES:
- Out-of-range settings surface as ConfigurationError
"""

import pytest

from chatgpt_client.config import LLMSettings, get_settings
from chatgpt_client.errors import ConfigurationError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "OPENAI_API_KEY",
        "CHATGPT_CLIENT_LLM_API_KEY",
        "CHATGPT_CLIENT_LLM_MODEL",
        "CHATGPT_CLIENT_LLM_TEMPERATURE",
        "CHATGPT_CLIENT_LOG_LEVEL",
        "CHATGPT_CLIENT_OTEL_ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = get_settings()
        assert settings.log_level == "WARNING"
        assert settings.llm.api_key == ""
        assert settings.llm.n == 1
        assert settings.otel.enabled is False

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("CHATGPT_CLIENT_LLM_MODEL", "gpt-4")
        monkeypatch.setenv("CHATGPT_CLIENT_LLM_TEMPERATURE", "0.3")
        monkeypatch.setenv("CHATGPT_CLIENT_LOG_LEVEL", "DEBUG")

        settings = get_settings()

        assert settings.llm.model == "gpt-4"
        assert settings.llm.temperature == 0.3
        assert settings.log_level == "DEBUG"

    def test_openai_api_key_fallback(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert get_settings().llm.api_key == "sk-env"

    def test_prefixed_key_wins(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("CHATGPT_CLIENT_LLM_API_KEY", "sk-prefixed")
        assert get_settings().llm.api_key == "sk-prefixed"


class TestToOptions:
    def test_builds_options(self):
        options = LLMSettings(api_key="k", model="gpt-4", n=2).to_options()
        assert options.model == "gpt-4"
        assert options.sampling.n == 2
        assert options.api_key.get_secret_value() == "k"

    def test_overrides_win_and_none_ignored(self):
        options = LLMSettings(api_key="k", temperature=0.5).to_options(
            model="other", temperature=None, n=3
        )
        assert options.model == "other"
        assert options.sampling.temperature == 0.5
        assert options.sampling.n == 3

    def test_out_of_range(self):
        with pytest.raises(ConfigurationError, match="temperature"):
            LLMSettings(api_key="k", temperature=5).to_options()
