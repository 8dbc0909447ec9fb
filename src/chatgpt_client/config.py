"""
config.py

PURPOSE: Settings loading for the CLI and for applications embedding the client.
DEPENDENCIES: pydantic, pydantic-settings

ARCHITECTURE NOTES:
Configuration comes from multiple sources (in priority order):
1. CLI flags (highest priority)
2. Environment variables (CHATGPT_CLIENT_*, plus OPENAI_API_KEY)
3. Defaults (lowest priority)

Settings are a loading convenience only. The client itself takes an
immutable ClientOptions; LLMSettings.to_options() bridges the two.
"""

import os
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings

from chatgpt_client.models.options import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODELS_ENDPOINT,
    ClientOptions,
    build_options,
)


class LLMSettings(BaseSettings):
    """Settings for the chat completion service."""

    model: str = Field(default="gpt-3.5-turbo", description="Model name/ID")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Chat completions URL")
    models_endpoint: str = Field(default=DEFAULT_MODELS_ENDPOINT, description="Model listing URL")
    api_key: str = Field(default="", description="API key (or set OPENAI_API_KEY env var)")
    temperature: float = Field(default=1.0, description="Sampling temperature")
    top_p: float = Field(default=1.0, description="Nucleus sampling threshold")
    n: int = Field(default=1, description="Candidate replies per request")
    max_tokens: int | None = Field(default=None, description="Maximum tokens per reply")
    timeout: float = Field(default=60.0, description="Request timeout in seconds")

    model_config = {"env_prefix": "CHATGPT_CLIENT_LLM_"}

    def to_options(self, **overrides: Any) -> ClientOptions:
        """
        Build validated client options from these settings.

        Args:
            **overrides: Values that win over the settings (e.g. CLI flags).
                None values are ignored.

        Raises:
            ConfigurationError: If any value is out of range
        """
        values: dict[str, Any] = {
            "endpoint": self.endpoint,
            "models_endpoint": self.models_endpoint,
            "timeout": self.timeout,
            "temperature": self.temperature,
            "top_p": self.top_p,
            "n": self.n,
            "max_tokens": self.max_tokens,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        model = values.pop("model", self.model)
        return build_options(api_key=self.api_key, model=model, **values)


class OpenTelemetrySettings(BaseSettings):
    """Settings for tracing."""

    enabled: bool = Field(default=False, description="Export spans")
    service_name: str = Field(default="chatgpt-client", description="service.name resource")
    endpoint: str | None = Field(default=None, description="OTLP gRPC endpoint")

    model_config = {"env_prefix": "CHATGPT_CLIENT_OTEL_"}


class Settings(BaseSettings):
    """Main application settings."""

    log_level: str = Field(default="WARNING", description="Logging level")
    debug: bool = Field(default=False, description="Enable debug output")
    llm: LLMSettings = Field(default_factory=LLMSettings, description="LLM settings")
    otel: OpenTelemetrySettings = Field(
        default_factory=OpenTelemetrySettings,
        description="OpenTelemetry settings",
    )

    model_config = {"env_prefix": "CHATGPT_CLIENT_"}


def get_settings() -> Settings:
    """Get application settings, loading from environment."""
    llm_settings = LLMSettings()

    # Fall back to the conventional OpenAI variable
    if not llm_settings.api_key:
        llm_settings = llm_settings.model_copy(
            update={"api_key": os.environ.get("OPENAI_API_KEY", "")}
        )

    return Settings(llm=llm_settings)
