"""
options.py

PURPOSE: Immutable client configuration and sampling parameters.
DEPENDENCIES: pydantic

ARCHITECTURE NOTES:
Options are validated once, when they are built, and are frozen after that.
Range checks live in Field constraints so pydantic reports every bad value
at once; build_options() turns those reports into a ConfigurationError.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from chatgpt_client.errors import ConfigurationError

DEFAULT_ENDPOINT = "https://api.openai.com/v1/chat/completions"
DEFAULT_MODELS_ENDPOINT = "https://api.openai.com/v1/models"

MAX_STOP_SEQUENCES = 4
LOGIT_BIAS_LIMIT = 100.0


class SamplingOptions(BaseModel):
    """
    Request-shaping parameters sent with every completion request.

    Defaults mirror the service defaults. Fields left as None are omitted
    from the request body.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    temperature: float = Field(default=1.0, ge=0.0, le=2.0, description="Sampling temperature")
    top_p: float = Field(default=1.0, ge=0.0, le=1.0, description="Nucleus sampling threshold")
    n: int = Field(default=1, gt=0, description="Number of candidate replies")
    stop: tuple[str, ...] | None = Field(
        default=None,
        max_length=MAX_STOP_SEQUENCES,
        description="Up to 4 sequences where generation stops",
    )
    max_tokens: int | None = Field(default=None, gt=0, description="Maximum tokens per reply")
    presence_penalty: float = Field(default=0.0, ge=-2.0, le=2.0)
    frequency_penalty: float = Field(default=0.0, ge=-2.0, le=2.0)
    logit_bias: dict[str, float] | None = Field(
        default=None,
        description="Token id to bias value (-100..100)",
    )
    user: str | None = Field(default=None, description="End-user tag for abuse monitoring")

    @field_validator("logit_bias")
    @classmethod
    def check_logit_bias(cls, value: dict[str, float] | None) -> dict[str, float] | None:
        if value is None:
            return value
        for token, bias in value.items():
            if not -LOGIT_BIAS_LIMIT <= bias <= LOGIT_BIAS_LIMIT:
                raise ValueError(
                    f"bias for token {token} must be between -100 and 100, got {bias}"
                )
        return value


class ClientOptions(BaseModel):
    """Everything the client needs to talk to the service."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    api_key: SecretStr = Field(..., description="Bearer token sent with every call")
    model: str = Field(..., min_length=1, description="Model identifier")
    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="Chat completions URL")
    models_endpoint: str = Field(default=DEFAULT_MODELS_ENDPOINT, description="Model listing URL")
    timeout: float = Field(default=60.0, gt=0, description="Per-request timeout in seconds")
    sampling: SamplingOptions = Field(default_factory=SamplingOptions)


_SAMPLING_FIELDS = frozenset(SamplingOptions.model_fields)


def describe_validation_error(error: ValidationError) -> str:
    """Render pydantic errors as `field: message` lines."""
    lines = []
    for item in error.errors():
        loc = ".".join(str(x) for x in item["loc"]) or "options"
        lines.append(f"{loc}: {item['msg']}")
    return "; ".join(lines)


def build_options(api_key: str, model: str, **kwargs: Any) -> ClientOptions:
    """
    Build ClientOptions from flat keyword arguments.

    Sampling keywords (temperature, top_p, n, ...) are routed into
    SamplingOptions; the rest go to ClientOptions.

    Raises:
        ConfigurationError: If any value is missing or out of range
    """
    sampling = {key: kwargs.pop(key) for key in list(kwargs) if key in _SAMPLING_FIELDS}
    try:
        return ClientOptions(
            api_key=api_key,
            model=model,
            sampling=SamplingOptions(**sampling),
            **kwargs,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid client options: {describe_validation_error(e)}") from e
    except TypeError as e:
        raise ConfigurationError(f"Invalid client options: {e}") from e
