"""
wire.py

PURPOSE: Request and response bodies of the chat completion API.
DEPENDENCIES: pydantic, message.py

ARCHITECTURE NOTES:
Only the fields the client needs are modelled. Responses ignore unknown
fields so new service additions do not break parsing. Requests are dumped
with exclude_none, which is how unset optional fields are left out of the
body instead of being sent as null.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatgpt_client.models.message import Message


class ChatCompletionRequest(BaseModel):
    """Body POSTed to the chat completions endpoint."""

    model: str
    messages: list[Message] = Field(default_factory=list)
    temperature: float | None = None
    top_p: float | None = None
    n: int | None = None
    stop: list[str] | None = None
    max_tokens: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None
    logit_bias: dict[str, float] | None = None
    user: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Dump to JSON-ready data, omitting unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class ChoiceMessage(BaseModel):
    """The message inside a choice. Content may be null on the wire."""

    model_config = ConfigDict(extra="ignore")

    role: str = "assistant"
    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def null_content_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Choice(BaseModel):
    """One candidate reply."""

    model_config = ConfigDict(extra="ignore")

    index: int = 0
    message: ChoiceMessage = Field(default_factory=ChoiceMessage)
    finish_reason: str | None = None


class Usage(BaseModel):
    """Token accounting reported by the service."""

    model_config = ConfigDict(extra="ignore")

    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class ChatCompletionResponse(BaseModel):
    """Body returned by the chat completions endpoint."""

    model_config = ConfigDict(extra="ignore")

    id: str = ""
    object: str = ""
    created: int = 0
    model: str = ""
    choices: list[Choice] = Field(default_factory=list)
    usage: Usage | None = None

    @field_validator("choices", mode="before")
    @classmethod
    def null_choices_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class ModelInfo(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    object: str | None = None
    owned_by: str | None = None


class ModelList(BaseModel):
    """Body returned by the model listing endpoint."""

    model_config = ConfigDict(extra="ignore")

    data: list[ModelInfo] = Field(default_factory=list)

    def ids(self) -> list[str]:
        return [model.id for model in self.data]
