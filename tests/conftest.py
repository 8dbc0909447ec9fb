"""
conftest.py

Shared pytest fixtures for chatgpt_client tests.
"""

from collections.abc import Callable
from typing import Any

import pytest
import respx

from chatgpt_client.models import ChatCompletionRequest, ChatCompletionResponse, ClientOptions
from chatgpt_client.models.options import build_options
from chatgpt_client.transport import ChatTransport, RequestOutcome, TransportResult

API_BASE = "https://api.openai.com"


def completion_body(*contents: str | None, model: str = "m") -> dict[str, Any]:
    """A chat completion response body with one choice per content."""
    return {
        "id": "chatcmpl-123",
        "object": "chat.completion",
        "created": 1677652288,
        "model": model,
        "choices": [
            {
                "index": i,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
            for i, content in enumerate(contents)
        ],
        "usage": {"prompt_tokens": 9, "completion_tokens": 12, "total_tokens": 21},
    }


def models_body(*model_ids: str) -> dict[str, Any]:
    return {
        "object": "list",
        "data": [{"id": model_id, "object": "model", "owned_by": "openai"} for model_id in model_ids],
    }


class FakeTransport(ChatTransport):
    """In-memory transport returning queued results."""

    def __init__(self, model_ids: list[str] | None = None) -> None:
        self.model_ids = model_ids if model_ids is not None else ["m"]
        self.results: list[TransportResult] = []
        self.requests: list[ChatCompletionRequest] = []
        self.closed = False

    def queue(self, result: TransportResult) -> None:
        self.results.append(result)

    def queue_reply(self, *contents: str) -> None:
        response = ChatCompletionResponse.model_validate(completion_body(*contents))
        self.queue(TransportResult(RequestOutcome.OK, response=response, status_code=200))

    async def list_models(self) -> list[str]:
        return list(self.model_ids)

    async def create_completion(self, request: ChatCompletionRequest) -> TransportResult:
        self.requests.append(request)
        return self.results.pop(0)

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def options() -> ClientOptions:
    """Client options for model "m" with a dummy key."""
    return build_options(api_key="test-api-key", model="m")


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_completion() -> Callable[..., dict[str, Any]]:
    """Factory for completion response bodies."""
    return completion_body


@pytest.fixture
def make_models() -> Callable[..., dict[str, Any]]:
    """Factory for model list bodies."""
    return models_body


@pytest.fixture
def mock_openai():
    """Set up respx mock for the OpenAI API."""
    with respx.mock(base_url=API_BASE, assert_all_called=False) as respx_mock:
        yield respx_mock
