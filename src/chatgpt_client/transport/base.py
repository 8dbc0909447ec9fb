"""
base.py

PURPOSE: Abstract transport interface and the result of one completion call.
DEPENDENCIES: models

ARCHITECTURE NOTES:
The client never touches HTTP directly. It hands a ChatCompletionRequest to
a ChatTransport and gets back a TransportResult. Failures that the caller
is expected to retry (bad status, timeout, network, garbage body) are
values here, not exceptions, so they cannot unwind through the state
machine halfway through an update.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from chatgpt_client.models.wire import ChatCompletionRequest, ChatCompletionResponse


class RequestOutcome(str, Enum):
    """How the most recent completion request ended."""

    OK = "ok"
    REJECTED = "rejected"  # non-success HTTP status
    NO_CHOICES = "no_choices"  # success, but zero choices returned
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"
    MALFORMED = "malformed"  # body was not a completion response
    DISCARDED = "discarded"  # conversation changed while the request was in flight
    CANCELLED = "cancelled"  # caller cancelled or timed out the request


@dataclass
class TransportResult:
    """Result of a single completion call."""

    outcome: RequestOutcome
    response: ChatCompletionResponse | None = None
    status_code: int | None = None
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == RequestOutcome.OK and self.response is not None


class ChatTransport(ABC):
    """Abstract base class for chat completion transports."""

    @abstractmethod
    async def list_models(self) -> list[str]:
        """
        Fetch the model identifiers the service offers.

        Returns:
            Model ids

        Raises:
            ConfigurationError: If the credential or endpoint is rejected
        """
        ...

    @abstractmethod
    async def create_completion(self, request: ChatCompletionRequest) -> TransportResult:
        """
        Send one completion request.

        Must not raise for HTTP, network, timeout or parse failures; those
        are reported through TransportResult.outcome.
        """
        ...

    async def aclose(self) -> None:  # noqa: B027
        """Release any resources held by the transport."""
