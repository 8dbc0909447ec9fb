"""
client.py

PURPOSE: The ChatClient facade: a conversation plus a transport.
DEPENDENCIES: conversation, transport, models, observability

ARCHITECTURE NOTES:
Construction does no I/O. The model check against the service happens in
initialize(), or in one step via the async ChatClient.create() factory.

send_request() is the only operation that awaits. It checks every rule
before its first await, snapshots the conversation revision, and only
touches the conversation again after the transport has returned. A
timeout, failure or cancellation in between therefore leaves the log and
the candidate buffer exactly as they were. A per-client lock rejects a
second request while one is in flight.
"""

import asyncio
import logging
from types import TracebackType
from typing import Any

from chatgpt_client.conversation import Conversation, ConversationState
from chatgpt_client.errors import ConfigurationError, InvalidStateError
from chatgpt_client.models.message import Message
from chatgpt_client.models.options import ClientOptions, build_options
from chatgpt_client.models.wire import Usage
from chatgpt_client.observability import get_tracer
from chatgpt_client.transport import (
    ChatTransport,
    HttpxTransport,
    RequestOutcome,
    build_request,
    candidates_from_response,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class ChatClient:
    """
    Stateful client for one conversation with a chat completion service.

    Typical use:

        async with await ChatClient.create(api_key, "gpt-3.5-turbo", n=2) as chat:
            chat.add_system_message("You are terse.")
            chat.add_user_message("Hi")
            candidates = await chat.send_request()
            if candidates:
                chat.select_candidate(0)
    """

    def __init__(self, options: ClientOptions, transport: ChatTransport | None = None):
        """
        Initialize the client without contacting the service.

        Args:
            options: Validated client options
            transport: Transport to use. If None, an HttpxTransport is
                created and closed with the client.
        """
        self._options = options
        self._transport = transport or HttpxTransport(options)
        self._owns_transport = transport is None
        self._conversation = Conversation()
        self._lock = asyncio.Lock()
        self._initialized = False
        self._last_outcome: RequestOutcome | None = None
        self._last_usage: Usage | None = None

    @classmethod
    async def create(
        cls,
        api_key: str,
        model: str,
        *,
        transport: ChatTransport | None = None,
        **kwargs: Any,
    ) -> "ChatClient":
        """
        Validate options, build a client and check the model with the service.

        Args:
            api_key: Bearer token
            model: Model identifier
            transport: Optional transport (mainly for tests)
            **kwargs: endpoint, models_endpoint, timeout and sampling
                parameters (temperature, top_p, n, stop, max_tokens,
                presence_penalty, frequency_penalty, logit_bias, user)

        Returns:
            A client ready to send requests

        Raises:
            ConfigurationError: If the options are invalid, or the service
                rejects the credential, endpoint or model
        """
        options = build_options(api_key=api_key, model=model, **kwargs)
        client = cls(options, transport=transport)
        try:
            await client.initialize()
        except BaseException:
            await client.aclose()
            raise
        return client

    async def initialize(self) -> None:
        """
        Confirm the service offers the configured model.

        Raises:
            ConfigurationError: Bad credential, bad endpoint, or unknown model
        """
        if self._initialized:
            return

        model_ids = await self._transport.list_models()
        if self._options.model not in model_ids:
            raise ConfigurationError(
                f"The model {self._options.model!r} is not supported by the service"
            )

        self._initialized = True
        logger.info(f"Chat client ready: model={self._options.model}")

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def options(self) -> ClientOptions:
        return self._options

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def state(self) -> ConversationState:
        return self._conversation.state

    @property
    def can_add_system_message(self) -> bool:
        return self._conversation.can_add_system_message

    @property
    def can_add_user_message(self) -> bool:
        return self._conversation.can_add_user_message

    @property
    def can_send_request(self) -> bool:
        return self._conversation.can_send_request and not self._lock.locked()

    @property
    def last_outcome(self) -> RequestOutcome | None:
        """How the most recent send_request() ended; None before the first."""
        return self._last_outcome

    @property
    def last_usage(self) -> Usage | None:
        """Token usage from the most recent successful response."""
        return self._last_usage

    # ------------------------------------------------------------------
    # Conversation operations
    # ------------------------------------------------------------------

    def add_system_message(self, content: str) -> None:
        self._conversation.add_system_message(content)

    def add_user_message(self, content: str) -> None:
        self._conversation.add_user_message(content)

    def remove_last_message(self) -> None:
        self._conversation.remove_last_message()

    def select_candidate(self, index: int) -> Message:
        return self._conversation.select_candidate(index)

    def get_history(self) -> list[Message]:
        return self._conversation.history()

    def get_pending_candidates(self) -> list[Message]:
        return self._conversation.pending_candidates()

    def clear(self) -> None:
        self._conversation.clear()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def send_request(self, n: int | None = None) -> list[Message]:
        """
        Ask the service for candidate replies to the last user message.

        Args:
            n: Number of candidates for this call only. The configured
                count is used when None and is never changed.

        Returns:
            Copies of the candidates, now awaiting selection. An empty
            list means the request produced nothing usable; see
            last_outcome for why. The conversation is unchanged then.

        Raises:
            InvalidStateError: Client not initialized, no trailing user
                message, or another request still in flight
            InvalidArgumentError: If n is not positive
        """
        if not self._initialized:
            raise InvalidStateError("Call initialize() before sending requests")
        if self._lock.locked():
            raise InvalidStateError("A request is already in flight")
        self._conversation.require_request_ready()

        request = build_request(self._options, self._conversation.history(), n=n)
        revision = self._conversation.revision

        async with self._lock:
            with tracer.start_as_current_span("chat.send_request") as span:
                span.set_attribute("llm.model", self._options.model)
                span.set_attribute("llm.message_count", len(request.messages))

                try:
                    result = await self._transport.create_completion(request)
                except asyncio.CancelledError:
                    self._last_outcome = RequestOutcome.CANCELLED
                    logger.info("Completion request cancelled; conversation unchanged")
                    raise

                outcome = result.outcome
                candidates: list[Message] = []

                if result.ok and result.response is not None:
                    received = candidates_from_response(result.response)
                    if not received:
                        outcome = RequestOutcome.NO_CHOICES
                    elif self._conversation.revision != revision:
                        outcome = RequestOutcome.DISCARDED
                        logger.warning("Conversation changed during request; reply discarded")
                    else:
                        candidates = self._conversation.offer_candidates(received, revision)
                    self._last_usage = result.response.usage
                elif outcome == RequestOutcome.OK:
                    outcome = RequestOutcome.MALFORMED

                self._last_outcome = outcome
                span.set_attribute("llm.outcome", outcome.value)
                span.set_attribute("llm.candidate_count", len(candidates))

        if outcome != RequestOutcome.OK:
            logger.info(f"Request produced no candidates: {outcome.value}")
        else:
            logger.debug(f"Received {len(candidates)} candidates")
        return candidates

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> "ChatClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
