"""
http.py

PURPOSE: ChatTransport implementation over httpx.
DEPENDENCIES: httpx, models, observability

ARCHITECTURE NOTES:
One httpx.AsyncClient per transport, created lazily unless injected.
Every call carries the bearer token; the token itself is never logged
or put on a span. Each call runs inside a span recording status,
outcome and latency.
"""

import logging
import time

import httpx

from chatgpt_client.errors import ConfigurationError
from chatgpt_client.models.options import ClientOptions
from chatgpt_client.models.wire import ChatCompletionRequest, ChatCompletionResponse, ModelList
from chatgpt_client.observability import get_tracer
from chatgpt_client.transport.base import ChatTransport, RequestOutcome, TransportResult

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


class HttpxTransport(ChatTransport):
    """Talks to an OpenAI-style API with httpx."""

    def __init__(
        self,
        options: ClientOptions,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the transport.

        Args:
            options: Endpoints, credential and timeout
            http_client: Client to use. If None, one is created and owned
                by this transport. options.timeout applies to every call
                either way.
        """
        self._options = options
        self._http = http_client
        self._owns_client = http_client is None

    def _client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._options.timeout)
        return self._http

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._options.api_key.get_secret_value()}"}

    async def list_models(self) -> list[str]:
        """
        Fetch model ids from the model listing endpoint.

        Raises:
            ConfigurationError: 401 means a bad credential; any other failure
                means the endpoint is wrong or unreachable
        """
        url = self._options.models_endpoint
        with tracer.start_as_current_span("chat.verify_model") as span:
            span.set_attribute("llm.model", self._options.model)

            try:
                response = await self._client().get(
                    url, headers=self._headers(), timeout=self._options.timeout
                )
            except httpx.HTTPError as e:
                span.record_exception(e)
                raise ConfigurationError(f"Invalid endpoint: could not reach {url}") from e

            span.set_attribute("http.status_code", response.status_code)

            if response.status_code == httpx.codes.UNAUTHORIZED:
                raise ConfigurationError("Invalid API key")
            if not response.is_success:
                raise ConfigurationError(
                    f"Invalid endpoint: {url} returned HTTP {response.status_code}"
                )

            try:
                models = ModelList.model_validate(response.json())
            except ValueError as e:
                span.record_exception(e)
                raise ConfigurationError(f"Invalid endpoint: {url} did not return a model list") from e

            logger.debug(f"Service lists {len(models.data)} models")
            return models.ids()

    async def create_completion(self, request: ChatCompletionRequest) -> TransportResult:
        """POST the request and classify the reply."""
        with tracer.start_as_current_span("chat.completion") as span:
            span.set_attribute("llm.model", request.model)
            span.set_attribute("llm.message_count", len(request.messages))
            if request.n is not None:
                span.set_attribute("llm.n", request.n)

            start_time = time.perf_counter()
            logger.debug(f"Sending {len(request.messages)} messages to {request.model}")

            try:
                response = await self._client().post(
                    self._options.endpoint,
                    json=request.to_payload(),
                    headers=self._headers(),
                    timeout=self._options.timeout,
                )
            except httpx.TimeoutException as e:
                span.record_exception(e)
                span.set_attribute("llm.outcome", RequestOutcome.TIMEOUT.value)
                logger.warning(f"Completion request timed out after {self._options.timeout}s")
                return TransportResult(RequestOutcome.TIMEOUT, detail=str(e))
            except httpx.HTTPError as e:
                span.record_exception(e)
                span.set_attribute("llm.outcome", RequestOutcome.NETWORK_ERROR.value)
                logger.warning(f"Completion request failed: {e}")
                return TransportResult(RequestOutcome.NETWORK_ERROR, detail=str(e))

            elapsed_ms = (time.perf_counter() - start_time) * 1000
            span.set_attribute("http.status_code", response.status_code)
            span.set_attribute("llm.latency_ms", elapsed_ms)

            if not response.is_success:
                span.set_attribute("llm.outcome", RequestOutcome.REJECTED.value)
                logger.warning(f"Service rejected completion request: HTTP {response.status_code}")
                return TransportResult(
                    RequestOutcome.REJECTED,
                    status_code=response.status_code,
                    detail=_error_message(response),
                )

            try:
                parsed = ChatCompletionResponse.model_validate(response.json())
            except ValueError as e:
                span.record_exception(e)
                span.set_attribute("llm.outcome", RequestOutcome.MALFORMED.value)
                logger.warning("Completion response could not be parsed")
                return TransportResult(
                    RequestOutcome.MALFORMED,
                    status_code=response.status_code,
                    detail=str(e),
                )

            span.set_attribute("llm.choice_count", len(parsed.choices))
            if parsed.usage is not None:
                span.set_attribute("llm.input_tokens", parsed.usage.prompt_tokens)
                span.set_attribute("llm.output_tokens", parsed.usage.completion_tokens)
            span.set_attribute("llm.outcome", RequestOutcome.OK.value)

            logger.debug(f"Response: {len(parsed.choices)} choices in {elapsed_ms:.0f}ms")
            return TransportResult(RequestOutcome.OK, response=parsed, status_code=response.status_code)

    async def aclose(self) -> None:
        if self._owns_client and self._http is not None:
            await self._http.aclose()
            self._http = None


def _error_message(response: httpx.Response) -> str:
    """Pull `error.message` out of an error body, falling back to the status line."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        message = body["error"].get("message")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"
