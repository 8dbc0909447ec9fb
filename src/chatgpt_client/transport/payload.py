"""
payload.py

PURPOSE: Map client state to a request body and a response body to candidates.
DEPENDENCIES: models
"""

from collections.abc import Sequence

from chatgpt_client.errors import InvalidArgumentError
from chatgpt_client.models.message import Message
from chatgpt_client.models.options import ClientOptions
from chatgpt_client.models.wire import ChatCompletionRequest, ChatCompletionResponse


def build_request(
    options: ClientOptions,
    messages: Sequence[Message],
    n: int | None = None,
) -> ChatCompletionRequest:
    """
    Build the request body for the current conversation.

    Args:
        options: Client configuration
        messages: The full conversation log
        n: Candidate count for this call only; the configured count if None

    Raises:
        InvalidArgumentError: If n is not positive
    """
    if n is not None and n <= 0:
        raise InvalidArgumentError(f"The number of candidates must be positive, got {n}")

    sampling = options.sampling
    return ChatCompletionRequest(
        model=options.model,
        messages=list(messages),
        temperature=sampling.temperature,
        top_p=sampling.top_p,
        n=n if n is not None else sampling.n,
        stop=list(sampling.stop) if sampling.stop is not None else None,
        max_tokens=sampling.max_tokens,
        presence_penalty=sampling.presence_penalty,
        frequency_penalty=sampling.frequency_penalty,
        logit_bias=dict(sampling.logit_bias) if sampling.logit_bias is not None else None,
        user=sampling.user,
    )


def candidates_from_response(response: ChatCompletionResponse) -> list[Message]:
    """
    Turn each choice into an assistant message, in the order the service sent them.

    The choice `index` is informational only.
    """
    return [Message.assistant(choice.message.content) for choice in response.choices]
