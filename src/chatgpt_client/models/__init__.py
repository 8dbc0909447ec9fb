"""Value types: messages, client options and wire bodies."""

from chatgpt_client.models.message import Message, Role
from chatgpt_client.models.options import (
    DEFAULT_ENDPOINT,
    DEFAULT_MODELS_ENDPOINT,
    ClientOptions,
    SamplingOptions,
    build_options,
)
from chatgpt_client.models.wire import (
    ChatCompletionRequest,
    ChatCompletionResponse,
    Choice,
    ChoiceMessage,
    ModelInfo,
    ModelList,
    Usage,
)

__all__ = [
    "DEFAULT_ENDPOINT",
    "DEFAULT_MODELS_ENDPOINT",
    "ChatCompletionRequest",
    "ChatCompletionResponse",
    "Choice",
    "ChoiceMessage",
    "ClientOptions",
    "Message",
    "ModelInfo",
    "ModelList",
    "Role",
    "SamplingOptions",
    "Usage",
    "build_options",
]
