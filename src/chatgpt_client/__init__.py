"""
ChatGPT Client - A stateful conversation client for chat completion APIs.

This package provides tools for:
- Tracking a single linear conversation with strict turn-taking
- Sending the conversation to an OpenAI-style chat completion endpoint
- Choosing one of several candidate replies to continue the conversation
"""

__version__ = "0.1.0"

from chatgpt_client.client import ChatClient
from chatgpt_client.conversation import Conversation, ConversationState
from chatgpt_client.errors import (
    ChatClientError,
    ConfigurationError,
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidStateError,
)
from chatgpt_client.models import ClientOptions, Message, Role, SamplingOptions
from chatgpt_client.transport import RequestOutcome

__all__ = [
    "ChatClient",
    "ChatClientError",
    "ClientOptions",
    "ConfigurationError",
    "Conversation",
    "ConversationState",
    "IndexOutOfRangeError",
    "InvalidArgumentError",
    "InvalidStateError",
    "Message",
    "RequestOutcome",
    "Role",
    "SamplingOptions",
    "__version__",
]
