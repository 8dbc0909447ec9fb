"""
errors.py

PURPOSE: Exception hierarchy for the chat client.
DEPENDENCIES: None (pure Python)

ARCHITECTURE NOTES:
Only caller mistakes and configuration problems are exceptions.
A failed or empty completion request is not: it comes back as an empty
candidate list and a RequestOutcome recorded on the client.
"""


class ChatClientError(Exception):
    """Base class for all chat client errors."""


class ConfigurationError(ChatClientError):
    """
    The client cannot be used with the given configuration.

    Raised while building options or initializing the client: invalid
    credential, invalid endpoint, unsupported model, or a sampling value
    outside its documented range.
    """


class InvalidStateError(ChatClientError):
    """An operation was invoked while the conversation is in the wrong state."""


class IndexOutOfRangeError(ChatClientError, IndexError):
    """A candidate index does not refer to a pending candidate."""


class InvalidArgumentError(ChatClientError, ValueError):
    """A per-call argument is outside its allowed range."""
