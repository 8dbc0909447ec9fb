"""Transport adapter between the conversation and the HTTP API."""

from chatgpt_client.transport.base import ChatTransport, RequestOutcome, TransportResult
from chatgpt_client.transport.http import HttpxTransport
from chatgpt_client.transport.payload import build_request, candidates_from_response

__all__ = [
    "ChatTransport",
    "HttpxTransport",
    "RequestOutcome",
    "TransportResult",
    "build_request",
    "candidates_from_response",
]
