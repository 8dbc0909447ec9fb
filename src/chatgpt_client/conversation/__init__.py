"""Conversation state machine."""

from chatgpt_client.conversation.machine import Conversation, ConversationState

__all__ = ["Conversation", "ConversationState"]
