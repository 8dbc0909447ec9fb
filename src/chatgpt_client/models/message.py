"""
message.py

PURPOSE: The Message value type exchanged with the chat completion API.
DEPENDENCIES: pydantic

ARCHITECTURE NOTES:
Messages are frozen pydantic models. Handing one to a caller can never
expose the conversation log to mutation, so accessors only need to copy
the containing list, not each message.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message in the conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single turn in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(..., description="Who wrote the message")
    content: str = Field(default="", description="Message text")

    @classmethod
    def system(cls, content: str) -> "Message":
        return cls(role=Role.SYSTEM, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        return cls(role=Role.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> "Message":
        return cls(role=Role.ASSISTANT, content=content)

    def to_wire(self) -> dict[str, str]:
        """Return the `{role, content}` dict sent to the API."""
        return {"role": self.role.value, "content": self.content}
