"""
machine.py

PURPOSE: The conversation log and the turn-taking rules that guard it.
DEPENDENCIES: models

ARCHITECTURE NOTES:
The Conversation is authoritative over the message log, the same way the
game engine is authoritative over game state. It stores only two things:
the committed log and the pending candidates from the last request.
Everything else (the current state, what is allowed next) is computed
from those two on demand, so there are no flags to fall out of sync.

Flow:
    add_user_message -> (client sends) -> offer_candidates -> select_candidate

Every rule check happens before anything is mutated, so a rejected call
leaves the conversation exactly as it was.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from chatgpt_client.errors import IndexOutOfRangeError, InvalidStateError
from chatgpt_client.models.message import Message, Role

logger = logging.getLogger(__name__)


class ConversationState(str, Enum):
    """Where the conversation stands, derived from the log and candidates."""

    EMPTY = "empty"
    AWAITING_USER = "awaiting_user"
    AWAITING_REQUEST = "awaiting_request"
    AWAITING_SELECTION = "awaiting_selection"


class Conversation:
    """
    A single linear conversation with strict turn-taking.

    The log may open with one system message; after that roles alternate
    user, assistant, user, ... starting with user.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._pending: list[Message] = []
        self._revision = 0

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConversationState:
        if self._pending:
            return ConversationState.AWAITING_SELECTION
        if not self._messages:
            return ConversationState.EMPTY
        if self._messages[-1].role == Role.USER:
            return ConversationState.AWAITING_REQUEST
        return ConversationState.AWAITING_USER

    @property
    def can_add_system_message(self) -> bool:
        return self.state == ConversationState.EMPTY

    @property
    def can_add_user_message(self) -> bool:
        return self.state in (ConversationState.EMPTY, ConversationState.AWAITING_USER)

    @property
    def can_send_request(self) -> bool:
        return self.state == ConversationState.AWAITING_REQUEST

    @property
    def revision(self) -> int:
        """Counter bumped by every mutation."""
        return self._revision

    def __len__(self) -> int:
        return len(self._messages)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_system_message(self, content: str) -> None:
        """
        Open the conversation with a system message.

        Raises:
            InvalidStateError: If the conversation already has messages
        """
        if not self.can_add_system_message:
            raise InvalidStateError(
                "A system message can only open an empty conversation "
                f"(state is {self.state.value})"
            )
        self._append(Message.system(content))

    def add_user_message(self, content: str) -> None:
        """
        Append a user turn.

        Raises:
            InvalidStateError: If it is not the user's turn
        """
        if not self.can_add_user_message:
            raise InvalidStateError(f"It is not the user's turn (state is {self.state.value})")
        self._append(Message.user(content))

    def remove_last_message(self) -> None:
        """
        Undo the most recent step.

        With candidates pending, the candidates are discarded and the log
        is left alone, which undoes the request rather than a turn.
        Otherwise the last logged message is removed.

        Raises:
            InvalidStateError: If the conversation is empty
        """
        if not self._messages:
            raise InvalidStateError("There are no messages to remove")

        if self._pending:
            logger.debug(f"Discarding {len(self._pending)} pending candidates")
            self._pending = []
        else:
            removed = self._messages.pop()
            logger.debug(f"Removed last {removed.role.value} message")
        self._revision += 1

    def require_request_ready(self) -> None:
        """
        Check that a request may be sent now.

        Raises:
            InvalidStateError: If the log does not end with an unanswered user turn
        """
        if not self.can_send_request:
            raise InvalidStateError(
                "A request needs the conversation to end with a user message "
                f"(state is {self.state.value})"
            )

    def offer_candidates(self, candidates: Iterable[Message], revision: int) -> list[Message]:
        """
        Store the candidates returned for a request.

        Candidates are stored as assistant messages in the order given.
        Nothing is stored if the list is empty or if the conversation was
        mutated after `revision` was read (the reply no longer answers the
        current log).

        Args:
            candidates: Replies from the service
            revision: Value of `revision` when the request was built

        Returns:
            A copy of the stored candidates, or an empty list
        """
        if revision != self._revision or not self.can_send_request:
            logger.warning("Conversation changed while a request was in flight; dropping reply")
            return []

        stored = [Message.assistant(candidate.content) for candidate in candidates]
        if not stored:
            return []

        self._pending = stored
        self._revision += 1
        return list(self._pending)

    def select_candidate(self, index: int) -> Message:
        """
        Commit one pending candidate to the log.

        Args:
            index: Position in the pending candidate list

        Returns:
            The committed message

        Raises:
            InvalidStateError: If no candidates are pending
            IndexOutOfRangeError: If index does not refer to a candidate
        """
        if not self._pending:
            raise InvalidStateError(
                f"There are no candidates to select from (state is {self.state.value})"
            )
        if not 0 <= index < len(self._pending):
            raise IndexOutOfRangeError(
                f"Candidate index {index} out of range (0..{len(self._pending) - 1})"
            )

        chosen = self._pending[index]
        self._pending = []
        self._append(chosen)
        return chosen

    def clear(self) -> None:
        """Start over with an empty conversation."""
        self._messages = []
        self._pending = []
        self._revision += 1

    def _append(self, message: Message) -> None:
        self._messages.append(message)
        self._revision += 1

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    def history(self) -> list[Message]:
        """Return a copy of the committed log."""
        return list(self._messages)

    def pending_candidates(self) -> list[Message]:
        """Return a copy of the candidates awaiting selection."""
        return list(self._pending)
