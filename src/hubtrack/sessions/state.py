"""
Per-session accumulator state and the table that owns it.

SessionStore is created once per SessionTracker and is the only place
session state lives. Entries are inserted when a start call is attempted
for a session and removed when the session completes.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from hubtrack.hub.client import TaskId


@dataclass
class SessionState:
    """What the tracker knows about one active session.

    Attributes:
        session_id: Host session identifier
        remote_task_id: Hub messageId from the start call, None if it failed
        last_processed_message_id: Id of the last reported message (dedup key)
        last_counted_message_id: Id of the last message added to message_count
        user_messages: Summarized user requests in arrival order
        assistant_text_buffer: Text of the assistant turn being streamed
        tools_used: Tool names used during the session; only ever grows
        message_count: Finalized user and assistant messages seen
    """

    session_id: str
    remote_task_id: TaskId | None = None
    last_processed_message_id: str | None = None
    last_counted_message_id: str | None = None
    user_messages: list[str] = field(default_factory=list)
    assistant_text_buffer: str = ""
    tools_used: set[str] = field(default_factory=set)
    message_count: int = 0

    @property
    def is_tracked(self) -> bool:
        """True when the Hub accepted the start call."""
        return self.remote_task_id is not None

    @property
    def last_user_message(self) -> str | None:
        return self.user_messages[-1] if self.user_messages else None


class SessionStore:
    """Session state table keyed by session id."""

    def __init__(self) -> None:
        self._sessions: dict[str, SessionState] = {}

    def get(self, session_id: str) -> SessionState | None:
        return self._sessions.get(session_id)

    def put(self, state: SessionState) -> SessionState:
        """Insert state, replacing any entry for the same session id."""
        self._sessions[state.session_id] = state
        return state

    def pop(self, session_id: str) -> SessionState | None:
        return self._sessions.pop(session_id, None)

    def session_ids(self) -> list[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[SessionState]:
        return iter(list(self._sessions.values()))
