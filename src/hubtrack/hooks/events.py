"""
Typed session lifecycle events.

Each event kind the host emits has its own frozen dataclass carrying only
the fields that kind guarantees. Optional payload (titles, finish markers,
part text) is an explicit ``None`` rather than a missing attribute, so the
tracker can dispatch with ``match`` instead of probing dictionaries.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(str, Enum):
    """Event kinds the tracker understands."""

    SESSION_CREATED = "session.created"
    MESSAGE_PART_UPDATED = "message.part.updated"
    MESSAGE_UPDATED = "message.updated"
    SESSION_IDLE = "session.idle"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class TextPart:
    """A streamed chunk of assistant text."""

    text: str


@dataclass(frozen=True)
class ToolPart:
    """A tool invocation inside an assistant turn."""

    tool: str


@dataclass(frozen=True)
class OtherPart:
    """Any part kind the tracker does not accumulate (reasoning, files, ...)."""

    type: str


MessagePart = TextPart | ToolPart | OtherPart


@dataclass(frozen=True)
class SessionCreated:
    session_id: str | None


@dataclass(frozen=True)
class MessagePartUpdated:
    session_id: str | None
    part: MessagePart


@dataclass(frozen=True)
class MessageUpdated:
    """A message reached a state worth reporting.

    ``finish`` is only set on assistant messages that completed;
    ``title`` comes from the message summary when the host produced one.
    """

    session_id: str | None
    message_id: str | None
    role: MessageRole | None
    finish: str | None = None
    title: str | None = None


@dataclass(frozen=True)
class SessionIdle:
    session_id: str | None


@dataclass(frozen=True)
class UnknownEvent:
    """Any event kind outside the tracked set; always ignored."""

    type: str


SessionEvent = SessionCreated | MessagePartUpdated | MessageUpdated | SessionIdle | UnknownEvent
