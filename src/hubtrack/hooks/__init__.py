"""
Session lifecycle event models.

- EventType: the four event kinds the tracker reacts to
- SessionEvent: tagged union of the per-kind event dataclasses
- MessagePart: tagged union of streamed part kinds
"""

from hubtrack.hooks.events import (
    EventType,
    MessagePart,
    MessagePartUpdated,
    MessageRole,
    MessageUpdated,
    OtherPart,
    SessionCreated,
    SessionEvent,
    SessionIdle,
    TextPart,
    ToolPart,
    UnknownEvent,
)

__all__ = [
    "EventType",
    "MessagePart",
    "MessagePartUpdated",
    "MessageRole",
    "MessageUpdated",
    "OtherPart",
    "SessionCreated",
    "SessionEvent",
    "SessionIdle",
    "TextPart",
    "ToolPart",
    "UnknownEvent",
]
