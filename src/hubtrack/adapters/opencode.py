"""OpenCode adapter for event translation.

Translates the event payloads an OpenCode plugin receives into the typed
SessionEvent models consumed by SessionTracker.

Two payload shapes are accepted:

Flat (what a thin forwarding plugin sends):
    {"type": "message.updated", "sessionId": "s1", "messageId": "m1",
     "role": "user", "summary": {"title": "Fix bug"}}

Native (OpenCode's own bus events):
    {"type": "message.updated",
     "properties": {"info": {"id": "m1", "sessionID": "s1", "role": "user",
                             "summary": {"title": "Fix bug"}}}}

Missing or wrongly typed fields are treated as absent. Translation never
raises; anything unrecognizable becomes UnknownEvent.
"""

from __future__ import annotations

from typing import Any

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


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> str | None:
    """Return value if it is a non-empty string, else None."""
    if isinstance(value, str) and value:
        return value
    return None


def _first_str(*values: Any) -> str | None:
    for value in values:
        s = _as_str(value)
        if s is not None:
            return s
    return None


class OpenCodeAdapter:
    """Adapter for OpenCode plugin event translation."""

    def translate_to_event(self, native_event: Any) -> SessionEvent:
        """Convert an OpenCode event payload to a typed SessionEvent.

        Args:
            native_event: Raw event dict in flat or native shape

        Returns:
            The matching SessionEvent, or UnknownEvent for anything else.
        """
        payload = _as_dict(native_event)
        event_type = payload.get("type")
        if not isinstance(event_type, str):
            return UnknownEvent(type=str(event_type) if event_type is not None else "")

        try:
            kind = EventType(event_type)
        except ValueError:
            return UnknownEvent(type=event_type)

        props = _as_dict(payload.get("properties"))

        if kind is EventType.SESSION_CREATED:
            info = _as_dict(props.get("info"))
            return SessionCreated(
                session_id=_first_str(payload.get("sessionId"), info.get("id"), props.get("sessionID"))
            )

        if kind is EventType.SESSION_IDLE:
            return SessionIdle(
                session_id=_first_str(payload.get("sessionId"), props.get("sessionID"))
            )

        if kind is EventType.MESSAGE_PART_UPDATED:
            part = _as_dict(payload.get("part")) or _as_dict(props.get("part"))
            return MessagePartUpdated(
                session_id=_first_str(payload.get("sessionId"), part.get("sessionID")),
                part=self._translate_part(part),
            )

        # EventType.MESSAGE_UPDATED
        info = _as_dict(props.get("info")) or payload
        return self._translate_message(payload, info)

    def _translate_part(self, part: dict[str, Any]) -> MessagePart:
        part_type = _as_str(part.get("type")) or ""
        if part_type == "text":
            text = part.get("text")
            return TextPart(text=text if isinstance(text, str) else "")
        if part_type == "tool":
            tool = part.get("tool")
            # Some hosts nest the tool name: {"tool": {"name": "bash"}}
            name = _first_str(tool, _as_dict(tool).get("name"))
            if name is not None:
                return ToolPart(tool=name)
        return OtherPart(type=part_type)

    def _translate_message(self, payload: dict[str, Any], info: dict[str, Any]) -> MessageUpdated:
        role_value = _first_str(payload.get("role"), info.get("role"))
        try:
            role = MessageRole(role_value) if role_value else None
        except ValueError:
            role = None

        summary = _as_dict(payload.get("summary")) or _as_dict(info.get("summary"))

        finish = payload.get("finish", info.get("finish"))
        if finish is not None and not isinstance(finish, str):
            finish = str(finish) if finish else None

        return MessageUpdated(
            session_id=_first_str(payload.get("sessionId"), info.get("sessionID")),
            message_id=_first_str(payload.get("messageId"), info.get("id")),
            role=role,
            finish=finish or None,
            title=_as_str(summary.get("title")),
        )
