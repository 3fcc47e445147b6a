"""
Summaries sent to the Hub.

Builds the content strings for start, progress and complete calls from
the accumulated SessionState, using the limits in SummarySettings.
"""

from __future__ import annotations

from hubtrack.config.app import SummarySettings
from hubtrack.sessions.state import SessionState
from hubtrack.utils.text import format_tool_list, summarize

SESSION_STARTED = "Session started"
NEW_CONVERSATION = "New conversation"
RESPONSE_COMPLETED = "Response completed"
SESSION_COMPLETED = "Session completed"

CLAUSE_SEPARATOR = " | "


class SessionSummarizer:
    """Builds Hub content strings for one tracker."""

    def __init__(self, settings: SummarySettings | None = None) -> None:
        self.settings = settings or SummarySettings()

    def title(self, title: str | None) -> str:
        """Summarized user message title, or "" if there is none."""
        return summarize(title, self.settings.title_max_length)

    def start_content(self, title: str | None) -> str:
        """Content for a start call created from a user message."""
        return self.title(title) or NEW_CONVERSATION

    def user_progress(self, summary: str) -> str:
        return f"User: {summary}"

    def assistant_progress(self, state: SessionState) -> str:
        """
        Progress content for a finished assistant turn.

        The accumulated text is truncated, followed by the tools used so far
        in brackets. Falls back to a placeholder when both are empty.
        """
        text = summarize(state.assistant_text_buffer, self.settings.assistant_max_length)
        if state.tools_used:
            tools = f"[Tools: {format_tool_list(state.tools_used, self.settings.max_listed_tools)}]"
            text = f"{text} {tools}" if text else tools
        return f"Assistant: {text or RESPONSE_COMPLETED}"

    def completion(self, state: SessionState) -> str:
        """
        Completion content for an idle session.

        Up to three clauses: message count, tools used, last user request.
        """
        clauses: list[str] = []

        if state.message_count > 0:
            noun = "message" if state.message_count == 1 else "messages"
            clauses.append(f"{state.message_count} {noun}")

        if state.tools_used:
            clauses.append(
                f"Tools: {format_tool_list(state.tools_used, self.settings.max_listed_tools)}"
            )

        last_request = state.last_user_message
        if last_request:
            clauses.append(
                f"Last request: {summarize(last_request, self.settings.last_request_max_length)}"
            )

        return CLAUSE_SEPARATOR.join(clauses) if clauses else SESSION_COMPLETED
