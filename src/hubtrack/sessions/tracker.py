"""
Session tracker.

Correlates OpenCode session lifecycle events with Hub tasks:

    session.created       -> start task
    message.part.updated  -> accumulate assistant text / tools
    message.updated       -> progress update (or start, for an unseen session)
    session.idle          -> complete task

Events are processed one at a time; handle_event finishes (Hub call
included) before the next event is handed in. Callers that can deliver
events concurrently must serialize them (see servers.http).
"""

from __future__ import annotations

import logging
import time
from typing import Any

from hubtrack.adapters.opencode import OpenCodeAdapter
from hubtrack.config.app import HubTrackConfig
from hubtrack.hooks.events import (
    MessagePart,
    MessagePartUpdated,
    MessageRole,
    MessageUpdated,
    SessionCreated,
    SessionEvent,
    SessionIdle,
    TextPart,
    ToolPart,
)
from hubtrack.hub.client import HubClient, TaskId
from hubtrack.sessions.state import SessionState, SessionStore
from hubtrack.sessions.summary import SESSION_STARTED, SessionSummarizer

logger = logging.getLogger(__name__)

HUB_UNAVAILABLE = "check Hub API availability"
MANUAL_SESSION_PREFIX = "manual-"


class SessionTracker:
    """
    Maps session lifecycle events onto Hub start/progress/complete calls.

    Owns the SessionStore for its whole lifetime. Also exposes the manual
    override operations (start, progress, complete, check_pending) used
    when automatic correlation misses or misattributes a session.
    """

    def __init__(
        self,
        hub_client: HubClient,
        config: HubTrackConfig | None = None,
        store: SessionStore | None = None,
        adapter: OpenCodeAdapter | None = None,
    ) -> None:
        """
        Initialize SessionTracker.

        Args:
            hub_client: Client used for every Hub call
            config: Configuration (default: HubTrackConfig())
            store: Session table (default: a new empty SessionStore)
            adapter: Translator for raw event dicts (default: OpenCodeAdapter())
        """
        self.config = config or HubTrackConfig()
        self.hub = hub_client
        self.sessions = store if store is not None else SessionStore()
        self.adapter = adapter or OpenCodeAdapter()
        self.summarizer = SessionSummarizer(self.config.summary)

    @classmethod
    def from_config(cls, config: HubTrackConfig) -> SessionTracker:
        """Build a tracker with a HubClient configured from config."""
        hub_client = HubClient(
            config.hub,
            log_preview_length=config.summary.log_preview_length,
        )
        return cls(hub_client, config=config)

    # ==================== EVENT ENTRY POINT ====================

    async def handle_event(self, event: SessionEvent | dict[str, Any]) -> None:
        """
        Process one lifecycle event.

        Accepts a typed SessionEvent or a raw OpenCode payload. Never raises:
        anything unexpected is logged and dropped so the host never sees a
        fault from the tracker.
        """
        try:
            if isinstance(event, dict):
                event = self.adapter.translate_to_event(event)
            await self._dispatch(event)
        except Exception as e:
            logger.error(f"EVENT ERROR: {e}", exc_info=True)

    async def _dispatch(self, event: SessionEvent) -> None:
        match event:
            case SessionCreated(session_id=str() as session_id):
                await self._on_session_created(session_id)
            case MessagePartUpdated(session_id=str() as session_id, part=part):
                self._on_part(session_id, part)
            case MessageUpdated(session_id=str() as session_id):
                await self._on_message(session_id, event)
            case SessionIdle(session_id=str() as session_id):
                await self._on_session_idle(session_id)
            case _:
                logger.debug(f"EVENT: ignored {event!r}")

    # ==================== SESSION HANDLERS ====================

    async def _on_session_created(self, session_id: str) -> None:
        logger.info(f"EVENT: session.created, sessionId={session_id}")
        await self._start_session(session_id, SESSION_STARTED)

    async def _on_session_idle(self, session_id: str) -> None:
        state = self.sessions.get(session_id)
        if state is None:
            return

        if state.is_tracked:
            summary = self.summarizer.completion(state)
            await self._complete(state, summary)
        else:
            logger.debug(f"EVENT: session.idle, sessionId={session_id} has no Hub task")

        # Removed regardless of the complete call outcome
        self.sessions.pop(session_id)
        logger.info(f"EVENT: session.idle, sessionId={session_id}")

    # ==================== PART HANDLERS ====================

    def _on_part(self, session_id: str, part: MessagePart) -> None:
        state = self.sessions.get(session_id)
        if state is None:
            return

        match part:
            case TextPart(text=text):
                state.assistant_text_buffer += text
            case ToolPart(tool=tool):
                state.tools_used.add(tool)

    # ==================== MESSAGE HANDLERS ====================

    async def _on_message(self, session_id: str, event: MessageUpdated) -> None:
        state = self.sessions.get(session_id)

        if state is None:
            if event.role is MessageRole.USER:
                await self._auto_create(session_id, event)
            return

        if event.message_id is not None and event.message_id == state.last_processed_message_id:
            return

        if event.role is MessageRole.USER:
            await self._on_user_message(state, event)
        elif event.role is MessageRole.ASSISTANT:
            await self._on_assistant_message(state, event)

    async def _auto_create(self, session_id: str, event: MessageUpdated) -> None:
        """Start tracking a session first seen through a user message."""
        content = self.summarizer.start_content(event.title)
        logger.info(f"EVENT: message.updated (user) for untracked sessionId={session_id}")

        state = await self._start_session(session_id, content)
        state.user_messages.append(content)
        state.message_count = 1
        state.last_processed_message_id = event.message_id
        state.last_counted_message_id = event.message_id

    async def _on_user_message(self, state: SessionState, event: MessageUpdated) -> None:
        # Each message id is counted once, titled or not
        if event.message_id is None or event.message_id != state.last_counted_message_id:
            state.message_count += 1
            state.last_counted_message_id = event.message_id

        summary = self.summarizer.title(event.title)
        if not summary:
            return

        state.user_messages.append(summary)
        await self._progress(state, self.summarizer.user_progress(summary))
        state.last_processed_message_id = event.message_id
        logger.info(f'EVENT: message.updated (user), title="{summary}"')

    async def _on_assistant_message(self, state: SessionState, event: MessageUpdated) -> None:
        if not event.finish:
            return

        state.message_count += 1
        state.last_counted_message_id = event.message_id
        await self._progress(state, self.summarizer.assistant_progress(state))
        state.assistant_text_buffer = ""
        state.last_processed_message_id = event.message_id
        logger.info(f"EVENT: message.updated (assistant), finish={event.finish}")

    # ==================== HUB CALLS ====================

    async def _start_session(
        self,
        session_id: str,
        content: str,
        target_agent: str | None = None,
    ) -> SessionState:
        """Call start and record the outcome, success or not."""
        result = await self.hub.start_task(session_id, content, target_agent)
        if not result.ok:
            logger.warning(
                f"Session {session_id} not registered with Hub ({result.error}); "
                f"tracking locally only"
            )
        return self.sessions.put(
            SessionState(
                session_id=session_id,
                remote_task_id=result.value if result.ok else None,
            )
        )

    async def _progress(self, state: SessionState, content: str) -> None:
        if state.remote_task_id is None:
            return
        await self.hub.send_progress(state.remote_task_id, content)

    async def _complete(self, state: SessionState, content: str) -> None:
        if state.remote_task_id is None:
            return
        await self.hub.complete_task(state.remote_task_id, content)

    # ==================== MANUAL OVERRIDES ====================

    def _manual_session_id(self) -> str:
        stamp = time.monotonic_ns()
        while f"{MANUAL_SESSION_PREFIX}{stamp}" in self.sessions:
            stamp += 1
        return f"{MANUAL_SESSION_PREFIX}{stamp}"

    def _evict_manual_sessions(self) -> None:
        """Drop the oldest manual sessions beyond sessions.max_manual_sessions.

        No session.idle ever arrives for a manual session id.
        """
        manual = [
            session_id
            for session_id in self.sessions.session_ids()
            if session_id.startswith(MANUAL_SESSION_PREFIX)
        ]
        excess = len(manual) - self.config.sessions.max_manual_sessions
        for session_id in manual[: max(excess, 0)]:
            self.sessions.pop(session_id)
            logger.debug(f"Evicted manual session {session_id}")

    async def start(self, content: str, target_agent: str | None = None) -> str:
        """
        Manually start a Hub task under a synthetic session id.

        Returns:
            A message with the Hub messageId, or a failure description
        """
        try:
            session_id = self._manual_session_id()
            state = await self._start_session(session_id, content, target_agent)
            self._evict_manual_sessions()
        except Exception as e:
            logger.error(f"Manual start failed: {e}", exc_info=True)
            return f"Failed to start task - {HUB_UNAVAILABLE}"

        if state.remote_task_id is None:
            return f"Failed to start task - {HUB_UNAVAILABLE}"
        return f"Task started with messageId: {state.remote_task_id}"

    async def progress(self, task_id: TaskId, content: str) -> str:
        """Manually send progress for any Hub task, tracked or not."""
        try:
            result = await self.hub.send_progress(task_id, content)
        except Exception as e:
            logger.error(f"Manual progress failed: {e}", exc_info=True)
            return f"Failed to send progress - {HUB_UNAVAILABLE}"

        if result.ok:
            return f"Progress sent for messageId: {task_id}"
        return f"Failed to send progress - {HUB_UNAVAILABLE}"

    async def complete(self, task_id: TaskId, content: str) -> str:
        """Manually complete any Hub task, tracked or not."""
        try:
            result = await self.hub.complete_task(task_id, content)
        except Exception as e:
            logger.error(f"Manual complete failed: {e}", exc_info=True)
            return f"Failed to complete task - {HUB_UNAVAILABLE}"

        if result.ok:
            return f"Task completed for messageId: {task_id}"
        return f"Failed to complete task - {HUB_UNAVAILABLE}"

    async def check_pending(self, agent: str | None = None) -> str:
        """List messages pending in the Hub for an agent."""
        agent = agent or self.config.hub.pending_agent
        try:
            result = await self.hub.check_pending(agent)
        except Exception as e:
            logger.error(f"Manual check failed: {e}", exc_info=True)
            return f"Failed to check pending messages - {HUB_UNAVAILABLE}"

        if not result.ok:
            return f"Failed to check pending messages - {HUB_UNAVAILABLE}"

        pending = result.value or []
        if not pending:
            return "No pending messages"

        lines = [f"- [{m.id}] {m.source_agent}: {m.content}" for m in pending]
        return f"{len(pending)} pending message(s):\n" + "\n".join(lines)
