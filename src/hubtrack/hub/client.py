"""HTTP client for the Hub task-tracking API.

Every call is best-effort: failures (non-2xx, timeouts, transport errors,
unreadable bodies) are logged and returned as a failed HubResult. Nothing
here raises to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import httpx

from hubtrack.config.app import HubSettings
from hubtrack.utils.text import summarize

logger = logging.getLogger(__name__)

T = TypeVar("T")

TaskId = int | str


@dataclass(frozen=True)
class HubResult(Generic[T]):
    """Outcome of one Hub call."""

    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> HubResult[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> HubResult[T]:
        return cls(ok=False, error=error)


@dataclass(frozen=True)
class PendingMessage:
    """A message waiting in the Hub for an agent."""

    id: TaskId
    source_agent: str
    content: str
    message_type: str
    created_at: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PendingMessage:
        return cls(
            id=data.get("id", ""),
            source_agent=str(data.get("sourceAgent", "")),
            content=str(data.get("content", "")),
            message_type=str(data.get("messageType", "")),
            created_at=str(data.get("createdAt", "")),
        )


class HubClient:
    """Client for the Hub start / progress / complete / pending endpoints."""

    def __init__(
        self,
        settings: HubSettings | None = None,
        log_preview_length: int = 50,
    ) -> None:
        """
        Args:
            settings: Hub connection settings (default: HubSettings())
            log_preview_length: Length content is cut to in log lines
        """
        self.settings = settings or HubSettings()
        self.base_url = self.settings.url.rstrip("/")
        self.timeout = self.settings.timeout_seconds
        self.log_preview_length = log_preview_length

    async def start_task(
        self,
        session_id: str | None,
        content: str,
        target_agent: str | None = None,
    ) -> HubResult[TaskId]:
        """
        Start a new task in the Hub.

        Args:
            session_id: Host session the task belongs to (omitted when None)
            content: Task description
            target_agent: Target agent (default: settings.default_target_agent)

        Returns:
            HubResult carrying the Hub's messageId on success
        """
        payload: dict[str, Any] = {
            "sourceAgent": self.settings.source_agent,
            "content": content,
            "targetAgent": target_agent or self.settings.default_target_agent,
        }
        if session_id:
            payload["sessionId"] = session_id

        result = await self._post("/start", payload, "START", parse_body=True)
        if not result.ok:
            return HubResult.failure(result.error or "start failed")

        data = result.value
        message_id = data.get("messageId") if isinstance(data, dict) else None
        if message_id is None:
            logger.warning(f"START ERROR: response has no messageId: {data!r}")
            return HubResult.failure("Hub response missing messageId")

        logger.info(
            f"START: sessionId={session_id}, messageId={message_id}, "
            f'content="{summarize(content, self.log_preview_length)}"'
        )
        return HubResult.success(message_id)

    async def send_progress(self, parent_message_id: TaskId, content: str) -> HubResult[None]:
        """Send a progress update for an active task."""
        result = await self._post(
            "/progress",
            {"parentMessageId": parent_message_id, "content": content},
            "PROGRESS",
        )
        if not result.ok:
            return HubResult.failure(result.error or "progress failed")

        logger.info(
            f"PROGRESS: parentMessageId={parent_message_id}, "
            f'content="{summarize(content, self.log_preview_length)}"'
        )
        return HubResult.success()

    async def complete_task(self, parent_message_id: TaskId, content: str) -> HubResult[None]:
        """Mark a task as complete."""
        result = await self._post(
            "/complete",
            {"parentMessageId": parent_message_id, "content": content},
            "COMPLETE",
        )
        if not result.ok:
            return HubResult.failure(result.error or "complete failed")

        logger.info(
            f"COMPLETE: parentMessageId={parent_message_id}, "
            f'content="{summarize(content, self.log_preview_length)}"'
        )
        return HubResult.success()

    async def check_pending(self, agent: str | None = None) -> HubResult[list[PendingMessage]]:
        """List messages waiting in the Hub for an agent."""
        agent = agent or self.settings.pending_agent
        url = f"{self.base_url}/pending/{agent}"

        try:
            async with httpx.AsyncClient() as client:
                response = await client.get(
                    url,
                    headers={"Accept": "application/json"},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException:
            logger.warning(f"CHECK ERROR: timed out after {self.timeout}s")
            return HubResult.failure(f"timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"CHECK ERROR: {e}")
            return HubResult.failure(str(e))

        if not 200 <= response.status_code < 300:
            logger.warning(f"CHECK ERROR: HTTP {response.status_code} {response.text}")
            return HubResult.failure(f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.warning(f"CHECK ERROR: invalid JSON: {e}")
            return HubResult.failure("invalid JSON in Hub response")

        if not isinstance(data, list):
            logger.warning(f"CHECK ERROR: expected a list, got {type(data).__name__}")
            return HubResult.failure("unexpected Hub response")

        messages = [PendingMessage.from_dict(item) for item in data if isinstance(item, dict)]
        logger.info(f"CHECK: agent={agent}, pending={len(messages)}")
        return HubResult.success(messages)

    async def _post(
        self,
        path: str,
        payload: dict[str, Any],
        label: str,
        parse_body: bool = False,
    ) -> HubResult[Any]:
        """POST a JSON body; on success the value is the parsed body (or None)."""
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
        except httpx.TimeoutException:
            logger.warning(f"{label} ERROR: timed out after {self.timeout}s")
            return HubResult.failure(f"timed out after {self.timeout}s")
        except Exception as e:
            logger.warning(f"{label} ERROR: {e}")
            return HubResult.failure(str(e))

        if not 200 <= response.status_code < 300:
            logger.warning(f"{label} ERROR: HTTP {response.status_code} {response.text}")
            return HubResult.failure(f"HTTP {response.status_code}")

        if not parse_body or response.status_code == 204:
            return HubResult.success()

        try:
            return HubResult.success(response.json())
        except ValueError as e:
            logger.warning(f"{label} ERROR: invalid JSON: {e}")
            return HubResult.failure("invalid JSON in Hub response")
