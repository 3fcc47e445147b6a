"""Hub API client."""

from hubtrack.hub.client import HubClient, HubResult, PendingMessage, TaskId

__all__ = ["HubClient", "HubResult", "PendingMessage", "TaskId"]
