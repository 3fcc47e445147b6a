"""Pytest configuration and shared fixtures for hubtrack tests."""

import tempfile
from collections.abc import Callable, Iterator
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from hubtrack.config.app import HubTrackConfig
from hubtrack.hub.client import HubClient, HubResult
from hubtrack.sessions.tracker import SessionTracker


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def default_config() -> HubTrackConfig:
    """Create a default HubTrackConfig for testing."""
    return HubTrackConfig()


@pytest.fixture
def mock_hub() -> MagicMock:
    """HubClient double whose calls all succeed; start returns messageId 42."""
    hub = MagicMock(spec=HubClient)
    hub.start_task = AsyncMock(return_value=HubResult.success(42))
    hub.send_progress = AsyncMock(return_value=HubResult.success())
    hub.complete_task = AsyncMock(return_value=HubResult.success())
    hub.check_pending = AsyncMock(return_value=HubResult.success([]))
    return hub


@pytest.fixture
def failing_hub(mock_hub: MagicMock) -> MagicMock:
    """HubClient double whose calls all fail, as when the Hub is down."""
    mock_hub.start_task.return_value = HubResult.failure("connection refused")
    mock_hub.send_progress.return_value = HubResult.failure("connection refused")
    mock_hub.complete_task.return_value = HubResult.failure("connection refused")
    mock_hub.check_pending.return_value = HubResult.failure("connection refused")
    return mock_hub


@pytest.fixture
def tracker(mock_hub: MagicMock, default_config: HubTrackConfig) -> SessionTracker:
    """SessionTracker wired to the mock Hub."""
    return SessionTracker(mock_hub, config=default_config)


@pytest.fixture
def hub_calls(mock_hub: MagicMock) -> Callable[[], int]:
    """Returns a function counting every Hub call made through mock_hub."""

    def count() -> int:
        return (
            mock_hub.start_task.await_count
            + mock_hub.send_progress.await_count
            + mock_hub.complete_task.await_count
            + mock_hub.check_pending.await_count
        )

    return count
