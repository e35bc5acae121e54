"""
Pytest configuration and fixtures for error-relay tests.
"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Tuple

import pytest

from error_relay.utils.validators import MESSAGE_CONTENT_LIMIT, validate_content


class FakeChatClient:
    """
    In-memory chat client.

    Records every attempt, including the ones rejected by content
    validation, so tests can check what each attempt carried.
    """

    def __init__(self, limit: int = MESSAGE_CONTENT_LIMIT) -> None:
        self.limit = limit
        self.attempts: List[Tuple[str, str]] = []
        self.messages: List[Tuple[int, str]] = []
        self.webhooks: List[Tuple[int, str, str]] = []
        self.channel_error: Optional[Exception] = None
        self.webhook_error: Optional[Exception] = None
        self.reject_all = False

    def _validate(self, content: str) -> None:
        if self.reject_all:
            validate_content(content, limit=0)
        validate_content(content, self.limit)

    async def create_message(self, channel_id: int, content: str) -> Dict[str, Any]:
        self.attempts.append(("channel", content))
        self._validate(content)
        if self.channel_error is not None:
            raise self.channel_error
        self.messages.append((channel_id, content))
        return {"id": "1", "channel_id": str(channel_id), "content": content}

    async def execute_webhook(self, webhook_id: int, token: str, content: str) -> None:
        self.attempts.append(("webhook", content))
        self._validate(content)
        if self.webhook_error is not None:
            raise self.webhook_error
        self.webhooks.append((webhook_id, token, content))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def chat_client() -> FakeChatClient:
    """Create a fake chat client."""
    return FakeChatClient()


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo setup_logging() calls made by a test."""
    yield
    logger = logging.getLogger("error_relay")
    logger.handlers = [logging.NullHandler()]
    logger.setLevel(logging.NOTSET)


# Markers for test categorization
def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line("markers", "integration: marks integration tests")
