"""
Shared pieces of the network sinks.

Both network sinks follow the same pattern: try the rendered message,
and when the transport rejects the content, try once more with the
fallback content.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, TypeVar

from error_relay.config.logging_config import get_logger
from error_relay.core.exceptions import ContentValidationError, FallbackContentError


logger = get_logger(__name__)

T = TypeVar("T")

# Sent instead of the error message when the transport rejects it
DEFAULT_ERROR_MESSAGE = "An error occurred, check the `stderr` for more info"


class ChatTransport(Protocol):
    """Protocol for the chat-service client the network sinks post through."""

    async def create_message(self, channel_id: int, content: str) -> Any:
        """
        Create a message in a channel.

        Raises:
            ContentValidationError: If the content is rejected.
            DeliveryError: If the request fails.
        """
        ...

    async def execute_webhook(self, webhook_id: int, token: str, content: str) -> Any:
        """
        Execute a webhook.

        Raises:
            ContentValidationError: If the content is rejected.
            DeliveryError: If the request fails.
        """
        ...


async def send_with_fallback(
    attempt: Callable[[str], Awaitable[T]],
    content: str,
    fallback_content: str,
    sink: str,
) -> T:
    """
    Run ``attempt`` with the content, falling back once on rejection.

    Args:
        attempt: Coroutine function sending the given content.
        content: Rendered error message.
        fallback_content: Content used when ``content`` is rejected.
        sink: Sink name for log output.

    Returns:
        Whatever ``attempt`` returns.

    Raises:
        FallbackContentError: If the fallback content is rejected too.
        DeliveryError: If the request itself fails.
    """
    try:
        return await attempt(content)
    except ContentValidationError as e:
        logger.debug(f"{sink}: content rejected ({e.message}), sending fallback content")

    try:
        return await attempt(fallback_content)
    except ContentValidationError as e:
        raise FallbackContentError(
            f"{sink} rejected the fallback content: {e.message}",
            details={"sink": sink},
        ) from e
