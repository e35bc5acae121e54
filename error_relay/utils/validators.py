"""
Input validation utilities.

Content rules the chat transports enforce before a request is sent,
plus the identifier checks used by the settings models.
"""

from __future__ import annotations

from typing import Optional

from error_relay.core.exceptions import ContentValidationError, FallbackContentError


# Maximum message and webhook content length, in characters
MESSAGE_CONTENT_LIMIT = 2000


def validate_content(content: str, limit: int = MESSAGE_CONTENT_LIMIT) -> str:
    """
    Validate message content against the transport's rules.

    Args:
        content: Content to validate.
        limit: Maximum length in characters.

    Returns:
        The content, unchanged.

    Raises:
        ContentValidationError: If content is empty or too long.
    """
    if not content:
        raise ContentValidationError("Content must not be empty", length=0, limit=limit)

    if len(content) > limit:
        raise ContentValidationError(
            f"Content is {len(content)} characters, limit is {limit}",
            length=len(content),
            limit=limit,
        )

    return content


def validate_fallback_content(content: str, limit: int = MESSAGE_CONTENT_LIMIT) -> str:
    """
    Validate the fallback content.

    Fallback text that a transport would reject can never be delivered,
    so the failure is escalated to the fatal error type.

    Raises:
        FallbackContentError: If the fallback content is invalid.
    """
    try:
        return validate_content(content, limit)
    except ContentValidationError as e:
        raise FallbackContentError(f"Fallback content is invalid: {e.message}") from e


def validate_snowflake(value: Optional[int], field: str = "id") -> bool:
    """
    Validate a chat-service identifier.

    Args:
        value: Identifier to check.
        field: Field name used in the error message.

    Returns:
        True if the identifier is a positive integer.

    Raises:
        ValueError: If the identifier is not positive.
    """
    if value is None:
        return False

    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValueError(f"{field} must be a positive integer, got {value!r}")

    return True
