"""
Data sanitization utilities.

Keeps credentials out of log output and bounds the size of
message previews.
"""

from __future__ import annotations

import re


# Patterns for sensitive data
SENSITIVE_PATTERNS = [
    (re.compile(r"token[=:]\s*\S+", re.IGNORECASE), "token=***"),
    (re.compile(r"authorization:\s*\S+(\s+\S+)?", re.IGNORECASE), "authorization: ***"),
    (re.compile(r"\bbot\s+[A-Za-z0-9._\-]{20,}"), "Bot ***"),
    (re.compile(r"(/webhooks/\d+/)[A-Za-z0-9._\-]+"), r"\1***"),
]

# Control characters to remove
CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize_log_message(message: str) -> str:
    """
    Remove sensitive data from log messages.

    Args:
        message: Log message to sanitize.

    Returns:
        Sanitized message.
    """
    if not message:
        return ""

    sanitized = message

    for pattern, replacement in SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)

    sanitized = CONTROL_CHARS.sub("", sanitized)

    max_length = 10000
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "...[truncated]"

    return sanitized


def truncate(text: str, max_length: int = 1000, suffix: str = "...") -> str:
    """
    Truncate text to maximum length.

    Args:
        text: Text to truncate.
        max_length: Maximum length.
        suffix: Suffix to add when truncated.

    Returns:
        Truncated text.
    """
    if not text or len(text) <= max_length:
        return text

    return text[:max_length - len(suffix)] + suffix
