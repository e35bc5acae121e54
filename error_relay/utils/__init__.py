"""
Utility modules for error-relay.

Provides common functionality:
- validators: Transport content rules
- sanitizers: Log redaction and truncation
"""

from error_relay.utils.validators import (
    MESSAGE_CONTENT_LIMIT,
    validate_content,
    validate_fallback_content,
    validate_snowflake,
)
from error_relay.utils.sanitizers import (
    sanitize_log_message,
    truncate,
)

__all__ = [
    "MESSAGE_CONTENT_LIMIT",
    "validate_content",
    "validate_fallback_content",
    "validate_snowflake",
    "sanitize_log_message",
    "truncate",
]
