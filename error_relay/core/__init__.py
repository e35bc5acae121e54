"""
Core module containing the reporter and its error taxonomy.

Only the exceptions are imported here; the reporter lives in
``error_relay.core.reporter`` and is re-exported by the package root.
"""

from error_relay.core.exceptions import (
    ErrorRelayError,
    ConfigurationError,
    ContentValidationError,
    DeliveryError,
    FallbackContentError,
)

__all__ = [
    "ErrorRelayError",
    "ConfigurationError",
    "ContentValidationError",
    "DeliveryError",
    "FallbackContentError",
]
