"""
error-relay - last-resort error reporting.

Sends an error's description to a chat channel, a chat-service
webhook and a local file, and always prints it to stderr.
"""

import logging

__version__ = "1.0.0"
__license__ = "MIT"

from error_relay.core.exceptions import (
    ErrorRelayError,
    ConfigurationError,
    ContentValidationError,
    DeliveryError,
    FallbackContentError,
)
from error_relay.core.reporter import Reporter, ChannelTarget, WebhookTarget
from error_relay.sinks.base import DEFAULT_ERROR_MESSAGE

# Library use stays silent unless the host configures logging
logging.getLogger("error_relay").addHandler(logging.NullHandler())

__all__ = [
    "Reporter",
    "ChannelTarget",
    "WebhookTarget",
    "DEFAULT_ERROR_MESSAGE",
    "ErrorRelayError",
    "ConfigurationError",
    "ContentValidationError",
    "DeliveryError",
    "FallbackContentError",
]
