"""
Configuration management module.

Logging helpers are exported here. Settings live in
``error_relay.config.settings``, which depends on the sinks and is
imported on demand.
"""

from error_relay.config.logging_config import setup_logging, get_logger

__all__ = [
    "setup_logging",
    "get_logger",
]
