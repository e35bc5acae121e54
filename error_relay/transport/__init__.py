"""
Chat-service transport used by the channel and webhook sinks.
"""

from error_relay.transport.discord_client import DEFAULT_API_BASE, DiscordClient

__all__ = [
    "DEFAULT_API_BASE",
    "DiscordClient",
]
