"""
Sinks module for error delivery.

Provides the independent delivery targets:
- ChannelSink: Message in a chat channel
- WebhookSink: Chat-service webhook
- FileSink: Append-only local file
"""

from error_relay.sinks.base import DEFAULT_ERROR_MESSAGE, ChatTransport
from error_relay.sinks.channel_sink import ChannelSink
from error_relay.sinks.file_sink import FileSink
from error_relay.sinks.webhook_sink import WebhookSink

__all__ = [
    "DEFAULT_ERROR_MESSAGE",
    "ChatTransport",
    "ChannelSink",
    "FileSink",
    "WebhookSink",
]
