"""
Chat-channel sink.

Creates a message holding the error report in a channel.
"""

from __future__ import annotations

from typing import Any

from error_relay.sinks.base import DEFAULT_ERROR_MESSAGE, ChatTransport, send_with_fallback


class ChannelSink:
    """
    Posts reports as messages in a channel.

    The channel may be any channel the client can post to, including
    a DM channel.
    """

    name = "channel"
    failure_verb = "create message"

    def __init__(
        self,
        client: ChatTransport,
        channel_id: int,
        fallback_content: str = DEFAULT_ERROR_MESSAGE,
    ) -> None:
        self.client = client
        self.channel_id = channel_id
        self.fallback_content = fallback_content

    async def send(self, content: str) -> Any:
        """
        Create a message with the content, or the fallback content.

        Raises:
            DeliveryError: If the message could not be created.
            FallbackContentError: If the fallback content is rejected.
        """
        async def attempt(text: str) -> Any:
            return await self.client.create_message(self.channel_id, text)

        return await send_with_fallback(attempt, content, self.fallback_content, self.name)
