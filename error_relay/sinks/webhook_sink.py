"""
Webhook sink.

Executes a chat-service webhook with the error report.
"""

from __future__ import annotations

from error_relay.sinks.base import DEFAULT_ERROR_MESSAGE, ChatTransport, send_with_fallback


class WebhookSink:
    """Executes a webhook with the report as its content."""

    name = "webhook"
    failure_verb = "execute webhook"

    def __init__(
        self,
        client: ChatTransport,
        webhook_id: int,
        token: str,
        fallback_content: str = DEFAULT_ERROR_MESSAGE,
    ) -> None:
        self.client = client
        self.webhook_id = webhook_id
        self.token = token
        self.fallback_content = fallback_content

    def __repr__(self) -> str:
        return f"WebhookSink(webhook_id={self.webhook_id}, token=***)"

    async def send(self, content: str) -> None:
        """
        Execute the webhook with the content, or the fallback content.

        Raises:
            DeliveryError: If the webhook could not be executed.
            FallbackContentError: If the fallback content is rejected.
        """
        async def attempt(text: str) -> None:
            await self.client.execute_webhook(self.webhook_id, self.token, text)

        await send_with_fallback(attempt, content, self.fallback_content, self.name)
