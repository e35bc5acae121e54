"""
Chat-service HTTP client.

A deliberately small client for the two calls the reporter needs:
creating a message in a channel and executing a webhook. Content is
validated locally before any request is sent, so content rejection
and delivery failure are always distinct exception types.
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Optional

import aiohttp

from error_relay.config.logging_config import get_logger
from error_relay.core.exceptions import DeliveryError
from error_relay.utils.sanitizers import sanitize_log_message, truncate
from error_relay.utils.validators import MESSAGE_CONTENT_LIMIT, validate_content


logger = get_logger(__name__)

DEFAULT_API_BASE = "https://discord.com/api/v10"


class DiscordClient:
    """
    Minimal REST client for the chat service.

    Usage:
        async with DiscordClient(token="...") as client:
            await client.create_message(1234, "hello")

    When no session is injected and the client is not used as a context
    manager, each request opens and closes its own session.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        api_base: str = DEFAULT_API_BASE,
        timeout: int = 10,
        session: Optional[aiohttp.ClientSession] = None,
        content_limit: int = MESSAGE_CONTENT_LIMIT,
    ) -> None:
        """
        Initialize the client.

        Args:
            token: Bot token, required only for creating messages.
            api_base: Base URL of the REST API.
            timeout: Total request timeout in seconds.
            session: Externally owned session to reuse.
            content_limit: Maximum content length accepted.
        """
        self.token = token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.content_limit = content_limit
        self._session = session
        self._owns_session = False

    async def __aenter__(self) -> "DiscordClient":
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._owns_session = True
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the session if this client opened it."""
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None
            self._owns_session = False

    async def create_message(self, channel_id: int, content: str) -> Dict[str, Any]:
        """
        Create a message in a channel.

        Args:
            channel_id: Target channel, which may be a DM channel.
            content: Message content.

        Returns:
            The created message object.

        Raises:
            ContentValidationError: If the content is rejected locally.
            DeliveryError: If the request fails.
        """
        validate_content(content, self.content_limit)

        if not self.token:
            raise DeliveryError("Creating a message requires a bot token")

        result = await self._request(
            f"/channels/{channel_id}/messages",
            {"content": content},
            headers={"Authorization": f"Bot {self.token}"},
        )
        return result or {}

    async def execute_webhook(self, webhook_id: int, token: str, content: str) -> None:
        """
        Execute a webhook.

        Raises:
            ContentValidationError: If the content is rejected locally.
            DeliveryError: If the request fails.
        """
        validate_content(content, self.content_limit)

        await self._request(f"/webhooks/{webhook_id}/{token}", {"content": content})

    async def _request(
        self,
        path: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]] = None,
    ) -> Optional[Dict[str, Any]]:
        """POST a JSON payload and return the decoded response, if any."""
        url = f"{self.api_base}{path}"
        safe_url = sanitize_log_message(url)

        if self._session is not None:
            return await self._post(self._session, url, safe_url, payload, headers)

        async with aiohttp.ClientSession() as session:
            return await self._post(session, url, safe_url, payload, headers)

    async def _post(
        self,
        session: aiohttp.ClientSession,
        url: str,
        safe_url: str,
        payload: Dict[str, Any],
        headers: Optional[Dict[str, str]],
    ) -> Optional[Dict[str, Any]]:
        try:
            async with session.post(
                url,
                json=payload,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status >= 300:
                    body = await response.text()
                    raise DeliveryError(
                        f"{response.status} {response.reason}: {truncate(body, 300)}",
                        status=response.status,
                    )

                logger.debug(f"POST {safe_url} returned {response.status}")

                if response.status == 204:
                    return None
                try:
                    return await response.json(content_type=None)
                except ValueError:
                    return None

        except asyncio.TimeoutError as e:
            raise DeliveryError(f"Request to {safe_url} timed out") from e
        except aiohttp.ClientError as e:
            raise DeliveryError(f"Request to {safe_url} failed: {sanitize_log_message(str(e))}") from e
