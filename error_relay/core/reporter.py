"""
Last-resort error reporter.

Fans an error's description out to the configured sinks and always
prints the final text to stderr. Sinks are independent: each one is
attempted whatever happened to the others, and every failure is
appended to the report so later sinks and stderr carry it.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional, Protocol, Union

from error_relay.config.logging_config import get_logger
from error_relay.core.exceptions import ConfigurationError, FallbackContentError
from error_relay.sinks.base import DEFAULT_ERROR_MESSAGE, ChatTransport
from error_relay.sinks.channel_sink import ChannelSink
from error_relay.sinks.file_sink import FileSink
from error_relay.sinks.webhook_sink import WebhookSink
from error_relay.utils.validators import validate_fallback_content

if TYPE_CHECKING:
    from error_relay.config.settings import Settings


logger = get_logger(__name__)


class Describable(Protocol):
    """Anything with a human-readable ``str()``, usually an exception."""

    def __str__(self) -> str:
        ...


@dataclass(frozen=True)
class ChannelTarget:
    """Channel to create a message in."""

    client: ChatTransport
    channel_id: int


@dataclass(frozen=True)
class WebhookTarget:
    """Webhook to execute."""

    client: ChatTransport
    webhook_id: int
    token: str

    def __repr__(self) -> str:
        return f"WebhookTarget(webhook_id={self.webhook_id}, token=***)"


class Reporter:
    """
    Reports errors to a channel, a webhook, a file and stderr.

    Configure it once with the setters, which return the reporter so
    calls can be chained:

        reporter = Reporter().set_channel_sink(client, 1234).set_file_sink("errors.log")
        await reporter.report(error)

    The sinks are not fallbacks for each other: with both a channel and
    a webhook set, a report creates a message *and* executes the webhook.
    """

    def __init__(self) -> None:
        self._channel: Optional[ChannelTarget] = None
        self._webhook: Optional[WebhookTarget] = None
        self._file: Optional[Path] = None
        self._fallback_content = DEFAULT_ERROR_MESSAGE

    @classmethod
    def from_settings(
        cls,
        settings: "Settings",
        client: Optional[ChatTransport] = None,
    ) -> "Reporter":
        """
        Build a reporter from settings.

        Args:
            settings: Loaded settings.
            client: Chat client for the channel and webhook sinks.

        Returns:
            Configured reporter.

        Raises:
            ConfigurationError: If a network sink is enabled without a client.
        """
        reporter = cls().set_fallback_content(settings.fallback_content)

        for section in (settings.channel, settings.webhook):
            if section.enabled and client is None:
                raise ConfigurationError(
                    "A chat client is required when channel or webhook sinks are enabled",
                    config_key=section.__class__.__name__,
                )

        if settings.channel.enabled and settings.channel.channel_id is not None:
            reporter.set_channel_sink(client, settings.channel.channel_id)
        if (
            settings.webhook.enabled
            and settings.webhook.webhook_id is not None
            and settings.webhook.token
        ):
            reporter.set_webhook_sink(client, settings.webhook.webhook_id, settings.webhook.token)
        if settings.file.enabled and settings.file.path:
            reporter.set_file_sink(settings.file.path)

        return reporter

    # ==================== Configuration ====================

    def set_channel_sink(self, client: ChatTransport, channel_id: int) -> "Reporter":
        """
        Create a message in the given channel on errors.

        The channel can also be a DM channel, such as the owner's.
        """
        self._channel = ChannelTarget(client, channel_id)
        return self

    def set_webhook_sink(self, client: ChatTransport, webhook_id: int, token: str) -> "Reporter":
        """Execute the given webhook on errors."""
        self._webhook = WebhookTarget(client, webhook_id, token)
        return self

    def set_file_sink(self, path: Union[str, Path]) -> "Reporter":
        """
        Append errors to the given file.

        The file is created on the first report if it doesn't exist.
        """
        self._file = Path(path)
        return self

    def set_fallback_content(self, content: str) -> "Reporter":
        """
        Set the content sent when a transport rejects the error message.

        Raises:
            FallbackContentError: If no transport would accept the content.
        """
        self._fallback_content = validate_fallback_content(content)
        return self

    def clear_channel_sink(self) -> "Reporter":
        self._channel = None
        return self

    def clear_webhook_sink(self) -> "Reporter":
        self._webhook = None
        return self

    def clear_file_sink(self) -> "Reporter":
        self._file = None
        return self

    @property
    def channel_target(self) -> Optional[ChannelTarget]:
        return self._channel

    @property
    def webhook_target(self) -> Optional[WebhookTarget]:
        return self._webhook

    @property
    def file_target(self) -> Optional[Path]:
        return self._file

    @property
    def fallback_content(self) -> str:
        return self._fallback_content

    @property
    def configured_sinks(self) -> List[str]:
        """Names of the configured sinks, in dispatch order."""
        names = []
        if self._channel is not None:
            names.append(ChannelSink.name)
        if self._webhook is not None:
            names.append(WebhookSink.name)
        if self._file is not None:
            names.append(FileSink.name)
        return names

    # ==================== Dispatch ====================

    async def report(self, error: Describable) -> None:
        """
        Report an error.

        Prefer ``report_sync`` if no channel or webhook is set.

        - Creates a message in the channel, if set, with the error
          message or the fallback content
        - Executes the webhook, if set, the same way
        - Appends the error message to the file, if set
        - Prints the error message to stderr

        Failures are appended to the error message instead of raised.

        Raises:
            FallbackContentError: If a transport rejects the fallback content.
        """
        message = f"\n\n{error}"

        message = await self._maybe_create_message(message)
        message = await self._maybe_execute_webhook(message)
        message = self._maybe_append_to_file(message)

        _print_to_stderr(message)

    def report_sync(self, error: Describable) -> None:
        """
        Report an error to the file and stderr only.

        The channel and webhook sinks are skipped, so this needs no
        event loop.
        """
        message = f"\n\n{error}"

        message = self._maybe_append_to_file(message)

        _print_to_stderr(message)

    async def _maybe_create_message(self, message: str) -> str:
        if self._channel is None:
            return message

        sink = ChannelSink(self._channel.client, self._channel.channel_id, self._fallback_content)
        try:
            await sink.send(message)
        except FallbackContentError:
            raise
        except Exception as e:
            logger.warning(
                f"Channel sink failed: {e}",
                extra={"sink": sink.name, "status": getattr(e, "status", None)},
            )
            message += f"\n\nFailed to {sink.failure_verb}: {e}"

        return message

    async def _maybe_execute_webhook(self, message: str) -> str:
        if self._webhook is None:
            return message

        sink = WebhookSink(
            self._webhook.client,
            self._webhook.webhook_id,
            self._webhook.token,
            self._fallback_content,
        )
        try:
            await sink.send(message)
        except FallbackContentError:
            raise
        except Exception as e:
            logger.warning(
                f"Webhook sink failed: {e}",
                extra={"sink": sink.name, "status": getattr(e, "status", None)},
            )
            message += f"\n\nFailed to {sink.failure_verb}: {e}"

        return message

    def _maybe_append_to_file(self, message: str) -> str:
        if self._file is None:
            return message

        sink = FileSink(self._file)
        try:
            sink.send(message)
        except OSError as e:
            logger.warning(f"File sink failed: {e}", extra={"sink": sink.name})
            message += f"\n\nFailed to {sink.failure_verb}: {e}"

        return message


def _print_to_stderr(message: str) -> None:
    """Print the report, escaping characters stderr cannot encode."""
    try:
        print(message, file=sys.stderr, flush=True)
    except UnicodeEncodeError:
        encoding = getattr(sys.stderr, "encoding", None) or "utf-8"
        escaped = message.encode(encoding, errors="backslashreplace").decode(encoding)
        print(escaped, file=sys.stderr, flush=True)
