"""Tests for the Reporter's configuration and dispatch."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from error_relay import DEFAULT_ERROR_MESSAGE, Reporter
from error_relay.core.exceptions import DeliveryError, FallbackContentError


def run(coro):
    return asyncio.run(coro)


class TestReporterConfiguration:
    """Tests for the setters."""

    def test_new_reporter_has_no_sinks(self) -> None:
        """A fresh reporter only prints to stderr."""
        reporter = Reporter()
        assert reporter.channel_target is None
        assert reporter.webhook_target is None
        assert reporter.file_target is None
        assert reporter.configured_sinks == []
        assert reporter.fallback_content == DEFAULT_ERROR_MESSAGE

    def test_setters_chain(self, chat_client, temp_dir: Path) -> None:
        """Setters return the reporter itself."""
        reporter = Reporter()
        result = (
            reporter.set_channel_sink(chat_client, 10)
            .set_webhook_sink(chat_client, 20, "secret")
            .set_file_sink(temp_dir / "errors.log")
        )
        assert result is reporter
        assert reporter.configured_sinks == ["channel", "webhook", "file"]
        assert reporter.channel_target.channel_id == 10
        assert reporter.webhook_target.webhook_id == 20
        assert reporter.webhook_target.token == "secret"

    def test_second_file_sink_replaces_first(self, chat_client, temp_dir: Path) -> None:
        """Only the last file path is kept; other sinks are untouched."""
        reporter = Reporter().set_channel_sink(chat_client, 10)
        reporter.set_file_sink(temp_dir / "a.log").set_file_sink(temp_dir / "b.log")

        assert reporter.file_target == temp_dir / "b.log"
        assert reporter.channel_target.channel_id == 10

    def test_setters_do_not_validate(self, chat_client) -> None:
        """Bad paths and ids are accepted until dispatch."""
        reporter = Reporter().set_file_sink("/nonexistent/dir/errors.log")
        reporter.set_channel_sink(chat_client, -1)
        assert reporter.file_target == Path("/nonexistent/dir/errors.log")

    def test_clear_sinks(self, chat_client, temp_dir: Path) -> None:
        """Cleared sinks are no longer dispatched to."""
        reporter = (
            Reporter()
            .set_channel_sink(chat_client, 10)
            .set_webhook_sink(chat_client, 20, "secret")
            .set_file_sink(temp_dir / "errors.log")
        )
        reporter.clear_channel_sink().clear_webhook_sink().clear_file_sink()
        assert reporter.configured_sinks == []

    def test_webhook_token_not_in_repr(self, chat_client) -> None:
        """Tokens should not leak through repr."""
        reporter = Reporter().set_webhook_sink(chat_client, 20, "supersecret")
        assert "supersecret" not in repr(reporter.webhook_target)

    def test_invalid_fallback_content_is_fatal(self) -> None:
        """Fallback content that can never be sent is rejected immediately."""
        with pytest.raises(FallbackContentError):
            Reporter().set_fallback_content("")
        with pytest.raises(FallbackContentError):
            Reporter().set_fallback_content("x" * 2001)

    def test_custom_fallback_content(self) -> None:
        """Valid fallback content is stored."""
        reporter = Reporter().set_fallback_content("Something broke")
        assert reporter.fallback_content == "Something broke"


class TestReportWithoutSinks:
    """Tests for the stderr-only path."""

    def test_report_prints_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The error is printed after two newlines."""
        run(Reporter().report(ValueError("boom")))
        captured = capsys.readouterr()
        assert captured.err == "\n\nboom\n"
        assert captured.out == ""

    def test_report_sync_prints_to_stderr(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The sync variant prints the same text."""
        Reporter().report_sync("plain string error")
        assert capsys.readouterr().err == "\n\nplain string error\n"

    def test_report_accepts_any_describable(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Anything with a str() can be reported."""

        class Custom:
            def __str__(self) -> str:
                return "custom description"

        run(Reporter().report(Custom()))
        assert capsys.readouterr().err == "\n\ncustom description\n"


class TestFileSink:
    """Tests for reporting to a file."""

    def test_disk_full_scenario(self, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The file and stderr both receive the report."""
        path = temp_dir / "errs.log"
        run(Reporter().set_file_sink(path).report("disk full"))

        assert path.read_text(encoding="utf-8") == "\n\ndisk full"
        assert capsys.readouterr().err == "\n\ndisk full\n"

    def test_file_is_appended(self, temp_dir: Path) -> None:
        """Reports accumulate in the file."""
        path = temp_dir / "errs.log"
        reporter = Reporter().set_file_sink(path)
        reporter.report_sync("first")
        reporter.report_sync("second")

        assert path.read_text(encoding="utf-8") == "\n\nfirst\n\nsecond"

    def test_unwritable_file_appends_diagnostic(
        self, temp_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """A file failure ends up in stderr and is not raised."""
        path = temp_dir / "missing" / "errs.log"
        Reporter().set_file_sink(path).report_sync("disk full")

        err = capsys.readouterr().err
        assert err.startswith("\n\ndisk full\n\nFailed to append to file: ")
        assert not path.exists()

    def test_directory_as_file_appends_diagnostic(
        self, temp_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Opening a directory fails like any other I/O error."""
        run(Reporter().set_file_sink(temp_dir).report("oops"))
        assert "Failed to append to file: " in capsys.readouterr().err

    def test_report_sync_skips_network_sinks(
        self, chat_client, temp_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The sync variant never touches the client."""
        path = temp_dir / "errs.log"
        reporter = (
            Reporter()
            .set_channel_sink(chat_client, 10)
            .set_webhook_sink(chat_client, 20, "secret")
            .set_file_sink(path)
        )
        reporter.report_sync("sync only")

        assert chat_client.attempts == []
        assert path.read_text(encoding="utf-8") == "\n\nsync only"
        assert capsys.readouterr().err == "\n\nsync only\n"

    def test_undecodable_path_in_message(self, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """Surrogate-escaped bytes reach the file as-is and stderr escaped."""
        name = b"caf\xe9.log".decode("utf-8", "surrogateescape")
        path = temp_dir / "errs.log"
        Reporter().set_file_sink(path).report_sync(f"cannot read {name}")

        assert path.read_bytes() == b"\n\ncannot read caf\xe9.log"
        assert capsys.readouterr().err == "\n\ncannot read caf\\udce9.log\n"

    def test_undecodable_path_in_async_report(self, temp_dir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        """The async report does not raise on surrogates either."""
        name = b"\xff.cfg".decode("utf-8", "surrogateescape")
        path = temp_dir / "errs.log"
        run(Reporter().set_file_sink(path).report(f"bad config {name}"))

        assert path.read_bytes() == b"\n\nbad config \xff.cfg"
        assert "Failed to append to file" not in capsys.readouterr().err


class TestNetworkSinks:
    """Tests for the channel and webhook sinks."""

    def test_channel_and_webhook_both_fire(self, chat_client) -> None:
        """Sinks are not fallbacks for each other."""
        reporter = Reporter().set_channel_sink(chat_client, 10).set_webhook_sink(chat_client, 20, "tok")
        run(reporter.report("boom"))

        assert chat_client.messages == [(10, "\n\nboom")]
        assert chat_client.webhooks == [(20, "tok", "\n\nboom")]
        assert [sink for sink, _ in chat_client.attempts] == ["channel", "webhook"]

    def test_long_message_falls_back(self, chat_client, capsys: pytest.CaptureFixture[str]) -> None:
        """Over-length content is replaced by the fallback content, without a diagnostic."""
        description = "x" * 5000
        reporter = Reporter().set_channel_sink(chat_client, 10).set_webhook_sink(chat_client, 20, "tok")
        run(reporter.report(description))

        assert chat_client.messages == [(10, DEFAULT_ERROR_MESSAGE)]
        assert chat_client.webhooks == [(20, "tok", DEFAULT_ERROR_MESSAGE)]
        assert chat_client.attempts == [
            ("channel", "\n\n" + description),
            ("channel", DEFAULT_ERROR_MESSAGE),
            ("webhook", "\n\n" + description),
            ("webhook", DEFAULT_ERROR_MESSAGE),
        ]
        assert capsys.readouterr().err == "\n\n" + description + "\n"

    def test_custom_fallback_is_used(self, chat_client) -> None:
        """The configured fallback content replaces the default."""
        reporter = Reporter().set_fallback_content("see logs").set_channel_sink(chat_client, 10)
        run(reporter.report("y" * 3000))
        assert chat_client.messages == [(10, "see logs")]

    def test_channel_failure_reaches_webhook(self, chat_client, capsys: pytest.CaptureFixture[str]) -> None:
        """The webhook still fires and carries the channel's diagnostic."""
        chat_client.channel_error = DeliveryError("403 Forbidden", status=403)
        reporter = Reporter().set_channel_sink(chat_client, 10).set_webhook_sink(chat_client, 20, "tok")
        run(reporter.report("boom"))

        expected = "\n\nboom\n\nFailed to create message: [DELIVERY_FAILED] 403 Forbidden"
        assert chat_client.webhooks == [(20, "tok", expected)]
        assert capsys.readouterr().err == expected + "\n"

    def test_webhook_failure_appends_diagnostic(self, chat_client, capsys: pytest.CaptureFixture[str]) -> None:
        """A webhook failure is folded into stderr output."""
        chat_client.webhook_error = DeliveryError("connection reset")
        run(Reporter().set_webhook_sink(chat_client, 20, "tok").report("boom"))

        assert capsys.readouterr().err == (
            "\n\nboom\n\nFailed to execute webhook: [DELIVERY_FAILED] connection reset\n"
        )

    def test_unexpected_channel_exception_is_absorbed(
        self, chat_client, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Errors other than DeliveryError still become diagnostics."""
        chat_client.channel_error = ConnectionResetError("peer reset")
        reporter = Reporter().set_channel_sink(chat_client, 10).set_webhook_sink(chat_client, 20, "tok")
        run(reporter.report("boom"))

        expected = "\n\nboom\n\nFailed to create message: peer reset"
        assert chat_client.webhooks == [(20, "tok", expected)]
        assert capsys.readouterr().err == expected + "\n"

    def test_unexpected_webhook_exception_is_absorbed(
        self, chat_client, temp_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """The file sink still runs after a webhook raises an arbitrary error."""
        chat_client.webhook_error = RuntimeError("session closed")
        path = temp_dir / "errs.log"
        run(Reporter().set_webhook_sink(chat_client, 20, "tok").set_file_sink(path).report("boom"))

        expected = "\n\nboom\n\nFailed to execute webhook: session closed"
        assert path.read_text(encoding="utf-8") == expected
        assert capsys.readouterr().err == expected + "\n"

    def test_failures_ordering_across_all_sinks(
        self, chat_client, temp_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Earlier diagnostics reach later sinks; the file's never reach the network sinks."""
        chat_client.channel_error = DeliveryError("channel down")
        chat_client.webhook_error = DeliveryError("webhook down")
        path = temp_dir / "missing" / "errs.log"
        reporter = (
            Reporter()
            .set_channel_sink(chat_client, 10)
            .set_webhook_sink(chat_client, 20, "tok")
            .set_file_sink(path)
        )
        run(reporter.report("boom"))

        channel_content = chat_client.attempts[0][1]
        webhook_content = chat_client.attempts[1][1]
        assert channel_content == "\n\nboom"
        assert "Failed to create message" in webhook_content
        assert "Failed to append to file" not in webhook_content

        err = capsys.readouterr().err
        assert err.index("Failed to create message") < err.index("Failed to execute webhook")
        assert err.index("Failed to execute webhook") < err.index("Failed to append to file")

    def test_channel_failure_written_to_file(self, chat_client, temp_dir: Path) -> None:
        """The file receives the buffer extended by the channel failure."""
        chat_client.channel_error = DeliveryError("rate limited", status=429)
        path = temp_dir / "errs.log"
        run(Reporter().set_channel_sink(chat_client, 10).set_file_sink(path).report("boom"))

        assert path.read_text(encoding="utf-8") == (
            "\n\nboom\n\nFailed to create message: [DELIVERY_FAILED] rate limited"
        )

    def test_rejected_fallback_is_fatal(self, chat_client) -> None:
        """A transport rejecting the fallback content aborts the report."""
        chat_client.reject_all = True
        reporter = Reporter().set_channel_sink(chat_client, 10)
        with pytest.raises(FallbackContentError):
            run(reporter.report("boom"))

    def test_concurrent_reports_do_not_share_buffers(self, chat_client) -> None:
        """Each report owns its own message."""
        reporter = Reporter().set_channel_sink(chat_client, 10)

        async def both() -> None:
            await asyncio.gather(reporter.report("one"), reporter.report("two"))

        run(both())
        assert sorted(content for _, content in chat_client.messages) == ["\n\none", "\n\ntwo"]
