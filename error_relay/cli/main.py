#!/usr/bin/env python3
"""
Main CLI entry point for error-relay.

Provides commands for:
- Reporting a message through the configured sinks
- Configuration validation
"""

from __future__ import annotations

import asyncio
from typing import Optional

import click
from pydantic import ValidationError

from error_relay import __version__
from error_relay.config.logging_config import setup_logging, get_logger
from error_relay.config.settings import Settings, find_config_file, get_settings
from error_relay.core.exceptions import ConfigurationError
from error_relay.core.reporter import Reporter
from error_relay.transport.discord_client import DiscordClient


logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option("-v", "--version", is_flag=True, help="Show version and exit")
@click.option("-c", "--config", type=click.Path(exists=True, dir_okay=False), help="Configuration file path")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, version: bool, config: Optional[str], debug: bool) -> None:
    """error-relay - send errors to chat, a file and stderr."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["debug"] = debug

    if version:
        click.echo(f"error-relay, version {__version__}")
        ctx.exit(0)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


def _make_client(settings: Settings) -> DiscordClient:
    return DiscordClient(
        token=settings.client.token,
        api_base=settings.client.api_base,
        timeout=settings.client.timeout,
    )


async def _report_async(settings: Settings, message: str) -> None:
    async with _make_client(settings) as client:
        reporter = Reporter.from_settings(settings, client)
        await reporter.report(message)


@cli.command()
@click.argument("message")
@click.option("--sync", "sync_only", is_flag=True, help="Only write to the file sink and stderr")
@click.pass_context
def report(ctx: click.Context, message: str, sync_only: bool) -> None:
    """Report MESSAGE through the configured sinks."""
    try:
        settings = get_settings(ctx.obj.get("config_path"))
    except (ConfigurationError, ValidationError) as e:
        click.echo(click.style(f"Failed to load configuration: {e}", fg="red"), err=True)
        ctx.exit(1)

    level = "DEBUG" if ctx.obj.get("debug") else settings.global_config.log_level
    setup_logging(
        level=level,
        log_file=settings.global_config.log_file,
        json_format=settings.global_config.json_logs,
    )

    logger.debug(f"Reporting with network sinks {'skipped' if sync_only else 'enabled'}")

    if sync_only or not settings.needs_client:
        # report_sync never touches the client, so no session is opened
        Reporter.from_settings(settings, _make_client(settings)).report_sync(message)
        return

    asyncio.run(_report_async(settings, message))


@cli.group()
def config() -> None:
    """Configuration management commands."""
    pass


@config.command("validate")
@click.option("-c", "--config", "config_file", type=click.Path(exists=True, dir_okay=False), help="Configuration file to validate")
@click.pass_context
def config_validate(ctx: click.Context, config_file: Optional[str]) -> None:
    """Validate configuration file."""
    config_path = config_file or ctx.obj.get("config_path") or find_config_file()

    if not config_path:
        click.echo("No configuration file found", err=True)
        ctx.exit(1)

    click.echo(f"Validating configuration: {config_path}")

    try:
        settings = Settings.from_yaml(config_path)
    except (ConfigurationError, ValidationError) as e:
        click.echo(click.style(f"Configuration validation failed: {e}", fg="red"), err=True)
        ctx.exit(1)

    click.echo(click.style("Configuration is valid", fg="green"))

    if ctx.obj.get("debug"):
        enabled = [
            name
            for name, section in (
                ("channel", settings.channel),
                ("webhook", settings.webhook),
                ("file", settings.file),
            )
            if section.enabled
        ]
        click.echo(f"  Sinks enabled: {', '.join(enabled) or 'none'}")
        click.echo(f"  Log level: {settings.global_config.log_level}")


def main() -> None:
    """Console script entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
