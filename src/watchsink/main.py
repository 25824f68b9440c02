"""Main CLI entry point for Watchsink.

This module provides the Typer application used to check a webhook sink
outside the watch pipeline.

Usage:
    watchsink test --url https://hooks.example.com/kubewatch
    watchsink --config watchsink.toml show-config
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from watchsink.config import WatchsinkConfig, load_config
from watchsink.errors import ConfigError
from watchsink.event import DomainEvent
from watchsink.logging import setup_logging
from watchsink.webhook.dispatcher import WebhookDispatcher
from watchsink.webhook.resolver import SinkDescriptor, resolve_sink

app = typer.Typer(
    name="watchsink",
    help="Watchsink: webhook notifications for watched cluster events",
    no_args_is_help=True,
)

console = Console()

# Global config holder, set by the callback
_config: WatchsinkConfig | None = None


def get_config() -> WatchsinkConfig:
    """Get the configuration loaded by the CLI callback.

    Raises:
        RuntimeError: If the callback has not run
    """
    if _config is None:
        raise RuntimeError("Configuration not loaded. Invoke through the CLI app.")
    return _config


def _resolve(url: str | None) -> SinkDescriptor:
    """Resolve the sink, letting a --url flag override config and env."""
    webhook = get_config().handler.webhook
    if url:
        webhook = webhook.model_copy(update={"url": url})
    try:
        return resolve_sink(webhook)
    except ConfigError as e:
        console.print(f"[red]Invalid webhook configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


@app.command("test")
def send_test(
    url: Annotated[
        Optional[str],
        typer.Option("--url", "-u", help="Webhook URL (overrides config and KW_WEBHOOK_URL)"),
    ] = None,
    kind: Annotated[str, typer.Option("--kind", help="Event kind")] = "Pod",
    name: Annotated[str, typer.Option("--name", help="Resource name")] = "watchsink-test",
    namespace: Annotated[str, typer.Option("--namespace", help="Resource namespace")] = "default",
    reason: Annotated[str, typer.Option("--reason", help="Event reason")] = "Created",
) -> None:
    """Send a test notification to the configured webhook.

    Args:
        url: Optional URL overriding the configured one
        kind: Kind of the synthetic event
        name: Name of the synthetic event
        namespace: Namespace of the synthetic event
        reason: Reason of the synthetic event
    """
    descriptor = _resolve(url)
    event = DomainEvent(kind=kind, name=name, namespace=namespace, reason=reason)

    with WebhookDispatcher(descriptor) as dispatcher:
        result = dispatcher.handle(event)

    if not result.ok:
        console.print(f"[red]Notification failed:[/red] {escape(str(result.error))}")
        raise typer.Exit(code=1)

    console.print(
        Panel(
            f"[green]Test notification sent![/green]\n\n"
            f"[bold]URL:[/bold] {result.url}\n"
            f"[bold]Status:[/bold] {result.status_code}\n"
            f"[bold]Signed:[/bold] {'yes' if descriptor.signing_enabled else 'no'}",
            title="Webhook Test",
            border_style="green",
        )
    )


@app.command("show-config")
def show_config(
    url: Annotated[
        Optional[str],
        typer.Option("--url", "-u", help="Webhook URL (overrides config and KW_WEBHOOK_URL)"),
    ] = None,
) -> None:
    """Show the resolved webhook sink without revealing the HMAC key."""
    descriptor = _resolve(url)
    timeout = (
        f"{descriptor.timeout_seconds}s" if descriptor.timeout_seconds is not None else "none"
    )

    console.print(
        Panel(
            f"[bold]URL:[/bold] {descriptor.url}\n"
            f"[bold]Signing:[/bold] {'enabled' if descriptor.signing_enabled else 'disabled'}\n"
            f"[bold]Signature header:[/bold] {descriptor.hmac_signature_header}\n"
            f"[bold]Timeout:[/bold] {timeout}",
            title="Webhook Sink",
            border_style="cyan",
        )
    )


@app.callback()
def main_callback(
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file (TOML format)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Load configuration and configure logging.

    Args:
        config_path: Optional path to TOML configuration file
        verbose: Enable debug-level console logging
    """
    global _config

    try:
        config = load_config(config_path)
    except ConfigError as e:
        console.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    if verbose:
        logging_config = config.logging.model_copy(update={"level": "DEBUG", "format": "console"})
        config = config.model_copy(update={"logging": logging_config})

    setup_logging(config.logging)
    _config = config

    if verbose:
        console.print("[dim]Debug logging enabled[/dim]")


if __name__ == "__main__":
    app()
