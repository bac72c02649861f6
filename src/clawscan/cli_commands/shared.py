"""Shared CLI app objects and helpers."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from clawscan.modules.pscan.models import AlertThreshold

app = typer.Typer(
    name="clawscan",
    help="Passive security scanner for captured HTTP traffic",
    no_args_is_help=True,
)
console = Console()


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich when verbose output is requested."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def parse_threshold(value: str | None) -> AlertThreshold | None:
    """Validate a --threshold option, exiting with a readable error."""
    if value is None:
        return None
    try:
        return AlertThreshold.parse(value)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(2) from exc
