"""Scan CLI command entrypoint."""

import logging
from pathlib import Path

import httpx
import typer
import yaml

from clawscan.modules.pscan.models import HttpMessage
from clawscan.traffic import ProxyStore

from .deps import cli_module
from .shared import app, configure_logging, console, parse_threshold

logger = logging.getLogger(__name__)


def entries_to_messages(store: ProxyStore) -> list[HttpMessage]:
    """Convert stored entries, skipping ones httpx cannot represent."""
    messages: list[HttpMessage] = []
    for entry in store.entries:
        try:
            messages.append(entry.to_message())
        except (httpx.InvalidURL, ValueError) as exc:
            logger.warning("Skipping entry %d (%s): %s", entry.id, entry.url, exc)
    return messages


@app.command()
def scan(
    traffic: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="Captured traffic: a .har file or a JSON traffic export",
    ),
    threshold: str | None = typer.Option(
        None,
        "--threshold",
        "-t",
        help="Default alert threshold: low, medium, high",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Scan policy YAML file (per-detector thresholds, disabled detectors)",
    ),
    rule: list[int] | None = typer.Option(
        None,
        "--rule",
        "-r",
        help="Only run the detector with this plugin id (repeatable)",
    ),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Messages scanned in parallel"),
    as_json: bool = typer.Option(False, "--json", help="Print alerts as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run the passive detectors over captured traffic."""
    configure_logging(verbose)
    cli = cli_module()
    override = parse_threshold(threshold)

    try:
        store = cli.load_traffic(traffic)
    except (OSError, ValueError) as exc:
        console.print(f"[red]Could not load traffic from {traffic}: {exc}[/red]")
        raise typer.Exit(1) from exc

    try:
        policy = cli.load_scan_policy(config_path)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        console.print(f"[red]Invalid scan policy: {exc}[/red]")
        raise typer.Exit(2) from exc
    if override is not None:
        policy.default_threshold = override

    registry = cli.create_default_registry()
    registry.configure(policy)
    try:
        scanner = cli.PassiveScanner(registry, plugin_ids=rule or None)
    except ValueError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        raise typer.Exit(2) from exc

    messages = entries_to_messages(store)
    if not as_json:
        console.print(
            f"[blue]Scanning {len(messages)} message(s) with "
            f"{len(scanner.active_detectors)} detector(s)...[/blue]"
        )

    outcomes = scanner.scan_messages(messages, workers=workers)
    alerts = [alert for outcome in outcomes for alert in outcome.alerts]
    errors = [error for outcome in outcomes for error in outcome.errors]

    if as_json:
        typer.echo(cli.alerts_to_json(alerts))
    else:
        cli.print_alerts_summary(alerts, console=console)
    if errors:
        console.print(
            f"[yellow]{len(errors)} detector failure(s) were skipped; "
            "run with --verbose for details.[/yellow]"
        )
