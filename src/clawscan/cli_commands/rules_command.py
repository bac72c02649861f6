"""Detector listing CLI commands."""

import typer
from rich.markup import escape
from rich.table import Table

from .deps import cli_module
from .shared import app, console


@app.command()
def rules() -> None:
    """List the registered passive detectors."""
    registry = cli_module().create_default_registry()

    table = Table(title="Passive Detectors")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="bold")
    table.add_column("Risk")
    table.add_column("Threshold")
    table.add_column("Tags", style="dim", overflow="fold")
    for detector in registry.detectors():
        table.add_row(
            str(detector.plugin_id),
            detector.name,
            detector.risk.label,
            detector.threshold.value,
            ", ".join(sorted(detector.alert_tags)),
        )
    console.print(table)


@app.command()
def examples(
    as_json: bool = typer.Option(False, "--json", help="Print example alerts as JSON"),
) -> None:
    """Show one example alert per alert variant of every detector."""
    cli = cli_module()
    alerts = cli.create_default_registry().example_alerts()
    if as_json:
        typer.echo(cli.alerts_to_json(alerts))
        return

    for alert in alerts:
        console.print(
            f"[cyan]{alert.alert_ref or alert.plugin_id}[/cyan] [bold]{escape(alert.name)}[/bold] "
            f"({alert.risk.label}/{alert.confidence.label})"
        )
        if alert.evidence:
            console.print(f"  Evidence: {escape(alert.evidence)}")
        if alert.param:
            console.print(f"  Param: {escape(alert.param)}")
        if alert.other_info:
            console.print(f"  [dim]{escape(alert.other_info)}[/dim]")
