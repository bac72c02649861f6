"""Scanner output helpers."""

import json
from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .models import Alert, Risk


def alerts_to_json(alerts: Iterable[Alert], indent: int | None = 2) -> str:
    return json.dumps([alert.to_dict() for alert in alerts], indent=indent)


def print_alerts_summary(alerts: list[Alert], console: Console | None = None) -> None:
    """Print a summary of alerts grouped by risk."""
    console = console or Console()
    if not alerts:
        console.print("\n[green][+] No alerts raised.[/green]")
        return

    console.print("\n" + "=" * 60)
    console.print("PASSIVE SCAN RESULTS SUMMARY")
    console.print("=" * 60)

    by_risk: dict[Risk, list[Alert]] = {risk: [] for risk in sorted(Risk, reverse=True)}
    for alert in alerts:
        by_risk[alert.risk].append(alert)

    counts = " | ".join(f"{risk.label}: {len(scoped)}" for risk, scoped in by_risk.items())
    console.print(f"\nTotal: {len(alerts)} | {counts}")

    for risk, scoped in by_risk.items():
        if not scoped:
            continue

        table = Table(title=f"{risk.label.upper()} ({len(scoped)})", title_justify="left")
        table.add_column("Plugin", style="cyan", no_wrap=True)
        table.add_column("Alert", style="bold")
        table.add_column("Param")
        table.add_column("Evidence", overflow="fold")
        table.add_column("URL", style="dim", overflow="fold")
        for alert in scoped[:5]:
            table.add_row(
                alert.alert_ref or str(alert.plugin_id),
                escape(alert.name),
                escape(alert.param),
                escape(alert.evidence),
                escape(alert.uri),
            )
        console.print(table)
        if len(scoped) > 5:
            console.print(f"  ... and {len(scoped) - 5} more")

    console.print("=" * 60)
