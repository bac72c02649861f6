"""ClawScan CLI - passive security scanning of captured HTTP traffic."""

from clawscan.cli_commands.shared import app, console
from clawscan.config import load_scan_policy
from clawscan.modules.pscan import (
    PassiveScanner,
    alerts_to_json,
    create_default_registry,
    print_alerts_summary,
)
from clawscan.traffic import load_traffic


@app.command()
def version() -> None:
    """Show the installed ClawScan version."""
    from importlib.metadata import PackageNotFoundError, version as pkg_version

    try:
        current_version = pkg_version("clawscan")
    except PackageNotFoundError:
        current_version = "0.0.0+unknown"

    console.print(f"ClawScan {current_version}")


# Register command modules on the shared app.
from clawscan.cli_commands import rules_command as _rules_command  # noqa: E402,F401
from clawscan.cli_commands import scan_command as _scan_command  # noqa: E402,F401

__all__ = [
    "PassiveScanner",
    "alerts_to_json",
    "app",
    "create_default_registry",
    "load_scan_policy",
    "load_traffic",
    "main",
    "print_alerts_summary",
]


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
