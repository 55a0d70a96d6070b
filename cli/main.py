#!/usr/bin/env python3
"""
Moji CLI

Main entrypoint for the moji command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import address, collection, journal, state
from mojiledger.logging_config import setup_logging
from mojiledger.metrics import start_metrics_server

app = typer.Typer(
    name="moji",
    help="Cryptomoji ledger CLI",
    add_completion=False,
)

console = Console()

app.add_typer(address.app, name="address", help="Address derivation")
app.add_typer(state.app, name="state", help="Ledger state inspection")
app.add_typer(journal.app, name="journal", help="Transaction journal operations")

app.command("keygen")(collection.keygen_command)
app.command("create-collection")(collection.create_collection_command)
app.command("verify")(state.verify_command)


@app.callback()
def configure(
    log_level: str = typer.Option("WARNING", "--log-level", envvar="MOJI_LOG_LEVEL", help="Log level"),
    log_format: str = typer.Option("text", "--log-format", envvar="MOJI_LOG_FORMAT", help="json or text"),
    metrics_enabled: bool = typer.Option(False, "--metrics", envvar="MOJI_METRICS_ENABLED", help="Serve /metrics"),
    metrics_port: int = typer.Option(8080, "--metrics-port", envvar="MOJI_METRICS_PORT", help="Metrics port"),
):
    """Configure logging and metrics for every command."""
    setup_logging(level=log_level, log_format=log_format)
    start_metrics_server(enabled=metrics_enabled, port=metrics_port)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from mojiledger import __version__ as ledger_version
    from mojiledger.core.addressing import FAMILY_NAME, NAMESPACE

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Moji CLI[/bold]", f"v{__version__}")
    table.add_row("Ledger", f"v{ledger_version}")
    table.add_row("Family", FAMILY_NAME)
    table.add_row("Namespace", NAMESPACE)

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
