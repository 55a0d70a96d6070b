"""
State commands: show, verify
"""

import binascii
import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from mojiledger.core.addressing import COLLECTION, MOJI, NAMESPACE, PREFIX_LENGTH
from mojiledger.core.errors import StoreUnavailable
from mojiledger.state import open_store, state_hash
from mojiledger.verify import verify_collection

app = typer.Typer()
console = Console()

KIND_NAMES = {COLLECTION: "collection", MOJI: "moji"}

STATE_OPTION = typer.Option(
    "/tmp/moji/state.json",
    "--state",
    "-s",
    envvar="MOJI_STATE_URL",
    help="State store URL (file path, file://, s3://bucket/prefix)",
)


@app.command("show")
def show(
    state_url: str = STATE_OPTION,
    prefix: str = typer.Option(NAMESPACE, "--prefix", "-p", help="Only addresses with this prefix"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List ledger state entries.

    Examples:
        moji state show
        moji state show --prefix 5f4d7601 --json
    """
    try:
        entries = open_store(state_url).items(prefix)
    except (StoreUnavailable, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if json_output:
        records = {a: json.loads(v.decode("utf-8")) for a, v in sorted(entries.items())}
        print(json.dumps({"entries": records, "count": len(records), "state_hash": state_hash(entries)}, indent=2))
        return

    if not entries:
        console.print("[yellow]No state entries[/yellow]")
        return

    table = Table(title=f"State: {state_url}")
    table.add_column("Address", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Record", style="dim")
    for address in sorted(entries):
        kind = KIND_NAMES.get(address[len(NAMESPACE):PREFIX_LENGTH], "unknown")
        table.add_row(address, kind, entries[address].decode("utf-8"))
    console.print(table)
    console.print(f"\n[bold]Total entries:[/bold] {len(entries)}")


def verify_command(
    public_key: str = typer.Argument(..., help="Hex public key"),
    state_url: str = STATE_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Check a collection and its moji.

    Exit code 0 if valid, 2 otherwise.
    """
    try:
        identity = binascii.unhexlify(public_key)
        result = verify_collection(open_store(state_url), identity)
    except (binascii.Error, StoreUnavailable, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if json_output:
        print(json.dumps(result.__dict__, sort_keys=True, indent=2))
    elif result.valid:
        console.print(f"[green]✓ Collection valid[/green] ({result.checked} moji checked)")
    else:
        _print_failure(result.error, result.address, result.expected, result.actual)

    if not result.valid:
        raise typer.Exit(2)


def _print_failure(error: str, address: Optional[str], expected: Optional[str], actual: Optional[str]) -> None:
    console.print(f"[red]✗ {error}[/red]")
    if address:
        console.print(f"  Address: {address}")
    if expected is not None:
        console.print(f"  Expected: {expected}")
        console.print(f"  Actual: {actual}")
