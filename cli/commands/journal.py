"""
Journal commands: replay, verify
"""

import json
import os
from typing import Optional

import typer
from rich.console import Console

from mojiledger.core.errors import IntegrityError, InternalError, InvalidTransaction
from mojiledger.journal import TransactionJournal, replay, verify_chain
from mojiledger.processor import MojiHandler

app = typer.Typer()
console = Console()

JOURNAL_OPTION = typer.Option(
    "/tmp/moji/journal.log",
    "--journal",
    "-j",
    envvar="MOJI_JOURNAL_PATH",
    help="Path to transaction journal",
)


@app.command("replay")
def replay_command(
    journal_path: str = JOURNAL_OPTION,
    until: Optional[int] = typer.Option(None, "--until", "-u", help="Replay until sequence number"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Rebuild state from the journal and print its hash.

    Examples:
        moji journal replay
        moji journal replay --until 10 --json
    """
    if not os.path.exists(journal_path):
        _error(json_output, f"Journal not found: {journal_path}")

    try:
        result = replay(TransactionJournal(journal_path), MojiHandler(), to_seq=until)
    except (IntegrityError, InvalidTransaction, InternalError) as e:
        _error(json_output, f"{type(e).__name__}: {e}")

    if json_output:
        print(
            json.dumps(
                {
                    "success": True,
                    "transactions_replayed": result.applied,
                    "entries": len(result.store.state),
                    "state_hash": result.state_hash,
                },
                indent=2,
            )
        )
    else:
        console.print(f"[green]✓ Replayed {result.applied} transactions[/green]")
        console.print(f"  Entries: [cyan]{len(result.store.state)}[/cyan]")
        console.print(f"  State hash: [yellow]{result.state_hash}[/yellow]")


@app.command("verify")
def verify_command(
    journal_path: str = JOURNAL_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """Verify the journal hash chain."""
    if not os.path.exists(journal_path):
        _error(json_output, f"Journal not found: {journal_path}")

    result = verify_chain(journal_path)
    if json_output:
        print(json.dumps(result.__dict__, sort_keys=True, indent=2))
    elif result.valid:
        console.print(f"[green]✓ Hash chain valid[/green] ({result.checked} entries)")
    else:
        console.print(f"[red]✗ {result.error} at seq {result.mismatch_seq}[/red]")

    if not result.valid:
        raise typer.Exit(2)


def _error(json_output: bool, message: str) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)
