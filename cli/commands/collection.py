"""
Transaction commands: keygen, create-collection
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from mojiledger.core.errors import IntegrityError, InternalError, InvalidTransaction, StoreUnavailable
from mojiledger.core.records import decode_moji
from mojiledger.core.transaction import CREATE_COLLECTION
from mojiledger.journal import TransactionJournal
from mojiledger.keys import SigningKey, ensure_key, get_default_key_path
from mojiledger.processor import MojiHandler
from mojiledger.state import open_store

console = Console()


def keygen_command(
    key_path: str = typer.Option(
        str(get_default_key_path()),
        "--key",
        "-k",
        envvar="MOJI_KEY_PATH",
        help="Path to Ed25519 private key (PEM)",
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Generate a signing key if none exists and print its public key.

    Examples:
        moji keygen
        moji keygen --key ./alice.pem
    """
    path, created = ensure_key(key_path)
    public_key = SigningKey.load_from_file(path).public_key_hex()
    if json_output:
        print(json.dumps({"key_path": path, "public_key": public_key, "created": created}))
    else:
        verb = "Generated" if created else "Using existing"
        console.print(f"{verb} key [cyan]{path}[/cyan]")
        console.print(f"  Public key: [yellow]{public_key}[/yellow]")


def create_collection_command(
    key_path: str = typer.Option(
        str(get_default_key_path()),
        "--key",
        "-k",
        envvar="MOJI_KEY_PATH",
        help="Path to Ed25519 private key (PEM)",
    ),
    state_url: str = typer.Option(
        "/tmp/moji/state.json",
        "--state",
        "-s",
        envvar="MOJI_STATE_URL",
        help="State store URL (file path, file://, s3://bucket/prefix)",
    ),
    journal_path: Optional[str] = typer.Option(
        None,
        "--journal",
        "-j",
        envvar="MOJI_JOURNAL_PATH",
        help="Append committed transactions to this journal",
    ),
    nonce: str = typer.Option("", "--nonce", help="Nonce mixed into the signed header"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Sign and apply a CREATE_COLLECTION transaction.

    Exit codes: 0 committed, 1 rejected, 2 integrity or store failure.

    Examples:
        moji create-collection
        moji create-collection --state s3://ledger/state --journal ./journal.log
    """
    try:
        signer = SigningKey.load_from_file(key_path)
    except (OSError, ValueError) as e:
        _fail(json_output, f"Cannot load key {key_path}: {e}", code=2)

    txn = signer.sign_transaction(CREATE_COLLECTION, nonce=nonce)

    journal = None
    try:
        if journal_path:
            journal = TransactionJournal(journal_path)
            journal.ensure_writable()
        store = open_store(state_url)
        written = MojiHandler().apply(txn, store)
    except InvalidTransaction as e:
        _fail(json_output, str(e), code=1, kind=type(e).__name__)
    except (InternalError, IntegrityError, StoreUnavailable, ValueError) as e:
        _fail(json_output, str(e), code=2, kind=type(e).__name__)

    if journal is not None:
        try:
            journal.append(txn)
        except (IntegrityError, StoreUnavailable) as e:
            _fail(
                json_output,
                f"Collection committed to state but not journaled: {e}",
                code=2,
                kind=type(e).__name__,
            )

    collection_addr, moji_addrs = written[0], written[1:]
    dnas = [decode_moji(store.get(a)).dna for a in moji_addrs]

    if json_output:
        print(
            json.dumps(
                {
                    "committed": True,
                    "public_key": txn.identity_hex,
                    "signature": txn.signature_hex,
                    "collection": collection_addr,
                    "moji": [{"address": a, "dna": d} for a, d in zip(moji_addrs, dnas)],
                },
                indent=2,
            )
        )
        return

    console.print(f"[green]✓ Collection created[/green] [cyan]{collection_addr}[/cyan]")
    table = Table(title="Moji")
    table.add_column("#", style="cyan", justify="right")
    table.add_column("DNA", style="green")
    table.add_column("Address", style="dim")
    for idx, (addr, dna) in enumerate(zip(moji_addrs, dnas)):
        table.add_row(str(idx), dna, addr)
    console.print(table)


def _fail(json_output: bool, message: str, code: int, kind: str = "Error") -> None:
    if json_output:
        print(json.dumps({"committed": False, "error": kind, "message": message}))
    else:
        console.print(f"[red]{kind}:[/red] {message}")
    raise typer.Exit(code)
