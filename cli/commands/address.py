"""
Address commands: collection, moji
"""

import binascii
import json
from typing import Optional

import typer
from rich.console import Console

from mojiledger.core.addressing import collection_address, moji_address, moji_prefix
from mojiledger.core.records import is_valid_dna

app = typer.Typer()
console = Console()


def _public_key(value: str) -> bytes:
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, ValueError):
        console.print(f"[red]Error: public key is not valid hex:[/red] {value}")
        raise typer.Exit(2)


@app.command("collection")
def collection_command(
    public_key: str = typer.Argument(..., help="Hex public key"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Derive the collection address of a public key.

    Examples:
        moji address collection 3b6a27bc...
    """
    address = collection_address(_public_key(public_key))
    if json_output:
        print(json.dumps({"public_key": public_key, "collection": address}))
    else:
        console.print(address)


@app.command("moji")
def moji_command(
    public_key: str = typer.Argument(..., help="Hex public key"),
    dna: Optional[str] = typer.Argument(None, help="Moji DNA (omit to print the owner prefix)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Derive a moji address, or the address prefix of all moji of an owner.

    Examples:
        moji address moji 3b6a27bc... 0f3c...
        moji address moji 3b6a27bc...
    """
    key = _public_key(public_key)
    if dna is None:
        result = {"public_key": public_key, "prefix": moji_prefix(key)}
    else:
        if not is_valid_dna(dna):
            console.print(f"[red]Error: invalid DNA:[/red] {dna}")
            raise typer.Exit(2)
        result = {"public_key": public_key, "dna": dna, "moji": moji_address(key, dna)}

    if json_output:
        print(json.dumps(result))
    else:
        console.print(result.get("moji") or result["prefix"])
