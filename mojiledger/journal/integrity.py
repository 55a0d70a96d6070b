"""
Hash chain integrity for the transaction journal.

Each record carries the hash of the previous record, so editing, removing
or reordering any committed transaction breaks the chain.
"""

import hashlib
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..core.canonical import canonical_json_bytes
from ..core.transaction import Transaction

ZERO_HASH = "0" * 64


@dataclass(frozen=True)
class JournalEntry:
    """
    One committed transaction.

    Fields:
        seq: Position in the journal (assigned on append)
        transaction: The applied transaction
    """
    seq: int
    transaction: Transaction

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": self.seq, "transaction": self.transaction.to_dict()}

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "JournalEntry":
        return JournalEntry(seq=data["seq"], transaction=Transaction.from_dict(data["transaction"]))


def hash_entry(prev_hash: str, entry: JournalEntry) -> str:
    """
    Compute hash of entry chained to previous hash.

    Hash input: prev_hash + canonical_json(entry)
    """
    b = prev_hash.encode("utf-8") + canonical_json_bytes(entry.to_dict())
    return hashlib.sha256(b).hexdigest()


def chain_record(prev_hash: str, entry: JournalEntry) -> Dict[str, Any]:
    """
    Create hash chain record for storage.

    Record includes prev_hash, entry_hash and the entry itself.
    """
    return {
        "prev_hash": prev_hash,
        "entry_hash": hash_entry(prev_hash, entry),
        "entry": entry.to_dict(),
    }


@dataclass
class ChainVerificationResult:
    valid: bool
    checked: int = 0
    error: Optional[str] = None
    mismatch_seq: Optional[int] = None
    expected: Optional[str] = None
    actual: Optional[str] = None
