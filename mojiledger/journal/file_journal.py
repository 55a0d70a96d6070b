"""
Append-only transaction journal (JSONL).

Each line is a hash chain record: {"prev_hash", "entry_hash", "entry"}.
"""

import json
import os
from typing import Iterator, Optional, Tuple

from ..core.canonical import canonical_json_str
from ..core.errors import IntegrityError, StoreUnavailable
from ..core.transaction import Transaction
from .integrity import ZERO_HASH, ChainVerificationResult, JournalEntry, chain_record, hash_entry

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


def _parse_record(line, lineno: int) -> Tuple[dict, JournalEntry]:
    """
    Decode one journal line.

    Raises:
        IntegrityError: If the line is not a well-formed chain record
    """
    try:
        rec = json.loads(line)
        entry = JournalEntry.from_dict(rec["entry"])
        for field in ("prev_hash", "entry_hash"):
            if not isinstance(rec[field], str):
                raise TypeError(f"{field} is not a string")
        return rec, entry
    except (ValueError, KeyError, TypeError, AttributeError) as e:
        raise IntegrityError(f"malformed record at line {lineno}: {e}") from e


class TransactionJournal:
    """
    File-based journal of committed transactions.

    Guarantees:
    - Append-only
    - Fsync after each append
    - Hash chain integrity, checked on read
    """

    def __init__(self, path: str) -> None:
        self.path = path
        try:
            os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
            if not os.path.exists(path):
                with open(path, "wb") as f:
                    f.write(b"")
        except OSError as ex:
            raise StoreUnavailable(f"Cannot create journal {path}: {ex}") from ex

    def ensure_writable(self) -> None:
        """
        Check that an append can succeed before anything is committed.

        Raises:
            StoreUnavailable: If the file cannot be opened for append
            IntegrityError: If an existing record is malformed
        """
        try:
            with open(self.path, "ab"):
                pass
        except OSError as ex:
            raise StoreUnavailable(f"Journal {self.path} is not writable: {ex}") from ex
        self.get_last_hash()

    def _last_seq_and_hash(self, f) -> Tuple[int, str]:
        last_seq = -1
        last_hash = ZERO_HASH
        f.seek(0)
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            rec, entry = _parse_record(line, lineno)
            last_seq = entry.seq
            last_hash = rec["entry_hash"]
        return last_seq, last_hash

    def append(self, txn: Transaction) -> JournalEntry:
        """
        Append a committed transaction.

        Returns:
            The entry with its assigned seq

        Raises:
            StoreUnavailable: If the journal cannot be written
        """
        try:
            with open(self.path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    last_seq, last_hash = self._last_seq_and_hash(f)
                    entry = JournalEntry(seq=last_seq + 1, transaction=txn)
                    line = canonical_json_str(chain_record(last_hash, entry)) + "\n"
                    f.seek(0, os.SEEK_END)
                    f.write(line.encode("utf-8"))
                    f.flush()
                    os.fsync(f.fileno())
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise StoreUnavailable(str(ex)) from ex
        return entry

    def read(self, from_seq: int = 0) -> Iterator[JournalEntry]:
        """
        Read entries in order, verifying the chain.

        Raises:
            IntegrityError: If a record does not chain to its predecessor
        """
        prev_hash = ZERO_HASH
        with open(self.path, "rb") as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                rec, entry = _parse_record(line, lineno)
                if rec.get("prev_hash") != prev_hash:
                    raise IntegrityError(f"prev_hash mismatch at seq {entry.seq}")
                if rec.get("entry_hash") != hash_entry(prev_hash, entry):
                    raise IntegrityError(f"entry_hash mismatch at seq {entry.seq}")
                prev_hash = rec["entry_hash"]
                if entry.seq >= from_seq:
                    yield entry

    def get_last_hash(self) -> Optional[str]:
        with open(self.path, "rb") as f:
            _, last_hash = self._last_seq_and_hash(f)
        return last_hash


def verify_chain(path: str) -> ChainVerificationResult:
    """
    Verify every record of a journal file.

    Checks prev_hash linkage, entry_hash and seq continuity.
    """
    prev_hash = ZERO_HASH
    checked = 0
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            if not line.strip():
                continue
            try:
                rec, entry = _parse_record(line, lineno)
            except IntegrityError as e:
                return ChainVerificationResult(
                    valid=False,
                    checked=checked,
                    error="malformed record",
                    mismatch_seq=checked,
                    actual=str(e),
                )
            if entry.seq != checked:
                return ChainVerificationResult(
                    valid=False,
                    checked=checked,
                    error="seq gap",
                    mismatch_seq=entry.seq,
                    expected=str(checked),
                    actual=str(entry.seq),
                )
            if rec.get("prev_hash") != prev_hash:
                return ChainVerificationResult(
                    valid=False,
                    checked=checked,
                    error="prev_hash mismatch",
                    mismatch_seq=entry.seq,
                    expected=prev_hash,
                    actual=rec.get("prev_hash"),
                )
            computed = hash_entry(prev_hash, entry)
            if rec.get("entry_hash") != computed:
                return ChainVerificationResult(
                    valid=False,
                    checked=checked,
                    error="entry_hash mismatch",
                    mismatch_seq=entry.seq,
                    expected=computed,
                    actual=rec.get("entry_hash"),
                )
            prev_hash = computed
            checked += 1
    return ChainVerificationResult(valid=True, checked=checked)
