"""
Replay runner: rebuild ledger state from the journal.

Replay is how an independent node checks a ledger: same journal -> same
state hash.
"""

from dataclasses import dataclass
from typing import Optional

from ..metrics import REPLAY_DURATION
from ..processor.handler import TransactionHandler
from ..state.memory_store import MemoryStateStore
from .file_journal import TransactionJournal


@dataclass(frozen=True)
class ReplayResult:
    """
    Result of replay operation.

    Fields:
        store: Rebuilt state
        applied: Number of transactions applied
        state_hash: Canonical hash of the rebuilt state
    """
    store: MemoryStateStore
    applied: int
    state_hash: str


def replay(
    journal: TransactionJournal,
    handler: TransactionHandler,
    to_seq: Optional[int] = None,
) -> ReplayResult:
    """
    Re-apply journaled transactions to an empty state.

    Args:
        journal: Journal to read from
        handler: Handler with the transitions registered
        to_seq: Stop at this sequence (inclusive, None = all)

    Raises:
        IntegrityError: If the journal chain is broken
        InvalidTransaction / InternalError: If a journaled transaction no longer applies
    """
    store = MemoryStateStore()
    count = 0

    with REPLAY_DURATION.time():
        for entry in journal.read():
            if to_seq is not None and entry.seq > to_seq:
                break
            handler.apply(entry.transaction, store)
            count += 1

    return ReplayResult(store=store, applied=count, state_hash=store.state_hash())
