"""
Transaction journal and replay.

This module provides:
- TransactionJournal: hash-chained JSONL log of committed transactions
- verify_chain: offline chain verification
- replay: rebuild state from a journal
"""

from .integrity import ZERO_HASH, ChainVerificationResult, JournalEntry, chain_record, hash_entry
from .file_journal import TransactionJournal, verify_chain
from .replay import ReplayResult, replay

__all__ = [
    "ZERO_HASH",
    "ChainVerificationResult",
    "JournalEntry",
    "chain_record",
    "hash_entry",
    "TransactionJournal",
    "verify_chain",
    "ReplayResult",
    "replay",
]
