"""
In-memory state store.

Used by tests and by journal replay.
"""

import threading
from typing import Dict, Iterable, Mapping, Optional

from ..core.canonical import canonical_hash
from .store import StateStore


class MemoryStateStore(StateStore):
    """
    Dict-backed state store.

    The raw dict is exposed as `state` so tests can inspect and clear
    addresses directly.
    """

    def __init__(self, initial: Optional[Mapping[str, bytes]] = None) -> None:
        self.state: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, address: str) -> Optional[bytes]:
        with self._lock:
            return self.state.get(address)

    def set_batch(self, entries: Mapping[str, bytes]) -> None:
        staged = dict(entries)
        with self._lock:
            self.state.update(staged)

    def delete_batch(self, addresses: Iterable[str]) -> None:
        with self._lock:
            for address in addresses:
                self.state.pop(address, None)

    def items(self, prefix: str = "") -> Dict[str, bytes]:
        with self._lock:
            return {k: v for k, v in self.state.items() if k.startswith(prefix)}

    def snapshot(self) -> Dict[str, bytes]:
        """Copy of the full state."""
        with self._lock:
            return dict(self.state)

    def state_hash(self) -> str:
        """
        Canonical SHA-256 of the full state.

        Independent nodes holding the same state compute the same hash.
        """
        return state_hash(self.snapshot())


def state_hash(state: Mapping[str, bytes]) -> str:
    return canonical_hash(dict(state))
