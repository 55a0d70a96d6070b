"""
File-based state store.

The whole state is one JSON document: {"address": "<base64 bytes>", ...}.
Batches take an exclusive lock, write a temp file, fsync and os.replace it
over the old document, so a batch is all-or-nothing on disk.
"""

import base64
import binascii
import json
import os
import tempfile
from contextlib import contextmanager
from typing import Dict, Iterable, Iterator, Mapping, Optional

from ..core.canonical import canonical_json_str
from ..core.errors import StoreUnavailable
from .store import StateStore

try:
    import fcntl
except ImportError:  # Windows or unsupported platform
    fcntl = None


class FileStateStore(StateStore):
    """
    Single-document state store on local disk.

    Guarantees:
    - Atomic batches (rename over the previous document)
    - Fsync before rename (durability)
    - Writers serialized by an flock on {path}.lock
    """

    def __init__(self, path: str) -> None:
        """
        Initialize file state store.

        Args:
            path: Path to the JSON state document
        """
        self.path = path
        self.lock_path = f"{path}.lock"
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    @contextmanager
    def _locked(self) -> Iterator[None]:
        try:
            with open(self.lock_path, "a+b") as f:
                if fcntl:
                    fcntl.flock(f.fileno(), fcntl.LOCK_EX)
                try:
                    yield
                finally:
                    if fcntl:
                        fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except OSError as ex:
            raise StoreUnavailable(str(ex)) from ex

    def _load(self) -> Dict[str, bytes]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = json.load(f)
            return {address: base64.b64decode(value) for address, value in raw.items()}
        except (OSError, ValueError, AttributeError, binascii.Error) as ex:
            raise StoreUnavailable(f"Cannot read state file {self.path}: {ex}") from ex

    def _dump(self, state: Mapping[str, bytes]) -> None:
        doc = {address: base64.b64encode(value).decode("ascii") for address, value in state.items()}
        directory = os.path.dirname(self.path) or "."
        fd, tmp_path = tempfile.mkstemp(prefix=".state-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(canonical_json_str(doc))
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as ex:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise StoreUnavailable(f"Cannot write state file {self.path}: {ex}") from ex

    def get(self, address: str) -> Optional[bytes]:
        return self._load().get(address)

    def get_many(self, addresses: Iterable[str]) -> Dict[str, bytes]:
        state = self._load()
        return {a: state[a] for a in addresses if a in state}

    def set_batch(self, entries: Mapping[str, bytes]) -> None:
        with self._locked():
            state = self._load()
            state.update(entries)
            self._dump(state)

    def delete_batch(self, addresses: Iterable[str]) -> None:
        with self._locked():
            state = self._load()
            for address in addresses:
                state.pop(address, None)
            self._dump(state)

    def items(self, prefix: str = "") -> Dict[str, bytes]:
        return {k: v for k, v in self._load().items() if k.startswith(prefix)}
