"""
Ledger state storage.

This module provides:
- StateStore: Abstract get / set_batch interface
- MemoryStateStore: In-memory dict (tests, replay)
- FileStateStore: Single JSON document with atomic rename
- S3StateStore: Single S3 object per state
- open_store: Build a store from a URL
"""

from urllib.parse import urlparse

from .store import StateStore
from .memory_store import MemoryStateStore, state_hash
from .file_store import FileStateStore


def open_store(url: str) -> StateStore:
    """
    Open a state store from a URL.

    Supported schemes:
        memory://
        file:///path/to/state.json (or a bare path)
        s3://bucket/prefix

    Raises:
        ValueError: If the scheme is not supported
    """
    parsed = urlparse(url)
    if parsed.scheme == "memory":
        return MemoryStateStore()
    if parsed.scheme in ("", "file"):
        return FileStateStore(parsed.path if parsed.scheme == "file" else url)
    if parsed.scheme == "s3":
        from .s3_store import S3StateStore

        return S3StateStore(bucket=parsed.netloc, prefix=parsed.path.lstrip("/") or "state")
    raise ValueError(f"Unsupported state store URL: {url}")


__all__ = [
    "StateStore",
    "MemoryStateStore",
    "FileStateStore",
    "open_store",
    "state_hash",
]
