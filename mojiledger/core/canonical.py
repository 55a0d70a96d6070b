"""
Canonical JSON for ledger records, state hashes and journal lines.

Two nodes that apply the same transactions must write the same bytes, so
everything that is stored or hashed is encoded here: sorted keys, no
whitespace, UTF-8, raw bytes as lowercase hex.
"""

import hashlib
import json
from typing import Any


def canonicalize(obj: Any) -> Any:
    """
    Normalize a nested structure before encoding.

    dict keys are sorted and must be strings, tuples become lists and bytes
    become lowercase hex. Sets have no stable order and are refused.
    """
    if isinstance(obj, dict):
        for key in obj:
            if not isinstance(key, str):
                raise TypeError(f"canonical keys must be str, got {type(key).__name__}")
        return {k: canonicalize(obj[k]) for k in sorted(obj)}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).hex()
    if isinstance(obj, (set, frozenset)):
        raise TypeError("sets have no canonical order")
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    s = json.dumps(canonicalize(obj), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def canonical_json_str(obj: Any) -> str:
    return canonical_json_bytes(obj).decode("utf-8")


def canonical_hash(obj: Any) -> str:
    """SHA-256 hex digest of the canonical encoding of obj."""
    return hashlib.sha256(canonical_json_bytes(obj)).hexdigest()
