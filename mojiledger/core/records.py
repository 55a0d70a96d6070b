"""
Collection and moji records and their persisted encoding.

Encoding: canonical JSON (sorted keys, no whitespace, UTF-8) with a
version field "v". decode_* is the exact inverse of encode_*.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .addressing import MOJI, is_valid_address
from .canonical import canonical_json_bytes
from .errors import RecordDecodeError
from .prng import DNA_BYTES

RECORD_VERSION = 1
DNA_LENGTH = DNA_BYTES * 2
COLLECTION_SIZE = 3

_DNA_RE = re.compile(r"^[0-9a-f]{%d}$" % DNA_LENGTH)
_HEX_RE = re.compile(r"^[0-9a-f]+$")


def encode_dna(value: int) -> str:
    """
    Encode a generator value as a DNA string.

    The value is written big-endian as DNA_BYTES bytes and hex-encoded,
    giving DNA_LENGTH lowercase hex chars.

    Raises:
        ValueError: If value does not fit in DNA_BYTES bytes
    """
    if value < 0 or value >= 1 << (8 * DNA_BYTES):
        raise ValueError(f"DNA value out of range: {value}")
    return value.to_bytes(DNA_BYTES, "big").hex()


def is_valid_dna(dna: Any) -> bool:
    return isinstance(dna, str) and bool(_DNA_RE.match(dna))


@dataclass(frozen=True)
class Moji:
    """
    A generated moji.

    Fields:
        dna: DNA_LENGTH hex chars of generated traits
        owner: Hex public key of the owner
        sire: Address of the sire moji (None for generated moji)
        breeder: Address of the breeder moji (None for generated moji)
        sired: Addresses of moji this one has sired
    """
    dna: str
    owner: str
    sire: Optional[str] = None
    breeder: Optional[str] = None
    sired: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "v": RECORD_VERSION,
            "dna": self.dna,
            "owner": self.owner,
            "sire": self.sire,
            "breeder": self.breeder,
            "sired": list(self.sired),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Moji":
        _check_version(data, "moji")
        dna = data.get("dna")
        if not is_valid_dna(dna):
            raise RecordDecodeError(f"Invalid moji DNA: {dna!r}")
        owner = data.get("owner")
        if not isinstance(owner, str) or not _HEX_RE.match(owner):
            raise RecordDecodeError(f"Invalid moji owner: {owner!r}")
        for parent in ("sire", "breeder"):
            value = data.get(parent)
            if value is not None and not is_valid_address(value, MOJI):
                raise RecordDecodeError(f"Invalid moji {parent}: {value!r}")
        sired = data.get("sired", [])
        if not isinstance(sired, list) or not all(is_valid_address(a, MOJI) for a in sired):
            raise RecordDecodeError(f"Invalid moji sired list: {sired!r}")
        return Moji(
            dna=dna,
            owner=owner,
            sire=data.get("sire"),
            breeder=data.get("breeder"),
            sired=tuple(sired),
        )


@dataclass(frozen=True)
class Collection:
    """
    The per-identity parent record.

    Fields:
        key: Hex public key of the owner
        moji: Moji addresses in generation order
    """
    key: str
    moji: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "v": RECORD_VERSION,
            "key": self.key,
            "moji": list(self.moji),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Collection":
        _check_version(data, "collection")
        key = data.get("key")
        if not isinstance(key, str) or not _HEX_RE.match(key):
            raise RecordDecodeError(f"Invalid collection key: {key!r}")
        moji = data.get("moji")
        if not isinstance(moji, list) or not all(is_valid_address(a, MOJI) for a in moji):
            raise RecordDecodeError(f"Invalid collection moji list: {moji!r}")
        return Collection(key=key, moji=tuple(moji))


def _check_version(data: Any, kind: str) -> None:
    if not isinstance(data, dict):
        raise RecordDecodeError(f"{kind} record must be an object")
    if data.get("v") != RECORD_VERSION:
        raise RecordDecodeError(f"Unsupported {kind} record version: {data.get('v')!r}")


def _load(raw: bytes) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as ex:
        raise RecordDecodeError(f"Record is not valid JSON: {ex}") from ex


def encode_moji(moji: Moji) -> bytes:
    return canonical_json_bytes(moji.to_dict())


def decode_moji(raw: bytes) -> Moji:
    return Moji.from_dict(_load(raw))


def encode_collection(collection: Collection) -> bytes:
    return canonical_json_bytes(collection.to_dict())


def decode_collection(raw: bytes) -> Collection:
    return Collection.from_dict(_load(raw))
