"""
Verify a stored collection against its moji.

Checks:
- the collection exists at the address derived from the public key
- it belongs to that public key
- it references exactly COLLECTION_SIZE moji addresses
- each address resolves to a moji record
- each address re-derives from (public key, moji DNA)
"""

from dataclasses import dataclass
from typing import Optional

from ..core.addressing import collection_address, moji_address
from ..core.errors import RecordDecodeError
from ..core.records import COLLECTION_SIZE, decode_collection, decode_moji
from ..state.store import StateStore


@dataclass
class CollectionVerificationResult:
    valid: bool
    checked: int = 0
    error: Optional[str] = None
    address: Optional[str] = None
    expected: Optional[str] = None
    actual: Optional[str] = None


def verify_collection(store: StateStore, identity: bytes) -> CollectionVerificationResult:
    address = collection_address(identity)
    raw = store.get(address)
    if raw is None:
        return CollectionVerificationResult(valid=False, error="collection not found", address=address)

    try:
        collection = decode_collection(raw)
    except RecordDecodeError as e:
        return CollectionVerificationResult(valid=False, error=f"collection undecodable: {e}", address=address)

    if collection.key != identity.hex():
        return CollectionVerificationResult(
            valid=False,
            error="collection key mismatch",
            address=address,
            expected=identity.hex(),
            actual=collection.key,
        )

    if len(collection.moji) != COLLECTION_SIZE:
        return CollectionVerificationResult(
            valid=False,
            error="wrong moji count",
            address=address,
            expected=str(COLLECTION_SIZE),
            actual=str(len(collection.moji)),
        )

    checked = 0
    for child in collection.moji:
        raw_moji = store.get(child)
        if raw_moji is None:
            return CollectionVerificationResult(valid=False, checked=checked, error="moji not found", address=child)
        try:
            moji = decode_moji(raw_moji)
        except RecordDecodeError as e:
            return CollectionVerificationResult(
                valid=False, checked=checked, error=f"moji undecodable: {e}", address=child
            )
        derived = moji_address(identity, moji.dna)
        if derived != child:
            return CollectionVerificationResult(
                valid=False,
                checked=checked,
                error="moji address mismatch",
                address=child,
                expected=derived,
                actual=child,
            )
        checked += 1

    return CollectionVerificationResult(valid=True, checked=checked, address=address)
