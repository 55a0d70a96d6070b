"""
CREATE_COLLECTION transition.

Steps:
1. Validate the transaction (MalformedInput)
2. Derive the collection address from the signer public key
3. Reject if a collection already exists there (DuplicateIdentity)
4. Seed the generator with the transaction signature
5. Draw COLLECTION_SIZE moji in order
6. Fail if any moji address is already occupied or repeated (AddressCollision)
7. Assemble the collection record
8. Write collection + moji in one batch
"""

from typing import Dict, List

from ..core.addressing import collection_address
from ..core.errors import AddressCollision, DuplicateIdentity
from ..core.factory import make_moji
from ..core.prng import new_generator
from ..core.records import COLLECTION_SIZE, Collection, encode_collection, encode_moji
from ..core.transaction import Transaction
from ..logging_config import get_logger, trace_id_for
from ..state.store import StateStore


def create_collection(txn: Transaction, store: StateStore) -> List[str]:
    """
    Create the signer's collection and its generated moji.

    Args:
        txn: Transaction to apply
        store: Ledger state

    Returns:
        Written addresses: collection first, then moji in generation order

    Raises:
        MalformedInput: If identity, signature or action is missing
        DuplicateIdentity: If the signer already owns a collection
        AddressCollision: If a generated moji address is already occupied
        StoreUnavailable: If the store fails (propagated unchanged)
    """
    txn.validate()
    identity = txn.signer_public_key
    owner = txn.identity_hex
    log = get_logger(__name__, trace_id=trace_id_for(owner), action=txn.action)

    address = collection_address(identity)
    if store.get(address) is not None:
        raise DuplicateIdentity(owner)

    generator = new_generator(txn.signature)
    batch: Dict[str, bytes] = {}
    moji_addresses: List[str] = []
    for _ in range(COLLECTION_SIZE):
        moji, moji_addr, generator = make_moji(identity, generator)
        if moji_addr in batch:
            raise AddressCollision(owner, moji_addr)
        batch[moji_addr] = encode_moji(moji)
        moji_addresses.append(moji_addr)

    occupied = store.get_many(moji_addresses)
    if occupied:
        raise AddressCollision(owner, sorted(occupied)[0])

    collection = Collection(key=owner, moji=tuple(moji_addresses))
    batch[address] = encode_collection(collection)

    store.set_batch(batch)
    log.debug("Collection written", extra={"address": address, "moji": moji_addresses})
    return [address] + moji_addresses
