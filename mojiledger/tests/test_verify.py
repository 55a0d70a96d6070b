"""
Tests for the collection verifier.
"""

from mojiledger.core.addressing import collection_address, moji_address
from mojiledger.core.records import Collection, Moji, decode_collection, encode_collection, encode_moji
from mojiledger.verify import verify_collection


def test_valid_after_creation(handler, store, txn):
    handler.apply(txn, store)

    result = verify_collection(store, txn.signer_public_key)

    assert result.valid
    assert result.checked == 3


def test_missing_collection(store, txn):
    result = verify_collection(store, txn.signer_public_key)

    assert not result.valid
    assert result.error == "collection not found"


def test_missing_moji(handler, store, txn):
    written = handler.apply(txn, store)
    store.delete_batch([written[2]])

    result = verify_collection(store, txn.signer_public_key)

    assert not result.valid
    assert result.error == "moji not found"
    assert result.address == written[2]
    assert result.checked == 1


def test_moji_with_foreign_dna(handler, store, txn):
    written = handler.apply(txn, store)
    store.set_batch({written[1]: encode_moji(Moji(dna="ee" * 18, owner=txn.identity_hex))})

    result = verify_collection(store, txn.signer_public_key)

    assert not result.valid
    assert result.error == "moji address mismatch"
    assert result.expected == moji_address(txn.signer_public_key, "ee" * 18)


def test_wrong_moji_count(handler, store, txn):
    handler.apply(txn, store)
    address = collection_address(txn.signer_public_key)
    collection = decode_collection(store.get(address))
    store.set_batch({address: encode_collection(Collection(key=collection.key, moji=collection.moji[:2]))})

    result = verify_collection(store, txn.signer_public_key)

    assert not result.valid
    assert result.error == "wrong moji count"
