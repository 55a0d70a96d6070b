"""
Tests for record encoding.

Round-trip law: encode(decode(raw)) == raw for every encoded record.
"""

import json

import pytest

from mojiledger.core.addressing import collection_address, moji_address
from mojiledger.core.canonical import canonical_json_bytes
from mojiledger.core.errors import RecordDecodeError
from mojiledger.core.factory import make_moji
from mojiledger.core.prng import new_generator
from mojiledger.core.records import (
    DNA_LENGTH,
    Collection,
    Moji,
    decode_collection,
    decode_moji,
    encode_collection,
    encode_dna,
    encode_moji,
)

KEY = bytes.fromhex("c0ffee" * 11)
DNA = "00" * 18


def _generated(n):
    gen = new_generator(b"fixture-signature")
    out = []
    for _ in range(n):
        moji, address, gen = make_moji(KEY, gen)
        out.append((moji, address))
    return out


def test_encode_dna_width_and_padding():
    assert encode_dna(0) == "0" * DNA_LENGTH
    assert encode_dna(255) == "0" * (DNA_LENGTH - 2) + "ff"
    assert encode_dna((1 << 144) - 1) == "f" * DNA_LENGTH
    with pytest.raises(ValueError):
        encode_dna(1 << 144)
    with pytest.raises(ValueError):
        encode_dna(-1)


def test_moji_round_trip_generated():
    for moji, _ in _generated(20):
        raw = encode_moji(moji)
        assert decode_moji(raw) == moji
        assert encode_moji(decode_moji(raw)) == raw


def test_moji_round_trip_hand_built():
    sire = moji_address(KEY, "11" * 18)
    breeder = moji_address(KEY, "22" * 18)
    moji = Moji(dna="ab" * 18, owner=KEY.hex(), sire=sire, breeder=breeder, sired=(moji_address(KEY, DNA),))

    raw = encode_moji(moji)
    assert encode_moji(decode_moji(raw)) == raw
    assert decode_moji(raw).sired == moji.sired


def test_collection_round_trip():
    addresses = tuple(address for _, address in _generated(3))
    for collection in (Collection(key=KEY.hex(), moji=addresses), Collection(key=KEY.hex())):
        raw = encode_collection(collection)
        assert decode_collection(raw) == collection
        assert encode_collection(decode_collection(raw)) == raw


def test_encoding_is_versioned_canonical_json():
    raw = encode_collection(Collection(key="ab", moji=()))

    assert raw == b'{"key":"ab","moji":[],"v":1}'
    assert json.loads(raw)["v"] == 1


@pytest.mark.parametrize(
    "payload",
    [
        b"not json",
        b"\xff\xfe",
        b"[]",
        canonical_json_bytes({"v": 2, "dna": DNA, "owner": "ab", "sired": []}),
        canonical_json_bytes({"v": 1, "dna": "XYZ", "owner": "ab", "sired": []}),
        canonical_json_bytes({"v": 1, "dna": DNA, "owner": "not-hex", "sired": []}),
        canonical_json_bytes({"v": 1, "dna": DNA, "owner": "ab", "sired": ["nope"]}),
        canonical_json_bytes({"v": 1, "dna": DNA, "owner": "ab", "sire": "nope", "sired": []}),
    ],
)
def test_decode_moji_rejects_malformed(payload):
    with pytest.raises(RecordDecodeError):
        decode_moji(payload)


def test_decode_collection_rejects_non_moji_addresses():
    raw = canonical_json_bytes({"v": 1, "key": "ab", "moji": [collection_address(KEY)]})

    with pytest.raises(RecordDecodeError):
        decode_collection(raw)
