"""
Core deterministic primitives.

This module provides:
- Addressing: namespace-prefixed, fixed-length state addresses
- PRNG: signature-seeded generator for moji DNA
- Records: Collection and Moji with canonical encoding
- Factory: one draw -> one moji
- Transaction: authenticated transaction model
- Errors: rejection and integrity exception types
"""

from .addressing import (
    ADDRESS_LENGTH,
    COLLECTION,
    MOJI,
    NAMESPACE,
    collection_address,
    derive_address,
    is_valid_address,
    moji_address,
    moji_prefix,
)
from .canonical import canonicalize, canonical_hash, canonical_json_bytes, canonical_json_str
from .errors import (
    AddressCollision,
    DuplicateIdentity,
    IntegrityError,
    InternalError,
    InvalidTransaction,
    MalformedInput,
    MojiError,
    RecordDecodeError,
    StoreUnavailable,
)
from .factory import make_moji
from .prng import DNA_BYTES, SeededGenerator, new_generator
from .records import (
    COLLECTION_SIZE,
    DNA_LENGTH,
    Collection,
    Moji,
    decode_collection,
    decode_moji,
    encode_collection,
    encode_dna,
    encode_moji,
)
from .transaction import CREATE_COLLECTION, Transaction

__all__ = [
    "ADDRESS_LENGTH",
    "COLLECTION",
    "MOJI",
    "NAMESPACE",
    "collection_address",
    "derive_address",
    "is_valid_address",
    "moji_address",
    "moji_prefix",
    "canonicalize",
    "canonical_hash",
    "canonical_json_bytes",
    "canonical_json_str",
    "AddressCollision",
    "DuplicateIdentity",
    "IntegrityError",
    "InternalError",
    "InvalidTransaction",
    "MalformedInput",
    "MojiError",
    "RecordDecodeError",
    "StoreUnavailable",
    "make_moji",
    "DNA_BYTES",
    "SeededGenerator",
    "new_generator",
    "COLLECTION_SIZE",
    "DNA_LENGTH",
    "Collection",
    "Moji",
    "decode_collection",
    "decode_moji",
    "encode_collection",
    "encode_dna",
    "encode_moji",
    "CREATE_COLLECTION",
    "Transaction",
]
