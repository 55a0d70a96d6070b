"""
Deterministic address derivation.

Layout of every address (70 lowercase hex chars):

    NAMESPACE (6) | kind prefix (2) | body (62)

The body is built from SHA-512 hex digests of the inputs. Every input but
the last contributes its first 8 chars, the last input fills the rest. A moji
address is therefore owner-scoped: all moji of one public key share the
prefix returned by moji_prefix().
"""

import hashlib
import re
from typing import Optional

FAMILY_NAME = "cryptomoji"

NAMESPACE = hashlib.sha512(FAMILY_NAME.encode("utf-8")).hexdigest()[:6]

COLLECTION = "00"
MOJI = "01"
SIRE_LISTING = "02"
OFFER = "03"

PREFIXES = {
    "COLLECTION": COLLECTION,
    "MOJI": MOJI,
    "SIRE_LISTING": SIRE_LISTING,
    "OFFER": OFFER,
}

ADDRESS_LENGTH = 70
PREFIX_LENGTH = len(NAMESPACE) + 2
BODY_LENGTH = ADDRESS_LENGTH - PREFIX_LENGTH
SCOPE_LENGTH = 8

_ADDRESS_RE = re.compile(r"^[0-9a-f]{%d}$" % ADDRESS_LENGTH)


def _hash(data: bytes) -> str:
    return hashlib.sha512(data).hexdigest()


def derive_address(kind: str, *inputs: bytes) -> str:
    """
    Derive a fixed-length address for the given kind prefix and inputs.

    Args:
        kind: Two hex char kind prefix (COLLECTION, MOJI, ...)
        *inputs: Raw byte inputs, most general first

    Returns:
        70 char lowercase hex address

    Raises:
        ValueError: If kind is unknown or the inputs do not fit the body
    """
    if kind not in PREFIXES.values():
        raise ValueError(f"Unknown address kind: {kind!r}")
    if not inputs:
        raise ValueError("At least one input is required")
    if (len(inputs) - 1) * SCOPE_LENGTH >= BODY_LENGTH:
        raise ValueError(f"Too many address inputs: {len(inputs)}")
    for part in inputs:
        if not isinstance(part, (bytes, bytearray)):
            raise ValueError(f"Address inputs must be bytes, got {type(part).__name__}")

    scopes = "".join(_hash(part)[:SCOPE_LENGTH] for part in inputs[:-1])
    body = scopes + _hash(inputs[-1])[: BODY_LENGTH - len(scopes)]
    return NAMESPACE + kind + body


def collection_address(identity: bytes) -> str:
    """Address of the collection owned by identity."""
    return derive_address(COLLECTION, identity)


def moji_address(identity: bytes, dna: str) -> str:
    """Address of a moji, recomputable from its owner and DNA alone."""
    return derive_address(MOJI, identity, dna.encode("ascii"))


def moji_prefix(identity: bytes) -> str:
    """Prefix shared by every moji address of one owner."""
    return NAMESPACE + MOJI + _hash(identity)[:SCOPE_LENGTH]


def kind_prefix(kind: str) -> str:
    """Namespace-qualified prefix for a whole entity kind."""
    return NAMESPACE + PREFIXES[kind]


def is_valid_address(address: str, kind: Optional[str] = None) -> bool:
    """
    Check the address shape.

    Args:
        address: Candidate address
        kind: Optional kind prefix the address must carry

    Returns:
        True if address is 70 lowercase hex chars inside NAMESPACE
    """
    if not isinstance(address, str) or not _ADDRESS_RE.match(address):
        return False
    if not address.startswith(NAMESPACE):
        return False
    if kind is not None and address[len(NAMESPACE):PREFIX_LENGTH] != kind:
        return False
    return True
