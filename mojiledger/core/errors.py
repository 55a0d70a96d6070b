"""
Exception types for the moji ledger.

Business rejections (InvalidTransaction) are kept apart from integrity
anomalies (InternalError) so operators can tell them apart.
"""

from typing import Optional


class MojiError(Exception):
    """Base class for all moji ledger errors."""
    pass


class InvalidTransaction(MojiError):
    """Raised when a transaction is rejected. No state is written."""

    def __init__(self, message: str, identity: Optional[str] = None) -> None:
        super().__init__(message)
        self.identity = identity


class DuplicateIdentity(InvalidTransaction):
    """Raised when the signer already owns a collection."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"Public key already has a collection: {identity}", identity=identity)


class MalformedInput(InvalidTransaction):
    """Raised when a transaction is missing required fields or is undecodable."""
    pass


class InternalError(MojiError):
    """Raised when an invariant of the ledger itself is violated."""
    pass


class AddressCollision(InternalError):
    """Raised when a freshly generated moji address is already occupied."""

    def __init__(self, identity: str, address: str) -> None:
        super().__init__(f"Generated moji address already in use: {address} (public key {identity})")
        self.identity = identity
        self.address = address


class StoreUnavailable(MojiError):
    """Raised when the state store cannot serve a read or write."""
    pass


class RecordDecodeError(MojiError, ValueError):
    """Raised when stored bytes are not a valid record."""
    pass


class IntegrityError(MojiError):
    """Raised when journal hash chain verification fails."""
    pass
