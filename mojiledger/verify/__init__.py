"""
Verification helpers for stored ledger state.
"""

from .collection import CollectionVerificationResult, verify_collection

__all__ = [
    "CollectionVerificationResult",
    "verify_collection",
]
