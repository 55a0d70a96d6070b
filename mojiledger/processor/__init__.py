"""
State transition processor.

This module provides:
- TransactionHandler: action -> transition registry
- MojiHandler: handler with the cryptomoji transitions registered
- create_collection: the CREATE_COLLECTION transition
"""

from .create_collection import create_collection
from .handler import FAMILY_VERSION, MojiHandler, TransactionHandler

__all__ = [
    "FAMILY_VERSION",
    "MojiHandler",
    "TransactionHandler",
    "create_collection",
]
