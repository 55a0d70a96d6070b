"""
Shared fixtures.
"""

import pytest

from mojiledger.core.transaction import CREATE_COLLECTION
from mojiledger.keys import SigningKey
from mojiledger.processor import MojiHandler
from mojiledger.state import MemoryStateStore


@pytest.fixture
def signer():
    return SigningKey.from_seed(bytes(range(32)))


@pytest.fixture
def other_signer():
    return SigningKey.from_seed(bytes(range(1, 33)))


@pytest.fixture
def txn(signer):
    return signer.sign_transaction(CREATE_COLLECTION)


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def handler():
    return MojiHandler()
