"""
StateStore abstract interface.

Defines the contract every ledger state backend must satisfy.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Mapping, Optional


class StateStore(ABC):
    """
    Key-value ledger state addressed by 70 char hex strings.

    All implementations must guarantee:
    - Read-your-writes for a single address
    - set_batch installs every entry or none of them
    - Backend failures surface as StoreUnavailable
    """

    @abstractmethod
    def get(self, address: str) -> Optional[bytes]:
        """
        Read one address.

        Returns:
            Stored bytes or None if the address is empty

        Raises:
            StoreUnavailable: If the backend cannot be read
        """
        ...

    @abstractmethod
    def set_batch(self, entries: Mapping[str, bytes]) -> None:
        """
        Write all entries atomically.

        Raises:
            StoreUnavailable: If the batch could not be committed (nothing written)
        """
        ...

    @abstractmethod
    def delete_batch(self, addresses: Iterable[str]) -> None:
        """Remove addresses atomically. Missing addresses are ignored."""
        ...

    @abstractmethod
    def items(self, prefix: str = "") -> Dict[str, bytes]:
        """Return every entry whose address starts with prefix."""
        ...

    def get_many(self, addresses: Iterable[str]) -> Dict[str, bytes]:
        """
        Read several addresses.

        Implementations may override. Default calls get() for each address
        and omits empty ones.
        """
        found = {}
        for address in addresses:
            value = self.get(address)
            if value is not None:
                found[address] = value
        return found
