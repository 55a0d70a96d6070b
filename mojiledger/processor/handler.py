"""
Transaction handler: routes an authenticated transaction to its transition.

Every transition is a plain function (txn, store) -> written addresses.
"""

import time
from typing import Callable, Dict, List

from ..core.addressing import FAMILY_NAME, NAMESPACE
from ..core.errors import InternalError, InvalidTransaction, MalformedInput, StoreUnavailable
from ..core.transaction import CREATE_COLLECTION, Transaction
from ..logging_config import get_logger, trace_id_for
from ..metrics import track_transition, track_transition_duration
from ..state.store import StateStore
from .create_collection import create_collection

FAMILY_VERSION = "0.1"

# Transition signature: (transaction, store) -> written addresses
Transition = Callable[[Transaction, StateStore], List[str]]


class TransactionHandler:
    """
    Registry of transitions by action.

    Usage:
        handler = TransactionHandler()
        handler.register("CREATE_COLLECTION", create_collection)
        handler.apply(txn, store)
    """

    family_name = FAMILY_NAME
    family_versions = [FAMILY_VERSION]
    namespaces = [NAMESPACE]

    def __init__(self) -> None:
        self._transitions: Dict[str, Transition] = {}

    def register(self, action: str, transition: Transition) -> None:
        self._transitions[action] = transition

    @property
    def actions(self) -> List[str]:
        return sorted(self._transitions)

    def apply(self, txn: Transaction, store: StateStore) -> List[str]:
        """
        Validate and apply one transaction.

        Either every record of the transition is written or none is.

        Returns:
            Addresses written by the transition

        Raises:
            InvalidTransaction: Business rejection (DuplicateIdentity, MalformedInput)
            InternalError: Integrity anomaly (AddressCollision)
            StoreUnavailable: Store failure, no retry
            Any other exception from a transition is counted as failed and re-raised
        """
        txn.validate()
        log = get_logger(__name__, trace_id=trace_id_for(txn.identity_hex), action=txn.action)

        transition = self._transitions.get(txn.action)
        if transition is None:
            track_transition(txn.action, "rejected")
            raise MalformedInput(f"Unknown action: {txn.action}", identity=txn.identity_hex)

        started = time.monotonic()
        try:
            with track_transition_duration(txn.action):
                written = transition(txn, store)
        except InvalidTransaction as e:
            track_transition(txn.action, "rejected")
            log.info(f"Rejected {txn.action}: {e}")
            raise
        except (InternalError, StoreUnavailable) as e:
            track_transition(txn.action, "failed")
            log.error(f"Failed {txn.action}: {e}")
            raise
        except Exception:
            track_transition(txn.action, "failed")
            log.exception(f"Unexpected error in {txn.action}")
            raise

        track_transition(txn.action, "committed")
        log.info(
            f"Applied {txn.action}",
            extra={"written": len(written), "elapsed_ms": round((time.monotonic() - started) * 1000, 3)},
        )
        return written


class MojiHandler(TransactionHandler):
    """Handler for the cryptomoji family with its transitions registered."""

    def __init__(self) -> None:
        super().__init__()
        self.register(CREATE_COLLECTION, create_collection)
