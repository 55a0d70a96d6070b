"""
Transaction model.

A transaction arrives already authenticated: the signer public key and the
signature bytes are supplied by the host runtime. Only the action, the
public key and the signature may influence a transition.
"""

import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, Union

from .canonical import canonical_json_bytes
from .errors import MalformedInput

CREATE_COLLECTION = "CREATE_COLLECTION"


@dataclass(frozen=True)
class Transaction:
    """
    Immutable transaction record.

    Fields:
        action: Action discriminator (e.g., "CREATE_COLLECTION")
        signer_public_key: Authenticated public key bytes of the signer
        signature: Signature bytes over the transaction header
        payload: Decoded payload (action-specific data)
    """
    action: str
    signer_public_key: bytes
    signature: bytes
    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def identity_hex(self) -> str:
        return self.signer_public_key.hex()

    @property
    def signature_hex(self) -> str:
        return self.signature.hex()

    def validate(self) -> None:
        """
        Check required fields.

        Raises:
            MalformedInput: If identity, signature or action is missing
        """
        if not isinstance(self.signer_public_key, bytes) or not self.signer_public_key:
            raise MalformedInput("Transaction has no signer public key")
        identity = self.identity_hex
        if not isinstance(self.signature, bytes) or not self.signature:
            raise MalformedInput(f"Transaction from {identity} has no signature", identity=identity)
        if not isinstance(self.action, str) or not self.action:
            raise MalformedInput(f"Transaction from {identity} has no action", identity=identity)

    def payload_bytes(self) -> bytes:
        """Wire form of the payload, action included."""
        body = dict(self.payload)
        body["action"] = self.action
        return canonical_json_bytes(body)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "action": self.action,
            "signer_public_key": self.identity_hex,
            "signature": self.signature_hex,
            "payload": dict(self.payload),
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Transaction":
        return Transaction.from_hex(
            action=data.get("action", ""),
            signer_public_key=data.get("signer_public_key", ""),
            signature=data.get("signature", ""),
            payload=data.get("payload") or {},
        )

    @staticmethod
    def from_hex(
        action: str,
        signer_public_key: str,
        signature: str,
        payload: Union[Dict[str, Any], None] = None,
    ) -> "Transaction":
        """Build a transaction from hex-encoded key and signature."""
        return Transaction(
            action=action,
            signer_public_key=_unhex(signer_public_key, "public key"),
            signature=_unhex(signature, "signature"),
            payload=dict(payload or {}),
        )

    @staticmethod
    def from_wire(payload_bytes: bytes, signer_public_key: bytes, signature: bytes) -> "Transaction":
        """
        Decode a JSON payload as delivered by the host runtime.

        Raises:
            MalformedInput: If payload is not a JSON object with an action
        """
        try:
            body = json.loads(payload_bytes.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as ex:
            raise MalformedInput(f"Payload is not valid JSON: {ex}") from ex
        if not isinstance(body, dict):
            raise MalformedInput("Payload must be a JSON object")
        action = body.pop("action", None)
        if not isinstance(action, str):
            raise MalformedInput("Payload has no action")
        return Transaction(
            action=action,
            signer_public_key=signer_public_key,
            signature=signature,
            payload=body,
        )


def _unhex(value: str, what: str) -> bytes:
    try:
        return binascii.unhexlify(value)
    except (binascii.Error, TypeError, ValueError) as ex:
        raise MalformedInput(f"Transaction {what} is not valid hex: {value!r}") from ex
