"""
Ed25519 signing for moji transactions.

The handler never verifies signatures; the host runtime does. This module
lets the CLI and the tests produce real signed transactions.

Key management:
- Dev mode: ~/.moji/keys/
- Prod mode: path from MOJI_KEY_PATH
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey

from .core.canonical import canonical_json_bytes
from .core.transaction import Transaction


class SigningKey:
    """
    Ed25519 signing key wrapper.

    Provides:
    - Key generation
    - Key loading from file
    - Raw public key bytes (the ledger identity)
    - Transaction signing
    """

    def __init__(self, private_key: Ed25519PrivateKey):
        self.private_key = private_key
        self.public_key = private_key.public_key()

    @classmethod
    def generate(cls) -> "SigningKey":
        """Generate new Ed25519 keypair."""
        return cls(Ed25519PrivateKey.generate())

    @classmethod
    def from_seed(cls, seed: bytes) -> "SigningKey":
        """Build a key from 32 raw private bytes (fixtures, tests)."""
        return cls(Ed25519PrivateKey.from_private_bytes(seed))

    @classmethod
    def load_from_file(cls, path: str) -> "SigningKey":
        """
        Load private key from PEM file.

        Raises:
            FileNotFoundError: If key file doesn't exist
            ValueError: If key format is invalid
        """
        with open(path, "rb") as f:
            private_key = serialization.load_pem_private_key(f.read(), password=None)

        if not isinstance(private_key, Ed25519PrivateKey):
            raise ValueError("Key file is not Ed25519 private key")

        return cls(private_key)

    def save_to_file(self, path: str) -> None:
        """Save private key to PEM file (mode 0600)."""
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        private_pem = self.private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "wb") as f:
            f.write(private_pem)

    def public_key_bytes(self) -> bytes:
        """Raw 32 byte public key."""
        return self.public_key.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def public_key_hex(self) -> str:
        return self.public_key_bytes().hex()

    def sign(self, message: bytes) -> bytes:
        return self.private_key.sign(message)

    def sign_transaction(
        self,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
        nonce: str = "",
    ) -> Transaction:
        """
        Build and sign a transaction.

        The signed header binds the public key, the payload and the nonce.
        Ed25519 is deterministic: same key, payload and nonce give the same
        signature, and therefore the same generated moji.
        """
        body = dict(payload or {})
        body["action"] = action
        header = {
            "signer_public_key": self.public_key_hex(),
            "payload": body,
            "nonce": nonce,
        }
        signature = self.sign(canonical_json_bytes(header))
        return Transaction(
            action=action,
            signer_public_key=self.public_key_bytes(),
            signature=signature,
            payload=dict(payload or {}),
        )


def get_default_key_path() -> Path:
    """Default key path (~/.moji/keys/moji_ed25519)."""
    return Path.home() / ".moji" / "keys" / "moji_ed25519"


def ensure_key(key_path: Optional[str] = None) -> Tuple[str, bool]:
    """
    Ensure a private key exists (generate if missing).

    Returns:
        (key path, created)
    """
    if key_path is None:
        key_path = str(get_default_key_path())

    if os.path.exists(key_path):
        return key_path, False

    SigningKey.generate().save_to_file(key_path)
    return key_path, True
