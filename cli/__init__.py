"""
Moji CLI - cryptomoji ledger tooling

Commands:
- moji keygen - Generate an Ed25519 signing key
- moji create-collection - Sign and apply a CREATE_COLLECTION transaction
- moji address collection/moji - Derive state addresses
- moji state show - Inspect ledger state
- moji verify - Check a collection against its moji
- moji journal replay/verify - Rebuild and check state from the journal
"""

__version__ = "0.1.0"
