"""
Test suite for the moji ledger.

Focus areas:
- Address derivation and format
- Generator determinism and seed sensitivity
- Record round-trips
- CREATE_COLLECTION determinism, uniqueness and atomicity
- Journal hash chain and replay
"""
