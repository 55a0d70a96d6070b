"""
Moji Ledger

Deterministic state-transition logic for the cryptomoji transaction family.
"""

__version__ = "0.1.0"
