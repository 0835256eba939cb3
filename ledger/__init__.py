"""
Ledger Simulator Core

Single-chain blockchain ledger simulation: canonical encoding, hashing,
Merkle commitments, chain and mempool state, block production and
transaction inclusion proofs.
"""

__version__ = "0.1.0"
