"""
Test fixtures package for ledger simulator tests.

This package provides factory functions for creating test objects.

Usage:
    from fixtures import make_chain, make_mempool

    def test_something():
        chain = make_chain((5,))
        mempool = make_mempool(4)
"""

from .chain_fixtures import (
    make_chain,
    make_mempool,
    make_mining_config,
    make_transaction,
    make_transactions,
)

__all__ = [
    "make_chain",
    "make_mempool",
    "make_mining_config",
    "make_transaction",
    "make_transactions",
]
