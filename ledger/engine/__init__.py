"""
Ledger Engine

Operations over loaded state: block production, transaction lookup and
inclusion proofs. Every operation takes immutable inputs and returns new
values; file I/O lives in ledger.state.
"""

from .inclusion import (
    check_inclusion_proof,
    find_transaction_index,
    generate_inclusion_proof,
    verify_inclusion_proof,
)
from .locator import get_transaction, get_transaction_hash
from .producer import (
    ProductionResult,
    mine_block,
    mine_header,
    next_header_fields,
    produce_blocks,
)


__all__ = [
    "ProductionResult",
    "produce_blocks",
    "mine_block",
    "mine_header",
    "next_header_fields",
    "get_transaction",
    "get_transaction_hash",
    "find_transaction_index",
    "generate_inclusion_proof",
    "check_inclusion_proof",
    "verify_inclusion_proof",
]
