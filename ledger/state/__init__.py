"""
Chain & Mempool State

Loading, validation and persistence of the ledger's on-disk state.
"""

from .validation import (
    assert_valid_blockchain,
    compute_merkle_root,
    validate_block,
    validate_blockchain,
)
from .store import (
    load_blockchain,
    load_inclusion_proof,
    load_mempool,
    mempool_document,
    parse_blockchain,
    parse_mempool,
    read_json_document,
    save_blockchain,
    save_inclusion_proof,
    save_mempool,
    save_state,
    write_json_document,
    write_json_documents,
)

__all__ = [
    "assert_valid_blockchain",
    "compute_merkle_root",
    "validate_block",
    "validate_blockchain",
    "load_blockchain",
    "load_inclusion_proof",
    "load_mempool",
    "mempool_document",
    "parse_blockchain",
    "parse_mempool",
    "read_json_document",
    "save_blockchain",
    "save_inclusion_proof",
    "save_mempool",
    "save_state",
    "write_json_document",
    "write_json_documents",
]
