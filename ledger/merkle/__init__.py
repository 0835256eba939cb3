"""
Merkle Tree and Commitments
Deterministic Merkle tree construction + proof generation/verification.

This module provides:
- MerkleTree: Levels, root and per-leaf sibling paths
- MerkleProof: Dataclass representing a Merkle inclusion proof
- build_merkle_root / build_merkle_proof / verify_merkle_proof
- MerkleProver / MerkleVerifier: Transaction-level wrappers

Canonical Commitment Rules:
1. Leaf hashing: sha256(encode_transaction(tx))
2. Parent hashing: sha256(left + right)
3. Padding: Duplicate last node if odd number at any level
4. Empty tree: rejected
5. Single leaf: root = leaf

Usage:
    from ledger.merkle import MerkleProver, verify_merkle_proof

    root = MerkleProver.compute_root_from_transactions(block.transactions)
    proof = MerkleProver.prove_transaction(block.transactions, index=2)
    assert verify_merkle_proof(proof)
"""
from .merkle_tree import (
    PADDING_RULE,
    EmptyTreeError,
    MerkleProof,
    MerkleTree,
    build_merkle_proof,
    build_merkle_root,
    compute_tree_depth,
    fold_merkle_path,
    merkle_parent,
    verify_merkle_proof,
)

from .merkle_proofs import (
    MerkleProver,
    MerkleVerifier,
    transaction_leaves,
)


__all__ = [
    "PADDING_RULE",
    "EmptyTreeError",
    "MerkleProof",
    "MerkleTree",
    "merkle_parent",
    "build_merkle_root",
    "build_merkle_proof",
    "fold_merkle_path",
    "verify_merkle_proof",
    "compute_tree_depth",
    "MerkleProver",
    "MerkleVerifier",
    "transaction_leaves",
]
