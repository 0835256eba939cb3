"""
Merkle Proofs Convenience Wrappers
Thin class-based wrappers around merkle_tree.py for transaction lists.

This module provides:
- transaction_leaves: Leaf hashes for a block body
- MerkleProver: Generate roots and proofs from transactions
- MerkleVerifier: Verify proofs against an expected root
"""
from __future__ import annotations

from typing import Sequence

from ledger.crypto.hashing import hash_transaction_bytes
from ledger.merkle.merkle_tree import (
    MerkleProof,
    MerkleTree,
    build_merkle_root,
    fold_merkle_path,
)
from ledger.schemas.chain import Transaction
from ledger.schemas.proof import SiblingPosition


def transaction_leaves(transactions: Sequence[Transaction]) -> list[bytes]:
    """Leaf hashes for a block body, in body order."""
    return [hash_transaction_bytes(tx) for tx in transactions]


class MerkleProver:
    """
    Convenience class for generating Merkle roots and proofs.

    Example:
        >>> proof = MerkleProver.prove_transaction(block.transactions, index=1)
        >>> proof.leaf == hash_transaction_bytes(block.transactions[1])
        True
    """

    @staticmethod
    def prove(leaves: Sequence[bytes], index: int) -> MerkleProof:
        """
        Generate a Merkle proof for the leaf at the given index.

        Raises:
            IndexError: If index is out of range
            EmptyTreeError: If leaves is empty
        """
        return MerkleTree(leaves).proof(index)

    @staticmethod
    def prove_transaction(transactions: Sequence[Transaction], index: int) -> MerkleProof:
        """Generate a proof for the transaction at ``index`` of a block body."""
        return MerkleTree(transaction_leaves(transactions)).proof(index)

    @staticmethod
    def compute_root(leaves: Sequence[bytes]) -> bytes:
        """Compute the 32-byte Merkle root for a sequence of leaves."""
        return build_merkle_root(leaves)

    @staticmethod
    def compute_root_from_transactions(transactions: Sequence[Transaction]) -> bytes:
        """Compute the Merkle root of a block body."""
        return build_merkle_root(transaction_leaves(transactions))


class MerkleVerifier:
    """
    Convenience class for verifying Merkle paths against an expected root.
    """

    @staticmethod
    def compute_root(
        leaf: bytes,
        path: Sequence[tuple[bytes, SiblingPosition]],
    ) -> bytes:
        """Recompute the root implied by a leaf and its sibling path."""
        return fold_merkle_path(leaf, path)

    @staticmethod
    def verify_leaf_in_root(
        leaf: bytes,
        path: Sequence[tuple[bytes, SiblingPosition]],
        root: bytes,
    ) -> bool:
        """
        Verify a leaf is included under ``root`` using raw components.

        Returns:
            True if the path folds to ``root``; False otherwise, including for
            paths with unknown position tags
        """
        try:
            return fold_merkle_path(leaf, path) == root
        except ValueError:
            return False


__all__ = [
    "transaction_leaves",
    "MerkleProver",
    "MerkleVerifier",
]
