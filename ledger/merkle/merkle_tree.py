"""
Merkle Tree Implementation
Deterministic Merkle tree construction, proof generation, and verification
over the transaction hashes of one block.

Canonical Commitment Rules (Hard Contracts):
1. Leaf: leaf = sha256(encode_transaction(tx)), i.e. the raw transaction hash
2. Parent hashing: parent = sha256(left + right), left always first
3. Padding rule: duplicate the last node if a level has an odd number of nodes
4. Empty leaves: rejected with EmptyTreeError (a block holds >= 1 transaction)
5. Single leaf: root = leaf, proof path is empty

Determinism Notes:
- No randomness or non-deterministic ordering
- Leaf ordering is the block body order
- This module never sorts leaves - it trusts input order
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ledger.crypto.hashing import hash_concat
from ledger.schemas.proof import SiblingPosition


PADDING_RULE = "duplicate-last"


class EmptyTreeError(ValueError):
    """Raised when a tree is requested over zero leaves."""

    def __init__(self) -> None:
        super().__init__("Cannot build a Merkle tree over an empty leaf list")


@dataclass(frozen=True)
class MerkleProof:
    """
    A Merkle proof for a single leaf.

    Attributes:
        leaf: The leaf hash being proven (32 bytes)
        index: The 0-based index of the leaf in the input leaf list
        path: (sibling hash, sibling position) pairs from the leaf level up
        root: The Merkle root this proof is against
    """
    leaf: bytes
    index: int
    path: tuple[tuple[bytes, SiblingPosition], ...]
    root: bytes

    def __post_init__(self) -> None:
        """Validate proof structure."""
        if self.index < 0:
            raise ValueError(f"Leaf index must be non-negative, got {self.index}")


def merkle_parent(left: bytes, right: bytes) -> bytes:
    """Compute the parent hash of two child nodes: sha256(left + right)."""
    return hash_concat(left, right)


def _next_level(level: list[bytes]) -> list[bytes]:
    # Caller guarantees an even number of nodes
    return [
        merkle_parent(level[i], level[i + 1])
        for i in range(0, len(level), 2)
    ]


class MerkleTree:
    """
    Binary hash tree over an ordered, non-empty list of leaf hashes.

    All levels are kept so proofs for any leaf are read off without rehashing.
    ``levels[0]`` holds the leaves as given (unpadded); each stored level above
    is built from the padded level below it.

    Example:
        >>> tree = MerkleTree([sha256(b"a"), sha256(b"b"), sha256(b"c")])
        >>> proof = tree.proof(2)
        >>> verify_merkle_proof(proof)
        True
    """

    def __init__(self, leaves: Sequence[bytes]) -> None:
        if len(leaves) == 0:
            raise EmptyTreeError()

        self.levels: list[list[bytes]] = [list(leaves)]

        # Single leaf: root is the leaf itself, no pairing
        if len(leaves) == 1:
            return

        current_level = list(leaves)
        while len(current_level) > 1:
            if len(current_level) % 2 == 1:
                current_level = current_level + [current_level[-1]]
            current_level = _next_level(current_level)
            self.levels.append(current_level)

    @property
    def leaves(self) -> list[bytes]:
        return self.levels[0]

    @property
    def root(self) -> bytes:
        return self.levels[-1][0]

    @property
    def depth(self) -> int:
        """Number of levels from leaves to root, inclusive."""
        return len(self.levels)

    def proof(self, index: int) -> MerkleProof:
        """
        Build the sibling path for the leaf at ``index``.

        At each level the sibling is ``index XOR 1``; when the node is the
        unpaired last one, the sibling is the node itself (duplicate-last).

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self.leaves):
            raise IndexError(
                f"Leaf index {index} out of range for {len(self.leaves)} leaves"
            )

        path: list[tuple[bytes, SiblingPosition]] = []
        current_index = index
        for level in self.levels[:-1]:
            sibling_index = current_index ^ 1
            sibling = level[sibling_index] if sibling_index < len(level) else level[current_index]
            position: SiblingPosition = "right" if current_index % 2 == 0 else "left"
            path.append((sibling, position))
            current_index //= 2

        return MerkleProof(
            leaf=self.leaves[index],
            index=index,
            path=tuple(path),
            root=self.root,
        )


def build_merkle_root(leaves: Sequence[bytes]) -> bytes:
    """
    Build a Merkle root from a sequence of leaf hashes.

    Padding Rule: Duplicate last node at each level if odd.
    Example: [a, b, c] -> [a, b, c, c] -> [parent(a,b), parent(c,c)]

    Raises:
        EmptyTreeError: If leaves is empty
    """
    return MerkleTree(leaves).root


def build_merkle_proof(leaves: Sequence[bytes], index: int) -> MerkleProof:
    """
    Generate a Merkle proof for the leaf at the given index.

    Raises:
        IndexError: If index is out of range
        EmptyTreeError: If leaves is empty
    """
    return MerkleTree(leaves).proof(index)


def fold_merkle_path(
    leaf: bytes,
    path: Sequence[tuple[bytes, SiblingPosition]],
) -> bytes:
    """
    Recompute a root by folding ``leaf`` with each sibling in order.

    A sibling tagged "left" is hashed as the left operand, "right" as the
    right operand.

    Raises:
        ValueError: If a step carries an unknown position tag
    """
    current_hash = leaf
    for sibling, position in path:
        if position == "left":
            current_hash = merkle_parent(sibling, current_hash)
        elif position == "right":
            current_hash = merkle_parent(current_hash, sibling)
        else:
            raise ValueError(f"Unknown sibling position: {position!r}")
    return current_hash


def verify_merkle_proof(proof: MerkleProof) -> bool:
    """
    Verify a Merkle proof against the root it carries.

    Returns:
        True if the recomputed root equals ``proof.root``, False otherwise
    """
    try:
        return fold_merkle_path(proof.leaf, proof.path) == proof.root
    except ValueError:
        return False


def compute_tree_depth(num_leaves: int) -> int:
    """
    Compute the depth of a Merkle tree with given number of leaves.

    Depth is the number of levels from leaves to root (inclusive).
    A single leaf has depth 1, two leaves have depth 2, etc. A proof for
    any leaf has exactly ``depth - 1`` steps.

    Returns:
        Tree depth (0 for empty tree)
    """
    if num_leaves == 0:
        return 0
    if num_leaves == 1:
        return 1

    depth = 1
    n = num_leaves
    while n > 1:
        # Account for padding
        if n % 2 == 1:
            n += 1
        n = n // 2
        depth += 1

    return depth


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
]
