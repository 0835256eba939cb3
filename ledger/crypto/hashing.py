"""
Hashing Utilities
SHA-256 hashing for canonical encodings, Merkle nodes and block headers.

This module provides:
- SHA-256 hashing for raw bytes
- Transaction and header hashing (via the canonical binary encoder)
- Hex encoding/decoding with 0x prefix
- Proof-of-work target checks

Security/Determinism Notes:
- One hash function (SHA-256) is used everywhere so proofs stay self-consistent
- All operations are pure and deterministic
"""
from __future__ import annotations

import hashlib

from ledger.schemas.canonical import encode_header, encode_transaction
from ledger.schemas.chain import BlockHeader, Transaction

DIGEST_SIZE = 32


def sha256(data: bytes) -> bytes:
    """
    Compute SHA-256 hash of raw bytes.

    Example:
        >>> sha256(b"hello").hex()
        '2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824'
    """
    return hashlib.sha256(data).digest()


def hash_concat(left: bytes, right: bytes) -> bytes:
    """
    Hash the concatenation of two byte sequences, left first.

    This is used for computing Merkle parent hashes:
    parent = sha256(left + right)
    """
    return sha256(left + right)


def to_hex(data: bytes) -> str:
    """
    Convert bytes to hexadecimal string with 0x prefix.

    Example:
        >>> to_hex(bytes.fromhex("deadbeef"))
        '0xdeadbeef'
    """
    return "0x" + data.hex()


def from_hex(hex_string: str) -> bytes:
    """
    Convert hexadecimal string (with 0x prefix) to bytes.

    Raises:
        ValueError: If string doesn't start with 0x, has odd length,
                   or contains invalid hex characters
    """
    if not hex_string.startswith("0x"):
        raise ValueError(
            f"Hex string must start with '0x' prefix, got: {hex_string[:10]}..."
        )

    hex_content = hex_string[2:]

    if len(hex_content) % 2 != 0:
        raise ValueError(
            f"Hex string must have even length after 0x prefix, "
            f"got length {len(hex_content)}"
        )

    try:
        return bytes.fromhex(hex_content)
    except ValueError as e:
        raise ValueError(f"Invalid hex characters in string: {e}") from e


def hash_transaction_bytes(transaction: Transaction) -> bytes:
    """Raw 32-byte transaction hash: sha256(encode_transaction(tx))."""
    return sha256(encode_transaction(transaction))


def hash_transaction(transaction: Transaction) -> str:
    """0x-prefixed transaction hash."""
    return to_hex(hash_transaction_bytes(transaction))


def hash_header(header: BlockHeader) -> str:
    """0x-prefixed block header hash: sha256(encode_header(header))."""
    return to_hex(sha256(encode_header(header)))


def meets_difficulty(header_hash: str, difficulty: int) -> bool:
    """
    Check the proof-of-work target: the hash must have ``difficulty``
    leading zero hex digits after the 0x prefix.
    """
    if difficulty <= 0:
        return True
    digits = header_hash[2:]
    return len(digits) >= difficulty and digits[:difficulty] == "0" * difficulty


__all__ = [
    "DIGEST_SIZE",
    "sha256",
    "hash_concat",
    "to_hex",
    "from_hex",
    "hash_transaction_bytes",
    "hash_transaction",
    "hash_header",
    "meets_difficulty",
]
