"""
Core cryptographic utilities: SHA-256 hashing of canonical encodings.
"""
from .hashing import (
    DIGEST_SIZE,
    from_hex,
    hash_concat,
    hash_header,
    hash_transaction,
    hash_transaction_bytes,
    meets_difficulty,
    sha256,
    to_hex,
)

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
