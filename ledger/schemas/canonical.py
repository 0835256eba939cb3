"""
Schemas & Encoding
File: canonical.py

Purpose: Deterministic serialization for hashing and for persisted state.

Two encodings live here:

1. Canonical binary encoding of transactions and block headers. This is the
   only input ever fed to the hasher for transaction and block hashes.
   Layout (hard contract):
       version byte (ENCODING_VERSION) | record kind byte | fields...
   - unsigned integers: 8-byte big-endian
   - text: 4-byte big-endian length prefix + UTF-8 bytes
   Fields are written in the fixed order declared by TRANSACTION_LAYOUT and
   HEADER_LAYOUT. The recorded header ``hash`` is never part of the preimage.

2. Canonical JSON for the chain, mempool and proof files: sorted keys, no
   insignificant whitespace, so identical state always writes identical bytes.

CRITICAL: All outputs from this module MUST be deterministic across runs.
"""

from __future__ import annotations

import json
import math
import struct
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

from pydantic import BaseModel

from .errors import CanonicalizationException
from .versioning import ENCODING_VERSION

if TYPE_CHECKING:
    from .chain import BlockHeader, Transaction

# Canonical JSON separators - no whitespace
CANONICAL_JSON_SEPARATORS: tuple[str, str] = (",", ":")

MAX_UINT64 = 2**64 - 1
MAX_UINT32 = 2**32 - 1

_UINT64 = struct.Struct(">Q")
_LENGTH_PREFIX = struct.Struct(">I")

# Record kind bytes keep transaction and header preimages disjoint
TRANSACTION_RECORD = b"T"
HEADER_RECORD = b"H"

TRANSACTION_LAYOUT: tuple[tuple[str, str], ...] = (
    ("sender", "text"),
    ("receiver", "text"),
    ("amount", "uint"),
    ("transaction_fee", "uint"),
    ("lock_time", "uint"),
    ("signature", "text"),
)

HEADER_LAYOUT: tuple[tuple[str, str], ...] = (
    ("height", "uint"),
    ("previous_block_header_hash", "text"),
    ("transactions_merkle_root", "text"),
    ("timestamp", "uint"),
    ("difficulty", "uint"),
    ("miner", "text"),
    ("nonce", "uint"),
    ("transactions_count", "uint"),
)


# =============================================================================
# Binary Encoding (hash preimages)
# =============================================================================

def encode_uint(value: int, field_name: str = "") -> bytes:
    """
    Encode an unsigned integer as 8 big-endian bytes.

    Raises:
        CanonicalizationException: If the value is not an int in [0, 2^64 - 1].
    """
    # bool is a subclass of int and must not slip through
    if isinstance(value, bool) or not isinstance(value, int):
        raise CanonicalizationException(
            message=f"Field '{field_name}' must be an integer, got {type(value).__name__}",
            details={"field": field_name, "type": type(value).__name__},
        )
    if value < 0 or value > MAX_UINT64:
        raise CanonicalizationException(
            message=f"Field '{field_name}' out of unsigned 64-bit range: {value}",
            details={"field": field_name, "value": value},
        )
    return _UINT64.pack(value)


def encode_text(value: str, field_name: str = "") -> bytes:
    """Encode text as a 4-byte length prefix followed by its UTF-8 bytes."""
    if not isinstance(value, str):
        raise CanonicalizationException(
            message=f"Field '{field_name}' must be a string, got {type(value).__name__}",
            details={"field": field_name, "type": type(value).__name__},
        )
    data = value.encode("utf-8")
    if len(data) > MAX_UINT32:
        raise CanonicalizationException(
            message=f"Field '{field_name}' too long to encode ({len(data)} bytes)",
            details={"field": field_name, "length": len(data)},
        )
    return _LENGTH_PREFIX.pack(len(data)) + data


_FIELD_ENCODERS: dict[str, Callable[[Any, str], bytes]] = {
    "uint": encode_uint,
    "text": encode_text,
}


def encode_record(
    obj: Any,
    layout: tuple[tuple[str, str], ...],
    record_kind: bytes,
) -> bytes:
    """
    Encode the attributes named in ``layout`` of ``obj``, in layout order.

    Args:
        obj: Any object exposing the layout's attributes.
        layout: Ordered (attribute name, field kind) pairs.
        record_kind: One-byte record discriminator.

    Returns:
        The canonical byte encoding.
    """
    parts = [bytes([ENCODING_VERSION]), record_kind]
    for field_name, kind in layout:
        try:
            value = getattr(obj, field_name)
        except AttributeError as e:
            raise CanonicalizationException(
                message=f"Cannot encode {type(obj).__name__}: missing field '{field_name}'",
                details={"field": field_name, "type": type(obj).__name__},
            ) from e
        parts.append(_FIELD_ENCODERS[kind](value, field_name))
    return b"".join(parts)


def encode_transaction(transaction: "Transaction") -> bytes:
    """Canonical byte encoding of a transaction (hash preimage)."""
    return encode_record(transaction, TRANSACTION_LAYOUT, TRANSACTION_RECORD)


def encode_header(header: "BlockHeader") -> bytes:
    """Canonical byte encoding of a block header, excluding its own recorded hash."""
    return encode_record(header, HEADER_LAYOUT, HEADER_RECORD)


# =============================================================================
# Canonical JSON (persisted state)
# =============================================================================

def _validate_float(value: float, path: str = "") -> None:
    """
    Validate that a float is finite (not NaN or Infinity).

    Raises:
        CanonicalizationException: If the float is NaN or Infinity.
    """
    if not math.isfinite(value):
        raise CanonicalizationException(
            message=f"Non-finite float value encountered: {value}",
            details={"path": path, "value": str(value)},
        )


def canonicalize_value(value: Any, path: str = "") -> Any:
    """
    Recursively canonicalize a value for deterministic JSON serialization.

    Args:
        value: Any Python value to canonicalize.
        path: Current path for error reporting.

    Returns:
        A JSON-serializable canonical representation.

    Raises:
        CanonicalizationException: If the value cannot be canonicalized.
    """
    if value is None:
        return None

    if isinstance(value, bool):
        # Must check bool before int since bool is subclass of int
        return value

    if isinstance(value, (int, str)):
        return value

    if isinstance(value, float):
        _validate_float(value, path)
        return value

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, BaseModel):
        return canonicalize_value(value.model_dump(mode="json"), path)

    if isinstance(value, dict):
        return {
            k: canonicalize_value(v, f"{path}.{k}" if path else k)
            for k, v in value.items()
        }

    if isinstance(value, (list, tuple)):
        return [
            canonicalize_value(item, f"{path}[{i}]")
            for i, item in enumerate(value)
        ]

    if isinstance(value, bytes):
        return "0x" + value.hex()

    raise CanonicalizationException(
        message=f"Cannot canonicalize value of type {type(value).__name__}",
        details={"path": path, "type": type(value).__name__},
    )


def dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Returns:
        A JSON string with sorted keys, no extra whitespace and non-ASCII
        characters kept as-is.

    Raises:
        CanonicalizationException: If serialization fails.

    Example:
        >>> dumps_canonical({"b": 2, "a": 1})
        '{"a":1,"b":2}'
    """
    try:
        canonicalized = canonicalize_value(obj)
        return json.dumps(
            canonicalized,
            sort_keys=True,
            separators=CANONICAL_JSON_SEPARATORS,
            ensure_ascii=False,
        )
    except CanonicalizationException:
        raise
    except Exception as e:
        raise CanonicalizationException(
            message=f"Failed to serialize to canonical JSON: {e}",
            details={"type": type(obj).__name__, "error": str(e)},
        ) from e


def canonical_equals(obj1: Any, obj2: Any) -> bool:
    """Check if two objects have identical canonical JSON representations."""
    try:
        return dumps_canonical(obj1) == dumps_canonical(obj2)
    except CanonicalizationException:
        return False
