"""
Schemas & Encoding
File: chain.py

Purpose: Ledger data model - transactions, block headers, blocks, the
blockchain itself and the mempool of pending transactions.

These models carry data only. Hashing lives in ledger.crypto and integrity
checks in ledger.state.validation so the schemas stay import-cycle free.
"""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, StrictInt, StrictStr

from .canonical import MAX_UINT32, MAX_UINT64
from .errors import BlockRangeError
from .versioning import SCHEMA_VERSION

_HASH_PATTERN = re.compile(r"^0x[0-9a-fA-F]{64}$")

# Fixed previous-hash of the genesis block (all-zero digest)
GENESIS_PREVIOUS_HASH = "0x" + "00" * 32


def normalize_hash(value: str) -> str:
    """Validate a 0x-prefixed 32-byte hex hash and return it lowercased."""
    if not _HASH_PATTERN.match(value):
        raise ValueError(f"expected a 0x-prefixed 32-byte hex hash, got {value!r}")
    return value.lower()


HashHex = Annotated[StrictStr, AfterValidator(normalize_hash)]


class Transaction(BaseModel):
    """
    A value transfer recorded on the ledger.

    Identity is the hash of the canonical encoding; two transactions with
    identical fields are the same transaction. The signature is carried as
    opaque text and never checked.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    sender: StrictStr = Field(..., description="Sender address")
    receiver: StrictStr = Field(..., description="Receiver address")
    amount: StrictInt = Field(..., ge=0, le=MAX_UINT64)
    transaction_fee: StrictInt = Field(default=0, ge=0, le=MAX_UINT64)
    lock_time: StrictInt = Field(default=0, ge=0, le=MAX_UINT32)
    signature: StrictStr = Field(default="", description="Opaque signature text")


class BlockHeader(BaseModel):
    """
    Block header. ``hash`` records SHA-256 over the canonical encoding of every
    other field.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    height: StrictInt = Field(..., ge=0, le=MAX_UINT64, description="0-based block index")
    previous_block_header_hash: HashHex
    transactions_merkle_root: HashHex
    timestamp: StrictInt = Field(..., ge=0, le=MAX_UINT64)
    difficulty: StrictInt = Field(
        default=0, ge=0, le=64,
        description="Required number of leading zero hex digits in the header hash",
    )
    miner: StrictStr = Field(default="")
    nonce: StrictInt = Field(default=0, ge=0, le=MAX_UINT64)
    transactions_count: StrictInt = Field(..., ge=0, le=MAX_UINT64)
    hash: HashHex


class Block(BaseModel):
    """A header plus its ordered transaction body."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    header: BlockHeader
    transactions: list[Transaction] = Field(default_factory=list)

    @property
    def height(self) -> int:
        return self.header.height

    @property
    def hash(self) -> str:
        return self.header.hash


class Blockchain(BaseModel):
    """
    Ordered, append-only sequence of blocks.

    Operations never edit a chain in place; ``append`` returns a new chain.
    Block numbers at the public boundary are 1-based.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: StrictStr = Field(default=SCHEMA_VERSION)
    blocks: list[Block] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.blocks)

    @property
    def tip(self) -> Block | None:
        """The last block, or None for an empty chain."""
        return self.blocks[-1] if self.blocks else None

    def get_block(self, block_number: int) -> Block:
        """
        Return the block with the given 1-based number.

        Raises:
            BlockRangeError: If block_number is outside [1, len(chain)].
        """
        if block_number < 1 or block_number > len(self.blocks):
            raise BlockRangeError(block_number, len(self.blocks))
        return self.blocks[block_number - 1]

    def append(self, block: Block) -> "Blockchain":
        """Return a new chain with ``block`` appended."""
        return self.model_copy(update={"blocks": [*self.blocks, block]})


class MempoolEntry(BaseModel):
    """A pending transaction plus its arrival position."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sequence: StrictInt = Field(..., ge=0, description="Arrival order, 0-based")
    transaction: Transaction


class Mempool(BaseModel):
    """
    Ordered pool of pending transactions. Arrival order is the selection order.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: StrictStr = Field(default=SCHEMA_VERSION)
    entries: list[MempoolEntry] = Field(default_factory=list)

    @classmethod
    def from_transactions(cls, transactions: list[Transaction]) -> "Mempool":
        """Build a mempool whose arrival order is the list order."""
        return cls(entries=[
            MempoolEntry(sequence=i, transaction=tx)
            for i, tx in enumerate(transactions)
        ])

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def transactions(self) -> list[Transaction]:
        return [entry.transaction for entry in self.entries]

    def take(self, count: int) -> tuple[list[MempoolEntry], "Mempool"]:
        """
        Split off up to ``count`` entries from the front.

        Returns:
            (selected entries, mempool holding the remaining entries)
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        selected = self.entries[:count]
        remaining = self.model_copy(update={"entries": self.entries[count:]})
        return selected, remaining
