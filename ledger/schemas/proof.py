"""
Schemas & Encoding
File: proof.py

Purpose: Inclusion proof artifact. A proof is standalone: it carries the
block number, the leaf (transaction hash) and the sibling path, so it can be
stored and shipped separately from the chain file.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

from .chain import HashHex
from .versioning import SCHEMA_VERSION

# Side on which the sibling is consumed when hashing the parent
SiblingPosition = Literal["left", "right"]


class ProofStep(BaseModel):
    """One level of a Merkle path: a sibling hash and which side it sits on."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    sibling: HashHex
    position: SiblingPosition


class InclusionProof(BaseModel):
    """
    Merkle inclusion proof for one transaction in one block.

    ``merkle_root`` is informational only; verification always compares
    against the root recorded in the chain.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    schema_version: StrictStr = Field(default=SCHEMA_VERSION)
    block_number: StrictInt = Field(..., ge=1, description="1-based block number")
    transaction_hash: HashHex
    leaf_index: StrictInt = Field(..., ge=0, description="0-based position in the block body")
    merkle_root: HashHex
    steps: list[ProofStep] = Field(default_factory=list)

    @property
    def step_count(self) -> int:
        return len(self.steps)
