"""
Block Producer

Drains the mempool front-to-back into new blocks, mines each header with a
proof-of-work nonce search and links it to its predecessor.

Production rules:
- each block takes up to ``block_capacity`` entries in arrival order
- height = previous height + 1 (0 for the first block)
- previous hash = recorded hash of the chain tip (genesis sentinel if empty)
- difficulty and miner are inherited from the tip (config values for genesis)
- timestamp = tip timestamp + block_interval (config genesis_timestamp first)
- nonce = smallest value from 0 whose header hash meets the difficulty

Nothing reads the wall clock, so identical inputs give byte-identical output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Sequence

from ledger.config.runtime import MiningConfig
from ledger.crypto.hashing import meets_difficulty, sha256, to_hex
from ledger.schemas.canonical import dumps_canonical, encode_header
from ledger.schemas.chain import (
    GENESIS_PREVIOUS_HASH,
    Block,
    BlockHeader,
    Blockchain,
    Mempool,
    Transaction,
)
from ledger.schemas.errors import MiningError
from ledger.state.validation import compute_merkle_root


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductionResult:
    """Outcome of one produce_blocks call."""
    blockchain: Blockchain
    mempool: Mempool
    blocks_requested: int
    produced_blocks: tuple[Block, ...]

    @property
    def blocks_produced(self) -> int:
        return len(self.produced_blocks)

    @property
    def partial(self) -> bool:
        """True when the mempool ran dry before all requested blocks were produced."""
        return self.blocks_produced < self.blocks_requested

    @property
    def transactions_committed(self) -> int:
        return sum(len(block.transactions) for block in self.produced_blocks)


def next_header_fields(
    previous: Block | None,
    transactions: Sequence[Transaction],
    config: MiningConfig,
) -> dict:
    """Header fields of the block following ``previous``, minus nonce and hash."""
    merkle_root = compute_merkle_root(list(transactions))
    logger.info(f"Merkle root: {merkle_root}")

    if previous is None:
        return {
            "height": 0,
            "previous_block_header_hash": GENESIS_PREVIOUS_HASH,
            "transactions_merkle_root": merkle_root,
            "timestamp": config.genesis_timestamp,
            "difficulty": config.difficulty,
            "miner": config.miner,
            "transactions_count": len(transactions),
        }

    header = previous.header
    return {
        "height": header.height + 1,
        "previous_block_header_hash": header.hash,
        "transactions_merkle_root": merkle_root,
        "timestamp": header.timestamp + config.block_interval,
        "difficulty": header.difficulty,
        "miner": header.miner,
        "transactions_count": len(transactions),
    }


def mine_header(fields: dict, config: MiningConfig) -> BlockHeader:
    """
    Search nonces from 0 upwards until the header hash meets the difficulty.

    Raises:
        MiningError: If no nonce up to ``config.max_nonce`` satisfies the target
    """
    # Plain namespace rather than BlockHeader: no pydantic validation per nonce.
    # encode_header only reads the attributes.
    draft = SimpleNamespace(nonce=0, **fields)
    difficulty = fields["difficulty"]

    logger.debug(f"Assembled the header of the new block: {dumps_canonical(fields)}")
    logger.info(f"Mining block {fields['height']} at difficulty {difficulty}...")

    for nonce in range(config.max_nonce + 1):
        draft.nonce = nonce
        header_hash = to_hex(sha256(encode_header(draft)))
        if meets_difficulty(header_hash, difficulty):
            logger.info(f"The nonce required to make the header hash valid is: {nonce}")
            return BlockHeader(nonce=nonce, hash=header_hash, **fields)
        if nonce and nonce % config.nonce_log_interval == 0:
            logger.info(f"Tested nonce number: {nonce}")

    raise MiningError(
        f"No nonce up to {config.max_nonce} meets difficulty {difficulty}",
        height=fields["height"],
        details={"difficulty": difficulty, "max_nonce": config.max_nonce},
    )


def mine_block(
    transactions: Sequence[Transaction],
    previous: Block | None,
    config: MiningConfig,
) -> Block:
    """Assemble and mine the block that follows ``previous``."""
    if not transactions:
        raise ValueError("A block must contain at least one transaction")

    logger.info(f"Producing a new block with {len(transactions)} transactions...")
    fields = next_header_fields(previous, transactions, config)
    header = mine_header(fields, config)
    logger.info(f"Successfully mined block {header.height} with hash {header.hash}")
    return Block(header=header, transactions=list(transactions))


def produce_blocks(
    chain: Blockchain,
    mempool: Mempool,
    blocks_to_mine: int,
    config: MiningConfig | None = None,
) -> ProductionResult:
    """
    Produce up to ``blocks_to_mine`` blocks from the mempool.

    Inputs are never modified; the result carries the extended chain and the
    mempool with exactly the committed entries removed. Running out of
    transactions stops production early and is reported via ``partial``.

    Raises:
        ValueError: If blocks_to_mine is not a positive integer
        MiningError: If a header cannot be mined within the nonce bound
    """
    if isinstance(blocks_to_mine, bool) or not isinstance(blocks_to_mine, int) or blocks_to_mine < 1:
        raise ValueError(f"blocks_to_mine must be a positive integer, got {blocks_to_mine!r}")
    config = config or MiningConfig()

    produced: list[Block] = []
    for _ in range(blocks_to_mine):
        if len(mempool.entries) == 0:
            break
        selected, mempool = mempool.take(config.block_capacity)
        block = mine_block([entry.transaction for entry in selected], chain.tip, config)
        chain = chain.append(block)
        produced.append(block)

    result = ProductionResult(
        blockchain=chain,
        mempool=mempool,
        blocks_requested=blocks_to_mine,
        produced_blocks=tuple(produced),
    )
    if result.partial:
        logger.warning(
            f"Mempool exhausted: produced {result.blocks_produced} of "
            f"{blocks_to_mine} requested blocks"
        )
    else:
        logger.info(f"Produced {result.blocks_produced} blocks")
    return result
