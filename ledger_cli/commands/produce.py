"""
CLI Produce-Blocks Command

Mine blocks from a mempool onto an existing chain and write the new chain
and the remaining mempool.

Usage:
    ledgersim produce-blocks --blockchain-state chain.json --mempool mempool.json \
        --blocks-to-mine 2 --blockchain-state-output chain.out.json \
        --mempool-output mempool.out.json [--json]
"""

from __future__ import annotations

import logging
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from typing import Any

from ledger.config import RuntimeConfig
from ledger.engine import ProductionResult, produce_blocks
from ledger.state import load_blockchain, load_mempool, save_state

from ledger_cli.commands.common import EXIT_SUCCESS, print_json, wants_json


logger = logging.getLogger(__name__)


@dataclass
class ProduceSummary:
    """Summary of a production run for CLI output."""
    blocks_requested: int = 0
    blocks_produced: int = 0
    partial: bool = False
    chain_length: int = 0
    mempool_remaining: int = 0
    blockchain_state_output: str = ""
    mempool_output: str = ""
    blocks: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def build_summary(result: ProductionResult, args: Namespace) -> ProduceSummary:
    return ProduceSummary(
        blocks_requested=result.blocks_requested,
        blocks_produced=result.blocks_produced,
        partial=result.partial,
        chain_length=len(result.blockchain),
        mempool_remaining=len(result.mempool),
        blockchain_state_output=args.blockchain_state_output,
        mempool_output=args.mempool_output,
        blocks=[
            {
                "height": block.header.height,
                "hash": block.header.hash,
                "nonce": block.header.nonce,
                "transactions": block.header.transactions_count,
            }
            for block in result.produced_blocks
        ],
    )


def print_summary_human(summary: ProduceSummary) -> None:
    """Print summary in human-readable format."""
    print(f"blocks_produced: {summary.blocks_produced}/{summary.blocks_requested}")
    for block in summary.blocks:
        print(
            f"  #{block['height']} {block['hash']} "
            f"(nonce={block['nonce']}, transactions={block['transactions']})"
        )
    print(f"chain_length: {summary.chain_length}")
    print(f"mempool_remaining: {summary.mempool_remaining}")
    if summary.partial:
        print("warning: mempool exhausted before all requested blocks were produced")


def produce_cmd(args: Namespace) -> int:
    """
    Execute the produce-blocks command.

    Returns:
        Exit code (0 also when production stopped early)
    """
    runtime: RuntimeConfig = args.cli_config.runtime

    chain = load_blockchain(args.blockchain_state)
    mempool = load_mempool(args.mempool)
    logger.info(
        f"Loaded chain with {len(chain)} blocks and mempool with {len(mempool)} transactions"
    )

    result = produce_blocks(chain, mempool, args.blocks_to_mine, runtime.mining)

    save_state(
        result.blockchain,
        args.blockchain_state_output,
        result.mempool,
        args.mempool_output,
        atomic=runtime.storage.atomic_writes,
    )

    summary = build_summary(result, args)
    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)
    return EXIT_SUCCESS
