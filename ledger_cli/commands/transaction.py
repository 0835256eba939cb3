"""
CLI Get-Transaction-Hash Command

Usage:
    ledgersim get-transaction-hash --blockchain-state chain.json \
        --block-number 1 --transaction-number-in-block 3 [--json]
"""

from __future__ import annotations

from argparse import Namespace

from ledger.engine import get_transaction_hash
from ledger.state import load_blockchain

from ledger_cli.commands.common import EXIT_SUCCESS, print_json, wants_json


def transaction_hash_cmd(args: Namespace) -> int:
    """Print the hash of one transaction. Range errors propagate to main()."""
    chain = load_blockchain(args.blockchain_state)
    tx_hash = get_transaction_hash(chain, args.block_number, args.transaction_number_in_block)

    if wants_json(args):
        print_json({
            "block_number": args.block_number,
            "transaction_number": args.transaction_number_in_block,
            "transaction_hash": tx_hash,
        })
    else:
        print(tx_hash)
    return EXIT_SUCCESS
