"""
CLI Generate-Inclusion-Proof Command

Usage:
    ledgersim generate-inclusion-proof --blockchain-state chain.json \
        --block-number 1 --transaction-hash 0x... [--output proof.json] [--json]

Without ``--output`` the proof document is printed to stdout.
"""

from __future__ import annotations

import logging
from argparse import Namespace

from ledger.engine import generate_inclusion_proof
from ledger.schemas import dumps_canonical
from ledger.state import load_blockchain, save_inclusion_proof

from ledger_cli.commands.common import EXIT_SUCCESS, print_json, wants_json


logger = logging.getLogger(__name__)


def prove_cmd(args: Namespace) -> int:
    """Generate an inclusion proof and write or print it."""
    chain = load_blockchain(args.blockchain_state)
    proof = generate_inclusion_proof(chain, args.block_number, args.transaction_hash)

    if args.output:
        save_inclusion_proof(
            proof, args.output, atomic=args.cli_config.runtime.storage.atomic_writes
        )

    if wants_json(args):
        print_json({
            "block_number": proof.block_number,
            "transaction_hash": proof.transaction_hash,
            "leaf_index": proof.leaf_index,
            "merkle_root": proof.merkle_root,
            "steps": proof.step_count,
            "output": args.output,
        })
    elif args.output:
        print(f"proof written: {args.output}")
        print(f"merkle_root: {proof.merkle_root}")
        print(f"steps: {proof.step_count}")
    else:
        print(dumps_canonical(proof))
    return EXIT_SUCCESS
