"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    ledgersim produce-blocks --blockchain-state PATH --mempool PATH -b N \
        --blockchain-state-output PATH --mempool-output PATH [--json]
    ledgersim get-transaction-hash --blockchain-state PATH --block-number N \
        --transaction-number-in-block M [--json]
    ledgersim generate-inclusion-proof --blockchain-state PATH --block-number N \
        --transaction-hash 0x... [--output PATH] [--json]
    ledgersim verify-inclusion-proof --blockchain-state PATH --block-number N \
        --inclusion-proof PATH [--json]

Environment Variables:
    LEDGERSIM_LOG_LEVEL         Log level (default: INFO)
    LEDGERSIM_LOG_FILE          Also write logs to this file
    LEDGERSIM_OUTPUT_FORMAT     Default output format: human or json
    LEDGERSIM_DIFFICULTY        Genesis proof-of-work difficulty
    LEDGERSIM_BLOCK_CAPACITY    Maximum transactions per block
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from ledger.schemas import LedgerException

from ledger_cli import __version__
from ledger_cli.commands import produce, prove, transaction, verify
from ledger_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
)
from ledger_cli.config import load_config


__all__ = [
    "EXIT_SUCCESS",
    "EXIT_RUNTIME_ERROR",
    "EXIT_VERIFICATION_FAILED",
    "create_parser",
    "main",
    "setup_logging",
]


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
    )


def _add_output_flags(subparser: argparse.ArgumentParser) -> None:
    subparser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    subparser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print a traceback on errors",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="ledgersim",
        description="Ledger simulator - produce blocks, look up transactions, and prove inclusion.",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="Path to configuration file (default: ./ledgersim.json or ~/.config/ledgersim/config.json)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- produce-blocks command ---
    produce_parser = subparsers.add_parser(
        "produce-blocks",
        help="Mine blocks from the mempool onto the chain",
        description="Drain the mempool into new blocks and write the updated chain and mempool.",
    )
    produce_parser.add_argument(
        "--blockchain-state",
        type=str,
        required=True,
        help="File storing the initial state of the blockchain",
    )
    produce_parser.add_argument(
        "--mempool",
        type=str,
        required=True,
        help="File storing the initial mempool",
    )
    produce_parser.add_argument(
        "--blocks-to-mine", "-b",
        type=int,
        required=True,
        help="Number of blocks to mine",
    )
    produce_parser.add_argument(
        "--blockchain-state-output",
        type=str,
        required=True,
        help="Output file for the extended blockchain",
    )
    produce_parser.add_argument(
        "--mempool-output",
        type=str,
        required=True,
        help="Output file for the remaining mempool",
    )
    _add_output_flags(produce_parser)
    produce_parser.set_defaults(func=produce.produce_cmd)

    # --- get-transaction-hash command ---
    tx_parser = subparsers.add_parser(
        "get-transaction-hash",
        help="Print the hash of a transaction",
        description="Look up a transaction by 1-based block and transaction numbers.",
    )
    tx_parser.add_argument(
        "--blockchain-state",
        type=str,
        required=True,
        help="File storing the blockchain",
    )
    tx_parser.add_argument(
        "--block-number",
        type=int,
        required=True,
        help="1-based number of the block",
    )
    tx_parser.add_argument(
        "--transaction-number-in-block",
        type=int,
        required=True,
        help="1-based number of the transaction within the block",
    )
    _add_output_flags(tx_parser)
    tx_parser.set_defaults(func=transaction.transaction_hash_cmd)

    # --- generate-inclusion-proof command ---
    prove_parser = subparsers.add_parser(
        "generate-inclusion-proof",
        help="Generate a Merkle inclusion proof for a transaction",
        description="Build the sibling path proving a transaction is part of a block.",
    )
    prove_parser.add_argument(
        "--blockchain-state",
        type=str,
        required=True,
        help="File storing the blockchain",
    )
    prove_parser.add_argument(
        "--block-number",
        type=int,
        required=True,
        help="1-based number of the block",
    )
    prove_parser.add_argument(
        "--transaction-hash",
        type=str,
        required=True,
        help="0x-prefixed hash of the transaction",
    )
    prove_parser.add_argument(
        "--output", "-o",
        type=str,
        default=None,
        help="Output file for the proof (printed to stdout if omitted)",
    )
    _add_output_flags(prove_parser)
    prove_parser.set_defaults(func=prove.prove_cmd)

    # --- verify-inclusion-proof command ---
    verify_parser = subparsers.add_parser(
        "verify-inclusion-proof",
        help="Verify a Merkle inclusion proof against the chain",
        description="Check a proof file against the Merkle root recorded in the block header.",
    )
    verify_parser.add_argument(
        "--blockchain-state",
        type=str,
        required=True,
        help="File storing the blockchain",
    )
    verify_parser.add_argument(
        "--block-number",
        type=int,
        required=True,
        help="1-based number of the block",
    )
    verify_parser.add_argument(
        "--inclusion-proof",
        type=str,
        required=True,
        help="File storing the inclusion proof",
    )
    _add_output_flags(verify_parser)
    verify_parser.set_defaults(func=verify.verify_cmd)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    # Load configuration
    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    # Setup logging
    log_level = args.log_level or config.log_level
    setup_logging(level=log_level, log_file=config.log_file)

    # Attach config to args for commands to use
    args.cli_config = config

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except LedgerException as e:
        if args.debug:
            traceback.print_exc()
        if args.json:
            print_json({"error": e.to_error_model().model_dump(mode="json")})
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if args.debug:
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
