"""
CLI Verify-Inclusion-Proof Command

Verify a proof file against the Merkle root recorded in the chain.

Usage:
    ledgersim verify-inclusion-proof --blockchain-state chain.json \
        --block-number 1 --inclusion-proof proof.json [--json]

Exit codes:
    0 - proof is valid
    1 - runtime error (missing files, block out of range, invalid chain)
    2 - proof is invalid or malformed
"""

from __future__ import annotations

import logging
import sys
from argparse import Namespace
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from ledger.engine import check_inclusion_proof
from ledger.schemas import StateFileError, VerificationResult
from ledger.state import load_blockchain, load_inclusion_proof

from ledger_cli.commands.common import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    print_json,
    wants_json,
)


logger = logging.getLogger(__name__)


@dataclass
class VerifySummary:
    """Summary of proof verification for CLI output."""
    inclusion_proof: str = ""
    block_number: int = 0
    valid: bool = False
    checks: list[dict[str, Any]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if not d["errors"]:
            del d["errors"]
        return d


def build_summary(proof_path: str, block_number: int, result: VerificationResult) -> VerifySummary:
    return VerifySummary(
        inclusion_proof=proof_path,
        block_number=block_number,
        valid=result.ok,
        checks=[
            {"check_id": check.check_id, "ok": check.ok, "message": check.message}
            for check in result.checks
        ],
        errors=result.get_error_messages(),
    )


def print_summary_human(summary: VerifySummary) -> None:
    """Print summary in human-readable format."""
    print(f"proof: {summary.inclusion_proof}")
    print(f"block_number: {summary.block_number}")
    print(f"valid: {str(summary.valid).lower()}")
    for check in summary.checks:
        status = "✓" if check["ok"] else "✗"
        print(f"  {status} {check['check_id']}: {check['message']}")


def verify_cmd(args: Namespace) -> int:
    """
    Execute the verify-inclusion-proof command.

    Returns:
        Exit code (0=valid, 1=runtime error, 2=invalid or malformed proof)
    """
    proof_path = Path(args.inclusion_proof)
    if not proof_path.is_file():
        print(f"Error: Inclusion proof file not found: {proof_path}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    chain = load_blockchain(args.blockchain_state)
    # Range errors take precedence over proof errors
    chain.get_block(args.block_number)

    try:
        proof = load_inclusion_proof(proof_path)
    except StateFileError as e:
        logger.warning(f"Rejected inclusion proof: {e.message}")
        if wants_json(args):
            summary = VerifySummary(
                inclusion_proof=str(proof_path),
                block_number=args.block_number,
                errors=[e.message],
            )
            print_json(summary.to_dict())
        else:
            print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_VERIFICATION_FAILED

    result = check_inclusion_proof(chain, args.block_number, proof)

    summary = build_summary(str(proof_path), args.block_number, result)
    if wants_json(args):
        print_json(summary.to_dict())
    else:
        print_summary_human(summary)

    return EXIT_SUCCESS if result.ok else EXIT_VERIFICATION_FAILED
