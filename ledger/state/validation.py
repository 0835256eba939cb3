"""
Chain Validation

Re-derives every commitment in a loaded chain and reports each comparison as
a CheckResult. A chain is trusted only if every check passes.

Per block (1-based block number n, 0-based height n-1):
- height continuity
- previous-hash link (genesis sentinel for the first block)
- non-empty body and matching transactions_count
- Merkle root recomputed from the body
- header hash recomputed from the canonical header encoding
- proof-of-work target for the recorded difficulty
"""

from __future__ import annotations

import logging

from ledger.crypto.hashing import hash_header, meets_difficulty, to_hex
from ledger.merkle.merkle_proofs import MerkleProver
from ledger.schemas.chain import GENESIS_PREVIOUS_HASH, Block, Blockchain, Transaction
from ledger.schemas.errors import ChainValidationError
from ledger.schemas.verification import CheckResult, VerificationResult


logger = logging.getLogger(__name__)


def compute_merkle_root(transactions: list[Transaction]) -> str:
    """0x-prefixed Merkle root of a block body. Raises EmptyTreeError if empty."""
    return to_hex(MerkleProver.compute_root_from_transactions(transactions))


def _make_check(check_id: str, ok: bool, message: str, **details) -> CheckResult:
    if ok:
        return CheckResult.passed(check_id, message, details)
    return CheckResult.failed(check_id, message, details)


def validate_block(
    block: Block,
    block_number: int,
    expected_previous_hash: str,
) -> list[CheckResult]:
    """Run all per-block checks for the block at 1-based ``block_number``."""
    header = block.header
    prefix = f"block_{block_number}"
    checks: list[CheckResult] = []

    checks.append(_make_check(
        f"{prefix}_height",
        header.height == block_number - 1,
        f"Block {block_number} height is {header.height}, expected {block_number - 1}",
        recorded=header.height, expected=block_number - 1,
    ))

    checks.append(_make_check(
        f"{prefix}_previous_hash",
        header.previous_block_header_hash == expected_previous_hash,
        f"Block {block_number} previous hash link",
        recorded=header.previous_block_header_hash, expected=expected_previous_hash,
    ))

    count = len(block.transactions)
    checks.append(_make_check(
        f"{prefix}_transactions_count",
        header.transactions_count == count,
        f"Block {block_number} declares {header.transactions_count} transactions, body has {count}",
        recorded=header.transactions_count, actual=count,
    ))

    if count == 0:
        checks.append(CheckResult.failed(
            f"{prefix}_merkle_root",
            f"Block {block_number} has no transactions",
        ))
    else:
        computed_root = compute_merkle_root(block.transactions)
        checks.append(_make_check(
            f"{prefix}_merkle_root",
            computed_root == header.transactions_merkle_root,
            f"Block {block_number} Merkle root",
            recorded=header.transactions_merkle_root, computed=computed_root,
        ))

    computed_hash = hash_header(header)
    checks.append(_make_check(
        f"{prefix}_header_hash",
        computed_hash == header.hash,
        f"Block {block_number} header hash",
        recorded=header.hash, computed=computed_hash,
    ))

    checks.append(_make_check(
        f"{prefix}_proof_of_work",
        meets_difficulty(header.hash, header.difficulty),
        f"Block {block_number} hash meets difficulty {header.difficulty}",
        difficulty=header.difficulty,
    ))

    return checks


def validate_blockchain(chain: Blockchain) -> VerificationResult:
    """
    Validate a whole chain.

    Returns:
        VerificationResult, ok only if every block passes every check
    """
    checks: list[CheckResult] = []
    expected_previous = GENESIS_PREVIOUS_HASH

    for i, block in enumerate(chain.blocks):
        checks.extend(validate_block(block, i + 1, expected_previous))
        # Link against the recomputed hash so a forged recorded hash cannot vouch for itself
        expected_previous = hash_header(block.header)

    if not chain.blocks:
        checks.append(CheckResult.passed("chain_empty", "Chain has no blocks"))

    result = VerificationResult.from_checks(checks)
    if result.ok:
        logger.debug(f"Chain of {len(chain.blocks)} blocks passed {len(checks)} checks")
    else:
        logger.error(
            f"Chain validation failed: {result.error_count} of {len(checks)} checks failed"
        )
    return result


def assert_valid_blockchain(chain: Blockchain) -> None:
    """
    Raise if the chain fails validation.

    Raises:
        ChainValidationError: Listing every failed check id
    """
    result = validate_blockchain(chain)
    if not result.ok:
        failed = result.get_failed_checks()
        raise ChainValidationError(
            message=f"Blockchain failed validation: {failed[0].message}",
            failed_checks=[check.check_id for check in failed],
        )
