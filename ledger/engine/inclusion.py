"""
Inclusion Proofs

Generation and verification of Merkle inclusion proofs for transactions in
a chain. Verification always checks against the Merkle root recorded in the
chain header, never against the root the proof claims.

Verification checks (in order):
1. proof_schema       - the proof parses as an InclusionProof
2. proof_block_number - the proof names the block being verified against
3. proof_leaf_index   - the leaf index lies inside the block body
4. proof_step_count   - one step per tree level below the root
5. proof_path_shape   - step positions agree with the leaf index
6. proof_claimed_root - the proof's informational root matches the header
7. proof_root         - folding the path reproduces the header root
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from ledger.crypto.hashing import from_hex, to_hex
from ledger.merkle.merkle_proofs import MerkleProver, MerkleVerifier, transaction_leaves
from ledger.merkle.merkle_tree import compute_tree_depth
from ledger.schemas.chain import Block, Blockchain, normalize_hash
from ledger.schemas.errors import ErrorCodes, LedgerError, TransactionNotFoundError
from ledger.schemas.proof import InclusionProof, ProofStep
from ledger.schemas.verification import CheckResult, VerificationResult
from ledger.schemas.versioning import is_compatible_schema_version


logger = logging.getLogger(__name__)


def find_transaction_index(block: Block, transaction_hash: str) -> int | None:
    """0-based index of the first transaction in ``block`` with this hash, or None."""
    target = from_hex(normalize_hash(transaction_hash))
    for index, leaf in enumerate(transaction_leaves(block.transactions)):
        if leaf == target:
            return index
    return None


def generate_inclusion_proof(
    chain: Blockchain,
    block_number: int,
    transaction_hash: str,
) -> InclusionProof:
    """
    Build the inclusion proof for a transaction in block ``block_number`` (1-based).

    The hash must be 0x-prefixed; hex case is ignored. When a block holds
    duplicate transactions the proof is for the first occurrence.

    Raises:
        BlockRangeError: If block_number is outside [1, len(chain)]
        ValueError: If transaction_hash is not a 0x-prefixed 32-byte hex string
        TransactionNotFoundError: If no transaction in the block has this hash
    """
    block = chain.get_block(block_number)
    index = find_transaction_index(block, transaction_hash)
    if index is None:
        raise TransactionNotFoundError(block_number, normalize_hash(transaction_hash))

    merkle_proof = MerkleProver.prove_transaction(block.transactions, index)
    proof = InclusionProof(
        block_number=block_number,
        transaction_hash=to_hex(merkle_proof.leaf),
        leaf_index=index,
        merkle_root=block.header.transactions_merkle_root,
        steps=[
            ProofStep(sibling=to_hex(sibling), position=position)
            for sibling, position in merkle_proof.path
        ],
    )
    logger.info(
        f"Generated inclusion proof for transaction {index + 1} of block "
        f"{block_number} with {proof.step_count} steps"
    )
    return proof


def _parse_proof(proof: InclusionProof | Mapping[str, Any]) -> tuple[InclusionProof | None, CheckResult]:
    if isinstance(proof, InclusionProof):
        parsed = proof
    else:
        try:
            parsed = InclusionProof.model_validate(proof)
        except ValidationError as e:
            return None, CheckResult.failed(
                "proof_schema",
                f"Malformed inclusion proof: {e.error_count()} schema errors",
                {"errors": [err["msg"] for err in e.errors()]},
            )

    if not is_compatible_schema_version(parsed.schema_version):
        return None, CheckResult.failed(
            "proof_schema",
            f"Unsupported proof schema version: {parsed.schema_version}",
        )
    return parsed, CheckResult.passed("proof_schema", "Proof is well formed")


def _path_matches_index(proof: InclusionProof) -> bool:
    index = proof.leaf_index
    for step in proof.steps:
        expected = "right" if index % 2 == 0 else "left"
        if step.position != expected:
            return False
        index //= 2
    return True


def check_inclusion_proof(
    chain: Blockchain,
    block_number: int,
    proof: InclusionProof | Mapping[str, Any],
) -> VerificationResult:
    """
    Run every inclusion check and report them individually.

    A malformed proof yields a failed result rather than an exception.

    Raises:
        BlockRangeError: If block_number is outside [1, len(chain)]
    """
    header = chain.get_block(block_number).header

    parsed, schema_check = _parse_proof(proof)
    if parsed is None:
        logger.warning(f"Inclusion proof rejected: {schema_check.message}")
        return VerificationResult.failure(
            [schema_check],
            error=LedgerError(
                code=ErrorCodes.MALFORMED_PROOF,
                message=schema_check.message,
                details=schema_check.details,
            ),
        )

    checks = [schema_check]

    checks.append(
        CheckResult.passed("proof_block_number", "Proof targets the requested block")
        if parsed.block_number == block_number
        else CheckResult.failed(
            "proof_block_number",
            f"Proof is for block {parsed.block_number}, not block {block_number}",
            {"proof_block_number": parsed.block_number, "block_number": block_number},
        )
    )

    checks.append(
        CheckResult.passed("proof_leaf_index", "Leaf index is inside the block body")
        if parsed.leaf_index < header.transactions_count
        else CheckResult.failed(
            "proof_leaf_index",
            f"Leaf index {parsed.leaf_index} exceeds block size {header.transactions_count}",
        )
    )

    expected_steps = max(compute_tree_depth(header.transactions_count) - 1, 0)
    checks.append(
        CheckResult.passed("proof_step_count", f"Proof has {expected_steps} steps")
        if parsed.step_count == expected_steps
        else CheckResult.failed(
            "proof_step_count",
            f"Expected {expected_steps} steps, got {parsed.step_count}",
            {"expected": expected_steps, "actual": parsed.step_count},
        )
    )

    checks.append(
        CheckResult.passed("proof_path_shape", "Step positions agree with the leaf index")
        if _path_matches_index(parsed)
        else CheckResult.failed(
            "proof_path_shape",
            f"Step positions do not match leaf index {parsed.leaf_index}",
        )
    )

    checks.append(
        CheckResult.passed("proof_claimed_root", "Claimed root matches the block header")
        if parsed.merkle_root == header.transactions_merkle_root
        else CheckResult.failed(
            "proof_claimed_root",
            "Proof claims a Merkle root different from the block header",
            {"claimed": parsed.merkle_root, "header": header.transactions_merkle_root},
        )
    )

    path = [(from_hex(step.sibling), step.position) for step in parsed.steps]
    recomputed = MerkleVerifier.compute_root(from_hex(parsed.transaction_hash), path)
    checks.append(
        CheckResult.passed("proof_root", "Recomputed root matches the block header")
        if recomputed == from_hex(header.transactions_merkle_root)
        else CheckResult.failed(
            "proof_root",
            "Recomputed root does not match the block header",
            {"recomputed": to_hex(recomputed), "header": header.transactions_merkle_root},
        )
    )

    result = VerificationResult.from_checks(checks)
    if result.ok:
        logger.info(f"Inclusion proof verified against block {block_number}")
    else:
        logger.warning(
            f"Inclusion proof failed against block {block_number}: "
            f"{'; '.join(result.get_error_messages())}"
        )
    return result


def verify_inclusion_proof(
    chain: Blockchain,
    block_number: int,
    proof: InclusionProof | Mapping[str, Any],
) -> bool:
    """True iff the proof shows its transaction is in block ``block_number``."""
    return check_inclusion_proof(chain, block_number, proof).ok
