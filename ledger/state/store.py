"""
State Storage

Load and save the chain, mempool and inclusion-proof files.

File formats (canonical JSON, UTF-8):
- chain:   {"schema_version": "v1", "blocks": [{"header": {...}, "transactions": [...]}]}
- mempool: {"schema_version": "v1", "transactions": [...]}   (arrival order = list order)
- proof:   {"schema_version": "v1", "block_number": n, "transaction_hash": ..., "steps": [...]}

Loading is all-or-nothing: a file that cannot be read, parsed, or validated
raises and nothing from it is used. Writes go through a temporary file and
os.replace so a failed run never leaves a half-written file behind, and the
chain and mempool produced by one run are committed together (save_state).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ledger.schemas.canonical import dumps_canonical
from ledger.schemas.chain import Blockchain, Mempool, Transaction
from ledger.schemas.errors import (
    ChainValidationError,
    MempoolValidationError,
    StateFileError,
)
from ledger.schemas.proof import InclusionProof
from ledger.schemas.versioning import (
    SCHEMA_VERSION,
    UnsupportedSchemaVersionError,
    assert_supported_schema_version,
)
from ledger.state.validation import assert_valid_blockchain


logger = logging.getLogger(__name__)


# =============================================================================
# Raw JSON IO
# =============================================================================

def read_json_document(path: str | Path) -> Any:
    """
    Read and parse a JSON file.

    Raises:
        StateFileError: If the file is missing, unreadable, or not valid JSON
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        raise StateFileError(f"File not found: {path}", path=str(path)) from e
    except OSError as e:
        raise StateFileError(f"Cannot read {path}: {e}", path=str(path)) from e

    try:
        return json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise StateFileError(f"Invalid JSON in {path}: {e}", path=str(path)) from e


def _encode_document(obj: Any) -> bytes:
    return (dumps_canonical(obj) + "\n").encode("utf-8")


def _prepare_target(path: Path) -> None:
    if path.is_dir():
        raise StateFileError(f"Cannot write {path}: it is a directory", path=str(path))
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)


def _write_temp(path: Path, content: bytes) -> str:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    with os.fdopen(fd, "wb") as f:
        f.write(content)
    return tmp_name


def write_json_documents(documents: list[tuple[str | Path, Any]], *, atomic: bool = True) -> list[Path]:
    """
    Write several documents as canonical JSON, all or nothing.

    With ``atomic`` every document is first written to a sibling temporary
    file. Only when all of them are on disk are they moved into place. If a
    move fails, targets already replaced get their previous content back, so
    either every file is updated or none is.

    Raises:
        StateFileError: A target is a directory or cannot be written
    """
    pending = [(Path(path), _encode_document(obj)) for path, obj in documents]
    for path, _ in pending:
        _prepare_target(path)

    if not atomic:
        for path, content in pending:
            path.write_bytes(content)
        return [path for path, _ in pending]

    temps: list[str] = []
    replaced: list[tuple[Path, bytes | None]] = []
    current = pending[0][0]
    try:
        for current, content in pending:
            temps.append(_write_temp(current, content))
        for (current, _), tmp_name in zip(pending, temps):
            previous = current.read_bytes() if current.is_file() else None
            os.replace(tmp_name, current)
            replaced.append((current, previous))
    except BaseException as e:
        for path, previous in reversed(replaced):
            if previous is None:
                path.unlink(missing_ok=True)
            else:
                os.replace(_write_temp(path, previous), path)
        for tmp_name in temps:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
        if isinstance(e, OSError):
            raise StateFileError(f"Cannot write {current}: {e}", path=str(current)) from e
        raise
    return [path for path, _ in pending]


def write_json_document(path: str | Path, obj: Any, *, atomic: bool = True) -> Path:
    """
    Write ``obj`` as canonical JSON.

    With ``atomic`` the content is written to a sibling temporary file and
    moved into place, so readers never see a partial file.
    """
    return write_json_documents([(path, obj)], atomic=atomic)[0]


def _require_object(data: Any, path: Path, kind: str) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise StateFileError(
            f"{kind} file {path} must hold a JSON object, got {type(data).__name__}",
            path=str(path),
        )
    version = data.get("schema_version")
    if not isinstance(version, str):
        raise StateFileError(f"{kind} file {path} has no schema_version", path=str(path))
    try:
        assert_supported_schema_version(version)
    except UnsupportedSchemaVersionError as e:
        raise StateFileError(str(e), path=str(path), details={"schema_version": version}) from e
    return data


# =============================================================================
# Blockchain
# =============================================================================

def parse_blockchain(data: Any, path: Path | None = None, *, validate: bool = True) -> Blockchain:
    """
    Build a Blockchain from a parsed document and, by default, validate it.

    Raises:
        StateFileError: Wrong top-level shape or unsupported schema version
        ChainValidationError: Malformed blocks or failed integrity checks
    """
    source = path or Path("<memory>")
    data = _require_object(data, source, "Blockchain")
    try:
        chain = Blockchain.model_validate(data)
    except ValidationError as e:
        raise ChainValidationError(
            message=f"Malformed blockchain in {source}: {e.error_count()} schema errors",
            details={"path": str(source), "errors": str(e)},
        ) from e

    if validate:
        assert_valid_blockchain(chain)
    return chain


def load_blockchain(path: str | Path, *, validate: bool = True) -> Blockchain:
    """Load a chain file; the chain is fully re-validated unless ``validate`` is False."""
    path = Path(path)
    logger.info(f"Loading the blockchain from {path}")
    chain = parse_blockchain(read_json_document(path), path, validate=validate)
    logger.info(f"Loaded {len(chain.blocks)} blocks")
    return chain


def save_blockchain(chain: Blockchain, path: str | Path, *, atomic: bool = True) -> Path:
    """Write a chain file."""
    logger.info(f"Writing {len(chain.blocks)} blocks to {path}")
    return write_json_document(path, chain, atomic=atomic)


# =============================================================================
# Mempool
# =============================================================================

def parse_mempool(data: Any, path: Path | None = None) -> Mempool:
    """
    Build a Mempool from a parsed document.

    Raises:
        StateFileError: Wrong top-level shape or unsupported schema version
        MempoolValidationError: A transaction is malformed
    """
    source = path or Path("<memory>")
    data = _require_object(data, source, "Mempool")

    raw_transactions = data.get("transactions")
    if not isinstance(raw_transactions, list):
        raise MempoolValidationError(
            f"Mempool file {source} must hold a 'transactions' list",
            details={"path": str(source)},
        )
    unknown = set(data) - {"schema_version", "transactions"}
    if unknown:
        raise MempoolValidationError(
            f"Mempool file {source} has unexpected keys: {sorted(unknown)}",
            details={"path": str(source), "keys": sorted(unknown)},
        )

    transactions: list[Transaction] = []
    for i, raw in enumerate(raw_transactions):
        try:
            transactions.append(Transaction.model_validate(raw))
        except ValidationError as e:
            raise MempoolValidationError(
                f"Malformed transaction at position {i + 1} in {source}",
                details={"path": str(source), "position": i + 1, "errors": str(e)},
            ) from e

    return Mempool.from_transactions(transactions)


def load_mempool(path: str | Path) -> Mempool:
    """Load a mempool file."""
    path = Path(path)
    logger.info(f"Loading the mempool from {path}")
    mempool = parse_mempool(read_json_document(path), path)
    logger.info(f"Loaded {len(mempool.entries)} pending transactions")
    return mempool


def mempool_document(mempool: Mempool) -> dict[str, Any]:
    """Persisted form of a mempool: its transactions in arrival order."""
    return {
        "schema_version": SCHEMA_VERSION,
        "transactions": [tx.model_dump(mode="json") for tx in mempool.transactions],
    }


def save_mempool(mempool: Mempool, path: str | Path, *, atomic: bool = True) -> Path:
    """Write a mempool file."""
    logger.info(f"Writing {len(mempool.entries)} pending transactions to {path}")
    return write_json_document(path, mempool_document(mempool), atomic=atomic)


# =============================================================================
# Chain + Mempool
# =============================================================================

def save_state(
    chain: Blockchain,
    chain_path: str | Path,
    mempool: Mempool,
    mempool_path: str | Path,
    *,
    atomic: bool = True,
) -> tuple[Path, Path]:
    """
    Write a chain file and a mempool file together.

    Both files are updated or neither is, so a failed write never leaves a
    chain that already holds transactions still listed in the mempool.
    """
    logger.info(
        f"Writing {len(chain.blocks)} blocks to {chain_path} and "
        f"{len(mempool.entries)} pending transactions to {mempool_path}"
    )
    chain_out, mempool_out = write_json_documents(
        [(chain_path, chain), (mempool_path, mempool_document(mempool))],
        atomic=atomic,
    )
    return chain_out, mempool_out


# =============================================================================
# Inclusion Proofs
# =============================================================================

def load_inclusion_proof(path: str | Path) -> InclusionProof:
    """
    Load and parse a proof file.

    Raises:
        StateFileError: Unreadable file, bad JSON, or malformed proof
    """
    path = Path(path)
    data = _require_object(read_json_document(path), path, "Inclusion proof")
    try:
        return InclusionProof.model_validate(data)
    except ValidationError as e:
        raise StateFileError(
            f"Malformed inclusion proof in {path}: {e.error_count()} schema errors",
            path=str(path),
            details={"errors": str(e)},
        ) from e


def save_inclusion_proof(proof: InclusionProof, path: str | Path, *, atomic: bool = True) -> Path:
    """Write a proof file."""
    logger.info(f"Writing inclusion proof for block {proof.block_number} to {path}")
    return write_json_document(path, proof, atomic=atomic)
