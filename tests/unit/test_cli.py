"""
CLI Unit Tests
Tests for ledger_cli/main.py and the command modules.

Commands are driven through main(argv) against files in tmp_path.
"""
import json

import pytest

from ledger.crypto.hashing import hash_transaction
from ledger.schemas import Blockchain
from ledger.state import load_blockchain, load_mempool, save_blockchain, save_mempool
from ledger_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)

from fixtures import make_mempool


@pytest.fixture
def workspace(tmp_path):
    """Empty chain, five-transaction mempool and a cheap mining config."""
    config = tmp_path / "ledgersim.json"
    config.write_text(json.dumps({
        "runtime": {"mining": {"difficulty": 1, "block_capacity": 3}},
    }))
    save_blockchain(Blockchain(), tmp_path / "chain.json")
    save_mempool(make_mempool(5), tmp_path / "mempool.json")
    return tmp_path


def _produce(workspace, blocks: int, *extra: str) -> int:
    return main([
        "--config", str(workspace / "ledgersim.json"),
        "produce-blocks",
        "--blockchain-state", str(workspace / "chain.json"),
        "--mempool", str(workspace / "mempool.json"),
        "-b", str(blocks),
        "--blockchain-state-output", str(workspace / "chain.out.json"),
        "--mempool-output", str(workspace / "mempool.out.json"),
        *extra,
    ])


@pytest.fixture
def mined(workspace, capsys):
    """Workspace after mining two blocks (3 + 2 transactions)."""
    assert _produce(workspace, 2) == EXIT_SUCCESS
    capsys.readouterr()
    return workspace


def _global(workspace) -> list[str]:
    return ["--config", str(workspace / "ledgersim.json")]


def _state_bytes(workspace) -> tuple[bytes, bytes]:
    return (
        (workspace / "chain.out.json").read_bytes(),
        (workspace / "mempool.out.json").read_bytes(),
    )


class TestParser:

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_missing_required_argument(self):
        with pytest.raises(SystemExit) as exc_info:
            create_parser().parse_args(["get-transaction-hash", "--block-number", "1"])
        assert exc_info.value.code == 2

    def test_missing_config_file(self, tmp_path, capsys):
        code = main([
            "--config", str(tmp_path / "nope.json"),
            "get-transaction-hash", "--blockchain-state", "x",
            "--block-number", "1", "--transaction-number-in-block", "1",
        ])

        assert code == EXIT_RUNTIME_ERROR
        assert "Error loading configuration" in capsys.readouterr().err


class TestProduceBlocks:

    def test_produces_and_writes_outputs(self, workspace, capsys):
        assert _produce(workspace, 2) == EXIT_SUCCESS

        chain = load_blockchain(workspace / "chain.out.json")
        assert [b.header.transactions_count for b in chain.blocks] == [3, 2]
        assert len(load_mempool(workspace / "mempool.out.json")) == 0
        assert "blocks_produced: 2/2" in capsys.readouterr().out

    def test_inputs_untouched(self, workspace):
        before = (workspace / "chain.json").read_bytes()
        _produce(workspace, 1)

        assert (workspace / "chain.json").read_bytes() == before

    def test_partial_production_succeeds(self, workspace, capsys):
        assert _produce(workspace, 3, "--json") == EXIT_SUCCESS

        summary = json.loads(capsys.readouterr().out)
        assert summary["blocks_requested"] == 3
        assert summary["blocks_produced"] == 2
        assert summary["partial"] is True
        assert summary["mempool_remaining"] == 0

    def test_non_positive_block_count(self, workspace, capsys):
        assert _produce(workspace, 0) == EXIT_RUNTIME_ERROR
        assert "blocks_to_mine" in capsys.readouterr().err

    def test_missing_mempool(self, workspace, capsys):
        (workspace / "mempool.json").unlink()

        assert _produce(workspace, 1) == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_failed_write_leaves_no_chain_output(self, workspace, capsys):
        (workspace / "mempool.out.json").mkdir()

        assert _produce(workspace, 1) == EXIT_RUNTIME_ERROR
        assert not (workspace / "chain.out.json").exists()
        assert "directory" in capsys.readouterr().err

    def test_failed_write_keeps_previous_outputs(self, workspace):
        assert _produce(workspace, 1) == EXIT_SUCCESS
        before = (workspace / "chain.out.json").read_bytes()
        (workspace / "mempool.out.json").unlink()
        (workspace / "mempool.out.json").mkdir()

        assert _produce(workspace, 2) == EXIT_RUNTIME_ERROR
        assert (workspace / "chain.out.json").read_bytes() == before


class TestGetTransactionHash:

    def _run(self, workspace, block: int, tx: int, *extra: str) -> int:
        return main([
            *_global(workspace),
            "get-transaction-hash",
            "--blockchain-state", str(workspace / "chain.out.json"),
            "--block-number", str(block),
            "--transaction-number-in-block", str(tx),
            *extra,
        ])

    def test_prints_hash(self, mined, capsys):
        chain = load_blockchain(mined / "chain.out.json")

        assert self._run(mined, 2, 2) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == hash_transaction(chain.blocks[1].transactions[1])

    def test_state_files_unchanged(self, mined):
        before = _state_bytes(mined)

        assert self._run(mined, 1, 3) == EXIT_SUCCESS
        assert _state_bytes(mined) == before

    def test_json_output(self, mined, capsys):
        assert self._run(mined, 1, 1, "--json") == EXIT_SUCCESS

        data = json.loads(capsys.readouterr().out)
        assert data["block_number"] == 1
        assert data["transaction_hash"].startswith("0x")

    def test_transaction_out_of_range(self, mined, capsys):
        assert self._run(mined, 2, 3) == EXIT_RUNTIME_ERROR
        assert "[1, 2]" in capsys.readouterr().err

    def test_block_out_of_range(self, mined, capsys):
        assert self._run(mined, 3, 1) == EXIT_RUNTIME_ERROR
        assert "[1, 2]" in capsys.readouterr().err


class TestInclusionProofCommands:

    def _tx_hash(self, workspace, block: int, tx: int) -> str:
        chain = load_blockchain(workspace / "chain.out.json")
        return hash_transaction(chain.blocks[block - 1].transactions[tx - 1])

    def _generate(self, workspace, block: int, tx_hash: str, *extra: str) -> int:
        return main([
            *_global(workspace),
            "generate-inclusion-proof",
            "--blockchain-state", str(workspace / "chain.out.json"),
            "--block-number", str(block),
            "--transaction-hash", tx_hash,
            *extra,
        ])

    def _verify(self, workspace, block: int, proof_path, *extra: str) -> int:
        return main([
            *_global(workspace),
            "verify-inclusion-proof",
            "--blockchain-state", str(workspace / "chain.out.json"),
            "--block-number", str(block),
            "--inclusion-proof", str(proof_path),
            *extra,
        ])

    def test_generate_then_verify(self, mined, capsys):
        proof_path = mined / "proof.json"

        assert self._generate(mined, 1, self._tx_hash(mined, 1, 2), "--output", str(proof_path)) == EXIT_SUCCESS
        assert proof_path.exists()
        assert self._verify(mined, 1, proof_path) == EXIT_SUCCESS
        assert "valid: true" in capsys.readouterr().out

    def test_generate_prints_proof_without_output(self, mined, capsys):
        assert self._generate(mined, 2, self._tx_hash(mined, 2, 1)) == EXIT_SUCCESS

        proof = json.loads(capsys.readouterr().out)
        assert proof["block_number"] == 2
        assert proof["leaf_index"] == 0

    def test_generate_leaves_state_files_unchanged(self, mined):
        before = _state_bytes(mined)
        tx_hash = self._tx_hash(mined, 1, 2)

        assert self._generate(mined, 1, tx_hash) == EXIT_SUCCESS
        assert self._generate(mined, 1, tx_hash, "--output", str(mined / "proof.json")) == EXIT_SUCCESS
        assert _state_bytes(mined) == before

    def test_generate_not_found(self, mined, capsys):
        assert self._generate(mined, 2, self._tx_hash(mined, 1, 1)) == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_tampered_proof_fails(self, mined, capsys):
        proof_path = mined / "proof.json"
        self._generate(mined, 1, self._tx_hash(mined, 1, 3), "--output", str(proof_path))
        data = json.loads(proof_path.read_text())
        sibling = data["steps"][0]["sibling"]
        data["steps"][0]["sibling"] = sibling[:-1] + ("0" if sibling[-1] != "0" else "1")
        proof_path.write_text(json.dumps(data))
        capsys.readouterr()

        assert self._verify(mined, 1, proof_path, "--json") == EXIT_VERIFICATION_FAILED
        summary = json.loads(capsys.readouterr().out)
        assert summary["valid"] is False
        assert summary["errors"]

    def test_proof_against_wrong_block(self, mined):
        proof_path = mined / "proof.json"
        self._generate(mined, 1, self._tx_hash(mined, 1, 1), "--output", str(proof_path))

        assert self._verify(mined, 2, proof_path) == EXIT_VERIFICATION_FAILED

    def test_malformed_proof_json(self, mined):
        proof_path = mined / "proof.json"
        proof_path.write_text("{broken")

        assert self._verify(mined, 1, proof_path) == EXIT_VERIFICATION_FAILED

    def test_proof_missing_fields(self, mined):
        proof_path = mined / "proof.json"
        proof_path.write_text(json.dumps({"schema_version": "v1"}))

        assert self._verify(mined, 1, proof_path) == EXIT_VERIFICATION_FAILED

    def test_unsupported_proof_schema_version(self, mined, capsys):
        proof_path = mined / "proof.json"
        self._generate(mined, 1, self._tx_hash(mined, 1, 1), "--output", str(proof_path))
        data = json.loads(proof_path.read_text())
        data["schema_version"] = "v9"
        proof_path.write_text(json.dumps(data))
        capsys.readouterr()

        assert self._verify(mined, 1, proof_path) == EXIT_VERIFICATION_FAILED
        assert "Unsupported schema version" in capsys.readouterr().err

    def test_malformed_proof_json_summary(self, mined, capsys):
        proof_path = mined / "proof.json"
        proof_path.write_text(json.dumps(["not", "an", "object"]))

        assert self._verify(mined, 1, proof_path, "--json") == EXIT_VERIFICATION_FAILED
        summary = json.loads(capsys.readouterr().out)
        assert summary["valid"] is False
        assert summary["checks"] == []
        assert "JSON object" in summary["errors"][0]

    def test_malformed_proof_against_missing_block(self, mined):
        proof_path = mined / "proof.json"
        proof_path.write_text("{broken")

        assert self._verify(mined, 5, proof_path) == EXIT_RUNTIME_ERROR

    def test_missing_proof_file(self, mined, capsys):
        assert self._verify(mined, 1, mined / "absent.json") == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_verify_block_out_of_range(self, mined):
        proof_path = mined / "proof.json"
        self._generate(mined, 1, self._tx_hash(mined, 1, 1), "--output", str(proof_path))

        assert self._verify(mined, 5, proof_path) == EXIT_RUNTIME_ERROR


class TestJsonErrors:

    def test_range_error_as_json(self, mined, capsys):
        code = main([
            *_global(mined),
            "get-transaction-hash",
            "--blockchain-state", str(mined / "chain.out.json"),
            "--block-number", "9",
            "--transaction-number-in-block", "1",
            "--json",
        ])

        assert code == EXIT_RUNTIME_ERROR
        error = json.loads(capsys.readouterr().out)["error"]
        assert error["code"] == "BLOCK_OUT_OF_RANGE"
        assert error["details"]["max"] == 2
