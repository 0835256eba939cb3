"""
Configuration Unit Tests
Tests for ledger/config/runtime.py and ledger_cli/config.py
"""
import json

import pytest

from ledger.config import DEFAULT_BLOCK_CAPACITY, MiningConfig, RuntimeConfig, StorageConfig
from ledger_cli.config import CLIConfig, load_config, load_config_from_file


class TestMiningConfig:

    def test_defaults(self):
        config = MiningConfig()

        assert config.block_capacity == DEFAULT_BLOCK_CAPACITY == 100
        assert config.block_interval == 10
        assert config.max_nonce == 2**32 - 1

    @pytest.mark.parametrize("field,value", [
        ("difficulty", -1),
        ("difficulty", 65),
        ("block_capacity", 0),
        ("block_interval", -1),
        ("max_nonce", -1),
        ("nonce_log_interval", 0),
    ])
    def test_invalid_values_rejected(self, field, value):
        with pytest.raises(ValueError, match=field):
            MiningConfig(**{field: value})


class TestRuntimeConfig:

    def test_from_dict_partial(self):
        config = RuntimeConfig.from_dict({"mining": {"block_capacity": 7}})

        assert config.mining.block_capacity == 7
        assert config.mining.difficulty == MiningConfig().difficulty
        assert config.storage == StorageConfig()

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "runtime.yaml"
        path.write_text("mining:\n  difficulty: 2\n  miner: '0xabc'\nstorage:\n  atomic_writes: false\n")
        config = RuntimeConfig.from_yaml(path)

        assert config.mining.difficulty == 2
        assert config.mining.miner == "0xabc"
        assert config.storage.atomic_writes is False

    def test_from_yaml_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "missing.yaml")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LEDGERSIM_BLOCK_CAPACITY", "5")
        monkeypatch.setenv("LEDGERSIM_MINER", "0xenv")
        monkeypatch.setenv("LEDGERSIM_ATOMIC_WRITES", "false")
        config = RuntimeConfig.from_dict({"mining": {"difficulty": 2}}).with_env_overrides()

        assert config.mining.block_capacity == 5
        assert config.mining.miner == "0xenv"
        assert config.mining.difficulty == 2
        assert config.storage.atomic_writes is False

    def test_env_nonce_log_interval(self, monkeypatch):
        monkeypatch.setenv("LEDGERSIM_NONCE_LOG_INTERVAL", "250")

        assert RuntimeConfig.from_env().mining.nonce_log_interval == 250

    def test_invalid_env_integer(self, monkeypatch):
        monkeypatch.setenv("LEDGERSIM_DIFFICULTY", "hard")

        with pytest.raises(ValueError, match="LEDGERSIM_DIFFICULTY"):
            RuntimeConfig.from_env()

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({"mining": {"difficulty": 4, "block_interval": 30}})
        assert RuntimeConfig.from_dict(config.to_dict()) == config

    def test_to_dict_sections(self):
        assert sorted(RuntimeConfig().to_dict()) == ["mining", "storage"]


class TestCLIConfig:

    def test_json_file(self, tmp_path):
        path = tmp_path / "ledgersim.json"
        path.write_text(json.dumps({
            "log_level": "DEBUG",
            "default_output_format": "json",
            "runtime": {"mining": {"difficulty": 1}},
        }))
        config = load_config_from_file(path)

        assert config.log_level == "DEBUG"
        assert config.default_output_format == "json"
        assert config.runtime.mining.difficulty == 1

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "ledgersim.yaml"
        path.write_text("log_file: run.log\nruntime:\n  mining:\n    block_capacity: 2\n")
        config = load_config_from_file(path)

        assert config.log_file == "run.log"
        assert config.runtime.mining.block_capacity == 2

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.json")

    def test_defaults_without_files(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert load_config() == CLIConfig()

    def test_cwd_file_picked_up(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        (tmp_path / "ledgersim.json").write_text(json.dumps({"log_level": "WARNING"}))

        assert load_config().log_level == "WARNING"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "ledgersim.json"
        path.write_text(json.dumps({"log_level": "DEBUG", "runtime": {"mining": {"difficulty": 1}}}))
        monkeypatch.setenv("LEDGERSIM_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("LEDGERSIM_DIFFICULTY", "0")
        config = load_config(path)

        assert config.log_level == "ERROR"
        assert config.runtime.mining.difficulty == 0
