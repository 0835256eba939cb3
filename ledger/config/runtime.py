"""
Runtime Configuration

Central configuration for block production and state storage.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "LEDGERSIM_"

DEFAULT_DIFFICULTY = 3
DEFAULT_MINER = "0x0000000000000000000000000000000000000000"
DEFAULT_GENESIS_TIMESTAMP = 1_700_000_000
DEFAULT_BLOCK_INTERVAL = 10
DEFAULT_BLOCK_CAPACITY = 100
DEFAULT_MAX_NONCE = 2**32 - 1
DEFAULT_NONCE_LOG_INTERVAL = 100_000


@dataclass
class MiningConfig:
    """
    Configuration for block production.

    ``difficulty``, ``miner`` and ``genesis_timestamp`` only seed the genesis
    block; later blocks inherit difficulty and miner from their predecessor
    and advance the timestamp by ``block_interval``.
    """
    difficulty: int = DEFAULT_DIFFICULTY
    miner: str = DEFAULT_MINER
    genesis_timestamp: int = DEFAULT_GENESIS_TIMESTAMP
    block_interval: int = DEFAULT_BLOCK_INTERVAL
    block_capacity: int = DEFAULT_BLOCK_CAPACITY
    max_nonce: int = DEFAULT_MAX_NONCE
    nonce_log_interval: int = DEFAULT_NONCE_LOG_INTERVAL

    def __post_init__(self) -> None:
        if not 0 <= self.difficulty <= 64:
            raise ValueError(f"difficulty must be in [0, 64], got {self.difficulty}")
        if self.block_capacity < 1:
            raise ValueError(f"block_capacity must be positive, got {self.block_capacity}")
        if self.block_interval < 0:
            raise ValueError(f"block_interval must be non-negative, got {self.block_interval}")
        if self.genesis_timestamp < 0:
            raise ValueError(f"genesis_timestamp must be non-negative, got {self.genesis_timestamp}")
        if self.max_nonce < 0:
            raise ValueError(f"max_nonce must be non-negative, got {self.max_nonce}")
        if self.nonce_log_interval < 1:
            raise ValueError(f"nonce_log_interval must be positive, got {self.nonce_log_interval}")


@dataclass
class StorageConfig:
    """Configuration for reading and writing state files."""
    atomic_writes: bool = True


def _env_int(name: str) -> int | None:
    raw = os.getenv(f"{ENV_PREFIX}{name}")
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e


@dataclass
class RuntimeConfig:
    """
    Complete runtime configuration for the ledger simulator.

    Can be loaded from:
    - Environment variables (and a .env file)
    - YAML file
    - Programmatic construction
    """
    mining: MiningConfig = field(default_factory=MiningConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)

    @staticmethod
    def _get_env_overrides() -> dict[str, Any]:
        """
        Get configuration overrides from environment variables.

        Supported variables:
        - LEDGERSIM_DIFFICULTY: Genesis proof-of-work difficulty
        - LEDGERSIM_MINER: Genesis miner address
        - LEDGERSIM_GENESIS_TIMESTAMP: Timestamp of the first block
        - LEDGERSIM_BLOCK_INTERVAL: Timestamp step between blocks
        - LEDGERSIM_BLOCK_CAPACITY: Maximum transactions per block
        - LEDGERSIM_MAX_NONCE: Upper bound of the nonce search
        - LEDGERSIM_NONCE_LOG_INTERVAL: Nonces tried between progress log lines
        - LEDGERSIM_ATOMIC_WRITES: Write state files atomically (true/false)
        """
        overrides: dict[str, Any] = {}

        int_keys = (
            "difficulty",
            "genesis_timestamp",
            "block_interval",
            "block_capacity",
            "max_nonce",
            "nonce_log_interval",
        )
        for key in int_keys:
            value = _env_int(key.upper())
            if value is not None:
                overrides.setdefault("mining", {})[key] = value
        if os.getenv(f"{ENV_PREFIX}MINER"):
            overrides.setdefault("mining", {})["miner"] = os.getenv(f"{ENV_PREFIX}MINER")

        if os.getenv(f"{ENV_PREFIX}ATOMIC_WRITES"):
            overrides.setdefault("storage", {})["atomic_writes"] = (
                os.getenv(f"{ENV_PREFIX}ATOMIC_WRITES", "true").lower() == "true"
            )

        return overrides

    @classmethod
    def from_env(cls) -> "RuntimeConfig":
        """Load configuration from defaults plus environment variables."""
        return cls.from_dict(cls._get_env_overrides())

    @classmethod
    def from_yaml(cls, path: str | Path) -> "RuntimeConfig":
        """Load configuration from a YAML file."""
        import yaml
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RuntimeConfig":
        """Load configuration from a dictionary (supports partial data)."""
        mining_data = data.get("mining", {}) or {}
        storage_data = data.get("storage", {}) or {}

        mining = MiningConfig(**mining_data) if mining_data else MiningConfig()
        storage = StorageConfig(**storage_data) if storage_data else StorageConfig()

        return cls(
            mining=mining,
            storage=storage,
        )

    def with_env_overrides(self) -> "RuntimeConfig":
        """
        Return a new config with environment variable overrides applied.

        This allows loading from a config file first, then overlaying env vars.
        """
        overrides = self._get_env_overrides()
        if not overrides:
            return self

        mining_data = {**self.to_dict()["mining"], **overrides.get("mining", {})}
        storage_data = {**self.to_dict()["storage"], **overrides.get("storage", {})}
        return RuntimeConfig(
            mining=MiningConfig(**mining_data),
            storage=StorageConfig(**storage_data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "mining": {
                "difficulty": self.mining.difficulty,
                "miner": self.mining.miner,
                "genesis_timestamp": self.mining.genesis_timestamp,
                "block_interval": self.mining.block_interval,
                "block_capacity": self.mining.block_capacity,
                "max_nonce": self.mining.max_nonce,
                "nonce_log_interval": self.mining.nonce_log_interval,
            },
            "storage": {
                "atomic_writes": self.storage.atomic_writes,
            },
        }
