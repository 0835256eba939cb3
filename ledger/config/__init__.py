"""
Runtime Configuration Module

Provides configuration loading for block production and state storage.
"""

from .runtime import (
    DEFAULT_BLOCK_CAPACITY,
    DEFAULT_GENESIS_TIMESTAMP,
    ENV_PREFIX,
    MiningConfig,
    RuntimeConfig,
    StorageConfig,
)

__all__ = [
    "DEFAULT_BLOCK_CAPACITY",
    "DEFAULT_GENESIS_TIMESTAMP",
    "ENV_PREFIX",
    "MiningConfig",
    "RuntimeConfig",
    "StorageConfig",
]
