"""
Pytest configuration and shared fixtures for ledger simulator tests.

This conftest.py:
1. Adds project root to sys.path for imports
2. Provides commonly-used fixtures via pytest's autodiscovery
3. Clears LEDGERSIM_* environment variables around each test
"""

import os
import sys
from pathlib import Path

import pytest

# =============================================================================
# Path Setup - Must happen before any local imports
# =============================================================================

# Get the project root (parent of tests/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_TESTS_ROOT = Path(__file__).resolve().parent

# Add both project root and tests root to sys.path
for _path in [str(_PROJECT_ROOT), str(_TESTS_ROOT)]:
    if _path not in sys.path:
        sys.path.insert(0, _path)

# =============================================================================
# Import fixtures using importlib (more robust for pytest loading)
# =============================================================================

import importlib

_chain = importlib.import_module("fixtures.chain_fixtures")

make_chain = _chain.make_chain
make_mempool = _chain.make_mempool
make_mining_config = _chain.make_mining_config


# =============================================================================
# Pytest Fixtures (autodiscovered by pytest)
# =============================================================================

@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    """Keep LEDGERSIM_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("LEDGERSIM_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def mining_config():
    """Provide a cheap MiningConfig (difficulty 1, capacity 3)."""
    return make_mining_config()


@pytest.fixture
def chain():
    """Provide a valid three-block chain with 3, 3 and 1 transactions."""
    return make_chain()


@pytest.fixture
def five_tx_chain():
    """Provide a single-block chain holding five transactions."""
    return make_chain((5,))


@pytest.fixture
def mempool():
    """Provide a mempool of five pending transactions."""
    return make_mempool(5)


# =============================================================================
# Test Helpers (available to all tests via fixtures)
# =============================================================================

@pytest.fixture
def assert_check_passed():
    """Helper to assert a specific check passed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert checks[0].ok, f"Check '{check_id}' failed: {checks[0].message}"
    return _assert


@pytest.fixture
def assert_check_failed():
    """Helper to assert a specific check failed in VerificationResult."""
    def _assert(result, check_id: str):
        checks = [c for c in result.checks if c.check_id == check_id]
        assert len(checks) == 1, f"Expected check '{check_id}' not found in {[c.check_id for c in result.checks]}"
        assert not checks[0].ok, f"Check '{check_id}' unexpectedly passed"
    return _assert
