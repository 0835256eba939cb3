"""
CLI command modules.
"""

from ledger_cli.commands import produce, prove, transaction, verify

__all__ = ["produce", "transaction", "prove", "verify"]
