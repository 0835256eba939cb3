"""
Ledger Simulator CLI

Command-line interface for the ledger simulator.

Usage:
    python -m ledger_cli produce-blocks --blockchain-state chain.json --mempool mempool.json -b 2
    python -m ledger_cli get-transaction-hash --blockchain-state chain.json --block-number 1 --transaction-number-in-block 3
    python -m ledger_cli generate-inclusion-proof --blockchain-state chain.json --block-number 1 --transaction-hash 0x...
    python -m ledger_cli verify-inclusion-proof --blockchain-state chain.json --block-number 1 --inclusion-proof proof.json
"""

__version__ = "0.1.0"
