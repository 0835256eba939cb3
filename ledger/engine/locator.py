"""
Transaction Locator

Direct lookup of a transaction by 1-based block and transaction numbers.
"""

from __future__ import annotations

import logging

from ledger.crypto.hashing import hash_transaction
from ledger.schemas.chain import Blockchain, Transaction
from ledger.schemas.errors import TransactionRangeError


logger = logging.getLogger(__name__)


def get_transaction(chain: Blockchain, block_number: int, transaction_number: int) -> Transaction:
    """
    Return transaction ``transaction_number`` of block ``block_number`` (both 1-based).

    Raises:
        BlockRangeError: If the block number is outside [1, len(chain)]
        TransactionRangeError: If the transaction number is outside [1, block size]
    """
    block = chain.get_block(block_number)
    count = len(block.transactions)
    if transaction_number < 1 or transaction_number > count:
        raise TransactionRangeError(block_number, transaction_number, count)
    return block.transactions[transaction_number - 1]


def get_transaction_hash(chain: Blockchain, block_number: int, transaction_number: int) -> str:
    """0x-prefixed hash of the located transaction."""
    tx_hash = hash_transaction(get_transaction(chain, block_number, transaction_number))
    logger.info(
        f"Hash of the transaction {transaction_number} in block {block_number}: {tx_hash}"
    )
    return tx_hash
