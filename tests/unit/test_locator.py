"""
Transaction Locator Unit Tests
Tests for ledger/engine/locator.py
"""
import pytest

from ledger.crypto.hashing import hash_transaction
from ledger.engine import get_transaction, get_transaction_hash
from ledger.schemas import BlockRangeError, Blockchain, RangeError, TransactionRangeError


class TestGetTransactionHash:

    def test_first_and_last(self, chain):
        block = chain.blocks[1]

        assert get_transaction_hash(chain, 2, 1) == hash_transaction(block.transactions[0])
        assert get_transaction_hash(chain, 2, 3) == hash_transaction(block.transactions[2])

    def test_returns_located_transaction(self, chain):
        assert get_transaction(chain, 3, 1) == chain.blocks[2].transactions[0]

    def test_transaction_out_of_range_reports_range(self, five_tx_chain):
        with pytest.raises(TransactionRangeError) as exc_info:
            get_transaction_hash(five_tx_chain, 1, 6)

        assert "[1, 5]" in str(exc_info.value)
        assert exc_info.value.details["min"] == 1
        assert exc_info.value.details["max"] == 5

    def test_transaction_zero_rejected(self, five_tx_chain):
        with pytest.raises(TransactionRangeError):
            get_transaction_hash(five_tx_chain, 1, 0)

    @pytest.mark.parametrize("block_number", [0, -1, 4])
    def test_block_out_of_range(self, chain, block_number):
        with pytest.raises(BlockRangeError) as exc_info:
            get_transaction_hash(chain, block_number, 1)

        assert "[1, 3]" in str(exc_info.value)

    def test_empty_chain(self):
        with pytest.raises(RangeError):
            get_transaction_hash(Blockchain(), 1, 1)
