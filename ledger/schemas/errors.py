"""
Schemas & Encoding
File: errors.py

Purpose: Standard error taxonomy for the ledger simulator.
Defines a Pydantic model for structured error reporting and
Python exceptions for control flow.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Error Codes (Machine-Readable Constants)
# =============================================================================

class ErrorCodes:
    """Stable machine-readable error codes used across the simulator."""

    # State file errors
    STATE_FILE_ERROR = "STATE_FILE_ERROR"
    CANONICALIZATION_ERROR = "CANONICALIZATION_ERROR"

    # Ledger integrity errors
    CHAIN_VALIDATION_FAILED = "CHAIN_VALIDATION_FAILED"
    MEMPOOL_VALIDATION_FAILED = "MEMPOOL_VALIDATION_FAILED"

    # Lookup errors
    BLOCK_OUT_OF_RANGE = "BLOCK_OUT_OF_RANGE"
    TRANSACTION_OUT_OF_RANGE = "TRANSACTION_OUT_OF_RANGE"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"

    # Production errors
    MINING_FAILED = "MINING_FAILED"

    # Inclusion proof errors
    MALFORMED_PROOF = "MALFORMED_PROOF"


# =============================================================================
# Pydantic Error Model (Structured Communication)
# =============================================================================

class LedgerError(BaseModel):
    """
    Structured error model, used where an error is reported rather than raised
    (for example inside a VerificationResult).
    """

    model_config = ConfigDict(extra="forbid")

    code: str = Field(
        ...,
        description="Stable machine-readable error code",
        examples=[ErrorCodes.CHAIN_VALIDATION_FAILED],
    )
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional structured details about the error",
    )


# =============================================================================
# Python Exceptions (Control Flow)
# =============================================================================

class LedgerException(Exception):
    """
    Base exception for all ledger simulator errors.

    Carries structured error information and can be converted to a
    LedgerError model.
    """

    def __init__(
        self,
        message: str,
        code: str = "LEDGER_ERROR",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_error_model(self) -> LedgerError:
        """Convert this exception to a LedgerError model."""
        return LedgerError(code=self.code, message=self.message, details=self.details)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code!r}, message={self.message!r})"


class CanonicalizationException(LedgerException):
    """Exception raised when a value cannot be canonically encoded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.CANONICALIZATION_ERROR,
            details=details,
        )


class StateFileError(LedgerException):
    """Exception raised when a chain, mempool or proof file cannot be read or parsed."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if path:
            full_details["path"] = path
        super().__init__(
            message=message,
            code=ErrorCodes.STATE_FILE_ERROR,
            details=full_details,
        )


class ChainValidationError(LedgerException):
    """Exception raised when a loaded chain fails hash-link or Merkle re-checks."""

    def __init__(
        self,
        message: str,
        failed_checks: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        if failed_checks:
            full_details["failed_checks"] = failed_checks
        super().__init__(
            message=message,
            code=ErrorCodes.CHAIN_VALIDATION_FAILED,
            details=full_details,
        )


class MempoolValidationError(LedgerException):
    """Exception raised when a mempool file holds malformed transactions."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            message=message,
            code=ErrorCodes.MEMPOOL_VALIDATION_FAILED,
            details=details,
        )


class RangeError(LedgerException):
    """
    Exception raised when a 1-based block or transaction number is out of bounds.

    The valid range is always carried in ``details`` as ``min``/``max``.
    """

    def __init__(
        self,
        message: str,
        code: str,
        value: int,
        minimum: int,
        maximum: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        full_details = details or {}
        full_details.update({"value": value, "min": minimum, "max": maximum})
        super().__init__(message=message, code=code, details=full_details)
        self.value = value
        self.minimum = minimum
        self.maximum = maximum


class BlockRangeError(RangeError):
    """Block number outside [1, chain length]."""

    def __init__(self, block_number: int, chain_length: int) -> None:
        if chain_length == 0:
            message = f"Block {block_number} requested but the chain has no blocks"
        else:
            message = (
                f"Block number {block_number} out of range; "
                f"valid range is [1, {chain_length}]"
            )
        super().__init__(
            message=message,
            code=ErrorCodes.BLOCK_OUT_OF_RANGE,
            value=block_number,
            minimum=1,
            maximum=chain_length,
        )


class TransactionRangeError(RangeError):
    """Transaction number outside [1, transactions in block]."""

    def __init__(self, block_number: int, transaction_number: int, transaction_count: int) -> None:
        super().__init__(
            message=(
                f"Transaction number {transaction_number} out of range for block "
                f"{block_number}; valid range is [1, {transaction_count}]"
            ),
            code=ErrorCodes.TRANSACTION_OUT_OF_RANGE,
            value=transaction_number,
            minimum=1,
            maximum=transaction_count,
            details={"block_number": block_number},
        )


class TransactionNotFoundError(LedgerException):
    """Exception raised when a transaction hash is not present in the given block."""

    def __init__(self, block_number: int, transaction_hash: str) -> None:
        super().__init__(
            message=f"Transaction {transaction_hash} not found in block {block_number}",
            code=ErrorCodes.TRANSACTION_NOT_FOUND,
            details={"block_number": block_number, "transaction_hash": transaction_hash},
        )
        self.block_number = block_number
        self.transaction_hash = transaction_hash


class MiningError(LedgerException):
    """Exception raised when no nonce satisfies the proof-of-work target."""

    def __init__(self, message: str, height: int | None = None, details: dict[str, Any] | None = None) -> None:
        full_details = details or {}
        if height is not None:
            full_details["height"] = height
        super().__init__(
            message=message,
            code=ErrorCodes.MINING_FAILED,
            details=full_details,
        )
