"""
Schemas & Encoding
File: verification.py

Purpose: Standard result format for verification steps. Chain validation and
inclusion-proof verification report through these models instead of raising.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .errors import LedgerError


CheckSeverity = Literal["info", "warn", "error"]


class CheckResult(BaseModel):
    """
    Result of a single verification check.

    Checks are atomic verification steps that can pass or fail.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(..., description="Identifier for this check", min_length=1)
    ok: bool = Field(..., description="Whether the check passed")
    severity: CheckSeverity = Field(..., description="Severity level of this check")
    message: str = Field(..., description="Human-readable result message")
    details: dict[str, Any] = Field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        """Check if this is an error-level failure."""
        return not self.ok and self.severity == "error"

    @classmethod
    def passed(
        cls,
        check_id: str,
        message: str = "Check passed",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a passed check result."""
        return cls(
            check_id=check_id,
            ok=True,
            severity="info",
            message=message,
            details=details or {},
        )

    @classmethod
    def failed(
        cls,
        check_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity="error",
            message=message,
            details=details or {},
        )


class VerificationResult(BaseModel):
    """
    Complete result of a verification process.
    """

    model_config = ConfigDict(extra="forbid")

    ok: bool = Field(..., description="Overall verification success")
    checks: list[CheckResult] = Field(default_factory=list)
    error: LedgerError | None = Field(
        default=None,
        description="Error details if verification could not run to completion",
    )

    @property
    def error_count(self) -> int:
        """Count of error-level failures."""
        return sum(1 for check in self.checks if check.is_error)

    def get_failed_checks(self) -> list[CheckResult]:
        """Get all failed checks."""
        return [check for check in self.checks if not check.ok]

    def get_error_messages(self) -> list[str]:
        """Get all error messages."""
        return [check.message for check in self.checks if check.is_error]

    @classmethod
    def failure(
        cls,
        checks: list[CheckResult],
        error: LedgerError | None = None,
    ) -> "VerificationResult":
        """Create a failed verification result."""
        return cls(ok=False, checks=checks, error=error)

    @classmethod
    def from_checks(cls, checks: list[CheckResult]) -> "VerificationResult":
        """Result that is ok exactly when every check passed."""
        return cls(ok=all(check.ok for check in checks), checks=checks)
