"""
Compliance Rules

Atomic checks run against a completed transaction. Each rule returns a
CheckResult; the checker decides what to do with failures based on
their severity.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from servicecall.schemas.errors import ComplianceSeverity, DecodingException

if TYPE_CHECKING:
    from servicecall.http.transaction import Transaction


class CheckResult(BaseModel):
    """
    Result of a single compliance check.
    """

    model_config = ConfigDict(extra="forbid")

    check_id: str = Field(
        ...,
        description="Unique identifier for this check",
        min_length=1,
    )
    ok: bool = Field(
        ...,
        description="Whether the check passed",
    )
    severity: ComplianceSeverity = Field(
        ...,
        description="Severity level of this check",
    )
    message: str = Field(
        ...,
        description="Human-readable message describing the result",
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional details about the check",
    )

    @property
    def attaches_error(self) -> bool:
        """Failures at error or fatal severity are attached to the response."""
        return not self.ok and self.severity in ("error", "fatal")

    @property
    def is_fatal(self) -> bool:
        return not self.ok and self.severity == "fatal"

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
        severity: ComplianceSeverity = "error",
        details: dict[str, Any] | None = None,
    ) -> "CheckResult":
        """Create a failed check result."""
        return cls(
            check_id=check_id,
            ok=False,
            severity=severity,
            message=message,
            details=details or {},
        )


class ComplianceRule(ABC):
    """
    Base class for compliance rules.

    Subclasses set check_id and implement check().
    """

    check_id: str = "compliance"

    def __init__(self, severity: ComplianceSeverity = "error") -> None:
        self.severity = severity

    @abstractmethod
    def check(self, transaction: "Transaction") -> CheckResult:
        ...

    def fail(self, message: str, details: dict[str, Any] | None = None) -> CheckResult:
        return CheckResult.failed(self.check_id, message, severity=self.severity, details=details)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(severity={self.severity!r})"


class StatusBelowRule(ComplianceRule):
    """Status must be below a limit (5xx by default)."""

    check_id = "status_below"

    def __init__(self, limit: int = 500, severity: ComplianceSeverity = "error") -> None:
        super().__init__(severity)
        self.limit = limit

    def check(self, transaction: "Transaction") -> CheckResult:
        status = transaction.response.status
        if status is None:
            return self.fail("Response has no status", {"limit": self.limit})
        if status >= self.limit:
            return self.fail(
                f"Status {status} is not below {self.limit}",
                {"status": status, "limit": self.limit},
            )
        return CheckResult.passed(self.check_id, f"Status {status} is below {self.limit}")


class MaxDurationRule(ComplianceRule):
    """Total transaction time must not exceed a budget in seconds."""

    check_id = "max_duration"

    def __init__(self, seconds: float, severity: ComplianceSeverity = "warn") -> None:
        super().__init__(severity)
        self.seconds = seconds

    def check(self, transaction: "Transaction") -> CheckResult:
        total = transaction.response.time.total
        if total > self.seconds:
            return self.fail(
                f"Transaction took {total:.3f}s, budget is {self.seconds:.3f}s",
                {"total": total, "budget": self.seconds},
            )
        return CheckResult.passed(self.check_id)


class DecodableBodyRule(ComplianceRule):
    """The response body must decode with the attached response body handler."""

    check_id = "decodable_body"

    def check(self, transaction: "Transaction") -> CheckResult:
        response = transaction.response
        if response.body_handler is None:
            return self.fail("No response body handler attached")
        try:
            response.get_decoded_body()
        except DecodingException as e:
            return self.fail(f"Body does not decode: {e.message}", dict(e.details))
        return CheckResult.passed(self.check_id)


class RequiredHeadersRule(ComplianceRule):
    """The response must carry the given headers (case-insensitive)."""

    check_id = "required_headers"

    def __init__(self, names: Iterable[str], severity: ComplianceSeverity = "error") -> None:
        super().__init__(severity)
        self.names = [name.lower() for name in names]

    def check(self, transaction: "Transaction") -> CheckResult:
        present = {name.lower() for name in transaction.response.headers}
        missing = [name for name in self.names if name not in present]
        if missing:
            return self.fail(f"Missing headers: {', '.join(missing)}", {"missing": missing})
        return CheckResult.passed(self.check_id)


def default_rules() -> list[ComplianceRule]:
    """Rule set used when a checker is built without explicit rules."""
    return [StatusBelowRule(500)]
