"""
Outcome types for proof submission.

The store and gateway raise; the submitter is the one boundary that turns
exceptions into values, so a run over many proofs reports every failure
instead of stopping at the first.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorSeverity(Enum):
    WARNING = "warning"  # outcome stands, worth a look
    ERROR = "error"  # this submission failed
    CRITICAL = "critical"  # the run cannot continue


@dataclass
class ProcessingError:
    """
    One problem met while handling a submission.

    Attributes:
        source: Step that reported it, e.g. "submit_proof"
        message: Human-readable description
        severity: WARNING for notes on a success, ERROR/CRITICAL for failures
        context: Identifiers for the submission, e.g. ipfs_hash, attempts
        exception: The exception behind it, when there is one
    """

    source: str
    message: str
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None

    @property
    def error_type(self) -> Optional[str]:
        return type(self.exception).__name__ if self.exception else None

    @property
    def is_failure(self) -> bool:
        return self.severity is not ErrorSeverity.WARNING

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
            "error_type": self.error_type,
        }


@dataclass
class Result(Generic[T]):
    """Value of a submission plus anything worth reporting about it."""

    success: bool
    data: Optional[T] = None
    errors: List[ProcessingError] = field(default_factory=list)

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: ProcessingError) -> "Result[T]":
        return cls(success=False, errors=[error])

    @classmethod
    def fail_with_message(
        cls,
        source: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> "Result[T]":
        return cls.fail(
            ProcessingError(source, message, severity, context or {}, exception)
        )

    def add_warning(
        self,
        source: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> "Result[T]":
        self.errors.append(
            ProcessingError(source, message, ErrorSeverity.WARNING, context or {})
        )
        return self

    def unwrap(self) -> T:
        """Return data, or raise what made the submission fail."""
        if self.success:
            return self.data

        failures = [e for e in self.errors if e.is_failure]
        if failures and failures[0].exception is not None:
            raise failures[0].exception
        raise RuntimeError(
            failures[0].message if failures else "Result has no data"
        )

    def has_errors(self) -> bool:
        return any(e.is_failure for e in self.errors)

    def has_warnings(self) -> bool:
        return any(not e.is_failure for e in self.errors)

    def get_error_messages(self) -> List[str]:
        return [e.message for e in self.errors]


@dataclass
class SubmissionSummary:
    """Outcome of submitting several proofs in one run."""

    submitted: int = 0
    failed: int = 0
    attempts: int = 0
    errors: List[ProcessingError] = field(default_factory=list)

    def record(self, result: Result) -> None:
        if result.success:
            self.submitted += 1
        else:
            self.failed += 1
        self.errors.extend(result.errors)

    def has_errors(self) -> bool:
        return self.failed > 0

    def to_dict(self) -> Dict[str, Any]:
        total = self.submitted + self.failed
        return {
            "success_rate": f"{self.submitted}/{total}" if total else "N/A",
            "submitted": self.submitted,
            "failed": self.failed,
            "attempts": self.attempts,
            "errors": [e.to_dict() for e in self.errors],
        }
