"""Structured exception hierarchy for the request layer.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for monitoring and alerting
- **ApiError**: Base exception for any failure talking to the NSK API
- **ValidationError**: Caller-supplied data failed a request contract check
- **UnknownFormatError**: A request referenced a format nobody registered
- **TransportError**: The HTTP collaborator failed to deliver a request

Validation is fail-fast: the first violated rule raises and nothing is
aggregated. Validation errors are never recovered inside this package; they
propagate to the caller who decides whether to fix the input or surface it.
"""

import hashlib
import traceback
from enum import Enum
from typing import Any, TypedDict

from jambojet.core.constants import HTTP_BAD_REQUEST


class ErrorCode(Enum):
    """Standardized error codes for the JamboJet request layer."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Request data failed a format, length, enumeration or cross-field rule."""

    UNKNOWN_FORMAT = "UNKNOWN_FORMAT"
    """A field was declared with a format name that has no validator."""

    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    """The upstream API could not be reached or answered with an error status."""


class Severity(Enum):
    """Severity levels used to decide how loudly an error is reported."""

    LOW = "LOW"
    """Expected errors caused by caller input."""

    MEDIUM = "MEDIUM"
    """Errors that affect a single call but not the process."""

    HIGH = "HIGH"
    """Errors impacting every call, such as an unreachable upstream."""

    CRITICAL = "CRITICAL"
    """Programming errors that must fail loudly during development."""


class FieldViolation(TypedDict):
    """A single field-level violation attached to a ValidationError."""

    field: str
    reason: str


class ApiError(Exception):
    """Base exception for failures communicating with the NSK API.

    Args:
        message: Human-readable error message
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        status_code: HTTP-style status code, 0 when there is none
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional free-form context about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.INTERNAL_ERROR,
        status_code: int = 0,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.status_code = status_code
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        # Capture stack trace at creation time
        self.stack_trace = traceback.format_stack()[:-1]  # Exclude this frame
        self.fingerprint = self._generate_fingerprint()

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    def _generate_fingerprint(self) -> str:
        """Generate a fingerprint for error grouping.

        Returns:
            str: A hash of the error type and the frames that raised it
        """
        max_frames = 5
        relevant_frames = self.stack_trace[-max_frames:]

        fingerprint_data = f"{self.__class__.__name__}:{self.error_code}"
        for frame in relevant_frames:
            if "site-packages" not in frame and "jambojet" in frame:
                lines = frame.strip().split("\n")
                if lines:
                    fingerprint_data += f":{lines[0]}"

        return hashlib.sha256(fingerprint_data.encode()).hexdigest()[:16]

    @property
    def is_expected(self) -> bool:
        """Whether the error comes from normal operation (LOW or MEDIUM severity)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    @property
    def should_alert(self) -> bool:
        """Whether the error should trigger alerts (HIGH or CRITICAL severity)."""
        return self.severity in (Severity.HIGH, Severity.CRITICAL)

    def to_dict(self) -> dict[str, Any]:
        """Return a structured representation suitable for logging.

        Returns:
            dict[str, Any]: Error code, message, status, severity and context
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "severity": self.severity.value,
            "fingerprint": self.fingerprint,
            "context": self.context,
        }

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(ApiError):
    """Exception raised when request data fails a contract check.

    Args:
        message: Description of the first violated rule
        validation_errors: Structured field-level violations, if known
        error_code: Error code (defaults to VALIDATION_ERROR)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        message: str,
        validation_errors: list[FieldViolation] | None = None,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.validation_errors: list[FieldViolation] = list(validation_errors or [])
        super().__init__(
            message,
            error_code=error_code,
            status_code=HTTP_BAD_REQUEST,
            severity=Severity.LOW,
            context=context,
            cause=cause,
        )

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Build an error whose single violation points at ``field``.

        Args:
            field: Path of the offending field, e.g. ``passengers[0].name``
            message: Full human-readable message

        Returns:
            ValidationError: The error, ready to raise
        """
        return cls(message, validation_errors=[{"field": field, "reason": message}])

    @property
    def fields(self) -> list[str]:
        """Paths of the fields named by the violations."""
        return [violation["field"] for violation in self.validation_errors]

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["validation_errors"] = self.validation_errors
        return data


class UnknownFormatError(ApiError):
    """Exception raised when a field is checked against an unregistered format.

    This is a wiring bug in a request type, not bad caller input, so it does
    not inherit from ValidationError.

    Args:
        format_name: The format name that has no validator
    """

    def __init__(self, format_name: str) -> None:
        self.format_name = format_name
        super().__init__(
            f"Unknown validation format: {format_name}",
            error_code=ErrorCode.UNKNOWN_FORMAT,
            severity=Severity.CRITICAL,
            context={"format": format_name},
        )


class TransportError(ApiError):
    """Exception raised when the HTTP collaborator cannot complete a call.

    Args:
        message: Description of the failure
        status_code: Upstream HTTP status, 0 when no response was received
        context: Additional context (method, path, response body excerpt)
        cause: The underlying client exception
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            message,
            error_code=ErrorCode.TRANSPORT_ERROR,
            status_code=status_code,
            severity=Severity.HIGH if status_code == 0 else Severity.MEDIUM,
            context=context,
            cause=cause,
        )
