"""Exception hierarchy for aligned-proofs.

All package exceptions inherit from AlignedError, which gives every
failure a machine-readable ``error_code`` and a ``to_dict()`` shape the
workflow coordinator can report back to its caller verbatim.

Usage:
    from aligned_proofs.exceptions import AlignedError, MalformedIdentifierError

    try:
        identifier = Identifier.from_hex(raw)
    except MalformedIdentifierError as e:
        report(e.to_dict())
"""
from __future__ import annotations

from typing import Any, Optional


class AlignedError(Exception):
    """Base exception for all aligned-proofs errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., "MISSING_PROOF")
        details: Optional additional context
    """

    error_code: str = "ALIGNED_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to the reported error payload."""
        result: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class ConfigurationError(AlignedError):
    """Required configuration is missing or invalid."""

    error_code = "CONFIGURATION_ERROR"


# =============================================================================
# Input errors
# =============================================================================

class MalformedIdentifierError(AlignedError):
    """Identifier hex is not decodable into 32 bytes."""

    error_code = "MALFORMED_IDENTIFIER"

    def __init__(self, message: str, value: Optional[str] = None) -> None:
        details = {"value": value} if value is not None else None
        super().__init__(message, details=details)
        self.value = value


class MissingProofError(AlignedError):
    """Submission request carried no proof payload."""

    error_code = "MISSING_PROOF"

    def __init__(self, message: str = "No proof provided for submission") -> None:
        super().__init__(message)


class MissingJobIdError(AlignedError):
    """Status request carried no job identifier."""

    error_code = "MISSING_JOB_ID"

    def __init__(self, message: str = "No job ID provided to check proof submission status") -> None:
        super().__init__(message)


# =============================================================================
# Workflow errors
# =============================================================================

class SubmissionRejectedError(AlignedError):
    """Remote network refused the proof, or the call failed."""

    error_code = "SUBMISSION_REJECTED"


class SubmissionTimeoutError(AlignedError):
    """Proof submission did not complete within the transport timeout."""

    error_code = "SUBMISSION_TIMEOUT"


class InsufficientBalanceAfterTopUpError(AlignedError):
    """Balance still below threshold after a top-up and the settlement wait."""

    error_code = "INSUFFICIENT_BALANCE_AFTER_TOP_UP"

    def __init__(
        self,
        message: str,
        identifier: Optional[str] = None,
        balance: Optional[str] = None,
        threshold: Optional[str] = None,
    ) -> None:
        details: dict[str, Any] = {}
        if identifier:
            details["identifier"] = identifier
        if balance is not None:
            details["balance"] = balance
        if threshold is not None:
            details["threshold"] = threshold
        super().__init__(message, details=details)


class StatusLookupFailedError(AlignedError):
    """Job status could not be fetched."""

    error_code = "STATUS_LOOKUP_FAILED"

    def __init__(self, message: str, job_id: Optional[str] = None) -> None:
        details = {"job_id": job_id} if job_id else None
        super().__init__(message, details=details)
        self.job_id = job_id


# =============================================================================
# Transport errors (raised by the HTTP client)
# =============================================================================

class APIError(AlignedError):
    """Error response from the proof network API."""

    error_code = "API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        request_id: Optional[str] = None,
    ) -> None:
        super().__init__(message, error_code=error_code, details=details)
        self.status_code = status_code
        self.request_id = request_id

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["status_code"] = self.status_code
        if self.request_id:
            result["request_id"] = self.request_id
        return result

    @classmethod
    def from_response(cls, status_code: int, body: Any) -> "APIError":
        """Create APIError from a decoded HTTP error body."""
        if not isinstance(body, dict):
            return cls(message=str(body), status_code=status_code)
        error_data = body.get("error", body.get("detail", {}))
        if isinstance(error_data, str):
            return cls(message=error_data, status_code=status_code)
        if isinstance(error_data, list):
            return cls(
                message="Validation Error",
                status_code=status_code,
                error_code="VALIDATION_ERROR",
                details={"errors": error_data},
            )
        if not isinstance(error_data, dict):
            return cls(message=str(body), status_code=status_code)
        return cls(
            message=error_data.get("message", "Unknown error"),
            status_code=status_code,
            error_code=error_data.get("code"),
            details=error_data.get("details"),
            request_id=error_data.get("request_id"),
        )


class AuthenticationError(APIError):
    """API key missing or rejected."""

    error_code = "AUTHENTICATION_ERROR"

    def __init__(self, message: str = "Invalid or missing API key") -> None:
        super().__init__(message, status_code=401)


class RateLimitError(APIError):
    """Rate limit exceeded."""

    error_code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str = "Rate limit exceeded", retry_after: Optional[int] = None) -> None:
        super().__init__(message, status_code=429)
        self.retry_after = retry_after


__all__ = [
    "AlignedError",
    "ConfigurationError",
    "MalformedIdentifierError",
    "MissingProofError",
    "MissingJobIdError",
    "SubmissionRejectedError",
    "SubmissionTimeoutError",
    "InsufficientBalanceAfterTopUpError",
    "StatusLookupFailedError",
    "APIError",
    "AuthenticationError",
    "RateLimitError",
]
