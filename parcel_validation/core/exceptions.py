"""Unified exception taxonomy for parcel validation.

Every domain exception inherits from ``ParcelError`` and carries
structured context fields so that the pipeline can turn any failure into
a stable ``ErrorRecord`` instead of leaking a raw exception to the caller.

Taxonomy categories
-------------------
- ``ValidationError``   — input/rule violations, never retryable.
- ``TransientError``    — temporary collaborator failures, retryable.
- ``PermanentError``    — unrecoverable engine failures, not retryable.
- ``ContractError``     — malformed request payloads, never retryable.

Every exception exposes ``to_error_dict()`` for a stable structured
payload.  The validator binds the request correlation id to any
exception it handles and logs that payload; ``retryable`` and ``stage``
reach the caller in ``ERR_INTERNAL`` details.
"""

from __future__ import annotations

from typing import Any


class ParcelError(Exception):
    """Base exception for all parcel-validation errors.

    Attributes:
        message: Human-readable error description.
        stage: Pipeline stage where the error occurred
            (e.g. ``"ring_closure"``, ``"sanitize"``).
        code: Machine-readable error code (e.g. ``"ERR_OPEN_RING"``).
        retryable: Whether re-invoking with the same input may succeed.
        correlation_id: Request correlation identifier.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, TransientError):
            return "transient"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def bind(self, correlation_id: str) -> ParcelError:
        """Attach the request correlation id unless one is already set."""
        if correlation_id and not self.correlation_id:
            self.correlation_id = correlation_id
        return self

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": self.message,
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(ParcelError):
    """Input or rule validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class TransientError(ParcelError):
    """Temporary failure that may succeed on retry."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", True)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(ParcelError):
    """Unrecoverable failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(ParcelError):
    """Malformed request payload. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------


class GeometryRuleViolation(ValidationError):
    """A fail-fast geometry rule rejected the input.

    Raised by the structural and numeric guards; the pipeline converts it
    into a single-element error list.

    Attributes:
        details: Structured context (rule id, counts, areas).
    """

    default_stage = "validate_parcel"

    def __init__(
        self,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        **kwargs: object,
    ) -> None:
        self.details: dict[str, Any] = dict(details or {})
        super().__init__(message, code=code, **kwargs)

    def to_error_dict(self) -> dict[str, object]:
        payload = super().to_error_dict()
        payload["details"] = dict(self.details)
        return payload


class GeometryEngineError(PermanentError):
    """The geometry engine could not build or transform a geometry."""

    default_stage = "geometry_engine"
    default_code = "ERR_PROCESSING"


class RepositoryError(TransientError):
    """A persistence collaborator failed while reading reference data."""

    default_stage = "persistence"
    default_code = "ERR_INTERNAL"
