"""Validation result assembly.

Turns whatever the pipeline produced (a fail-fast violation, accumulated
topology findings, an engine failure, or an unexpected exception) into a
``ValidationOutcome``.  Nothing leaves the validator as a raw exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from parcel_validation.core.constants import ERR_INTERNAL, ERR_PROCESSING
from parcel_validation.core.exceptions import ParcelError
from parcel_validation.models.outcome import ErrorRecord, ValidationOutcome

if TYPE_CHECKING:
    from parcel_validation.checks._topology import CheckFindings
    from parcel_validation.core.exceptions import GeometryRuleViolation

INTERNAL_ERROR_MESSAGE = "Internal Spatial Validation Error"
PROCESSING_ERROR_MESSAGE = "Failed to process geometry."


def fail_fast_outcome(
    violation: GeometryRuleViolation,
    *,
    timestamp: str,
    warnings: tuple[ErrorRecord, ...] = (),
) -> ValidationOutcome:
    """Single-error outcome for a structural or numeric guard failure."""
    return ValidationOutcome.rejected(
        [ErrorRecord.from_violation(violation, timestamp=timestamp)], warnings=warnings
    )


def processing_error_outcome(
    exc: ParcelError,
    *,
    timestamp: str,
    warnings: tuple[ErrorRecord, ...] = (),
) -> ValidationOutcome:
    """``ERR_PROCESSING`` outcome for input the engine could not process."""
    details = {"reason": exc.message, "stage": exc.stage}
    return ValidationOutcome.rejected(
        [ErrorRecord.error(ERR_PROCESSING, PROCESSING_ERROR_MESSAGE, details, timestamp=timestamp)],
        warnings=warnings,
    )


def internal_error_outcome(exc: BaseException, *, timestamp: str) -> ValidationOutcome:
    """``ERR_INTERNAL`` outcome carrying the original exception message.

    Domain errors also report their ``stage`` and whether re-invoking the
    same request may succeed (``retryable``).
    """
    details: dict[str, Any] = {"original_error": str(exc) or type(exc).__name__}
    if isinstance(exc, ParcelError):
        details["stage"] = exc.stage
        details["retryable"] = exc.retryable
    return ValidationOutcome.rejected(
        [ErrorRecord.error(ERR_INTERNAL, INTERNAL_ERROR_MESSAGE, details, timestamp=timestamp)]
    )


def assemble_outcome(
    findings: list[CheckFindings],
    *,
    sanitized_geometry: dict[str, Any],
    area: float,
    area_unit: str,
    warnings: tuple[ErrorRecord, ...] = (),
) -> ValidationOutcome:
    """Combine topology findings into the final outcome.

    Errors from every check are kept (no short-circuit).  The sanitized
    geometry is only returned when no error was recorded.
    """
    errors: list[ErrorRecord] = []
    all_warnings = list(warnings)
    for finding in findings:
        errors.extend(finding.errors)
        all_warnings.extend(finding.warnings)

    if errors:
        return ValidationOutcome.rejected(errors, warnings=tuple(all_warnings))
    return ValidationOutcome.accepted(
        sanitized_geometry, area, area_unit, warnings=tuple(all_warnings)
    )
