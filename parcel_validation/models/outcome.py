"""Data models for validation results.

An ``ErrorRecord`` is one immutable, structured finding (error or
warning).  A ``ValidationOutcome`` is the complete answer returned to the
caller: ``valid`` is derived from the error list, so the two can never
disagree.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from parcel_validation.core.constants import STATUS_ERROR, STATUS_WARNING

if TYPE_CHECKING:
    from parcel_validation.core.exceptions import GeometryRuleViolation


@dataclass(frozen=True, slots=True)
class ErrorRecord:
    """A single structured validation finding.

    Attributes:
        code: Machine-readable code (e.g. ``"ERR_OVERLAP"``).
        message: Human-readable description.
        details: Optional structured context (rule id, counts, areas).
            Stored as a read-only deep copy; use ``to_dict`` for a
            mutable JSON-ready copy.
        timestamp: ISO 8601 creation time.
        status: ``"error"`` or ``"warning"``.
    """

    code: str
    message: str
    details: Mapping[str, Any] | None = None
    timestamp: str = ""
    status: str = STATUS_ERROR

    def __post_init__(self) -> None:
        if self.details is not None:
            object.__setattr__(self, "details", freeze_details(self.details))

    @classmethod
    def error(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        timestamp: str,
    ) -> ErrorRecord:
        """Build an error-status record."""
        return cls(
            code=code,
            message=message,
            details=details,
            timestamp=timestamp,
        )

    @classmethod
    def warning(
        cls,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
        *,
        timestamp: str,
    ) -> ErrorRecord:
        """Build a warning-status record."""
        return cls(
            code=code,
            message=message,
            details=details,
            timestamp=timestamp,
            status=STATUS_WARNING,
        )

    @classmethod
    def from_violation(cls, exc: GeometryRuleViolation, *, timestamp: str) -> ErrorRecord:
        """Convert a fail-fast rule violation into an error record."""
        return cls.error(exc.code, exc.message, exc.details or None, timestamp=timestamp)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the wire shape (``details`` omitted when absent)."""
        payload: dict[str, object] = {
            "status": self.status,
            "code": self.code,
            "message": self.message,
        }
        if self.details is not None:
            payload["details"] = thaw_details(self.details)
        payload["timestamp"] = self.timestamp
        return payload


@dataclass(frozen=True, slots=True)
class ValidationOutcome:
    """Structured result of validating one candidate geometry.

    Attributes:
        errors: Error records; empty means the geometry was accepted.
        warnings: Non-blocking findings (accepted repairs, skipped checks).
        sanitized_geometry: Accepted GeoJSON geometry in the storage frame.
        area: Area of the accepted geometry in ``area_unit``.
        area_unit: Areal unit of the storage frame (e.g. ``"square metre"``).
    """

    errors: tuple[ErrorRecord, ...] = ()
    warnings: tuple[ErrorRecord, ...] = ()
    sanitized_geometry: dict[str, Any] | None = None
    area: float | None = None
    area_unit: str | None = None

    @property
    def valid(self) -> bool:
        """``True`` iff no error was recorded."""
        return not self.errors

    @property
    def error_codes(self) -> list[str]:
        """Codes of all error records, in order."""
        return [record.code for record in self.errors]

    @classmethod
    def accepted(
        cls,
        sanitized_geometry: dict[str, Any],
        area: float,
        area_unit: str,
        warnings: tuple[ErrorRecord, ...] = (),
    ) -> ValidationOutcome:
        """Build a successful outcome."""
        return cls(
            warnings=warnings,
            sanitized_geometry=sanitized_geometry,
            area=area,
            area_unit=area_unit,
        )

    @classmethod
    def rejected(
        cls,
        errors: list[ErrorRecord] | tuple[ErrorRecord, ...],
        warnings: tuple[ErrorRecord, ...] = (),
    ) -> ValidationOutcome:
        """Build a failed outcome.

        Raises:
            ValueError: If *errors* is empty.
        """
        if not errors:
            msg = "A rejected outcome needs at least one error record"
            raise ValueError(msg)
        return cls(errors=tuple(errors), warnings=warnings)

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase response shape."""
        payload: dict[str, object] = {"valid": self.valid}
        if self.sanitized_geometry is not None:
            payload["sanitizedGeometry"] = self.sanitized_geometry
        if self.area is not None:
            payload["area"] = self.area
        if self.area_unit is not None:
            payload["areaUnit"] = self.area_unit
        payload["errors"] = [record.to_dict() for record in self.errors]
        payload["warnings"] = [record.to_dict() for record in self.warnings]
        return payload


def freeze_details(value: Any) -> Any:
    """Return a read-only deep copy of a details value.

    Mappings become ``MappingProxyType`` and lists become tuples, so a
    record cannot be altered through nested members either.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze_details(item) for key, item in value.items()})
    if isinstance(value, list | tuple):
        return tuple(freeze_details(item) for item in value)
    return value


def thaw_details(value: Any) -> Any:
    """Return a plain ``dict``/``list`` deep copy of a frozen details value."""
    if isinstance(value, Mapping):
        return {key: thaw_details(item) for key, item in value.items()}
    if isinstance(value, list | tuple):
        return [thaw_details(item) for item in value]
    return value
