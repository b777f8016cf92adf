"""Pydantic response document for the validation API.

This is the wire schema handed back to parcel-create and parcel-edit
handlers.  Keeping it as a pydantic model means the camelCase shape is
declared once and can be exported as JSON Schema for API consumers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from parcel_validation.models.outcome import thaw_details

if TYPE_CHECKING:
    from parcel_validation.models.outcome import ErrorRecord, ValidationOutcome

# Schema version for forward compatibility
SCHEMA_VERSION = "parcel-validation-v1"


class ErrorRecordModel(BaseModel):
    """One structured finding in the response.

    Attributes:
        status: ``"error"`` or ``"warning"``.
        code: Machine-readable code from the error taxonomy.
        message: Human-readable description.
        details: Optional structured context.
        timestamp: ISO 8601 creation time.
    """

    model_config = ConfigDict(frozen=True)

    status: Literal["error", "warning"] = "error"
    code: str
    message: str
    details: dict[str, Any] | None = None
    timestamp: str

    @classmethod
    def from_record(cls, record: ErrorRecord) -> ErrorRecordModel:
        return cls(
            status=record.status,  # type: ignore[arg-type]
            code=record.code,
            message=record.message,
            details=thaw_details(record.details) if record.details is not None else None,
            timestamp=record.timestamp,
        )


class ValidationResponse(BaseModel):
    """Top-level validation response document.

    Attributes:
        valid: ``True`` iff ``errors`` is empty.
        sanitized_geometry: Accepted geometry (storage frame), valid only.
        area: Area of the accepted geometry.
        area_unit: Areal unit of ``area``.
        errors: Error records.
        warnings: Warning records.
    """

    model_config = ConfigDict(populate_by_name=True)

    valid: bool
    sanitized_geometry: dict[str, Any] | None = Field(default=None, alias="sanitizedGeometry")
    area: float | None = None
    area_unit: str | None = Field(default=None, alias="areaUnit")
    errors: list[ErrorRecordModel] = Field(default_factory=list)
    warnings: list[ErrorRecordModel] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: ValidationOutcome) -> ValidationResponse:
        """Build the response document from a pipeline outcome."""
        return cls(
            valid=outcome.valid,
            sanitized_geometry=outcome.sanitized_geometry,
            area=outcome.area,
            area_unit=outcome.area_unit,
            errors=[ErrorRecordModel.from_record(r) for r in outcome.errors],
            warnings=[ErrorRecordModel.from_record(r) for r in outcome.warnings],
        )

    def to_payload(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict using the camelCase wire keys."""
        return self.model_dump(by_alias=True, exclude_none=True)


def response_json_schema() -> dict[str, Any]:
    """Return the JSON Schema of ``ValidationResponse`` (wire aliases)."""
    schema = ValidationResponse.model_json_schema(by_alias=True)
    schema["$id"] = SCHEMA_VERSION
    return schema
