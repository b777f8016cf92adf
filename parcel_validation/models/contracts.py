"""Canonical payload contracts for the validation boundary.

Every JSON value crossing the validator boundary is described here as a
``TypedDict``.  This module is the single source of truth for wire key
names; drift-detection tests verify that the ``to_dict`` serialisers
produce exactly these keys.

Design notes:
- The wire format is camelCase (it is consumed by a JavaScript map UI),
  while the Python models are snake_case.
- Optional response members use ``NotRequired`` because the serialisers
  omit them rather than emitting ``null``.
"""

from __future__ import annotations

from typing import Any, NotRequired, TypedDict


class GeometryPayload(TypedDict):
    """Bare GeoJSON geometry, optionally with a legacy named ``crs``."""

    type: str
    coordinates: list[Any]
    crs: NotRequired[dict[str, Any]]


class ValidationRequestPayload(TypedDict):
    """Caller → ``ParcelValidator.validate_payload``."""

    geometry: dict[str, Any]
    boundaryRegionId: NotRequired[str | int | None]
    checkOverlaps: NotRequired[bool]
    excludeParcelId: NotRequired[str | int | None]
    correlationId: NotRequired[str]


class ErrorRecordPayload(TypedDict):
    """One structured finding."""

    status: str
    code: str
    message: str
    details: NotRequired[dict[str, Any]]
    timestamp: str


class ValidationResponsePayload(TypedDict):
    """``ParcelValidator.validate_payload`` → caller."""

    valid: bool
    sanitizedGeometry: NotRequired[GeometryPayload]
    area: NotRequired[float]
    areaUnit: NotRequired[str]
    errors: list[ErrorRecordPayload]
    warnings: list[ErrorRecordPayload]


class OverlapEntryPayload(TypedDict):
    """One entry of ``ERR_OVERLAP`` ``details["overlapping_parcels"]``."""

    id: str | int
    overlap_area: float


REQUEST_KEYS: frozenset[str] = frozenset(ValidationRequestPayload.__annotations__)
RESPONSE_KEYS: frozenset[str] = frozenset(ValidationResponsePayload.__annotations__)
ERROR_RECORD_KEYS: frozenset[str] = frozenset(ErrorRecordPayload.__annotations__)
