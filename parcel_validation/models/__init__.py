"""Data models and schemas.

Defines the data structures used throughout the validator:
- NormalizedGeometry: Bare candidate geometry plus its reference frame
- ValidationRequest: Ephemeral per-call input
- ErrorRecord / ValidationOutcome: Structured results
- ExistingParcel / BoundaryLookup: Read-only reference data
- ValidationResponse: Pydantic wire document
"""

from parcel_validation.models.geometry import NormalizedGeometry
from parcel_validation.models.outcome import ErrorRecord, ValidationOutcome
from parcel_validation.models.parcel import BoundaryLookup, ExistingParcel, LookupStatus
from parcel_validation.models.request import ValidationRequest

__all__ = [
    "BoundaryLookup",
    "ErrorRecord",
    "ExistingParcel",
    "LookupStatus",
    "NormalizedGeometry",
    "ValidationOutcome",
    "ValidationRequest",
]
