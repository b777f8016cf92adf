"""Data model for a single validation request.

A ``ValidationRequest`` is created when a parcel-create or parcel-edit
handler wants to persist a geometry.  It is consumed synchronously by
``ParcelValidator`` and discarded; it is never stored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from parcel_validation.core.exceptions import ContractError

_ID_TYPES = (str, int)


@dataclass(frozen=True, slots=True)
class ValidationRequest:
    """Ephemeral input to the validation pipeline.

    Attributes:
        geometry: Raw JSON value, a GeoJSON Feature or bare geometry.
        boundary_region_id: Boundary region the parcel must lie inside
            (``None`` skips the containment check).
        check_overlaps: Whether to compare against existing parcels.
        exclude_parcel_id: Parcel id to ignore during the overlap check
            (the parcel being edited).
        correlation_id: Caller-supplied id echoed into log lines.
    """

    geometry: Any = None
    boundary_region_id: str | int | None = None
    check_overlaps: bool = True
    exclude_parcel_id: str | int | None = None
    correlation_id: str = ""

    def to_dict(self) -> dict[str, object]:
        """Serialise to the camelCase wire shape."""
        return {
            "geometry": self.geometry,
            "boundaryRegionId": self.boundary_region_id,
            "checkOverlaps": self.check_overlaps,
            "excludeParcelId": self.exclude_parcel_id,
            "correlationId": self.correlation_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ValidationRequest:
        """Deserialise from the camelCase wire shape.

        A missing ``geometry`` is allowed here; the normalizer reports it
        as ``ERR_EMPTY_GEOM``.

        Raises:
            ContractError: If the payload or a field has an unexpected type.
        """
        if not isinstance(data, dict):
            msg = f"Validation request must be an object, got {type(data).__name__}"
            raise ContractError(msg, stage="request")

        check_overlaps = data.get("checkOverlaps", True)
        if check_overlaps is None:
            check_overlaps = True
        if not isinstance(check_overlaps, bool):
            msg = f"checkOverlaps must be a boolean, got {type(check_overlaps).__name__}"
            raise ContractError(msg, stage="request")

        return cls(
            geometry=data.get("geometry"),
            boundary_region_id=_optional_id(data, "boundaryRegionId"),
            check_overlaps=check_overlaps,
            exclude_parcel_id=_optional_id(data, "excludeParcelId"),
            correlation_id=str(data.get("correlationId") or ""),
        )


def _optional_id(data: dict[str, object], key: str) -> str | int | None:
    """Return an optional string/integer identifier from *data*.

    Raises:
        ContractError: If the value is present but not a string or integer.
    """
    value = data.get(key)
    if value is None or value == "":
        return None
    if isinstance(value, bool) or not isinstance(value, _ID_TYPES):
        msg = f"{key} must be a string or integer, got {type(value).__name__}"
        raise ContractError(msg, stage="request")
    return value
