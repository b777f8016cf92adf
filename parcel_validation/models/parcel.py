"""Read-only reference data supplied by the persistence collaborators.

``ExistingParcel`` is an already-accepted parcel used only for overlap
comparison.  ``BoundaryLookup`` is the typed answer to "give me the
geometry of boundary region X": an absent or unconfigured reference
dataset is a normal, testable outcome rather than a caught exception.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class LookupStatus(enum.Enum):
    """Result state of a boundary region lookup.

    Values:
        FOUND:          The region exists and carries a geometry.
        NOT_FOUND:      The dataset exists but has no such region.
        NOT_CONFIGURED: No boundary dataset is available at all.
        UNAVAILABLE:    The dataset exists but could not be read.
    """

    FOUND = "found"
    NOT_FOUND = "not_found"
    NOT_CONFIGURED = "not_configured"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True, slots=True)
class ExistingParcel:
    """An accepted parcel in the storage frame.

    Attributes:
        id: Parcel identifier.
        geometry: GeoJSON geometry mapping (storage frame).
    """

    id: str | int
    geometry: dict[str, Any]

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "geometry": self.geometry}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> ExistingParcel:
        """Deserialise from ``{"id": ..., "geometry": {...}}``.

        Raises:
            TypeError: If ``geometry`` is not a mapping.
        """
        geometry = data.get("geometry")
        if not isinstance(geometry, dict):
            msg = f"geometry must be a dict, got {type(geometry).__name__}"
            raise TypeError(msg)
        return cls(id=data.get("id"), geometry=geometry)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class BoundaryLookup:
    """Typed result of resolving a boundary region reference.

    Attributes:
        status: Lookup state.
        region_id: The requested region identifier.
        geometry: Region geometry (storage frame) when ``FOUND``.
    """

    status: LookupStatus
    region_id: str | int | None = None
    geometry: dict[str, Any] | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND and self.geometry is not None

    @classmethod
    def hit(cls, region_id: str | int, geometry: dict[str, Any]) -> BoundaryLookup:
        return cls(status=LookupStatus.FOUND, region_id=region_id, geometry=geometry)

    @classmethod
    def not_found(cls, region_id: str | int | None) -> BoundaryLookup:
        return cls(status=LookupStatus.NOT_FOUND, region_id=region_id)

    @classmethod
    def not_configured(cls, region_id: str | int | None) -> BoundaryLookup:
        return cls(status=LookupStatus.NOT_CONFIGURED, region_id=region_id)

    @classmethod
    def unavailable(cls, region_id: str | int | None) -> BoundaryLookup:
        return cls(status=LookupStatus.UNAVAILABLE, region_id=region_id)
