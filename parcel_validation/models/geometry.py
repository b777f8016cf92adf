"""Data model for a normalized candidate geometry.

A ``NormalizedGeometry`` is the bare GeoJSON geometry extracted from a
request (Feature wrapper and foreign keys stripped) together with the
reference frame its numbers are expressed in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from parcel_validation.core.constants import DEFAULT_INPUT_CRS


@dataclass(frozen=True, slots=True)
class NormalizedGeometry:
    """A bare GeoJSON geometry plus its declared reference frame.

    Attributes:
        geometry: Mapping with exactly ``type`` and ``coordinates``.
        crs: Reference frame identifier (e.g. ``"EPSG:4326"``).
    """

    geometry: dict[str, Any] = field(default_factory=dict)
    crs: str = DEFAULT_INPUT_CRS

    @property
    def geom_type(self) -> str:
        """GeoJSON type name (e.g. ``"Polygon"``)."""
        return str(self.geometry.get("type", ""))

    @property
    def coordinates(self) -> Any:
        """Raw nested coordinate arrays."""
        return self.geometry.get("coordinates", [])

    def to_dict(self) -> dict[str, object]:
        """Serialise as GeoJSON with a legacy named-CRS member."""
        return {
            "type": self.geom_type,
            "coordinates": self.coordinates,
            "crs": crs_member(self.crs),
        }


def crs_member(crs: str) -> dict[str, object]:
    """Build a legacy GeoJSON ``crs`` member naming *crs*."""
    return {"type": "name", "properties": {"name": crs}}
