"""Geometry normalization for parcel validation.

Responsibilities:
- Unwrap a GeoJSON Feature into its bare geometry
- Reject missing, malformed or coordinate-free input (``ERR_EMPTY_GEOM``)
- Strip every key except ``type`` and ``coordinates``
- Read the declared reference frame from a legacy ``crs`` member
"""

from __future__ import annotations

from typing import Any

from parcel_validation.core.constants import ERR_EMPTY_GEOM, FEATURE
from parcel_validation.core.exceptions import GeometryRuleViolation
from parcel_validation.models.geometry import NormalizedGeometry
from parcel_validation.utils.helpers import iter_positions

EMPTY_GEOMETRY_MESSAGE = "Geometry is empty or null."


def normalize_geometry(raw: Any, *, default_crs: str) -> NormalizedGeometry:
    """Extract the bare geometry from a Feature or geometry value.

    Args:
        raw: Decoded JSON value from the request.
        default_crs: Frame assumed when the input does not declare one.

    Returns:
        The normalized geometry with its reference frame.

    Raises:
        GeometryRuleViolation: ``ERR_EMPTY_GEOM`` if the value is missing,
            malformed, or has zero coordinates.
    """
    if not isinstance(raw, dict):
        raise _empty({"reason": "missing" if raw is None else "not_an_object"})

    geometry: Any = raw
    crs = _declared_crs(raw)
    if raw.get("type") == FEATURE:
        geometry = raw.get("geometry")
        if not isinstance(geometry, dict):
            raise _empty({"reason": "feature_without_geometry"})
        crs = _declared_crs(geometry) or crs

    geom_type = geometry.get("type")
    if not isinstance(geom_type, str) or not geom_type:
        raise _empty({"reason": "missing_type"})

    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, list) or not coordinates:
        raise _empty({"reason": "no_coordinates", "geometry_type": geom_type})

    if count_vertices(coordinates) == 0:
        raise _empty({"reason": "no_coordinates", "geometry_type": geom_type})

    return NormalizedGeometry(
        geometry={"type": geom_type, "coordinates": coordinates},
        crs=crs or default_crs,
    )


def count_vertices(coordinates: Any) -> int:
    """Count leaf coordinate positions."""
    return sum(1 for _ in iter_positions(coordinates))


def _declared_crs(obj: dict[str, Any]) -> str:
    """Return the frame named by a legacy GeoJSON ``crs`` member, or ``""``."""
    member = obj.get("crs")
    if not isinstance(member, dict):
        return ""
    properties = member.get("properties")
    if not isinstance(properties, dict):
        return ""
    name = properties.get("name")
    return name.strip() if isinstance(name, str) else ""


def _empty(details: dict[str, Any]) -> GeometryRuleViolation:
    return GeometryRuleViolation(
        ERR_EMPTY_GEOM, EMPTY_GEOMETRY_MESSAGE, details, stage="normalize"
    )
