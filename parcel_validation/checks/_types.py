"""Polygon type guard."""

from __future__ import annotations

from parcel_validation.core.constants import ERR_INVALID_TYPE, POLYGONAL_TYPES, RULE_POLYGON_TYPE
from parcel_validation.core.exceptions import GeometryRuleViolation


def check_polygon_type(geom_type: str) -> None:
    """Require the accepted shape to be ``Polygon`` or ``MultiPolygon``.

    Raises:
        GeometryRuleViolation: ``ERR_INVALID_TYPE`` for any other type.
    """
    if geom_type in POLYGONAL_TYPES:
        return
    raise GeometryRuleViolation(
        ERR_INVALID_TYPE,
        f"Geometry must be POLYGON or MULTIPOLYGON. Got: {geom_type or 'unknown'}",
        {"rule": RULE_POLYGON_TYPE, "geometry_type": geom_type},
        stage="polygon_type",
    )
