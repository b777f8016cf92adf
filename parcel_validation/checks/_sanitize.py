"""Reprojection, validity testing and safe auto-repair.

The engine projects the candidate into the storage frame and reports
validity.  Invalid geometries are repaired and polygonal parts kept, but
a repair is only accepted when it does not distort the boundary:

- repaired candidate empty or zero-area    → ``ERR_INVALID_GEOM``
- original area ≤ negligible threshold      → accept (slivers, self-touching)
- area change ≤ tolerance percent           → accept
- otherwise                                 → ``ERR_UNSAFE_FIX``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from parcel_validation.core.constants import (
    ERR_INVALID_GEOM,
    ERR_UNSAFE_FIX,
    RULE_SAFE_AUTO_FIX,
    RULE_VALID_GEOMETRY,
)
from parcel_validation.core.exceptions import GeometryRuleViolation

if TYPE_CHECKING:
    from parcel_validation.engine.base import GeometryEngine
    from parcel_validation.models.geometry import NormalizedGeometry

logger = logging.getLogger("parcel_validation.checks.sanitize")

# Change reported when the original area is zero (any repair is "total").
_FULL_CHANGE_PCT = 100.0


@dataclass(frozen=True, slots=True)
class SanitizeResult:
    """Geometry accepted by the sanitizer.

    Attributes:
        geometry: Engine geometry in the storage frame, multi-part type.
        area: Area of ``geometry``.
        repaired: Whether the engine repair was applied.
        reason: Engine validity reason for the original geometry.
        original_area: Area of the projected input before repair.
        area_change_pct: Area drift caused by the repair (``0.0`` when none).
    """

    geometry: Any
    area: float
    repaired: bool = False
    reason: str = ""
    original_area: float = 0.0
    area_change_pct: float = 0.0


def project_geometry(
    engine: GeometryEngine, normalized: NormalizedGeometry, storage_crs: str
) -> Any:
    """Build the engine geometry and reproject it into *storage_crs*.

    Raises:
        GeometryEngineError: If the geometry cannot be built or projected.
    """
    geom = engine.load(normalized.geometry)
    return engine.project(geom, normalized.crs, storage_crs)


def area_change_pct(original_area: float, fixed_area: float) -> float:
    """Return ``|original - fixed| / original * 100`` (100 when original is 0)."""
    if original_area <= 0:
        return _FULL_CHANGE_PCT
    return abs(original_area - fixed_area) / original_area * 100.0


def sanitize_geometry(
    engine: GeometryEngine,
    geom: Any,
    *,
    negligible_area: float,
    tolerance_pct: float,
) -> SanitizeResult:
    """Accept, repair, or reject a projected geometry.

    Raises:
        GeometryRuleViolation: ``ERR_INVALID_GEOM`` or ``ERR_UNSAFE_FIX``.
    """
    is_valid, reason = engine.is_valid(geom)
    if is_valid:
        multi = engine.to_multi(geom)
        area = engine.area(multi)
        return SanitizeResult(geometry=multi, area=area, reason=reason, original_area=area)

    logger.warning("Invalid geometry, attempting repair | reason=%s", reason)
    original_area = engine.area(geom)
    repaired = engine.extract_polygons(engine.repair(geom))
    fixed_area = 0.0 if engine.is_empty(repaired) else engine.area(repaired)

    if fixed_area <= 0:
        raise GeometryRuleViolation(
            ERR_INVALID_GEOM,
            f"Geometry is invalid and could not be auto-fixed: {reason}",
            {"rule": RULE_VALID_GEOMETRY, "reason": reason},
            stage="sanitize",
        )

    change_pct = area_change_pct(original_area, fixed_area)
    if original_area > negligible_area and change_pct > tolerance_pct:
        raise GeometryRuleViolation(
            ERR_UNSAFE_FIX,
            f"Auto-fix rejected: Area changed by {change_pct:.2f}% "
            f"(Tolerance: {tolerance_pct:g}%).",
            {
                "rule": RULE_SAFE_AUTO_FIX,
                "reason": reason,
                "original_area": original_area,
                "fixed_area": fixed_area,
                "area_change_pct": change_pct,
                "tolerance_pct": tolerance_pct,
            },
            stage="sanitize",
        )

    logger.info(
        "Geometry repaired | original_area=%.4f | fixed_area=%.4f | change=%.3f%%",
        original_area,
        fixed_area,
        change_pct,
    )
    return SanitizeResult(
        geometry=repaired,
        area=fixed_area,
        repaired=True,
        reason=reason,
        original_area=original_area,
        area_change_pct=change_pct,
    )
