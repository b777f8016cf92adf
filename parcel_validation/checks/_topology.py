"""Topology checks: boundary containment and overlap with existing parcels.

Both checks run only after every structural guard has passed, and they
accumulate findings instead of raising, so a caller learns about every
topology problem in one round trip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from parcel_validation.core.constants import (
    ERR_OUTSIDE_BARANGAY,
    ERR_OVERLAP,
    RULE_BOUNDARY_CONTAINMENT,
    RULE_NO_OVERLAP,
    WARN_CONTAINMENT_SKIPPED,
)
from parcel_validation.core.exceptions import RepositoryError
from parcel_validation.models.outcome import ErrorRecord
from parcel_validation.models.parcel import BoundaryLookup

if TYPE_CHECKING:
    from parcel_validation.engine.base import GeometryEngine
    from parcel_validation.persistence.base import BoundaryRegionStore, ParcelRepository

logger = logging.getLogger("parcel_validation.checks.topology")


@dataclass(slots=True)
class CheckFindings:
    """Errors and warnings contributed by one topology check."""

    errors: list[ErrorRecord] = field(default_factory=list)
    warnings: list[ErrorRecord] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Containment
# ---------------------------------------------------------------------------


def check_containment(
    engine: GeometryEngine,
    geom: Any,
    *,
    boundaries: BoundaryRegionStore,
    region_id: str | int,
    timestamp: str,
) -> CheckFindings:
    """Require *geom* to lie fully inside (or on) the named boundary region.

    An unresolvable region, or a boundary store that raises
    ``RepositoryError``, skips the check with a warning; missing optional
    reference data never blocks a submission.
    """
    findings = CheckFindings()
    try:
        lookup = boundaries.resolve(region_id)
    except RepositoryError as exc:
        logger.warning(
            "Boundary store unreachable | region=%s | error=%s | retryable=%s",
            region_id,
            exc.message,
            exc.retryable,
        )
        lookup = BoundaryLookup.unavailable(region_id)

    if not lookup.found:
        logger.warning(
            "Skipping boundary containment check | region=%s | status=%s",
            region_id,
            lookup.status.value,
        )
        findings.warnings.append(
            ErrorRecord.warning(
                WARN_CONTAINMENT_SKIPPED,
                "Boundary containment check skipped: boundary region is unavailable.",
                {"boundary_region_id": region_id, "lookup_status": lookup.status.value},
                timestamp=timestamp,
            )
        )
        return findings

    boundary = engine.load(lookup.geometry)  # type: ignore[arg-type]
    if not engine.covered_by(geom, boundary):
        findings.errors.append(
            ErrorRecord.error(
                ERR_OUTSIDE_BARANGAY,
                "Parcel geometry is not strictly contained within the declared "
                "Barangay boundary.",
                {"rule": RULE_BOUNDARY_CONTAINMENT, "boundary_region_id": region_id},
                timestamp=timestamp,
            )
        )
    return findings


# ---------------------------------------------------------------------------
# Overlap
# ---------------------------------------------------------------------------


def check_overlaps(
    engine: GeometryEngine,
    geom: Any,
    geometry: dict[str, Any],
    *,
    parcels: ParcelRepository,
    exclude_parcel_id: str | int | None,
    min_area: float,
    timestamp: str,
) -> CheckFindings:
    """Compare *geom* against accepted parcels.

    Intersections smaller than *min_area* are noise.  The parcel being
    edited (*exclude_parcel_id*) is never compared with itself.  All
    collisions are reported in a single ``ERR_OVERLAP`` record.

    Args:
        engine: Geometry engine.
        geom: Candidate engine geometry (storage frame).
        geometry: The same candidate as a GeoJSON mapping, for the
            repository's bounding-box pre-filter.
        parcels: Accepted-parcel repository.
        exclude_parcel_id: Parcel id to skip.
        min_area: Minimum significant intersection area.
        timestamp: Record timestamp.
    """
    findings = CheckFindings()
    overlapping: list[dict[str, Any]] = []

    for parcel in parcels.candidate_overlap_set(geometry):
        if exclude_parcel_id is not None and same_parcel_id(parcel.id, exclude_parcel_id):
            continue
        other = engine.load(parcel.geometry)
        if not engine.intersects(geom, other):
            continue
        overlap_area = engine.intersection_area(geom, other)
        # Shared edges intersect with zero area even when min_area is 0.
        if overlap_area <= 0 or overlap_area < min_area:
            logger.debug(
                "Ignoring overlap below threshold | parcel=%s | area=%.4f", parcel.id, overlap_area
            )
            continue
        overlapping.append({"id": parcel.id, "overlap_area": overlap_area})

    if not overlapping:
        return findings

    overlapping.sort(key=lambda entry: entry["overlap_area"], reverse=True)
    ids = ", ".join(str(entry["id"]) for entry in overlapping)
    findings.errors.append(
        ErrorRecord.error(
            ERR_OVERLAP,
            f"Geometry overlaps with existing parcel(s): {ids}",
            {"rule": RULE_NO_OVERLAP, "overlapping_parcels": overlapping},
            timestamp=timestamp,
        )
    )
    return findings


def same_parcel_id(a: str | int, b: str | int) -> bool:
    """Compare parcel ids that may arrive as ``12`` or ``"12"``."""
    return str(a) == str(b)
