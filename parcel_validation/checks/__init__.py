"""Parcel geometry checks — composable stages.

The validation pipeline is split into focused stages:
- **_normalization**: Feature unwrap, empty-input rejection, CRS member
- **_structure**: ring closure and vertex budget (engine-free)
- **_sanitize**: reprojection, validity and safe auto-repair
- **_types**: polygon type guard
- **_topology**: boundary containment and overlap (accumulating)
- **_assembly**: final ``ValidationOutcome`` construction
- **precheck**: upload-time fast checks over a FeatureCollection
"""

from __future__ import annotations

from parcel_validation.checks._assembly import (
    assemble_outcome,
    fail_fast_outcome,
    internal_error_outcome,
    processing_error_outcome,
)
from parcel_validation.checks._normalization import count_vertices, normalize_geometry
from parcel_validation.checks._sanitize import (
    SanitizeResult,
    area_change_pct,
    project_geometry,
    sanitize_geometry,
)
from parcel_validation.checks._structure import (
    check_ring_closure,
    check_vertex_budget,
    find_open_ring,
    find_open_rings,
    open_ring_violation,
)
from parcel_validation.checks._topology import (
    CheckFindings,
    check_containment,
    check_overlaps,
    same_parcel_id,
)
from parcel_validation.checks._types import check_polygon_type
from parcel_validation.checks.precheck import precheck_features

__all__ = [
    "CheckFindings",
    "SanitizeResult",
    "area_change_pct",
    "assemble_outcome",
    "check_containment",
    "check_overlaps",
    "check_polygon_type",
    "check_ring_closure",
    "check_vertex_budget",
    "count_vertices",
    "fail_fast_outcome",
    "find_open_ring",
    "find_open_rings",
    "internal_error_outcome",
    "normalize_geometry",
    "open_ring_violation",
    "precheck_features",
    "processing_error_outcome",
    "project_geometry",
    "same_parcel_id",
    "sanitize_geometry",
]
