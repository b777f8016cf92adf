"""Shared validation constants — single source of truth.

Error codes, rule identifiers, reference frames and tolerance defaults
used by the checks, the pipeline and the configuration loader.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

ERR_EMPTY_GEOM = "ERR_EMPTY_GEOM"
ERR_OPEN_RING = "ERR_OPEN_RING"
ERR_PROCESSING = "ERR_PROCESSING"
ERR_VERTEX_LIMIT = "ERR_VERTEX_LIMIT"
ERR_INVALID_TYPE = "ERR_INVALID_TYPE"
ERR_INVALID_GEOM = "ERR_INVALID_GEOM"
ERR_UNSAFE_FIX = "ERR_UNSAFE_FIX"
ERR_OUTSIDE_BARANGAY = "ERR_OUTSIDE_BARANGAY"
ERR_OVERLAP = "ERR_OVERLAP"
ERR_INTERNAL = "ERR_INTERNAL"

ERROR_CODES: frozenset[str] = frozenset(
    {
        ERR_EMPTY_GEOM,
        ERR_OPEN_RING,
        ERR_PROCESSING,
        ERR_VERTEX_LIMIT,
        ERR_INVALID_TYPE,
        ERR_INVALID_GEOM,
        ERR_UNSAFE_FIX,
        ERR_OUTSIDE_BARANGAY,
        ERR_OVERLAP,
        ERR_INTERNAL,
    }
)

# Warning codes (carried in ``ValidationOutcome.warnings``)
WARN_AUTO_FIXED = "WARN_AUTO_FIXED"
WARN_CONTAINMENT_SKIPPED = "WARN_CONTAINMENT_SKIPPED"

WARNING_CODES: frozenset[str] = frozenset({WARN_AUTO_FIXED, WARN_CONTAINMENT_SKIPPED})

STATUS_ERROR = "error"
STATUS_WARNING = "warning"

# ---------------------------------------------------------------------------
# Rule identifiers (reported in ``ErrorRecord.details["rule"]``)
# ---------------------------------------------------------------------------

RULE_VALID_GEOMETRY = "R2_VALID_GEOMETRY"
RULE_SAFE_AUTO_FIX = "R3_SAFE_AUTO_FIX"
RULE_CLOSED_RINGS = "R4_CLOSED_RINGS"
RULE_POLYGON_TYPE = "R6_POLYGON_TYPE"
RULE_BOUNDARY_CONTAINMENT = "R7_BOUNDARY_CONTAINMENT"
RULE_NO_OVERLAP = "R8_NO_OVERLAP"
RULE_VERTEX_LIMIT = "R9_VERTEX_LIMIT"

# ---------------------------------------------------------------------------
# Geometry types
# ---------------------------------------------------------------------------

POLYGON = "Polygon"
MULTI_POLYGON = "MultiPolygon"
POLYGONAL_TYPES: frozenset[str] = frozenset({POLYGON, MULTI_POLYGON})

FEATURE = "Feature"
FEATURE_COLLECTION = "FeatureCollection"

# ---------------------------------------------------------------------------
# Reference frames
# ---------------------------------------------------------------------------

DEFAULT_INPUT_CRS = "EPSG:4326"
"""Frame assumed for incoming GeoJSON without a ``crs`` member (WGS 84)."""

DEFAULT_STORAGE_CRS = "EPSG:3123"
"""Projected storage frame (PRS92 / Philippines zone III, metres)."""

# ---------------------------------------------------------------------------
# Tolerance policy defaults
# ---------------------------------------------------------------------------

DEFAULT_VERTEX_LIMIT = 5000
DEFAULT_AREA_CHANGE_TOLERANCE_PCT = 1.0
DEFAULT_NEGLIGIBLE_AREA = 0.1
DEFAULT_OVERLAP_MIN_AREA = 1.0

DEFAULT_GEOMETRY_ENGINE = "shapely"
