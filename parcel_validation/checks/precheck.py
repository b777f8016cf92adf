"""Upload-time fast checks.

Runs the same pure ring-closure and vertex-budget functions the
authoritative pipeline uses, over every feature of an uploaded
FeatureCollection, so an upload form can fail fast before sending
anything to the server.  It never calls the geometry engine and never
decides acceptance: ``ParcelValidator`` remains the source of truth.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from parcel_validation.checks._normalization import normalize_geometry
from parcel_validation.checks._structure import (
    check_vertex_budget,
    find_open_rings,
    open_ring_violation,
)
from parcel_validation.core.constants import (
    DEFAULT_INPUT_CRS,
    DEFAULT_VERTEX_LIMIT,
    ERR_EMPTY_GEOM,
    FEATURE_COLLECTION,
    POLYGONAL_TYPES,
)
from parcel_validation.core.exceptions import GeometryRuleViolation
from parcel_validation.models.outcome import ErrorRecord
from parcel_validation.utils.helpers import format_timestamp, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

logger = logging.getLogger("parcel_validation.checks.precheck")


def precheck_features(
    data: Any,
    *,
    vertex_limit: int = DEFAULT_VERTEX_LIMIT,
    clock: Callable[[], datetime] = utc_now,
) -> list[ErrorRecord]:
    """Run the engine-free checks on every feature of an upload.

    Args:
        data: A FeatureCollection, a single Feature, or a bare geometry.
        vertex_limit: Vertex budget per feature.
        clock: Time source for record timestamps.

    Returns:
        Accumulated error records, each tagged with ``feature_index``.
        Every open ring of a feature gets its own ``ERR_OPEN_RING`` record.
        Empty when every feature passes.
    """
    timestamp = format_timestamp(clock())
    features = _features_of(data)
    if not features:
        return [
            ErrorRecord.error(
                ERR_EMPTY_GEOM,
                "Upload contains no features.",
                {"feature_index": None},
                timestamp=timestamp,
            )
        ]

    records: list[ErrorRecord] = []
    for index, feature in enumerate(features):
        try:
            normalized = normalize_geometry(feature, default_crs=DEFAULT_INPUT_CRS)
        except GeometryRuleViolation as exc:
            records.append(_tagged(exc, index, timestamp))
            continue

        if normalized.geometry.get("type") in POLYGONAL_TYPES:
            for path in find_open_rings(normalized.coordinates):
                records.append(_tagged(open_ring_violation(path), index, timestamp))

        try:
            check_vertex_budget(normalized.coordinates, vertex_limit)
        except GeometryRuleViolation as exc:
            records.append(_tagged(exc, index, timestamp))

    logger.info(
        "Upload pre-check | features=%d | problems=%d", len(features), len(records)
    )
    return records


def _features_of(data: Any) -> list[Any]:
    """Return the list of feature-like values contained in *data*."""
    if isinstance(data, dict) and data.get("type") == FEATURE_COLLECTION:
        features = data.get("features")
        return list(features) if isinstance(features, list) else []
    if data is None:
        return []
    return [data]


def _tagged(exc: GeometryRuleViolation, index: int, timestamp: str) -> ErrorRecord:
    details = {**exc.details, "feature_index": index}
    return ErrorRecord.error(exc.code, exc.message, details, timestamp=timestamp)
