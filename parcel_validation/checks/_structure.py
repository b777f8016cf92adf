"""Structural pre-checks that never touch the geometry engine.

Responsibilities:
- Ring closure: every polygon ring's first and last positions are equal
- Vertex budget: bound the number of coordinate positions

Both are pure functions over GeoJSON coordinate arrays, shared by the
authoritative pipeline and the upload-time pre-check.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from parcel_validation.checks._normalization import count_vertices
from parcel_validation.core.constants import (
    ERR_OPEN_RING,
    ERR_VERTEX_LIMIT,
    POLYGONAL_TYPES,
    RULE_CLOSED_RINGS,
    RULE_VERTEX_LIMIT,
)
from parcel_validation.core.exceptions import GeometryRuleViolation
from parcel_validation.utils.helpers import is_position

logger = logging.getLogger("parcel_validation.checks.structure")


# ---------------------------------------------------------------------------
# Ring closure
# ---------------------------------------------------------------------------


def find_open_rings(coords: Any) -> Iterator[tuple[int, ...]]:
    """Yield the index path of every open ring in *coords*, in document order.

    An array whose first element is a position is a ring; its first and
    last positions are compared on x and y by exact numeric equality.
    The walk uses an explicit stack, so arbitrarily nested input cannot
    exhaust the interpreter's recursion limit.
    """
    pending: list[tuple[tuple[int, ...], Any]] = [((), coords)]
    while pending:
        path, node = pending.pop()
        if not isinstance(node, list | tuple) or not node:
            continue
        if is_position(node[0]):
            if _is_open(node):
                yield path
            continue
        pending.extend(((*path, idx), sub) for idx, sub in reversed(list(enumerate(node))))


def find_open_ring(coords: Any) -> tuple[int, ...] | None:
    """Return the index path of the first open ring in *coords*, or ``None``."""
    return next(find_open_rings(coords), None)


def open_ring_violation(path: tuple[int, ...]) -> GeometryRuleViolation:
    """Build the ``ERR_OPEN_RING`` violation for the ring at *path*."""
    return GeometryRuleViolation(
        ERR_OPEN_RING,
        "Polygon rings must be closed (first point must equal last point).",
        {"rule": RULE_CLOSED_RINGS, "path": list(path)},
        stage="ring_closure",
    )


def check_ring_closure(geometry: dict[str, Any]) -> None:
    """Reject polygonal geometries containing an open ring.

    Non-polygonal types have no rings and pass through to the type guard.

    Raises:
        GeometryRuleViolation: ``ERR_OPEN_RING`` for the first open ring.
    """
    if geometry.get("type") not in POLYGONAL_TYPES:
        return

    path = find_open_ring(geometry.get("coordinates", []))
    if path is None:
        return

    logger.debug("Open ring at path %s", list(path))
    raise open_ring_violation(path)


def _is_open(ring: list[Any] | tuple[Any, ...]) -> bool:
    first, last = ring[0], ring[-1]
    return not is_position(last) or list(first[:2]) != list(last[:2])


# ---------------------------------------------------------------------------
# Vertex budget
# ---------------------------------------------------------------------------


def check_vertex_budget(coordinates: Any, limit: int) -> int:
    """Count positions and reject geometries above *limit*.

    Returns:
        The vertex count.

    Raises:
        GeometryRuleViolation: ``ERR_VERTEX_LIMIT`` with ``count`` and ``limit``.
    """
    count = count_vertices(coordinates)
    if count > limit:
        raise GeometryRuleViolation(
            ERR_VERTEX_LIMIT,
            f"Geometry exceeds vertex limit ({limit}). Found: {count}",
            {"rule": RULE_VERTEX_LIMIT, "count": count, "limit": limit},
            stage="vertex_budget",
        )
    return count
