"""Shared pytest fixtures for the parcel validation test suite."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import pytest

from parcel_validation.core.config import ValidationConfig
from parcel_validation.core.exceptions import GeometryEngineError
from parcel_validation.engine.base import GeometryEngine

# ---------------------------------------------------------------------------
# Reference geometries (storage-frame metres)
# ---------------------------------------------------------------------------

FIXED_NOW = datetime(2026, 3, 2, 9, 30, 0, tzinfo=UTC)

METRIC_CRS = "EPSG:3123"


def square(x0: float, y0: float, size: float) -> dict[str, Any]:
    """Closed square polygon with its lower-left corner at ``(x0, y0)``."""
    return {
        "type": "Polygon",
        "coordinates": [
            [
                [x0, y0],
                [x0 + size, y0],
                [x0 + size, y0 + size],
                [x0, y0 + size],
                [x0, y0],
            ]
        ],
    }


def ring_with_vertices(count: int) -> dict[str, Any]:
    """Closed polygon whose single ring has exactly *count* positions."""
    import math

    points = count - 1
    ring = [
        [
            500000.0 + 100.0 * math.cos(2 * math.pi * i / points),
            1500000.0 + 100.0 * math.sin(2 * math.pi * i / points),
        ]
        for i in range(points)
    ]
    ring.append(list(ring[0]))
    return {"type": "Polygon", "coordinates": [ring]}


# ---------------------------------------------------------------------------
# Fake engine
# ---------------------------------------------------------------------------


class FakeGeometryEngine(GeometryEngine):
    """Deterministic engine with scripted validity and areas.

    Geometries are plain dicts tagged with a ``state`` of ``"input"`` or
    ``"repaired"``; every method call is recorded in ``calls``.
    """

    name = "fake"

    def __init__(
        self,
        *,
        valid: bool = True,
        reason: str = "Valid Geometry",
        original_area: float = 100.0,
        repaired_area: float = 100.0,
        repaired_empty: bool = False,
        covered: bool = True,
        load_error: str = "",
        is_valid_error: Exception | None = None,
    ) -> None:
        self.valid = valid
        self.reason = reason
        self.original_area = original_area
        self.repaired_area = repaired_area
        self.repaired_empty = repaired_empty
        self.covered = covered
        self.load_error = load_error
        self.is_valid_error = is_valid_error
        self.calls: list[str] = []

    def load(self, mapping: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("load")
        if self.load_error:
            raise GeometryEngineError(self.load_error)
        return {"type": mapping["type"], "coordinates": mapping["coordinates"], "state": "input"}

    def dump(self, geom: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("dump")
        return {"type": geom["type"], "coordinates": geom["coordinates"]}

    def project(self, geom: dict[str, Any], from_crs: str, to_crs: str) -> dict[str, Any]:
        self.calls.append("project")
        return dict(geom)

    def is_valid(self, geom: dict[str, Any]) -> tuple[bool, str]:
        self.calls.append("is_valid")
        if self.is_valid_error is not None:
            raise self.is_valid_error
        if geom["state"] == "input":
            return self.valid, self.reason
        return True, "Valid Geometry"

    def repair(self, geom: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("repair")
        return {**geom, "state": "repaired"}

    def extract_polygons(self, geom: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("extract_polygons")
        if self.repaired_empty:
            return {"type": "MultiPolygon", "coordinates": [], "state": "repaired"}
        coords = geom["coordinates"]
        if geom["type"] == "Polygon":
            coords = [coords]
        return {"type": "MultiPolygon", "coordinates": coords, "state": "repaired"}

    def to_multi(self, geom: dict[str, Any]) -> dict[str, Any]:
        self.calls.append("to_multi")
        multi = {"Polygon": "MultiPolygon", "LineString": "MultiLineString", "Point": "MultiPoint"}
        if geom["type"] in multi:
            return {**geom, "type": multi[geom["type"]], "coordinates": [geom["coordinates"]]}
        return geom

    def is_empty(self, geom: dict[str, Any]) -> bool:
        return not geom["coordinates"]

    def geom_type(self, geom: dict[str, Any]) -> str:
        return str(geom["type"])

    def area(self, geom: dict[str, Any]) -> float:
        self.calls.append("area")
        if geom["type"] not in ("Polygon", "MultiPolygon"):
            return 0.0
        return self.repaired_area if geom["state"] == "repaired" else self.original_area

    def intersects(self, a: dict[str, Any], b: dict[str, Any]) -> bool:
        self.calls.append("intersects")
        return False

    def intersection_area(self, a: dict[str, Any], b: dict[str, Any]) -> float:
        self.calls.append("intersection_area")
        return 0.0

    def covered_by(self, geom: dict[str, Any], boundary: dict[str, Any]) -> bool:
        self.calls.append("covered_by")
        return self.covered

    def area_unit(self, crs: str) -> str:
        return "square metre"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def fixed_clock() -> Any:
    """Clock that always returns ``FIXED_NOW``."""
    return lambda: FIXED_NOW


@pytest.fixture()
def fake_engine_cls() -> type[FakeGeometryEngine]:
    """The scripted fake engine class (instantiate with scenario values)."""
    return FakeGeometryEngine


@pytest.fixture()
def metric_config() -> ValidationConfig:
    """Config whose input and storage frames are the same metric CRS."""
    return ValidationConfig(input_crs=METRIC_CRS, storage_crs=METRIC_CRS)


@pytest.fixture(scope="session")
def shapely_engine() -> GeometryEngine:
    """A real shapely/pyproj engine (shared; transformer cache is thread-safe)."""
    from parcel_validation.engine.shapely_engine import ShapelyGeometryEngine

    return ShapelyGeometryEngine()


@pytest.fixture()
def unit_square() -> dict[str, Any]:
    """10 m x 10 m square at the origin (area 100)."""
    return square(0.0, 0.0, 10.0)


@pytest.fixture()
def make_square() -> Any:
    """Factory ``make_square(x0, y0, size)`` for closed square polygons."""
    return square


@pytest.fixture()
def make_ring() -> Any:
    """Factory ``make_ring(count)`` for a closed polygon with *count* positions."""
    return ring_with_vertices
