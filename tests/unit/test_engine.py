"""Tests for the geometry engine adapters and the engine factory.

Covers:
- ShapelyGeometryEngine conversion, validity, repair and predicates
- Reprojection 4326 → 3123 and frame errors
- Areal unit derived from the storage frame
- Factory registry, lookup and custom registration
"""

from __future__ import annotations

from typing import Any

import pytest

from parcel_validation.core.exceptions import GeometryEngineError
from parcel_validation.engine import factory
from parcel_validation.engine.base import GeometryEngine
from parcel_validation.engine.factory import (
    EngineNotFoundError,
    get_engine,
    list_engines,
    register_engine,
)
from parcel_validation.engine.shapely_engine import ShapelyGeometryEngine

BOWTIE = {"type": "Polygon", "coordinates": [[[0, 0], [10, 10], [10, 0], [0, 10], [0, 0]]]}


# ===========================================================================
# Shapely engine
# ===========================================================================


class TestShapelyConversion:
    """load / dump."""

    def test_dump_uses_lists(self, shapely_engine: Any, unit_square: dict) -> None:
        dumped = shapely_engine.dump(shapely_engine.load(unit_square))
        assert dumped["type"] == "Polygon"
        assert isinstance(dumped["coordinates"][0][0], list)
        assert dumped["coordinates"][0][0] == [0.0, 0.0]

    def test_load_error(self, shapely_engine: Any) -> None:
        with pytest.raises(GeometryEngineError):
            shapely_engine.load({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})


class TestShapelyValidity:
    """is_valid / repair / extract_polygons / to_multi."""

    def test_valid_square(self, shapely_engine: Any, unit_square: dict) -> None:
        assert shapely_engine.is_valid(shapely_engine.load(unit_square)) == (True, "Valid Geometry")

    def test_bowtie_is_invalid(self, shapely_engine: Any) -> None:
        ok, reason = shapely_engine.is_valid(shapely_engine.load(BOWTIE))
        assert ok is False
        assert reason.startswith("Self-intersection")

    def test_bowtie_repair_keeps_both_lobes(self, shapely_engine: Any) -> None:
        geom = shapely_engine.load(BOWTIE)
        repaired = shapely_engine.extract_polygons(shapely_engine.repair(geom))
        assert shapely_engine.geom_type(repaired) == "MultiPolygon"
        assert shapely_engine.area(repaired) == pytest.approx(50.0)
        assert shapely_engine.is_valid(repaired)[0] is True

    def test_extract_polygons_drops_lines(self, shapely_engine: Any) -> None:
        collection = shapely_engine.load(
            {
                "type": "GeometryCollection",
                "geometries": [
                    {"type": "LineString", "coordinates": [[0, 0], [5, 5]]},
                    {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
                ],
            }
        )
        polygons = shapely_engine.extract_polygons(collection)
        assert shapely_engine.geom_type(polygons) == "MultiPolygon"
        assert shapely_engine.area(polygons) == pytest.approx(0.5)

    def test_extract_polygons_from_line_is_empty(self, shapely_engine: Any) -> None:
        line = shapely_engine.load({"type": "LineString", "coordinates": [[0, 0], [5, 5]]})
        assert shapely_engine.is_empty(shapely_engine.extract_polygons(line)) is True

    def test_to_multi(self, shapely_engine: Any, unit_square: dict) -> None:
        multi = shapely_engine.to_multi(shapely_engine.load(unit_square))
        assert shapely_engine.geom_type(multi) == "MultiPolygon"
        point = shapely_engine.to_multi(shapely_engine.load({"type": "Point", "coordinates": [1, 2]}))
        assert shapely_engine.geom_type(point) == "MultiPoint"


class TestShapelyPredicates:
    """intersects / intersection_area / covered_by."""

    def test_intersection_area(self, shapely_engine: Any, make_square: Any) -> None:
        a = shapely_engine.load(make_square(0, 0, 10))
        b = shapely_engine.load(make_square(5, 0, 10))
        assert shapely_engine.intersects(a, b) is True
        assert shapely_engine.intersection_area(a, b) == pytest.approx(50.0)

    def test_covered_by_includes_boundary(self, shapely_engine: Any, make_square: Any) -> None:
        outer = shapely_engine.load(make_square(0, 0, 10))
        assert shapely_engine.covered_by(shapely_engine.load(make_square(0, 0, 10)), outer) is True
        assert shapely_engine.covered_by(shapely_engine.load(make_square(5, 5, 10)), outer) is False


class TestShapelyProjection:
    """project and area_unit."""

    def test_same_frame_is_identity(self, shapely_engine: Any, unit_square: dict) -> None:
        geom = shapely_engine.load(unit_square)
        assert shapely_engine.project(geom, "EPSG:3123", "EPSG:3123") is geom

    def test_wgs84_to_prs92(self, shapely_engine: Any) -> None:
        lonlat = {
            "type": "Polygon",
            "coordinates": [
                [[121.0, 14.5], [121.001, 14.5], [121.001, 14.501], [121.0, 14.501], [121.0, 14.5]]
            ],
        }
        projected = shapely_engine.project(shapely_engine.load(lonlat), "EPSG:4326", "EPSG:3123")
        min_x, min_y, _, _ = projected.bounds
        assert 400_000 < min_x < 600_000
        assert 1_500_000 < min_y < 1_700_000
        assert shapely_engine.area(projected) == pytest.approx(12000.0, rel=0.05)

    def test_unknown_frame(self, shapely_engine: Any, unit_square: dict) -> None:
        with pytest.raises(GeometryEngineError):
            shapely_engine.project(shapely_engine.load(unit_square), "EPSG:4326", "EPSG:999999")

    def test_area_unit(self, shapely_engine: Any) -> None:
        assert shapely_engine.area_unit("EPSG:3123") == "square metre"
        assert shapely_engine.area_unit("EPSG:3123") == "square metre"

    def test_area_unit_unknown_frame(self) -> None:
        with pytest.raises(GeometryEngineError):
            ShapelyGeometryEngine().area_unit("not-a-crs")


# ===========================================================================
# Factory
# ===========================================================================


@pytest.fixture()
def restore_registry() -> Any:
    """Snapshot and restore the engine registry around a test."""
    snapshot = dict(factory._ENGINE_REGISTRY)
    yield
    factory._ENGINE_REGISTRY.clear()
    factory._ENGINE_REGISTRY.update(snapshot)


class TestEngineFactory:
    """Engine registry lookups."""

    def test_default_engine_is_shapely(self) -> None:
        engine = get_engine()
        assert isinstance(engine, ShapelyGeometryEngine)
        assert engine.name == "shapely"

    def test_list_engines(self) -> None:
        assert "shapely" in list_engines()

    def test_unknown_engine(self) -> None:
        with pytest.raises(EngineNotFoundError, match="Available: "):
            get_engine("arcpy")

    @pytest.mark.usefixtures("restore_registry")
    def test_register_custom_engine(self, fake_engine_cls: Any) -> None:
        register_engine("fake", fake_engine_cls)
        engine = get_engine("fake")
        assert isinstance(engine, GeometryEngine)
        assert "fake" in list_engines()
        assert "shapely" in list_engines()

    def test_register_requires_name(self, fake_engine_cls: Any) -> None:
        with pytest.raises(ValueError):
            register_engine("", fake_engine_cls)
