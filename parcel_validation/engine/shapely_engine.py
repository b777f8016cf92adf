"""Shapely + pyproj geometry engine adapter.

Validity, repair, predicates and areas delegate to shapely (GEOS);
reprojection delegates to pyproj.  Transformers are cached per frame
pair because building one is far more expensive than using it.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import TYPE_CHECKING, Any

from parcel_validation.core.constants import POLYGON
from parcel_validation.core.exceptions import GeometryEngineError
from parcel_validation.engine.base import GeometryEngine

if TYPE_CHECKING:
    from pyproj import Transformer
    from shapely.geometry.base import BaseGeometry

logger = logging.getLogger("parcel_validation.engine.shapely")

_VALID_REASON = "Valid Geometry"


class ShapelyGeometryEngine(GeometryEngine):
    """Geometry engine backed by shapely and pyproj."""

    name = "shapely"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._transformers: dict[tuple[str, str], Transformer] = {}
        self._area_units: dict[str, str] = {}

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def load(self, mapping: dict[str, Any]) -> BaseGeometry:
        from shapely.geometry import shape

        try:
            return shape(mapping)
        except Exception as exc:
            msg = f"Cannot build {mapping.get('type', 'geometry')} from coordinates: {exc}"
            raise GeometryEngineError(msg) from exc

    def dump(self, geom: BaseGeometry) -> dict[str, Any]:
        from shapely.geometry import mapping

        raw = mapping(geom)
        return {"type": raw["type"], "coordinates": _listify(raw.get("coordinates", []))}

    def project(self, geom: BaseGeometry, from_crs: str, to_crs: str) -> BaseGeometry:
        if from_crs == to_crs:
            return geom

        from shapely.ops import transform

        transformer = self._transformer(from_crs, to_crs)
        try:
            projected = transform(transformer.transform, geom)
        except Exception as exc:
            msg = f"Reprojection {from_crs} -> {to_crs} failed: {exc}"
            raise GeometryEngineError(msg) from exc

        if not projected.is_empty and not all(math.isfinite(v) for v in projected.bounds):
            msg = f"Coordinates fall outside the valid area of {to_crs}"
            raise GeometryEngineError(msg)
        return projected

    # ------------------------------------------------------------------
    # Validity and repair
    # ------------------------------------------------------------------

    def is_valid(self, geom: BaseGeometry) -> tuple[bool, str]:
        from shapely.validation import explain_validity

        if geom.is_valid:
            return True, _VALID_REASON
        return False, explain_validity(geom)

    def repair(self, geom: BaseGeometry) -> BaseGeometry:
        from shapely.validation import make_valid

        return make_valid(geom)

    def extract_polygons(self, geom: BaseGeometry) -> BaseGeometry:
        from shapely.geometry import MultiPolygon

        return MultiPolygon([p for p in _iter_polygons(geom) if not p.is_empty])

    def to_multi(self, geom: BaseGeometry) -> BaseGeometry:
        from shapely.geometry import LineString, MultiLineString, MultiPoint, MultiPolygon, Point
        from shapely.geometry import Polygon as ShapelyPolygon

        if isinstance(geom, ShapelyPolygon):
            return MultiPolygon([geom])
        if isinstance(geom, LineString):
            return MultiLineString([geom])
        if isinstance(geom, Point):
            return MultiPoint([geom])
        return geom

    # ------------------------------------------------------------------
    # Measures and predicates
    # ------------------------------------------------------------------

    def is_empty(self, geom: BaseGeometry) -> bool:
        return bool(geom.is_empty)

    def geom_type(self, geom: BaseGeometry) -> str:
        return str(geom.geom_type)

    def area(self, geom: BaseGeometry) -> float:
        return float(geom.area)

    def intersects(self, a: BaseGeometry, b: BaseGeometry) -> bool:
        return bool(a.intersects(b))

    def intersection_area(self, a: BaseGeometry, b: BaseGeometry) -> float:
        return float(a.intersection(b).area)

    def covered_by(self, geom: BaseGeometry, boundary: BaseGeometry) -> bool:
        return bool(geom.covered_by(boundary))

    def area_unit(self, crs: str) -> str:
        with self._lock:
            cached = self._area_units.get(crs)
        if cached is not None:
            return cached

        from pyproj import CRS
        from pyproj.exceptions import CRSError

        try:
            axis_info = CRS.from_user_input(crs).axis_info
        except CRSError as exc:
            msg = f"Unknown reference frame {crs!r}: {exc}"
            raise GeometryEngineError(msg) from exc

        unit = f"square {axis_info[0].unit_name}" if axis_info else "unknown"
        with self._lock:
            self._area_units[crs] = unit
        return unit

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _transformer(self, from_crs: str, to_crs: str) -> Transformer:
        key = (from_crs, to_crs)
        with self._lock:
            cached = self._transformers.get(key)
        if cached is not None:
            return cached

        from pyproj import Transformer
        from pyproj.exceptions import CRSError, ProjError

        try:
            transformer = Transformer.from_crs(from_crs, to_crs, always_xy=True)
        except (CRSError, ProjError) as exc:
            msg = f"Unknown reference frame in {from_crs} -> {to_crs}: {exc}"
            raise GeometryEngineError(msg) from exc

        with self._lock:
            self._transformers.setdefault(key, transformer)
        logger.debug("Built transformer %s -> %s", from_crs, to_crs)
        return transformer


def _iter_polygons(geom: BaseGeometry) -> list[BaseGeometry]:
    """Collect polygon parts from any (possibly nested) geometry."""
    if geom.geom_type == POLYGON:
        return [geom]
    if hasattr(geom, "geoms"):
        parts: list[BaseGeometry] = []
        for sub in geom.geoms:  # type: ignore[attr-defined]
            parts.extend(_iter_polygons(sub))
        return parts
    return []


def _listify(value: Any) -> Any:
    """Convert nested coordinate tuples to lists."""
    if isinstance(value, list | tuple):
        return [_listify(v) for v in value]
    return value
