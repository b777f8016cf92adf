"""GeometryEngine abstract base class.

Defines the narrow contract the validation core needs from a geometry
library.  The core never touches engine-native geometry objects except
through these methods, so tests can substitute a deterministic fake and
deployments can swap the backing library.

Geometries passed between methods are opaque engine-native objects;
``load`` and ``dump`` convert to and from GeoJSON mappings.
"""

from __future__ import annotations

import abc
from typing import Any


class GeometryEngine(abc.ABC):
    """Abstract base class for geometry engine adapters.

    Example usage::

        engine = get_engine("shapely")
        geom = engine.project(engine.load(mapping), "EPSG:4326", "EPSG:3123")
        ok, reason = engine.is_valid(geom)
    """

    #: Registry name of the adapter.
    name: str = ""

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def load(self, mapping: dict[str, Any]) -> Any:
        """Build an engine geometry from a GeoJSON mapping.

        Raises:
            GeometryEngineError: If the mapping cannot be turned into a geometry.
        """

    @abc.abstractmethod
    def dump(self, geom: Any) -> dict[str, Any]:
        """Serialise an engine geometry to a GeoJSON mapping with list coordinates."""

    @abc.abstractmethod
    def project(self, geom: Any, from_crs: str, to_crs: str) -> Any:
        """Reproject *geom* from *from_crs* to *to_crs*.

        Raises:
            GeometryEngineError: If a frame is unknown or the result is not finite.
        """

    # ------------------------------------------------------------------
    # Validity and repair
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def is_valid(self, geom: Any) -> tuple[bool, str]:
        """Return ``(valid, reason)``; *reason* explains any invalidity."""

    @abc.abstractmethod
    def repair(self, geom: Any) -> Any:
        """Return a valid geometry derived from *geom* (may change type)."""

    @abc.abstractmethod
    def extract_polygons(self, geom: Any) -> Any:
        """Return only the polygonal parts of *geom* as a multi-polygon (possibly empty)."""

    @abc.abstractmethod
    def to_multi(self, geom: Any) -> Any:
        """Promote a single-part geometry to its multi-part type."""

    # ------------------------------------------------------------------
    # Measures and predicates
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def is_empty(self, geom: Any) -> bool: ...

    @abc.abstractmethod
    def geom_type(self, geom: Any) -> str:
        """Return the GeoJSON type name of *geom*."""

    @abc.abstractmethod
    def area(self, geom: Any) -> float: ...

    @abc.abstractmethod
    def intersects(self, a: Any, b: Any) -> bool: ...

    @abc.abstractmethod
    def intersection_area(self, a: Any, b: Any) -> float: ...

    @abc.abstractmethod
    def covered_by(self, geom: Any, boundary: Any) -> bool:
        """Return ``True`` if every point of *geom* lies in or on *boundary*."""

    @abc.abstractmethod
    def area_unit(self, crs: str) -> str:
        """Return the areal unit of *crs* (e.g. ``"square metre"``)."""
