"""In-memory persistence collaborators.

Used by tests and by small deployments that keep the parcel layer in
process.  ``InMemoryParcelRepository`` also provides the transactional
check-then-write primitive: validation and the write happen under one
lock, so two concurrent submissions cannot both pass the overlap check
against the same snapshot.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from parcel_validation.core.exceptions import RepositoryError
from parcel_validation.models.parcel import BoundaryLookup, ExistingParcel
from parcel_validation.persistence.base import BoundaryRegionStore, ParcelRepository
from parcel_validation.utils.helpers import iter_positions

if TYPE_CHECKING:
    from collections.abc import Callable

    from parcel_validation.models.outcome import ValidationOutcome
    from parcel_validation.models.request import ValidationRequest

logger = logging.getLogger("parcel_validation.persistence.memory")

BBox = tuple[float, float, float, float]


class InMemoryParcelRepository(ParcelRepository):
    """Dict-backed parcel store with bounding-box candidate filtering.

    Parcels are keyed by the string form of their id, so ``12`` and
    ``"12"`` address the same parcel.
    """

    def __init__(self, parcels: list[ExistingParcel] | None = None) -> None:
        self._lock = threading.RLock()
        self._parcels: dict[str, ExistingParcel] = {}
        self._extents: dict[str, BBox] = {}
        for parcel in parcels or []:
            self.add(parcel)

    def __len__(self) -> int:
        with self._lock:
            return len(self._parcels)

    def add(self, parcel: ExistingParcel) -> None:
        """Insert or replace a parcel.

        Raises:
            RepositoryError: If the parcel geometry has no coordinates.
        """
        extent = geometry_bbox(parcel.geometry)
        if extent is None:
            msg = f"Parcel {parcel.id!r} has no coordinates"
            raise RepositoryError(msg)
        key = str(parcel.id)
        with self._lock:
            self._parcels[key] = parcel
            self._extents[key] = extent

    def get(self, parcel_id: str | int) -> ExistingParcel | None:
        with self._lock:
            return self._parcels.get(str(parcel_id))

    def remove(self, parcel_id: str | int) -> None:
        with self._lock:
            self._parcels.pop(str(parcel_id), None)
            self._extents.pop(str(parcel_id), None)

    def candidate_overlap_set(self, geometry: dict[str, Any]) -> list[ExistingParcel]:
        extent = geometry_bbox(geometry)
        if extent is None:
            return []
        with self._lock:
            return [
                self._parcels[pid]
                for pid, other in self._extents.items()
                if _bboxes_intersect(extent, other)
            ]

    def commit_validated(
        self,
        parcel_id: str | int,
        request: ValidationRequest,
        validate: Callable[[ValidationRequest], ValidationOutcome],
    ) -> ValidationOutcome:
        """Validate *request* and store its sanitized geometry atomically.

        *validate* must read overlap candidates from this repository
        (typically ``ParcelValidator.validate`` built over it).  The lock
        is held across validation and write, so the overlap invariant
        holds under concurrent submissions.

        Returns:
            The validation outcome; the parcel is written only if valid.
        """
        with self._lock:
            outcome = validate(request)
            if outcome.valid and outcome.sanitized_geometry is not None:
                geometry = {
                    "type": outcome.sanitized_geometry["type"],
                    "coordinates": outcome.sanitized_geometry["coordinates"],
                }
                self.add(ExistingParcel(id=parcel_id, geometry=geometry))
                logger.info("Parcel committed | id=%s | area=%s", parcel_id, outcome.area)
            else:
                logger.info(
                    "Parcel commit refused | id=%s | errors=%s",
                    parcel_id,
                    ",".join(outcome.error_codes),
                )
            return outcome


class InMemoryBoundaryStore(BoundaryRegionStore):
    """Dict-backed boundary region store.

    Region ids are keyed by their string form, so ``7`` and ``"7"`` name
    the same region.
    """

    def __init__(self, regions: dict[str | int, dict[str, Any]] | None = None) -> None:
        self._regions = {str(key): value for key, value in (regions or {}).items()}

    def resolve(self, region_id: str | int) -> BoundaryLookup:
        geometry = self._regions.get(str(region_id))
        if geometry is None:
            return BoundaryLookup.not_found(region_id)
        return BoundaryLookup.hit(region_id, geometry)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def geometry_bbox(geometry: dict[str, Any]) -> BBox | None:
    """Return ``(min_x, min_y, max_x, max_y)`` of a GeoJSON geometry, or ``None``."""
    xs: list[float] = []
    ys: list[float] = []
    for position in iter_positions(geometry.get("coordinates", [])):
        if len(position) < 2:
            continue
        xs.append(float(position[0]))
        ys.append(float(position[1]))
    if not xs:
        return None
    return (min(xs), min(ys), max(xs), max(ys))


def _bboxes_intersect(a: BBox, b: BBox) -> bool:
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]
