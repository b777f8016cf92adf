"""Persistence collaborator contracts.

The validation core only ever *reads* reference data:

- ``ParcelRepository`` supplies already-accepted parcels that may overlap
  a candidate (ideally pre-filtered by bounding box).
- ``BoundaryRegionStore`` resolves a boundary region id to its geometry,
  answering with a typed ``BoundaryLookup`` instead of raising when the
  region or the whole dataset is absent.

Overlap results are advisory: two concurrent edits can both pass against
the same snapshot.  A repository that wants the no-overlap guarantee
must serialise check-then-write itself (see
``InMemoryParcelRepository.commit_validated``).
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from parcel_validation.models.parcel import BoundaryLookup

if TYPE_CHECKING:
    from collections.abc import Iterable

    from parcel_validation.models.parcel import ExistingParcel


class ParcelRepository(abc.ABC):
    """Read-only view of accepted parcels for overlap comparison."""

    @abc.abstractmethod
    def candidate_overlap_set(self, geometry: dict[str, Any]) -> Iterable[ExistingParcel]:
        """Return parcels whose extent may intersect *geometry*.

        Args:
            geometry: Candidate GeoJSON geometry in the storage frame.

        Raises:
            RepositoryError: If the parcel store cannot be read.
        """


class BoundaryRegionStore(abc.ABC):
    """Resolves boundary region references (e.g. barangays)."""

    @abc.abstractmethod
    def resolve(self, region_id: str | int) -> BoundaryLookup:
        """Return the region geometry, or a typed miss.

        Raises:
            RepositoryError: If the store exists but cannot be read.
        """


class NullBoundaryStore(BoundaryRegionStore):
    """Boundary store used when no reference dataset is deployed."""

    def resolve(self, region_id: str | int) -> BoundaryLookup:
        return BoundaryLookup.not_configured(region_id)
