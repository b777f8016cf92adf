"""Read-only persistence collaborators used by the validator."""

from parcel_validation.persistence.base import (
    BoundaryRegionStore,
    NullBoundaryStore,
    ParcelRepository,
)
from parcel_validation.persistence.memory import InMemoryBoundaryStore, InMemoryParcelRepository

__all__ = [
    "BoundaryRegionStore",
    "InMemoryBoundaryStore",
    "InMemoryParcelRepository",
    "NullBoundaryStore",
    "ParcelRepository",
]
