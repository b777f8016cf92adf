"""Geometry engine adapters.

The validation core talks to geometry libraries only through the
``GeometryEngine`` interface.  ``get_engine`` selects an adapter by name.
"""

from parcel_validation.engine.base import GeometryEngine
from parcel_validation.engine.factory import (
    EngineNotFoundError,
    get_engine,
    list_engines,
    register_engine,
)

__all__ = [
    "EngineNotFoundError",
    "GeometryEngine",
    "get_engine",
    "list_engines",
    "register_engine",
]
