"""Engine factory — selects the geometry engine adapter by name.

The factory maintains a registry of known adapters.  New adapters are
registered with ``register_engine``; test suites use the same hook to
plug in deterministic fakes.

Usage::

    from parcel_validation.engine.factory import get_engine

    engine = get_engine("shapely")

The engine name is read from the ``PARCEL_GEOMETRY_ENGINE`` environment
variable via ``ValidationConfig.geometry_engine``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from parcel_validation.core.exceptions import PermanentError

if TYPE_CHECKING:
    from collections.abc import Callable

    from parcel_validation.engine.base import GeometryEngine

logger = logging.getLogger(__name__)

SHAPELY = "shapely"

# Each entry maps an engine name to a zero-argument callable returning an
# engine *instance*.  The lazy import keeps shapely/pyproj unloaded until
# an engine is actually requested.

_ENGINE_REGISTRY: dict[str, Callable[[], GeometryEngine]] = {}


class EngineNotFoundError(PermanentError):
    """Raised when no engine is registered under the requested name."""

    default_stage = "engine_factory"
    default_code = "ENGINE_NOT_FOUND"


def _register_builtin_engines() -> None:
    """Register the built-in engine adapters."""

    def _shapely() -> GeometryEngine:
        from parcel_validation.engine.shapely_engine import ShapelyGeometryEngine

        return ShapelyGeometryEngine()

    _ENGINE_REGISTRY[SHAPELY] = _shapely


def _ensure_registry() -> None:
    """Initialise the engine registry once (idempotent)."""
    if not _ENGINE_REGISTRY:
        _register_builtin_engines()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def register_engine(name: str, loader: Callable[[], GeometryEngine]) -> None:
    """Register a custom geometry engine.

    Args:
        name: Engine name (e.g. ``"postgis"``).
        loader: A zero-argument callable that returns an engine instance.

    Raises:
        ValueError: If the name is empty.
    """
    if not name:
        msg = "Engine name must be non-empty"
        raise ValueError(msg)
    _ensure_registry()
    _ENGINE_REGISTRY[name] = loader
    logger.debug("Registered geometry engine: %s", name)


def get_engine(name: str = SHAPELY) -> GeometryEngine:
    """Create and return a geometry engine instance.

    Raises:
        EngineNotFoundError: If the named engine is not registered.
    """
    _ensure_registry()

    loader = _ENGINE_REGISTRY.get(name)
    if loader is None:
        available = ", ".join(sorted(_ENGINE_REGISTRY))
        msg = f"Unknown geometry engine: {name!r}. Available: {available}"
        raise EngineNotFoundError(msg)

    logger.info("Creating geometry engine: %s", name)
    return loader()


def list_engines() -> list[str]:
    """Return the names of all registered engines."""
    _ensure_registry()
    return sorted(_ENGINE_REGISTRY)
