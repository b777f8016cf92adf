"""Validation configuration loaded from environment variables.

The tolerance constants encode policy that may vary by jurisdiction or
deployment, so every one of them is a named, overridable setting.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range, catching bad configuration at
    startup instead of on the first parcel submission.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from parcel_validation.core.constants import (
    DEFAULT_AREA_CHANGE_TOLERANCE_PCT,
    DEFAULT_GEOMETRY_ENGINE,
    DEFAULT_INPUT_CRS,
    DEFAULT_NEGLIGIBLE_AREA,
    DEFAULT_OVERLAP_MIN_AREA,
    DEFAULT_STORAGE_CRS,
    DEFAULT_VERTEX_LIMIT,
)
from parcel_validation.core.exceptions import ParcelError


class ConfigValidationError(ParcelError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Immutable validation configuration.

    Attributes:
        input_crs: Frame assumed for geometries that do not declare one.
        storage_crs: Projected frame every comparison and area is done in.
        vertex_limit: Maximum coordinate positions in an accepted geometry.
        area_change_tolerance_pct: Maximum area drift (percent) allowed
            for an automatic repair.
        negligible_area: Original areas at or below this value are treated
            as slivers; their repair is accepted unconditionally.
        overlap_min_area: Intersections smaller than this are noise
            (storage-frame areal units).
        geometry_engine: Registered engine name used by ``get_engine``.
    """

    input_crs: str = DEFAULT_INPUT_CRS
    storage_crs: str = DEFAULT_STORAGE_CRS
    vertex_limit: int = DEFAULT_VERTEX_LIMIT
    area_change_tolerance_pct: float = DEFAULT_AREA_CHANGE_TOLERANCE_PCT
    negligible_area: float = DEFAULT_NEGLIGIBLE_AREA
    overlap_min_area: float = DEFAULT_OVERLAP_MIN_AREA
    geometry_engine: str = DEFAULT_GEOMETRY_ENGINE

    @classmethod
    def from_env(cls) -> ValidationConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or a required string value is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``PARCEL_VERTEX_LIMIT=abc``).
        """
        config = cls(
            input_crs=os.getenv("PARCEL_INPUT_CRS", DEFAULT_INPUT_CRS),
            storage_crs=os.getenv("PARCEL_STORAGE_CRS", DEFAULT_STORAGE_CRS),
            vertex_limit=int(os.getenv("PARCEL_VERTEX_LIMIT", str(DEFAULT_VERTEX_LIMIT))),
            area_change_tolerance_pct=float(
                os.getenv(
                    "PARCEL_AREA_CHANGE_TOLERANCE_PCT",
                    str(DEFAULT_AREA_CHANGE_TOLERANCE_PCT),
                )
            ),
            negligible_area=float(
                os.getenv("PARCEL_NEGLIGIBLE_AREA", str(DEFAULT_NEGLIGIBLE_AREA))
            ),
            overlap_min_area=float(
                os.getenv("PARCEL_OVERLAP_MIN_AREA", str(DEFAULT_OVERLAP_MIN_AREA))
            ),
            geometry_engine=os.getenv("PARCEL_GEOMETRY_ENGINE", DEFAULT_GEOMETRY_ENGINE),
        )
        validate_config(config)
        return config


def validate_config(config: ValidationConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if not config.input_crs:
        raise ConfigValidationError("PARCEL_INPUT_CRS", config.input_crs, "must not be empty")

    if not config.storage_crs:
        raise ConfigValidationError(
            "PARCEL_STORAGE_CRS", config.storage_crs, "must not be empty"
        )

    if config.vertex_limit <= 0:
        raise ConfigValidationError(
            "PARCEL_VERTEX_LIMIT",
            config.vertex_limit,
            "must be > 0 (coordinate positions)",
        )

    if not 0.0 <= config.area_change_tolerance_pct <= 100.0:
        raise ConfigValidationError(
            "PARCEL_AREA_CHANGE_TOLERANCE_PCT",
            config.area_change_tolerance_pct,
            "must be between 0 and 100 (percentage)",
        )

    if config.negligible_area < 0:
        raise ConfigValidationError(
            "PARCEL_NEGLIGIBLE_AREA",
            config.negligible_area,
            "must be >= 0 (storage-frame areal units)",
        )

    if config.overlap_min_area < 0:
        raise ConfigValidationError(
            "PARCEL_OVERLAP_MIN_AREA",
            config.overlap_min_area,
            "must be >= 0 (storage-frame areal units)",
        )

    if not config.geometry_engine:
        raise ConfigValidationError(
            "PARCEL_GEOMETRY_ENGINE", config.geometry_engine, "must not be empty"
        )
