"""Parcel validation pipeline.

Runs the checks in a fixed order and assembles the outcome:

1. **Normalize** — unwrap Feature, reject empty input          (fail fast)
2. **Ring closure** — engine-free open-ring check              (fail fast)
3. **Vertex pre-check** — raw count before any engine call     (fail fast)
4. **Project + sanitize** — storage frame, validity, safe fix  (fail fast)
5. **Vertex budget** — precise count on the sanitized shape    (fail fast)
6. **Polygon type** — accepted shape must be polygonal         (fail fast)
7. **Containment + overlap** — topology, accumulated together
8. **Assemble** — structured ``ValidationOutcome``

The validator holds only immutable configuration and injected
collaborators, so one instance can serve concurrent requests.  It never
writes: the caller decides whether to persist ``sanitized_geometry``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from parcel_validation.checks._assembly import (
    assemble_outcome,
    fail_fast_outcome,
    internal_error_outcome,
    processing_error_outcome,
)
from parcel_validation.checks._normalization import normalize_geometry
from parcel_validation.checks._sanitize import project_geometry, sanitize_geometry
from parcel_validation.checks._structure import check_ring_closure, check_vertex_budget
from parcel_validation.checks._topology import check_containment, check_overlaps
from parcel_validation.checks._types import check_polygon_type
from parcel_validation.core.config import ValidationConfig
from parcel_validation.core.constants import WARN_AUTO_FIXED
from parcel_validation.core.exceptions import (
    ContractError,
    GeometryEngineError,
    GeometryRuleViolation,
    ParcelError,
)
from parcel_validation.engine.factory import get_engine
from parcel_validation.models.geometry import crs_member
from parcel_validation.models.outcome import ErrorRecord
from parcel_validation.models.request import ValidationRequest
from parcel_validation.models.response import ValidationResponse
from parcel_validation.persistence.base import NullBoundaryStore
from parcel_validation.utils.helpers import format_timestamp, utc_now

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime

    from parcel_validation.checks._topology import CheckFindings
    from parcel_validation.engine.base import GeometryEngine
    from parcel_validation.models.outcome import ValidationOutcome
    from parcel_validation.persistence.base import BoundaryRegionStore, ParcelRepository

logger = logging.getLogger("parcel_validation.orchestrators.validate_parcel")


class ParcelValidator:
    """Validates and sanitizes candidate parcel geometries.

    Args:
        engine: Geometry engine collaborator.
        parcels: Accepted-parcel repository for the overlap check.
            ``None`` means overlap checks cannot run and are skipped.
        boundaries: Boundary region store for containment checks.
            Defaults to a store that reports ``NOT_CONFIGURED``.
        config: Tolerances, frames and limits.
        clock: Time source for record timestamps.

    Example usage::

        validator = ParcelValidator(get_engine(), parcels=repo)
        outcome = validator.validate(ValidationRequest(geometry=feature))
        if outcome.valid:
            save(outcome.sanitized_geometry)
    """

    def __init__(
        self,
        engine: GeometryEngine,
        *,
        parcels: ParcelRepository | None = None,
        boundaries: BoundaryRegionStore | None = None,
        config: ValidationConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._engine = engine
        self._parcels = parcels
        self._boundaries = boundaries if boundaries is not None else NullBoundaryStore()
        self._config = config if config is not None else ValidationConfig()
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: ValidationConfig | None = None,
        *,
        parcels: ParcelRepository | None = None,
        boundaries: BoundaryRegionStore | None = None,
    ) -> ParcelValidator:
        """Build a validator using the engine named in *config*.

        Loads ``ValidationConfig.from_env()`` when *config* is ``None``.
        """
        config = config if config is not None else ValidationConfig.from_env()
        return cls(
            get_engine(config.geometry_engine),
            parcels=parcels,
            boundaries=boundaries,
            config=config,
        )

    @property
    def config(self) -> ValidationConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def validate(self, request: ValidationRequest) -> ValidationOutcome:
        """Run the full pipeline on one request.

        Never raises: every failure, including unexpected collaborator
        exceptions, is reported as an ``ErrorRecord``.
        """
        timestamp = format_timestamp(self._clock())
        try:
            outcome = self._run(request, timestamp)
        except ParcelError as exc:
            logger.exception(
                "Unexpected validation failure | error=%s",
                exc.bind(request.correlation_id).to_error_dict(),
            )
            outcome = internal_error_outcome(exc, timestamp=timestamp)
        except Exception as exc:
            logger.exception(
                "Unexpected validation failure | correlation_id=%s", request.correlation_id
            )
            outcome = internal_error_outcome(exc, timestamp=timestamp)

        logger.info(
            "Parcel validated | valid=%s | errors=%s | warnings=%d | area=%s | correlation_id=%s",
            outcome.valid,
            ",".join(outcome.error_codes) or "-",
            len(outcome.warnings),
            outcome.area,
            request.correlation_id,
        )
        return outcome

    def validate_geometry(self, geometry: Any, **options: Any) -> ValidationOutcome:
        """Shorthand for ``validate(ValidationRequest(geometry=..., **options))``."""
        return self.validate(ValidationRequest(geometry=geometry, **options))

    def validate_payload(self, payload: Any) -> dict[str, Any]:
        """Validate a decoded JSON request and return the JSON response dict.

        A payload that does not match the request contract is answered
        with ``ERR_PROCESSING`` rather than an exception.
        """
        try:
            request = ValidationRequest.from_dict(payload)
        except ContractError as exc:
            logger.warning("Rejected malformed validation request | error=%s", exc.to_error_dict())
            outcome = processing_error_outcome(exc, timestamp=format_timestamp(self._clock()))
        else:
            outcome = self.validate(request)
        return ValidationResponse.from_outcome(outcome).to_payload()

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _run(self, request: ValidationRequest, timestamp: str) -> ValidationOutcome:
        config = self._config
        engine = self._engine
        warnings: list[ErrorRecord] = []

        try:
            normalized = normalize_geometry(request.geometry, default_crs=config.input_crs)
            check_ring_closure(normalized.geometry)
            check_vertex_budget(normalized.coordinates, config.vertex_limit)

            try:
                projected = project_geometry(engine, normalized, config.storage_crs)
                result = sanitize_geometry(
                    engine,
                    projected,
                    negligible_area=config.negligible_area,
                    tolerance_pct=config.area_change_tolerance_pct,
                )
                area_unit = engine.area_unit(config.storage_crs)
            except GeometryEngineError as exc:
                logger.warning(
                    "Geometry could not be processed | error=%s",
                    exc.bind(request.correlation_id).to_error_dict(),
                )
                return processing_error_outcome(exc, timestamp=timestamp)

            if result.repaired:
                warnings.append(
                    ErrorRecord.warning(
                        WARN_AUTO_FIXED,
                        "Geometry was invalid and has been automatically repaired.",
                        {
                            "reason": result.reason,
                            "original_area": result.original_area,
                            "fixed_area": result.area,
                            "area_change_pct": result.area_change_pct,
                        },
                        timestamp=timestamp,
                    )
                )

            sanitized = engine.dump(result.geometry)
            check_vertex_budget(sanitized["coordinates"], config.vertex_limit)
            check_polygon_type(engine.geom_type(result.geometry))
        except GeometryRuleViolation as exc:
            logger.info(
                "Geometry rejected | error=%s", exc.bind(request.correlation_id).to_error_dict()
            )
            return fail_fast_outcome(exc, timestamp=timestamp, warnings=tuple(warnings))

        findings: list[CheckFindings] = []
        if request.boundary_region_id is not None:
            findings.append(
                check_containment(
                    engine,
                    result.geometry,
                    boundaries=self._boundaries,
                    region_id=request.boundary_region_id,
                    timestamp=timestamp,
                )
            )
        if request.check_overlaps:
            if self._parcels is None:
                logger.warning(
                    "Overlap check requested but no parcel repository is configured | "
                    "correlation_id=%s",
                    request.correlation_id,
                )
            else:
                findings.append(
                    check_overlaps(
                        engine,
                        result.geometry,
                        sanitized,
                        parcels=self._parcels,
                        exclude_parcel_id=request.exclude_parcel_id,
                        min_area=config.overlap_min_area,
                        timestamp=timestamp,
                    )
                )

        return assemble_outcome(
            findings,
            sanitized_geometry={**sanitized, "crs": crs_member(config.storage_crs)},
            area=result.area,
            area_unit=area_unit,
            warnings=tuple(warnings),
        )


def validate_parcel(
    geometry: Any,
    *,
    validator: ParcelValidator | None = None,
    boundary_region_id: str | int | None = None,
    check_overlaps: bool = True,
    exclude_parcel_id: str | int | None = None,
) -> ValidationOutcome:
    """Validate one geometry with *validator* (or a default shapely validator).

    The default validator has no parcel repository, so overlap checks
    are skipped unless a validator built over one is supplied.
    """
    if validator is None:
        validator = ParcelValidator.from_config(ValidationConfig())
    return validator.validate(
        ValidationRequest(
            geometry=geometry,
            boundary_region_id=boundary_region_id,
            check_overlaps=check_overlaps,
            exclude_parcel_id=exclude_parcel_id,
        )
    )
