"""Tests for the parcel error taxonomy as the validator consumes it.

Covers:
- Rule violations carry a code, a stage and copied details
- ``bind`` stamps the request correlation id onto logged errors
- ``to_error_dict`` payloads for engine, persistence and rule failures
- Persistence failures are the only retryable domain errors
- ERR_INTERNAL details expose stage and retryable for domain errors
"""

from __future__ import annotations

from typing import Any, ClassVar

import pytest

from parcel_validation.checks import internal_error_outcome
from parcel_validation.core.config import ConfigValidationError
from parcel_validation.core.exceptions import (
    ContractError,
    GeometryEngineError,
    GeometryRuleViolation,
    ParcelError,
    RepositoryError,
)
from parcel_validation.engine.factory import EngineNotFoundError

TS = "2026-03-02T09:30:00.000Z"


class TestGeometryRuleViolation:
    """Fail-fast rule violations carry code and details."""

    def test_fields(self) -> None:
        err = GeometryRuleViolation(
            "ERR_VERTEX_LIMIT", "too many", {"count": 6000, "limit": 5000}, stage="vertex_budget"
        )
        assert err.code == "ERR_VERTEX_LIMIT"
        assert str(err) == "too many"
        assert err.details == {"count": 6000, "limit": 5000}
        assert err.stage == "vertex_budget"
        assert err.category == "validation"
        assert err.retryable is False

    def test_default_stage_and_details(self) -> None:
        err = GeometryRuleViolation("ERR_OPEN_RING", "open")
        assert err.stage == "validate_parcel"
        assert err.details == {}

    def test_details_are_copied(self) -> None:
        details = {"count": 1}
        err = GeometryRuleViolation("ERR_VERTEX_LIMIT", "x", details)
        details["count"] = 2
        assert err.details == {"count": 1}

    def test_error_dict_includes_details(self) -> None:
        err = GeometryRuleViolation(
            "ERR_OPEN_RING", "open", {"rule": "R4_CLOSED_RINGS", "path": [1, 0]}, stage="ring_closure"
        )
        payload = err.bind("req-7").to_error_dict()
        assert payload == {
            "category": "validation",
            "code": "ERR_OPEN_RING",
            "stage": "ring_closure",
            "message": "open",
            "retryable": False,
            "correlation_id": "req-7",
            "details": {"rule": "R4_CLOSED_RINGS", "path": [1, 0]},
        }


class TestBind:
    """Correlation ids are attached once, at the validator boundary."""

    def test_sets_missing_id(self) -> None:
        err = GeometryEngineError("cannot project")
        assert err.bind("req-1") is err
        assert err.correlation_id == "req-1"

    def test_keeps_existing_id(self) -> None:
        err = RepositoryError("db down", correlation_id="upstream-9")
        err.bind("req-1")
        assert err.correlation_id == "upstream-9"

    def test_empty_id_is_ignored(self) -> None:
        assert GeometryEngineError("x").bind("").correlation_id == ""


class TestDomainDefaults:
    """Default codes, stages and retry semantics of the domain errors."""

    def test_engine_error(self) -> None:
        err = GeometryEngineError("cannot project")
        assert err.code == "ERR_PROCESSING"
        assert err.stage == "geometry_engine"
        assert err.category == "permanent"
        assert err.retryable is False

    def test_repository_error_is_retryable(self) -> None:
        err = RepositoryError("db down")
        assert err.code == "ERR_INTERNAL"
        assert err.stage == "persistence"
        assert err.category == "transient"
        assert err.retryable is True

    def test_malformed_request_is_contract_error(self) -> None:
        err = ContractError("geometry is required")
        assert err.category == "contract"
        assert err.retryable is False

    def test_config_error_names_the_variable(self) -> None:
        err = ConfigValidationError("PARCEL_VERTEX_LIMIT", 0, "must be > 0")
        assert err.code == "CONFIG_VALIDATION_FAILED"
        assert err.stage == "config"
        assert err.key == "PARCEL_VERTEX_LIMIT"
        assert "PARCEL_VERTEX_LIMIT=0" in err.message

    EXCEPTIONS: ClassVar[list[type[Exception]]] = [
        GeometryRuleViolation,
        GeometryEngineError,
        RepositoryError,
        ConfigValidationError,
        EngineNotFoundError,
        ContractError,
    ]

    def test_all_are_parcel_errors(self) -> None:
        for exc_type in self.EXCEPTIONS:
            assert issubclass(exc_type, ParcelError), exc_type.__name__


class TestInternalErrorDetails:
    """ERR_INTERNAL records say where a domain failure happened."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (
                RepositoryError("parcel index offline"),
                {"original_error": "parcel index offline", "stage": "persistence", "retryable": True},
            ),
            (
                GeometryEngineError("GEOS failure"),
                {"original_error": "GEOS failure", "stage": "geometry_engine", "retryable": False},
            ),
            (KeyError(), {"original_error": "KeyError"}),
        ],
    )
    def test_details(self, exc: BaseException, expected: dict[str, Any]) -> None:
        (record,) = internal_error_outcome(exc, timestamp=TS).errors
        assert record.code == "ERR_INTERNAL"
        assert record.to_dict()["details"] == expected
