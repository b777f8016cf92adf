"""Tests for the upload-time pre-check.

The pre-check must agree with the authoritative pipeline on ring closure
and vertex limits, because both call the same pure check functions.
"""

from __future__ import annotations

from typing import Any

from parcel_validation.checks.precheck import precheck_features
from parcel_validation.models.request import ValidationRequest
from parcel_validation.orchestrators.validate_parcel import ParcelValidator

OPEN = {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1]]]}


def _collection(*geometries: Any) -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {}, "geometry": g} for g in geometries],
    }


class TestPrecheckFeatures:
    """Per-feature engine-free checks."""

    def test_clean_upload(self, unit_square: dict, fixed_clock: Any) -> None:
        assert precheck_features(_collection(unit_square, unit_square), clock=fixed_clock) == []

    def test_problems_are_tagged_with_feature_index(
        self, unit_square: dict, make_ring: Any, fixed_clock: Any
    ) -> None:
        records = precheck_features(
            _collection(unit_square, OPEN, make_ring(60)), vertex_limit=50, clock=fixed_clock
        )

        assert [(r.code, r.details["feature_index"]) for r in records] == [
            ("ERR_OPEN_RING", 1),
            ("ERR_VERTEX_LIMIT", 2),
        ]
        assert records[0].timestamp == "2026-03-02T09:30:00.000Z"

    def test_feature_with_both_problems_reports_both(self, fixed_clock: Any) -> None:
        ring = [[float(i), float(i % 3)] for i in range(10)]
        records = precheck_features(
            {"type": "Polygon", "coordinates": [ring]}, vertex_limit=5, clock=fixed_clock
        )
        assert [r.code for r in records] == ["ERR_OPEN_RING", "ERR_VERTEX_LIMIT"]

    def test_empty_feature(self, fixed_clock: Any) -> None:
        records = precheck_features(
            {"type": "Feature", "geometry": None}, clock=fixed_clock
        )
        assert [r.code for r in records] == ["ERR_EMPTY_GEOM"]
        assert records[0].details["feature_index"] == 0

    def test_no_features(self, fixed_clock: Any) -> None:
        records = precheck_features({"type": "FeatureCollection", "features": []}, clock=fixed_clock)
        assert [r.code for r in records] == ["ERR_EMPTY_GEOM"]
        assert records[0].message == "Upload contains no features."

    def test_agrees_with_pipeline(
        self, fake_engine_cls: Any, fixed_clock: Any, make_ring: Any
    ) -> None:
        validator = ParcelValidator(fake_engine_cls(), clock=fixed_clock)
        for geometry in (OPEN, make_ring(5001)):
            (record,) = precheck_features(geometry, clock=fixed_clock)
            outcome = validator.validate(ValidationRequest(geometry=geometry))
            assert outcome.error_codes == [record.code]
            expected = {k: v for k, v in record.details.items() if k != "feature_index"}
            assert outcome.errors[0].details == expected

    def test_every_open_ring_is_reported(self, fixed_clock: Any) -> None:
        geometry = {
            "type": "MultiPolygon",
            "coordinates": [
                [[[0, 0], [4, 0], [4, 4], [0, 4]]],
                [
                    [[10, 10], [20, 10], [20, 20], [10, 20], [10, 10]],
                    [[12, 12], [14, 12], [14, 14], [12, 14]],
                ],
            ],
        }
        records = precheck_features(_collection(OPEN, geometry), clock=fixed_clock)

        assert [r.to_dict()["details"] for r in records] == [
            {"rule": "R4_CLOSED_RINGS", "path": [0], "feature_index": 0},
            {"rule": "R4_CLOSED_RINGS", "path": [0, 0], "feature_index": 1},
            {"rule": "R4_CLOSED_RINGS", "path": [1, 1], "feature_index": 1},
        ]

    def test_deeply_nested_coordinates_do_not_raise(self, fixed_clock: Any) -> None:
        coords: Any = [[0, 0], [1, 0], [1, 1], [0, 0]]
        for _ in range(5000):
            coords = [coords]
        records = precheck_features(
            {"type": "Polygon", "coordinates": coords}, vertex_limit=3, clock=fixed_clock
        )
        assert [r.code for r in records] == ["ERR_VERTEX_LIMIT"]
        assert records[0].details["count"] == 4
