"""Validation pipeline orchestration."""

from parcel_validation.orchestrators.validate_parcel import ParcelValidator, validate_parcel

__all__ = ["ParcelValidator", "validate_parcel"]
