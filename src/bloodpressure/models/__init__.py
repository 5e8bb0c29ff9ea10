"""Value models for readings and health store records."""

from bloodpressure.models.readings import (
    DateWindow,
    HealthUnit,
    PermissionState,
    Quantity,
    QuantityType,
    Reading,
    SamplePredicate,
    StoredCorrelation,
    StoredSample,
)

__all__ = [
    "DateWindow",
    "HealthUnit",
    "PermissionState",
    "Quantity",
    "QuantityType",
    "Reading",
    "SamplePredicate",
    "StoredCorrelation",
    "StoredSample",
]
