"""Ports layer - interfaces the services depend on."""

from .health_store import HealthStoreError, HealthStorePort, StoredRecord

__all__ = [
    "HealthStoreError",
    "HealthStorePort",
    "StoredRecord",
]
