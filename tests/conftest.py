"""Shared test fixtures for the blood pressure client test suite."""

from datetime import UTC, datetime
import os
from unittest.mock import AsyncMock, Mock

import pytest

from bloodpressure.core.config import get_settings
from bloodpressure.models.readings import PermissionState, QuantityType
from bloodpressure.ports.health_store import HealthStorePort
from bloodpressure.services.authorization import AuthorizationGate
from bloodpressure.services.reading_reader import ReadingReader
from bloodpressure.services.reading_writer import ReadingWriter
from bloodpressure.storage.local_store import LocalHealthStore

# Set testing environment
os.environ["ENVIRONMENT"] = "testing"

AUTHORIZABLE_TYPES = (
    QuantityType.BLOOD_PRESSURE_SYSTOLIC,
    QuantityType.BLOOD_PRESSURE_DIASTOLIC,
    QuantityType.HEART_RATE,
)


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; tests that change env need a fresh copy."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def measured_at() -> datetime:
    return datetime(2024, 2, 8, 9, 30, tzinfo=UTC)


@pytest.fixture
def store() -> LocalHealthStore:
    """Local store with nothing authorized yet."""
    return LocalHealthStore()


@pytest.fixture
def authorized_store(store: LocalHealthStore) -> LocalHealthStore:
    """Local store with sharing authorized for every type."""
    for quantity_type in AUTHORIZABLE_TYPES:
        store.set_permission(quantity_type, PermissionState.SHARING_AUTHORIZED)
    return store


@pytest.fixture
def mock_store():
    """Store double reporting every type as authorized."""
    mock = Mock(spec=HealthStorePort)
    mock.is_health_data_available.return_value = True
    mock.authorization_status.return_value = PermissionState.SHARING_AUTHORIZED
    mock.request_authorization = AsyncMock(return_value=True)
    mock.save = AsyncMock(return_value=None)
    mock.query = AsyncMock(return_value=[])
    return mock


@pytest.fixture
def writer(authorized_store: LocalHealthStore) -> ReadingWriter:
    return ReadingWriter(authorized_store, AuthorizationGate(authorized_store))


@pytest.fixture
def reader(authorized_store: LocalHealthStore) -> ReadingReader:
    return ReadingReader(authorized_store)
