"""Tests for writing readings to the health store."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from bloodpressure.core.exceptions import (
    DataValidationError,
    NotAuthorizedError,
    StoreWriteFailedError,
)
from bloodpressure.models.readings import (
    DateWindow,
    HealthUnit,
    PermissionState,
    QuantityType,
    SamplePredicate,
    StoredCorrelation,
    StoredSample,
)
from bloodpressure.ports.health_store import HealthStoreError
from bloodpressure.services.reading_writer import (
    ReadingWriter,
    blood_pressure_correlation,
    heart_rate_sample,
)
from bloodpressure.storage.local_store import LocalHealthStore


class TestRecordBuilders:
    """Test construction of the store records."""

    def test_correlation_holds_both_pressures_at_one_instant(self, measured_at) -> None:
        correlation = blood_pressure_correlation(120, 80, measured_at)

        assert correlation.correlation_type is QuantityType.BLOOD_PRESSURE
        assert correlation.start == correlation.end == measured_at
        assert len(correlation.objects) == 2
        systolic = correlation.objects_for(QuantityType.BLOOD_PRESSURE_SYSTOLIC)[0]
        diastolic = correlation.objects_for(QuantityType.BLOOD_PRESSURE_DIASTOLIC)[0]
        assert systolic.quantity.value == 120
        assert diastolic.quantity.value == 80
        assert systolic.quantity.unit is HealthUnit.MILLIMETER_OF_MERCURY
        assert systolic.start == systolic.end == diastolic.start == measured_at

    def test_heart_rate_sample_uses_count_per_minute(self, measured_at) -> None:
        sample = heart_rate_sample(65, measured_at)

        assert sample.quantity_type is QuantityType.HEART_RATE
        assert sample.quantity.unit is HealthUnit.COUNT_PER_MINUTE
        assert sample.start == sample.end == measured_at


class TestReadingWriterSave:
    """Test the save operation."""

    @pytest.mark.asyncio
    async def test_save_submits_three_records_in_one_call(
        self, mock_store, measured_at
    ) -> None:
        writer = ReadingWriter(mock_store)

        reading = await writer.save(120, 80, 65, timestamp=measured_at)

        mock_store.save.assert_awaited_once()
        (records,) = mock_store.save.await_args.args
        correlations = [r for r in records if isinstance(r, StoredCorrelation)]
        samples = [r for r in records if isinstance(r, StoredSample)]
        assert len(correlations) == 1
        assert len(correlations[0].objects) == 2
        assert len(samples) == 1
        assert samples[0].quantity_type is QuantityType.HEART_RATE
        assert {correlations[0].start, samples[0].start} == {measured_at}
        assert reading.systolic == 120
        assert reading.diastolic == 80
        assert reading.heart_rate == 65
        assert reading.timestamp == measured_at

    @pytest.mark.asyncio
    async def test_timestamp_defaults_to_now(self, mock_store) -> None:
        writer = ReadingWriter(mock_store)
        before = datetime.now(UTC)

        reading = await writer.save(120, 80, 65)

        assert before <= reading.timestamp <= datetime.now(UTC)

    @pytest.mark.asyncio
    async def test_denied_authorization_never_calls_store(self, mock_store) -> None:
        mock_store.authorization_status.return_value = PermissionState.SHARING_DENIED
        writer = ReadingWriter(mock_store)

        with pytest.raises(NotAuthorizedError):
            await writer.save(120, 80, 65)

        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_undetermined_authorization_is_not_authorized(
        self, store: LocalHealthStore
    ) -> None:
        writer = ReadingWriter(store)

        with pytest.raises(NotAuthorizedError):
            await writer.save(120, 80, 65)

        records = await store.query(
            QuantityType.BLOOD_PRESSURE, DateWindow.trailing().to_predicate()
        )
        assert records == []

    @pytest.mark.asyncio
    async def test_store_failure_is_wrapped(self, mock_store) -> None:
        cause = HealthStoreError("disk full")
        mock_store.save = AsyncMock(side_effect=cause)
        writer = ReadingWriter(mock_store)

        with pytest.raises(StoreWriteFailedError) as exc_info:
            await writer.save(120, 80, 65)

        assert exc_info.value.cause is cause
        assert exc_info.value.__cause__ is cause

    @pytest.mark.asyncio
    @pytest.mark.parametrize("systolic", [10**400, float("inf"), float("nan")])
    async def test_non_finite_value_rejected(self, mock_store, systolic) -> None:
        writer = ReadingWriter(mock_store)

        with pytest.raises(DataValidationError) as exc_info:
            await writer.save(systolic, 80, 65)

        assert exc_info.value.field_name == "systolic"
        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_negative_value_rejected_before_any_store_call(self, mock_store) -> None:
        writer = ReadingWriter(mock_store)

        with pytest.raises(DataValidationError) as exc_info:
            await writer.save(120, -80, 65)

        assert exc_info.value.field_name == "diastolic"
        mock_store.authorization_status.assert_not_called()
        mock_store.save.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_persists_all_records_in_local_store(
        self, writer: ReadingWriter, authorized_store: LocalHealthStore, measured_at
    ) -> None:
        await writer.save(120, 80, 65, timestamp=measured_at)

        predicate = SamplePredicate(start=measured_at, end=measured_at.replace(hour=10))
        correlations = await authorized_store.query(QuantityType.BLOOD_PRESSURE, predicate)
        heart_rates = await authorized_store.query(QuantityType.HEART_RATE, predicate)
        assert len(correlations) == 1
        assert len(heart_rates) == 1
        assert heart_rates[0].start == correlations[0].start == measured_at
