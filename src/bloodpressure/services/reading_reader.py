"""Reads blood pressure readings back from the health store.

The store keeps systolic and diastolic values inside a blood pressure
correlation while heart rate lives in independent samples. Readings built
from correlations therefore carry a heart rate of 0; heart rate samples are
available separately through ``fetch_heart_rate_samples`` and are never
joined to a correlation here.
"""

from collections.abc import Iterable, Iterator
import logging

from bloodpressure.core.exceptions import MalformedRecordError, StoreQueryFailedError
from bloodpressure.models.readings import (
    DateWindow,
    HealthUnit,
    QuantityType,
    Reading,
    StoredCorrelation,
    StoredSample,
)
from bloodpressure.ports.health_store import (
    HealthStoreError,
    HealthStorePort,
    StoredRecord,
)

logger = logging.getLogger(__name__)

HEART_RATE_PLACEHOLDER = 0.0


class ReadingReader:
    """Queries the store for readings within a time window."""

    def __init__(
        self,
        store: HealthStorePort,
        *,
        default_window_days: int = DateWindow.DEFAULT_DAYS,
        default_limit: int | None = None,
    ) -> None:
        self.store = store
        self.default_window_days = default_window_days
        self.default_limit = default_limit

    def _resolve_window(self, window: DateWindow | None) -> DateWindow:
        if window is not None:
            return window
        return DateWindow.trailing(self.default_window_days)

    async def _query(
        self,
        quantity_type: QuantityType,
        window: DateWindow,
        limit: int | None,
        sort_ascending: bool | None,
    ) -> list[StoredRecord]:
        try:
            return await self.store.query(
                quantity_type,
                window.to_predicate(),
                limit=limit,
                sort_ascending=sort_ascending,
            )
        except HealthStoreError as e:
            logger.exception(
                "Query for %s between %s and %s failed",
                quantity_type.value,
                window.start.isoformat(),
                window.end.isoformat(),
            )
            raise StoreQueryFailedError(e, query_type=quantity_type.value) from e

    async def query(
        self,
        window: DateWindow | None = None,
        *,
        limit: int | None = None,
        sort_ascending: bool | None = None,
    ) -> Iterator[Reading]:
        """Return the readings whose correlation starts within ``window``.

        The store is queried before this coroutine returns; the readings
        themselves are produced lazily by a single-pass generator. Records
        missing a systolic or diastolic sample are logged and skipped.

        Args:
            window: Half-open range ``[start, end)``; defaults to the
                trailing query window ending now
            limit: Maximum number of correlations to fetch
            sort_ascending: Order by timestamp; None keeps store order

        Raises:
            StoreQueryFailedError: If the store query fails
        """
        window = self._resolve_window(window)
        records = await self._query(
            QuantityType.BLOOD_PRESSURE,
            window,
            limit if limit is not None else self.default_limit,
            sort_ascending,
        )
        logger.debug("Fetched %d blood pressure correlations", len(records))
        return self._readings_from(records)

    async def fetch_heart_rate_samples(
        self,
        window: DateWindow | None = None,
        *,
        limit: int | None = None,
        sort_ascending: bool | None = None,
    ) -> list[StoredSample]:
        """Return raw heart rate samples starting within ``window``, unpaired.

        Raises:
            StoreQueryFailedError: If the store query fails
        """
        window = self._resolve_window(window)
        records = await self._query(
            QuantityType.HEART_RATE,
            window,
            limit if limit is not None else self.default_limit,
            sort_ascending,
        )
        return [
            record
            for record in records
            if isinstance(record, StoredSample)
            and record.quantity_type is QuantityType.HEART_RATE
        ]

    def _readings_from(self, records: Iterable[StoredRecord]) -> Iterator[Reading]:
        for record in records:
            if not isinstance(record, StoredCorrelation):
                continue
            reading = self.reading_from_correlation(record)
            if reading is not None:
                yield reading

    @staticmethod
    def reading_from_correlation(correlation: StoredCorrelation) -> Reading | None:
        """Build a reading from a correlation, or None if it is malformed."""
        values: dict[QuantityType, float] = {}
        for quantity_type in (
            QuantityType.BLOOD_PRESSURE_SYSTOLIC,
            QuantityType.BLOOD_PRESSURE_DIASTOLIC,
        ):
            samples = correlation.objects_for(quantity_type)
            if not samples:
                error = MalformedRecordError(str(correlation.uuid), quantity_type.value)
                logger.warning("Skipping correlation: %s", error)
                return None
            values[quantity_type] = samples[0].quantity.value_in(
                HealthUnit.MILLIMETER_OF_MERCURY
            )

        return Reading(
            systolic=values[QuantityType.BLOOD_PRESSURE_SYSTOLIC],
            diastolic=values[QuantityType.BLOOD_PRESSURE_DIASTOLIC],
            heart_rate=HEART_RATE_PLACEHOLDER,
            timestamp=correlation.start,
        )
