"""Writes blood pressure readings to the health store.

A reading becomes three records sharing one instant: a blood pressure
correlation holding the systolic and diastolic samples, and a standalone
heart rate sample. All three go to the store in one atomic save.
"""

from datetime import UTC, datetime
import logging
import math

from bloodpressure.core.exceptions import (
    DataValidationError,
    StoreWriteFailedError,
    create_validation_error,
)
from bloodpressure.models.readings import (
    HealthUnit,
    QuantityType,
    Reading,
    StoredCorrelation,
    StoredSample,
    ensure_utc,
)
from bloodpressure.ports.health_store import HealthStoreError, HealthStorePort
from bloodpressure.services.authorization import AuthorizationGate

logger = logging.getLogger(__name__)


def blood_pressure_correlation(
    systolic: float, diastolic: float, at: datetime
) -> StoredCorrelation:
    """Correlation of systolic and diastolic samples starting and ending at ``at``."""
    return StoredCorrelation(
        correlation_type=QuantityType.BLOOD_PRESSURE,
        start=at,
        end=at,
        objects=(
            StoredSample.instantaneous(
                QuantityType.BLOOD_PRESSURE_SYSTOLIC,
                systolic,
                HealthUnit.MILLIMETER_OF_MERCURY,
                at,
            ),
            StoredSample.instantaneous(
                QuantityType.BLOOD_PRESSURE_DIASTOLIC,
                diastolic,
                HealthUnit.MILLIMETER_OF_MERCURY,
                at,
            ),
        ),
    )


def heart_rate_sample(bpm: float, at: datetime) -> StoredSample:
    """Heart rate sample with matching start and end."""
    return StoredSample.instantaneous(
        QuantityType.HEART_RATE, bpm, HealthUnit.COUNT_PER_MINUTE, at
    )


class ReadingWriter:
    """Saves readings after checking the authorization gate."""

    def __init__(
        self, store: HealthStorePort, gate: AuthorizationGate | None = None
    ) -> None:
        self.store = store
        self.gate = gate or AuthorizationGate(store)

    async def save(
        self,
        systolic: float,
        diastolic: float,
        heart_rate: float,
        timestamp: datetime | None = None,
    ) -> Reading:
        """Save one reading.

        Args:
            systolic: Systolic pressure in mmHg
            diastolic: Diastolic pressure in mmHg
            heart_rate: Heart rate in beats per minute
            timestamp: Measurement instant, defaults to now

        Returns:
            The reading that was written

        Raises:
            DataValidationError: If a value is negative or not a finite number
            NotAuthorizedError: If sharing is not authorized; nothing is written
            StoreWriteFailedError: If the store rejected the save
        """
        values: dict[str, float] = {}
        for field_name, value in (
            ("systolic", systolic),
            ("diastolic", diastolic),
            ("heart_rate", heart_rate),
        ):
            try:
                values[field_name] = float(value)
            except OverflowError as e:
                msg = f"Field '{field_name}' is too large for a measurement"
                raise DataValidationError(msg, field_name=field_name) from e
            if not math.isfinite(values[field_name]):
                raise create_validation_error(field_name, "a finite measurement", value)
            if values[field_name] < 0:
                raise create_validation_error(field_name, "a non-negative value", value)

        self.gate.require_authorization()

        at = ensure_utc(timestamp) if timestamp is not None else datetime.now(UTC)
        correlation = blood_pressure_correlation(
            values["systolic"], values["diastolic"], at
        )
        heart_rate_record = heart_rate_sample(values["heart_rate"], at)

        try:
            await self.store.save([correlation, heart_rate_record])
        except HealthStoreError as e:
            raise StoreWriteFailedError(e) from e

        logger.info(
            "Saved reading %s/%s mmHg, %s bpm at %s",
            systolic,
            diastolic,
            heart_rate,
            at.isoformat(),
        )
        return Reading(**values, timestamp=at)
