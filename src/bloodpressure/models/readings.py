"""Blood pressure and heart rate value models.

Immutable Pydantic models for the quantities written to and read from the
health store: typed quantities with units, the store's sample and
correlation records, and the composite ``Reading`` handed to callers.
"""

from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Annotated, ClassVar, Self
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from bloodpressure.core.exceptions import UnitConversionError

KPA_TO_MMHG = 7.500615758
SECONDS_PER_MINUTE = 60.0

NonNegativeFloat = Annotated[float, Field(ge=0)]


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class HealthUnit(StrEnum):
    """Units understood by the health store."""

    MILLIMETER_OF_MERCURY = "mmHg"
    KILOPASCAL = "kPa"
    COUNT_PER_MINUTE = "count/min"
    COUNT_PER_SECOND = "count/s"

    @property
    def dimension(self) -> str:
        if self in (HealthUnit.MILLIMETER_OF_MERCURY, HealthUnit.KILOPASCAL):
            return "pressure"
        return "frequency"

    @property
    def base_factor(self) -> float:
        """Multiplier taking a value in this unit to the dimension's base unit."""
        return _BASE_FACTORS[self]


# Base units: mmHg for pressure, count/min for frequency.
_BASE_FACTORS = {
    HealthUnit.MILLIMETER_OF_MERCURY: 1.0,
    HealthUnit.KILOPASCAL: KPA_TO_MMHG,
    HealthUnit.COUNT_PER_MINUTE: 1.0,
    HealthUnit.COUNT_PER_SECOND: SECONDS_PER_MINUTE,
}


class QuantityType(StrEnum):
    """Closed set of measurement kinds this client reads and writes."""

    BLOOD_PRESSURE_SYSTOLIC = "blood_pressure_systolic"
    BLOOD_PRESSURE_DIASTOLIC = "blood_pressure_diastolic"
    HEART_RATE = "heart_rate"
    BLOOD_PRESSURE = "blood_pressure"

    @property
    def is_correlation(self) -> bool:
        return self is QuantityType.BLOOD_PRESSURE

    @property
    def canonical_unit(self) -> HealthUnit:
        if self is QuantityType.HEART_RATE:
            return HealthUnit.COUNT_PER_MINUTE
        return HealthUnit.MILLIMETER_OF_MERCURY


class PermissionState(StrEnum):
    """Per-type sharing permission as reported by the store."""

    NOT_DETERMINED = "not_determined"
    SHARING_DENIED = "sharing_denied"
    SHARING_AUTHORIZED = "sharing_authorized"


class Quantity(BaseModel):
    """A non-negative value with its unit."""

    model_config = ConfigDict(frozen=True)

    value: NonNegativeFloat
    unit: HealthUnit

    def value_in(self, unit: HealthUnit) -> float:
        """Return the value converted to ``unit``.

        Raises:
            UnitConversionError: If ``unit`` measures a different dimension
        """
        if unit is self.unit:
            return self.value
        if unit.dimension != self.unit.dimension:
            raise UnitConversionError(self.unit.value, unit.value)
        return self.value * self.unit.base_factor / unit.base_factor


class StoredSample(BaseModel):
    """One store-level measurement record."""

    model_config = ConfigDict(frozen=True)

    uuid: UUID = Field(default_factory=uuid4)
    quantity_type: QuantityType
    quantity: Quantity
    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_sample(self) -> Self:
        if self.quantity_type.is_correlation:
            msg = "A sample cannot have the correlation type"
            raise ValueError(msg)
        if self.quantity.unit.dimension != self.quantity_type.canonical_unit.dimension:
            msg = f"Unit {self.quantity.unit} is not valid for {self.quantity_type}"
            raise ValueError(msg)
        if self.end < self.start:
            msg = "Sample end must not precede its start"
            raise ValueError(msg)
        return self

    @classmethod
    def instantaneous(
        cls, quantity_type: QuantityType, value: float, unit: HealthUnit, at: datetime
    ) -> "StoredSample":
        """Build a sample whose start and end are the same instant."""
        return cls(
            quantity_type=quantity_type,
            quantity=Quantity(value=value, unit=unit),
            start=at,
            end=at,
        )


class StoredCorrelation(BaseModel):
    """Store-level grouping of the systolic and diastolic samples."""

    model_config = ConfigDict(frozen=True)

    uuid: UUID = Field(default_factory=uuid4)
    correlation_type: QuantityType = QuantityType.BLOOD_PRESSURE
    start: datetime
    end: datetime
    objects: tuple[StoredSample, ...] = ()

    @field_validator("start", "end")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_correlation(self) -> Self:
        if not self.correlation_type.is_correlation:
            msg = f"{self.correlation_type} is not a correlation type"
            raise ValueError(msg)
        return self

    def objects_for(self, quantity_type: QuantityType) -> list[StoredSample]:
        """Return the member samples of the given type."""
        return [obj for obj in self.objects if obj.quantity_type is quantity_type]


class SamplePredicate(BaseModel):
    """Selects records whose start lies in the half-open range ``[start, end)``."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    def matches(self, instant: datetime) -> bool:
        return self.start <= ensure_utc(instant) < self.end


class DateWindow(BaseModel):
    """Time window for reader queries. ``start == end`` is valid and empty."""

    model_config = ConfigDict(frozen=True)

    DEFAULT_DAYS: ClassVar[int] = 14

    start: datetime
    end: datetime

    @field_validator("start", "end")
    @classmethod
    def validate_timezone(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    @model_validator(mode="after")
    def validate_order(self) -> Self:
        if self.end < self.start:
            msg = "Window end must not precede its start"
            raise ValueError(msg)
        return self

    @classmethod
    def trailing(cls, days: int = DEFAULT_DAYS, *, now: datetime | None = None) -> "DateWindow":
        """Window covering the ``days`` days that end now."""
        end = ensure_utc(now) if now is not None else datetime.now(UTC)
        return cls(start=end - timedelta(days=days), end=end)

    def to_predicate(self) -> SamplePredicate:
        return SamplePredicate(start=self.start, end=self.end)


class Reading(BaseModel):
    """Systolic, diastolic and heart rate measured at one instant."""

    model_config = ConfigDict(frozen=True)

    systolic: NonNegativeFloat = Field(description="Systolic pressure in mmHg")
    diastolic: NonNegativeFloat = Field(description="Diastolic pressure in mmHg")
    heart_rate: NonNegativeFloat = Field(description="Heart rate in beats per minute")
    timestamp: datetime = Field(description="UTC instant of the measurement")

    @field_validator("timestamp")
    @classmethod
    def validate_timestamp(cls, v: datetime) -> datetime:
        return ensure_utc(v)
