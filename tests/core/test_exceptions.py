"""Tests for the blood pressure client exception hierarchy."""

from bloodpressure.core.exceptions import (
    AuthorizationRequestError,
    BloodPressureBaseError,
    DataValidationError,
    InvalidConfigurationError,
    MalformedRecordError,
    NotAuthorizedError,
    StoreQueryFailedError,
    StoreTimeoutError,
    StoreUnavailableError,
    StoreWriteFailedError,
    UnitConversionError,
    create_validation_error,
)


class TestBaseError:
    """Test common behaviour of the base error."""

    def test_str_includes_error_code(self) -> None:
        error = BloodPressureBaseError("something broke", error_code="BROKEN")

        assert str(error) == "[BROKEN] something broke"

    def test_str_without_error_code(self) -> None:
        assert str(BloodPressureBaseError("plain")) == "plain"

    def test_details_default_to_empty_dict(self) -> None:
        assert BloodPressureBaseError("x").details == {}


class TestStoreErrors:
    """Test the health store error taxonomy."""

    def test_every_store_error_is_a_base_error(self) -> None:
        cause = RuntimeError("cause")
        errors = [
            StoreUnavailableError(),
            NotAuthorizedError(["heart_rate"]),
            AuthorizationRequestError(cause),
            StoreWriteFailedError(cause),
            StoreQueryFailedError(cause),
            StoreTimeoutError("save", 5.0),
            MalformedRecordError("abc", "blood_pressure_diastolic"),
        ]

        assert all(isinstance(e, BloodPressureBaseError) for e in errors)
        assert len({e.error_code for e in errors}) == len(errors)

    def test_not_authorized_lists_missing_types(self) -> None:
        error = NotAuthorizedError(["blood_pressure", "heart_rate"])

        assert error.details == {"missing_types": ["blood_pressure", "heart_rate"]}
        assert "blood_pressure, heart_rate" in str(error)

    def test_write_failure_keeps_cause(self) -> None:
        cause = OSError("disk full")
        error = StoreWriteFailedError(cause)

        assert error.cause is cause
        assert "disk full" in str(error)

    def test_query_failure_records_type(self) -> None:
        error = StoreQueryFailedError(RuntimeError("x"), query_type="heart_rate")

        assert error.details == {"query_type": "heart_rate"}

    def test_timeout_message(self) -> None:
        error = StoreTimeoutError("save", 2.5)

        assert str(error) == "[STORE_TIMEOUT] Health store save timed out after 2.5s"

    def test_malformed_record_message(self) -> None:
        error = MalformedRecordError("abc", "blood_pressure_diastolic")

        assert "abc" in str(error)
        assert error.missing_type == "blood_pressure_diastolic"


class TestValidationErrors:
    """Test validation error helpers."""

    def test_unit_conversion_is_validation_error(self) -> None:
        error = UnitConversionError("count/min", "mmHg")

        assert isinstance(error, DataValidationError)
        assert error.error_code == "DATA_VALIDATION_ERROR"

    def test_create_validation_error(self) -> None:
        error = create_validation_error("systolic", "a non-negative value", -5)

        assert error.field_name == "systolic"
        assert "-5" in str(error)

    def test_invalid_configuration_message(self) -> None:
        error = InvalidConfigurationError("ENVIRONMENT", "staging", reason="unknown")

        assert error.config_key == "ENVIRONMENT"
        assert "staging" in str(error)
        assert "(unknown)" in str(error)
