"""Custom exception hierarchy for the blood pressure health client.

Every failure the client can report is a subclass of
``BloodPressureBaseError`` carrying a stable ``error_code`` so adapters can
log the precise failure before collapsing it into a user-facing outcome.
"""

from typing import Any


class BloodPressureBaseError(Exception):
    """Base exception for all blood pressure client errors."""

    def __init__(
        self,
        message: str,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {super().__str__()}"
        return super().__str__()


# ==============================================================================
# Data Validation Exceptions
# ==============================================================================


class DataValidationError(BloodPressureBaseError):
    """Raised when caller supplied measurement data is invalid."""

    def __init__(
        self, message: str, *, field_name: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(message, error_code="DATA_VALIDATION_ERROR", **kwargs)
        self.field_name = field_name


class UnitConversionError(DataValidationError):
    """Raised when a quantity is converted to a unit of another dimension."""

    def __init__(self, from_unit: str, to_unit: str) -> None:
        message = f"Cannot convert {from_unit} to {to_unit}"
        super().__init__(message)
        self.from_unit = from_unit
        self.to_unit = to_unit


class MalformedRecordError(BloodPressureBaseError):
    """Describes a stored correlation that is missing a sub-sample.

    Readers never raise this; it is built so the skipped record can be
    logged with a stable code.
    """

    def __init__(self, record_id: str, missing_type: str) -> None:
        message = f"Correlation {record_id} has no {missing_type} sample"
        super().__init__(message, error_code="MALFORMED_RECORD")
        self.record_id = record_id
        self.missing_type = missing_type


# ==============================================================================
# Health Store Exceptions
# ==============================================================================


class StoreUnavailableError(BloodPressureBaseError):
    """Raised when the platform has no health data capability at all."""

    def __init__(self, reason: str = "Health data is not available on this device") -> None:
        super().__init__(reason, error_code="STORE_UNAVAILABLE")
        self.reason = reason


class NotAuthorizedError(BloodPressureBaseError):
    """Raised when sharing is not authorized for every required type."""

    def __init__(self, missing_types: list[str]) -> None:
        message = "Sharing not authorized for: " + ", ".join(missing_types)
        super().__init__(
            message,
            error_code="NOT_AUTHORIZED",
            details={"missing_types": missing_types},
        )
        self.missing_types = missing_types


class AuthorizationRequestError(BloodPressureBaseError):
    """Raised when the store fails while prompting for authorization."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(
            f"Authorization request failed: {cause}",
            error_code="AUTHORIZATION_REQUEST_FAILED",
        )
        self.cause = cause


class StoreWriteFailedError(BloodPressureBaseError):
    """Raised when the store rejects a save request."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(
            f"Health store write failed: {cause}", error_code="STORE_WRITE_FAILED"
        )
        self.cause = cause


class StoreQueryFailedError(BloodPressureBaseError):
    """Raised when a store query fails."""

    def __init__(self, cause: Exception, *, query_type: str | None = None) -> None:
        super().__init__(
            f"Health store query failed: {cause}",
            error_code="STORE_QUERY_FAILED",
            details={"query_type": query_type} if query_type else None,
        )
        self.cause = cause
        self.query_type = query_type


class StoreTimeoutError(BloodPressureBaseError):
    """Raised when the store does not complete a request in time."""

    def __init__(self, operation: str, timeout_seconds: float) -> None:
        message = f"Health store {operation} timed out after {timeout_seconds}s"
        super().__init__(message, error_code="STORE_TIMEOUT")
        self.operation = operation
        self.timeout_seconds = timeout_seconds


# ==============================================================================
# Configuration Exceptions
# ==============================================================================


class ConfigurationError(BloodPressureBaseError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self, message: str, *, config_key: str | None = None, **kwargs: Any
    ) -> None:
        super().__init__(message, error_code="CONFIGURATION_ERROR", **kwargs)
        self.config_key = config_key


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration value is invalid."""

    def __init__(self, config_key: str, value: Any, reason: str | None = None) -> None:
        message = f"Invalid configuration value for {config_key}: {value}"
        if reason:
            message += f" ({reason})"
        super().__init__(message, config_key=config_key)
        self.value = value
        self.reason = reason


# ==============================================================================
# Utility Functions for Exception Creation
# ==============================================================================


def create_validation_error(
    field_name: str, expected: str, actual_value: Any
) -> DataValidationError:
    """Create a standardized validation error for out-of-range values."""
    message = f"Field '{field_name}' expected {expected}, got {actual_value!r}"
    return DataValidationError(message, field_name=field_name)
