"""Authorization gate for the health store.

Sharing permission can be revoked at any time from outside the app, so the
gate asks the store on every check and keeps no state of its own.
"""

import logging

from bloodpressure.core.exceptions import (
    AuthorizationRequestError,
    NotAuthorizedError,
    StoreUnavailableError,
)
from bloodpressure.models.readings import PermissionState, QuantityType
from bloodpressure.ports.health_store import HealthStoreError, HealthStorePort

logger = logging.getLogger(__name__)

# Types whose sharing status decides whether a reading may be written.
GATED_TYPES = (QuantityType.BLOOD_PRESSURE, QuantityType.HEART_RATE)

# Types requested from the user, for both sharing and reading.
REQUESTED_TYPES = frozenset(
    {
        QuantityType.BLOOD_PRESSURE_SYSTOLIC,
        QuantityType.BLOOD_PRESSURE_DIASTOLIC,
        QuantityType.HEART_RATE,
    }
)


class AuthorizationGate:
    """Fail-closed permission precondition for writes."""

    def __init__(self, store: HealthStorePort) -> None:
        self.store = store

    def unauthorized_types(self) -> list[QuantityType]:
        """Gated types whose status is anything but authorized."""
        return [
            quantity_type
            for quantity_type in GATED_TYPES
            if self.store.authorization_status(quantity_type)
            is not PermissionState.SHARING_AUTHORIZED
        ]

    def is_fully_authorized(self) -> bool:
        """True only if the store reports sharing authorized for every gated type."""
        return not self.unauthorized_types()

    def require_authorization(self) -> None:
        """Raise ``NotAuthorizedError`` unless every gated type is authorized."""
        missing = self.unauthorized_types()
        if missing:
            logger.info("Sharing not authorized for %s", [t.value for t in missing])
            raise NotAuthorizedError([t.value for t in missing])

    async def request_authorization(self) -> bool:
        """Ask the store to prompt for every required type in one request.

        Returns:
            The store's success flag for the prompt itself

        Raises:
            StoreUnavailableError: If the platform has no health data
            AuthorizationRequestError: If the store request fails
        """
        if not self.store.is_health_data_available():
            logger.error("Health data not available on this device")
            raise StoreUnavailableError

        try:
            success = await self.store.request_authorization(
                to_share=REQUESTED_TYPES, to_read=REQUESTED_TYPES
            )
        except HealthStoreError as e:
            logger.exception("Authorization request failed")
            raise AuthorizationRequestError(e) from e

        logger.info("Authorization request completed: success=%s", success)
        return success
