"""Health store port interface following Clean Architecture principles.

The writer, reader and authorization gate depend on this abstraction and
receive a concrete store through their constructors. Every request method
is a coroutine that completes exactly once.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from bloodpressure.models.readings import (
    PermissionState,
    QuantityType,
    SamplePredicate,
    StoredCorrelation,
    StoredSample,
)

StoredRecord = StoredCorrelation | StoredSample


class HealthStoreError(Exception):
    """Raised by store implementations when a request fails."""


class HealthStorePort(ABC):
    """Abstract interface for the external health data store."""

    @abstractmethod
    def is_health_data_available(self) -> bool:
        """Whether the platform offers health data storage at all."""

    @abstractmethod
    def authorization_status(self, quantity_type: QuantityType) -> PermissionState:
        """Current sharing permission for one type."""

    @abstractmethod
    async def request_authorization(
        self,
        to_share: frozenset[QuantityType],
        to_read: frozenset[QuantityType],
    ) -> bool:
        """Prompt the user for share and read access.

        Returns:
            True if the request was presented, which does not imply that
            access was granted

        Raises:
            HealthStoreError: If the request could not be made
        """

    @abstractmethod
    async def save(self, records: Sequence[StoredRecord]) -> None:
        """Persist all records atomically: all of them or none.

        Raises:
            HealthStoreError: If nothing was saved
        """

    @abstractmethod
    async def query(
        self,
        quantity_type: QuantityType,
        predicate: SamplePredicate,
        limit: int | None = None,
        sort_ascending: bool | None = None,
    ) -> list[StoredRecord]:
        """Return records of ``quantity_type`` whose start matches ``predicate``.

        Args:
            quantity_type: Sample type, or the correlation type
            predicate: Half-open start range
            limit: Maximum number of records, None for no limit
            sort_ascending: Sort by start instant; None keeps store order

        Raises:
            HealthStoreError: If the query fails
        """
