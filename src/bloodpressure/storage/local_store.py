"""Local implementation of the health store port.

Keeps permissions, correlations and samples in memory and optionally
mirrors them to a JSON file so the command line tool can be used across
invocations. It behaves like the platform store the client is written
against: saves are all-or-nothing, writes require sharing permission for
every type involved, and queries select records by their start instant.
"""

from collections.abc import Sequence
import logging
import os
from pathlib import Path
import tempfile

from pydantic import BaseModel, Field

from bloodpressure.models.readings import (
    PermissionState,
    QuantityType,
    SamplePredicate,
    StoredCorrelation,
    StoredSample,
)
from bloodpressure.ports.health_store import (
    HealthStoreError,
    HealthStorePort,
    StoredRecord,
)

logger = logging.getLogger(__name__)

CORRELATION_MEMBERS = {
    QuantityType.BLOOD_PRESSURE: (
        QuantityType.BLOOD_PRESSURE_SYSTOLIC,
        QuantityType.BLOOD_PRESSURE_DIASTOLIC,
    ),
}


class StoreSnapshot(BaseModel):
    """Serialized contents of a local store."""

    permissions: dict[QuantityType, PermissionState] = Field(default_factory=dict)
    correlations: list[StoredCorrelation] = Field(default_factory=list)
    samples: list[StoredSample] = Field(default_factory=list)


class LocalHealthStore(HealthStorePort):
    """In-process health store with optional JSON file persistence."""

    def __init__(
        self,
        path: Path | None = None,
        *,
        available: bool = True,
        grant_on_request: bool = True,
    ) -> None:
        self.path = path
        self.available = available
        self.grant_on_request = grant_on_request
        self._snapshot = self._load()

    def _load(self) -> StoreSnapshot:
        if self.path is None or not self.path.exists():
            return StoreSnapshot()
        try:
            return StoreSnapshot.model_validate_json(self.path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            msg = f"Local store file {self.path} is not readable: {e}"
            raise HealthStoreError(msg) from e

    def _persist(self, snapshot: StoreSnapshot) -> None:
        if self.path is None:
            return
        tmp_name: str | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                tmp.write(snapshot.model_dump_json(indent=2))
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            msg = f"Could not write local store file {self.path}: {e}"
            raise HealthStoreError(msg) from e

    # ------------------------------------------------------------------
    # Authorization
    # ------------------------------------------------------------------

    def is_health_data_available(self) -> bool:
        return self.available

    def authorization_status(self, quantity_type: QuantityType) -> PermissionState:
        members = CORRELATION_MEMBERS.get(quantity_type)
        if members is None:
            return self._snapshot.permissions.get(
                quantity_type, PermissionState.NOT_DETERMINED
            )

        states = {self.authorization_status(member) for member in members}
        if states == {PermissionState.SHARING_AUTHORIZED}:
            return PermissionState.SHARING_AUTHORIZED
        if PermissionState.SHARING_DENIED in states:
            return PermissionState.SHARING_DENIED
        return PermissionState.NOT_DETERMINED

    def set_permission(self, quantity_type: QuantityType, state: PermissionState) -> None:
        """Change the sharing permission of one type, as the user would in settings."""
        members = CORRELATION_MEMBERS.get(quantity_type, (quantity_type,))
        permissions = dict(self._snapshot.permissions)
        for member in members:
            permissions[member] = state
        updated = self._snapshot.model_copy(update={"permissions": permissions})
        self._persist(updated)
        self._snapshot = updated

    async def request_authorization(
        self,
        to_share: frozenset[QuantityType],
        to_read: frozenset[QuantityType],
    ) -> bool:
        if not self.available:
            msg = "Health data is not available on this device"
            raise HealthStoreError(msg)

        # Only types never decided are prompted for, as on the platform.
        permissions = dict(self._snapshot.permissions)
        granted = (
            PermissionState.SHARING_AUTHORIZED
            if self.grant_on_request
            else PermissionState.SHARING_DENIED
        )
        for quantity_type in to_share:
            if permissions.get(quantity_type, PermissionState.NOT_DETERMINED) is (
                PermissionState.NOT_DETERMINED
            ):
                permissions[quantity_type] = granted

        updated = self._snapshot.model_copy(update={"permissions": permissions})
        self._persist(updated)
        self._snapshot = updated
        logger.debug("Permissions after request: %s", permissions)
        return True

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def _check_can_share(self, record: StoredRecord) -> None:
        if isinstance(record, StoredCorrelation):
            types = [record.correlation_type] + [o.quantity_type for o in record.objects]
        else:
            types = [record.quantity_type]
        for quantity_type in types:
            if self.authorization_status(quantity_type) is not (
                PermissionState.SHARING_AUTHORIZED
            ):
                msg = f"Not authorized to share {quantity_type.value}"
                raise HealthStoreError(msg)

    async def save(self, records: Sequence[StoredRecord]) -> None:
        if not self.available:
            msg = "Health data is not available on this device"
            raise HealthStoreError(msg)
        if not records:
            msg = "Nothing to save"
            raise HealthStoreError(msg)

        # Validate everything before committing anything.
        for record in records:
            self._check_can_share(record)

        correlations = list(self._snapshot.correlations)
        samples = list(self._snapshot.samples)
        for record in records:
            if isinstance(record, StoredCorrelation):
                correlations.append(record)
            else:
                samples.append(record)

        updated = self._snapshot.model_copy(
            update={"correlations": correlations, "samples": samples}
        )
        self._persist(updated)
        self._snapshot = updated
        logger.debug("Saved %d records", len(records))

    async def query(
        self,
        quantity_type: QuantityType,
        predicate: SamplePredicate,
        limit: int | None = None,
        sort_ascending: bool | None = None,
    ) -> list[StoredRecord]:
        if not self.available:
            msg = "Health data is not available on this device"
            raise HealthStoreError(msg)
        if limit is not None and limit <= 0:
            msg = f"Query limit must be positive, got {limit}"
            raise HealthStoreError(msg)

        results: list[StoredRecord]
        if quantity_type.is_correlation:
            results = [
                c
                for c in self._snapshot.correlations
                if c.correlation_type is quantity_type and predicate.matches(c.start)
            ]
        else:
            candidates = list(self._snapshot.samples)
            for correlation in self._snapshot.correlations:
                candidates.extend(correlation.objects)
            results = [
                s
                for s in candidates
                if s.quantity_type is quantity_type and predicate.matches(s.start)
            ]

        if sort_ascending is not None:
            results.sort(key=lambda r: r.start, reverse=not sort_ascending)
        if limit is not None:
            results = results[:limit]
        return results
