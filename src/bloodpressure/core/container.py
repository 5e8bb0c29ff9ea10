"""Wires one health store into the gate, writer and reader.

The store is constructed once per process and passed explicitly to every
service that talks to it.
"""

from dataclasses import dataclass

from bloodpressure.core.config import Settings, get_settings
from bloodpressure.ports.health_store import HealthStorePort
from bloodpressure.services.authorization import AuthorizationGate
from bloodpressure.services.reading_reader import ReadingReader
from bloodpressure.services.reading_writer import ReadingWriter
from bloodpressure.storage.local_store import LocalHealthStore


@dataclass(frozen=True)
class ServiceContainer:
    settings: Settings
    store: HealthStorePort
    gate: AuthorizationGate
    writer: ReadingWriter
    reader: ReadingReader


def create_container(
    settings: Settings | None = None, store: HealthStorePort | None = None
) -> ServiceContainer:
    """Build the services around ``store``, or a local store from settings."""
    settings = settings or get_settings()
    store = store or LocalHealthStore(settings.local_store_path)
    gate = AuthorizationGate(store)
    return ServiceContainer(
        settings=settings,
        store=store,
        gate=gate,
        writer=ReadingWriter(store, gate),
        reader=ReadingReader(
            store,
            default_window_days=settings.query_window_days,
            default_limit=settings.query_limit,
        ),
    )
