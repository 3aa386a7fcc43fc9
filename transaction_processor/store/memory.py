"""
In-process snapshot store.
"""

import threading
from collections.abc import Iterable

from transaction_processor.core.models import RawRecord

from .base import SnapshotStore


class InMemorySnapshotStore(SnapshotStore):
    """
    Keeps the snapshot in process memory.

    The snapshot is an immutable tuple swapped by one reference assignment
    under a write lock, so readers take no lock and cannot observe a
    half-written value. Rows are copied on the way in and out; callers can
    never mutate the stored snapshot.
    """

    def __init__(self):
        self._write_lock = threading.Lock()
        self._records: tuple[RawRecord, ...] = ()

    def replace(self, records: Iterable[RawRecord]) -> None:
        snapshot = tuple(dict(record) for record in records)
        with self._write_lock:
            self._records = snapshot

    def current(self) -> list[RawRecord]:
        snapshot = self._records
        return [dict(record) for record in snapshot]

    def clear(self) -> None:
        with self._write_lock:
            self._records = ()

    def __len__(self) -> int:
        return len(self._records)
