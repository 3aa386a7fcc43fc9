"""
Snapshot store interface.

A snapshot store holds exactly one current sequence of raw rows. Writes
replace it wholesale; readers always see a complete snapshot.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from transaction_processor.core.models import RawRecord


class SnapshotStore(ABC):
    """
    Abstract holder of the current transaction snapshot.

    Implementations must serialize replace() and clear() so that a
    concurrent current() returns either the old or the new snapshot in
    full, never a mix.
    """

    @abstractmethod
    def replace(self, records: Iterable[RawRecord]) -> None:
        """
        Set the current snapshot, discarding any previous content.

        Raises:
            StoreUnavailable: If the persistence layer cannot be reached
        """

    @abstractmethod
    def current(self) -> list[RawRecord]:
        """
        Return the current snapshot ([] if none was stored or it was cleared).

        Raises:
            StoreUnavailable: If the persistence layer cannot be reached
        """

    @abstractmethod
    def clear(self) -> None:
        """
        Empty the snapshot. Clearing an empty store is a no-op.

        Raises:
            StoreUnavailable: If the persistence layer cannot be reached
        """

    def close(self) -> None:
        """Release any resources held by the store."""
