"""
Mechanic and workshop registries.

Each registry maps id -> record and is rebuilt wholesale from the latest
API response; there is no incremental update. Registries are owned by a
page-session controller, never shared through module globals.
"""

import logging
from collections.abc import Iterable, Iterator
from typing import Generic, Optional, Protocol, TypeVar

from mechapp.schemas.workshop_schema import Mechanic, Workshop

logger = logging.getLogger(__name__)


class _HasId(Protocol):
    id: object


RecordT = TypeVar("RecordT", bound=_HasId)


class RecordRegistry(Generic[RecordT]):
    """Ordered id -> record mapping replaced on every fetch."""

    def __init__(self, records: Iterable[RecordT] = ()) -> None:
        self._records: dict[str, RecordT] = {}
        self.rebuild(records)

    @staticmethod
    def _key(record_id: object) -> str:
        return str(record_id)

    def rebuild(self, records: Iterable[RecordT]) -> None:
        self._records = {self._key(record.id): record for record in records}
        logger.debug("%s rebuilt with %d record(s)", type(self).__name__, len(self._records))

    def get(self, record_id: object) -> Optional[RecordT]:
        if record_id is None:
            return None
        return self._records.get(self._key(record_id))

    def registered_ids(self) -> list[str]:
        return list(self._records.keys())

    def __contains__(self, record_id: object) -> bool:
        return self._key(record_id) in self._records

    def __iter__(self) -> Iterator[RecordT]:
        return iter(self._records.values())

    def __len__(self) -> int:
        return len(self._records)


class MechanicRegistry(RecordRegistry[Mechanic]):
    """Validated mechanics keyed by user id."""

    def schedule_for(self, mechanic_id: Optional[int]) -> Optional[str]:
        """Free-text schedule of the mechanic's workshop, if any."""
        mechanic = self.get(mechanic_id)
        return mechanic.schedule if mechanic else None


class WorkshopRegistry(RecordRegistry[Workshop]):
    """Public workshops keyed by slug id."""

    def summary(self) -> list[tuple[str, str]]:
        """(id, name) pairs in listing order, for select boxes."""
        return [(workshop.id, workshop.name) for workshop in self]
