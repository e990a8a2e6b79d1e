"""Read-through snapshot cache over the full employee record set."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Callable, Protocol, Sequence

import pandas as pd

from orgchart.employees.models import EmployeeRecord, records_to_frame
from orgchart.utils.types import EmployeeID

logger = logging.getLogger(__name__)

type RecordLoader = Callable[[], Sequence[EmployeeRecord]]


class RecordCache(Protocol):
    def get_all(self) -> Sequence[EmployeeRecord]: ...

    def invalidate(self) -> None: ...


@dataclass(frozen=True)
class Snapshot:
    """A point-in-time copy of every record; hold one per logical query."""

    records: tuple[EmployeeRecord, ...]
    version: int
    taken_at: datetime = field(default_factory=datetime.now)

    def __len__(self) -> int:
        return len(self.records)

    @cached_property
    def by_id(self) -> dict[EmployeeID, EmployeeRecord]:
        return {r.employee_id: r for r in self.records}

    @cached_property
    def frame(self) -> pd.DataFrame:
        return records_to_frame(self.records)


class SnapshotCache:
    """Memoizes the record set until ``invalidate()`` is called.

    The loader runs at most once per invalidation; concurrent readers block on
    the first load instead of hitting storage in parallel.
    """

    def __init__(self, loader: RecordLoader) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._current: Snapshot | None = None
        self._version = 0

    def get(self) -> Snapshot:
        with self._lock:
            if self._current is None:
                self._current = Snapshot(tuple(self._loader()), self._version)
                logger.debug(
                    "Loaded snapshot v%d with %d records at %s",
                    self._current.version,
                    len(self._current),
                    self._current.taken_at.isoformat(timespec="seconds"),
                )
            return self._current

    def get_all(self) -> Sequence[EmployeeRecord]:
        return self.get().records

    def invalidate(self) -> None:
        with self._lock:
            self._current = None
            self._version += 1
        logger.info("Invalidated employee snapshot (now v%d)", self._version)

    @property
    def version(self) -> int:
        return self._version
