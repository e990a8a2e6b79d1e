"""Employee storage: the persistence contract and an in-memory implementation.

Writes made inside ``transaction()`` are staged on a private copy of the
committed frame and swapped in atomically on exit, so readers only ever see
whole committed batches.
"""

import logging
import threading
from contextlib import AbstractContextManager, contextmanager
from typing import Iterable, Iterator, Protocol, Sequence

import pandas as pd

from orgchart.employees.models import (
    EmployeeRecord,
    frame_to_records,
    rank_by_salary,
    records_to_frame,
)
from orgchart.utils.types import EmployeeID

logger = logging.getLogger(__name__)


class EmployeeWriter(Protocol):
    def persist(self, records: Sequence[EmployeeRecord]) -> None: ...

    def find_by_ids(self, ids: Iterable[EmployeeID]) -> dict[EmployeeID, EmployeeRecord]: ...


class EmployeeStore(Protocol):
    def persist(self, records: Sequence[EmployeeRecord]) -> None: ...

    def find_all(self) -> list[EmployeeRecord]: ...

    def find_nth_by_salary_descending(self, offset: int) -> EmployeeRecord | None: ...

    def transaction(self) -> AbstractContextManager[EmployeeWriter]: ...


def _upsert(frame: pd.DataFrame, records: Sequence[EmployeeRecord]) -> pd.DataFrame:
    incoming = records_to_frame(records)
    if frame.empty:
        return incoming.drop_duplicates("employee_id", keep="last").reset_index(drop=True)
    if incoming.empty:
        return frame
    combined = pd.concat([frame, incoming], ignore_index=True)
    return combined.drop_duplicates("employee_id", keep="last").reset_index(drop=True)


class _StagedWrites:
    """Writer handed out by ``InMemoryEmployeeStore.transaction``."""

    def __init__(self, frame: pd.DataFrame) -> None:
        self.frame = frame

    def persist(self, records: Sequence[EmployeeRecord]) -> None:
        self.frame = _upsert(self.frame, records)

    def find_by_ids(self, ids: Iterable[EmployeeID]) -> dict[EmployeeID, EmployeeRecord]:
        matched = self.frame[self.frame["employee_id"].isin(list(ids))]
        return {r.employee_id: r for r in frame_to_records(matched)}


class InMemoryEmployeeStore:
    def __init__(self, records: Sequence[EmployeeRecord] = ()) -> None:
        self._frame = records_to_frame(records)
        self._commit_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self.version = 0

    def frame(self) -> pd.DataFrame:
        """The committed frame; treat as read-only."""
        return self._frame

    def find_all(self) -> list[EmployeeRecord]:
        return frame_to_records(self._frame)

    def count(self) -> int:
        return len(self._frame)

    def find_nth_by_salary_descending(self, offset: int) -> EmployeeRecord | None:
        if offset < 0:
            raise ValueError(f"Offset must be >= 0, got {offset}")
        frame = self._frame
        if offset >= len(frame):
            return None
        return frame_to_records(rank_by_salary(frame).iloc[[offset]])[0]

    def persist(self, records: Sequence[EmployeeRecord]) -> None:
        with self.transaction() as tx:
            tx.persist(records)

    @contextmanager
    def transaction(self) -> Iterator[EmployeeWriter]:
        with self._write_lock:
            staged = _StagedWrites(self._frame.copy())
            yield staged
            with self._commit_lock:
                self._frame = staged.frame
                self.version += 1
            logger.debug("Committed store version %d (%d records)", self.version, len(staged.frame))
