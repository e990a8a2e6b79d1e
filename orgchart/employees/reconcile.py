"""Reconcile manager references and persist an imported batch.

Links are written in two phases inside one storage transaction so that a
record can name a manager that appears later in the payload:

1. persist every record with its manager link stripped;
2. resolve each manager reference against the persisted batch, attach the
   links and persist the batch again.

Any failure rolls the transaction back, and the snapshot cache is only
invalidated after the commit, so readers never see a half-linked batch.
"""

import logging
from dataclasses import replace

from orgchart.employees.ingest import PendingBatch
from orgchart.employees.models import EmployeeRecord
from orgchart.employees.snapshot import RecordCache
from orgchart.employees.store import EmployeeStore
from orgchart.errors import ReferentialIntegrityError
from orgchart.utils.types import EmployeeID

logger = logging.getLogger(__name__)


def _check_acyclic(links: dict[EmployeeID, EmployeeID]) -> None:
    """Reject manager chains that loop back on themselves."""
    settled: set[EmployeeID] = set()
    for start in links:
        path: list[EmployeeID] = []
        on_path: set[EmployeeID] = set()
        current: EmployeeID | None = start
        while current is not None and current not in settled:
            if current in on_path:
                raise ReferentialIntegrityError(
                    f"Manager chain starting at employee {start} loops back to {current}",
                    manager_id=links[current],
                    employee_id=current,
                )
            on_path.add(current)
            path.append(current)
            current = links.get(current)
        settled.update(path)


def link_managers(
    batch: PendingBatch,
    persisted: dict[EmployeeID, EmployeeRecord],
) -> list[EmployeeRecord]:
    """Attach each pending manager reference to a record persisted in phase 1."""
    links: dict[EmployeeID, EmployeeID] = {}
    for pending in batch.values():
        if not pending.has_manager:
            continue
        if pending.manager_ref not in persisted:
            raise ReferentialIntegrityError(
                f"Manager with ID {pending.manager_ref} not found for employee {pending.employee_id}",
                manager_id=pending.manager_ref,
                employee_id=pending.employee_id,
            )
        links[pending.employee_id] = pending.manager_ref

    _check_acyclic(links)
    return [
        replace(persisted[employee_id], manager_id=links.get(employee_id))
        for employee_id in batch
    ]


def persist_batch(batch: PendingBatch, store: EmployeeStore, cache: RecordCache) -> list[EmployeeRecord]:
    """Persist a fully assembled batch all-or-nothing and refresh the cache."""
    with store.transaction() as tx:
        unlinked = [replace(p.record, manager_id=None) for p in batch.values()]
        tx.persist(unlinked)
        logger.info("Phase 1: persisted %d records without manager links", len(unlinked))

        persisted = tx.find_by_ids(batch.keys())
        linked = link_managers(batch, persisted)
        tx.persist(linked)
        logger.info(
            "Phase 2: linked %d of %d records to their managers",
            sum(1 for r in linked if r.manager_id is not None),
            len(linked),
        )

    cache.invalidate()
    return linked
