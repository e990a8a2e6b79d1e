"""Root resolution: find the batch's Director or synthesize one."""

import logging
from dataclasses import dataclass
from datetime import date

import numpy as np

from orgchart.config import SyntheticConfig
from orgchart.employees.ingest import PendingBatch
from orgchart.employees.models import DIRECTOR_CATEGORY, EmployeeRecord, PendingRecord
from orgchart.employees.synthetic import IdentifierSequence, random_salary, years_before
from orgchart.utils.types import EmployeeID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RootResolution:
    root_id: EmployeeID
    synthesized: PendingRecord | None = None


def find_director_candidates(batch: PendingBatch) -> list[EmployeeID]:
    """Identifiers of manager-less Director records, lowest first."""
    return sorted(
        p.employee_id
        for p in batch.values()
        if p.record.is_director and not p.has_manager
    )


def resolve_root(
    batch: PendingBatch,
    ids: IdentifierSequence,
    rng: np.random.Generator,
    config: SyntheticConfig,
    today: date | None = None,
) -> RootResolution:
    """Pick the top-of-hierarchy record.

    When several Directors qualify the lowest identifier wins. When none does,
    a placeholder Director is built from the next free id in the reserved band;
    the caller adds it to the batch.
    """
    match find_director_candidates(batch):
        case [root_id]:
            logger.info("Using existing Director %d as root", root_id)
            return RootResolution(root_id)
        case [root_id, *others]:
            logger.warning(
                "Found %d eligible Directors; using lowest id %d as root (ignored: %s)",
                len(others) + 1,
                root_id,
                others,
            )
            return RootResolution(root_id)
        case []:
            pass

    today = today or date.today()
    root_id = next(ids)
    director = EmployeeRecord(
        employee_id=root_id,
        name=f"Director{root_id}",
        city="HQ",
        state="Leadership",
        category=DIRECTOR_CATEGORY,
        salary=random_salary(rng, config.director_salary),
        date_of_joining=years_before(today, config.director_tenure_years),
    )
    logger.info("No Director found in batch; synthesized root %d", root_id)
    return RootResolution(root_id, PendingRecord(director))
