"""Salary comparisons and rank queries over the employee snapshot."""

import logging

from orgchart.employees.models import EmployeeSummary, frame_to_records, rank_by_salary
from orgchart.employees.snapshot import Snapshot
from orgchart.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def higher_salary_than_manager(snapshot: Snapshot) -> list[EmployeeSummary]:
    """Employees paid strictly more than their own manager.

    Both salaries come from the same snapshot, so a pair is never compared
    across two imports.
    """
    frame = snapshot.frame
    managed = frame[frame["manager_id"].notna()]
    if managed.empty:
        return []

    managers = frame[["employee_id", "salary"]].rename(
        columns={"employee_id": "manager_id", "salary": "manager_salary"}
    )
    managers["manager_id"] = managers["manager_id"].astype("Int64")
    paired = managed.merge(managers, on="manager_id", how="inner", validate="many_to_one")
    overpaid = paired[paired["salary"] > paired["manager_salary"]]

    logger.info("%d employees earn more than their manager", len(overpaid))
    return [EmployeeSummary.from_record(r) for r in frame_to_records(overpaid)]


def nth_highest_salary(snapshot: Snapshot, rank: int) -> EmployeeSummary | None:
    """The employee at 1-based ``rank`` in salary-descending order.

    Equal salaries are ordered by ascending identifier. A rank past the end
    returns None.
    """
    if rank < 1:
        raise InvalidArgumentError("Rank must be >= 1")

    offset = rank - 1
    frame = snapshot.frame
    if offset >= len(frame):
        logger.info("Rank %d exceeds %d employees", rank, len(frame))
        return None

    ranked = rank_by_salary(frame)
    return EmployeeSummary.from_record(frame_to_records(ranked.iloc[[offset]])[0])
