"""Synthetic org structure generation under fixed manager/employee ratios.

Synthetic records pad a parsed batch so the hierarchy has enough depth and
breadth to exercise the analytic queries. Generation is additive: parsed
records and their manager references are never touched.
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator

import numpy as np
import pandas as pd

from orgchart.config import SalaryBand, SyntheticConfig
from orgchart.employees.models import EmployeeRecord, PendingRecord
from orgchart.utils.types import EmployeeID

logger = logging.getLogger(__name__)

MANAGER_CATEGORY = "manager"
EMPLOYEE_CATEGORY = "employee"


@dataclass(frozen=True)
class SyntheticPlan:
    total: int
    manager_count: int
    employee_count: int
    direct_report_count: int
    remaining_count: int


def plan_synthetic_counts(total: int) -> SyntheticPlan:
    """Derive how many managers and employees to generate for ``total`` records.

    A quarter (at least one) become managers under the root; a sixth of the
    rest (at least one, when there are any employees) report to the root
    directly, and the remainder are spread across the synthetic managers.
    """
    if total < 0:
        raise ValueError(f"Synthetic total must be >= 0, got {total}")
    if total == 0:
        return SyntheticPlan(0, 0, 0, 0, 0)

    manager_count = max(1, total // 4)
    employee_count = total - manager_count
    direct_report_count = min(max(1, employee_count // 6), employee_count)
    return SyntheticPlan(
        total=total,
        manager_count=manager_count,
        employee_count=employee_count,
        direct_report_count=direct_report_count,
        remaining_count=employee_count - direct_report_count,
    )


class IdentifierSequence:
    """Hands out sequential identifiers from a reserved band, skipping taken ones."""

    def __init__(self, start: int, taken: Iterable[EmployeeID] = ()) -> None:
        self._next = start
        self._taken = set(taken)

    def __iter__(self) -> Iterator[EmployeeID]:
        return self

    def __next__(self) -> EmployeeID:
        while self._next in self._taken:
            self._next += 1
        allocated = self._next
        self._taken.add(allocated)
        self._next += 1
        return allocated


def random_salary(rng: np.random.Generator, band: SalaryBand) -> float:
    low, high = band
    return round(float(rng.uniform(low, high)), 2)


def years_before(today: date, years: int) -> date:
    return (pd.Timestamp(today) - pd.DateOffset(years=years)).date()


def generate_synthetic_records(
    root_id: EmployeeID,
    ids: IdentifierSequence,
    rng: np.random.Generator,
    config: SyntheticConfig,
    today: date | None = None,
) -> list[PendingRecord]:
    today = today or date.today()
    plan = plan_synthetic_counts(config.total)
    generated: list[PendingRecord] = []

    manager_ids: list[EmployeeID] = []
    for i in range(1, plan.manager_count + 1):
        employee_id = next(ids)
        tenure = int(rng.integers(*config.manager_tenure_years))
        record = EmployeeRecord(
            employee_id=employee_id,
            name=f"Manager{employee_id}",
            city=f"City{i % config.city_cycle}",
            state=f"State{i % config.state_cycle}",
            category=MANAGER_CATEGORY,
            salary=random_salary(rng, config.manager_salary),
            date_of_joining=years_before(today, tenure),
        )
        generated.append(PendingRecord(record, root_id))
        manager_ids.append(employee_id)

    direct_report_ids: list[EmployeeID] = []
    for _ in range(plan.direct_report_count):
        pending = _synthetic_employee(next(ids), root_id, rng, config, today)
        generated.append(pending)
        direct_report_ids.append(pending.employee_id)

    # TODO: this filters managers against direct-report ids, which never overlap;
    # decide whether managers without reportees were meant to be excluded instead.
    eligible_managers = [m for m in manager_ids if m not in direct_report_ids]
    for _ in range(plan.remaining_count):
        manager_id = eligible_managers[int(rng.integers(len(eligible_managers)))]
        generated.append(_synthetic_employee(next(ids), manager_id, rng, config, today))

    logger.info(
        "Generated %d synthetic records (%d managers, %d direct reports, %d under managers)",
        len(generated),
        plan.manager_count,
        plan.direct_report_count,
        plan.remaining_count,
    )
    return generated


def _synthetic_employee(
    employee_id: EmployeeID,
    manager_id: EmployeeID,
    rng: np.random.Generator,
    config: SyntheticConfig,
    today: date,
) -> PendingRecord:
    record = EmployeeRecord(
        employee_id=employee_id,
        name=f"Emp{employee_id}",
        city=f"City{int(rng.integers(config.city_cycle))}",
        state=f"State{int(rng.integers(config.state_cycle))}",
        category=EMPLOYEE_CATEGORY,
        salary=random_salary(rng, config.employee_salary),
        date_of_joining=today - timedelta(days=int(rng.integers(config.employee_tenure_days))),
    )
    return PendingRecord(record, manager_id)
