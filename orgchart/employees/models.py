"""Employee record types and pandera schemas for org-chart data validation."""

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Iterable

import pandas as pd
from pandera.pandas import Check, Column, DataFrameSchema

from orgchart.utils.types import DateOfJoining, EmployeeID, ManagerRef, SalaryAmount

type OrgNode = dict[str, int | str | None | list["OrgNode"]]

EMPLOYEE_COLUMNS = [
    "employee_id",
    "name",
    "city",
    "state",
    "category",
    "manager_id",
    "salary",
    "date_of_joining",
]

# Column order of both the inbound payload and the tabular export
EXPORT_HEADERS = ["ID", "Name", "City", "State", "Category", "Manager ID", "Salary", "DOJ"]

DIRECTOR_CATEGORY = "Director"


@dataclass(frozen=True)
class EmployeeRecord:
    employee_id: EmployeeID
    name: str
    city: str
    state: str
    category: str
    salary: SalaryAmount
    date_of_joining: DateOfJoining = None
    manager_id: ManagerRef = None

    @property
    def is_director(self) -> bool:
        return self.category.strip().lower() == DIRECTOR_CATEGORY.lower()


@dataclass(frozen=True)
class PendingRecord:
    """An imported record paired with its raw manager reference, before linking."""

    record: EmployeeRecord
    manager_ref: ManagerRef = None

    @property
    def employee_id(self) -> EmployeeID:
        return self.record.employee_id

    @property
    def has_manager(self) -> bool:
        return self.manager_ref is not None and self.manager_ref != 0


@dataclass(frozen=True)
class EmployeeSummary:
    """Flattened projection returned by the analytic queries."""

    id: EmployeeID
    name: str
    salary: SalaryAmount
    category: str
    date_of_joining: DateOfJoining
    manager_id: ManagerRef

    @classmethod
    def from_record(cls, record: EmployeeRecord) -> "EmployeeSummary":
        return cls(
            id=record.employee_id,
            name=record.name,
            salary=record.salary,
            category=record.category,
            date_of_joining=record.date_of_joining,
            manager_id=record.manager_id,
        )

    def to_dict(self) -> dict[str, int | str | float | None]:
        return {
            "id": self.id,
            "name": self.name,
            "salary": self.salary,
            "category": self.category,
            "doj": self.date_of_joining.isoformat() if self.date_of_joining else None,
            "managerId": self.manager_id,
        }


@dataclass
class HierarchyNode:
    id: EmployeeID
    manager_id: ManagerRef
    name: str
    role: str
    reportees: list["HierarchyNode"] = field(default_factory=list)

    def add_reportee(self, node: "HierarchyNode") -> None:
        self.reportees.append(node)

    def to_dict(self) -> OrgNode:
        return {
            "id": self.id,
            "managerId": self.manager_id,
            "name": self.name,
            "role": self.role,
            "reportees": [child.to_dict() for child in self.reportees],
        }


employee_schema = DataFrameSchema(
    {
        "employee_id": Column("int64", Check.greater_than(0), unique=True),
        "name": Column(str, Check.str_length(min_value=1)),
        "city": Column(str),
        "state": Column(str),
        "category": Column(str, Check.str_length(min_value=1)),
        "manager_id": Column("Int64", Check.greater_than(0), nullable=True),
        "salary": Column(float, Check.greater_than_or_equal_to(0)),
        "date_of_joining": Column("datetime64[ns]", nullable=True),
    },
    strict=False,
    coerce=True,
)


def records_to_frame(records: Iterable[EmployeeRecord]) -> pd.DataFrame:
    """Build the canonical employee frame, preserving record order."""
    frame = pd.DataFrame([asdict(r) for r in records], columns=EMPLOYEE_COLUMNS)
    frame["employee_id"] = frame["employee_id"].astype("int64")
    frame["manager_id"] = frame["manager_id"].astype("Int64")
    frame["salary"] = frame["salary"].astype(float)
    frame["date_of_joining"] = pd.to_datetime(frame["date_of_joining"])
    return frame


def _optional_date(value) -> date | None:
    if pd.isna(value):
        return None
    return pd.Timestamp(value).date()


def frame_to_records(frame: pd.DataFrame) -> list[EmployeeRecord]:
    return [
        EmployeeRecord(
            employee_id=int(row.employee_id),
            name=str(row.name),
            city=str(row.city),
            state=str(row.state),
            category=str(row.category),
            salary=float(row.salary),
            date_of_joining=_optional_date(row.date_of_joining),
            manager_id=None if pd.isna(row.manager_id) else int(row.manager_id),
        )
        for row in frame[EMPLOYEE_COLUMNS].itertuples(index=False)
    ]


def rank_by_salary(frame: pd.DataFrame) -> pd.DataFrame:
    """Order records by salary descending; equal salaries fall back to ascending id."""
    return frame.sort_values(
        ["salary", "employee_id"],
        ascending=[False, True],
        kind="mergesort",
    ).reset_index(drop=True)
