"""Shared builders for org-chart test data."""

from datetime import date
from pathlib import Path

from openpyxl import Workbook

from orgchart.employees.models import EXPORT_HEADERS, EmployeeRecord
from orgchart.employees.snapshot import Snapshot

TODAY = date(2026, 10, 17)

SAMPLE_ROWS = [
    [1, "Asha Rao", "Pune", "MH", "Director", None, 150000, date(2012, 1, 10)],
    [2, "Ravi Kumar", "Pune", "MH", "manager", 1, 90000, date(2016, 3, 1)],
    [3, "Meera Shah", "Mumbai", "MH", "employee", 2, 95000.5, date(2021, 6, 15)],
    [4, "Kiran Das", "Delhi", "DL", "employee", 2, 60000, None],
    [5, "Sam Paul", "Delhi", "DL", "employee", 1, 70000, date(2024, 1, 1)],
]


def write_workbook(path: Path, rows: list[list], headers: list[str] | None = None) -> Path:
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(headers if headers is not None else EXPORT_HEADERS)
    for row in rows:
        sheet.append(row)
    workbook.save(path)
    return path


def make_record(
    employee_id: int,
    manager_id: int | None = None,
    salary: float = 50000.0,
    category: str = "employee",
    date_of_joining: date | None = None,
    name: str | None = None,
) -> EmployeeRecord:
    return EmployeeRecord(
        employee_id=employee_id,
        name=name or f"Person{employee_id}",
        city="Pune",
        state="MH",
        category=category,
        salary=salary,
        date_of_joining=date_of_joining,
        manager_id=manager_id,
    )


def make_snapshot(records: list[EmployeeRecord], version: int = 0) -> Snapshot:
    return Snapshot(tuple(records), version)
