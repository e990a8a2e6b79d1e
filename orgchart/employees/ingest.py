"""Ingest employee rows from tabular HR exports (xlsx workbooks or CSV)."""

import logging
import math
import numbers
from datetime import date, datetime

import pandas as pd

from orgchart.employees.models import (
    EMPLOYEE_COLUMNS,
    EmployeeRecord,
    PendingRecord,
    employee_schema,
    records_to_frame,
)
from orgchart.errors import MalformedInputError
from orgchart.utils.io import TabularSource, read_tabular
from orgchart.utils.types import EmployeeID, TabularFormat
from orgchart.utils.validators import validate_dataframe

logger = logging.getLogger(__name__)

type PendingBatch = dict[EmployeeID, PendingRecord]

# Payload columns by position; the date column is optional
_RAW_COLUMNS = [
    "employee_id",
    "name",
    "city",
    "state",
    "category",
    "manager_id",
    "salary",
    "date_of_joining",
]
_REQUIRED_COLUMN_COUNT = len(_RAW_COLUMNS) - 1


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _cell_error(row: int, column: str, message: str) -> MalformedInputError:
    # +2: one header row, and spreadsheet rows are 1-based
    return MalformedInputError(f"Row {row + 2}, column '{column}': {message}")


def _parse_identifier(value, row: int) -> EmployeeID:
    if pd.isna(value):
        raise _cell_error(row, "employee_id", "missing identifier")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise _cell_error(row, "employee_id", f"expected a number, got {value!r}") from None
    if not _is_number(value) or not math.isfinite(value) or float(value) != int(value):
        raise _cell_error(row, "employee_id", f"expected an integral number, got {value!r}")
    return int(value)


def _parse_text(value, row: int, column: str) -> str:
    match value:
        case str() if value.strip():
            return value
        case str():
            raise _cell_error(row, column, "blank value")
        case _ if pd.isna(value):
            raise _cell_error(row, column, "missing value")
        case _:
            raise _cell_error(row, column, f"expected text, got {value!r}")


def _parse_salary(value, row: int) -> float:
    if isinstance(value, str):
        try:
            value = float(value.strip().replace(",", ""))
        except ValueError:
            raise _cell_error(row, "salary", f"expected a number, got {value!r}") from None
    if not _is_number(value) or pd.isna(value):
        raise _cell_error(row, "salary", "missing or non-numeric salary")
    if not math.isfinite(value):
        raise _cell_error(row, "salary", f"expected a finite amount, got {value!r}")
    return round(float(value), 2)


def _parse_manager_ref(value, row: int) -> EmployeeID | None:
    """A blank or zero manager cell means the employee has no manager."""
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            logger.warning("Ignoring non-numeric manager reference %r on row %d", text, row + 2)
            return None
    if not _is_number(value):
        if pd.isna(value):
            return None
        logger.warning("Ignoring unsupported manager reference %r on row %d", value, row + 2)
        return None
    if pd.isna(value):
        return None
    if not math.isfinite(value) or float(value) != int(value):
        raise _cell_error(row, "manager_id", f"expected an integral number, got {value!r}")
    return int(value) or None


def _parse_date(value, row: int) -> date | None:
    match value:
        case datetime():
            return value.date()
        case date():
            return value
        case str() if not value.strip():
            return None
        case str():
            try:
                return date.fromisoformat(value.strip()[:10])
            except ValueError:
                raise _cell_error(row, "date_of_joining", f"unrecognized date {value!r}") from None
        case _ if pd.isna(value):
            return None
        case _:
            raise _cell_error(row, "date_of_joining", f"expected a date, got {value!r}")


def _align_columns(raw: pd.DataFrame) -> pd.DataFrame:
    if raw.shape[1] < _REQUIRED_COLUMN_COUNT:
        raise MalformedInputError(
            f"Expected at least {_REQUIRED_COLUMN_COUNT} columns, found {raw.shape[1]}"
        )
    frame = raw.iloc[:, : len(_RAW_COLUMNS)].copy()
    frame.columns = _RAW_COLUMNS[: frame.shape[1]]
    if "date_of_joining" not in frame.columns:
        frame["date_of_joining"] = None
    return frame


def parse_employee_frame(raw: pd.DataFrame) -> PendingBatch:
    """Turn a decoded sheet into pending records keyed by identifier.

    The first failing cell aborts the parse; duplicate identifiers and range
    violations are caught by the pandera schema over the whole batch. Row
    numbers in errors come from the frame index, so pass the frame as read.
    """
    frame = _align_columns(raw)
    pending: list[PendingRecord] = []

    for row in frame.itertuples():
        row_no = row.Index
        record = EmployeeRecord(
            employee_id=_parse_identifier(row.employee_id, row_no),
            name=_parse_text(row.name, row_no, "name"),
            city=_parse_text(row.city, row_no, "city"),
            state=_parse_text(row.state, row_no, "state"),
            category=_parse_text(row.category, row_no, "category"),
            salary=_parse_salary(row.salary, row_no),
            date_of_joining=_parse_date(row.date_of_joining, row_no),
        )
        pending.append(PendingRecord(record, _parse_manager_ref(row.manager_id, row_no)))

    checked = records_to_frame(p.record for p in pending)
    checked["manager_id"] = pd.array([p.manager_ref for p in pending], dtype="Int64")
    result = validate_dataframe(checked[EMPLOYEE_COLUMNS], employee_schema)
    if not result["valid"]:
        raise MalformedInputError(f"Invalid employee data: {result['errors'][0]}")

    logger.info("Parsed %d employee rows", len(pending))
    return {p.employee_id: p for p in pending}


def ingest_employee_data(source: TabularSource, fmt: TabularFormat | str | None = None) -> PendingBatch:
    """Decode a tabular payload into pending records.

    The payload has one header row followed by one row per employee with
    columns id, name, city, state, category, manager id, salary and date of
    joining, read by position.
    """
    raw = read_tabular(source, fmt)
    logger.info("Read %d data rows from tabular payload", len(raw))
    return parse_employee_frame(raw)
