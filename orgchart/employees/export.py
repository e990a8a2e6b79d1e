"""Export employee data and org hierarchies to transient files."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

import pandas as pd

from orgchart.employees.models import EXPORT_HEADERS, EmployeeRecord, HierarchyNode, records_to_frame
from orgchart.errors import FileProcessingError
from orgchart.utils.io import write_output
from orgchart.utils.types import TabularFormat

logger = logging.getLogger(__name__)


def _suffix_for(fmt: TabularFormat) -> str:
    match fmt:
        case TabularFormat.EXCEL:
            return ".xlsx"
        case TabularFormat.CSV:
            return ".csv"


def _reserve_file(prefix: str, suffix: str, directory: Path | None) -> Path:
    """Create an empty, uniquely named file and return its path."""
    try:
        if directory is not None:
            directory.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=directory)
        os.close(fd)
    except OSError as exc:
        raise FileProcessingError(f"Could not create export file: {exc}") from exc
    return Path(name)


def to_export_frame(records: Sequence[EmployeeRecord]) -> pd.DataFrame:
    """Lay records out in export column order with the 0 no-manager sentinel."""
    frame = records_to_frame(records)
    export = pd.DataFrame({
        "ID": frame["employee_id"],
        "Name": frame["name"],
        "City": frame["city"],
        "State": frame["state"],
        "Category": frame["category"],
        "Manager ID": frame["manager_id"].fillna(0).astype("int64"),
        "Salary": frame["salary"],
        "DOJ": frame["date_of_joining"].dt.date,
    })
    return export[EXPORT_HEADERS]


def write_employee_export(
    records: Sequence[EmployeeRecord],
    fmt: TabularFormat = TabularFormat.EXCEL,
    directory: Path | None = None,
) -> Path:
    """Write records to a new ``employee-export*`` file and return its path."""
    path = _reserve_file("employee-export-", _suffix_for(fmt), directory)
    export = to_export_frame(records)
    write_output(export, path, fmt)
    logger.info("Wrote %d employees to %s", len(export), path)
    return path


def write_hierarchy_json(root: HierarchyNode, directory: Path | None = None) -> Path:
    """Serialize a hierarchy to a new ``employee_hierarchy_<id>_*.json`` file.

    The file is left in place; removing it is up to the caller.
    """
    path = _reserve_file(f"employee_hierarchy_{root.id}_", ".json", directory)
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(root.to_dict(), f, indent=2)
    except OSError as exc:
        raise FileProcessingError(f"Failed to write employee hierarchy JSON file: {exc}") from exc
    logger.info("Wrote hierarchy for %d to %s", root.id, path)
    return path
