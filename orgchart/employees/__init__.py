"""Employee / org-chart domain pipeline.

Imports HR workbooks, reconciles manager references into a single-rooted
hierarchy padded with synthetic structure, and answers gratuity, salary and
org-chart queries over the result.
"""

from pathlib import Path

from orgchart.config import PipelineConfig
from orgchart.employees.ingest import ingest_employee_data
from orgchart.employees.models import records_to_frame
from orgchart.employees.service import EmployeeService, ImportSummary, Page
from orgchart.errors import InvalidEmployeeDataError
from orgchart.utils.io import TabularSource
from orgchart.utils.types import DomainResult, TabularFormat
from orgchart.utils.validators import validate_referential_integrity


def validate(source: TabularSource, fmt: TabularFormat | str | None = None) -> DomainResult:
    """Dry-run the parser over a payload without persisting anything."""
    try:
        batch = ingest_employee_data(source, fmt)
    except FileNotFoundError as exc:
        return {"status": "error", "message": str(exc)}
    except InvalidEmployeeDataError as exc:
        return {"status": "error", "message": str(exc)}

    frame = records_to_frame(p.record for p in batch.values())
    frame["manager_id"] = [p.manager_ref if p.has_manager else None for p in batch.values()]
    frame["manager_id"] = frame["manager_id"].astype("Int64")
    match validate_referential_integrity(frame, frame, "manager_id", "employee_id"):
        case {"valid": True}:
            return {"status": "ok", "rows_available": len(batch)}
        case {"errors": [message, *_]}:
            return {"status": "error", "message": message}


def run(source: TabularSource, config: PipelineConfig | None = None) -> Path:
    """Execute the full import-and-export pipeline for one payload."""
    return EmployeeService(config=config).process_and_export(source)


__all__ = ["EmployeeService", "ImportSummary", "Page", "run", "validate"]
