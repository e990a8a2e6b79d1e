"""Employee operations exposed to the delivery layer.

``EmployeeService`` wires the import pipeline (parse, resolve root, generate
synthetic records, persist in two phases) to a store and a snapshot cache,
and answers every read from one snapshot per call.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date
from pathlib import Path

import numpy as np

from orgchart.config import PipelineConfig, load_pipeline_config
from orgchart.employees.compensation import higher_salary_than_manager, nth_highest_salary
from orgchart.employees.compliance import gratuity_eligible
from orgchart.employees.export import write_employee_export, write_hierarchy_json
from orgchart.employees.ingest import PendingBatch, ingest_employee_data
from orgchart.employees.models import EmployeeSummary, HierarchyNode, frame_to_records
from orgchart.employees.org_structure import build_hierarchy, find_roots
from orgchart.employees.reconcile import persist_batch
from orgchart.employees.root import resolve_root
from orgchart.employees.snapshot import Snapshot, SnapshotCache
from orgchart.employees.store import EmployeeStore, InMemoryEmployeeStore
from orgchart.employees.synthetic import IdentifierSequence, generate_synthetic_records
from orgchart.errors import EmployeeNotFoundError, InvalidArgumentError
from orgchart.utils.io import TabularSource
from orgchart.utils.types import EmployeeID, TabularFormat

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "id": "employee_id",
    "employee_id": "employee_id",
    "name": "name",
    "city": "city",
    "state": "state",
    "category": "category",
    "salary": "salary",
    "doj": "date_of_joining",
    "date_of_joining": "date_of_joining",
    "managerId": "manager_id",
    "manager_id": "manager_id",
}


@dataclass(frozen=True)
class ImportSummary:
    parsed_count: int
    synthetic_count: int
    total_count: int
    root_id: EmployeeID
    root_synthesized: bool


@dataclass(frozen=True)
class Page:
    items: list[EmployeeSummary]
    page: int
    size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.size)


class EmployeeService:
    def __init__(
        self,
        store: EmployeeStore | None = None,
        config: PipelineConfig | None = None,
        cache: SnapshotCache | None = None,
    ) -> None:
        self.store = store if store is not None else InMemoryEmployeeStore()
        self.config = config or load_pipeline_config()
        self.cache = cache or SnapshotCache(self.store.find_all)

    def snapshot(self) -> Snapshot:
        return self.cache.get()

    def assemble_batch(self, parsed: PendingBatch, today: date | None = None) -> tuple[PendingBatch, ImportSummary]:
        """Add the root (if synthesized) and the synthetic records to a parsed batch."""
        rng = np.random.default_rng(self.config.seed)
        synthetic_config = self.config.synthetic
        ids = IdentifierSequence(synthetic_config.id_band_start, taken=parsed.keys())

        batch = dict(parsed)
        resolution = resolve_root(batch, ids, rng, synthetic_config, today)
        if resolution.synthesized is not None:
            batch[resolution.root_id] = resolution.synthesized

        generated = generate_synthetic_records(resolution.root_id, ids, rng, synthetic_config, today)
        batch.update((p.employee_id, p) for p in generated)

        summary = ImportSummary(
            parsed_count=len(parsed),
            synthetic_count=len(batch) - len(parsed),
            total_count=len(batch),
            root_id=resolution.root_id,
            root_synthesized=resolution.synthesized is not None,
        )
        return batch, summary

    def import_employee_data(
        self,
        source: TabularSource,
        fmt: TabularFormat | str | None = None,
        today: date | None = None,
    ) -> ImportSummary:
        """Parse, extend and persist a tabular payload as one all-or-nothing batch."""
        parsed = ingest_employee_data(source, fmt)
        batch, summary = self.assemble_batch(parsed, today)
        persist_batch(batch, self.store, self.cache)
        logger.info(
            "Imported %d records (%d parsed, %d synthetic) under root %d",
            summary.total_count,
            summary.parsed_count,
            summary.synthetic_count,
            summary.root_id,
        )
        return summary

    def process_and_export(
        self,
        source: TabularSource,
        fmt: TabularFormat | str | None = None,
        today: date | None = None,
    ) -> Path:
        """Import a payload and return a tabular export of the full record set."""
        self.import_employee_data(source, fmt, today)
        export = self.config.export
        return write_employee_export(self.snapshot().records, export.tabular_format, export.output_dir)

    def list_employees(self, page: int = 0, size: int | None = None, sort_by: str = "id") -> Page:
        size = self.config.default_page_size if size is None else size
        if page < 0:
            raise InvalidArgumentError(f"Page index must be >= 0, got {page}")
        if size < 1:
            raise InvalidArgumentError(f"Page size must be >= 1, got {size}")
        if sort_by not in SORT_FIELDS:
            raise InvalidArgumentError(f"Cannot sort by '{sort_by}'")

        frame = self.snapshot().frame
        ordered = frame.sort_values(
            list(dict.fromkeys([SORT_FIELDS[sort_by], "employee_id"])),
            kind="mergesort",
            na_position="last",
        )
        window = ordered.iloc[page * size : (page + 1) * size]
        return Page(
            items=[EmployeeSummary.from_record(r) for r in frame_to_records(window)],
            page=page,
            size=size,
            total_elements=len(frame),
        )

    def gratuity_eligible(self, today: date | None = None) -> list[EmployeeSummary]:
        return gratuity_eligible(self.snapshot(), today, self.config.gratuity_months)

    def higher_salary_than_manager(self) -> list[EmployeeSummary]:
        return higher_salary_than_manager(self.snapshot())

    def nth_highest_salary(self, rank: int) -> EmployeeSummary | None:
        return nth_highest_salary(self.snapshot(), rank)

    def default_root(self) -> EmployeeID:
        """The lowest-id record without a manager."""
        roots = find_roots(self.snapshot())
        if not roots:
            raise EmployeeNotFoundError("No root employee found; import a batch first.")
        return roots[0]

    def hierarchy(self, manager_id: EmployeeID) -> HierarchyNode:
        return build_hierarchy(self.snapshot(), manager_id)

    def hierarchy_export(self, manager_id: EmployeeID) -> Path:
        """Write the org chart under ``manager_id`` as a JSON file and return its path."""
        return write_hierarchy_json(self.hierarchy(manager_id), self.config.export.output_dir)
