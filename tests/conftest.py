"""Pytest fixtures for org-chart pipeline tests."""

from dataclasses import replace
from pathlib import Path

import pytest

from orgchart.config import load_pipeline_config
from orgchart.employees.service import EmployeeService
from orgchart.employees.store import InMemoryEmployeeStore
from tests.helpers import SAMPLE_ROWS, write_workbook


@pytest.fixture
def workbook_factory(tmp_path):
    counter = iter(range(1000))

    def _factory(rows: list[list], headers: list[str] | None = None) -> Path:
        return write_workbook(tmp_path / f"employees_{next(counter)}.xlsx", rows, headers)

    return _factory


@pytest.fixture
def sample_workbook(workbook_factory) -> Path:
    return workbook_factory(SAMPLE_ROWS)


@pytest.fixture
def test_config():
    return load_pipeline_config("test")


@pytest.fixture
def store() -> InMemoryEmployeeStore:
    return InMemoryEmployeeStore()


@pytest.fixture
def service(store, test_config, tmp_path) -> EmployeeService:
    config = replace(test_config, export=replace(test_config.export, output_dir=tmp_path / "out"))
    return EmployeeService(store=store, config=config)
