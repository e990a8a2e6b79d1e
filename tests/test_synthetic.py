from collections import Counter
from datetime import timedelta

import numpy as np
import pytest

from orgchart.config import SyntheticConfig
from orgchart.employees.synthetic import (
    IdentifierSequence,
    generate_synthetic_records,
    plan_synthetic_counts,
)
from tests.helpers import TODAY


def _generate(total: int = 50, root_id: int = 1, taken=(1,), seed: int = 3):
    config = SyntheticConfig(total=total)
    ids = IdentifierSequence(config.id_band_start, taken=taken)
    return generate_synthetic_records(root_id, ids, np.random.default_rng(seed), config, TODAY)


def test_default_plan_counts():
    plan = plan_synthetic_counts(50)

    assert plan.manager_count == 12
    assert plan.employee_count == 38
    assert plan.direct_report_count == 6
    assert plan.remaining_count == 32


@pytest.mark.parametrize(
    ("total", "expected"),
    [
        (1, (1, 0, 0, 0)),
        (2, (1, 1, 1, 0)),
        (4, (1, 3, 1, 2)),
        (8, (2, 6, 1, 5)),
        (100, (25, 75, 12, 63)),
    ],
)
def test_plan_counts_at_boundaries(total, expected):
    plan = plan_synthetic_counts(total)
    counts = (plan.manager_count, plan.employee_count, plan.direct_report_count, plan.remaining_count)
    assert counts == expected


def test_zero_total_disables_generation():
    assert plan_synthetic_counts(0).manager_count == 0
    assert _generate(total=0) == []


def test_negative_total_is_rejected():
    with pytest.raises(ValueError):
        plan_synthetic_counts(-1)


def test_generated_structure_matches_plan():
    generated = _generate()
    records = [p.record for p in generated]

    managers = [p for p in generated if p.record.category == "manager"]
    employees = [p for p in generated if p.record.category == "employee"]
    manager_ids = {p.employee_id for p in managers}

    assert len(generated) == 50
    assert len(managers) == 12
    assert all(p.manager_ref == 1 for p in managers)
    assert sum(1 for p in employees if p.manager_ref == 1) == 6
    under_managers = [p for p in employees if p.manager_ref != 1]
    assert len(under_managers) == 32
    assert all(p.manager_ref in manager_ids for p in under_managers)
    assert len({r.employee_id for r in records}) == 50


def test_identifiers_are_sequential_from_band_and_avoid_taken():
    generated = _generate(total=8, taken=(1, 10_002))
    ids = [p.employee_id for p in generated]

    assert ids == [10_000, 10_001, 10_003, 10_004, 10_005, 10_006, 10_007, 10_008]


def test_manager_fields_cycle_city_and_state():
    managers = [p.record for p in _generate() if p.record.category == "manager"]

    assert [m.city for m in managers[:3]] == ["City1", "City2", "City3"]
    assert managers[9].city == "City0"
    assert managers[4].state == "State0"
    assert all(m.name == f"Manager{m.employee_id}" for m in managers)


def test_salaries_and_dates_stay_in_bands():
    for pending in _generate(total=200):
        record = pending.record
        assert round(record.salary, 2) == record.salary
        if record.category == "manager":
            assert 50_000 <= record.salary <= 80_000
            years = TODAY.year - record.date_of_joining.year
            assert 2 <= years <= 5
        else:
            assert 30_000 <= record.salary <= 80_000
            assert TODAY - timedelta(days=365 * 5) < record.date_of_joining <= TODAY
            assert record.name == f"Emp{record.employee_id}"


def test_same_seed_reproduces_batch():
    assert _generate(seed=11) == _generate(seed=11)


def test_managers_receive_reports_randomly():
    reports = Counter(p.manager_ref for p in _generate(total=400) if p.record.category == "employee")
    # every one of the 100 synthetic managers is eligible
    assert len(reports) > 50


def test_identifier_sequence_skips_taken():
    ids = IdentifierSequence(5, taken=[5, 7])
    assert [next(ids) for _ in range(3)] == [6, 8, 9]
