from dataclasses import replace
from datetime import date

import pytest

from orgchart.employees.store import InMemoryEmployeeStore
from tests.helpers import make_record


def test_persist_and_find_all_preserve_order(store):
    records = [make_record(3), make_record(1, date_of_joining=date(2020, 1, 1)), make_record(2, manager_id=1)]

    store.persist(records)

    assert store.find_all() == records


def test_persist_upserts_by_identifier(store):
    store.persist([make_record(1), make_record(2)])
    store.persist([replace(make_record(1), name="Renamed")])

    found = {r.employee_id: r for r in store.find_all()}
    assert store.count() == 2
    assert found[1].name == "Renamed"


def test_transaction_is_invisible_until_commit(store):
    store.persist([make_record(1)])

    with store.transaction() as tx:
        tx.persist([make_record(2)])
        assert [r.employee_id for r in store.find_all()] == [1]
        assert set(tx.find_by_ids([1, 2])) == {1, 2}

    assert [r.employee_id for r in store.find_all()] == [1, 2]


def test_transaction_rolls_back_on_error(store):
    store.persist([make_record(1)])
    version = store.version

    with pytest.raises(RuntimeError):
        with store.transaction() as tx:
            tx.persist([make_record(2)])
            raise RuntimeError("boom")

    assert [r.employee_id for r in store.find_all()] == [1]
    assert store.version == version


def test_find_nth_by_salary_descending():
    store = InMemoryEmployeeStore([
        make_record(1, salary=100.0),
        make_record(2, salary=300.0),
        make_record(3, salary=200.0),
        make_record(4, salary=300.0),
    ])

    assert store.find_nth_by_salary_descending(0).employee_id == 2
    assert store.find_nth_by_salary_descending(1).employee_id == 4
    assert store.find_nth_by_salary_descending(3).employee_id == 1
    assert store.find_nth_by_salary_descending(4) is None


def test_find_nth_rejects_negative_offset(store):
    with pytest.raises(ValueError):
        store.find_nth_by_salary_descending(-1)
