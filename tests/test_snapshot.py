import logging

from orgchart.employees.snapshot import SnapshotCache
from tests.helpers import make_record


class CountingLoader:
    def __init__(self, records):
        self.records = records
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return list(self.records)


def test_cache_reads_through_once():
    loader = CountingLoader([make_record(1), make_record(2, manager_id=1)])
    cache = SnapshotCache(loader)

    first = cache.get()
    second = cache.get()

    assert first is second
    assert loader.calls == 1
    assert [r.employee_id for r in cache.get_all()] == [1, 2]


def test_invalidate_forces_reload_and_bumps_version():
    loader = CountingLoader([make_record(1)])
    cache = SnapshotCache(loader)
    before = cache.get()

    loader.records = [make_record(1), make_record(7)]
    cache.invalidate()
    after = cache.get()

    assert loader.calls == 2
    assert after.version == before.version + 1
    assert len(before) == 1
    assert len(after) == 2


def test_snapshot_views():
    cache = SnapshotCache(CountingLoader([make_record(1), make_record(2, manager_id=1, salary=10.5)]))
    snapshot = cache.get()

    assert snapshot.by_id[2].manager_id == 1
    frame = snapshot.frame
    assert list(frame["employee_id"]) == [1, 2]
    assert frame["manager_id"].isna().tolist() == [True, False]
    assert frame.loc[1, "salary"] == 10.5


def test_load_is_logged_with_its_timestamp(caplog):
    cache = SnapshotCache(CountingLoader([make_record(1)]))

    with caplog.at_level(logging.DEBUG, logger="orgchart.employees.snapshot"):
        snapshot = cache.get()

    assert snapshot.taken_at.isoformat(timespec="seconds") in caplog.text
