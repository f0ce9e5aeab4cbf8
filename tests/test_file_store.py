"""
Behaviour of the file-backed rate store against temporary seed/data files.
"""
from __future__ import annotations

import json
import sys
import threading
from pathlib import Path

import pytest

# Make the rates_api package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rates_api.domain.errors import DuplicateError, InternalError, NotFoundError, ValidationError
from rates_api.domain.rates import Currency, Rate
from rates_api.repositories import json_storage
from rates_api.repositories.file_store import FileRateStore


@pytest.fixture()
def paths(tmp_path):
    seed = tmp_path / "seed.json"
    seed.write_text(json.dumps([{"id": "r1", "title": "Standard", "rate": 100}]), encoding="utf-8")
    return seed, tmp_path / "data.json"


@pytest.fixture()
def store(paths):
    seed, data = paths
    return FileRateStore(seed, data, actor="tester")


def _persisted(store: FileRateStore) -> list[Rate]:
    return json_storage.load_rates(store.data_file)


def test_seed_scenario(store):
    assert store.count() == 1
    assert store.read("r1").title == "Standard"

    rush = store.create(Rate(title="Rush", amount=150))
    assert rush.id and rush.id != "r1"
    assert store.count() == 2

    store.delete("r1")
    assert store.count() == 1
    with pytest.raises(NotFoundError):
        store.read("r1")


def test_create_then_read_round_trip(store):
    created = store.create(Rate(title="Weekend", amount=180, description="Sat/Sun", currency=Currency.EUR))
    assert store.read(created.id) == created
    assert created.created_by == created.modified_by == "tester"
    assert created.created_at


def test_create_keeps_client_id_and_rejects_duplicates(store):
    store.create(Rate(id="custom", title="Custom", amount=1))
    before = _persisted(store)

    with pytest.raises(DuplicateError):
        store.create(Rate(id="r1", title="Other", amount=5))

    assert store.count() == 2
    assert store.read("r1").title == "Standard"
    assert _persisted(store) == before


def test_deleted_id_is_not_reissued(store):
    store.delete("r1")
    with pytest.raises(DuplicateError):
        store.create(Rate(id="r1", title="Again", amount=1))


@pytest.mark.parametrize(
    "rate",
    [
        Rate(title="", amount=1),
        Rate(title="   ", amount=1),
        Rate(title="Neg", amount=-1),
        Rate(title="NaN", amount=float("nan")),
        Rate(title="Inf", amount=float("inf")),
        Rate(title="-Inf", amount=float("-inf")),
    ],
)
def test_create_validates_input(store, rate):
    with pytest.raises(ValidationError):
        store.create(rate)
    assert store.count() == 1


def test_unknown_id_raises_not_found_and_changes_nothing(store):
    before = _persisted(store)
    with pytest.raises(NotFoundError):
        store.read("missing")
    with pytest.raises(NotFoundError):
        store.update("missing", Rate(title="X", amount=1))
    with pytest.raises(NotFoundError):
        store.delete("missing")
    assert store.count() == 1
    assert _persisted(store) == before


def test_update_in_place_under_path_id(store):
    original = store.read("r1")
    updated = store.update("r1", Rate(title="Standard 2", amount=110), actor="editor")

    assert updated.id == "r1"
    assert updated.amount == 110
    assert updated.created_at == original.created_at
    assert updated.created_by == original.created_by
    assert updated.modified_by == "editor"
    assert store.count() == 1
    assert store.read("r1") == updated


def test_update_rejects_mismatched_body_id(store):
    with pytest.raises(ValidationError):
        store.update("r1", Rate(id="r9", title="Moved", amount=1))
    assert store.read("r1").title == "Standard"
    with pytest.raises(NotFoundError):
        store.read("r9")


def test_delete_is_soft_and_persisted(store):
    store.delete("r1")
    (entry,) = _persisted(store)
    assert entry.id == "r1"
    assert entry.disabled is True
    assert store.list() == []
    with pytest.raises(NotFoundError):
        store.delete("r1")


def test_every_mutation_is_written_through(store):
    a = store.create(Rate(title="A", amount=1))
    store.update(a.id, Rate(title="A2", amount=2))
    store.delete("r1")
    assert _persisted(store) == list(store._data.values())


def test_list_keeps_insertion_order_and_is_idempotent(store):
    for title in ("Zulu", "Alpha", "Mike"):
        store.create(Rate(title=title, amount=1))
    titles = [r.title for r in store.list()]
    assert titles == ["Standard", "Zulu", "Alpha", "Mike"]
    assert store.list() == store.list()


def test_list_windowing_and_query(store):
    for title in ("Travel day", "Travel night", "Office"):
        store.create(Rate(title=title, amount=1))
    assert [r.title for r in store.list(position=1, size=2)] == ["Travel day", "Travel night"]
    assert [r.title for r in store.list(position=3)] == ["Office"]
    assert store.list(position=10) == []
    assert store.list(size=0) == []
    assert [r.title for r in store.list("title", "travel")] == ["Travel day", "Travel night"]
    assert [r.title for r in store.list("currency", "chf", position=3)] == ["Office"]


@pytest.mark.parametrize("kwargs", [{"position": -1}, {"size": -1}, {"query_type": "owner", "query": "x"}])
def test_list_rejects_bad_arguments(store, kwargs):
    with pytest.raises(ValidationError):
        store.list(**kwargs)


def test_returned_values_are_copies(store):
    rate = store.read("r1")
    rate.title = "mutated"
    assert store.read("r1").title == "Standard"


def test_restart_loads_persisted_state_not_seed(paths):
    seed, data = paths
    first = FileRateStore(seed, data)
    created = first.create(Rate(title="Rush", amount=150))
    first.delete("r1")

    seed.write_text(json.dumps([{"id": "other", "title": "Other", "rate": 5}]), encoding="utf-8")
    second = FileRateStore(seed, data)

    assert second.count() == 1
    assert second.read(created.id) == created
    with pytest.raises(NotFoundError):
        second.read("other")


def test_non_persistent_store_never_writes(paths):
    seed, data = paths
    store = FileRateStore(seed, data, persistent=False)
    store.create(Rate(title="Temp", amount=1))
    assert not data.exists()


def test_persistence_failure_propagates_and_rolls_back(store, monkeypatch):
    def boom(path, rates):
        raise InternalError("disk full")

    monkeypatch.setattr(json_storage, "save_rates", boom)

    with pytest.raises(InternalError):
        store.create(Rate(title="Lost", amount=1))
    with pytest.raises(InternalError):
        store.update("r1", Rate(title="Changed", amount=1))
    with pytest.raises(InternalError):
        store.delete("r1")

    assert store.count() == 1
    assert store.read("r1").title == "Standard"


def test_missing_files_fail_construction(tmp_path):
    with pytest.raises(NotFoundError):
        FileRateStore(tmp_path / "seed.json", tmp_path / "data.json")


def test_update_rejects_non_finite_amount(store):
    before = _persisted(store)
    with pytest.raises(ValidationError):
        store.update("r1", Rate(title="Standard", amount=float("nan")))
    assert store.read("r1").amount == 100
    assert _persisted(store) == before


def test_update_normalizes_path_id(store):
    assert store.read(" r1 ").id == "r1"
    updated = store.update(" r1 ", Rate(id="r1", title="Trimmed", amount=5))
    assert updated.id == "r1"
    assert store.count() == 1
    store.delete(" r1")
    assert store.count() == 0


def test_concurrent_creates_with_same_id_admit_one(store):
    workers = 16
    barrier = threading.Barrier(workers)
    created, duplicates, other = [], [], []

    def worker(n):
        barrier.wait()
        try:
            created.append(store.create(Rate(id="same", title=f"Racer {n}", amount=n)))
        except DuplicateError:
            duplicates.append(n)
        except Exception as exc:  # surfaced by the assertion below
            other.append(exc)

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert other == []
    assert len(created) == 1
    assert len(duplicates) == workers - 1
    assert store.count() == 2
    persisted = _persisted(store)
    assert [r.id for r in persisted] == ["r1", "same"]
    assert persisted[1] == created[0]
