"""Contract tests run against both record store backends."""

import json
import threading

import pytest

from inventory_service.stores.document import DocumentRecordStore


def test_create_assigns_unique_ids(record_store):
    first = record_store.create("Hammer")
    second = record_store.create("Hammer")
    assert first.id != second.id
    assert first.description == ""
    assert first.photo_path is None


@pytest.mark.parametrize("name", ["", None])
def test_create_requires_name(record_store, name):
    with pytest.raises(ValueError):
        record_store.create(name, "desc")
    assert record_store.get_all() == []


def test_get_all_keeps_insertion_order(record_store):
    names = ["Hammer", "Saw", "Drill"]
    for name in names:
        record_store.create(name)
    assert [item.name for item in record_store.get_all()] == names


def test_get_by_id(record_store):
    created = record_store.create("Saw", "sharp", "abc.jpg")
    fetched = record_store.get_by_id(created.id)
    assert fetched == created
    assert record_store.get_by_id("missing") is None


def test_update_only_overwrites_supplied_values(record_store):
    item = record_store.create("Saw", "sharp")

    updated = record_store.update(item.id, description="blunt")
    assert updated.name == "Saw"
    assert updated.description == "blunt"

    updated = record_store.update(item.id, name="Handsaw", description="")
    assert updated.name == "Handsaw"
    assert updated.description == "blunt"

    assert record_store.get_by_id(item.id) == updated


def test_update_unknown_id(record_store):
    assert record_store.update("missing", name="x") is None


def test_set_photo(record_store):
    item = record_store.create("Drill")
    updated = record_store.set_photo(item.id, "new.png")
    assert updated.photo_path == "new.png"
    assert record_store.get_by_id(item.id).photo_path == "new.png"
    assert record_store.set_photo("missing", "x.png") is None


def test_delete_returns_removed_record(record_store):
    item = record_store.create("Drill", "", "drill.jpg")
    removed = record_store.delete(item.id)
    assert removed.id == item.id
    assert removed.photo_path == "drill.jpg"
    assert record_store.get_by_id(item.id) is None
    assert record_store.delete(item.id) is None


# --- document backend persistence ---

def test_document_survives_reload(tmp_path):
    path = str(tmp_path / "inventory.json")
    store = DocumentRecordStore(path)
    kept = store.create("Hammer", "claw", "h.jpg")
    dropped = store.create("Saw")
    store.update(kept.id, description="steel claw")
    store.delete(dropped.id)

    reloaded = DocumentRecordStore(path)
    assert [item.model_dump() for item in reloaded.get_all()] == [
        {"id": kept.id, "name": "Hammer", "description": "steel claw", "photo_path": "h.jpg"}
    ]


def test_document_file_layout(tmp_path):
    path = tmp_path / "inventory.json"
    store = DocumentRecordStore(str(path))
    item = store.create("Hammer")

    with open(path, encoding="utf-8") as fh:
        document = json.load(fh)
    assert document == {"items": [{"id": item.id, "name": "Hammer", "description": "", "photo_path": None}]}


def test_document_missing_file_starts_empty(tmp_path):
    store = DocumentRecordStore(str(tmp_path / "nested" / "inventory.json"))
    assert store.get_all() == []


def test_document_returns_copies(document_store):
    item = document_store.create("Hammer")
    item.name = "changed outside"
    assert document_store.get_by_id(item.id).name == "Hammer"


def failing_persist(items):
    raise OSError("disk full")


def test_document_failed_create_leaves_no_record(document_store, monkeypatch):
    monkeypatch.setattr(document_store, "_persist", failing_persist)
    with pytest.raises(OSError):
        document_store.create("Hammer", "", "photo.jpg")
    assert document_store.get_all() == []
    assert DocumentRecordStore(document_store.path).get_all() == []


def test_document_failed_update_keeps_old_values(document_store, monkeypatch):
    item = document_store.create("Hammer", "claw")
    monkeypatch.setattr(document_store, "_persist", failing_persist)
    with pytest.raises(OSError):
        document_store.update(item.id, name="Mallet")
    with pytest.raises(OSError):
        document_store.set_photo(item.id, "new.jpg")
    assert document_store.get_by_id(item.id) == item
    assert DocumentRecordStore(document_store.path).get_by_id(item.id) == item


def test_document_failed_delete_keeps_record(document_store, monkeypatch):
    item = document_store.create("Hammer")
    monkeypatch.setattr(document_store, "_persist", failing_persist)
    with pytest.raises(OSError):
        document_store.delete(item.id)
    assert document_store.get_by_id(item.id) == item
    assert DocumentRecordStore(document_store.path).get_by_id(item.id) == item


def test_document_concurrent_writers(document_store):
    workers = 16
    per_worker = 5
    barrier = threading.Barrier(workers)

    def work(worker):
        barrier.wait()
        for n in range(per_worker):
            item = document_store.create(f"item-{worker}-{n}")
            document_store.update(item.id, description=f"updated-{worker}-{n}")

    threads = [threading.Thread(target=work, args=(w,)) for w in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    reloaded = DocumentRecordStore(document_store.path).get_all()
    assert len(reloaded) == workers * per_worker
    assert {item.name for item in reloaded} == {
        f"item-{w}-{n}" for w in range(workers) for n in range(per_worker)
    }
    assert all(item.description == "updated-" + item.name[len("item-"):] for item in reloaded)
