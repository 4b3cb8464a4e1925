import json

import pytest

from nre_tracker.errors import DuplicateTaskError, StoreError, TaskNotFoundError
from nre_tracker.models import TaskPatch
from nre_tracker.store import JsonTaskStore, SqlTaskStore, build_store

from conftest import make_task


def test_list_is_newest_first(store):
    store.insert_task(make_task("old", created_at=1))
    store.insert_task(make_task("new", created_at=3))
    store.insert_task(make_task("mid", created_at=2))
    assert [t.id for t in store.list_tasks()] == ["new", "mid", "old"]


def test_insert_duplicate_id_rejected(store):
    store.insert_task(make_task("a"))
    with pytest.raises(DuplicateTaskError):
        store.insert_task(make_task("a", name="other"))
    assert store.get_task("a").name == "BSP bringup"


def test_update_merges_patch_and_keeps_identity(store):
    store.insert_task(make_task("a", created_at=77))
    updated = store.update_task("a", TaskPatch.model_validate({"status": "Completed", "workHours": 12, "createdAt": 1}))
    assert updated.status == "Completed"
    assert updated.work_hours == 12
    assert updated.created_at == 77
    again = store.get_task("a")
    assert again.status == "Completed"
    assert again.owner == "付帅"


def test_update_and_delete_unknown_id(store):
    with pytest.raises(TaskNotFoundError):
        store.update_task("missing", TaskPatch(name="x"))
    with pytest.raises(TaskNotFoundError):
        store.delete_task("missing")


def test_delete(store):
    store.insert_task(make_task("a"))
    store.delete_task("a")
    assert store.get_task("a") is None
    assert store.list_tasks() == []


def test_json_store_missing_file_is_empty(tmp_path):
    assert JsonTaskStore(tmp_path / "nope.json").list_tasks() == []


def test_json_store_corrupt_file_raises(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonTaskStore(path).list_tasks()


def test_json_store_skips_invalid_rows_and_keeps_them_on_write(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "", "name": "broken"}, make_task("ok").to_wire()]), encoding="utf-8")
    s = JsonTaskStore(path)
    assert [t.id for t in s.list_tasks()] == ["ok"]
    s.insert_task(make_task("b", created_at=5))
    rows = json.loads(path.read_text(encoding="utf-8"))
    assert len(rows) == 3
    assert rows[-1]["deviceType"] == "NLS-MT93"


def test_build_store_selects_backend(tracker_config, monkeypatch):
    assert isinstance(build_store(tracker_config), JsonTaskStore)
    monkeypatch.setenv("NRE_STORE_BACKEND", "sqlite")
    from nre_tracker.config import TrackerConfig

    s = build_store(TrackerConfig.from_env())
    try:
        assert isinstance(s, SqlTaskStore)
        assert s.backend_name == "sqlite"
    finally:
        s.close()


def test_same_created_at_lists_later_insert_first(store):
    store.insert_task(make_task("earlier", created_at=500))
    store.insert_task(make_task("later", created_at=500))
    assert [t.id for t in store.list_tasks()] == ["later", "earlier"]


def test_json_store_update_of_unreadable_row_is_store_error(tmp_path):
    path = tmp_path / "tasks.json"
    path.write_text(json.dumps([{"id": "bad", "createdAt": 1, "status": "Nope"}]), encoding="utf-8")
    with pytest.raises(StoreError):
        JsonTaskStore(path).update_task("bad", TaskPatch(name="x"))
