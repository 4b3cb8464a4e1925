import pytest
from fastapi.testclient import TestClient

from nre_tracker.api import create_app
from nre_tracker.config import TrackerConfig
from nre_tracker.models import Task
from nre_tracker.store import JsonTaskStore, SqlTaskStore


@pytest.fixture
def tracker_config(tmp_path, monkeypatch):
    for name in ("PORT", "NRE_API_URL", "NRE_DATABASE_URL", "NRE_STORE_BACKEND", "USER_DATA_PATH"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NRE_DATA_DIR", str(tmp_path / "Database"))
    return TrackerConfig.from_env()


@pytest.fixture(params=["json", "sqlite"])
def store(request, tmp_path):
    if request.param == "json":
        s = JsonTaskStore(tmp_path / "tasks.json")
    else:
        s = SqlTaskStore(f"sqlite:///{(tmp_path / 'tasks.db').as_posix()}")
    yield s
    s.close()


@pytest.fixture
def client(tracker_config, store):
    app = create_app(tracker_config, store=store, ip_resolver=lambda: "192.168.1.20")
    return TestClient(app)


def make_task(task_id="t1", created_at=1000, **fields):
    data = {
        "name": "BSP bringup",
        "owner": "付帅",
        "device_type": "NLS-MT93",
        "platform": "Qualcomm 6490",
        "android_version": "Android 14",
        "nre_number": "NRE-001",
        "status": "In Progress",
        "task_type": "国内NRE",
        "start_date": "2024-03-01",
        "end_date": "2024-03-20",
        "work_hours": 8,
        "content": "",
    }
    data.update(fields)
    return Task(id=task_id, created_at=created_at, **data)
