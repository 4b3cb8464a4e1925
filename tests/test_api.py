import json

from fastapi.testclient import TestClient

from nre_tracker.api import create_app
from nre_tracker.store import JsonTaskStore

from conftest import make_task


def test_healthz_reports_backend(client, store):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "backend": store.backend_name}


def test_create_and_list_newest_first(client):
    for tid, created in (("a", 1), ("b", 3), ("c", 2)):
        resp = client.post("/api/tasks", json=make_task(tid, created_at=created).to_wire())
        assert resp.status_code == 200
    body = client.get("/api/tasks").json()
    assert [t["id"] for t in body] == ["b", "c", "a"]
    assert body[0]["deviceType"] == "NLS-MT93"


def test_create_duplicate_is_conflict(client):
    payload = make_task("dup").to_wire()
    assert client.post("/api/tasks", json=payload).status_code == 200
    resp = client.post("/api/tasks", json=payload)
    assert resp.status_code == 409
    assert "error" in resp.json()


def test_create_invalid_body(client):
    resp = client.post("/api/tasks", json={"id": "x", "createdAt": 1, "status": "Nope"})
    assert resp.status_code == 422
    assert resp.json()["error"] == "Invalid request body"


def test_update_task(client):
    client.post("/api/tasks", json=make_task("a").to_wire())
    resp = client.put("/api/tasks/a", json={"status": "Testing", "nreNumber": "NRE-9"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "Testing"
    assert resp.json()["nreNumber"] == "NRE-9"
    assert resp.json()["name"] == "BSP bringup"


def test_update_and_delete_unknown_task(client):
    resp = client.put("/api/tasks/missing", json={"name": "x"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Task not found"}
    resp = client.delete("/api/tasks/missing")
    assert resp.status_code == 404


def test_delete_task(client):
    client.post("/api/tasks", json=make_task("a").to_wire())
    resp = client.delete("/api/tasks/a")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Deleted"}
    assert client.get("/api/tasks").json() == []


def test_lists_round_trip(client):
    defaults = client.get("/api/lists").json()
    assert set(defaults) == {"owners", "deviceTypes", "platforms", "androidVersions", "taskTypes"}
    defaults["owners"] = ["New Owner"]
    saved = client.post("/api/lists", json=defaults).json()
    assert saved["owners"] == ["New Owner"]
    assert client.get("/api/lists").json()["owners"] == ["New Owner"]


def test_config_port(client):
    assert client.get("/api/config").json() == {"port": 3001}
    resp = client.post("/api/config", json={"port": 8080})
    assert resp.status_code == 200
    assert resp.json() == {"message": "Config saved", "port": 8080}
    assert client.get("/api/config").json() == {"port": 8080}


def test_config_rejects_invalid_port(client):
    for bad in ({"port": 0}, {"port": 70000}, {"port": "abc"}, {"port": "inf"}):
        resp = client.post("/api/config", json=bad)
        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid port"}
    assert client.get("/api/config").json() == {"port": 3001}


def test_network_info_uses_resolver_and_stored_port(client):
    client.post("/api/config", json={"port": 4567})
    assert client.get("/api/network-info").json() == {"ip": "192.168.1.20", "port": 4567}


def test_update_of_unreadable_stored_row_returns_error_body(tracker_config, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text(json.dumps([{"id": "bad", "createdAt": 1, "status": "Nope"}]), encoding="utf-8")
    app = create_app(tracker_config, store=JsonTaskStore(path), ip_resolver=lambda: "127.0.0.1")
    resp = TestClient(app).put("/api/tasks/bad", json={"name": "x"})
    assert resp.status_code == 500
    assert "error" in resp.json()
