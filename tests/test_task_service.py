import pytest
import requests

from nre_tracker import task_service
from nre_tracker.errors import ConnectivityError, NotFoundError, ServiceError
from nre_tracker.models import Task, TaskFormData
from nre_tracker.task_service import TaskService


@pytest.fixture
def service(client):
    return TaskService("http://testserver", session=client)


def test_create_then_list_puts_new_task_first(service, monkeypatch):
    monkeypatch.setattr(task_service, "now_ms", lambda: 1_700_000_000_000)
    first = service.create(TaskFormData(name="first", owner="A"))
    second = service.create(TaskFormData(name="second", owner="B"))
    assert first.id != second.id
    assert first.created_at == second.created_at
    listed = service.list_all()
    assert [t.id for t in listed] == [second.id, first.id]


def test_update_and_delete(service):
    task = service.create(TaskFormData(name="x"))
    changed = Task.from_form(TaskFormData(name="y", status="Blocked"), task_id=task.id, created_at=task.created_at)
    service.update(changed)
    stored = service.list_all()[0]
    assert stored.name == "y"
    assert stored.status == "Blocked"
    service.delete(task.id)
    assert service.list_all() == []


def test_missing_task_raises_not_found(service):
    with pytest.raises(NotFoundError):
        service.delete("missing")


def test_settings_calls(service):
    lists = service.get_lists()
    lists.owners = ["Solo"]
    assert service.save_lists(lists).owners == ["Solo"]
    assert service.update_config(5000)["port"] == 5000
    info = service.network_info()
    assert (info.ip, info.port) == ("192.168.1.20", 5000)
    assert service.ping()["ok"] is True


def test_invalid_port_is_service_error(service):
    with pytest.raises(ServiceError) as excinfo:
        service.update_config(0)
    assert excinfo.value.status_code == 400


class _RefusingSession:
    def request(self, *args, **kwargs):
        raise requests.ConnectionError("connection refused")


def test_unreachable_server_raises_connectivity_error():
    service = TaskService("http://127.0.0.1:9", session=_RefusingSession())
    with pytest.raises(ConnectivityError):
        service.list_all()
