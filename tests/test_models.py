import pytest
from pydantic import ValidationError

from nre_tracker.models import (
    DEFAULT_OWNERS,
    DropdownOptions,
    PortConfig,
    Task,
    TaskFormData,
    TaskPatch,
    coerce_work_hours,
)


def test_wire_format_uses_camel_case():
    task = Task(id="a", created_at=5, device_type="NLS-N7", work_hours="2.5")
    wire = task.to_wire()
    assert wire["deviceType"] == "NLS-N7"
    assert wire["workHours"] == 2.5
    assert wire["createdAt"] == 5
    assert wire["status"] == "Pending"


def test_task_accepts_camel_case_input():
    task = Task.model_validate({"id": "a", "createdAt": "1700000000000", "nreNumber": "N1", "startDate": "2024-01-02T08:00:00Z"})
    assert task.created_at == 1700000000000
    assert task.nre_number == "N1"
    assert task.start_date == "2024-01-02"


@pytest.mark.parametrize("raw,expected", [(None, 0.0), ("", 0.0), ("  ", 0.0), ("3", 3.0), (4, 4.0), (1.5, 1.5)])
def test_coerce_work_hours(raw, expected):
    assert coerce_work_hours(raw) == expected


@pytest.mark.parametrize("raw", ["abc", -1, "-0.5", True])
def test_coerce_work_hours_rejects(raw):
    with pytest.raises(ValueError):
        coerce_work_hours(raw)


def test_invalid_status_rejected():
    with pytest.raises(ValidationError):
        TaskFormData(status="Done")


def test_invalid_date_rejected():
    with pytest.raises(ValidationError):
        TaskFormData(start_date="03/01/2024")


def test_task_requires_id():
    with pytest.raises(ValidationError):
        Task(id="", created_at=1)


def test_from_form_keeps_fields():
    form = TaskFormData(name="x", owner="林源", work_hours=3)
    task = Task.from_form(form, task_id="id-1", created_at=42)
    assert task.id == "id-1"
    assert task.created_at == 42
    assert task.form_data() == form


def test_patch_changes_only_sent_fields():
    patch = TaskPatch.model_validate({"status": "Completed", "workHours": "6", "id": "ignored", "createdAt": 1})
    assert patch.changes() == {"status": "Completed", "work_hours": 6.0}


def test_dropdown_options_defaults_and_cleaning():
    assert DropdownOptions().owners == DEFAULT_OWNERS
    opts = DropdownOptions.model_validate({"owners": [" A ", "A", "", None, "B"], "deviceTypes": []})
    assert opts.owners == ["A", "B"]
    assert opts.device_types == []
    assert "taskTypes" in opts.to_wire()


@pytest.mark.parametrize("raw,expected", [(3001, 3001), ("8080", 8080), (1, 1), (65535, 65535)])
def test_port_config_valid(raw, expected):
    assert PortConfig(port=raw).port == expected


@pytest.mark.parametrize("raw", [0, 65536, "abc", None, 80.5, True])
def test_port_config_invalid(raw):
    with pytest.raises(ValidationError):
        PortConfig(port=raw)


def test_dates_are_stored_zero_padded():
    assert TaskFormData(start_date="2024-1-5").start_date == "2024-01-05"
    assert TaskPatch(end_date="2024-3-9").end_date == "2024-03-09"


@pytest.mark.parametrize("raw", ["inf", "-inf", float("inf"), "nan"])
def test_non_finite_hours_rejected(raw):
    with pytest.raises(ValueError):
        coerce_work_hours(raw)
    with pytest.raises(ValidationError):
        TaskFormData(work_hours=raw)


@pytest.mark.parametrize("raw", ["inf", float("inf"), "nan", "1e400"])
def test_port_config_rejects_non_finite(raw):
    with pytest.raises(ValidationError):
        PortConfig(port=raw)
