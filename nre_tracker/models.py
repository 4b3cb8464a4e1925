"""Wire/record types for NRE tasks and the dropdown option lists.

The JSON wire format uses camelCase keys (``deviceType``, ``createdAt`` ...);
Python code uses the snake_case attribute names. Both are accepted on input.
"""
from __future__ import annotations

import math
import time
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    TESTING = "Testing"
    COMPLETED = "Completed"
    BLOCKED = "Blocked"


STATUS_OPTIONS: List[str] = [s.value for s in TaskStatus]

DEFAULT_PORT = 3001

DEFAULT_OWNERS = [
    "唐晓磊", "付帅", "陈雯雯", "林源", "陈名舜", "林道疆", "林栎雨",
    "于国杰", "吴和志", "郑宏林", "李志雄", "朱成华", "林杰君", "任奕霖",
]
DEFAULT_DEVICE_TYPES = [
    "NLS-MT93", "NLS-MT95", "NLS-NQuire", "NLS-N7", "NLS-MT67",
    "NLS-NFT10", "NLS-NW30", "NLS-WD1", "NLS-WD5",
]
DEFAULT_PLATFORMS = [
    "Unisoc 7885", "Mediatek 8781", "Mediatek 8786", "Mediatek 8791",
    "Mediatek 6762", "Qualcomm 6490", "Qualcomm 6690",
]
DEFAULT_ANDROID_VERSIONS = [
    "Android 9", "Android 10", "Android 11", "Android 12",
    "Android 13", "Android 14", "Android 15", "Android 16", "Android 17",
]
DEFAULT_TASK_TYPES = ["维护任务", "国内NRE", "海外NRE", "技术预研", "临时任务", "新项目"]


def now_ms() -> int:
    return int(time.time() * 1000)


def coerce_work_hours(value: Any) -> float:
    """Turn form/CSV input into a non-negative number of hours.

    ``None`` and blank strings mean 0. Anything else that is not a number, or
    is negative, raises ``ValueError``.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError("workHours must be a number")
    if isinstance(value, (int, float)):
        hours = float(value)
    else:
        raw = str(value).strip()
        if not raw:
            return 0.0
        hours = float(raw)
    if math.isnan(hours) or math.isinf(hours) or hours < 0:
        raise ValueError("workHours must be a finite non-negative number")
    return hours


def _coerce_date(value: Any) -> str:
    if value is None:
        return ""
    raw = str(value).strip()
    if not raw:
        return ""
    # Accept full ISO timestamps by keeping the calendar part only.
    candidate = raw[:10]
    parsed = datetime.strptime(candidate, "%Y-%m-%d").date()
    if len(raw) > 10 and raw[10] not in ("T", " "):
        raise ValueError(f"not a YYYY-MM-DD date: {raw!r}")
    return parsed.isoformat()


class TaskFormData(BaseModel):
    """Everything a user edits on the task form (no id / createdAt)."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    name: str = ""
    owner: str = ""
    device_type: str = Field("", alias="deviceType")
    platform: str = ""
    android_version: str = Field("", alias="androidVersion")
    nre_number: str = Field("", alias="nreNumber")
    status: TaskStatus = Field(TaskStatus.PENDING, validate_default=True)
    task_type: str = Field("", alias="taskType")
    start_date: str = Field("", alias="startDate")
    end_date: str = Field("", alias="endDate")
    work_hours: float = Field(0.0, alias="workHours", ge=0)
    content: str = ""

    @field_validator(
        "name", "owner", "device_type", "platform", "android_version",
        "nre_number", "task_type", "content",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _calendar_date(cls, v: Any) -> str:
        return _coerce_date(v)

    @field_validator("work_hours", mode="before")
    @classmethod
    def _hours(cls, v: Any) -> float:
        return coerce_work_hours(v)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class Task(TaskFormData):
    id: str = Field(min_length=1)
    created_at: int = Field(alias="createdAt", ge=0)

    @field_validator("created_at", mode="before")
    @classmethod
    def _epoch_ms(cls, v: Any) -> int:
        if v is None or v == "":
            return 0
        return int(float(v))

    @classmethod
    def from_form(cls, data: TaskFormData, *, task_id: str, created_at: Optional[int] = None) -> "Task":
        fields = data.model_dump()
        return cls(id=task_id, created_at=now_ms() if created_at is None else created_at, **fields)

    def form_data(self) -> TaskFormData:
        return TaskFormData(**self.model_dump(exclude={"id", "created_at"}))


class TaskPatch(BaseModel):
    """Partial task update. ``id`` and ``createdAt`` are ignored if sent."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True, extra="ignore")

    name: Optional[str] = None
    owner: Optional[str] = None
    device_type: Optional[str] = Field(None, alias="deviceType")
    platform: Optional[str] = None
    android_version: Optional[str] = Field(None, alias="androidVersion")
    nre_number: Optional[str] = Field(None, alias="nreNumber")
    status: Optional[TaskStatus] = None
    task_type: Optional[str] = Field(None, alias="taskType")
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    work_hours: Optional[float] = Field(None, alias="workHours", ge=0)
    content: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _calendar_date(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        return _coerce_date(v)

    @field_validator("work_hours", mode="before")
    @classmethod
    def _hours(cls, v: Any) -> Optional[float]:
        if v is None:
            return None
        return coerce_work_hours(v)

    def changes(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


def _clean_options(values: Any) -> List[str]:
    out: List[str] = []
    if not isinstance(values, list):
        return out
    for v in values:
        if v is None:
            continue
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return out


class DropdownOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owners: List[str] = Field(default_factory=lambda: list(DEFAULT_OWNERS))
    device_types: List[str] = Field(default_factory=lambda: list(DEFAULT_DEVICE_TYPES), alias="deviceTypes")
    platforms: List[str] = Field(default_factory=lambda: list(DEFAULT_PLATFORMS))
    android_versions: List[str] = Field(default_factory=lambda: list(DEFAULT_ANDROID_VERSIONS), alias="androidVersions")
    task_types: List[str] = Field(default_factory=lambda: list(DEFAULT_TASK_TYPES), alias="taskTypes")

    @field_validator("owners", "device_types", "platforms", "android_versions", "task_types", mode="before")
    @classmethod
    def _clean(cls, v: Any) -> List[str]:
        return _clean_options(v)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class PortConfig(BaseModel):
    port: int = Field(ge=1, le=65535)

    @field_validator("port", mode="before")
    @classmethod
    def _numeric(cls, v: Any) -> int:
        if isinstance(v, bool) or v is None:
            raise ValueError("Invalid port")
        try:
            f = float(str(v).strip())
        except ValueError as exc:
            raise ValueError("Invalid port") from exc
        if math.isnan(f) or math.isinf(f) or f != int(f):
            raise ValueError("Invalid port")
        return int(f)


class NetworkInfo(BaseModel):
    ip: str
    port: int
