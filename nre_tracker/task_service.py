from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, List, Optional

import requests

from nre_tracker.errors import ConnectivityError, NotFoundError, ServiceError
from nre_tracker.models import DropdownOptions, NetworkInfo, Task, TaskFormData, now_ms
from nre_tracker.store.base import sort_newest_first


logger = logging.getLogger(__name__)


def new_task_id() -> str:
    return str(uuid.uuid4())


class TaskService:
    """Thin client for the tracker REST API.

    ``session`` may be any object with a requests-style
    ``request(method, url, json=..., timeout=...)`` returning a response with
    ``status_code``, ``text`` and ``json()``.
    """

    def __init__(self, base_url: str, *, session: Any = None, timeout_seconds: float = 10.0) -> None:
        self.base_url = (base_url or "").rstrip("/")
        self.timeout_seconds = float(timeout_seconds)
        self._session = session if session is not None else requests.Session()

    def _request(self, method: str, path: str, *, json_body: Any = None) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self._session.request(method, url, json=json_body, timeout=self.timeout_seconds)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.error("API unreachable (%s %s): %s", method, url, exc)
            raise ConnectivityError(f"Failed to connect to the server at {self.base_url}") from exc

        status = int(resp.status_code)
        if status == 404:
            raise NotFoundError(f"{method} {path}: not found", status_code=status, body=resp.text[:500])
        if status >= 400:
            logger.error("API error (%s %s): %s %s", method, path, status, resp.text[:200])
            raise ServiceError(f"{method} {path} failed: HTTP {status}", status_code=status, body=resp.text[:500])
        try:
            return resp.json()
        except ValueError as exc:
            raise ServiceError(f"{method} {path}: invalid JSON response", status_code=status, body=resp.text[:500]) from exc

    # --- tasks ---

    def list_all(self) -> List[Task]:
        data = self._request("GET", "/api/tasks")
        return sort_newest_first(Task.model_validate(row) for row in data or [])

    def create(self, data: TaskFormData) -> Task:
        task = Task.from_form(data, task_id=new_task_id(), created_at=now_ms())
        stored = self._request("POST", "/api/tasks", json_body=task.to_wire())
        return Task.model_validate(stored)

    def update(self, task: Task) -> None:
        self._request("PUT", f"/api/tasks/{task.id}", json_body=task.to_wire())

    def delete(self, task_id: str) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")

    # --- settings ---

    def get_lists(self) -> DropdownOptions:
        return DropdownOptions.model_validate(self._request("GET", "/api/lists") or {})

    def save_lists(self, lists: DropdownOptions) -> DropdownOptions:
        return DropdownOptions.model_validate(self._request("POST", "/api/lists", json_body=lists.to_wire()))

    def get_config(self) -> Dict[str, Any]:
        return self._request("GET", "/api/config")

    def update_config(self, port: int) -> Dict[str, Any]:
        return self._request("POST", "/api/config", json_body={"port": port})

    def network_info(self) -> NetworkInfo:
        return NetworkInfo.model_validate(self._request("GET", "/api/network-info"))

    def ping(self) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/healthz")
