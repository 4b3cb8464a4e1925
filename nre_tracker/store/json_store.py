"""Flat-file task store: ``tasks.json`` holding an array of wire-format tasks.

Each mutation re-reads the whole file, edits the list in memory and writes it
back through a temp file + ``os.replace``. Mutations are serialized by a
process-local lock, so concurrent API requests cannot lose each other's
writes. Other processes writing the same file are not coordinated.
"""
from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from nre_tracker.app_config import write_json_atomic
from nre_tracker.errors import DuplicateTaskError, StoreError, TaskNotFoundError
from nre_tracker.models import Task, TaskPatch
from nre_tracker.store.base import TaskStore, sort_newest_first


logger = logging.getLogger(__name__)


class JsonTaskStore(TaskStore):
    backend_name = "json"

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read_raw(self) -> List[Dict[str, Any]]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, ValueError) as exc:
            raise StoreError(f"Error reading tasks file {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise StoreError(f"Tasks file {self.path} does not hold a JSON array")
        return [row for row in data if isinstance(row, dict)]

    def _read_tasks(self) -> List[Task]:
        tasks: List[Task] = []
        for row in self._read_raw():
            try:
                tasks.append(Task.model_validate(row))
            except ValidationError as exc:
                logger.warning("Skipping unreadable task record %r: %s", row.get("id"), exc.errors()[:1])
        return tasks

    def _write_raw(self, rows: List[Dict[str, Any]]) -> None:
        try:
            write_json_atomic(self.path, rows)
        except OSError as exc:
            logger.error("Error writing tasks file %s: %s", self.path, exc)
            raise StoreError(f"Error writing tasks file: {exc}") from exc

    def list_tasks(self) -> List[Task]:
        # Rows are in insert order; on equal createdAt the later insert goes first.
        return sort_newest_first(reversed(self._read_tasks()))

    def get_task(self, task_id: str) -> Optional[Task]:
        for t in self._read_tasks():
            if t.id == task_id:
                return t
        return None

    def insert_task(self, task: Task) -> Task:
        with self._lock:
            rows = self._read_raw()
            if any(row.get("id") == task.id for row in rows):
                raise DuplicateTaskError(task.id)
            rows.append(task.to_wire())
            self._write_raw(rows)
        return task

    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        with self._lock:
            rows = self._read_raw()
            for idx, row in enumerate(rows):
                if row.get("id") != task_id:
                    continue
                try:
                    updated = Task.model_validate(row).model_copy(update=patch.changes())
                except ValidationError as exc:
                    raise StoreError(f"Stored task {task_id} is unreadable: {exc.errors()[:1]}") from exc
                # Keys this version does not know about stay in the stored row.
                rows[idx] = {**row, **updated.to_wire()}
                self._write_raw(rows)
                return updated
        raise TaskNotFoundError(task_id)

    def delete_task(self, task_id: str) -> None:
        with self._lock:
            rows = self._read_raw()
            remaining = [row for row in rows if row.get("id") != task_id]
            if len(remaining) == len(rows):
                raise TaskNotFoundError(task_id)
            self._write_raw(remaining)
