"""Exception taxonomy shared by the store, the API client and the CSV importer."""
from __future__ import annotations

from typing import Optional


class TrackerError(RuntimeError):
    pass


# --- store side -------------------------------------------------------------


class StoreError(TrackerError):
    pass


class TaskNotFoundError(StoreError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


class DuplicateTaskError(StoreError):
    def __init__(self, task_id: str) -> None:
        super().__init__(f"Task already exists: {task_id}")
        self.task_id = task_id


# --- client side ------------------------------------------------------------


class ConnectivityError(TrackerError):
    """The API server could not be reached (refused, timed out, DNS...)."""


class ServiceError(TrackerError):
    def __init__(self, message: str, *, status_code: Optional[int] = None, body: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class NotFoundError(ServiceError):
    pass


class CsvImportError(TrackerError):
    """Import stopped on a failing row; rows before it remain stored."""

    def __init__(self, message: str, *, created: int, row_number: int) -> None:
        super().__init__(message)
        self.created = created
        self.row_number = row_number
