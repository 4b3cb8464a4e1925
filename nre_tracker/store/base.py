from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from nre_tracker.models import Task, TaskPatch


def sort_newest_first(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=lambda t: t.created_at or 0, reverse=True)


class TaskStore(ABC):
    """Durable keyed storage of Task records."""

    backend_name: str = "abstract"

    @abstractmethod
    def list_tasks(self) -> List[Task]:
        """All tasks, newest ``created_at`` first."""

    @abstractmethod
    def get_task(self, task_id: str) -> Optional[Task]:
        ...

    @abstractmethod
    def insert_task(self, task: Task) -> Task:
        """Store a new record. Raises DuplicateTaskError if the id exists."""

    @abstractmethod
    def update_task(self, task_id: str, patch: TaskPatch) -> Task:
        """Merge ``patch`` into the stored record. Raises TaskNotFoundError."""

    @abstractmethod
    def delete_task(self, task_id: str) -> None:
        """Raises TaskNotFoundError if the id is absent."""

    def close(self) -> None:
        pass
