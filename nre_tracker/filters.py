from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import FrozenSet, Iterable, List, Optional

from nre_tracker.models import Task, TaskStatus


@dataclass(frozen=True)
class TaskFilter:
    """Compound task filter; every constraint must hold.

    ``owner``/``devices``/``statuses`` set to ``None`` means "no constraint".
    An empty ``devices``/``statuses`` set matches nothing.
    """

    search: str = ""
    owner: Optional[str] = None
    devices: Optional[FrozenSet[str]] = None
    statuses: Optional[FrozenSet[str]] = None

    @classmethod
    def from_selection(
        cls,
        search: str = "",
        owner: str = "",
        devices: Iterable[str] = (),
        statuses: Iterable[str] = (),
    ) -> "TaskFilter":
        """Build from UI widgets, where an empty selection means "any"."""
        devices = frozenset(devices)
        statuses = frozenset(statuses)
        return cls(
            search=search or "",
            owner=owner or None,
            devices=devices or None,
            statuses=statuses or None,
        )

    def matches(self, task: Task) -> bool:
        term = self.search.lower()
        if term and term not in task.name.lower() and term not in task.nre_number.lower():
            return False
        if self.owner is not None and task.owner != self.owner:
            return False
        if self.devices is not None and task.device_type not in self.devices:
            return False
        if self.statuses is not None and task.status not in self.statuses:
            return False
        return True


def filter_tasks(tasks: Iterable[Task], flt: TaskFilter) -> List[Task]:
    return [t for t in tasks if flt.matches(t)]


def filter(  # noqa: A001
    tasks: Iterable[Task],
    search_term: str = "",
    owner_filter: str = "",
    device_filters: Iterable[str] = (),
    status_filters: Iterable[str] = (),
) -> List[Task]:
    return filter_tasks(tasks, TaskFilter.from_selection(search_term, owner_filter, device_filters, status_filters))


def _parse_calendar_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value.strip()[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def overdue_days(end_date: str, status: str, today: Optional[date] = None) -> int:
    """Whole calendar days ``today`` is past ``end_date``; 0 when completed or not due."""
    if status == TaskStatus.COMPLETED.value:
        return 0
    if not end_date:
        return 0
    end = _parse_calendar_date(end_date)
    if end is None:
        return 0
    today = today or date.today()
    if today > end:
        return (today - end).days
    return 0
