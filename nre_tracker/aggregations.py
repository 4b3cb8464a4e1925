"""Grouped counts and work-hour sums feeding the dashboard charts."""
from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence

from nre_tracker.models import STATUS_OPTIONS, Task

DIMENSIONS = {
    "taskType": "task_type",
    "deviceType": "device_type",
}


def _hours(task: Task) -> float:
    return float(task.work_hours or 0)


def aggregate_by_status(tasks: Iterable[Task]) -> Dict[str, int]:
    """Task count per status, in status order, statuses with no task left out."""
    counts = {s: 0 for s in STATUS_OPTIONS}
    for t in tasks:
        if t.status in counts:
            counts[t.status] += 1
    return OrderedDict((s, n) for s, n in counts.items() if n > 0)


def aggregate_by_owner(tasks: Iterable[Task]) -> Dict[str, int]:
    """Task count per owner, busiest owner first."""
    counts: Dict[str, int] = {}
    for t in tasks:
        counts[t.owner] = counts.get(t.owner, 0) + 1
    return OrderedDict(sorted(counts.items(), key=lambda kv: kv[1], reverse=True))


def aggregate_work_hours_by_owner_and_device(
    tasks: Iterable[Task],
    device_types: Optional[Sequence[str]] = None,
) -> Dict[str, Dict[str, float]]:
    """owner -> {device: hours}; zero cells and zero-total owners are dropped.

    When ``device_types`` is given only those devices are counted (the
    configured option list); otherwise every device seen in ``tasks``.
    Owners are ordered by total hours, descending.
    """
    tasks = list(tasks)
    allowed = set(device_types) if device_types is not None else None
    grouped: Dict[str, Dict[str, float]] = {}
    for t in tasks:
        if allowed is not None and t.device_type not in allowed:
            continue
        hours = _hours(t)
        if hours <= 0:
            continue
        per_owner = grouped.setdefault(t.owner, {})
        per_owner[t.device_type] = per_owner.get(t.device_type, 0.0) + hours
    ordered = sorted(grouped.items(), key=lambda kv: sum(kv[1].values()), reverse=True)
    return OrderedDict(ordered)


def aggregate_work_hours_by_dimension(
    tasks: Iterable[Task],
    dimension: str,
    keys: Optional[Sequence[str]] = None,
) -> Dict[str, float]:
    """Total hours per ``taskType`` or ``deviceType`` value, zero totals dropped.

    With ``keys`` the result follows that order and ignores other values.
    """
    if dimension not in DIMENSIONS:
        raise ValueError(f"dimension must be one of {sorted(DIMENSIONS)}, got {dimension!r}")
    attr = DIMENSIONS[dimension]
    totals: Dict[str, float] = {}
    for t in tasks:
        key = getattr(t, attr)
        totals[key] = totals.get(key, 0.0) + _hours(t)
    order: List[str] = list(keys) if keys is not None else list(totals)
    return OrderedDict((k, totals[k]) for k in order if totals.get(k, 0.0) > 0)


def total_work_hours(tasks: Iterable[Task]) -> float:
    return sum(_hours(t) for t in tasks)
