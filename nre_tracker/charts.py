from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from nre_tracker.aggregations import (
    aggregate_by_owner,
    aggregate_by_status,
    aggregate_work_hours_by_dimension,
    aggregate_work_hours_by_owner_and_device,
)
from nre_tracker.models import Task, TaskStatus

STATUS_COLORS: Dict[str, str] = {
    TaskStatus.PENDING.value: "#9ca3af",
    TaskStatus.IN_PROGRESS.value: "#3b82f6",
    TaskStatus.TESTING.value: "#a855f7",
    TaskStatus.COMPLETED.value: "#22c55e",
    TaskStatus.BLOCKED.value: "#ef4444",
}
DEVICE_COLORS = ["#6366f1", "#ef4444", "#f59e0b", "#10b981", "#3b82f6", "#8b5cf6", "#ec4899"]
PIE_COLORS = ["#0088FE", "#00C49F", "#FFBB28", "#FF8042", "#a855f7", "#ec4899", "#64748b", "#22c55e"]

TABLE_COLUMNS = [
    "name", "task_type", "owner", "device_type", "platform", "android_version",
    "nre_number", "status", "start_date", "end_date", "work_hours",
]

_LAYOUT = dict(template="plotly_white", margin=dict(l=6, r=6, t=30, b=10))


def tasks_to_df(tasks: Iterable[Task]) -> pd.DataFrame:
    rows = [t.model_dump(include=set(TABLE_COLUMNS) | {"id"}) for t in tasks]
    if not rows:
        return pd.DataFrame(columns=["id"] + TABLE_COLUMNS)
    return pd.DataFrame(rows, columns=["id"] + TABLE_COLUMNS)


def status_pie(tasks: Iterable[Task], title: str = "") -> go.Figure:
    data = aggregate_by_status(tasks)
    names = list(data)
    fig = go.Figure(
        data=go.Pie(
            labels=names,
            values=[data[n] for n in names],
            marker=dict(colors=[STATUS_COLORS.get(n, "#8884d8") for n in names]),
            textinfo="label+percent",
            sort=False,
        )
    )
    fig.update_layout(title=title, height=320, **_LAYOUT)
    return fig


def owner_bar(tasks: Iterable[Task], title: str = "") -> go.Figure:
    data = aggregate_by_owner(tasks)
    df = pd.DataFrame({"owner": list(data), "tasks": list(data.values())})
    fig = px.bar(df, x="tasks", y="owner", orientation="h", title=title)
    fig.update_traces(marker_color="#4f46e5")
    fig.update_layout(height=320, yaxis=dict(autorange="reversed"), xaxis=dict(dtick=1), **_LAYOUT)
    return fig


def work_hours_stacked_bar(
    tasks: Iterable[Task],
    device_types: Optional[Sequence[str]] = None,
    title: str = "",
) -> go.Figure:
    grouped = aggregate_work_hours_by_owner_and_device(tasks, device_types)
    owners = list(grouped)
    devices: List[str] = list(device_types) if device_types is not None else sorted(
        {d for per_owner in grouped.values() for d in per_owner}
    )
    fig = go.Figure()
    for idx, device in enumerate(devices):
        values = [grouped[o].get(device, 0.0) for o in owners]
        if not any(values):
            continue
        fig.add_bar(x=owners, y=values, name=device, marker_color=DEVICE_COLORS[idx % len(DEVICE_COLORS)])
    fig.update_layout(barmode="stack", title=title, height=420, yaxis_title="Hours", **_LAYOUT)
    return fig


def work_hours_pie(
    tasks: Iterable[Task],
    dimension: str,
    keys: Optional[Sequence[str]] = None,
    title: str = "",
) -> go.Figure:
    data = aggregate_work_hours_by_dimension(tasks, dimension, keys)
    names = list(data)
    fig = go.Figure(
        data=go.Pie(
            labels=names,
            values=[data[n] for n in names],
            marker=dict(colors=[PIE_COLORS[i % len(PIE_COLORS)] for i in range(len(names))]),
            texttemplate="%{label}: %{value}h",
            hovertemplate="%{label}: %{value} hours<extra></extra>",
            sort=False,
        )
    )
    fig.update_layout(title=title, height=320, **_LAYOUT)
    return fig
