import streamlit as st

from nre_tracker.aggregations import total_work_hours
from nre_tracker.charts import owner_bar, status_pie, tasks_to_df, work_hours_pie, work_hours_stacked_bar
from nre_tracker.filters import overdue_days
from nre_tracker.i18n import labels
from nre_tracker.models import TaskStatus
from nre_tracker.theme import set_theme
from nre_tracker.ui import language_toggle, load_lists, load_tasks

set_theme(page_title="NRE Dashboard")
lang = language_toggle()
t = labels(lang)

st.title(t["dashboard"])

tasks = load_tasks(lang)
lists = load_lists(lang)

k1, k2, k3, k4 = st.columns(4)
k1.metric(t["kpiTasks"], len(tasks))
k2.metric(TaskStatus.IN_PROGRESS.value, sum(1 for x in tasks if x.status == TaskStatus.IN_PROGRESS.value))
k3.metric(t["kpiOverdue"], sum(1 for x in tasks if overdue_days(x.end_date, x.status) > 0))
k4.metric(t["workHours"], f"{total_work_hours(tasks):g}")

if not tasks:
    st.info(t["noTasks"])
    st.stop()

c1, c2 = st.columns(2)
with c1:
    st.plotly_chart(status_pie(tasks, title=t["statusDist"]), use_container_width=True)
with c2:
    st.plotly_chart(owner_bar(tasks, title=t["ownerDist"]), use_container_width=True)

st.plotly_chart(
    work_hours_stacked_bar(tasks, lists.device_types, title=t["workHoursByOwnerDevice"]),
    use_container_width=True,
)

dimension = st.radio(
    t["workHoursDist"],
    options=["taskType", "deviceType"],
    format_func=lambda d: t["byTaskType"] if d == "taskType" else t["byDeviceType"],
    horizontal=True,
)
keys = lists.task_types if dimension == "taskType" else lists.device_types
st.plotly_chart(work_hours_pie(tasks, dimension, keys, title=t["workHoursDist"]), use_container_width=True)

with st.expander(t["data"]):
    st.dataframe(tasks_to_df(tasks), use_container_width=True, hide_index=True)
