import html

import streamlit as st

from nre_tracker.errors import ConnectivityError, TrackerError
from nre_tracker.filters import TaskFilter, filter_tasks, overdue_days
from nre_tracker.i18n import labels, tr
from nre_tracker.models import STATUS_OPTIONS, Task
from nre_tracker.theme import set_theme
from nre_tracker.ui import (
    connection_error_panel,
    get_service,
    language_toggle,
    load_lists,
    load_tasks,
    status_badge,
    task_form,
)

set_theme()
lang = language_toggle()
t = labels(lang)
service = get_service()

st.title(t["appTitle"])

for key, default in (("editing_id", None), ("confirm_delete_id", None), ("show_new_form", False)):
    if key not in st.session_state:
        st.session_state[key] = default

tasks = load_tasks(lang)
lists = load_lists(lang)


def _run(action, *args) -> bool:
    try:
        action(*args)
        return True
    except ConnectivityError as exc:
        connection_error_panel(exc, lang)
    except TrackerError as exc:
        st.error(f"{t['saveError']}: {exc}")
    return False


# Filter bar
st.markdown('<div class="nre-filters-bar">', unsafe_allow_html=True)
fc1, fc2, fc3, fc4 = st.columns([2.2, 1.2, 1.6, 1.6])
with fc1:
    search = st.text_input(t["searchPlaceholder"], key="flt-search", label_visibility="collapsed",
                           placeholder=t["searchPlaceholder"])
with fc2:
    owner = st.selectbox(t["owner"], options=[""] + lists.owners, key="flt-owner",
                         format_func=lambda o: o or t["allOwners"])
with fc3:
    devices = st.multiselect(t["deviceType"], options=lists.device_types, key="flt-devices",
                             placeholder=t["allDevices"])
with fc4:
    statuses = st.multiselect(t["status"], options=STATUS_OPTIONS, key="flt-statuses",
                              placeholder=t["allStatuses"])
st.markdown("</div>", unsafe_allow_html=True)

visible = filter_tasks(tasks, TaskFilter.from_selection(search, owner, devices, statuses))

hc1, hc2 = st.columns([4, 1])
with hc1:
    st.caption(f"{len(visible)} / {len(tasks)}")
with hc2:
    if st.button(f"➕ {t['newTask']}", use_container_width=True):
        st.session_state.show_new_form = not st.session_state.show_new_form
        st.session_state.editing_id = None

if st.session_state.show_new_form:
    st.subheader(t["newTask"])
    submitted = task_form(lists, lang, key="new-task")
    if submitted is not None and _run(service.create, submitted):
        st.session_state.show_new_form = False
        st.rerun()


def _render_task(task: Task) -> None:
    late = overdue_days(task.end_date, task.status)
    header = f"{task.name}  ·  {task.owner}  ·  {task.status}"
    if late:
        header += f"  ·  ⚠ {tr('overdue', lang, days=late)}"
    with st.expander(header, expanded=st.session_state.editing_id == task.id):
        if st.session_state.editing_id == task.id:
            updated = task_form(lists, lang, initial=task.form_data(), key=f"edit-{task.id}")
            if st.button(t["cancel"], key=f"cancel-{task.id}"):
                st.session_state.editing_id = None
                st.rerun()
            if updated is not None:
                merged = Task.from_form(updated, task_id=task.id, created_at=task.created_at)
                if _run(service.update, merged):
                    st.session_state.editing_id = None
                    st.rerun()
            return

        badges = status_badge(task.status)
        if task.nre_number:
            badges += f' <span class="nre-nre-number">{html.escape(task.nre_number)}</span>'
        if late:
            badges += f' <span class="nre-overdue">{html.escape(tr("overdue", lang, days=late))}</span>'
        st.markdown(badges, unsafe_allow_html=True)

        c1, c2, c3 = st.columns(3)
        c1.markdown(f"**{t['taskType']}:** {task.task_type}  \n**{t['deviceType']}:** {task.device_type}")
        c2.markdown(f"**{t['platform']}:** {task.platform}  \n**{t['androidVersion']}:** {task.android_version}")
        c3.markdown(
            f"**{t['startDate']}:** {task.start_date or '-'}  \n**{t['endDate']}:** {task.end_date or '-'}  \n"
            f"**{t['workHours']}:** {task.work_hours:g}"
        )
        if task.content:
            st.markdown(task.content)

        b1, b2, _ = st.columns([1, 1, 4])
        if b1.button(f"✏️ {t['editTask']}", key=f"edit-btn-{task.id}"):
            st.session_state.editing_id = task.id
            st.session_state.show_new_form = False
            st.rerun()
        if b2.button(f"🗑️ {t['delete']}", key=f"del-btn-{task.id}"):
            st.session_state.confirm_delete_id = task.id

        if st.session_state.confirm_delete_id == task.id:
            st.warning(t["confirmDelete"])
            y, n, _ = st.columns([1, 1, 4])
            if y.button(t["delete"], key=f"del-yes-{task.id}", type="primary"):
                if _run(service.delete, task.id):
                    st.session_state.confirm_delete_id = None
                    st.rerun()
            if n.button(t["cancel"], key=f"del-no-{task.id}"):
                st.session_state.confirm_delete_id = None
                st.rerun()


if not visible:
    st.info(t["noTasks"])
for task in visible:
    _render_task(task)
