"""Streamlit helpers shared by the pages: service handle, language, task form."""
from __future__ import annotations

import html
import logging
from datetime import date
from typing import List, Optional, Tuple

import streamlit as st

from nre_tracker.config import TrackerConfig
from nre_tracker.errors import ConnectivityError, TrackerError
from nre_tracker.i18n import DEFAULT_LANGUAGE, LANGUAGES, labels, tr
from nre_tracker.logging_setup import setup_logging
from nre_tracker.models import STATUS_OPTIONS, DropdownOptions, NetworkInfo, Task, TaskFormData, TaskStatus
from nre_tracker.task_service import TaskService


logger = logging.getLogger(__name__)


@st.cache_resource
def get_config() -> TrackerConfig:
    config = TrackerConfig.from_env()
    setup_logging(config.log_level, config.log_dir)
    return config


@st.cache_resource
def get_service() -> TaskService:
    config = get_config()
    return TaskService(config.resolve_api_url(), timeout_seconds=config.http_timeout_seconds)


def current_lang() -> str:
    if "lang" not in st.session_state:
        st.session_state.lang = DEFAULT_LANGUAGE
    return st.session_state.lang


def language_toggle() -> str:
    lang = current_lang()
    choice = st.sidebar.radio(
        "Language / 语言",
        options=list(LANGUAGES),
        index=list(LANGUAGES).index(lang),
        format_func=lambda code: "中文" if code == "zh" else "English",
        horizontal=True,
        key="lang-toggle",
    )
    st.session_state.lang = choice
    return choice


def connection_error_panel(exc: Exception, lang: str) -> None:
    """Persistent error panel with a manual retry; stops the page."""
    st.error(f"**{tr('connectionError', lang)}**\n\n{exc}")
    if st.button(tr("retryConnection", lang), key="retry-connection"):
        st.rerun()
    st.stop()


def load_tasks(lang: str) -> List[Task]:
    try:
        return get_service().list_all()
    except ConnectivityError as exc:
        connection_error_panel(exc, lang)
    except TrackerError as exc:
        st.error(str(exc))
        st.stop()
    return []


def load_lists(lang: str) -> DropdownOptions:
    try:
        return get_service().get_lists()
    except ConnectivityError as exc:
        connection_error_panel(exc, lang)
    except TrackerError as exc:
        logger.warning("Falling back to default dropdown lists: %s", exc)
    return DropdownOptions()


def status_badge(status: str) -> str:
    css = "nre-status-" + status.replace(" ", "-")
    return f'<span class="nre-status {css}">{html.escape(status)}</span>'


def _select(label: str, options: List[str], current: str, key: str) -> str:
    opts = list(options)
    # A stored value that was since removed from the option lists stays selectable.
    if current and current not in opts:
        opts.append(current)
    index = opts.index(current) if current in opts else 0
    return st.selectbox(label, opts or [""], index=index if opts else 0, key=key)


def _as_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def task_form(
    lists: DropdownOptions,
    lang: str,
    *,
    initial: Optional[TaskFormData] = None,
    key: str = "task-form",
) -> Optional[TaskFormData]:
    """Render the create/edit form; returns the submitted data or None."""
    t = labels(lang)
    data = initial or TaskFormData(
        owner=lists.owners[0] if lists.owners else "",
        device_type=lists.device_types[0] if lists.device_types else "",
        platform=lists.platforms[0] if lists.platforms else "",
        android_version=lists.android_versions[0] if lists.android_versions else "",
        task_type=lists.task_types[0] if lists.task_types else "",
        start_date=date.today().isoformat(),
        status=TaskStatus.PENDING,
    )
    with st.form(key, clear_on_submit=initial is None):
        name = st.text_input(t["taskName"], value=data.name, placeholder="e.g. Project Alpha BSP Bringup")
        c1, c2 = st.columns(2)
        with c1:
            owner = _select(t["owner"], lists.owners, data.owner, f"{key}-owner")
            device_type = _select(t["deviceType"], lists.device_types, data.device_type, f"{key}-device")
            platform = _select(t["platform"], lists.platforms, data.platform, f"{key}-platform")
            android_version = _select(t["androidVersion"], lists.android_versions, data.android_version, f"{key}-android")
            start = st.date_input(t["startDate"], value=_as_date(data.start_date), key=f"{key}-start")
        with c2:
            task_type = _select(t["taskType"], lists.task_types, data.task_type, f"{key}-type")
            status = st.selectbox(
                t["status"], STATUS_OPTIONS,
                index=STATUS_OPTIONS.index(data.status) if data.status in STATUS_OPTIONS else 0,
                key=f"{key}-status",
            )
            nre_number = st.text_input(t["nreNumber"], value=data.nre_number, key=f"{key}-nre")
            work_hours = st.number_input(t["workHours"], min_value=0.0, value=float(data.work_hours), step=0.5, key=f"{key}-hours")
            end = st.date_input(t["endDate"], value=_as_date(data.end_date), key=f"{key}-end")
        content = st.text_area(t["content"], value=data.content, height=160, key=f"{key}-content")
        submitted = st.form_submit_button(t["save"])

    if not submitted:
        return None
    if not name.strip():
        st.warning(f"{t['taskName']} *")
        return None
    return TaskFormData(
        name=name.strip(),
        owner=owner,
        device_type=device_type,
        platform=platform,
        android_version=android_version,
        nre_number=nre_number.strip(),
        status=status,
        task_type=task_type,
        start_date=start.isoformat() if start else "",
        end_date=end.isoformat() if end else "",
        work_hours=work_hours,
        content=content,
    )


def share_links(info: NetworkInfo) -> Tuple[str, str]:
    """(UI url, API url) on the LAN address; the UI is served by Streamlit's own port."""
    ui_port = st.get_option("server.port")
    return f"http://{info.ip}:{ui_port}", f"http://{info.ip}:{info.port}"
