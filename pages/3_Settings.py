import streamlit as st

from nre_tracker.errors import ConnectivityError, ServiceError, TrackerError
from nre_tracker.i18n import labels
from nre_tracker.models import DropdownOptions
from nre_tracker.theme import set_theme
from nre_tracker.ui import connection_error_panel, get_service, language_toggle, load_lists, share_links

set_theme(page_title="NRE Settings")
lang = language_toggle()
t = labels(lang)
service = get_service()

st.title(t["settings"])

LIST_FIELDS = [
    ("owners", "owner"),
    ("device_types", "deviceType"),
    ("platforms", "platform"),
    ("android_versions", "androidVersion"),
    ("task_types", "taskType"),
]

lists = load_lists(lang)

st.subheader(t["dropdownOptions"])
tabs = st.tabs([t[label] for _field, label in LIST_FIELDS])
for tab, (field, label) in zip(tabs, LIST_FIELDS):
    with tab:
        current = list(getattr(lists, field))
        for idx, item in enumerate(current):
            c1, c2 = st.columns([5, 1])
            c1.write(item)
            if c2.button("✖", key=f"rm-{field}-{idx}"):
                updated = DropdownOptions(**{**lists.model_dump(), field: [x for x in current if x != item]})
                try:
                    service.save_lists(updated)
                except ConnectivityError as exc:
                    connection_error_panel(exc, lang)
                except TrackerError as exc:
                    st.error(f"{t['saveError']}: {exc}")
                else:
                    st.rerun()
        with st.form(f"add-{field}", clear_on_submit=True):
            new_item = st.text_input(f"+ {t[label]}", key=f"new-{field}")
            if st.form_submit_button(t["save"]) and new_item.strip():
                updated = DropdownOptions(**{**lists.model_dump(), field: current + [new_item.strip()]})
                try:
                    service.save_lists(updated)
                except ConnectivityError as exc:
                    connection_error_panel(exc, lang)
                except TrackerError as exc:
                    st.error(f"{t['saveError']}: {exc}")
                else:
                    st.rerun()

st.divider()
st.subheader(t["server"])
try:
    port = int(service.get_config().get("port", 0))
    info = service.network_info()
except ConnectivityError as exc:
    connection_error_panel(exc, lang)
    st.stop()
except TrackerError as exc:
    st.error(str(exc))
    st.stop()

with st.form("port-form"):
    new_port = st.number_input(t["port"], min_value=1, max_value=65535, value=port or 3001, step=1)
    if st.form_submit_button(t["save"]):
        try:
            service.update_config(int(new_port))
        except ServiceError as exc:
            st.error(str(exc))
        except ConnectivityError as exc:
            connection_error_panel(exc, lang)
        else:
            st.success(t["portSaved"])

ui_url, api_url = share_links(info)
st.markdown(f"{t['shareLink']}: [`{ui_url}`]({ui_url})")
st.caption(t["shareLinkHelp"])
st.caption(f"{t['apiAddress']}: `{api_url}`")
