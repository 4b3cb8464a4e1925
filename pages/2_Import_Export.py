import streamlit as st

from nre_tracker.csv_codec import (
    encode_tasks_bytes,
    export_filename,
    import_csv,
    select_for_export,
    unique_years,
)
from nre_tracker.errors import ConnectivityError, CsvImportError
from nre_tracker.i18n import labels, tr
from nre_tracker.theme import set_theme
from nre_tracker.ui import connection_error_panel, get_service, language_toggle, load_tasks

set_theme(page_title="NRE Import / Export")
lang = language_toggle()
t = labels(lang)

st.title(t["importExport"])

tasks = load_tasks(lang)
tab_export, tab_import = st.tabs([t["exportTasks"], t["importTasks"]])

with tab_export:
    criterion = st.radio(
        t["exportCriteria"],
        options=["year", "owner"],
        format_func=lambda c: t["byYear"] if c == "year" else t["byOwner"],
        horizontal=True,
    )
    if criterion == "year":
        choices = unique_years(tasks)
        value = st.selectbox(t["selectYear"], options=choices, index=0 if choices else None)
    else:
        choices = sorted({x.owner for x in tasks if x.owner})
        value = st.selectbox(t["selectOwner"], options=choices, index=0 if choices else None)

    selected = select_for_export(tasks, criterion, value) if value else []
    st.caption(f"{len(selected)} / {len(tasks)}")
    st.download_button(
        f"⬇️ {t['export']}",
        data=encode_tasks_bytes(selected, lang),
        file_name=export_filename(value),
        mime="text/csv",
        disabled=not selected,
    )

with tab_import:
    uploaded = st.file_uploader(t["importTasks"], type=["csv"])
    if uploaded is not None and st.button(t["importTasks"], type="primary"):
        text = uploaded.getvalue().decode("utf-8-sig", errors="replace")
        try:
            with st.spinner(t["importTasks"]):
                result = import_csv(get_service(), text)
        except CsvImportError as exc:
            st.error(f"{t['importFailed']}: {exc}")
            if exc.created:
                st.warning(tr("importSuccess", lang, count=exc.created))
            if isinstance(exc.__cause__, ConnectivityError):
                connection_error_panel(exc.__cause__, lang)
        else:
            st.success(tr("importSuccess", lang, count=result.created))
            if result.skipped:
                st.caption(tr("skippedRows", lang, count=result.skipped))
