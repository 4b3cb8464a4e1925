import os

import streamlit as st
from streamlit.errors import StreamlitAPIException

THEME_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "custom_theme.css")


def set_theme(
    page_title: str = "NRE Task Tracker",
    page_icon: str = "📋",
    layout: str = "wide",
    initial_sidebar_state: str = "expanded",
    theme_file: str = THEME_FILE,
) -> bool:
    """Configure the Streamlit page and inject the shared CSS.

    Call once at the top of each page. ``set_page_config`` may only run once
    per page; later calls are ignored but the CSS is injected every time.
    Returns False when the CSS file is missing.
    """
    try:
        st.set_page_config(
            page_title=page_title,
            page_icon=page_icon,
            layout=layout,
            initial_sidebar_state=initial_sidebar_state,
        )
    except StreamlitAPIException:
        pass

    try:
        with open(theme_file, "r", encoding="utf-8") as f:
            css = f.read()
    except FileNotFoundError:
        st.error(f"Theme file not found at {theme_file}.")
        return False
    st.markdown(f"<style>{css}</style>", unsafe_allow_html=True)
    return True
