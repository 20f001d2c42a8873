"""Phone Inventory Assignment console — Streamlit entry point."""

import logging
import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from components.sidebar import render_sidebar
from data.session_store import initialize_session_state
from tabs import (
    tab_data_settings,
    tab_assignment,
    tab_history,
)
from config.defaults import LOG_FORMAT, LOG_LEVEL

logging.basicConfig(level=os.environ.get("LOG_LEVEL", LOG_LEVEL), format=LOG_FORMAT)


def main():
    st.set_page_config(
        page_title="Phone Inventory Assignment",
        page_icon="📱",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2, tab3 = st.tabs([
        "⚙️ Data & Settings",
        "📦 Assignment",
        "🕘 History",
    ])

    with tab1:
        tab_data_settings.render(sidebar_state)
    with tab2:
        tab_assignment.render(sidebar_state)
    with tab3:
        tab_history.render(sidebar_state)


if __name__ == "__main__":
    main()
