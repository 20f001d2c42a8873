"""Global sidebar: data status, active ratio shares and score cache controls."""

import streamlit as st
from dataclasses import dataclass
from data.session_store import (
    get_agents, get_catalog, get_settings, get_score_cache, get_history, is_data_loaded,
)
from config.defaults import FACTOR_KEYS, FACTOR_LABELS


@dataclass
class SidebarState:
    data_loaded: bool
    agent_count: int
    model_count: int


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    with st.sidebar:
        st.title("Phone Inventory Assignment")
        st.divider()

        # Data status indicator
        loaded = is_data_loaded()
        agents = get_agents()
        catalog = get_catalog()
        if loaded:
            st.success("Data loaded")
            st.caption(f"Agents: {len(agents)}")
            st.caption(f"Models: {len(catalog)} ({sum(m.total_quantity for m in catalog):,} units)")
        else:
            st.warning("No data loaded. Go to the Data & Settings tab")

        st.divider()

        # Active ratio shares
        st.subheader("Ratio Shares")
        shares = get_settings().ratios.shares()
        for key in FACTOR_KEYS:
            st.caption(f"{FACTOR_LABELS[key]}: {shares[key]:.0f}%")

        st.divider()

        # Score cache
        stats = get_score_cache().stats()
        st.subheader("Score Cache")
        st.caption(f"Entries: {stats['size']}/{stats['max_size']}")
        st.caption(f"Hits: {stats['hits']}, Misses: {stats['misses']}")
        if st.button("Clear Cache", key="sidebar_clear_cache"):
            get_score_cache().clear()
            st.rerun()

        st.caption(f"Runs in history: {len(get_history())}")

    return SidebarState(
        data_loaded=loaded,
        agent_count=len(agents),
        model_count=len(catalog),
    )
