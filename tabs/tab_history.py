"""Tab 3: History — recent assignment runs, usage stats and run-to-run comparison."""

import pandas as pd
import streamlit as st

from data.session_store import get_history, set_last_entry
from engine.history import compare_results, compare_settings
from components.metrics_cards import render_metric_row
from components.tables import render_status_table, render_comparison_table
from components.charts import comparison_bar
from config.defaults import COMPARISON_TYPES, FACTOR_LABELS

TREND_LABELS = {"increasing": "▲ Increasing", "decreasing": "▼ Decreasing", "stable": "● Stable"}


def render(sidebar_state):
    """Render the History tab."""
    st.header("Assignment History")

    history = get_history()
    if not len(history):
        st.info("No assignments recorded yet. Run one from the Assignment tab.")
        return

    # --- Stats ---
    stats = history.stats()
    render_metric_row([
        {"label": "Assignments", "value": stats["total_assignments"]},
        {"label": "Average Assigned", "value": f"{stats['average_assigned']:,}"},
        {"label": "Recent Trend", "value": TREND_LABELS[stats["recent_trend"]]},
    ])
    if stats["most_used_ratios"]:
        st.caption("Most used ratios: " + ", ".join(
            f"{FACTOR_LABELS[k]} {v:g}" for k, v in stats["most_used_ratios"].items()
        ))

    # --- Entries ---
    entries = history.entries()
    rows = [{
        "ID": e.entry_id,
        "Time": e.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
        "Agents": e.metadata.get("total_agents", len(e.agents)),
        "Models": e.metadata.get("total_models", len(e.result.models)),
        "Assigned": e.total_assigned,
        "Available": e.metadata.get("total_quantity", e.result.total_quantity),
    } for e in entries]
    st.dataframe(pd.DataFrame(rows), use_container_width=True)

    entry_ids = [e.entry_id for e in entries]
    col1, col2, col3 = st.columns(3)
    with col1:
        selected = st.selectbox("Entry", entry_ids, key="history_entry")
    with col2:
        if st.button("Load as Current Result", key="btn_history_load"):
            set_last_entry(history.get(selected))
            st.success(f"Loaded {selected}.")
    with col3:
        if st.button("Delete Entry", key="btn_history_delete"):
            history.delete(selected)
            st.rerun()

    if st.button("Clear History", key="btn_history_clear"):
        history.clear()
        st.rerun()

    if len(entries) < 2:
        return

    # --- Compare ---
    st.divider()
    st.subheader("Compare Two Runs")
    col1, col2, col3 = st.columns(3)
    with col1:
        before_id = st.selectbox("Before", entry_ids, index=1, key="compare_before")
    with col2:
        after_id = st.selectbox("After", entry_ids, index=0, key="compare_after")
    with col3:
        comparison_type = st.selectbox("View", COMPARISON_TYPES, key="compare_type")

    before, after = history.get(before_id), history.get(after_id)
    diff_rows = compare_results(before.result, after.result, comparison_type)
    diff_df = pd.DataFrame(diff_rows)

    if comparison_type == "overall":
        render_comparison_table(diff_df)
    else:
        render_status_table(diff_df)
        label = diff_df.columns[0]
        st.plotly_chart(comparison_bar(diff_rows, label), use_container_width=True)

    st.caption("Ratio changes")
    render_comparison_table(pd.DataFrame(compare_settings(before.settings, after.settings)))
