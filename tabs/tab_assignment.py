"""Tab 2: Assignment — run the allocation and inspect it by agent, group, model and color."""

import pandas as pd
import streamlit as st

from data.exporter import agent_rows, group_rows, filter_agent_rows, export_assignment_excel
from data.sources import CollaboratorError, fetch_snapshot
from data.session_store import (
    get_agents, get_catalog, get_settings, get_snapshot_source, get_score_cache,
    get_rule_config, get_history, get_last_entry, set_last_entry, is_data_loaded,
)
from engine.assignment_engine import run_assignment, entry_breakdown
from engine.eligibility import resolve_eligible_agents
from engine.explainer import explain_agent_score
from components.metrics_cards import render_metric_row, result_metrics, render_alert_card
from components.tables import render_styled_table
from components.charts import units_by_agent_bar, group_share_donut, color_heatmap, factor_breakdown_bar
from config.defaults import FETCH_MAX_WORKERS


def _run():
    agents = get_agents()
    settings = get_settings()
    catalog = get_catalog()
    config = get_rule_config()

    try:
        snapshot = fetch_snapshot(
            get_snapshot_source(),
            [m.model_name for m in catalog],
            max_workers=config.get("fetch_max_workers", FETCH_MAX_WORKERS),
        )
    except CollaboratorError as e:
        st.error(f"Data source failed, no assignment was made: {e}")
        return

    result = run_assignment(agents, settings, catalog, snapshot, cache=get_score_cache(), rule_config=config)
    entry = get_history().record(result, settings, agents, snapshot=snapshot, catalog=catalog)
    set_last_entry(entry)
    st.success(f"Assigned {result.total_assigned:,} of {result.total_quantity:,} units ({entry.entry_id})")


def _render_explanations(entry, names):
    st.subheader("Score Explanations")
    result = entry.result
    catalog = entry.catalog
    if entry.snapshot is None or not catalog or not result.agents:
        st.caption("Run an assignment to see explanations.")
        return

    col1, col2, col3 = st.columns(3)
    with col1:
        model_name = st.selectbox("Model", [m.model_name for m in catalog], key="explain_model")
    model = next(m for m in catalog if m.model_name == model_name)
    with col2:
        color_name = st.selectbox("Color", model.color_names, key="explain_color")
    with col3:
        agent_id = st.selectbox(
            "Agent", list(result.agents),
            format_func=lambda x: names.get(x, x),
            key="explain_agent",
        )

    weighted = entry_breakdown(
        entry, model_name, color_name,
        cache=get_score_cache(), rule_config=get_rule_config(),
    )
    st.plotly_chart(
        factor_breakdown_bar(weighted, title=f"{model_name} / {color_name}: Relative Factors"),
        use_container_width=True,
    )

    match = next((w for w in weighted if w.agent_id == agent_id), None)
    if match is None:
        st.info("This agent was not scored for the selected model.")
        return
    quantity = next(c.quantity for c in model.colors if c.color_name == color_name)
    allocated = result.models[model_name].colors.get(color_name, {}).get(agent_id, 0)
    for step in explain_agent_score(match, entry.settings.ratios, allocated, quantity):
        st.markdown(f"- {step}")


def render(sidebar_state):
    """Render the Assignment tab."""
    st.header("Assignment")

    if not is_data_loaded():
        st.info("No data loaded. Please upload data in the Data & Settings tab.")
        return

    eligible = resolve_eligible_agents(get_agents(), get_settings().targets)
    st.caption(f"{len(eligible)} eligible agent(s) under the current targets.")

    if st.button("Run Assignment", type="primary", key="btn_run_assignment"):
        _run()

    entry = get_last_entry()
    if entry is None:
        st.info("No assignment yet. Press Run Assignment.")
        return

    result = entry.result
    agents = entry.agents
    st.caption(f"Showing {entry.entry_id}, run at {entry.timestamp:%Y-%m-%d %H:%M:%S}.")
    names = {a.agent_id: a.display_name for a in agents}

    # --- KPI Cards ---
    render_metric_row(result_metrics(result))
    if result.excluded_agent_ids:
        render_alert_card(
            "Excluded (no stores): " + ", ".join(names.get(a, a) for a in result.excluded_agent_ids),
            level="warning",
        )
    if not result.agents:
        render_alert_card("No eligible agent has a store. Nothing was assigned.", level="error")
        return

    st.divider()

    # --- Agent View ---
    agent_df = pd.DataFrame(agent_rows(result, agents))
    search = st.text_input("Search Agent", "", key="assign_search")
    agent_df = filter_agent_rows(agent_df, search)
    render_styled_table(agent_df, title="Assignments by Agent")
    st.plotly_chart(units_by_agent_bar(result, names), use_container_width=True)

    # --- Office / Department ---
    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(group_share_donut(result.offices, "Units by Office"), use_container_width=True)
        st.dataframe(pd.DataFrame(group_rows(result.offices, "Office")), use_container_width=True)
    with col2:
        st.plotly_chart(group_share_donut(result.departments, "Units by Department"), use_container_width=True)
        st.dataframe(pd.DataFrame(group_rows(result.departments, "Department")), use_container_width=True)

    # --- Model / Color ---
    st.subheader("Models")
    for model_name, summary in result.models.items():
        with st.expander(f"{model_name}: {summary.assigned_quantity}/{summary.total_quantity} units"):
            st.plotly_chart(color_heatmap(summary, names), use_container_width=True)

    st.divider()
    _render_explanations(entry, names)

    st.divider()
    st.download_button(
        "Export Assignment (Excel)",
        export_assignment_excel(result, entry.settings, agents=agents),
        "assignment.xlsx",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
    csv = agent_df.to_csv(index=False)
    st.download_button("Export Agent View (CSV)", csv, "assignment_agents.csv", "text/csv")
