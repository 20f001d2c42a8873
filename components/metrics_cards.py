"""Reusable KPI metric card widgets."""

import streamlit as st

from models.allocation import AllocationResult


def render_metric_row(metrics: list[dict]):
    """Render a row of metric cards.

    Each metric dict should have: label, value, and optionally delta, delta_color.
    """
    cols = st.columns(len(metrics))
    for col, m in zip(cols, metrics):
        with col:
            delta = m.get("delta")
            delta_color = m.get("delta_color", "normal")
            st.metric(
                label=m["label"],
                value=m["value"],
                delta=delta,
                delta_color=delta_color,
            )


def result_metrics(result: AllocationResult) -> list[dict]:
    """Headline KPIs for one assignment result."""
    unassigned = result.total_quantity - result.total_assigned
    return [
        {"label": "Units Assigned", "value": f"{result.total_assigned:,}"},
        {"label": "Units Available", "value": f"{result.total_quantity:,}"},
        {"label": "Agents", "value": len(result.agents)},
        {"label": "Excluded Agents", "value": len(result.excluded_agent_ids)},
        {
            "label": "Unassigned Units",
            "value": f"{unassigned:,}",
            "delta": None if unassigned == 0 else -unassigned,
            "delta_color": "inverse",
        },
    ]


def render_alert_card(message: str, level: str = "warning"):
    """Render an alert card with appropriate styling."""
    if level == "error":
        st.error(message, icon="🔴")
    elif level == "warning":
        st.warning(message, icon="🟡")
    else:
        st.info(message, icon="🔵")
