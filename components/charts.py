"""Plotly chart builders for the Phone Inventory Assignment console."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Dict, List

from models.allocation import AllocationResult, GroupSummary, ModelSummary
from models.scores import WeightedAgent
from config.defaults import FACTOR_KEYS, FACTOR_LABELS


def units_by_agent_bar(result: AllocationResult, names: Dict[str, str], title: str = "Units by Agent") -> go.Figure:
    """Stacked bar of assigned units per agent, one segment per model."""
    rows = [
        {"Agent": names.get(agent_id, agent_id), "Model": model_name, "Units": alloc.quantity}
        for agent_id, per_model in result.agents.items()
        for model_name, alloc in per_model.items()
    ]
    df = pd.DataFrame(rows, columns=["Agent", "Model", "Units"])
    fig = px.bar(
        df, x="Agent", y="Units", color="Model",
        barmode="stack",
        title=title,
    )
    fig.update_layout(legend_title_text="", height=400)
    return fig


def group_share_donut(groups: Dict[str, GroupSummary], title: str) -> go.Figure:
    """Donut of total units per office or department."""
    labels = list(groups)
    values = [g.total_quantity for g in groups.values()]
    total = sum(values)
    fig = go.Figure(data=[go.Pie(
        labels=labels,
        values=values,
        hole=0.6,
        textinfo="percent+label",
    )])
    fig.update_layout(
        title=title,
        height=350,
        showlegend=True,
        annotations=[dict(text=f"{total:,}", x=0.5, y=0.5, font_size=16, showarrow=False)],
    )
    return fig


def color_heatmap(summary: ModelSummary, names: Dict[str, str]) -> go.Figure:
    """Heatmap of units per agent per color for one model."""
    colors = list(summary.colors)
    agent_ids = list(summary.assignments)
    matrix = [[summary.colors[c].get(aid, 0) for c in colors] for aid in agent_ids]
    y_labels = [names.get(aid, aid) for aid in agent_ids]

    fig = go.Figure(data=go.Heatmap(
        z=matrix,
        x=colors,
        y=y_labels,
        colorscale="YlOrRd",
        text=matrix,
        texttemplate="%{text}",
        hovertemplate="Agent: %{y}<br>Color: %{x}<br>Units: %{z}<extra></extra>",
    ))
    fig.update_layout(
        title=f"{summary.model_name}: Units by Color",
        xaxis_title="Color",
        yaxis_title="Agent",
        height=max(350, len(agent_ids) * 30),
    )
    return fig


def factor_breakdown_bar(weighted: List[WeightedAgent], title: str = "Relative Factors") -> go.Figure:
    """Grouped bar of the four relative factors per agent for one model color."""
    fig = go.Figure()
    palette = ["#4A90D9", "#E8734A", "#F5C542", "#5CB85C"]
    for i, key in enumerate(FACTOR_KEYS):
        fig.add_trace(go.Bar(
            name=FACTOR_LABELS[key],
            x=[w.agent.display_name for w in weighted],
            y=[w.relative.get(key, 0.0) for w in weighted],
            marker_color=palette[i % len(palette)],
        ))
    fig.update_layout(
        barmode="group",
        title=title,
        yaxis_title="Score (0-100)",
        height=400,
    )
    return fig


def comparison_bar(rows: List[dict], label: str) -> go.Figure:
    """Before/After grouped bar from ``engine.history.compare_results`` rows."""
    df = pd.DataFrame(rows)
    fig = go.Figure()
    for col, color in (("Before", "#4A90D9"), ("After", "#E8734A")):
        fig.add_trace(go.Bar(name=col, x=df[label], y=df[col], marker_color=color))
    fig.update_layout(
        barmode="group",
        title="Assignment Comparison",
        xaxis_title=label,
        yaxis_title="Units",
        height=400,
    )
    return fig
