"""Excel export of an assignment result."""

import io
from typing import Dict, List, Optional, Union

import pandas as pd

from models.agent import Agent
from models.allocation import AllocationResult, GroupSummary
from models.settings import AssignmentSettings
from config.defaults import FACTOR_KEYS, FACTOR_LABELS


def agent_rows(result: AllocationResult, agents: Optional[List[Agent]] = None) -> List[dict]:
    """One row per (agent, model) with per-color units and scores."""
    names = {a.agent_id: a for a in agents or []}
    rows = []
    for agent_id, per_model in result.agents.items():
        agent = names.get(agent_id)
        for model_name, alloc in per_model.items():
            row = {
                "Agent ID": agent_id,
                "Agent Name": agent.display_name if agent else agent_id,
                "Office": agent.office if agent else "",
                "Department": agent.department if agent else "",
                "Model": model_name,
                "Quantity": alloc.quantity,
                "Average Score": alloc.average_score,
            }
            for color, qty in alloc.color_quantities.items():
                row[f"{color} Qty"] = qty
            rows.append(row)
    return rows


def filter_agent_rows(df: pd.DataFrame, search: str) -> pd.DataFrame:
    """Rows whose agent name contains ``search`` as plain text, ignoring case."""
    if not search or df.empty:
        return df
    return df[df["Agent Name"].str.contains(search, case=False, regex=False)]


def group_rows(groups: Dict[str, GroupSummary], label: str) -> List[dict]:
    return [
        {
            label: name,
            "Agents": g.agent_count,
            "Total Quantity": g.total_quantity,
            "Members": ", ".join(a.display_name for a in g.agents),
        }
        for name, g in groups.items()
    ]


def model_color_rows(result: AllocationResult) -> List[dict]:
    """One row per (model, color, agent)."""
    rows = []
    for model_name, summary in result.models.items():
        for color, per_agent in summary.colors.items():
            for agent_id, qty in per_agent.items():
                rows.append({"Model": model_name, "Color": color, "Agent ID": agent_id, "Quantity": qty})
    return rows


def settings_rows(settings: AssignmentSettings) -> List[dict]:
    shares = settings.ratios.shares()
    return [
        {
            "Factor": FACTOR_LABELS[key],
            "Ratio": getattr(settings.ratios, key),
            "Share (%)": round(shares[key], 2),
        }
        for key in FACTOR_KEYS
    ]


def export_assignment_excel(
    result: AllocationResult,
    settings: AssignmentSettings,
    target: Union[str, io.BytesIO, None] = None,
    agents: Optional[List[Agent]] = None,
):
    """Write the result to an .xlsx workbook.

    ``target`` may be a path or a writable buffer. With no target, the
    workbook is written to memory and its bytes are returned.
    """
    buffer = io.BytesIO() if target is None else target
    sheets = {
        "Agents": pd.DataFrame(agent_rows(result, agents)),
        "Offices": pd.DataFrame(group_rows(result.offices, "Office")),
        "Departments": pd.DataFrame(group_rows(result.departments, "Department")),
        "Models": pd.DataFrame(
            model_color_rows(result), columns=["Model", "Color", "Agent ID", "Quantity"]
        ),
        "Settings": pd.DataFrame(settings_rows(settings)),
    }
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for sheet, df in sheets.items():
            df.to_excel(writer, sheet_name=sheet, index=False)

    if target is None:
        return buffer.getvalue()
    return target
