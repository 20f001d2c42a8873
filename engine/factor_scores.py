"""Raw per-agent indicators for one model (or one model color)."""

from typing import Dict, List, Optional, Set

from models.agent import Agent
from models.catalog import PhoneModel
from models.records import ActivityRecord, InventoryRow
from models.scores import FactorScore
from models.snapshot import DataSnapshot
from engine.eligibility import agent_store_names
from config.defaults import (
    NEUTRAL_SCORE, ZERO_DENOMINATOR_RESULT, NORMAL_INVENTORY_STATUSES,
)

_NORMAL_STATUSES = {s.casefold() for s in NORMAL_INVENTORY_STATUSES}


def _same(a: Optional[str], b: Optional[str]) -> bool:
    return str(a or "").strip().casefold() == str(b or "").strip().casefold()


def _matches(model_name: str, color_name: Optional[str], row_model: str, row_color: Optional[str]) -> bool:
    if not _same(model_name, row_model):
        return False
    return color_name is None or _same(color_name, row_color)


def compute_turnover_rate(sales_volume: float, remaining_inventory: float) -> float:
    """sales / (inventory + sales) * 100, or the zero-denominator result."""
    denominator = remaining_inventory + sales_volume
    if denominator <= 0:
        return ZERO_DENOMINATOR_RESULT
    return sales_volume / denominator * 100


def neutral_score(agent_id: str, model_name: str, color_name: Optional[str], store_count: int) -> FactorScore:
    """Score used when an agent has no activity and no inventory for the model/color."""
    return FactorScore(
        agent_id=agent_id,
        model_name=model_name,
        color_name=color_name,
        turnover_rate=NEUTRAL_SCORE,
        store_count=store_count,
        sales_volume=NEUTRAL_SCORE,
        remaining_inventory=0.0,
        inventory_score=NEUTRAL_SCORE,
        is_neutral=True,
    )


def compute_factor_score(
    agent: Agent,
    model_name: str,
    color_name: Optional[str],
    snapshot: DataSnapshot,
    store_names: Set[str],
) -> FactorScore:
    """Compute the four raw indicators for one (agent, model, color) triple."""
    activity: List[ActivityRecord] = [
        r for r in snapshot.activity_for(agent.match_keys)
        if _matches(model_name, color_name, r.model_name, r.color_name)
    ]
    inventory: List[InventoryRow] = [
        row for row in snapshot.inventory_for(store_names)
        if _matches(model_name, color_name, row.model_name, row.color_name)
    ]
    store_count = len(store_names)

    if not activity and not inventory:
        return neutral_score(agent.agent_id, model_name, color_name, store_count)

    sales_volume = float(sum(max(0, r.activation_count) for r in activity if not r.is_prepaid))
    remaining_inventory = float(sum(
        max(0, row.quantity) for row in inventory
        if str(row.status or "").strip().casefold() in _NORMAL_STATUSES
    ))

    return FactorScore(
        agent_id=agent.agent_id,
        model_name=model_name,
        color_name=color_name,
        turnover_rate=compute_turnover_rate(sales_volume, remaining_inventory),
        store_count=store_count,
        sales_volume=sales_volume,
        remaining_inventory=remaining_inventory,
        inventory_score=sales_volume - remaining_inventory,
    )


def compute_model_scores(
    agents: List[Agent],
    model: PhoneModel,
    snapshot: DataSnapshot,
    store_index: Dict[str, Set[str]],
) -> Dict[str, List[FactorScore]]:
    """Scores of every agent for every color of ``model``, keyed by color name."""
    store_names = {a.agent_id: agent_store_names(a, store_index) for a in agents}
    scores: Dict[str, List[FactorScore]] = {}
    for color in model.colors:
        scores[color.color_name] = [
            compute_factor_score(a, model.model_name, color.color_name, snapshot, store_names[a.agent_id])
            for a in agents
        ]
    return scores
