"""Roll per-color agent allocations up to agent, office, department and model totals."""

from typing import Dict, List

from models.agent import Agent
from models.allocation import AgentModelAllocation, AllocationResult, GroupSummary, ModelSummary
from models.catalog import PhoneModel
from models.scores import WeightedAgent
from config.defaults import UNASSIGNED_GROUP


def _group(agents: List[Agent], key_fn, totals: Dict[str, int]) -> Dict[str, GroupSummary]:
    groups: Dict[str, GroupSummary] = {}
    for agent in agents:
        name = key_fn(agent) or UNASSIGNED_GROUP
        if name not in groups:
            groups[name] = GroupSummary(name=name)
        summary = groups[name]
        summary.agent_count += 1
        summary.agents.append(agent)
        summary.total_quantity += totals.get(agent.agent_id, 0)
    return groups


def aggregate_assignment(
    agents: List[Agent],
    catalog: List[PhoneModel],
    color_allocations: Dict[str, Dict[str, Dict[str, int]]],
    color_weights: Dict[str, Dict[str, List[WeightedAgent]]],
    excluded_agent_ids: List[str] = None,
) -> AllocationResult:
    """Build the AllocationResult from model -> color -> agent_id -> units.

    Pure summation and grouping; no quantity is recomputed here, so every
    level inherits the exact per-color sums of the allocator.
    """
    result = AllocationResult(excluded_agent_ids=list(excluded_agent_ids or []))

    for model in catalog:
        per_color = color_allocations.get(model.model_name, {})
        scores_by_color = {
            color: {w.agent_id: w.composite_score for w in weighted}
            for color, weighted in color_weights.get(model.model_name, {}).items()
        }

        assignments: Dict[str, int] = {}
        for agent in agents:
            color_quantities = {
                color.color_name: per_color.get(color.color_name, {}).get(agent.agent_id, 0)
                for color in model.colors
            }
            color_scores = {
                color.color_name: round(scores_by_color.get(color.color_name, {}).get(agent.agent_id, 0.0), 2)
                for color in model.colors
            }
            quantity = sum(color_quantities.values())
            average = sum(color_scores.values()) / len(color_scores) if color_scores else 0.0

            result.agents.setdefault(agent.agent_id, {})[model.model_name] = AgentModelAllocation(
                agent_id=agent.agent_id,
                model_name=model.model_name,
                quantity=quantity,
                color_quantities=color_quantities,
                color_scores=color_scores,
                average_score=round(average, 2),
            )
            assignments[agent.agent_id] = quantity

        result.models[model.model_name] = ModelSummary(
            model_name=model.model_name,
            total_quantity=model.total_quantity,
            assigned_quantity=sum(assignments.values()),
            assignments=assignments,
            colors={color.color_name: dict(per_color.get(color.color_name, {})) for color in model.colors},
        )

    agent_totals = {agent.agent_id: result.agent_total(agent.agent_id) for agent in agents}
    result.offices = _group(agents, lambda a: a.office, agent_totals)
    result.departments = _group(agents, lambda a: a.department, agent_totals)
    return result
