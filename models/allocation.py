from dataclasses import dataclass, field
from typing import Dict, List

from models.agent import Agent


@dataclass
class AgentModelAllocation:
    agent_id: str
    model_name: str
    quantity: int
    color_quantities: Dict[str, int] = field(default_factory=dict)
    color_scores: Dict[str, float] = field(default_factory=dict)   # composite 0-100 per color
    average_score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "quantity": self.quantity,
            "colorQuantities": dict(self.color_quantities),
            "colorScores": dict(self.color_scores),
            "averageScore": self.average_score,
        }


@dataclass
class GroupSummary:
    """Totals for one office or department."""
    name: str
    agent_count: int = 0
    total_quantity: int = 0
    agents: List[Agent] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "agentCount": self.agent_count,
            "totalQuantity": self.total_quantity,
            "agents": [{"agentId": a.agent_id, "displayName": a.display_name} for a in self.agents],
        }


@dataclass
class ModelSummary:
    model_name: str
    total_quantity: int
    assigned_quantity: int
    assignments: Dict[str, int] = field(default_factory=dict)             # agent_id -> units
    colors: Dict[str, Dict[str, int]] = field(default_factory=dict)       # color -> agent_id -> units

    def to_dict(self) -> dict:
        return {
            "totalQuantity": self.total_quantity,
            "assignedQuantity": self.assigned_quantity,
            "assignments": dict(self.assignments),
            "colors": {color: dict(per_agent) for color, per_agent in self.colors.items()},
        }


@dataclass
class AllocationResult:
    agents: Dict[str, Dict[str, AgentModelAllocation]] = field(default_factory=dict)
    offices: Dict[str, GroupSummary] = field(default_factory=dict)
    departments: Dict[str, GroupSummary] = field(default_factory=dict)
    models: Dict[str, ModelSummary] = field(default_factory=dict)
    excluded_agent_ids: List[str] = field(default_factory=list)

    @property
    def total_assigned(self) -> int:
        return sum(m.assigned_quantity for m in self.models.values())

    @property
    def total_quantity(self) -> int:
        return sum(m.total_quantity for m in self.models.values())

    def agent_total(self, agent_id: str) -> int:
        return sum(a.quantity for a in self.agents.get(agent_id, {}).values())

    def to_dict(self) -> dict:
        """Serialize to the external allocation shape."""
        return {
            "agents": {
                agent_id: {model: alloc.to_dict() for model, alloc in per_model.items()}
                for agent_id, per_model in self.agents.items()
            },
            "offices": {name: g.to_dict() for name, g in self.offices.items()},
            "departments": {name: g.to_dict() for name, g in self.departments.items()},
            "models": {name: m.to_dict() for name, m in self.models.items()},
        }
