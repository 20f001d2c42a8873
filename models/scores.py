from dataclasses import dataclass, field
from typing import Dict, Optional

from models.agent import Agent


@dataclass(frozen=True)
class FactorScore:
    agent_id: str
    model_name: str
    color_name: Optional[str]        # None = whole model
    turnover_rate: float             # 0-100
    store_count: int
    sales_volume: float
    remaining_inventory: float
    inventory_score: float           # sales_volume - remaining_inventory
    is_neutral: bool = False         # True when no data existed and the neutral fallback was used


@dataclass
class WeightedAgent:
    agent: Agent
    score: FactorScore
    weight: float                    # 0-1, fed to the allocator
    composite_score: float           # 0-100
    relative: Dict[str, float] = field(default_factory=dict)  # factor key -> 0-100

    @property
    def agent_id(self) -> str:
        return self.agent.agent_id
