from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from models.agent import Agent
from models.allocation import AllocationResult
from models.catalog import PhoneModel
from models.settings import AssignmentSettings
from models.snapshot import DataSnapshot


@dataclass
class HistoryEntry:
    entry_id: str
    timestamp: datetime
    result: AllocationResult
    settings: AssignmentSettings
    agents: List[Agent] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)   # total_agents, total_models, total_assigned, total_quantity, ...
    snapshot: Optional[DataSnapshot] = None         # data the run was computed against
    catalog: List[PhoneModel] = field(default_factory=list)

    @property
    def total_assigned(self) -> int:
        return self.metadata.get("total_assigned", self.result.total_assigned)
