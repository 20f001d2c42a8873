from models.agent import Agent, normalize_agent_name
from models.catalog import ColorVariant, PhoneModel
from models.records import ActivityRecord, InventoryRow, StoreOwnership
from models.settings import AssignmentRatios, AssignmentSettings, AssignmentTargets
from models.snapshot import DataSnapshot
from models.scores import FactorScore, WeightedAgent
from models.allocation import AgentModelAllocation, AllocationResult, GroupSummary, ModelSummary
from models.history import HistoryEntry
