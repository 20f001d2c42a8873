"""Target selection and the store-count filter applied before scoring."""

import logging
from collections import defaultdict
from typing import Dict, List, Set, Tuple

from models.agent import Agent, normalize_agent_name
from models.records import StoreOwnership
from models.settings import AssignmentTargets
from config.defaults import INACTIVE_STORE_STATUSES

logger = logging.getLogger(__name__)


def resolve_eligible_agents(agents: List[Agent], targets: AssignmentTargets) -> List[Agent]:
    """Agents selected individually, or whose office AND department are both selected."""
    offices = targets.selected_offices
    departments = targets.selected_departments
    agent_ids = targets.selected_agents

    eligible = []
    for agent in agents:
        if agent.agent_id in agent_ids:
            eligible.append(agent)
        elif agent.office in offices and agent.department in departments:
            eligible.append(agent)
    return eligible


def _is_inactive(status: str) -> bool:
    return str(status or "").strip().casefold() in {s.casefold() for s in INACTIVE_STORE_STATUSES}


def build_store_index(stores: List[StoreOwnership]) -> Dict[str, Set[str]]:
    """Map normalized owner label -> distinct store names, skipping unused stores."""
    index: Dict[str, Set[str]] = defaultdict(set)
    for row in stores:
        if _is_inactive(row.status):
            continue
        store_name = str(row.store_name or "").strip()
        owner = normalize_agent_name(row.agent_label)
        if not store_name or not owner:
            continue
        index[owner].add(store_name)
    return dict(index)


def agent_store_names(agent: Agent, store_index: Dict[str, Set[str]]) -> Set[str]:
    names: Set[str] = set()
    for key in agent.match_keys:
        names |= store_index.get(key, set())
    return names


def count_agent_stores(agent: Agent, store_index: Dict[str, Set[str]]) -> int:
    return len(agent_store_names(agent, store_index))


def filter_by_store_count(
    agents: List[Agent],
    store_index: Dict[str, Set[str]],
) -> Tuple[List[Agent], List[Agent]]:
    """Split agents into (kept, excluded); an agent without any store cannot take stock."""
    kept, excluded = [], []
    for agent in agents:
        if count_agent_stores(agent, store_index) > 0:
            kept.append(agent)
        else:
            excluded.append(agent)

    if excluded:
        logger.warning(
            f"Excluded {len(excluded)} agent(s) with no attributable stores: "
            f"{', '.join(a.agent_id for a in excluded)}"
        )
    return kept, excluded
