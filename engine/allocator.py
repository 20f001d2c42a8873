"""Exact integer split of a quantity by weight: proportional floor, then remainder correction."""

import math
from typing import Dict, List


def remainder_order(weights: Dict[str, float]) -> List[str]:
    """Agent ids by weight descending, ties broken by agent id ascending."""
    return sorted(weights, key=lambda agent_id: (-weights[agent_id], agent_id))


def allocate_by_weight(weights: Dict[str, float], quantity: int) -> Dict[str, int]:
    """Split ``quantity`` units across agents in proportion to ``weights``.

    Every agent first receives floor(weight / total * quantity). The units lost
    to flooring are then handed out one at a time, round-robin over the agents
    in remainder order, so the result always sums to ``quantity``. With a zero
    total weight every base share is 0 and the whole quantity goes round-robin.

    Returns a dict in the same key order as ``weights``.
    """
    clean = {agent_id: max(0.0, float(w)) for agent_id, w in weights.items()}
    if not clean or quantity <= 0:
        return {agent_id: 0 for agent_id in clean}

    total_weight = sum(clean.values())
    if total_weight > 0:
        allocation = {
            agent_id: int(math.floor(w / total_weight * quantity))
            for agent_id, w in clean.items()
        }
    else:
        allocation = {agent_id: 0 for agent_id in clean}

    remainder = quantity - sum(allocation.values())
    order = remainder_order(clean)
    if remainder > 0:
        for i in range(remainder):
            allocation[order[i % len(order)]] += 1
    elif remainder < 0:
        # Float rounding pushed a floor over an integer boundary; take back from the lowest weights
        for agent_id in reversed(order):
            while remainder < 0 and allocation[agent_id] > 0:
                allocation[agent_id] -= 1
                remainder += 1

    return allocation
