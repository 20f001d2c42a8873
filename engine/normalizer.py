"""Relative normalization of raw factor scores across the current agent population."""

from typing import Dict, List

from models.agent import Agent
from models.scores import FactorScore, WeightedAgent
from models.settings import AssignmentRatios
from config.defaults import EQUAL_SPREAD_SCORE, ZERO_DENOMINATOR_RESULT


def relative_to_max(values: List[float]) -> List[float]:
    """value / max * 100; all zeros when the max is not positive."""
    peak = max(values, default=0)
    if peak <= 0:
        return [ZERO_DENOMINATOR_RESULT for _ in values]
    return [max(0.0, v) / peak * 100 for v in values]


def min_max_rescale(values: List[float]) -> List[float]:
    """Linear rescale into [0, 100]; a flat population scores EQUAL_SPREAD_SCORE."""
    if not values:
        return []
    low, high = min(values), max(values)
    if high == low:
        return [EQUAL_SPREAD_SCORE for _ in values]
    return [(v - low) / (high - low) * 100 for v in values]


def normalize_scores(
    scores: List[FactorScore],
    agents: Dict[str, Agent],
    ratios: AssignmentRatios,
) -> List[WeightedAgent]:
    """Turn raw scores for one model/color into composite 0-1 weights.

    Sales volume and store count are scaled against the population maximum,
    the inventory score is min-max rescaled, and the turnover rate (already a
    percentage) is used as-is. The four relative factors are combined with the
    configured ratios, rescaled to shares of 100.
    """
    if not scores:
        return []

    relative_sales = relative_to_max([s.sales_volume for s in scores])
    relative_stores = relative_to_max([float(s.store_count) for s in scores])
    relative_inventory = min_max_rescale([s.inventory_score for s in scores])
    shares = ratios.shares()

    weighted = []
    for i, score in enumerate(scores):
        relative = {
            "turnover_rate": max(0.0, min(100.0, score.turnover_rate)),
            "store_count": relative_stores[i],
            "remaining_inventory": relative_inventory[i],
            "sales_volume": relative_sales[i],
        }
        composite = sum(shares[key] * relative[key] for key in shares) / 100
        weight = max(0.0, min(1.0, composite / 100))
        weighted.append(WeightedAgent(
            agent=agents[score.agent_id],
            score=score,
            weight=weight,
            composite_score=composite,
            relative=relative,
        ))
    return weighted
