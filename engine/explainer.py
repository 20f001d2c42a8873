"""Generates human-readable explanations for per-agent assignment weights."""

from typing import List

from models.scores import WeightedAgent
from models.settings import AssignmentRatios
from config.defaults import FACTOR_KEYS, FACTOR_LABELS


def explain_agent_score(
    weighted: WeightedAgent,
    ratios: AssignmentRatios,
    allocated: int,
    quantity: int,
) -> List[str]:
    """Produce step-by-step explanation for one agent's share of one model color."""
    score = weighted.score
    target = score.model_name if score.color_name is None else f"{score.model_name} / {score.color_name}"
    steps = []

    if score.is_neutral:
        steps.append(
            f"Step 1 - Raw factors: no activity or inventory for {target} => "
            f"neutral score {score.sales_volume:.0f} used for sales, turnover and inventory"
        )
    else:
        steps.append(
            f"Step 1 - Raw factors: sales {score.sales_volume:.0f}, on-hand {score.remaining_inventory:.0f}, "
            f"turnover {score.turnover_rate:.1f}%, inventory score {score.inventory_score:+.0f}"
        )

    steps.append(f"Step 2 - Stores: {score.store_count} distinct store(s) attributed")

    relative = ", ".join(
        f"{FACTOR_LABELS[key]} {weighted.relative.get(key, 0.0):.1f}" for key in FACTOR_KEYS
    )
    steps.append(f"Step 3 - Relative factors (0-100 within the cohort): {relative}")

    shares = ratios.shares()
    share_text = ", ".join(f"{FACTOR_LABELS[key]} {shares[key]:.0f}%" for key in FACTOR_KEYS)
    steps.append(
        f"Step 4 - Composite: {share_text} => {weighted.composite_score:.1f} / 100 "
        f"(weight {weighted.weight:.3f})"
    )

    steps.append(f"Step 5 - Allocation: {allocated} of {quantity} unit(s)")
    return steps
