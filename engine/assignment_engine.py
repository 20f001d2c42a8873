"""Assignment pipeline: eligibility -> store filter -> score -> normalize -> allocate -> aggregate."""

import logging
from typing import Dict, List, Optional

from models.agent import Agent
from models.allocation import AllocationResult
from models.catalog import PhoneModel
from models.history import HistoryEntry
from models.scores import FactorScore, WeightedAgent
from models.settings import AssignmentSettings
from models.snapshot import DataSnapshot
from engine.aggregator import aggregate_assignment
from engine.allocator import allocate_by_weight
from engine.eligibility import build_store_index, filter_by_store_count, resolve_eligible_agents
from engine.factor_scores import compute_model_scores
from engine.normalizer import normalize_scores
from engine.score_cache import NullScoreCache, make_cache_key
from config.defaults import SCORE_CACHE_TTL_SECONDS, FETCH_MAX_WORKERS

logger = logging.getLogger(__name__)


def _model_scores(
    agents: List[Agent],
    model: PhoneModel,
    settings: AssignmentSettings,
    snapshot: DataSnapshot,
    store_index,
    cache,
    cache_ttl: float,
) -> Dict[str, List[FactorScore]]:
    key = make_cache_key([a.agent_id for a in agents], settings, model.model_name, snapshot.cache_id)
    cached = cache.get(key)
    if cached is not None and set(cached) == set(model.color_names):
        logger.debug(f"Score cache hit for model {model.model_name}")
        return cached

    scores = compute_model_scores(agents, model, snapshot, store_index)
    cache.set(key, scores, cache_ttl)
    return scores


def run_assignment(
    agents: List[Agent],
    settings: AssignmentSettings,
    catalog: List[PhoneModel],
    snapshot: DataSnapshot,
    cache=None,
    rule_config: Optional[dict] = None,
) -> AllocationResult:
    """Allocate every color of every model in ``catalog`` across the eligible agents.

    All colors are computed against the same ``snapshot``. Agents without an
    attributable store are dropped before scoring and never appear in the result.
    """
    cfg = rule_config or {}
    cache_ttl = cfg.get("score_cache_ttl", SCORE_CACHE_TTL_SECONDS)
    cache = cache if cache is not None else NullScoreCache()

    eligible = resolve_eligible_agents(agents, settings.targets)
    store_index = build_store_index(snapshot.stores)
    kept, excluded = filter_by_store_count(eligible, store_index)
    agent_map = {a.agent_id: a for a in kept}

    color_allocations: Dict[str, Dict[str, Dict[str, int]]] = {}
    color_weights: Dict[str, Dict[str, List[WeightedAgent]]] = {}

    for model in catalog:
        color_allocations[model.model_name] = {}
        color_weights[model.model_name] = {}
        if not kept:
            for color in model.colors:
                color_allocations[model.model_name][color.color_name] = {}
            continue

        scores_by_color = _model_scores(kept, model, settings, snapshot, store_index, cache, cache_ttl)
        for color in model.colors:
            weighted = normalize_scores(scores_by_color[color.color_name], agent_map, settings.ratios)
            allocation = allocate_by_weight({w.agent_id: w.weight for w in weighted}, color.quantity)
            color_weights[model.model_name][color.color_name] = weighted
            color_allocations[model.model_name][color.color_name] = allocation

    result = aggregate_assignment(
        kept, catalog, color_allocations, color_weights,
        excluded_agent_ids=[a.agent_id for a in excluded],
    )
    logger.info(
        f"Assignment complete: {len(kept)} agents ({len(excluded)} excluded), "
        f"{len(catalog)} models, {result.total_assigned}/{result.total_quantity} units assigned"
    )
    return result


def run_assignment_from_source(
    agents: List[Agent],
    settings: AssignmentSettings,
    catalog: List[PhoneModel],
    source,
    cache=None,
    rule_config: Optional[dict] = None,
) -> AllocationResult:
    """Fetch one snapshot from ``source``, then run the assignment against it.

    A failing fetch raises ``CollaboratorError`` before any allocation exists.
    """
    from data.sources import fetch_snapshot

    cfg = rule_config or {}
    snapshot = fetch_snapshot(
        source,
        [m.model_name for m in catalog],
        max_workers=cfg.get("fetch_max_workers", FETCH_MAX_WORKERS),
    )
    return run_assignment(agents, settings, catalog, snapshot, cache=cache, rule_config=rule_config)


def score_breakdown(
    agents: List[Agent],
    settings: AssignmentSettings,
    model: PhoneModel,
    color_name: str,
    snapshot: DataSnapshot,
    cache=None,
    rule_config: Optional[dict] = None,
) -> List[WeightedAgent]:
    """Weighted scores of the kept agents for one model color, as used by ``run_assignment``."""
    cfg = rule_config or {}
    cache = cache if cache is not None else NullScoreCache()

    eligible = resolve_eligible_agents(agents, settings.targets)
    store_index = build_store_index(snapshot.stores)
    kept, _ = filter_by_store_count(eligible, store_index)
    if not kept:
        return []

    scores_by_color = _model_scores(
        kept, model, settings, snapshot, store_index, cache,
        cfg.get("score_cache_ttl", SCORE_CACHE_TTL_SECONDS),
    )
    if color_name not in scores_by_color:
        raise KeyError(f"Unknown color {color_name!r} for model {model.model_name}")
    return normalize_scores(scores_by_color[color_name], {a.agent_id: a for a in kept}, settings.ratios)


def entry_breakdown(
    entry: HistoryEntry,
    model_name: str,
    color_name: str,
    cache=None,
    rule_config: Optional[dict] = None,
) -> List[WeightedAgent]:
    """``score_breakdown`` against the agents, settings, catalog and data a recorded run used."""
    if entry.snapshot is None:
        raise ValueError(f"Assignment {entry.entry_id} was recorded without its data snapshot")
    model = next((m for m in entry.catalog if m.model_name == model_name), None)
    if model is None:
        raise KeyError(f"Unknown model {model_name!r} in assignment {entry.entry_id}")
    return score_breakdown(
        entry.agents, entry.settings, model, color_name, entry.snapshot,
        cache=cache, rule_config=rule_config,
    )
