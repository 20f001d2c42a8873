"""Assignment history: keep recent runs, summarize them, and compare two runs."""

import copy
import json
import logging
import uuid
from collections import Counter
from datetime import datetime
from typing import Callable, Dict, List, Optional

from models.agent import Agent
from models.allocation import AllocationResult
from models.catalog import PhoneModel
from models.history import HistoryEntry
from models.settings import AssignmentSettings
from models.snapshot import DataSnapshot
from config.defaults import (
    MAX_HISTORY_COUNT, TREND_WINDOW, TREND_UP_FACTOR, TREND_DOWN_FACTOR,
    FACTOR_KEYS, FACTOR_LABELS, COMPARISON_TYPES,
)

logger = logging.getLogger(__name__)


class AssignmentHistory:
    """Most recent assignment runs, newest first, capped at ``max_entries``."""

    def __init__(self, max_entries: int = MAX_HISTORY_COUNT, clock: Callable[[], datetime] = datetime.now):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: List[HistoryEntry] = []

    def record(
        self,
        result: AllocationResult,
        settings: AssignmentSettings,
        agents: List[Agent],
        metadata: Optional[dict] = None,
        snapshot: Optional[DataSnapshot] = None,
        catalog: Optional[List[PhoneModel]] = None,
    ) -> HistoryEntry:
        timestamp = self._clock()
        entry = HistoryEntry(
            entry_id=f"assignment_{timestamp:%Y%m%d%H%M%S}_{uuid.uuid4().hex[:8]}",
            timestamp=timestamp,
            result=result,
            settings=copy.deepcopy(settings),
            agents=list(agents),
            metadata={
                "total_agents": len(agents),
                "total_models": len(result.models),
                "total_assigned": result.total_assigned,
                "total_quantity": result.total_quantity,
                **(metadata or {}),
            },
            snapshot=snapshot,
            catalog=list(catalog or []),
        )
        self._entries.insert(0, entry)
        del self._entries[self.max_entries:]
        logger.info(f"Recorded assignment {entry.entry_id} ({entry.total_assigned} units)")
        return entry

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        return next((e for e in self._entries if e.entry_id == entry_id), None)

    def delete(self, entry_id: str) -> bool:
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.entry_id != entry_id]
        return len(self._entries) < before

    def clear(self) -> None:
        self._entries = []

    def stats(self) -> dict:
        """Totals, most-used ratio settings and recent trend of assigned units."""
        if not self._entries:
            return {
                "total_assignments": 0,
                "average_assigned": 0,
                "most_used_ratios": None,
                "recent_trend": "stable",
            }

        totals = [e.total_assigned for e in self._entries]
        ratio_counts = Counter(
            json.dumps(e.settings.ratios.as_dict(), sort_keys=True) for e in self._entries
        )
        most_used = ratio_counts.most_common(1)[0][0]

        recent = totals[:TREND_WINDOW]
        previous = totals[TREND_WINDOW:TREND_WINDOW * 2]
        trend = "stable"
        if previous:
            recent_avg = sum(recent) / len(recent)
            previous_avg = sum(previous) / len(previous)
            if recent_avg > previous_avg * TREND_UP_FACTOR:
                trend = "increasing"
            elif recent_avg < previous_avg * TREND_DOWN_FACTOR:
                trend = "decreasing"

        return {
            "total_assignments": len(self._entries),
            "average_assigned": round(sum(totals) / len(totals)),
            "most_used_ratios": json.loads(most_used),
            "recent_trend": trend,
        }

    def __len__(self) -> int:
        return len(self._entries)


def _status(before: Optional[int], after: Optional[int]) -> str:
    if before is None:
        return "added"
    if after is None:
        return "removed"
    return "unchanged" if before == after else "changed"


def _diff_rows(label: str, before: Dict[str, int], after: Dict[str, int]) -> List[dict]:
    rows = []
    for key in sorted(set(before) | set(after)):
        b, a = before.get(key), after.get(key)
        rows.append({
            label: key,
            "Before": b or 0,
            "After": a or 0,
            "Change": (a or 0) - (b or 0),
            "Status": _status(b, a),
        })
    return rows


def compare_results(
    before: AllocationResult,
    after: AllocationResult,
    comparison_type: str = "overall",
) -> List[dict]:
    """Per-row differences between two assignment results."""
    if comparison_type not in COMPARISON_TYPES:
        raise ValueError(f"Unknown comparison type: {comparison_type}. Use one of {COMPARISON_TYPES}.")

    if comparison_type == "agent":
        return _diff_rows(
            "Agent",
            {aid: before.agent_total(aid) for aid in before.agents},
            {aid: after.agent_total(aid) for aid in after.agents},
        )
    if comparison_type == "office":
        return _diff_rows(
            "Office",
            {n: g.total_quantity for n, g in before.offices.items()},
            {n: g.total_quantity for n, g in after.offices.items()},
        )
    if comparison_type == "department":
        return _diff_rows(
            "Department",
            {n: g.total_quantity for n, g in before.departments.items()},
            {n: g.total_quantity for n, g in after.departments.items()},
        )
    if comparison_type == "model":
        return _diff_rows(
            "Model",
            {n: m.assigned_quantity for n, m in before.models.items()},
            {n: m.assigned_quantity for n, m in after.models.items()},
        )

    metrics = [
        ("Total Assigned", before.total_assigned, after.total_assigned),
        ("Total Quantity", before.total_quantity, after.total_quantity),
        ("Agents", len(before.agents), len(after.agents)),
        ("Models", len(before.models), len(after.models)),
    ]
    return [
        {"Metric": name, "Before": b, "After": a, "Change": a - b}
        for name, b, a in metrics
    ]


def compare_settings(before: AssignmentSettings, after: AssignmentSettings) -> List[dict]:
    """Ratio changes between two settings, one row per factor."""
    rows = []
    for key in FACTOR_KEYS:
        b = getattr(before.ratios, key)
        a = getattr(after.ratios, key)
        rows.append({"Factor": FACTOR_LABELS[key], "Before": b, "After": a, "Change": a - b})
    return rows
