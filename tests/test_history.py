"""Tests for assignment history and run comparison."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from datetime import datetime, timedelta

import pytest

from models.agent import Agent
from models.catalog import ColorVariant, PhoneModel
from models.allocation import AgentModelAllocation, AllocationResult, GroupSummary, ModelSummary
from models.settings import AssignmentRatios, AssignmentSettings
from models.snapshot import DataSnapshot
from engine.history import AssignmentHistory, compare_results, compare_settings
from config.defaults import DEFAULT_RATIOS


class FakeClock:
    def __init__(self):
        self.now = datetime(2026, 1, 1, 9, 0, 0)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


def make_result(assigned=10, agent_units=None, office_units=None):
    agent_units = agent_units or {"A1": assigned}
    agents = {
        aid: {"X1": AgentModelAllocation(aid, "X1", qty, {"Black": qty})}
        for aid, qty in agent_units.items()
    }
    offices = {
        name: GroupSummary(name, 1, qty, [Agent(name, name)])
        for name, qty in (office_units or {}).items()
    }
    models = {"X1": ModelSummary("X1", total_quantity=100, assigned_quantity=assigned, assignments=dict(agent_units))}
    return AllocationResult(agents=agents, offices=offices, models=models)


class TestAssignmentHistory:
    def test_record_newest_first(self):
        history = AssignmentHistory(clock=FakeClock())
        first = history.record(make_result(1), AssignmentSettings(), [])
        second = history.record(make_result(2), AssignmentSettings(), [])
        assert [e.entry_id for e in history.entries()] == [second.entry_id, first.entry_id]
        assert first.entry_id.startswith("assignment_20260101090001_")
        assert first.metadata["total_assigned"] == 1

    def test_capped(self):
        history = AssignmentHistory(max_entries=3, clock=FakeClock())
        for i in range(5):
            history.record(make_result(i), AssignmentSettings(), [])
        assert len(history) == 3
        assert [e.total_assigned for e in history.entries()] == [4, 3, 2]

    def test_get_delete_clear(self):
        history = AssignmentHistory(clock=FakeClock())
        entry = history.record(make_result(), AssignmentSettings(), [Agent("A1", "Kim")])
        assert history.get(entry.entry_id) is entry
        assert history.delete(entry.entry_id)
        assert not history.delete(entry.entry_id)
        assert history.get(entry.entry_id) is None
        history.record(make_result(), AssignmentSettings(), [])
        history.clear()
        assert len(history) == 0

    def test_record_keeps_run_inputs(self):
        history = AssignmentHistory(clock=FakeClock())
        settings = AssignmentSettings()
        snapshot = DataSnapshot(snapshot_id="files@1")
        catalog = [PhoneModel("X1", [ColorVariant("Black", 3)])]
        entry = history.record(make_result(), settings, [Agent("A1", "Kim")], snapshot=snapshot, catalog=catalog)

        settings.ratios.sales_volume = 0
        catalog.append(PhoneModel("Y2", [ColorVariant("Blue", 1)]))

        assert entry.snapshot is snapshot
        assert [m.model_name for m in entry.catalog] == ["X1"]
        assert entry.settings.ratios.sales_volume == DEFAULT_RATIOS["sales_volume"]

    def test_stats_empty(self):
        stats = AssignmentHistory().stats()
        assert stats["total_assignments"] == 0
        assert stats["most_used_ratios"] is None
        assert stats["recent_trend"] == "stable"

    def test_stats_trend_increasing(self):
        history = AssignmentHistory(clock=FakeClock())
        for _ in range(5):
            history.record(make_result(10), AssignmentSettings(), [])
        for _ in range(5):
            history.record(make_result(20), AssignmentSettings(), [])
        stats = history.stats()
        assert stats["total_assignments"] == 10
        assert stats["average_assigned"] == 15
        assert stats["recent_trend"] == "increasing"
        assert stats["most_used_ratios"] == DEFAULT_RATIOS

    def test_stats_trend_decreasing(self):
        history = AssignmentHistory(clock=FakeClock())
        for _ in range(5):
            history.record(make_result(20), AssignmentSettings(), [])
        for _ in range(5):
            history.record(make_result(10), AssignmentSettings(), [])
        assert history.stats()["recent_trend"] == "decreasing"

    def test_stats_trend_stable_without_previous_window(self):
        history = AssignmentHistory(clock=FakeClock())
        for units in (1, 50, 100):
            history.record(make_result(units), AssignmentSettings(), [])
        assert history.stats()["recent_trend"] == "stable"


class TestCompareResults:
    def test_overall(self):
        rows = compare_results(make_result(10), make_result(15))
        total = next(r for r in rows if r["Metric"] == "Total Assigned")
        assert total == {"Metric": "Total Assigned", "Before": 10, "After": 15, "Change": 5}

    def test_agent_view(self):
        before = make_result(3, {"A1": 3})
        after = make_result(6, {"A1": 5, "A2": 1})
        rows = compare_results(before, after, "agent")
        assert rows == [
            {"Agent": "A1", "Before": 3, "After": 5, "Change": 2, "Status": "changed"},
            {"Agent": "A2", "Before": 0, "After": 1, "Change": 1, "Status": "added"},
        ]

    def test_office_view(self):
        before = make_result(office_units={"Seoul": 4, "Busan": 2})
        after = make_result(office_units={"Seoul": 4})
        rows = compare_results(before, after, "office")
        assert [(r["Office"], r["Status"]) for r in rows] == [("Busan", "removed"), ("Seoul", "unchanged")]

    def test_unknown_type(self):
        with pytest.raises(ValueError):
            compare_results(make_result(), make_result(), "region")


class TestCompareSettings:
    def test_ratio_changes(self):
        before = AssignmentSettings()
        after = AssignmentSettings(ratios=AssignmentRatios(turnover_rate=40))
        rows = compare_settings(before, after)
        assert len(rows) == 4
        assert rows[0] == {"Factor": "Turnover Rate", "Before": 30, "After": 40, "Change": 10}
        assert all(r["Change"] == 0 for r in rows[1:])
