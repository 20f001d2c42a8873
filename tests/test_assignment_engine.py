"""Tests for the end-to-end assignment pipeline."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from models.agent import Agent
from models.allocation import AllocationResult
from models.catalog import ColorVariant, PhoneModel
from models.records import ActivityRecord, InventoryRow, StoreOwnership
from models.settings import AssignmentSettings, AssignmentTargets
from models.snapshot import DataSnapshot
from data.loader import parse_agents, parse_catalog
from data.sample_data import generate_sample_frames
from data.sources import CollaboratorError, FrameSnapshotSource, SnapshotSource
from engine.assignment_engine import entry_breakdown, run_assignment, run_assignment_from_source, score_breakdown
from engine.explainer import explain_agent_score
from engine.history import AssignmentHistory
from engine.score_cache import ScoreCache


def make_agents():
    return [
        Agent("A1", "Kim", "Seoul", "Retail"),
        Agent("A2", "Lee", "Seoul", "Retail"),
        Agent("A3", "Park", "Busan", "Wholesale"),
        Agent("Z9", "Star", "Seoul", "Retail"),      # best seller, but owns no store
    ]


def make_catalog():
    return [
        PhoneModel("X1", [ColorVariant("Black", 11), ColorVariant("White", 7)]),
        PhoneModel("Y2", [ColorVariant("Blue", 4)]),
    ]


def make_snapshot():
    activity = [
        ActivityRecord("Kim", "X1", "Black", 6),
        ActivityRecord("Lee", "X1", "Black", 2),
        ActivityRecord("Park(별도)", "X1", "White", 3),
        ActivityRecord("Star", "X1", "Black", 50),
        ActivityRecord("Star", "X1", "White", 50),
        ActivityRecord("Star", "Y2", "Blue", 50),
    ]
    inventory = [
        InventoryRow("S1", "X1", "Black", 1),
        InventoryRow("S3", "X1", "Black", 4),
        InventoryRow("S4", "Y2", "Blue", 2),
    ]
    stores = [
        StoreOwnership("S1", "Kim"),
        StoreOwnership("S2", "Kim(별도)"),
        StoreOwnership("S3", "Lee"),
        StoreOwnership("S4", "Park"),
        StoreOwnership("S5", "Star", "미사용"),
    ]
    return DataSnapshot(activity_current=activity, inventory=inventory, stores=stores, snapshot_id="snap-1")


def make_settings(**targets):
    defaults = {
        "offices": {"Seoul": True, "Busan": True},
        "departments": {"Retail": True, "Wholesale": True},
    }
    defaults.update(targets)
    return AssignmentSettings(targets=AssignmentTargets(**defaults))


class TestRunAssignment:
    def test_exact_sum_per_color(self):
        catalog = make_catalog()
        result = run_assignment(make_agents(), make_settings(), catalog, make_snapshot())

        for model in catalog:
            summary = result.models[model.model_name]
            for color in model.colors:
                assert sum(summary.colors[color.color_name].values()) == color.quantity
            assert summary.assigned_quantity == model.total_quantity
        assert result.total_assigned == result.total_quantity == 22

    def test_zero_store_agent_excluded(self):
        result = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())

        assert result.excluded_agent_ids == ["Z9"]
        assert "Z9" not in result.agents
        for summary in result.models.values():
            assert "Z9" not in summary.assignments
            for per_agent in summary.colors.values():
                assert "Z9" not in per_agent
        members = [a.agent_id for g in result.offices.values() for a in g.agents]
        assert "Z9" not in members

    def test_every_kept_agent_listed_per_model(self):
        result = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())
        assert set(result.agents) == {"A1", "A2", "A3"}
        for per_model in result.agents.values():
            assert set(per_model) == {"X1", "Y2"}

    def test_non_negative(self):
        result = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())
        for per_model in result.agents.values():
            for alloc in per_model.values():
                assert alloc.quantity >= 0
                assert all(q >= 0 for q in alloc.color_quantities.values())

    def test_group_totals(self):
        result = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())
        seoul = result.offices["Seoul"]
        assert seoul.agent_count == 2
        assert seoul.total_quantity == result.agent_total("A1") + result.agent_total("A2")
        assert result.departments["Wholesale"].total_quantity == result.agent_total("A3")

    def test_no_eligible_agents(self):
        settings = AssignmentSettings()
        result = run_assignment(make_agents(), settings, make_catalog(), make_snapshot())

        assert result.agents == {}
        assert result.offices == {}
        assert result.models["X1"].colors == {"Black": {}, "White": {}}
        assert result.models["X1"].assigned_quantity == 0
        assert result.models["X1"].total_quantity == 18

    def test_zero_quantity_color(self):
        catalog = [PhoneModel("X1", [ColorVariant("Black", 0)])]
        result = run_assignment(make_agents(), make_settings(), catalog, make_snapshot())
        assert result.models["X1"].colors["Black"] == {"A1": 0, "A2": 0, "A3": 0}

    def test_individual_selection(self):
        settings = make_settings(offices={}, departments={}, agents={"A3": True})
        result = run_assignment(make_agents(), settings, make_catalog(), make_snapshot())
        assert list(result.agents) == ["A3"]
        assert result.agent_total("A3") == 22

    def test_deterministic(self):
        first = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())
        second = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())
        assert first.to_dict() == second.to_dict()

    def test_stronger_seller_gets_more(self):
        result = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot())
        black = result.models["X1"].colors["Black"]
        assert black["A1"] > black["A2"]

    def test_serialized_shape(self):
        data = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot()).to_dict()
        assert set(data) == {"agents", "offices", "departments", "models"}
        alloc = data["agents"]["A1"]["X1"]
        assert set(alloc) == {"quantity", "colorQuantities", "colorScores", "averageScore"}
        assert data["offices"]["Seoul"]["agents"][0] == {"agentId": "A1", "displayName": "Kim"}

    def test_cache_reused_for_identical_run(self):
        cache = ScoreCache()
        cached = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot(), cache=cache)
        assert cache.hits == 0
        assert len(cache) == 2

        again = run_assignment(make_agents(), make_settings(), make_catalog(), make_snapshot(), cache=cache)
        assert cache.hits == 2
        assert cached.to_dict() == again.to_dict()

    def test_cache_keyed_by_snapshot_content(self):
        def snapshot(kim_sold, lee_sold):
            return DataSnapshot(
                activity_current=[
                    ActivityRecord("Kim", "X1", "Black", kim_sold),
                    ActivityRecord("Lee", "X1", "Black", lee_sold),
                ],
                stores=[StoreOwnership("S1", "Kim"), StoreOwnership("S3", "Lee")],
            )

        agents = make_agents()[:2]
        catalog = [PhoneModel("X1", [ColorVariant("Black", 10)])]
        settings = make_settings()
        cache = ScoreCache()

        first = run_assignment(agents, settings, catalog, snapshot(9, 1), cache=cache)
        second = run_assignment(agents, settings, catalog, snapshot(1, 9), cache=cache)
        fresh = run_assignment(agents, settings, catalog, snapshot(1, 9))

        assert cache.hits == 0
        assert second.to_dict() == fresh.to_dict()
        black = second.models["X1"].colors["Black"]
        assert black["A2"] > black["A1"]
        assert first.models["X1"].colors["Black"]["A1"] > black["A1"]


class TestScoreBreakdown:
    def test_matches_run(self):
        settings = make_settings()
        model = make_catalog()[0]
        weighted = score_breakdown(make_agents(), settings, model, "Black", make_snapshot())
        assert [w.agent_id for w in weighted] == ["A1", "A2", "A3"]
        assert all(0.0 <= w.weight <= 1.0 for w in weighted)

    def test_unknown_color(self):
        with pytest.raises(KeyError):
            score_breakdown(make_agents(), make_settings(), make_catalog()[0], "Gold", make_snapshot())

    def test_explanation_steps(self):
        settings = make_settings()
        model = make_catalog()[1]
        weighted = score_breakdown(make_agents(), settings, model, "Blue", make_snapshot())
        kim = next(w for w in weighted if w.agent_id == "A1")
        steps = explain_agent_score(kim, settings.ratios, 1, 4)
        assert len(steps) == 5
        assert "neutral" in steps[0]
        assert steps[-1] == "Step 5 - Allocation: 1 of 4 unit(s)"


class TestEntryBreakdown:
    def record_run(self, settings):
        catalog = make_catalog()
        snapshot = make_snapshot()
        result = run_assignment(make_agents(), settings, catalog, snapshot)
        return AssignmentHistory().record(result, settings, make_agents(), snapshot=snapshot, catalog=catalog)

    def test_uses_recorded_settings(self):
        settings = make_settings()
        entry = self.record_run(settings)

        # Later edits in the console must not leak into the recorded run
        settings.targets = AssignmentTargets(agents={"A3": True})
        settings.ratios.sales_volume = 0

        weighted = entry_breakdown(entry, "X1", "Black")
        expected = score_breakdown(make_agents(), make_settings(), make_catalog()[0], "Black", make_snapshot())
        assert [w.agent_id for w in weighted] == ["A1", "A2", "A3"]
        assert [w.weight for w in weighted] == [w.weight for w in expected]

    def test_unknown_model(self):
        entry = self.record_run(make_settings())
        with pytest.raises(KeyError):
            entry_breakdown(entry, "Z0", "Black")

    def test_requires_snapshot(self):
        entry = AssignmentHistory().record(AllocationResult(), make_settings(), make_agents(), catalog=make_catalog())
        with pytest.raises(ValueError):
            entry_breakdown(entry, "X1", "Black")


class BrokenSource(SnapshotSource):
    name = "broken"

    def fetch_activity(self, period, model_names):
        return []

    def fetch_inventory(self, model_names):
        raise ConnectionError("inventory service unavailable")

    def fetch_store_ownership(self):
        return []


class TestRunAssignmentFromSource:
    def test_sample_data_end_to_end(self):
        frames = generate_sample_frames()
        agents = parse_agents(frames["agents"])
        catalog = parse_catalog(frames["catalog"])
        source = FrameSnapshotSource(
            frames["activity_current"], frames["activity_previous"], frames["inventory"], frames["stores"],
        )
        settings = make_settings(
            offices={a.office: True for a in agents},
            departments={a.department: True for a in agents},
        )

        result = run_assignment_from_source(agents, settings, catalog, source)
        assert result.excluded_agent_ids == ["A008"]
        assert result.total_assigned == sum(m.total_quantity for m in catalog)

    def test_source_failure_produces_no_result(self):
        with pytest.raises(CollaboratorError) as exc:
            run_assignment_from_source(make_agents(), make_settings(), make_catalog(), BrokenSource())
        assert exc.value.dataset == "inventory"
        assert isinstance(exc.value.__cause__, ConnectionError)
