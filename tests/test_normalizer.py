"""Tests for relative normalization and composite weights."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest

from models.agent import Agent
from models.scores import FactorScore
from models.settings import AssignmentRatios
from engine.normalizer import relative_to_max, min_max_rescale, normalize_scores


def make_score(agent_id="A1", turnover=50.0, stores=1, sales=10.0, inventory=0.0):
    return FactorScore(
        agent_id=agent_id,
        model_name="X1",
        color_name="Black",
        turnover_rate=turnover,
        store_count=stores,
        sales_volume=sales,
        remaining_inventory=inventory,
        inventory_score=sales - inventory,
    )


def make_agents(*ids):
    return {i: Agent(i, i) for i in ids}


class TestHelpers:
    def test_relative_to_max(self):
        assert relative_to_max([5, 10, 0]) == [50.0, 100.0, 0.0]

    def test_relative_to_max_all_zero(self):
        assert relative_to_max([0, 0]) == [0.0, 0.0]

    def test_min_max_rescale(self):
        assert min_max_rescale([-5, 5, 0]) == [0.0, 100.0, 50.0]

    def test_min_max_flat_population(self):
        assert min_max_rescale([3, 3]) == [50.0, 50.0]


class TestNormalizeScores:
    def test_equal_ratios(self):
        scores = [
            make_score("A", turnover=80, stores=2, sales=10, inventory=5),
            make_score("B", turnover=40, stores=1, sales=5, inventory=10),
        ]
        ratios = AssignmentRatios(25, 25, 25, 25)
        weighted = normalize_scores(scores, make_agents("A", "B"), ratios)

        assert weighted[0].composite_score == pytest.approx(95.0)
        assert weighted[0].weight == pytest.approx(0.95)
        assert weighted[1].composite_score == pytest.approx(35.0)
        assert weighted[1].relative["remaining_inventory"] == 0.0

    def test_ratios_rescaled_to_shares(self):
        scores = [make_score("A", turnover=100), make_score("B", turnover=0)]
        only_turnover = normalize_scores(scores, make_agents("A", "B"), AssignmentRatios(3, 0, 0, 0))
        assert only_turnover[0].weight == pytest.approx(1.0)
        assert only_turnover[1].weight == pytest.approx(0.0)

    def test_zero_ratios_give_zero_weights(self):
        scores = [make_score("A"), make_score("B")]
        weighted = normalize_scores(scores, make_agents("A", "B"), AssignmentRatios(0, 0, 0, 0))
        assert [w.weight for w in weighted] == [0.0, 0.0]

    def test_weights_bounded(self):
        scores = [make_score("A", turnover=250), make_score("B", turnover=-10)]
        weighted = normalize_scores(scores, make_agents("A", "B"), AssignmentRatios())
        assert all(0.0 <= w.weight <= 1.0 for w in weighted)

    def test_empty(self):
        assert normalize_scores([], {}, AssignmentRatios()) == []
