"""Tests for the weighted allocator."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from engine.allocator import allocate_by_weight, remainder_order


class TestAllocateByWeight:
    def test_exact_split(self):
        result = allocate_by_weight({"A": 0.5, "B": 0.3, "C": 0.2}, 10)
        assert result == {"A": 5, "B": 3, "C": 2}

    def test_remainder_goes_to_highest_weight(self):
        result = allocate_by_weight({"A": 0.5, "B": 0.3, "C": 0.2}, 11)
        assert result == {"A": 6, "B": 3, "C": 2}

    def test_equal_weights_tie_break_by_id(self):
        third = 1 / 3
        result = allocate_by_weight({"C": third, "A": third, "B": third}, 10)
        assert result == {"C": 3, "A": 4, "B": 3}

    def test_output_keeps_input_order(self):
        result = allocate_by_weight({"Z": 0.1, "A": 0.9}, 5)
        assert list(result) == ["Z", "A"]

    def test_zero_quantity(self):
        result = allocate_by_weight({"A": 0.5, "B": 0.5}, 0)
        assert result == {"A": 0, "B": 0}

    def test_negative_quantity_treated_as_zero(self):
        assert allocate_by_weight({"A": 1.0}, -3) == {"A": 0}

    def test_no_agents(self):
        assert allocate_by_weight({}, 10) == {}

    def test_zero_total_weight_spreads_round_robin(self):
        result = allocate_by_weight({"B": 0.0, "A": 0.0, "C": 0.0}, 5)
        assert result == {"B": 2, "A": 2, "C": 1}
        assert sum(result.values()) == 5

    def test_remainder_wraps_around(self):
        # Every agent floors to 0, so the remainder cycles through the order
        result = allocate_by_weight({"A": 0.4, "B": 0.35, "C": 0.25}, 2)
        assert result == {"A": 1, "B": 1, "C": 0}

    def test_negative_weights_clipped(self):
        result = allocate_by_weight({"A": -1.0, "B": 1.0}, 4)
        assert result == {"A": 0, "B": 4}

    def test_sum_and_non_negative_across_quantities(self):
        weights = {"A": 0.91, "B": 0.07, "C": 0.013, "D": 0.007}
        for quantity in (1, 3, 7, 13, 99, 1000):
            result = allocate_by_weight(weights, quantity)
            assert sum(result.values()) == quantity
            assert all(v >= 0 for v in result.values())

    def test_deterministic(self):
        weights = {"A": 0.33, "B": 0.33, "C": 0.34}
        assert allocate_by_weight(weights, 17) == allocate_by_weight(weights, 17)


class TestRemainderOrder:
    def test_weight_descending_then_id(self):
        assert remainder_order({"B": 0.5, "A": 0.5, "C": 0.9}) == ["C", "A", "B"]
