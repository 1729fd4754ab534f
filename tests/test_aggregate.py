"""
Tests for cost aggregation and cost diffs
"""
import pytest

from costimator.estimation.aggregate import (
    NO_CHANGE_SUMMARY,
    diff,
    percentage_delta,
    subtract,
    sum_cost_ranges,
)
from costimator.models.cost_models import Cost, CostRange


def _range(kind, value, **overrides):
    values = dict(min_requested=value, max_requested=value, hpa_buffer=value,
                  min_limited=value, max_limited=value)
    values.update(overrides)
    return CostRange(kind=kind, **values)


class TestSumCostRanges:
    """Tests for field-wise sums"""

    def test_sum_keeps_kind_label(self):
        total = sum_cost_ranges("Deployment", [_range("Deployment", 1), _range("Deployment", 2)])

        assert total.kind == "Deployment"
        assert total.max_limited == 3

    def test_sum_is_associative_and_commutative(self):
        a, b, c = _range("x", 1.5), _range("x", 2.25, max_limited=7), _range("x", 4)

        left = a.add(b).add(c)
        right = c.add(a.add(b))
        for name in ("min_requested", "max_requested", "hpa_buffer", "min_limited", "max_limited"):
            assert getattr(left, name) == pytest.approx(getattr(right, name))

    def test_monthly_total_sums_kinds(self):
        cost = Cost(monthly_ranges=[_range("Deployment", 10), _range("DaemonSet", 5, max_limited=20)])
        total = cost.monthly_total()

        assert total.kind == "MonthlyTotal"
        assert total.min_requested == 15
        assert total.max_limited == 30

    def test_empty_cost_total_is_zero(self):
        assert Cost().monthly_total().max_value() == 0


class TestPercentageDelta:
    """Tests for percentage deltas"""

    def test_relative_to_previous(self):
        assert percentage_delta(50, 200) == pytest.approx(25.0)

    def test_unchanged_zero_is_zero(self):
        assert percentage_delta(0, 0) == 0.0

    def test_change_from_zero_is_undefined(self):
        assert percentage_delta(10, 0) is None


class TestDiff:
    """Tests for cost differences"""

    def test_identical_costs_have_no_change(self):
        cost = Cost(monthly_ranges=[_range("Deployment", 10)])
        cost_diff = diff(cost, cost)

        assert cost_diff.summary == NO_CHANGE_SUMMARY
        assert cost_diff.classification == "no change"
        assert not cost_diff.cost_increased
        assert cost_diff.monthly_diff_range.diff_value.max_value() == 0

    def test_increase(self):
        cost_diff = diff(Cost(monthly_ranges=[_range("Deployment", 15)]),
                         Cost(monthly_ranges=[_range("Deployment", 10)]))

        assert cost_diff.classification == "increased"
        assert cost_diff.monthly_diff_range.diff_percentage.min_requested == pytest.approx(50.0)
        assert cost_diff.summary.startswith("There are increase in costs on: 'MIN REQUESTED'")

    def test_mixed_changes(self):
        current = Cost(monthly_ranges=[_range("Deployment", 10, max_limited=5)])
        previous = Cost(monthly_ranges=[_range("Deployment", 10, min_requested=5, max_limited=10)])
        cost_diff = diff(current, previous)

        assert cost_diff.classification == "mixed"
        assert cost_diff.summary == (
            "There are increase in costs on: 'MIN REQUESTED'. "
            "And there are decrease in costs on: 'MAX LIMITED'"
        )

    def test_decrease_only_summary(self):
        cost_diff = diff(Cost(monthly_ranges=[_range("Deployment", 5)]),
                         Cost(monthly_ranges=[_range("Deployment", 10)]))

        assert cost_diff.classification == "decreased"
        assert cost_diff.summary.startswith("There are decrease in costs on:")

    def test_new_workloads_from_nothing(self):
        cost_diff = diff(Cost(monthly_ranges=[_range("Deployment", 10)]), Cost())

        assert cost_diff.classification == "increased"
        assert cost_diff.monthly_diff_range.diff_percentage.max_value() is None
        assert cost_diff.monthly_diff_range.diff_value.min_requested == 10

    def test_subtract_keeps_operands(self):
        current, previous = _range("MonthlyTotal", 3), _range("MonthlyTotal", 1)
        diff_range = subtract(current, previous)

        assert diff_range.current == current
        assert diff_range.previous == previous
        assert diff_range.diff_value.max_limited == 2
