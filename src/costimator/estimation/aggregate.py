"""
Cost Aggregation
Sums cost ranges by kind and across kinds, and diffs two cost snapshots
"""

from typing import Iterable, List, Optional, Tuple

from costimator.models.cost_models import (
    COST_FIELDS,
    Cost,
    CostDiff,
    CostRange,
    DiffCostRange,
    PercentageRange,
)

NO_CHANGE_SUMMARY = "No cost change found!"


def sum_cost_ranges(kind: str, cost_ranges: Iterable[CostRange]) -> CostRange:
    """Field-wise sum of cost ranges, labelled with the given kind."""
    total = CostRange(kind=kind)
    for cost_range in cost_ranges:
        total = total.add(cost_range)
    return total


def percentage_delta(delta: float, previous: float) -> Optional[float]:
    """delta / previous * 100. Undefined (None) when previous is zero and the value moved."""
    if previous == 0:
        return 0.0 if delta == 0 else None
    return delta * 100 / previous


def _status(diff_value: CostRange, diff_percentage: PercentageRange) -> Tuple[List[str], List[str]]:
    increased, decreased = [], []
    for name, label in COST_FIELDS.items():
        percentage = getattr(diff_percentage, name)
        # from zero the percentage is undefined, the absolute delta still has a sign
        change = percentage if percentage is not None else getattr(diff_value, name)
        if change > 0:
            increased.append(label)
        elif change < 0:
            decreased.append(label)
    return increased, decreased


def subtract(current: CostRange, previous: CostRange) -> DiffCostRange:
    """Absolute and percentage difference of current against previous."""
    diff_values = {name: getattr(current, name) - getattr(previous, name) for name in COST_FIELDS}
    diff_value = CostRange(kind=current.kind, **diff_values)
    diff_percentage = PercentageRange(
        kind=current.kind,
        **{name: percentage_delta(diff_values[name], getattr(previous, name)) for name in COST_FIELDS}
    )
    increased, decreased = _status(diff_value, diff_percentage)

    return DiffCostRange(
        kind=current.kind,
        current=current,
        previous=previous,
        diff_value=diff_value,
        diff_percentage=diff_percentage,
        increased_fields=increased,
        decreased_fields=decreased,
    )


def build_summary(diff_range: DiffCostRange) -> str:
    summary = ""
    if diff_range.increased_fields:
        summary += "There are increase in costs on: '%s'" % "', '".join(diff_range.increased_fields)
    if diff_range.decreased_fields:
        start = ". And there" if summary else "There"
        summary += "%s are decrease in costs on: '%s'" % (start, "', '".join(diff_range.decreased_fields))
    return summary or NO_CHANGE_SUMMARY


def diff(current: Cost, previous: Cost) -> CostDiff:
    """Difference between the monthly totals of two costs."""
    diff_range = subtract(current.monthly_total(), previous.monthly_total())
    return CostDiff(
        summary=build_summary(diff_range),
        current=current,
        previous=previous,
        monthly_diff_range=diff_range,
    )
