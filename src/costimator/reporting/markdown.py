"""
Cost Reports
Markdown tables and JSON price diffs of estimated costs
"""

import math
from typing import Any, Dict, List, Optional, Sequence

from costimator.models.cost_models import COST_FIELDS, Cost, CostDiff, DiffCostRange

UP_ARROW = "&#8593;"
DOWN_ARROW = "&#8595;"
NOT_AVAILABLE = "N/A"


def bold(value: str) -> str:
    return f"**{value}**"


def currency(value: float) -> str:
    """Format as USD, e.g. -$1,234.56."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def currency_diff(value: float) -> str:
    if value > 0:
        return f"**+{currency(value)} ({UP_ARROW})**"
    if value < 0:
        return f"{currency(value)} ({DOWN_ARROW})"
    return " "


def percentage_diff(percentage: Optional[float]) -> str:
    if percentage is None:
        return NOT_AVAILABLE
    formatted = f"{percentage:.2f}%"
    if percentage > 0:
        return f"**+{formatted} ({UP_ARROW})**"
    if percentage < 0:
        return f"{formatted} ({DOWN_ARROW})"
    return " "


def markdown_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Render a Markdown table, first column left aligned and the others right aligned."""
    widths = [len(header) for header in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def render(cells: Sequence[str]) -> str:
        padded = [cell.ljust(widths[0]) if i == 0 else cell.rjust(widths[i]) for i, cell in enumerate(cells)]
        return "| " + " | ".join(padded) + " |"

    separator = ["-" * widths[0]] + ["-" * (width - 1) + ":" for width in widths[1:]]
    lines = [render(headers), "|-" + "-|-".join(separator) + "-|"]
    lines.extend(render(row) for row in rows)
    return "\n".join(lines) + "\n"


def cost_to_markdown(cost: Cost) -> str:
    """Table of each kind's monthly range plus a bold total row."""
    rows: List[List[str]] = []
    for monthly_range in cost.monthly_ranges:
        rows.append([monthly_range.kind] + [currency(getattr(monthly_range, name)) for name in COST_FIELDS])

    total = cost.monthly_total()
    rows.append([bold("TOTAL")] + [bold(currency(getattr(total, name))) for name in COST_FIELDS])

    headers = ["Kind"] + [f"{label} (USD)" for label in COST_FIELDS.values()]
    return markdown_table(headers, rows)


def diff_range_to_markdown(diff_range: DiffCostRange) -> str:
    rows = []
    for name, label in COST_FIELDS.items():
        rows.append([
            bold(label),
            currency(getattr(diff_range.previous, name)),
            currency(getattr(diff_range.current, name)),
            currency_diff(getattr(diff_range.diff_value, name)),
            percentage_diff(getattr(diff_range.diff_percentage, name)),
        ])
    headers = ["Cost Variation", "Previous (USD)", "Current (USD)", "Difference (USD)", "Difference (%)"]
    return markdown_table(headers, rows)


def diff_to_markdown(cost_diff: CostDiff) -> str:
    previous = f"## Previous Monthly Cost\n\n{cost_to_markdown(cost_diff.previous)}"
    current = f"## Current Monthly Cost\n\n{cost_to_markdown(cost_diff.current)}"
    difference = diff_range_to_markdown(cost_diff.monthly_diff_range)
    total = f"## Difference in Costs\n\n**Summary:** {cost_diff.summary}\n\n{difference}"
    return f"{previous}\n\n{current}\n\n{total}"


def _floor_cents(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return math.floor(value * 100) / 100


def diff_to_price_diff(cost_diff: CostDiff) -> Dict[str, Any]:
    """JSON friendly summary of a cost difference."""
    diff_range = cost_diff.monthly_diff_range
    return {
        "summary": {
            "possiblyCostIncrease": cost_diff.cost_increased,
            "classification": cost_diff.classification,
            "maxDiff": {
                "usd": _floor_cents(diff_range.diff_value.max_value()),
                "perc": _floor_cents(diff_range.diff_percentage.max_value()),
            },
        },
        "details": {
            "usd": diff_range.diff_value.model_dump(),
            "perc": diff_range.diff_percentage.model_dump(),
        },
    }


def cost_to_dict(cost: Cost) -> Dict[str, Any]:
    """JSON friendly cost with its monthly total."""
    return {
        "monthlyRanges": [monthly_range.model_dump() for monthly_range in cost.monthly_ranges],
        "monthlyTotal": cost.monthly_total().model_dump(),
    }
