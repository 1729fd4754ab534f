"""Cost range models produced by the estimator."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional


MONTHLY_TOTAL_KIND = "MonthlyTotal"

# Field name -> human readable column label, in report order
COST_FIELDS: Dict[str, str] = {
    "min_requested": "MIN REQUESTED",
    "hpa_buffer": "MIN REQ + HPA CPU BUFFER",
    "max_requested": "MAX REQUESTED",
    "min_limited": "MIN LIMITED",
    "max_limited": "MAX LIMITED",
}


class CostRange(BaseModel):
    """Estimated monthly cost range (USD) for one workload, one kind or a total."""

    kind: str
    min_requested: float = 0.0
    max_requested: float = 0.0
    hpa_buffer: float = Field(0.0, description="Currently only supports CPU target utilization")
    min_limited: float = 0.0
    max_limited: float = 0.0

    def add(self, other: "CostRange") -> "CostRange":
        """Field-wise sum, keeping this range's kind label."""
        values = {name: getattr(self, name) + getattr(other, name) for name in COST_FIELDS}
        return CostRange(kind=self.kind, **values)

    def max_value(self) -> float:
        return max(getattr(self, name) for name in COST_FIELDS)


class Cost(BaseModel):
    """Cost ranges grouped by kind."""

    monthly_ranges: List[CostRange] = Field(default_factory=list)

    def monthly_total(self) -> CostRange:
        """Sum of all monthly ranges."""
        total = CostRange(kind=MONTHLY_TOTAL_KIND)
        for monthly_range in self.monthly_ranges:
            total = total.add(monthly_range)
        return total


class PercentageRange(BaseModel):
    """Per-field percentage deltas. None means undefined (previous value was zero)."""

    kind: str
    min_requested: Optional[float] = None
    max_requested: Optional[float] = None
    hpa_buffer: Optional[float] = None
    min_limited: Optional[float] = None
    max_limited: Optional[float] = None

    def max_value(self) -> Optional[float]:
        defined = [getattr(self, name) for name in COST_FIELDS if getattr(self, name) is not None]
        return max(defined) if defined else None


class DiffCostRange(BaseModel):
    """Difference between two cost ranges."""

    kind: str
    current: CostRange
    previous: CostRange
    diff_value: CostRange
    diff_percentage: PercentageRange
    increased_fields: List[str] = Field(default_factory=list)
    decreased_fields: List[str] = Field(default_factory=list)


class CostDiff(BaseModel):
    """Difference between the totals of two costs."""

    summary: str
    current: Cost
    previous: Cost
    monthly_diff_range: DiffCostRange

    @property
    def cost_increased(self) -> bool:
        return len(self.monthly_diff_range.increased_fields) > 0

    @property
    def cost_decreased(self) -> bool:
        return len(self.monthly_diff_range.decreased_fields) > 0

    @property
    def classification(self) -> str:
        """One of 'increased', 'decreased', 'mixed' or 'no change'."""
        if self.cost_increased and self.cost_decreased:
            return "mixed"
        if self.cost_increased:
            return "increased"
        if self.cost_decreased:
            return "decreased"
        return "no change"
