from .pricing import PriceCatalog, StaticPriceCatalog
from .defaulting import resolve_container_resources, resolve_dimension, resolve_storage
from .aggregator import ContainerTotals, total_containers
from .calculator import CostRangeCalculator, post_process_cost
from .binder import ManifestCostBinder
from .aggregate import percentage_delta, subtract, sum_cost_ranges
from .estimator import diff, estimate_cost

__all__ = [
    "PriceCatalog",
    "StaticPriceCatalog",
    "resolve_container_resources",
    "resolve_dimension",
    "resolve_storage",
    "ContainerTotals",
    "total_containers",
    "CostRangeCalculator",
    "post_process_cost",
    "ManifestCostBinder",
    "percentage_delta",
    "subtract",
    "sum_cost_ranges",
    "diff",
    "estimate_cost",
]
