"""
Cost Estimator
Entry points of the estimation engine: estimate a cost from normalized entities and diff two costs
"""

from typing import Dict, List, Sequence
import structlog

from costimator.estimation.aggregate import diff as diff_costs
from costimator.estimation.aggregate import sum_cost_ranges
from costimator.estimation.binder import ManifestCostBinder
from costimator.estimation.calculator import CostRangeCalculator
from costimator.estimation.pricing import PriceCatalog
from costimator.models.cost_models import Cost, CostDiff, CostRange
from costimator.models.resource_models import (
    FixedReplicaWorkload,
    ScalingPolicy,
    VolumeClaim,
    Workload,
    WorkloadKind,
    WorkloadResourceConfig,
)

logger = structlog.get_logger(__name__)

# Order of kinds in a Cost
KIND_ORDER = [
    WorkloadKind.DEPLOYMENT.value,
    WorkloadKind.REPLICA_SET.value,
    WorkloadKind.STATEFUL_SET.value,
    WorkloadKind.DAEMON_SET.value,
    WorkloadKind.VOLUME_CLAIM.value,
]


def estimate_cost(workloads: Sequence[Workload],
                  policies: Sequence[ScalingPolicy],
                  catalog: PriceCatalog,
                  config: WorkloadResourceConfig,
                  volume_claims: Sequence[VolumeClaim] = ()) -> Cost:
    """Estimate the monthly cost range of each kind.

    Scaling policies are bound to copies of the workloads, so the caller's
    workloads are never modified and only the given policies apply. Kinds
    without any entity are left out of the result.
    """
    workloads = [
        workload.model_copy(update={"scaling_policy": None}) if isinstance(workload, FixedReplicaWorkload)
        else workload
        for workload in workloads
    ]
    ManifestCostBinder().bind(workloads, policies)
    calculator = CostRangeCalculator(catalog)

    ranges_by_kind: Dict[str, List[CostRange]] = {}
    for workload in workloads:
        if isinstance(workload, FixedReplicaWorkload):
            cost_range = calculator.estimate_fixed_replica_cost(workload)
        else:
            cost_range = calculator.estimate_node_bound_cost(workload, config.nodes_count)
        ranges_by_kind.setdefault(workload.kind, []).append(cost_range)

    for claim in volume_claims:
        cost_range = calculator.estimate_volume_claim_cost(claim)
        ranges_by_kind.setdefault(cost_range.kind, []).append(cost_range)

    kinds = [kind for kind in KIND_ORDER if kind in ranges_by_kind]
    kinds += sorted(kind for kind in ranges_by_kind if kind not in KIND_ORDER)

    cost = Cost(monthly_ranges=[sum_cost_ranges(kind, ranges_by_kind[kind]) for kind in kinds])
    logger.info(
        "Cost estimation completed",
        workloads=len(workloads),
        volume_claims=len(volume_claims),
        kinds=kinds
    )
    return cost


def diff(current: Cost, previous: Cost) -> CostDiff:
    """Difference between a current and a previous cost."""
    cost_diff = diff_costs(current, previous)
    logger.info("Cost difference computed", classification=cost_diff.classification)
    return cost_diff
