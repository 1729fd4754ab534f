"""
Cost Range Calculator
Converts workload totals, replica policy and unit prices into monthly cost ranges
"""

from typing import Optional
import structlog

from costimator.core.utils import format_bytes, format_cpu
from costimator.estimation.aggregator import ContainerTotals, total_containers
from costimator.estimation.pricing import PriceCatalog
from costimator.models.cost_models import CostRange
from costimator.models.resource_models import (
    FixedReplicaWorkload,
    NodeBoundWorkload,
    ScalingPolicy,
    STORAGE_CLASS_STANDARD,
    VolumeClaim,
    WorkloadKind,
)

logger = structlog.get_logger(__name__)


def post_process_cost(cost: CostRange) -> CostRange:
    """Make sure limits never price out cheaper than requests."""
    return cost.model_copy(update={
        "min_limited": max(cost.min_limited, cost.min_requested),
        "max_limited": max(cost.max_limited, cost.max_requested),
    })


def hpa_buffer_replicas(policy: ScalingPolicy) -> float:
    """Effective replica count assuming headroom proportional to the target CPU gap."""
    min_replicas = float(policy.min_replicas)
    if policy.target_cpu_utilization_percent > 0:
        buffer = (100 - policy.target_cpu_utilization_percent) / 100
        return min_replicas + (buffer * min_replicas)
    return min_replicas


class CostRangeCalculator:
    """Estimates monthly cost ranges for workloads and volume claims."""

    def __init__(self, catalog: PriceCatalog):
        self.catalog = catalog
        self.cpu_monthly_price = float(catalog.cpu_monthly_price())
        self.memory_monthly_price = float(catalog.memory_monthly_price())
        self.logger = logger.bind(component="cost_range_calculator")

    def _requested(self, count: float, totals: ContainerTotals) -> float:
        return (count * totals.cpu_request_cores * self.cpu_monthly_price) + \
            (count * totals.memory_request_bytes * self.memory_monthly_price)

    def _limited(self, count: float, totals: ContainerTotals) -> float:
        return (count * totals.cpu_limit_cores * self.cpu_monthly_price) + \
            (count * totals.memory_limit_bytes * self.memory_monthly_price)

    def _log_estimate(self, identity: str, totals: ContainerTotals, cost: CostRange) -> None:
        self.logger.debug(
            "Estimated workload cost",
            workload=identity,
            cpu_requested=format_cpu(totals.cpu_request_cores * 1000),
            memory_requested=format_bytes(totals.memory_request_bytes),
            min_requested=cost.min_requested,
            max_limited=cost.max_limited
        )

    def estimate_range(self, kind: str, totals: ContainerTotals, count: int,
                       policy: Optional[ScalingPolicy] = None) -> CostRange:
        """Cost range at a fixed count, or within the scaling policy bounds when one is given."""
        if policy is None:
            requested = self._requested(float(count), totals)
            limited = self._limited(float(count), totals)
            cost = CostRange(
                kind=kind,
                min_requested=requested,
                max_requested=requested,
                hpa_buffer=requested,
                min_limited=limited,
                max_limited=limited,
            )
        else:
            min_replicas = float(policy.min_replicas)
            max_replicas = float(policy.max_replicas)
            cost = CostRange(
                kind=kind,
                min_requested=self._requested(min_replicas, totals),
                max_requested=self._requested(max_replicas, totals),
                hpa_buffer=self._requested(hpa_buffer_replicas(policy), totals),
                min_limited=self._limited(min_replicas, totals),
                max_limited=self._limited(max_replicas, totals),
            )

        return post_process_cost(cost)

    def estimate_fixed_replica_cost(self, workload: FixedReplicaWorkload) -> CostRange:
        totals = total_containers(workload.containers)
        cost = self.estimate_range(workload.kind, totals, workload.replicas, workload.scaling_policy)
        self._log_estimate(workload.identity, totals, cost)
        return cost

    def estimate_node_bound_cost(self, workload: NodeBoundWorkload, nodes_count: int) -> CostRange:
        """DaemonSets run one replica per node; their own node count wins over nodes_count."""
        count = workload.node_count if workload.node_count is not None else nodes_count
        totals = total_containers(workload.containers)
        cost = self.estimate_range(workload.kind, totals, count)
        self._log_estimate(workload.identity, totals, cost)
        return cost

    def estimate_volume_claim_cost(self, claim: VolumeClaim) -> CostRange:
        storage_monthly_price = float(self.catalog.pd_standard_monthly_price())
        if claim.storage_class != STORAGE_CLASS_STANDARD:
            self.logger.info(
                "StorageClass estimation not implemented, using standard persistent disk instead",
                storage_class=claim.storage_class,
                claim=claim.identity
            )

        requested = float(claim.requests.storage_bytes) * storage_monthly_price
        limited = float(claim.limits.storage_bytes) * storage_monthly_price
        cost = CostRange(
            kind=WorkloadKind.VOLUME_CLAIM.value,
            min_requested=requested,
            max_requested=requested,
            hpa_buffer=requested,
            min_limited=limited,
            max_limited=limited,
        )
        return post_process_cost(cost)
