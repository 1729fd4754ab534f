"""Binding of autoscaler policies to the workloads they target."""

from typing import Dict, List, Optional, Sequence
import structlog

from costimator.models.resource_models import (
    FixedReplicaWorkload,
    ScalingPolicy,
    Workload,
    relaxed_identity,
)

logger = structlog.get_logger(__name__)


class ManifestCostBinder:
    """Attaches each scaling policy to at most one horizontally scalable workload."""

    def __init__(self):
        self.logger = logger.bind(component="manifest_cost_binder")

    def _index(self, workloads: Sequence[Workload]):
        by_identity: Dict[str, FixedReplicaWorkload] = {}
        by_relaxed_identity: Dict[str, FixedReplicaWorkload] = {}
        for workload in workloads:
            # DaemonSets can't be autoscaled
            if not isinstance(workload, FixedReplicaWorkload):
                continue
            by_identity[workload.identity] = workload
            by_relaxed_identity[workload.relaxed_identity] = workload
        return by_identity, by_relaxed_identity

    def find_target(self, policy: ScalingPolicy, by_identity: Dict[str, FixedReplicaWorkload],
                    by_relaxed_identity: Dict[str, FixedReplicaWorkload]) -> Optional[FixedReplicaWorkload]:
        """Match the full identity first, then the identity without API version."""
        workload = by_identity.get(policy.target_identity)
        if workload is None:
            workload = by_relaxed_identity.get(relaxed_identity(policy.target_identity))
        return workload

    def bind(self, workloads: Sequence[Workload], policies: Sequence[ScalingPolicy]) -> List[ScalingPolicy]:
        """Bind policies to workloads and return the policies that matched nothing.

        When several policies target the same workload the last one in input
        order wins.
        """
        by_identity, by_relaxed_identity = self._index(workloads)

        winners: Dict[str, ScalingPolicy] = {}
        targets: Dict[str, FixedReplicaWorkload] = {}
        unmatched: List[ScalingPolicy] = []

        for policy in policies:
            workload = self.find_target(policy, by_identity, by_relaxed_identity)
            if workload is None:
                self.logger.info(
                    "Scaling policy matches no workload, ignoring it",
                    policy=policy.identity,
                    target=policy.target_identity
                )
                unmatched.append(policy)
                continue

            previous = winners.get(workload.identity)
            if previous is not None:
                self.logger.warning(
                    "Multiple scaling policies target the same workload, last one wins",
                    workload=workload.identity,
                    replaced=previous.identity,
                    policy=policy.identity
                )
            winners[workload.identity] = policy
            targets[workload.identity] = workload

        for identity, policy in winners.items():
            targets[identity].bind_scaling_policy(policy)
            self.logger.debug("Bound scaling policy", workload=identity, policy=policy.identity)

        return unmatched
