"""
Tests for binding autoscalers to workloads
"""
from costimator.estimation.binder import ManifestCostBinder
from costimator.models.resource_models import FixedReplicaWorkload, ScalingPolicy


def _policy(name, target, min_replicas=1, max_replicas=5):
    return ScalingPolicy(
        identity=f"autoscaling/v1|HorizontalPodAutoscaler|default|{name}",
        target_identity=target,
        min_replicas=min_replicas,
        max_replicas=max_replicas,
    )


class TestManifestCostBinder:
    """Tests for scaling policy matching"""

    def test_full_identity_match(self, deployment, scaling_policy):
        unmatched = ManifestCostBinder().bind([deployment], [scaling_policy])

        assert unmatched == []
        assert deployment.scaling_policy == scaling_policy

    def test_match_ignoring_api_version(self, deployment):
        policy = _policy("api", "extensions/v1beta1|Deployment|default|api")
        ManifestCostBinder().bind([deployment], [policy])

        assert deployment.has_scaling_policy
        assert deployment.scaling_policy.identity == policy.identity

    def test_kind_and_namespace_must_match(self, deployment):
        policies = [
            _policy("rs", "apps/v1|ReplicaSet|default|api"),
            _policy("ns", "apps/v1|Deployment|other|api"),
        ]
        unmatched = ManifestCostBinder().bind([deployment], policies)

        assert len(unmatched) == 2
        assert not deployment.has_scaling_policy

    def test_last_policy_wins(self, deployment):
        first = _policy("first", deployment.identity, max_replicas=5)
        second = _policy("second", deployment.identity, max_replicas=9)
        unmatched = ManifestCostBinder().bind([deployment], [first, second])

        assert unmatched == []
        assert deployment.scaling_policy.max_replicas == 9

    def test_daemon_sets_are_never_bound(self, daemon_set):
        policy = _policy("agent", daemon_set.identity)
        unmatched = ManifestCostBinder().bind([daemon_set], [policy])

        assert unmatched == [policy]

    def test_unmatched_policy_is_returned(self, deployment):
        policy = _policy("orphan", "apps/v1|Deployment|default|missing")
        unmatched = ManifestCostBinder().bind([deployment], [policy])

        assert unmatched == [policy]
        assert not deployment.has_scaling_policy

    def test_each_policy_binds_one_workload(self):
        workloads = [
            FixedReplicaWorkload(kind="Deployment", identity="apps/v1|Deployment|default|a"),
            FixedReplicaWorkload(kind="Deployment", identity="apps/v1|Deployment|default|b"),
        ]
        ManifestCostBinder().bind(workloads, [_policy("a", "apps/v1|Deployment|default|a")])

        assert workloads[0].has_scaling_policy
        assert not workloads[1].has_scaling_policy
