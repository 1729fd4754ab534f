"""
End to end tests of the estimation engine
"""
import pytest

from costimator.estimation import calculator
from costimator.estimation.estimator import diff, estimate_cost
from costimator.models.resource_models import FixedReplicaWorkload, VolumeClaim, ResourceAmount


class TestEstimateCost:
    """Tests for estimating decoded manifests"""

    def test_manifests(self, decoder, manifests_yaml, catalog, resource_config):
        batch = decoder.decode(manifests_yaml)
        cost = estimate_cost(batch.workloads, batch.scaling_policies, catalog, resource_config)

        assert [r.kind for r in cost.monthly_ranges] == ["Deployment", "DaemonSet"]

        deployment, daemon_set = cost.monthly_ranges
        per_replica = 0.25 * 10.0 + 67108864 * 2e-9
        assert deployment.min_requested == pytest.approx(2 * per_replica)
        assert deployment.max_requested == pytest.approx(6 * per_replica)
        assert deployment.hpa_buffer == pytest.approx(3 * per_replica)
        assert deployment.max_limited == pytest.approx(6 * (10.0 + 64000000 * 2e-9))

        per_node = 0.25 * 10.0 + 64000000 * 2e-9
        assert daemon_set.min_requested == pytest.approx(3 * per_node)
        assert daemon_set.max_limited == pytest.approx(9 * per_node)

    def test_grand_total_is_sum_of_kinds(self, deployment, daemon_set, catalog, resource_config):
        replica_set = FixedReplicaWorkload(kind="ReplicaSet", identity="apps/v1|ReplicaSet|default|rs",
                                           containers=deployment.containers)
        cost = estimate_cost([deployment, daemon_set, replica_set], [], catalog, resource_config)
        total = cost.monthly_total()

        assert [r.kind for r in cost.monthly_ranges] == ["Deployment", "ReplicaSet", "DaemonSet"]
        assert total.min_requested == pytest.approx(sum(r.min_requested for r in cost.monthly_ranges))
        assert total.max_limited == pytest.approx(sum(r.max_limited for r in cost.monthly_ranges))

    def test_same_kind_is_summed(self, deployment, catalog, resource_config):
        other = deployment.model_copy(update={"identity": "apps/v1|Deployment|default|other"})
        cost = estimate_cost([deployment, other], [], catalog, resource_config)

        assert len(cost.monthly_ranges) == 1
        assert cost.monthly_ranges[0].min_requested == pytest.approx(48.0)

    def test_volume_claims_come_last(self, deployment, catalog, resource_config):
        claim = VolumeClaim(identity="v1|PersistentVolumeClaim|default|data",
                            requests=ResourceAmount(storage_bytes=1000000000),
                            limits=ResourceAmount(storage_bytes=1000000000))
        cost = estimate_cost([deployment], [], catalog, resource_config, [claim])

        assert [r.kind for r in cost.monthly_ranges] == ["Deployment", "PersistentVolumeClaim"]
        assert cost.monthly_ranges[1].min_requested == pytest.approx(0.04)

    def test_bound_policy_does_not_leak_into_later_estimates(self, deployment, scaling_policy, catalog,
                                                             resource_config):
        scaled = estimate_cost([deployment], [scaling_policy], catalog, resource_config)
        fixed = estimate_cost([deployment], [], catalog, resource_config)

        assert scaled.monthly_ranges[0].min_requested == pytest.approx(120.0)
        assert fixed.monthly_ranges[0].min_requested == pytest.approx(24.0)
        assert not deployment.has_scaling_policy

    def test_policy_already_on_workload_is_replaced(self, deployment, scaling_policy, catalog, resource_config):
        deployment.bind_scaling_policy(scaling_policy)
        cost = estimate_cost([deployment], [], catalog, resource_config)

        assert cost.monthly_ranges[0].min_requested == pytest.approx(24.0)
        assert deployment.scaling_policy == scaling_policy

    def test_containers_are_totalled_once_per_workload(self, deployment, daemon_set, catalog, resource_config,
                                                       monkeypatch):
        calls = []
        original = calculator.total_containers

        def counting_totals(containers):
            calls.append(containers)
            return original(containers)

        monkeypatch.setattr(calculator, "total_containers", counting_totals)
        estimate_cost([deployment, daemon_set], [], catalog, resource_config)

        assert len(calls) == 2

    def test_nothing_to_estimate(self, catalog, resource_config):
        cost = estimate_cost([], [], catalog, resource_config)

        assert cost.monthly_ranges == []
        assert cost.monthly_total().max_value() == 0


class TestDiff:
    """Tests for comparing two estimations"""

    def test_scaling_up_increases_cost(self, decoder, deployment_yaml, catalog, resource_config):
        previous_batch = decoder.decode(deployment_yaml)
        current_batch = decoder.decode(deployment_yaml.replace("replicas: 2", "replicas: 4"))

        previous = estimate_cost(previous_batch.workloads, [], catalog, resource_config)
        current = estimate_cost(current_batch.workloads, [], catalog, resource_config)
        cost_diff = diff(current, previous)

        assert cost_diff.classification == "increased"
        assert cost_diff.monthly_diff_range.diff_percentage.min_requested == pytest.approx(100.0)
