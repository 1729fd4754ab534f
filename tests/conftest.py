"""
Test fixtures and configuration for pytest
"""
import pytest

from costimator.estimation.pricing import StaticPriceCatalog
from costimator.mappers.manifest_mapper import ManifestDecoder
from costimator.models.resource_models import (
    ContainerResources,
    FixedReplicaWorkload,
    NodeBoundWorkload,
    ResourceAmount,
    ScalingPolicy,
    WorkloadResourceConfig,
)


@pytest.fixture
def resource_config():
    """Built-in defaults: 250m CPU, 64MB memory, 200% buffer, 3 nodes"""
    return WorkloadResourceConfig()


@pytest.fixture
def catalog():
    """Round prices: $10 per core, $2 per GB of memory, $0.04 per GB of disk"""
    return StaticPriceCatalog(cpu_price=10.0, memory_price=2e-9, pd_standard_price=4e-11)


@pytest.fixture
def decoder(resource_config):
    return ManifestDecoder(resource_config)


@pytest.fixture
def container():
    """One container requesting 1 core and 1GB, limited to 2 cores and 2GB"""
    return ContainerResources(
        requests=ResourceAmount(cpu_millicores=1000, memory_bytes=1000000000),
        limits=ResourceAmount(cpu_millicores=2000, memory_bytes=2000000000),
    )


@pytest.fixture
def deployment(container):
    return FixedReplicaWorkload(
        kind="Deployment",
        identity="apps/v1|Deployment|default|api",
        replicas=2,
        containers=[container],
    )


@pytest.fixture
def daemon_set(container):
    return NodeBoundWorkload(
        identity="apps/v1|DaemonSet|kube-system|agent",
        containers=[container],
    )


@pytest.fixture
def scaling_policy():
    return ScalingPolicy(
        identity="autoscaling/v2|HorizontalPodAutoscaler|default|api",
        target_identity="apps/v1|Deployment|default|api",
        min_replicas=10,
        max_replicas=20,
        target_cpu_utilization_percent=60,
    )


DEPLOYMENT_YAML = """
apiVersion: apps/v1
kind: Deployment
metadata:
  name: api
spec:
  replicas: 2
  template:
    spec:
      initContainers:
      - name: migrate
        resources:
          requests:
            cpu: "4"
            memory: 4Gi
      containers:
      - name: api
        resources:
          requests:
            cpu: 250m
            memory: 64Mi
          limits:
            cpu: "1"
            memory: 64M
"""

HPA_YAML = """
apiVersion: autoscaling/v2
kind: HorizontalPodAutoscaler
metadata:
  name: api
spec:
  scaleTargetRef:
    apiVersion: apps/v1
    kind: Deployment
    name: api
  minReplicas: 2
  maxReplicas: 6
  metrics:
  - type: Resource
    resource:
      name: cpu
      target:
        type: Utilization
        averageUtilization: 50
"""

DAEMON_SET_YAML = """
apiVersion: apps/v1
kind: DaemonSet
metadata:
  name: agent
  namespace: kube-system
spec:
  template:
    spec:
      containers:
      - name: agent
"""


@pytest.fixture
def deployment_yaml():
    return DEPLOYMENT_YAML


@pytest.fixture
def manifests_yaml():
    """Deployment with an autoscaler and a DaemonSet in one multi-document stream"""
    return "---".join([DEPLOYMENT_YAML, HPA_YAML, DAEMON_SET_YAML])


@pytest.fixture
def manifests_dir(tmp_path, manifests_yaml):
    folder = tmp_path / "manifests"
    folder.mkdir()
    (folder / "app.yaml").write_text(manifests_yaml)
    return folder


@pytest.fixture
def price_catalog_file(tmp_path):
    path = tmp_path / "prices.yaml"
    path.write_text(
        "cpuMonthlyPrice: 10.0\n"
        "memoryMonthlyPrice: 0.000000002\n"
        "pdStandardMonthlyPrice: 0.00000000004\n"
    )
    return path
