"""
Normalized Resource Models
Version-independent representation of the Kubernetes objects the estimator prices
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Annotated, List, Literal, Optional, Union
from enum import Enum


DEFAULT_NAMESPACE = "default"
STORAGE_CLASS_STANDARD = "standard"


class WorkloadKind(str, Enum):
    """Supported Kubernetes kinds."""
    HPA = "HorizontalPodAutoscaler"
    DEPLOYMENT = "Deployment"
    REPLICA_SET = "ReplicaSet"
    STATEFUL_SET = "StatefulSet"
    DAEMON_SET = "DaemonSet"
    VOLUME_CLAIM = "PersistentVolumeClaim"


SUPPORTED_KINDS = [kind.value for kind in WorkloadKind]


class MachineFamily(str, Enum):
    """GCE machine families with known billing SKU descriptions."""
    E2 = "E2"
    N1 = "N1"
    N2 = "N2"
    N2D = "N2D"


def build_identity(api_version: str, kind: str, namespace: Optional[str], name: str) -> str:
    """Build the composite identity key 'apiVersion|kind|namespace|name'."""
    return f"{api_version or ''}|{kind}|{namespace or DEFAULT_NAMESPACE}|{name}"


def relaxed_identity(identity: str) -> str:
    """Drop the API version from an identity key, keeping the leading separator."""
    index = identity.find("|")
    if index < 0:
        return identity
    return identity[index:]


class ResourceAmount(BaseModel):
    """CPU in millicores, memory and storage in bytes."""

    model_config = ConfigDict(frozen=True)

    cpu_millicores: int = Field(0, ge=0, description="CPU in millicores (1000 = 1 vCPU)")
    memory_bytes: int = Field(0, ge=0, description="Memory in bytes")
    storage_bytes: int = Field(0, ge=0, description="Storage in bytes")


class DeclaredResources(BaseModel):
    """Resource values as declared in a manifest. None means omitted."""

    model_config = ConfigDict(frozen=True)

    cpu_millicores: Optional[int] = None
    memory_bytes: Optional[int] = None


class ContainerResources(BaseModel):
    """Effective requests and limits of one container after defaulting."""

    model_config = ConfigDict(frozen=True)

    requests: ResourceAmount = Field(default_factory=ResourceAmount)
    limits: ResourceAmount = Field(default_factory=ResourceAmount)


class WorkloadResourceConfig(BaseModel):
    """Resolved defaults used when manifests omit information."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    machine_family: MachineFamily = MachineFamily.E2
    region: str = "us-central1"
    default_cpu_millicores: int = Field(250, ge=0)
    default_memory_bytes: int = Field(64000000, ge=0)
    unbounded_limit_buffer_percent: int = Field(200, ge=0)
    default_storage_bytes: int = Field(0, ge=0)
    nodes_count: int = Field(3, ge=0)


class ScalingPolicy(BaseModel):
    """Simplified HorizontalPodAutoscaler, independent of its API version."""

    identity: str = ""
    target_identity: str
    min_replicas: int = Field(1, ge=1)
    max_replicas: int = 0
    target_cpu_utilization_percent: int = Field(0, ge=0, description="0 means unset")


class FixedReplicaWorkload(BaseModel):
    """Deployment, ReplicaSet or StatefulSet: runs a declared number of replicas."""

    workload_type: Literal["fixed_replica"] = "fixed_replica"
    kind: str
    identity: str
    replicas: int = Field(1, ge=0)
    containers: List[ContainerResources] = Field(default_factory=list)
    scaling_policy: Optional[ScalingPolicy] = None

    @property
    def relaxed_identity(self) -> str:
        return relaxed_identity(self.identity)

    @property
    def has_scaling_policy(self) -> bool:
        return self.scaling_policy is not None

    def bind_scaling_policy(self, policy: ScalingPolicy) -> None:
        self.scaling_policy = policy


class NodeBoundWorkload(BaseModel):
    """DaemonSet: runs one replica per cluster node."""

    workload_type: Literal["node_bound"] = "node_bound"
    kind: str = WorkloadKind.DAEMON_SET.value
    identity: str
    node_count: Optional[int] = Field(None, ge=0, description="None means use the configured nodes count")
    containers: List[ContainerResources] = Field(default_factory=list)

    @property
    def relaxed_identity(self) -> str:
        return relaxed_identity(self.identity)


Workload = Annotated[
    Union[FixedReplicaWorkload, NodeBoundWorkload],
    Field(discriminator="workload_type")
]


class VolumeClaim(BaseModel):
    """Simplified PersistentVolumeClaim."""

    model_config = ConfigDict(frozen=True)

    identity: str
    storage_class: str = STORAGE_CLASS_STANDARD
    requests: ResourceAmount = Field(default_factory=ResourceAmount)
    limits: ResourceAmount = Field(default_factory=ResourceAmount)
