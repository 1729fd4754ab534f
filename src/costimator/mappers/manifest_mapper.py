"""
Manifest Decoder
Maps versioned Kubernetes manifests to the normalized models used by the estimator
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union
from pydantic import BaseModel, Field
import structlog
import yaml

from costimator.core.exceptions import DecodeException
from costimator.core.utils import quantity_to_millis, quantity_to_value, safe_get
from costimator.estimation.defaulting import resolve_container_resources, resolve_storage
from costimator.models.resource_models import (
    ContainerResources,
    DeclaredResources,
    FixedReplicaWorkload,
    NodeBoundWorkload,
    ResourceAmount,
    ScalingPolicy,
    STORAGE_CLASS_STANDARD,
    SUPPORTED_KINDS,
    VolumeClaim,
    Workload,
    WorkloadKind,
    WorkloadResourceConfig,
    build_identity,
)

logger = structlog.get_logger(__name__)

Manifest = Dict[str, Any]
DecodedObject = Union[FixedReplicaWorkload, NodeBoundWorkload, ScalingPolicy, VolumeClaim]

LIST_KIND = "List"


class ManifestBatch(BaseModel):
    """Normalized entities decoded from one or more manifests."""

    workloads: List[Workload] = Field(default_factory=list)
    scaling_policies: List[ScalingPolicy] = Field(default_factory=list)
    volume_claims: List[VolumeClaim] = Field(default_factory=list)

    def add(self, obj: DecodedObject) -> None:
        if isinstance(obj, ScalingPolicy):
            self.scaling_policies.append(obj)
        elif isinstance(obj, VolumeClaim):
            self.volume_claims.append(obj)
        else:
            self.workloads.append(obj)

    def extend(self, other: "ManifestBatch") -> None:
        self.workloads.extend(other.workloads)
        self.scaling_policies.extend(other.scaling_policies)
        self.volume_claims.extend(other.volume_claims)

    @property
    def is_empty(self) -> bool:
        return not (self.workloads or self.scaling_policies or self.volume_claims)


class ManifestDecoder:
    """Decodes YAML manifests into normalized entities.

    Each supported (apiVersion, kind) pair has an adapter; a supported kind
    with an unknown apiVersion is a decode error, an unsupported kind is
    skipped.
    """

    def __init__(self, config: WorkloadResourceConfig):
        self.config = config
        self.logger = logger.bind(component="manifest_decoder")

        apps_versions = ["apps/v1", "apps/v1beta1", "apps/v1beta2"]
        self._adapters: Dict[Tuple[str, str], Callable[[Manifest], List[DecodedObject]]] = {
            ("autoscaling/v1", WorkloadKind.HPA.value): self._build_hpa_v1,
            ("autoscaling/v2beta1", WorkloadKind.HPA.value): self._build_hpa_v2beta1,
            ("autoscaling/v2beta2", WorkloadKind.HPA.value): self._build_hpa_v2,
            ("autoscaling/v2", WorkloadKind.HPA.value): self._build_hpa_v2,
            ("v1", WorkloadKind.VOLUME_CLAIM.value): self._build_volume_claim_v1,
        }
        for version in apps_versions + ["extensions/v1beta1"]:
            self._adapters[(version, WorkloadKind.DEPLOYMENT.value)] = self._build_fixed_replica
            self._adapters[(version, WorkloadKind.REPLICA_SET.value)] = self._build_fixed_replica
            self._adapters[(version, WorkloadKind.DAEMON_SET.value)] = self._build_daemon_set
        for version in apps_versions:
            self._adapters[(version, WorkloadKind.STATEFUL_SET.value)] = self._build_stateful_set

    def decode(self, data: Union[str, bytes]) -> ManifestBatch:
        """Decode every document of a (multi-document) YAML stream."""
        batch = ManifestBatch()
        for manifest in self._load_documents(data):
            for obj in self.decode_manifest(manifest):
                batch.add(obj)
        return batch

    def decode_manifest(self, manifest: Manifest) -> List[DecodedObject]:
        """Decode one parsed manifest into zero or more entities."""
        kind = manifest.get("kind")
        api_version = manifest.get("apiVersion")

        if kind == LIST_KIND:
            objects: List[DecodedObject] = []
            for item in manifest.get("items") or []:
                if isinstance(item, dict):
                    objects.extend(self.decode_manifest(item))
            return objects

        if kind not in SUPPORTED_KINDS:
            self.logger.debug("Skipping unsupported k8s object", api_version=api_version, kind=kind)
            return []

        adapter = self._adapters.get((api_version, kind))
        if adapter is None:
            raise DecodeException(
                f"Check if your apiVersion and kind are supported. Root cause: "
                f"no decoder registered for apiVersion '{api_version}' and kind '{kind}'",
                details={"apiVersion": api_version, "kind": kind}
            )

        try:
            return adapter(manifest)
        except (ValueError, ArithmeticError, TypeError) as e:
            raise DecodeException(
                f"Invalid {kind} '{safe_get(manifest, 'metadata.name', '')}'. Root cause: {e}",
                details={"apiVersion": api_version, "kind": kind}
            )

    def _load_documents(self, data: Union[str, bytes]) -> Iterator[Manifest]:
        try:
            documents = list(yaml.safe_load_all(data))
        except yaml.YAMLError as e:
            raise DecodeException(f"Invalid YAML. Root cause: {e}")

        for document in documents:
            if document is None:
                continue
            if not isinstance(document, dict):
                self.logger.debug("Skipping non mapping YAML document", document_type=type(document).__name__)
                continue
            yield document

    # --- identities ---

    def _identity(self, manifest: Manifest, kind: Optional[str] = None) -> str:
        return build_identity(
            manifest.get("apiVersion", ""),
            kind or manifest.get("kind", ""),
            safe_get(manifest, "metadata.namespace"),
            safe_get(manifest, "metadata.name", ""),
        )

    # --- containers ---

    def _declared(self, resources: Dict[str, Any]) -> DeclaredResources:
        cpu = resources.get("cpu")
        memory = resources.get("memory")
        return DeclaredResources(
            cpu_millicores=quantity_to_millis(cpu) if cpu is not None else None,
            memory_bytes=quantity_to_value(memory) if memory is not None else None,
        )

    def _build_containers(self, manifest: Manifest) -> List[ContainerResources]:
        """Steady state containers of the pod template. Init containers are not running cost."""
        containers = []
        for container in safe_get(manifest, "spec.template.spec.containers", []):
            resources = container.get("resources") or {}
            containers.append(resolve_container_resources(
                self._declared(resources.get("requests") or {}),
                self._declared(resources.get("limits") or {}),
                self.config,
            ))
        return containers

    # --- workloads ---

    def _replicas(self, manifest: Manifest) -> int:
        replicas = safe_get(manifest, "spec.replicas")
        return 1 if replicas is None else int(replicas)

    def _build_fixed_replica(self, manifest: Manifest) -> List[DecodedObject]:
        return [FixedReplicaWorkload(
            kind=manifest["kind"],
            identity=self._identity(manifest),
            replicas=self._replicas(manifest),
            containers=self._build_containers(manifest),
        )]

    def _build_stateful_set(self, manifest: Manifest) -> List[DecodedObject]:
        objects: List[DecodedObject] = self._build_fixed_replica(manifest)
        namespace = safe_get(manifest, "metadata.namespace")
        for template in safe_get(manifest, "spec.volumeClaimTemplates", []):
            claim_manifest = dict(template)
            claim_manifest.setdefault("metadata", {})
            if namespace and not safe_get(claim_manifest, "metadata.namespace"):
                claim_manifest["metadata"] = {**claim_manifest["metadata"], "namespace": namespace}
            objects.extend(self._build_volume_claim_v1(claim_manifest))
        return objects

    def _build_daemon_set(self, manifest: Manifest) -> List[DecodedObject]:
        return [NodeBoundWorkload(
            kind=manifest["kind"],
            identity=self._identity(manifest),
            containers=self._build_containers(manifest),
        )]

    # --- volume claims ---

    def _build_volume_claim_v1(self, manifest: Manifest) -> List[DecodedObject]:
        storage_class = safe_get(manifest, "spec.storageClassName") or STORAGE_CLASS_STANDARD
        requests, limits = resolve_storage(
            quantity_to_value(safe_get(manifest, "spec.resources.requests.storage")),
            quantity_to_value(safe_get(manifest, "spec.resources.limits.storage")),
            self.config,
        )
        return [VolumeClaim(
            identity=self._identity(manifest, WorkloadKind.VOLUME_CLAIM.value),
            storage_class=storage_class,
            requests=ResourceAmount(storage_bytes=requests),
            limits=ResourceAmount(storage_bytes=limits),
        )]

    # --- horizontal pod autoscalers ---

    def _scaling_policy(self, manifest: Manifest, target_cpu_percentage: int) -> ScalingPolicy:
        namespace = safe_get(manifest, "metadata.namespace")
        target_ref = safe_get(manifest, "spec.scaleTargetRef", {})
        return ScalingPolicy(
            identity=self._identity(manifest),
            target_identity=build_identity(
                target_ref.get("apiVersion", ""),
                target_ref.get("kind", ""),
                namespace,
                target_ref.get("name", ""),
            ),
            min_replicas=int(safe_get(manifest, "spec.minReplicas") or 1),
            max_replicas=int(safe_get(manifest, "spec.maxReplicas", 0)),
            target_cpu_utilization_percent=int(target_cpu_percentage or 0),
        )

    def _cpu_resource_metrics(self, manifest: Manifest) -> Iterator[Dict[str, Any]]:
        for metric in safe_get(manifest, "spec.metrics", []):
            resource = metric.get("resource") or {}
            if metric.get("type") == "Resource" and resource.get("name") == "cpu":
                yield resource

    def _build_hpa_v1(self, manifest: Manifest) -> List[DecodedObject]:
        target = safe_get(manifest, "spec.targetCPUUtilizationPercentage", 0)
        return [self._scaling_policy(manifest, target)]

    def _build_hpa_v2beta1(self, manifest: Manifest) -> List[DecodedObject]:
        target = 0
        for resource in self._cpu_resource_metrics(manifest):
            if resource.get("targetAverageUtilization") is not None:
                target = resource["targetAverageUtilization"]
        return [self._scaling_policy(manifest, target)]

    def _build_hpa_v2(self, manifest: Manifest) -> List[DecodedObject]:
        target = 0
        for resource in self._cpu_resource_metrics(manifest):
            utilization = safe_get(resource, "target.averageUtilization")
            if utilization is not None:
                target = utilization
        return [self._scaling_policy(manifest, target)]
