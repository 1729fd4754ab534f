from .resource_models import *
from .cost_models import *

__all__ = [
    "WorkloadKind",
    "MachineFamily",
    "SUPPORTED_KINDS",
    "ResourceAmount",
    "DeclaredResources",
    "ContainerResources",
    "WorkloadResourceConfig",
    "ScalingPolicy",
    "FixedReplicaWorkload",
    "NodeBoundWorkload",
    "Workload",
    "VolumeClaim",
    "build_identity",
    "relaxed_identity",
    "CostRange",
    "Cost",
    "PercentageRange",
    "DiffCostRange",
    "CostDiff",
    "COST_FIELDS",
    "MONTHLY_TOTAL_KIND",
]
