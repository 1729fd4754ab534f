from .settings import *

__all__ = [
    "Settings",
    "CostimatorConfig",
    "ResourceConf",
    "ClusterConf",
    "resolve_resource_config",
]
