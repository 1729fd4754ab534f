from .gcp.price_catalog import GCPPriceCatalogClient
from .kubernetes.k8s_client import KubernetesClient

__all__ = ["GCPPriceCatalogClient", "KubernetesClient"]
