"""Kubernetes client used to size node bound workloads from a live cluster."""

from typing import Dict, Any, Optional
import structlog
from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from costimator.core.base_client import BaseClient
from costimator.core.exceptions import ClientConnectionException, CostimatorException
from costimator.core.utils import retry_with_backoff

logger = structlog.get_logger(__name__)


class KubernetesClient(BaseClient):
    """Counts the nodes DaemonSets will run on."""

    def __init__(self,
                 config_dict: Dict[str, Any],
                 kubeconfig_path: Optional[str] = None,
                 context: Optional[str] = None,
                 core_api: Optional[Any] = None):
        super().__init__(config_dict, "Kubernetes")
        self.kubeconfig_path = kubeconfig_path
        self.context = context
        self.v1 = core_api

    async def connect(self) -> None:
        """Load the kubeconfig (default location unless a path is given)."""
        if self.v1 is None:
            try:
                config.load_kube_config(config_file=self.kubeconfig_path, context=self.context)
            except (ConfigException, OSError) as e:
                raise ClientConnectionException(self.service, f"Unable to load kubeconfig: {e}",
                                                details={"kubeconfig": self.kubeconfig_path,
                                                         "context": self.context})
            self.v1 = client.CoreV1Api()
            self.logger.info("Kubeconfig loaded", kubeconfig=self.kubeconfig_path or "default",
                             context=self.context)
        self._connected = True

    async def disconnect(self) -> None:
        self.v1 = None
        self._connected = False

    async def health_check(self) -> bool:
        if not self._connected:
            return False
        try:
            await self._call(self.v1.list_node, limit=1)
            return True
        except ApiException as e:
            self.logger.warning("Cluster API not reachable", status=e.status, reason=e.reason)
            return False

    @retry_with_backoff(max_retries=3, retry_on=(ApiException,))
    async def count_nodes(self) -> int:
        """Number of nodes in the cluster."""
        self._require_connection()
        try:
            nodes = await self._call(self.v1.list_node)
        except ApiException as e:
            self.logger.error("Failed to list nodes", error=str(e))
            raise

        count = len(nodes.items)
        if count == 0:
            raise CostimatorException("Cluster reports no nodes")
        self.logger.info(f"Discovered {count} nodes")
        return count
