# src/costimator/cli.py
"""Cost estimation CLI - monthly cost ranges of Kubernetes manifests."""

import asyncio
import click
import json
import sys
from pathlib import Path
from typing import Optional
import structlog

from costimator.clients.gcp.price_catalog import GCPPriceCatalogClient
from costimator.clients.kubernetes.k8s_client import KubernetesClient
from costimator.config.settings import CostimatorConfig, Settings, resolve_resource_config
from costimator.core.utils import setup_logging
from costimator.estimation.estimator import diff, estimate_cost
from costimator.estimation.pricing import PriceCatalog, StaticPriceCatalog
from costimator.mappers.manifest_loader import ManifestLoader
from costimator.mappers.manifest_mapper import ManifestDecoder
from costimator.models.resource_models import WorkloadResourceConfig
from costimator.reporting.markdown import cost_to_dict, cost_to_markdown, diff_to_markdown, diff_to_price_diff

logger = structlog.get_logger(__name__)


async def load_price_catalog(settings: Settings, resource_config: WorkloadResourceConfig,
                             price_catalog: Optional[str], gcp_credentials: Optional[str]) -> PriceCatalog:
    """Static prices from a file, otherwise the GCP billing catalog."""
    if price_catalog:
        return StaticPriceCatalog.from_yaml(price_catalog)

    client = GCPPriceCatalogClient(
        settings.gcp.model_dump(),
        resource_config,
        credentials_path=gcp_credentials or settings.gcp.credentials_path,
    )
    async with client:
        return await client.fetch_price_catalog()


async def count_cluster_nodes(kubeconfig: str, context: Optional[str]) -> int:
    async with KubernetesClient({}, kubeconfig_path=kubeconfig, context=context) as k8s:
        return await k8s.count_nodes()


@click.command()
@click.option('--path', '-p', 'manifests_path', required=True, help='Kubernetes manifests file or folder')
@click.option('--compare-with', '-c', 'previous_path', default=None, help='Previous manifests to diff against')
@click.option('--config', 'config_path', default=None, help='YAML file with resourceConf/clusterConf defaults')
@click.option('--price-catalog', default=None, help='YAML file with static monthly prices (skips GCP lookup)')
@click.option('--gcp-credentials', default=None, help='Service account JSON for the GCP billing catalog')
@click.option('--kubeconfig', default=None, help='Count nodes of this cluster for DaemonSet estimation')
@click.option('--context', default=None, help='Kubernetes context to use with --kubeconfig')
@click.option('--format', '-f', 'output_format', type=click.Choice(['markdown', 'json']), default='markdown',
              help='Output format')
@click.option('--output', '-o', default=None, help='Output file path (default: stdout)')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--debug', is_flag=True, help='Enable debug logging')
def estimate(manifests_path, previous_path, config_path, price_catalog, gcp_credentials, kubeconfig,
             context, output_format, output, verbose, debug):
    """
    Estimate the monthly cost range of Kubernetes manifests.

    Deployments, ReplicaSets, StatefulSets, DaemonSets, HorizontalPodAutoscalers
    and PersistentVolumeClaims are priced with GCP unit prices:
    - requested and limited cost for CPU and memory
    - min/max replicas of bound autoscalers, plus an autoscaler CPU buffer
    - standard persistent disk storage for volume claims

    Example:
        costimator --path ./k8s --compare-with ./k8s-previous --price-catalog prices.yaml
    """

    async def run_estimation():
        try:
            settings = Settings.create_from_env()
            log_level = "DEBUG" if debug or settings.debug else ("INFO" if verbose else settings.log_level.value)
            setup_logging(log_level=log_level, json_format=settings.log_format == "json")

            overrides = [settings.to_costimator_config()]
            if config_path:
                overrides.append(CostimatorConfig.from_yaml(config_path))
            resource_config = resolve_resource_config(*overrides)
            logger.debug("Resolved resource config", **resource_config.model_dump())

            kubeconfig_path = kubeconfig or settings.cluster.kubeconfig_path
            if kubeconfig_path:
                nodes_count = await count_cluster_nodes(kubeconfig_path, context or settings.cluster.context)
                resource_config = resource_config.model_copy(update={"nodes_count": nodes_count})

            if verbose:
                click.echo(f"Manifests: {manifests_path}", err=True)
                click.echo(f"Machine family: {resource_config.machine_family}", err=True)
                click.echo(f"Region: {resource_config.region}", err=True)
                click.echo(f"Nodes count: {resource_config.nodes_count}", err=True)

            catalog = await load_price_catalog(settings, resource_config, price_catalog, gcp_credentials)

            loader = ManifestLoader(ManifestDecoder(resource_config))
            batch = loader.load_path(manifests_path)
            cost = estimate_cost(batch.workloads, batch.scaling_policies, catalog,
                                 resource_config, batch.volume_claims)

            if previous_path:
                previous_batch = loader.load_path(previous_path)
                previous = estimate_cost(previous_batch.workloads, previous_batch.scaling_policies,
                                         catalog, resource_config, previous_batch.volume_claims)
                cost_diff = diff(cost, previous)
                if output_format == 'json':
                    report = json.dumps({
                        "current": cost_to_dict(cost),
                        "previous": cost_to_dict(previous),
                        "diff": diff_to_price_diff(cost_diff),
                    }, indent=2)
                else:
                    report = diff_to_markdown(cost_diff)
            elif output_format == 'json':
                report = json.dumps(cost_to_dict(cost), indent=2)
            else:
                report = cost_to_markdown(cost)

            if output:
                output_path = Path(output)
                output_path.parent.mkdir(parents=True, exist_ok=True)
                output_path.write_text(report)
                if verbose:
                    click.echo(f"Report saved to: {output_path}", err=True)
            else:
                click.echo(report)

            return 0

        except Exception as e:
            click.echo(f"Error: {e}", err=True)
            if debug:
                import traceback
                click.echo(traceback.format_exc(), err=True)
            return 1

    exit_code = asyncio.run(run_estimation())
    sys.exit(exit_code)


if __name__ == '__main__':
    estimate()
