"""Resolution of a container's effective requests and limits."""

from typing import Optional, Tuple

from costimator.models.resource_models import (
    ContainerResources,
    DeclaredResources,
    ResourceAmount,
    WorkloadResourceConfig,
)


def resolve_dimension(request: Optional[int], limit: Optional[int],
                      default: int, buffer_percent: int) -> Tuple[int, int]:
    """Resolve one resource dimension into a (request, limit) pair.

    An omitted request defaults to the limit when that is declared, otherwise
    to the configured default. An omitted limit is unbounded and gets the
    request plus buffer_percent of it.
    """
    request = request or 0
    limit = limit or 0

    if request == 0:
        request = limit
    if request == 0:
        request = default

    if limit == 0:
        limit = request + (buffer_percent * request // 100)

    return request, limit


def resolve_container_resources(requests: DeclaredResources, limits: DeclaredResources,
                                config: WorkloadResourceConfig) -> ContainerResources:
    """Resolve CPU and memory independently into a fully populated ContainerResources."""
    buffer_percent = config.unbounded_limit_buffer_percent

    cpu_request, cpu_limit = resolve_dimension(
        requests.cpu_millicores, limits.cpu_millicores, config.default_cpu_millicores, buffer_percent
    )
    memory_request, memory_limit = resolve_dimension(
        requests.memory_bytes, limits.memory_bytes, config.default_memory_bytes, buffer_percent
    )

    return ContainerResources(
        requests=ResourceAmount(cpu_millicores=cpu_request, memory_bytes=memory_request),
        limits=ResourceAmount(cpu_millicores=cpu_limit, memory_bytes=memory_limit),
    )


def resolve_storage(requests: Optional[int], limits: Optional[int],
                    config: WorkloadResourceConfig) -> Tuple[int, int]:
    """Storage requests and limits fall back to each other, then to the configured default."""
    requests = requests or 0
    limits = limits or 0

    if requests == 0:
        requests = limits
    if limits == 0:
        limits = requests
    if requests == 0:
        requests = limits = config.default_storage_bytes

    return requests, limits
