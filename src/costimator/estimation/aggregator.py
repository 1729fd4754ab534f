"""Workload level totals of container resources."""

from typing import Iterable, NamedTuple

from costimator.models.resource_models import ContainerResources


class ContainerTotals(NamedTuple):
    cpu_request_cores: float = 0.0
    cpu_limit_cores: float = 0.0
    memory_request_bytes: float = 0.0
    memory_limit_bytes: float = 0.0


def total_containers(containers: Iterable[ContainerResources]) -> ContainerTotals:
    """Sum requests and limits of the running containers.

    CPU is summed in millicores and converted to cores once at the end.
    """
    cpu_request = cpu_limit = memory_request = memory_limit = 0
    for container in containers:
        cpu_request += container.requests.cpu_millicores
        cpu_limit += container.limits.cpu_millicores
        memory_request += container.requests.memory_bytes
        memory_limit += container.limits.memory_bytes

    return ContainerTotals(
        cpu_request_cores=cpu_request / 1000,
        cpu_limit_cores=cpu_limit / 1000,
        memory_request_bytes=float(memory_request),
        memory_limit_bytes=float(memory_limit),
    )
