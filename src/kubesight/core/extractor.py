# src/kubesight/core/extractor.py
"""
Turns container specs into normalized ContainerResource facts.
"""

import logging
from typing import Iterable, List

from ..models.resources import ContainerResource
from ..models.snapshot import ContainerSpec, PodRecord
from ..utils.k8s_utils import parse_cpu, parse_memory

logger = logging.getLogger(__name__)


def extract_container_resource(namespace: str, pod: str, container: ContainerSpec, is_init: bool) -> ContainerResource:
    """
    Builds a ContainerResource from one container's requests/limits maps.

    A key that is not in the map is absent; a key that is present is parsed
    even when its value is zero.
    """
    requests = container.requests or {}
    limits = container.limits or {}

    has_cpu_request = "cpu" in requests
    has_cpu_limit = "cpu" in limits
    has_mem_request = "memory" in requests
    has_mem_limit = "memory" in limits

    return ContainerResource(
        namespace=namespace,
        pod=pod,
        container=container.name,
        is_init=is_init,
        cpu_request=parse_cpu(requests["cpu"]) if has_cpu_request else 0,
        cpu_limit=parse_cpu(limits["cpu"]) if has_cpu_limit else 0,
        mem_request=parse_memory(requests["memory"]) if has_mem_request else 0,
        mem_limit=parse_memory(limits["memory"]) if has_mem_limit else 0,
        has_cpu_request=has_cpu_request,
        has_cpu_limit=has_cpu_limit,
        has_mem_request=has_mem_request,
        has_mem_limit=has_mem_limit,
    )


def extract_pod_resources(pod: PodRecord) -> List[ContainerResource]:
    """Init containers first, then regular containers, in the order the pod declares them."""
    result = [extract_container_resource(pod.namespace, pod.name, c, is_init=True) for c in pod.init_containers]
    result.extend(extract_container_resource(pod.namespace, pod.name, c, is_init=False) for c in pod.containers)
    return result


def extract_container_resources(pods: Iterable[PodRecord]) -> List[ContainerResource]:
    """Flattens every container of every pod. The result is not sorted."""
    resources: List[ContainerResource] = []
    for pod in pods:
        resources.extend(extract_pod_resources(pod))
    logger.debug("Extracted %d container resource records.", len(resources))
    return resources
