# src/kubesight/collectors/pod_collector.py
"""
Collects pods with the resource requests/limits of their regular and init
containers from the Kubernetes API.
"""

import logging
from typing import List

from ..core.exceptions import DataFetchError
from ..models.snapshot import ContainerSpec, PodRecord
from .base_collector import FETCH_ERRORS, KubernetesCollector

logger = logging.getLogger(__name__)


def _container_spec(container) -> ContainerSpec:
    resources = container.resources
    requests = (resources.requests if resources else None) or {}
    limits = (resources.limits if resources else None) or {}
    return ContainerSpec(name=container.name, requests=dict(requests), limits=dict(limits))


def pod_to_record(pod) -> PodRecord:
    """Translates a V1Pod into a PodRecord."""
    spec = pod.spec
    return PodRecord(
        namespace=pod.metadata.namespace,
        name=pod.metadata.name,
        node_name=spec.node_name if spec else None,
        containers=[_container_spec(c) for c in (spec.containers if spec else None) or []],
        init_containers=[_container_spec(c) for c in (spec.init_containers if spec else None) or []],
    )


class PodCollector(KubernetesCollector):
    """
    Lists pods in one namespace, or in all namespaces when none is set.
    """

    async def collect(self) -> List[PodRecord]:
        api = await self._ensure_client()

        try:
            if self.namespace:
                pod_list = await api.list_namespaced_pod(self.namespace, _request_timeout=self.request_timeout)
            else:
                pod_list = await api.list_pod_for_all_namespaces(watch=False, _request_timeout=self.request_timeout)
        except FETCH_ERRORS as e:
            logger.error("Error listing pods from Kubernetes API: %s", e)
            raise DataFetchError(f"listing pods: {e}") from e

        records = [pod_to_record(pod) for pod in pod_list.items]
        logger.debug("Collected %d pods.", len(records))
        return records
