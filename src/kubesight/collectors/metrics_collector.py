# src/kubesight/collectors/metrics_collector.py
"""
Collects observed per-container CPU/memory usage from the metrics.k8s.io API
(served by metrics-server).
"""

import logging
from typing import List

from ..core.exceptions import MetricsUnavailableError
from ..core.k8s_client import get_custom_objects_api
from ..models.resources import ContainerUsage
from ..utils.k8s_utils import parse_cpu, parse_memory
from .base_collector import FETCH_ERRORS, KubernetesCollector

logger = logging.getLogger(__name__)

METRICS_GROUP = "metrics.k8s.io"
METRICS_VERSION = "v1beta1"
METRICS_PLURAL = "pods"


def extract_container_usages(pod_metrics: List[dict]) -> List[ContainerUsage]:
    """Flattens PodMetrics items into ContainerUsage records sorted by identity."""
    usages: List[ContainerUsage] = []
    for item in pod_metrics:
        metadata = item.get("metadata") or {}
        for container in item.get("containers") or []:
            usage = container.get("usage") or {}
            usages.append(
                ContainerUsage(
                    namespace=metadata.get("namespace", ""),
                    pod=metadata.get("name", ""),
                    container=container.get("name", ""),
                    cpu_usage=parse_cpu(usage.get("cpu")),
                    mem_usage=parse_memory(usage.get("memory")),
                )
            )

    usages.sort(key=lambda u: (u.namespace, u.pod, u.container))
    return usages


class MetricsCollector(KubernetesCollector):
    """
    Reads PodMetrics through the CustomObjectsApi.

    Failures raise MetricsUnavailableError; callers that can do without usage
    data treat that as "no usage" rather than aborting.
    """

    async def _get_api(self):
        return await get_custom_objects_api(self.kubeconfig, self.context)

    async def _list(self, **kwargs) -> dict:
        api = await self._ensure_client()
        if self.namespace:
            return await api.list_namespaced_custom_object(
                METRICS_GROUP,
                METRICS_VERSION,
                self.namespace,
                METRICS_PLURAL,
                _request_timeout=self.request_timeout,
                **kwargs,
            )
        return await api.list_cluster_custom_object(
            METRICS_GROUP,
            METRICS_VERSION,
            METRICS_PLURAL,
            _request_timeout=self.request_timeout,
            **kwargs,
        )

    async def is_available(self) -> bool:
        """Checks whether the metrics.k8s.io API answers a minimal list call."""
        try:
            await self._list(limit=1)
        except FETCH_ERRORS as e:
            logger.debug("metrics.k8s.io not available: %s", e)
            return False
        return True

    async def collect(self) -> List[ContainerUsage]:
        try:
            response = await self._list()
        except FETCH_ERRORS as e:
            logger.warning("Could not list pod metrics: %s", e)
            raise MetricsUnavailableError(f"listing pod metrics: {e}") from e

        usages = extract_container_usages(response.get("items") or [])
        logger.debug("Collected usage for %d containers.", len(usages))
        return usages
