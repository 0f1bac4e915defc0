import asyncio
import logging
from typing import List, Optional, Tuple

from ..collectors.metrics_collector import MetricsCollector
from ..collectors.node_collector import NodeCollector
from ..collectors.pod_collector import PodCollector
from ..collectors.policy_collector import PolicyCollector
from ..models.capacity import ClusterCapacitySummary, ClusterPressure, NodeCapacity, PressureThresholds
from ..models.nodeinfo import NodeInfo
from ..models.resources import ContainerDiff, ContainerUsage, Inventory, PodResourceSummary, ResourcesSummary
from ..models.snapshot import ClusterSnapshot
from .capacity import analyze_nodes, analyze_summary
from .exceptions import DataFetchError, MetricsUnavailableError
from .extractor import extract_container_resources
from .inventory import build_inventory, build_pod_summaries
from .nodeinfo import analyze_node_infos
from .pressure import calculate_pressure
from .reconciler import build_diff

logger = logging.getLogger(__name__)


class AnalysisProcessor:
    """
    Fetches a cluster snapshot through the collectors and runs the pure
    analysis functions over it.

    Each run fetches its own snapshot; nothing is cached between runs.
    """

    def __init__(
        self,
        node_collector: NodeCollector,
        pod_collector: PodCollector,
        policy_collector: PolicyCollector,
        metrics_collector: MetricsCollector,
    ):
        self.node_collector = node_collector
        self.pod_collector = pod_collector
        self.policy_collector = policy_collector
        self.metrics_collector = metrics_collector

    async def _collect_usage(self):
        try:
            return await self.metrics_collector.collect()
        except MetricsUnavailableError as e:
            logger.warning("Usage metrics unavailable, continuing without them: %s", e)
            return None

    async def fetch_snapshot(
        self,
        include_nodes: bool = True,
        include_policies: bool = False,
        include_usage: bool = False,
    ) -> ClusterSnapshot:
        """
        Collects everything a run needs. Node, pod and policy failures raise
        DataFetchError; missing usage metrics leave `usage` as None.
        """
        tasks = [self.pod_collector.collect()]
        if include_nodes:
            tasks.append(self.node_collector.collect())
        if include_policies:
            tasks.append(self.policy_collector.collect())
        if include_usage:
            tasks.append(self._collect_usage())

        results = list(await asyncio.gather(*tasks))
        pods = results.pop(0)
        nodes = results.pop(0) if include_nodes else []
        limit_ranges, quotas = results.pop(0) if include_policies else ([], [])
        usage = results.pop(0) if include_usage else None

        logger.info("Fetched snapshot: %d nodes, %d pods.", len(nodes), len(pods))
        return ClusterSnapshot(
            nodes=nodes,
            pods=pods,
            limit_ranges=limit_ranges,
            resource_quotas=quotas,
            usage=usage,
        )

    async def run_inventory(self) -> Inventory:
        snapshot = await self.fetch_snapshot(include_nodes=False, include_policies=True)
        containers = extract_container_resources(snapshot.pods)
        return build_inventory(containers, snapshot.limit_ranges, snapshot.resource_quotas)

    async def run_pressure(self, thresholds: PressureThresholds) -> ClusterPressure:
        snapshot = await self.fetch_snapshot()
        return calculate_pressure(snapshot.nodes, snapshot.pods, thresholds)

    async def run_capacity(self) -> Tuple[List[NodeCapacity], ClusterCapacitySummary]:
        snapshot = await self.fetch_snapshot()
        containers = extract_container_resources(snapshot.pods)
        return analyze_nodes(snapshot.nodes), analyze_summary(snapshot.nodes, containers)

    async def _require_metrics(self):
        if not await self.metrics_collector.is_available():
            raise MetricsUnavailableError("metrics API (metrics.k8s.io) not available; install metrics-server")

    async def run_diff(self) -> List[ContainerDiff]:
        """
        Raises:
            MetricsUnavailableError: if metrics.k8s.io is not served; a diff
                without usage would only show unknowns.
        """
        await self._require_metrics()

        pods, usage = await asyncio.gather(self.pod_collector.collect(), self.metrics_collector.collect())
        inventory = build_inventory(extract_container_resources(pods))
        return build_diff(inventory.containers, usage)

    async def run_pod_summaries(self, include_usage: bool = True) -> List[PodResourceSummary]:
        snapshot = await self.fetch_snapshot(include_nodes=False, include_usage=include_usage)
        return build_pod_summaries(snapshot.pods, snapshot.usage)

    async def run_usage(self) -> List[ContainerUsage]:
        """Raw per-container usage, sorted by identity. Requires metrics.k8s.io."""
        await self._require_metrics()
        return await self.metrics_collector.collect()

    async def run_resources_summary(self) -> ResourcesSummary:
        """
        Capacity totals, pod and namespace totals, and whether usage metrics
        are served. Missing metrics only clear `metrics_available`.
        """
        snapshot, metrics_available = await asyncio.gather(
            self.fetch_snapshot(),
            self.metrics_collector.is_available(),
        )
        containers = extract_container_resources(snapshot.pods)
        return ResourcesSummary(
            cluster_capacity=analyze_summary(snapshot.nodes, containers),
            pods=build_pod_summaries(snapshot.pods),
            namespaces=build_inventory(containers).namespaces,
            metrics_available=metrics_available,
        )

    async def run_node_info(self, node_name: Optional[str] = None) -> List[NodeInfo]:
        """
        Raises:
            DataFetchError: if `node_name` is given and no such node exists.
        """
        nodes = await self.node_collector.collect()
        if node_name:
            nodes = [n for n in nodes if n.name == node_name]
            if not nodes:
                raise DataFetchError(f"node '{node_name}' not found")
        return analyze_node_infos(nodes)

    async def close(self):
        await asyncio.gather(
            self.node_collector.close(),
            self.pod_collector.close(),
            self.policy_collector.close(),
            self.metrics_collector.close(),
        )


def get_processor(
    namespace: Optional[str] = None,
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
) -> AnalysisProcessor:
    """Builds an AnalysisProcessor whose collectors share one namespace/kubeconfig/context."""
    options = dict(kubeconfig=kubeconfig, context=context)
    return AnalysisProcessor(
        node_collector=NodeCollector(**options),
        pod_collector=PodCollector(namespace=namespace, **options),
        policy_collector=PolicyCollector(namespace=namespace, **options),
        metrics_collector=MetricsCollector(namespace=namespace, **options),
    )
