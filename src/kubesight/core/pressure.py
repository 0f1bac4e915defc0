# src/kubesight/core/pressure.py
"""
Classifies requested-vs-allocatable utilization into pressure levels.

Pressure reporting is pessimistic: the cluster's overall level is the worst
level seen at any node or in the cluster-wide totals, never an average, so a
single hot node shows up even when the cluster as a whole looks healthy.

Thresholds are always passed in by the caller.
"""

import logging
from functools import reduce
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.capacity import ClusterPressure, NamespacePressure, NodePressure, PressureLevel, PressureThresholds
from ..models.snapshot import NodeRecord, PodRecord
from ..utils.k8s_utils import parse_cpu, parse_memory

logger = logging.getLogger(__name__)


def classify(utilization: float, thresholds: PressureThresholds) -> PressureLevel:
    """
    Maps a utilization percentage to a level, checking from the top down.

    Anything below 'medium' is LOW; 'low' is the first rung, not a floor.
    Values over 100 are SATURATED.
    """
    if utilization >= thresholds.saturated:
        return PressureLevel.SATURATED
    if utilization >= thresholds.high:
        return PressureLevel.HIGH
    if utilization >= thresholds.medium:
        return PressureLevel.MEDIUM
    return PressureLevel.LOW


def combine(a: Optional[PressureLevel], b: Optional[PressureLevel]) -> Optional[PressureLevel]:
    """Returns the more severe of two levels. None (unclassified) loses to any level."""
    if a is None:
        return b
    if b is None:
        return a
    return a if a.rank >= b.rank else b


def combine_all(levels: Iterable[Optional[PressureLevel]]) -> Optional[PressureLevel]:
    return reduce(combine, levels, None)


def utilization_percent(requested: int, allocatable: int) -> Optional[float]:
    """Percentage of allocatable that is requested, or None when nothing is allocatable."""
    if allocatable <= 0:
        return None
    return (requested / allocatable) * 100


def _sum_pod_requests(pod: PodRecord) -> Tuple[int, int]:
    """CPU millicores and memory bytes requested by a pod's regular containers."""
    cpu, mem = 0, 0
    for c in pod.containers:
        requests = c.requests or {}
        if "cpu" in requests:
            cpu += parse_cpu(requests["cpu"])
        if "memory" in requests:
            mem += parse_memory(requests["memory"])
    return cpu, mem


def _classify_resource(
    requested: int, allocatable: int, thresholds: PressureThresholds
) -> Tuple[float, Optional[PressureLevel]]:
    percent = utilization_percent(requested, allocatable)
    if percent is None:
        return 0.0, None
    return percent, classify(percent, thresholds)


def calculate_node_pressure(
    node: NodeRecord,
    pods: Iterable[PodRecord],
    thresholds: PressureThresholds,
) -> NodePressure:
    """
    Pressure of one node from the requests of the pods scheduled on it.

    CPU and memory are classified independently and kept apart. A resource
    with zero allocatable keeps utilization 0 and an unset level.
    """
    cpu_requested, mem_requested = 0, 0
    for pod in pods:
        if pod.node_name != node.name:
            continue
        cpu, mem = _sum_pod_requests(pod)
        cpu_requested += cpu
        mem_requested += mem

    cpu_util, cpu_level = _classify_resource(cpu_requested, node.cpu_allocatable, thresholds)
    mem_util, mem_level = _classify_resource(mem_requested, node.mem_allocatable, thresholds)
    if cpu_level is None or mem_level is None:
        logger.debug("Node '%s' reports no allocatable CPU or memory; resource left unclassified.", node.name)

    return NodePressure(
        node_name=node.name,
        cpu_utilization=cpu_util,
        cpu_pressure=cpu_level,
        mem_utilization=mem_util,
        mem_pressure=mem_level,
    )


def calculate_namespace_pressures(
    pods: Iterable[PodRecord],
    total_cpu_allocatable: int,
    total_mem_allocatable: int,
    thresholds: PressureThresholds,
) -> List[NamespacePressure]:
    """
    Requests per namespace as a share of cluster-wide allocatable.

    The denominator is the whole cluster: a namespace is not bound to a node.
    """
    requested: Dict[str, List[int]] = {}
    for pod in pods:
        cpu, mem = _sum_pod_requests(pod)
        totals = requested.setdefault(pod.namespace, [0, 0])
        totals[0] += cpu
        totals[1] += mem

    result: List[NamespacePressure] = []
    for namespace in sorted(requested):
        cpu, mem = requested[namespace]
        cpu_util, cpu_level = _classify_resource(cpu, total_cpu_allocatable, thresholds)
        mem_util, mem_level = _classify_resource(mem, total_mem_allocatable, thresholds)
        result.append(
            NamespacePressure(
                namespace=namespace,
                cpu_utilization=cpu_util,
                cpu_pressure=cpu_level,
                mem_utilization=mem_util,
                mem_pressure=mem_level,
                cpu_status=f"CPU {cpu_util:.0f}%" if cpu_util >= thresholds.high else "",
                mem_status=f"Memory {mem_util:.0f}%" if mem_util >= thresholds.high else "",
            )
        )
    return result


def calculate_pressure(
    nodes: Sequence[NodeRecord],
    pods: Sequence[PodRecord],
    thresholds: PressureThresholds,
) -> ClusterPressure:
    """
    Node, namespace and cluster-wide pressure for one snapshot.

    `overall` is the worst of: the worst node CPU level, the worst node memory
    level, and the cluster-wide CPU and memory levels. It is LOW when nothing
    could be classified at all.
    """
    pods = list(pods)
    node_pressures = [calculate_node_pressure(node, pods, thresholds) for node in sorted(nodes, key=lambda n: n.name)]

    total_cpu_allocatable = sum(node.cpu_allocatable for node in nodes)
    total_mem_allocatable = sum(node.mem_allocatable for node in nodes)

    total_cpu_requested, total_mem_requested = 0, 0
    for pod in pods:
        cpu, mem = _sum_pod_requests(pod)
        total_cpu_requested += cpu
        total_mem_requested += mem

    cpu_util, cpu_level = _classify_resource(total_cpu_requested, total_cpu_allocatable, thresholds)
    mem_util, mem_level = _classify_resource(total_mem_requested, total_mem_allocatable, thresholds)

    worst_node_cpu = combine_all(np.cpu_pressure for np in node_pressures)
    worst_node_mem = combine_all(np.mem_pressure for np in node_pressures)
    overall = combine_all([worst_node_cpu, worst_node_mem, cpu_level, mem_level]) or PressureLevel.LOW

    logger.debug(
        "Cluster pressure: overall=%s cpu=%.1f%% mem=%.1f%% across %d nodes.",
        overall.value,
        cpu_util,
        mem_util,
        len(node_pressures),
    )
    return ClusterPressure(
        overall=overall,
        cpu_utilization=cpu_util,
        cpu_pressure=cpu_level,
        mem_utilization=mem_util,
        mem_pressure=mem_level,
        node_pressures=node_pressures,
        namespace_pressures=calculate_namespace_pressures(pods, total_cpu_allocatable, total_mem_allocatable, thresholds),
    )
