# src/kubesight/core/nodeinfo.py
"""
Per-node system details and a health verdict derived from node conditions.
"""

import logging
from typing import Dict, Iterable, List, Tuple

from ..models.nodeinfo import NodeHealthStatus, NodeInfo
from ..models.snapshot import NodeRecord
from ..utils.k8s_utils import parse_quantity

logger = logging.getLogger(__name__)

# Conditions that signal trouble when their status is "True".
PROBLEM_CONDITIONS = {
    "MemoryPressure": "Memory pressure detected",
    "DiskPressure": "Disk pressure detected",
    "PIDPressure": "PID pressure detected",
    "NetworkUnavailable": "Network unavailable",
}


def evaluate_health(conditions: Dict[str, str]) -> Tuple[NodeHealthStatus, List[str]]:
    """
    A node is CRITICAL unless its Ready condition is "True", and WARNING when
    any pressure or network condition is "True".
    """
    issues: List[str] = []
    status = NodeHealthStatus.HEALTHY

    for condition, issue in PROBLEM_CONDITIONS.items():
        if conditions.get(condition) == "True":
            issues.append(issue)
            status = NodeHealthStatus.WARNING

    ready = conditions.get("Ready")
    if ready != "True":
        issues.insert(0, "Node not ready" if ready else "Ready condition not reported")
        status = NodeHealthStatus.CRITICAL

    return status, issues


def split_runtime(runtime_version: str) -> Tuple[str, str]:
    """'containerd://1.7.13' -> ('containerd', '1.7.13')."""
    name, sep, version = runtime_version.partition("://")
    if not sep:
        return "", runtime_version
    return name, version


def count_gpus(capacity: Dict[str, object]) -> Dict[str, int]:
    """Extended resources such as nvidia.com/gpu or amd.com/gpu, with their device counts."""
    return {
        resource: int(parse_quantity(value))
        for resource, value in sorted(capacity.items())
        if resource.endswith("/gpu")
    }


def analyze_node_info(node: NodeRecord) -> NodeInfo:
    info = node.system_info
    runtime, runtime_version = split_runtime(info.get("container_runtime_version", ""))
    health, issues = evaluate_health(node.conditions)
    return NodeInfo(
        name=node.name,
        os_image=info.get("os_image", ""),
        operating_system=info.get("operating_system", ""),
        architecture=info.get("architecture", ""),
        kernel_version=info.get("kernel_version", ""),
        kubelet_version=info.get("kubelet_version", ""),
        container_runtime=runtime,
        container_runtime_version=runtime_version,
        cpu_capacity=node.cpu_capacity,
        mem_capacity=node.mem_capacity,
        gpus=count_gpus(node.capacity),
        health=health,
        issues=issues,
    )


def analyze_node_infos(nodes: Iterable[NodeRecord]) -> List[NodeInfo]:
    """NodeInfo for every node, sorted by node name."""
    infos = [analyze_node_info(node) for node in nodes]
    infos.sort(key=lambda i: i.name)
    unhealthy = sum(1 for i in infos if i.health != NodeHealthStatus.HEALTHY)
    logger.debug("Analyzed %d nodes, %d not healthy.", len(infos), unhealthy)
    return infos
