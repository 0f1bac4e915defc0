# src/kubesight/core/capacity.py
"""
Node capacity listing and the cluster-wide capacity/request summary.
"""

from typing import Iterable, List

from ..models.capacity import ClusterCapacitySummary, NodeCapacity
from ..models.resources import ContainerResource
from ..models.snapshot import NodeRecord


def analyze_nodes(nodes: Iterable[NodeRecord]) -> List[NodeCapacity]:
    """Allocatable and capacity of every node, sorted by node name."""
    result = [
        NodeCapacity(
            name=node.name,
            cpu_allocatable=node.cpu_allocatable,
            cpu_capacity=node.cpu_capacity,
            mem_allocatable=node.mem_allocatable,
            mem_capacity=node.mem_capacity,
        )
        for node in nodes
    ]
    result.sort(key=lambda nc: nc.name)
    return result


def analyze_summary(nodes: Iterable[NodeRecord], containers: Iterable[ContainerResource]) -> ClusterCapacitySummary:
    """
    Sums node capacity/allocatable and the requests/limits of all containers.

    Unlike the pressure calculation, init containers count here: the summary
    reports everything that is declared.
    """
    summary = ClusterCapacitySummary()

    for node in nodes:
        summary.total_cpu_capacity += node.cpu_capacity
        summary.total_cpu_allocatable += node.cpu_allocatable
        summary.total_mem_capacity += node.mem_capacity
        summary.total_mem_allocatable += node.mem_allocatable

    for cr in containers:
        if cr.has_cpu_request:
            summary.total_cpu_requests += cr.cpu_request
        if cr.has_cpu_limit:
            summary.total_cpu_limits += cr.cpu_limit
        if cr.has_mem_request:
            summary.total_mem_requests += cr.mem_request
        if cr.has_mem_limit:
            summary.total_mem_limits += cr.mem_limit

    return summary
