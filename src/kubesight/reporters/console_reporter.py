# src/kubesight/reporters/console_reporter.py
"""
A reporter that displays analysis results as formatted tables in the console.
"""

import logging
from typing import List, Optional

from rich.console import Console
from rich.table import Table

from ..core.reconciler import SORT_KEYS, top_diffs
from ..models.capacity import ClusterCapacitySummary, ClusterPressure, NodeCapacity, PressureLevel
from ..models.nodeinfo import NodeHealthStatus, NodeInfo
from ..models.resources import ContainerDiff, ContainerUsage, Inventory, PodResourceSummary, ResourcesSummary
from ..utils.k8s_utils import format_cpu, format_memory

logger = logging.getLogger(__name__)

PRESSURE_STYLES = {
    PressureLevel.LOW: "green",
    PressureLevel.MEDIUM: "yellow",
    PressureLevel.HIGH: "red",
    PressureLevel.SATURATED: "bold red",
}

HEALTH_STYLES = {
    NodeHealthStatus.HEALTHY: "green",
    NodeHealthStatus.WARNING: "yellow",
    NodeHealthStatus.CRITICAL: "bold red",
}


def _truncate(rows: list, top: int) -> list:
    return rows if top <= 0 else rows[:top]


def _ratio(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.2f}"


def _optional(value: int, present: bool, formatter) -> str:
    return formatter(value) if present else "-"


class ConsoleReporter:
    """
    Renders inventory, pressure, capacity and diff data using the 'rich' library.
    """

    def __init__(self, color: bool = True, console: Optional[Console] = None):
        self.console = console or Console(no_color=not color, highlight=False)

    def _level(self, level: Optional[PressureLevel]) -> str:
        if level is None:
            return "-"
        return f"[{PRESSURE_STYLES[level]}]{level.value}[/]"

    def _health(self, health: NodeHealthStatus) -> str:
        return f"[{HEALTH_STYLES[health]}]{health.value}[/]"

    def report_capacity(self, nodes: List[NodeCapacity]):
        if not nodes:
            self.console.print("No nodes found.", style="yellow")
            return

        table = Table(title="Node Capacity", header_style="bold magenta")
        table.add_column("Node", style="cyan")
        table.add_column("CPU Allocatable", justify="right")
        table.add_column("CPU Capacity", justify="right")
        table.add_column("Mem Allocatable", justify="right")
        table.add_column("Mem Capacity", justify="right")
        for node in nodes:
            table.add_row(
                node.name,
                format_cpu(node.cpu_allocatable),
                format_cpu(node.cpu_capacity),
                format_memory(node.mem_allocatable),
                format_memory(node.mem_capacity),
            )
        self.console.print(table)

    def report_summary(self, summary: ClusterCapacitySummary):
        table = Table(title="Cluster Capacity Summary", header_style="bold magenta")
        table.add_column("Resource", style="cyan")
        table.add_column("Capacity", justify="right")
        table.add_column("Allocatable", justify="right")
        table.add_column("Requests", justify="right")
        table.add_column("Limits", justify="right")
        table.add_row(
            "CPU",
            format_cpu(summary.total_cpu_capacity),
            format_cpu(summary.total_cpu_allocatable),
            format_cpu(summary.total_cpu_requests),
            format_cpu(summary.total_cpu_limits),
        )
        table.add_row(
            "Memory",
            format_memory(summary.total_mem_capacity),
            format_memory(summary.total_mem_allocatable),
            format_memory(summary.total_mem_requests),
            format_memory(summary.total_mem_limits),
        )
        self.console.print(table)

    def report_pressure(self, pressure: ClusterPressure, top: int = 0):
        self.console.print(
            f"Cluster pressure: {self._level(pressure.overall)} "
            f"(CPU {pressure.cpu_utilization:.1f}%, Memory {pressure.mem_utilization:.1f}%)"
        )

        if pressure.node_pressures:
            table = Table(title="Node Pressure", header_style="bold magenta")
            table.add_column("Node", style="cyan")
            table.add_column("CPU %", justify="right")
            table.add_column("CPU Pressure")
            table.add_column("Mem %", justify="right")
            table.add_column("Mem Pressure")
            for np in pressure.node_pressures:
                table.add_row(
                    np.node_name,
                    f"{np.cpu_utilization:.1f}",
                    self._level(np.cpu_pressure),
                    f"{np.mem_utilization:.1f}",
                    self._level(np.mem_pressure),
                )
            self.console.print(table)

        # Busiest namespaces first; the stable sort keeps name order on ties.
        ranked = sorted(
            pressure.namespace_pressures,
            key=lambda ns: max(ns.cpu_utilization, ns.mem_utilization),
            reverse=True,
        )
        ranked = _truncate(ranked, top)
        if ranked:
            table = Table(title="Namespace Pressure", header_style="bold magenta")
            table.add_column("Namespace", style="cyan")
            table.add_column("CPU %", justify="right")
            table.add_column("Mem %", justify="right")
            table.add_column("Status", style="red")
            for ns in ranked:
                status = ", ".join(s for s in (ns.cpu_status, ns.mem_status) if s)
                table.add_row(ns.namespace, f"{ns.cpu_utilization:.1f}", f"{ns.mem_utilization:.1f}", status)
            self.console.print(table)

    def report_inventory(self, inventory: Inventory, top: int = 0):
        if not inventory.namespaces:
            self.console.print("No pods found.", style="yellow")
            return

        table = Table(title="Namespace Resource Inventory", header_style="bold magenta")
        table.add_column("Namespace", style="cyan")
        table.add_column("Containers", justify="right")
        table.add_column("No Requests", justify="right")
        table.add_column("No Limits", justify="right")
        table.add_column("CPU Req", justify="right")
        table.add_column("CPU Lim", justify="right")
        table.add_column("Mem Req", justify="right")
        table.add_column("Mem Lim", justify="right")
        for ns in inventory.namespaces:
            table.add_row(
                ns.namespace,
                str(ns.containers_total),
                str(ns.containers_missing_any_request),
                str(ns.containers_missing_any_limit),
                format_cpu(ns.cpu_requests_total),
                format_cpu(ns.cpu_limits_total),
                format_memory(ns.mem_requests_total),
                format_memory(ns.mem_limits_total),
            )
        self.console.print(table)

        missing = [c for c in inventory.containers if c.missing_any_request or c.missing_any_limit]
        if missing:
            table = Table(title="Containers Missing Requests or Limits", header_style="bold magenta")
            table.add_column("Namespace", style="cyan")
            table.add_column("Pod", style="cyan")
            table.add_column("Container")
            table.add_column("Init")
            table.add_column("CPU Req", justify="right")
            table.add_column("CPU Lim", justify="right")
            table.add_column("Mem Req", justify="right")
            table.add_column("Mem Lim", justify="right")
            for c in _truncate(missing, top):
                table.add_row(
                    c.namespace,
                    c.pod,
                    c.container,
                    "yes" if c.is_init else "",
                    _optional(c.cpu_request, c.has_cpu_request, format_cpu),
                    _optional(c.cpu_limit, c.has_cpu_limit, format_cpu),
                    _optional(c.mem_request, c.has_mem_request, format_memory),
                    _optional(c.mem_limit, c.has_mem_limit, format_memory),
                )
            self.console.print(table)

        for policy in inventory.policies:
            self.console.print(f"\n[bold]Policies in {policy.namespace}[/]")
            for lr in policy.limit_ranges:
                for item in lr.items:
                    self.console.print(
                        f"  LimitRange {lr.name} ({item.type}): "
                        f"default cpu={item.default_cpu or '-'} mem={item.default_memory or '-'}, "
                        f"max cpu={item.max_cpu or '-'} mem={item.max_memory or '-'}, "
                        f"min cpu={item.min_cpu or '-'} mem={item.min_memory or '-'}"
                    )
            for rq in policy.resource_quotas:
                used = ", ".join(f"{k}={rq.used.get(k, '0')}/{v}" for k, v in rq.hard.items())
                self.console.print(f"  ResourceQuota {rq.name}: {used or '-'}")

    def report_diff(self, diffs: List[ContainerDiff], top: int = 0, sort_by: str = "cpu"):
        if not diffs:
            self.console.print("No containers to compare.", style="yellow")
            return

        table = Table(title="Usage vs Requests", header_style="bold magenta")
        table.add_column("Namespace", style="cyan")
        table.add_column("Pod", style="cyan")
        table.add_column("Container")
        table.add_column("CPU Use", justify="right")
        table.add_column("CPU Req", justify="right")
        table.add_column("CPU Use/Req", justify="right")
        table.add_column("Mem Use", justify="right")
        table.add_column("Mem Req", justify="right")
        table.add_column("Mem Use/Req", justify="right")
        for d in top_diffs(diffs, top, key=SORT_KEYS[sort_by]):
            table.add_row(
                d.namespace,
                d.pod,
                d.container,
                format_cpu(d.cpu_usage) if d.has_usage else "-",
                _optional(d.cpu_request, d.has_cpu_request, format_cpu),
                _ratio(d.cpu_usage_to_request),
                format_memory(d.mem_usage) if d.has_usage else "-",
                _optional(d.mem_request, d.has_mem_request, format_memory),
                _ratio(d.mem_usage_to_request),
            )
        self.console.print(table)

    def report_pod_summaries(self, summaries: List[PodResourceSummary], top: int = 0):
        if not summaries:
            self.console.print("No pods found.", style="yellow")
            return

        table = Table(title="Pod Resources", header_style="bold magenta")
        table.add_column("Namespace", style="cyan")
        table.add_column("Pod", style="cyan")
        table.add_column("CPU Use", justify="right")
        table.add_column("CPU Req", justify="right")
        table.add_column("CPU Lim", justify="right")
        table.add_column("Mem Use", justify="right")
        table.add_column("Mem Req", justify="right")
        table.add_column("Mem Lim", justify="right")
        for s in _truncate(summaries, top):
            table.add_row(
                s.namespace,
                s.pod,
                format_cpu(s.cpu_usage) if s.has_usage else "-",
                format_cpu(s.cpu_request),
                format_cpu(s.cpu_limit),
                format_memory(s.mem_usage) if s.has_usage else "-",
                format_memory(s.mem_request),
                format_memory(s.mem_limit),
            )
        self.console.print(table)

    def report_usage(self, usages: List[ContainerUsage], top: int = 0):
        if not usages:
            self.console.print("No usage data available.", style="yellow")
            return

        table = Table(title="Container Usage", header_style="bold magenta")
        table.add_column("Namespace", style="cyan")
        table.add_column("Pod", style="cyan")
        table.add_column("Container")
        table.add_column("CPU", justify="right")
        table.add_column("Memory", justify="right")
        for u in _truncate(usages, top):
            table.add_row(u.namespace, u.pod, u.container, format_cpu(u.cpu_usage), format_memory(u.mem_usage))
        self.console.print(table)

    def report_resources_summary(self, summary: ResourcesSummary, top: int = 0):
        """Capacity totals, pod totals, then the inventory counts and metrics availability."""
        self.report_summary(summary.cluster_capacity)
        self.report_pod_summaries(summary.pods, top=top)

        table = Table(title="Resource Inventory", header_style="bold magenta", show_header=False)
        table.add_column("Item", style="cyan")
        table.add_column("Value", justify="right")
        table.add_row("Namespaces", str(len(summary.namespaces)))
        table.add_row("Total containers", str(summary.containers_total))
        table.add_row("Missing any requests", str(summary.containers_missing_any_request))
        table.add_row("Missing any limits", str(summary.containers_missing_any_limit))
        self.console.print(table)

        if summary.metrics_available:
            self.console.print("Metrics API: [green]available[/]")
        else:
            self.console.print("Metrics API: [yellow]not available[/] (install metrics-server for usage data)")

    def report_node_info(self, infos: List[NodeInfo]):
        if not infos:
            self.console.print("No nodes found.", style="yellow")
            return

        table = Table(title="Node Info", header_style="bold magenta")
        table.add_column("Node", style="cyan")
        table.add_column("OS")
        table.add_column("Arch")
        table.add_column("Kernel")
        table.add_column("Kubelet")
        table.add_column("Runtime")
        table.add_column("CPU", justify="right")
        table.add_column("Memory", justify="right")
        table.add_column("GPUs")
        table.add_column("Health")
        for info in infos:
            runtime = " ".join(part for part in (info.container_runtime, info.container_runtime_version) if part)
            gpus = ", ".join(f"{name}={count}" for name, count in info.gpus.items())
            table.add_row(
                info.name,
                info.os_image or info.operating_system or "-",
                info.architecture or "-",
                info.kernel_version or "-",
                info.kubelet_version or "-",
                runtime or "-",
                format_cpu(info.cpu_capacity),
                format_memory(info.mem_capacity),
                gpus or "-",
                self._health(info.health),
            )
        self.console.print(table)

    def report_node_health(self, infos: List[NodeInfo]):
        if not infos:
            self.console.print("No nodes found.", style="yellow")
            return

        table = Table(title="Node Health", header_style="bold magenta")
        table.add_column("Node", style="cyan")
        table.add_column("Status")
        table.add_column("Issues")
        for info in infos:
            table.add_row(info.name, self._health(info.health), "; ".join(info.issues) or "-")
        self.console.print(table)
