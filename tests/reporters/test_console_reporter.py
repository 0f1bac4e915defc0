# tests/reporters/test_console_reporter.py
"""
Unit tests for the ConsoleReporter class.
"""

import io
from unittest.mock import MagicMock, call

from rich.console import Console

from kubesight.models.capacity import (
    ClusterCapacitySummary,
    ClusterPressure,
    NamespacePressure,
    NodeCapacity,
    NodePressure,
    PressureLevel,
)
from kubesight.models.nodeinfo import NodeHealthStatus, NodeInfo
from kubesight.models.resources import (
    ContainerDiff,
    ContainerResource,
    ContainerUsage,
    Inventory,
    NamespaceInventory,
    PodResourceSummary,
    PolicySummary,
    ResourceQuotaSummary,
    ResourcesSummary,
)
from kubesight.reporters.console_reporter import ConsoleReporter


def _recording_reporter():
    console = Console(file=io.StringIO(), width=200, no_color=True, highlight=False)
    return ConsoleReporter(console=console), console


def test_report_capacity_builds_table(mocker):
    """
    Mocks Table and Console in the reporter's module and checks the columns and rows.
    """
    mock_console_class = mocker.patch("kubesight.reporters.console_reporter.Console")
    mock_table_class = mocker.patch("kubesight.reporters.console_reporter.Table")
    mock_console_instance = MagicMock()
    mock_table_instance = MagicMock()
    mock_console_class.return_value = mock_console_instance
    mock_table_class.return_value = mock_table_instance

    reporter = ConsoleReporter()
    reporter.report_capacity(
        [NodeCapacity(name="n1", cpu_allocatable=3800, cpu_capacity=4000, mem_allocatable=2**30, mem_capacity=2**31)]
    )

    call_kwargs = mock_table_class.call_args.kwargs
    assert call_kwargs.get("title") == "Node Capacity"
    assert call_kwargs.get("header_style") == "bold magenta"
    mock_table_instance.add_column.assert_has_calls(
        [
            call("Node", style="cyan"),
            call("CPU Allocatable", justify="right"),
            call("CPU Capacity", justify="right"),
            call("Mem Allocatable", justify="right"),
            call("Mem Capacity", justify="right"),
        ],
        any_order=False,
    )
    mock_table_instance.add_row.assert_called_once_with("n1", "3800m", "4", "1Gi", "2Gi")
    mock_console_instance.print.assert_called_once_with(mock_table_instance)


def test_no_color_flag_reaches_console(mocker):
    mock_console_class = mocker.patch("kubesight.reporters.console_reporter.Console")

    ConsoleReporter(color=False)

    assert mock_console_class.call_args.kwargs["no_color"] is True


def test_report_capacity_empty():
    reporter, console = _recording_reporter()

    reporter.report_capacity([])

    assert "No nodes found." in console.file.getvalue()


def test_report_summary():
    reporter, console = _recording_reporter()

    reporter.report_summary(ClusterCapacitySummary(total_cpu_capacity=8000, total_cpu_requests=1500))

    output = console.file.getvalue()
    assert "Cluster Capacity Summary" in output
    assert "1500m" in output


def test_report_pressure_ranks_namespaces_and_truncates():
    reporter, console = _recording_reporter()
    pressure = ClusterPressure(
        overall=PressureLevel.HIGH,
        cpu_utilization=42.0,
        node_pressures=[NodePressure(node_name="worker-1", cpu_utilization=95.0, cpu_pressure=PressureLevel.HIGH)],
        namespace_pressures=[
            NamespacePressure(namespace="calm", cpu_utilization=5.0),
            NamespacePressure(namespace="hot", cpu_utilization=91.0, cpu_status="CPU 91%"),
        ],
    )

    reporter.report_pressure(pressure, top=1)

    output = console.file.getvalue()
    assert "Cluster pressure: HIGH" in output
    assert "worker-1" in output
    assert "CPU 91%" in output
    assert "calm" not in output


def test_report_inventory_lists_missing_containers_and_policies():
    reporter, console = _recording_reporter()
    inventory = Inventory(
        namespaces=[NamespaceInventory(namespace="dev", containers_total=2, containers_missing_any_request=1)],
        containers=[
            ContainerResource(namespace="dev", pod="web", container="bare"),
            ContainerResource(
                namespace="dev",
                pod="web",
                container="ok",
                cpu_request=100,
                has_cpu_request=True,
                mem_limit=1024,
                has_mem_limit=True,
            ),
        ],
        policies=[
            PolicySummary(
                namespace="dev",
                resource_quotas=[ResourceQuotaSummary(name="q", hard={"pods": "10"}, used={"pods": "3"})],
            )
        ],
    )

    reporter.report_inventory(inventory)

    output = console.file.getvalue()
    assert "Containers Missing Requests or Limits" in output
    assert "bare" in output
    assert "ResourceQuota q: pods=3/10" in output


def test_report_diff_shows_unknown_ratios_as_dash(mocker):
    mock_table_class = mocker.patch("kubesight.reporters.console_reporter.Table")
    table = mock_table_class.return_value
    reporter = ConsoleReporter(console=MagicMock())
    diffs = [
        ContainerDiff(namespace="d", pod="p", container="unknown", cpu_request=100, has_cpu_request=True),
        ContainerDiff(
            namespace="d",
            pod="p",
            container="busy",
            cpu_usage=150,
            cpu_request=100,
            has_cpu_request=True,
            has_usage=True,
            cpu_usage_to_request=1.5,
        ),
    ]

    reporter.report_diff(diffs)

    rows = [c.args for c in table.add_row.call_args_list]
    assert rows[0][:6] == ("d", "p", "busy", "150m", "100m", "1.50")
    assert rows[1][:6] == ("d", "p", "unknown", "-", "100m", "-")


def test_report_pod_summaries():
    reporter, console = _recording_reporter()

    reporter.report_pod_summaries(
        [PodResourceSummary(namespace="dev", pod="web", cpu_request=500, cpu_usage=120, has_usage=True)]
    )

    output = console.file.getvalue()
    assert "Pod Resources" in output
    assert "120m" in output


def test_report_usage_truncates():
    reporter, console = _recording_reporter()
    usages = [
        ContainerUsage(namespace="dev", pod="web", container="app", cpu_usage=250, mem_usage=64 * 2**20),
        ContainerUsage(namespace="dev", pod="web", container="sidecar", cpu_usage=5, mem_usage=2**20),
    ]

    reporter.report_usage(usages, top=1)

    output = console.file.getvalue()
    assert "Container Usage" in output
    assert "250m" in output
    assert "64Mi" in output
    assert "sidecar" not in output


def test_report_usage_empty():
    reporter, console = _recording_reporter()

    reporter.report_usage([])

    assert "No usage data available." in console.file.getvalue()


def test_report_resources_summary():
    reporter, console = _recording_reporter()
    summary = ResourcesSummary(
        cluster_capacity=ClusterCapacitySummary(total_cpu_capacity=8000, total_cpu_requests=1500),
        pods=[PodResourceSummary(namespace="dev", pod="web", cpu_request=1500)],
        namespaces=[
            NamespaceInventory(namespace="dev", containers_total=4, containers_missing_any_limit=2),
            NamespaceInventory(namespace="ops", containers_total=1, containers_missing_any_request=1),
        ],
        metrics_available=False,
    )

    reporter.report_resources_summary(summary)

    output = console.file.getvalue()
    assert "Cluster Capacity Summary" in output
    assert "Pod Resources" in output
    assert "Total containers" in output
    assert "5" in output
    assert "Metrics API: not available" in output


def test_report_node_info():
    reporter, console = _recording_reporter()
    info = NodeInfo(
        name="gpu-1",
        os_image="Ubuntu 22.04.4 LTS",
        architecture="amd64",
        kernel_version="5.15.0",
        kubelet_version="v1.29.3",
        container_runtime="containerd",
        container_runtime_version="1.7.13",
        cpu_capacity=8000,
        mem_capacity=32 * 2**30,
        gpus={"nvidia.com/gpu": 4},
        health=NodeHealthStatus.WARNING,
        issues=["Disk pressure detected"],
    )

    reporter.report_node_info([info])

    output = console.file.getvalue()
    assert "Node Info" in output
    assert "containerd 1.7.13" in output
    assert "nvidia.com/gpu=4" in output
    assert "32Gi" in output
    assert "WARNING" in output


def test_report_node_health(mocker):
    mock_table_class = mocker.patch("kubesight.reporters.console_reporter.Table")
    table = mock_table_class.return_value
    reporter = ConsoleReporter(console=MagicMock())
    infos = [
        NodeInfo(name="a", health=NodeHealthStatus.HEALTHY),
        NodeInfo(name="b", health=NodeHealthStatus.CRITICAL, issues=["Node not ready", "PID pressure detected"]),
    ]

    reporter.report_node_health(infos)

    rows = [c.args for c in table.add_row.call_args_list]
    assert rows[0] == ("a", "[green]HEALTHY[/]", "-")
    assert rows[1] == ("b", "[bold red]CRITICAL[/]", "Node not ready; PID pressure detected")
