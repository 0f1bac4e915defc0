# tests/test_cli.py
"""
Unit tests for the KubeSight Command-Line Interface (CLI).
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import yaml
from typer.testing import CliRunner

from kubesight import __version__
from kubesight.cli import app
from kubesight.core.config import Settings, save_settings
from kubesight.core.exceptions import DataFetchError, MetricsUnavailableError
from kubesight.models.capacity import ClusterCapacitySummary, ClusterPressure, NodeCapacity, PressureThresholds
from kubesight.models.nodeinfo import NodeHealthStatus, NodeInfo
from kubesight.models.resources import (
    ContainerDiff,
    ContainerUsage,
    Inventory,
    NamespaceInventory,
    PodResourceSummary,
    ResourcesSummary,
)

runner = CliRunner()


@pytest.fixture
def mock_processor(mocker):
    """
    Patches get_processor used by the CLI and returns (factory mock, processor mock).
    """
    factory = mocker.patch("kubesight.cli.utils.get_processor")
    processor = MagicMock()
    processor.close = AsyncMock()
    processor.run_capacity = AsyncMock(
        return_value=(
            [NodeCapacity(name="n1", cpu_allocatable=4000, cpu_capacity=4000)],
            ClusterCapacitySummary(total_cpu_capacity=4000, total_cpu_requests=1000),
        )
    )
    processor.run_pressure = AsyncMock(return_value=ClusterPressure())
    processor.run_inventory = AsyncMock(
        return_value=Inventory(namespaces=[NamespaceInventory(namespace="dev", containers_total=3)])
    )
    processor.run_diff = AsyncMock(
        return_value=[
            ContainerDiff(namespace="dev", pod="p", container="a", cpu_usage_to_request=0.2),
            ContainerDiff(namespace="dev", pod="p", container="b", cpu_usage_to_request=1.4),
        ]
    )
    processor.run_pod_summaries = AsyncMock(return_value=[PodResourceSummary(namespace="dev", pod="p")])
    processor.run_usage = AsyncMock(
        return_value=[
            ContainerUsage(namespace="dev", pod="p", container="a", cpu_usage=120, mem_usage=2**20),
            ContainerUsage(namespace="dev", pod="p", container="b", cpu_usage=80, mem_usage=2**21),
        ]
    )
    processor.run_resources_summary = AsyncMock(
        return_value=ResourcesSummary(
            cluster_capacity=ClusterCapacitySummary(total_cpu_capacity=4000),
            namespaces=[NamespaceInventory(namespace="dev", containers_total=3)],
            metrics_available=False,
        )
    )
    processor.run_node_info = AsyncMock(
        return_value=[NodeInfo(name="n1", health=NodeHealthStatus.CRITICAL, issues=["Node not ready"])]
    )
    factory.return_value = processor
    return factory, processor


@pytest.fixture
def mock_reporter(mocker):
    """
    Fixture to patch ConsoleReporter and provide a mock instance.
    """
    mock_reporter_class = mocker.patch("kubesight.cli.utils.ConsoleReporter")
    mock_reporter_instance = MagicMock()
    mock_reporter_class.return_value = mock_reporter_instance
    return mock_reporter_class, mock_reporter_instance


def test_version_command():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert f"KubeSight version: {__version__}" in result.output


def test_version_flag():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_capacity_text(mock_processor, mock_reporter):
    factory, processor = mock_processor
    reporter_class, reporter = mock_reporter

    result = runner.invoke(app, ["capacity", "--no-color"])

    assert result.exit_code == 0, result.output
    reporter.report_capacity.assert_called_once()
    assert reporter_class.call_args.kwargs["color"] is False
    factory.assert_called_once_with(namespace=None, kubeconfig=None, context=None)
    processor.close.assert_awaited_once()


def test_capacity_summary_json(mock_processor):
    result = runner.invoke(app, ["capacity", "--summary", "--output", "json"])

    assert result.exit_code == 0, result.output
    content = json.loads(result.stdout)
    assert content["total_cpu_capacity"] == 4000
    assert content["total_cpu_requests"] == 1000


def test_capacity_data_fetch_error(mock_processor):
    _, processor = mock_processor
    processor.run_capacity.side_effect = DataFetchError("listing nodes: forbidden")

    result = runner.invoke(app, ["capacity"])

    assert result.exit_code == 1
    assert "listing nodes: forbidden" in result.output
    processor.close.assert_awaited_once()


def test_invalid_output_format(mock_processor):
    result = runner.invoke(app, ["capacity", "-o", "xml"])

    assert result.exit_code == 1
    assert "Invalid option" in result.output


def test_pressure_uses_settings_thresholds(mock_processor, mock_reporter):
    _, processor = mock_processor
    _, reporter = mock_reporter
    save_settings(Settings(top=3, pressure_thresholds=PressureThresholds(low=10, medium=20, high=30, saturated=40)))

    result = runner.invoke(app, ["pressure", "--high", "35"])

    assert result.exit_code == 0, result.output
    thresholds = processor.run_pressure.await_args.args[0]
    assert (thresholds.low, thresholds.medium, thresholds.high, thresholds.saturated) == (10, 20, 35, 40)
    assert reporter.report_pressure.call_args.kwargs["top"] == 3


def test_pressure_rejects_invalid_thresholds(mock_processor):
    _, processor = mock_processor

    result = runner.invoke(app, ["pressure", "--medium", "90", "--high", "90"])

    assert result.exit_code == 1
    assert "'medium' (90.0) must be less than 'high' (90.0)" in result.output
    processor.run_pressure.assert_not_awaited()


def test_resources_inventory_yaml_to_file(mock_processor, tmp_path):
    out = tmp_path / "out" / "inventory.yaml"

    result = runner.invoke(app, ["resources", "inventory", "-o", "yaml", "--output-path", str(out)])

    assert result.exit_code == 0, result.output
    content = yaml.safe_load(out.read_text())
    assert content["namespaces"][0]["namespace"] == "dev"
    assert "Report exported to" in result.output


def test_resources_inventory_namespace_and_context(mock_processor, mock_reporter, monkeypatch):
    factory, _ = mock_processor
    monkeypatch.setenv("KUBESIGHT_CONTEXT", "kind-dev")

    result = runner.invoke(app, ["resources", "inventory", "-n", "dev", "--kubeconfig", "/tmp/kc"])

    assert result.exit_code == 0, result.output
    factory.assert_called_once_with(namespace="dev", kubeconfig="/tmp/kc", context="kind-dev")


def test_resources_diff_ranked_and_truncated(mock_processor):
    result = runner.invoke(app, ["resources", "diff", "--top", "1", "-o", "json"])

    assert result.exit_code == 0, result.output
    content = json.loads(result.stdout)
    assert [d["container"] for d in content] == ["b"]


def test_resources_diff_without_metrics(mock_processor):
    _, processor = mock_processor
    processor.run_diff.side_effect = MetricsUnavailableError("metrics API (metrics.k8s.io) not available")

    result = runner.invoke(app, ["resources", "diff"])

    assert result.exit_code == 1
    assert "metrics.k8s.io" in result.output


def test_resources_diff_invalid_sort_key(mock_processor):
    result = runner.invoke(app, ["resources", "diff", "--sort-by", "disk"])

    assert result.exit_code == 1
    assert "Invalid --sort-by" in result.output


def test_resources_pods_without_usage(mock_processor, mock_reporter):
    _, processor = mock_processor
    _, reporter = mock_reporter

    result = runner.invoke(app, ["resources", "pods", "--no-usage"])

    assert result.exit_code == 0, result.output
    processor.run_pod_summaries.assert_awaited_once_with(include_usage=False)
    reporter.report_pod_summaries.assert_called_once()


def test_config_path(tmp_path):
    result = runner.invoke(app, ["config", "path"])

    assert result.exit_code == 0
    assert result.output.strip() == str(tmp_path / "settings.yaml")


def test_config_init_and_show(tmp_path):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0, result.output
    assert (tmp_path / "settings.yaml").exists()

    again = runner.invoke(app, ["config", "init"])
    assert again.exit_code == 1
    assert "already exists" in again.output

    forced = runner.invoke(app, ["config", "init", "--force"])
    assert forced.exit_code == 0

    shown = runner.invoke(app, ["config", "show"])
    assert shown.exit_code == 0
    assert yaml.safe_load(shown.output)["top"] == 20


def test_config_show_invalid_file(tmp_path):
    (tmp_path / "settings.yaml").write_text("pressure_thresholds:\n  low: 150\n")

    result = runner.invoke(app, ["config", "show"])

    assert result.exit_code == 1
    assert "between 0 and 100" in result.output


def test_pressure_rejects_nan_threshold(mock_processor):
    _, processor = mock_processor

    result = runner.invoke(app, ["pressure", "--high", "nan"])

    assert result.exit_code == 1
    assert "finite number" in result.output
    processor.run_pressure.assert_not_awaited()


def test_resources_summary_text(mock_processor, mock_reporter):
    _, processor = mock_processor
    _, reporter = mock_reporter

    result = runner.invoke(app, ["resources", "--top", "5"])

    assert result.exit_code == 0, result.output
    processor.run_resources_summary.assert_awaited_once()
    reporter.report_resources_summary.assert_called_once()
    assert reporter.report_resources_summary.call_args.kwargs["top"] == 5


def test_resources_summary_json(mock_processor):
    result = runner.invoke(app, ["resources", "-o", "json"])

    assert result.exit_code == 0, result.output
    content = json.loads(result.stdout)
    assert content["metrics_available"] is False
    assert content["cluster_capacity"]["total_cpu_capacity"] == 4000
    assert content["namespaces"][0]["namespace"] == "dev"


def test_resources_subcommand_skips_summary(mock_processor, mock_reporter):
    _, processor = mock_processor

    result = runner.invoke(app, ["resources", "inventory"])

    assert result.exit_code == 0, result.output
    processor.run_resources_summary.assert_not_awaited()


def test_resources_usage_truncated_json(mock_processor):
    result = runner.invoke(app, ["resources", "usage", "--top", "1", "-o", "json"])

    assert result.exit_code == 0, result.output
    content = json.loads(result.stdout)
    assert [u["container"] for u in content] == ["a"]
    assert content[0]["cpu_usage"] == 120


def test_resources_usage_without_metrics(mock_processor):
    _, processor = mock_processor
    processor.run_usage.side_effect = MetricsUnavailableError(
        "metrics API (metrics.k8s.io) not available; install metrics-server"
    )

    result = runner.invoke(app, ["resources", "usage"])

    assert result.exit_code == 1
    assert "install metrics-server" in result.output


def test_nodes_info_and_health(mock_processor, mock_reporter):
    _, processor = mock_processor
    _, reporter = mock_reporter

    result = runner.invoke(app, ["nodes"])
    assert result.exit_code == 0, result.output
    reporter.report_node_info.assert_called_once()
    processor.run_node_info.assert_awaited_with(node_name=None)

    result = runner.invoke(app, ["nodes", "--health", "--node", "n1"])
    assert result.exit_code == 0, result.output
    reporter.report_node_health.assert_called_once()
    processor.run_node_info.assert_awaited_with(node_name="n1")


def test_nodes_yaml(mock_processor):
    result = runner.invoke(app, ["nodes", "-o", "yaml"])

    assert result.exit_code == 0, result.output
    content = yaml.safe_load(result.stdout)
    assert content[0]["health"] == "CRITICAL"
    assert content[0]["issues"] == ["Node not ready"]


def test_nodes_unknown_node(mock_processor):
    _, processor = mock_processor
    processor.run_node_info.side_effect = DataFetchError("node 'ghost' not found")

    result = runner.invoke(app, ["nodes", "--node", "ghost"])

    assert result.exit_code == 1
    assert "node 'ghost' not found" in result.output


def test_config_set_writes_validated_value(tmp_path):
    result = runner.invoke(app, ["config", "set", "pressure_thresholds.high", "85"])

    assert result.exit_code == 0, result.output
    assert "pressure_thresholds.high = 85" in result.output
    saved = yaml.safe_load((tmp_path / "settings.yaml").read_text())
    assert saved["pressure_thresholds"]["high"] == 85.0

    result = runner.invoke(app, ["config", "set", "top", "7"])
    assert result.exit_code == 0, result.output
    saved = yaml.safe_load((tmp_path / "settings.yaml").read_text())
    assert saved["top"] == 7
    assert saved["pressure_thresholds"]["high"] == 85.0


@pytest.mark.parametrize(
    "args, message",
    [
        (["volume", "11"], "Unknown config key: volume"),
        (["pressure_thresholds.medium", "95"], "must be less than 'high'"),
        (["pressure_thresholds.low", "nan"], "finite number"),
        (["top", "lots"], "Invalid value for 'top'"),
    ],
)
def test_config_set_rejects_invalid_values(tmp_path, args, message):
    result = runner.invoke(app, ["config", "set", *args])

    assert result.exit_code == 1
    assert message in result.output
    assert not (tmp_path / "settings.yaml").exists()


def test_config_reset_restores_defaults(tmp_path):
    save_settings(Settings(output="json", top=3))

    result = runner.invoke(app, ["config", "reset"])

    assert result.exit_code == 0, result.output
    assert "reset to defaults" in result.output
    saved = yaml.safe_load((tmp_path / "settings.yaml").read_text())
    assert saved["output"] == "text"
    assert saved["top"] == 20
