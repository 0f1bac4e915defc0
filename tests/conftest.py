# tests/conftest.py

import pytest

from kubesight.models.capacity import PressureThresholds
from kubesight.models.snapshot import ContainerSpec, NodeRecord, PodRecord


@pytest.fixture(autouse=True)
def mock_settings_env_vars(monkeypatch, tmp_path):
    """
    Pytest fixture to isolate the config module from the real environment.

    Runs automatically for every test (`autouse=True`): the settings file is
    pointed into the test's tmp_path and any kubeconfig/context coming from
    the developer's shell is cleared.
    """
    monkeypatch.setenv("KUBESIGHT_SETTINGS_PATH", str(tmp_path / "settings.yaml"))
    monkeypatch.delenv("KUBESIGHT_CONTEXT", raising=False)
    monkeypatch.delenv("KUBECONFIG", raising=False)
    monkeypatch.delenv("KUBESIGHT_REQUEST_TIMEOUT", raising=False)


@pytest.fixture
def thresholds():
    return PressureThresholds()


@pytest.fixture
def make_pod():
    """
    Factory for PodRecord objects.

    Containers are given as (name, requests, limits) tuples.
    """

    def _make(namespace="default", name="pod", node_name=None, containers=(), init_containers=()):
        return PodRecord(
            namespace=namespace,
            name=name,
            node_name=node_name,
            containers=[ContainerSpec(name=c, requests=r, limits=l) for c, r, l in containers],
            init_containers=[ContainerSpec(name=c, requests=r, limits=l) for c, r, l in init_containers],
        )

    return _make


@pytest.fixture
def make_node():
    def _make(name="node-1", cpu="4", memory="16Gi", cpu_capacity=None, memory_capacity=None):
        allocatable = {}
        if cpu is not None:
            allocatable["cpu"] = cpu
        if memory is not None:
            allocatable["memory"] = memory
        return NodeRecord(
            name=name,
            allocatable=allocatable,
            capacity={"cpu": cpu_capacity or cpu or "0", "memory": memory_capacity or memory or "0"},
        )

    return _make
