# src/kubesight/collectors/node_collector.py

import logging
from typing import Dict, List

from ..core.exceptions import DataFetchError
from ..models.snapshot import NodeRecord
from .base_collector import FETCH_ERRORS, KubernetesCollector

logger = logging.getLogger(__name__)

SYSTEM_INFO_FIELDS = (
    "os_image",
    "operating_system",
    "architecture",
    "kernel_version",
    "kubelet_version",
    "container_runtime_version",
)


def _system_info(node_info) -> Dict[str, str]:
    if node_info is None:
        return {}
    values = {}
    for field in SYSTEM_INFO_FIELDS:
        value = getattr(node_info, field, None)
        if value:
            values[field] = str(value)
    return values


def node_to_record(node) -> NodeRecord:
    """Translates a V1Node into a NodeRecord."""
    status = node.status
    if status is None:
        return NodeRecord(name=node.metadata.name)
    return NodeRecord(
        name=node.metadata.name,
        allocatable=dict(status.allocatable or {}),
        capacity=dict(status.capacity or {}),
        system_info=_system_info(status.node_info),
        conditions={c.type: c.status for c in status.conditions or []},
    )


class NodeCollector(KubernetesCollector):
    """Collects node resources, system info and conditions from the Kubernetes cluster."""

    async def collect(self) -> List[NodeRecord]:
        api = await self._ensure_client()

        try:
            nodes = await api.list_node(watch=False, _request_timeout=self.request_timeout)
        except FETCH_ERRORS as e:
            logger.error("Kubernetes API error while listing nodes: %s", e)
            raise DataFetchError(f"listing nodes: {e}") from e

        records = [node_to_record(node) for node in nodes.items]
        if not records:
            logger.warning("No nodes found in the cluster.")
        for record in records:
            logger.debug(
                " -> Node '%s': allocatable=%s, capacity=%s",
                record.name,
                record.allocatable,
                record.capacity,
            )
        return records
