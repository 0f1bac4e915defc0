# src/kubesight/models/snapshot.py
"""
Pydantic models for the raw cluster records handed to the analysis core.

Collectors translate Kubernetes API objects into these records so the core
never depends on the client library. Quantities are kept as the strings the
API returned (e.g. "500m", "1Gi"); parsing happens in the core.
"""

from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..utils.k8s_utils import parse_cpu, parse_memory
from .resources import ContainerUsage

QuantityMap = Dict[str, Union[str, int]]


class ContainerSpec(BaseModel):
    """Declared requests/limits of one container, keyed by resource name."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="The name of the container within the pod.")
    requests: QuantityMap = Field(default_factory=dict, description="Resource requests, e.g. {'cpu': '500m'}.")
    limits: QuantityMap = Field(default_factory=dict, description="Resource limits, e.g. {'memory': '1Gi'}.")


class PodRecord(BaseModel):
    """A pod as seen by the analysis core."""

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="The namespace the pod belongs to.")
    name: str = Field(..., description="The name of the Kubernetes pod.")
    node_name: Optional[str] = Field(None, description="The node the pod is scheduled on, if any.")
    containers: List[ContainerSpec] = Field(default_factory=list)
    init_containers: List[ContainerSpec] = Field(default_factory=list)


class NodeRecord(BaseModel):
    """
    A node with its allocatable and capacity resource maps.

    Missing resources parse to 0, which the pressure classifier treats as
    "cannot be classified" rather than as saturation.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Node name")
    allocatable: QuantityMap = Field(default_factory=dict)
    capacity: QuantityMap = Field(default_factory=dict)
    system_info: Dict[str, str] = Field(
        default_factory=dict, description="Kubelet-reported node_info fields, e.g. {'kernel_version': '6.1.0'}."
    )
    conditions: Dict[str, str] = Field(
        default_factory=dict, description="Condition type to status, e.g. {'Ready': 'True'}."
    )

    @property
    def cpu_allocatable(self) -> int:
        return parse_cpu(self.allocatable.get("cpu"))

    @property
    def mem_allocatable(self) -> int:
        return parse_memory(self.allocatable.get("memory"))

    @property
    def cpu_capacity(self) -> int:
        return parse_cpu(self.capacity.get("cpu"))

    @property
    def mem_capacity(self) -> int:
        return parse_memory(self.capacity.get("memory"))


class LimitRangeItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str = Field("", description="Container, Pod or PersistentVolumeClaim.")
    default: QuantityMap = Field(default_factory=dict)
    max: QuantityMap = Field(default_factory=dict)
    min: QuantityMap = Field(default_factory=dict)


class LimitRangeRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    limits: List[LimitRangeItem] = Field(default_factory=list)


class ResourceQuotaRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    namespace: str
    name: str
    hard: QuantityMap = Field(default_factory=dict)
    used: QuantityMap = Field(default_factory=dict)


class ClusterSnapshot(BaseModel):
    """
    Everything one analysis run needs, fetched up front.

    `usage` is None when the metrics API is not available; an empty list means
    metrics are served but nothing matched.
    """

    nodes: List[NodeRecord] = Field(default_factory=list)
    pods: List[PodRecord] = Field(default_factory=list)
    limit_ranges: List[LimitRangeRecord] = Field(default_factory=list)
    resource_quotas: List[ResourceQuotaRecord] = Field(default_factory=list)
    usage: Optional[List[ContainerUsage]] = None

    @property
    def has_usage(self) -> bool:
        return self.usage is not None
