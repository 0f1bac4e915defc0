# src/kubesight/models/resources.py
"""
This module defines the Pydantic data models produced by the inventory and
usage analysis. CPU values are integer millicores and memory values are
integer bytes throughout, so totals are exact however many pods are summed.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .capacity import ClusterCapacitySummary


class ContainerResource(BaseModel):
    """
    Declared requests/limits for a single container.

    A `has_*` flag is False only when the value was never set on the
    container; an explicit "0" is present and zero.
    """

    model_config = ConfigDict(frozen=True)

    namespace: str = Field(..., description="The namespace the pod belongs to.")
    pod: str = Field(..., description="The name of the Kubernetes pod.")
    container: str = Field(..., description="The name of the container within the pod.")
    is_init: bool = Field(False, description="Whether this is an init container.")

    cpu_request: int = Field(0, description="CPU request in millicores.")
    cpu_limit: int = Field(0, description="CPU limit in millicores.")
    mem_request: int = Field(0, description="Memory request in bytes.")
    mem_limit: int = Field(0, description="Memory limit in bytes.")

    has_cpu_request: bool = False
    has_cpu_limit: bool = False
    has_mem_request: bool = False
    has_mem_limit: bool = False

    @property
    def missing_any_request(self) -> bool:
        # Only a container with neither request counts as missing.
        return not self.has_cpu_request and not self.has_mem_request

    @property
    def missing_any_limit(self) -> bool:
        return not self.has_cpu_limit and not self.has_mem_limit


class NamespaceInventory(BaseModel):
    """Resource coverage and totals for one namespace."""

    namespace: str
    containers_total: int = 0
    containers_missing_any_request: int = 0
    containers_missing_any_limit: int = 0

    cpu_requests_total: int = 0  # in millicores
    cpu_limits_total: int = 0  # in millicores
    mem_requests_total: int = 0  # in bytes
    mem_limits_total: int = 0  # in bytes


class LimitRangeItemSummary(BaseModel):
    type: str = ""
    default_cpu: str = ""
    default_memory: str = ""
    max_cpu: str = ""
    max_memory: str = ""
    min_cpu: str = ""
    min_memory: str = ""


class LimitRangeSummary(BaseModel):
    name: str
    items: List[LimitRangeItemSummary] = Field(default_factory=list)


class ResourceQuotaSummary(BaseModel):
    name: str
    hard: Dict[str, str] = Field(default_factory=dict)
    used: Dict[str, str] = Field(default_factory=dict)


class PolicySummary(BaseModel):
    """LimitRange and ResourceQuota summaries for a namespace."""

    namespace: str
    limit_ranges: List[LimitRangeSummary] = Field(default_factory=list)
    resource_quotas: List[ResourceQuotaSummary] = Field(default_factory=list)


class Inventory(BaseModel):
    """Result of an inventory run, every list in its documented sort order."""

    namespaces: List[NamespaceInventory] = Field(default_factory=list)
    containers: List[ContainerResource] = Field(default_factory=list)
    policies: List[PolicySummary] = Field(default_factory=list)


class PodResourceSummary(BaseModel):
    """Requests, limits and (optionally) observed usage summed over a pod's containers."""

    namespace: str
    pod: str
    cpu_request: int = 0
    cpu_limit: int = 0
    mem_request: int = 0
    mem_limit: int = 0
    cpu_usage: int = 0
    mem_usage: int = 0
    has_usage: bool = False


class ContainerUsage(BaseModel):
    """Observed CPU/memory usage of a container, from metrics.k8s.io."""

    model_config = ConfigDict(frozen=True)

    namespace: str
    pod: str
    container: str
    cpu_usage: int = Field(0, description="Observed CPU in millicores.")
    mem_usage: int = Field(0, description="Observed memory working set in bytes.")


class ContainerDiff(BaseModel):
    """
    Observed usage next to declared requests/limits for one container.

    The ratios are None when the request is absent or zero, or when no usage
    was observed for the container; None means "unknown", never "idle".
    """

    namespace: str
    pod: str
    container: str

    cpu_usage: int = 0
    cpu_request: int = 0
    cpu_limit: int = 0
    has_cpu_request: bool = False
    has_cpu_limit: bool = False

    mem_usage: int = 0
    mem_request: int = 0
    mem_limit: int = 0
    has_mem_request: bool = False
    has_mem_limit: bool = False

    has_usage: bool = False
    cpu_usage_to_request: Optional[float] = None
    mem_usage_to_request: Optional[float] = None


class ResourcesSummary(BaseModel):
    """
    The broad `resources` overview: cluster capacity against declared
    totals, per-pod and per-namespace totals, and whether usage metrics
    can be read at all.
    """

    cluster_capacity: ClusterCapacitySummary
    pods: List[PodResourceSummary] = Field(default_factory=list)
    namespaces: List[NamespaceInventory] = Field(default_factory=list)
    metrics_available: bool = False

    @property
    def containers_total(self) -> int:
        return sum(ns.containers_total for ns in self.namespaces)

    @property
    def containers_missing_any_request(self) -> int:
        return sum(ns.containers_missing_any_request for ns in self.namespaces)

    @property
    def containers_missing_any_limit(self) -> int:
        return sum(ns.containers_missing_any_limit for ns in self.namespaces)
