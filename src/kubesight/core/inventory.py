# src/kubesight/core/inventory.py
"""
Aggregates ContainerResource facts into per-namespace inventories.

Ordering is part of the output contract so that "top N" truncation further
down is reproducible:
- namespaces ascending by name;
- containers by (namespace, pod, container), regular before init on a tie;
- policy summaries by namespace, then by object name.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from ..models.resources import (
    ContainerResource,
    ContainerUsage,
    Inventory,
    LimitRangeItemSummary,
    LimitRangeSummary,
    NamespaceInventory,
    PodResourceSummary,
    PolicySummary,
    ResourceQuotaSummary,
)
from ..models.snapshot import LimitRangeRecord, PodRecord, ResourceQuotaRecord
from .extractor import extract_pod_resources

logger = logging.getLogger(__name__)


def container_sort_key(cr: ContainerResource) -> Tuple[str, str, str, bool]:
    return (cr.namespace, cr.pod, cr.container, cr.is_init)


def _add_to_namespace_inventory(inv: NamespaceInventory, cr: ContainerResource) -> None:
    inv.containers_total += 1

    if cr.missing_any_request:
        inv.containers_missing_any_request += 1
    if cr.missing_any_limit:
        inv.containers_missing_any_limit += 1

    # Absent quantities are skipped, present zeros add nothing either way.
    if cr.has_cpu_request:
        inv.cpu_requests_total += cr.cpu_request
    if cr.has_cpu_limit:
        inv.cpu_limits_total += cr.cpu_limit
    if cr.has_mem_request:
        inv.mem_requests_total += cr.mem_request
    if cr.has_mem_limit:
        inv.mem_limits_total += cr.mem_limit


def summarize_limit_range(lr: LimitRangeRecord) -> LimitRangeSummary:
    """Compact, string-only view of a LimitRange."""

    def _get(values, key: str) -> str:
        value = (values or {}).get(key)
        return "" if value is None else str(value)

    items = [
        LimitRangeItemSummary(
            type=item.type,
            default_cpu=_get(item.default, "cpu"),
            default_memory=_get(item.default, "memory"),
            max_cpu=_get(item.max, "cpu"),
            max_memory=_get(item.max, "memory"),
            min_cpu=_get(item.min, "cpu"),
            min_memory=_get(item.min, "memory"),
        )
        for item in lr.limits
    ]
    return LimitRangeSummary(name=lr.name, items=items)


def summarize_resource_quota(rq: ResourceQuotaRecord) -> ResourceQuotaSummary:
    return ResourceQuotaSummary(
        name=rq.name,
        hard={k: str(v) for k, v in sorted(rq.hard.items())},
        used={k: str(v) for k, v in sorted(rq.used.items())},
    )


def build_policy_summaries(
    limit_ranges: Iterable[LimitRangeRecord] = (),
    resource_quotas: Iterable[ResourceQuotaRecord] = (),
) -> List[PolicySummary]:
    policies: Dict[str, PolicySummary] = {}

    for lr in sorted(limit_ranges, key=lambda r: (r.namespace, r.name)):
        summary = policies.setdefault(lr.namespace, PolicySummary(namespace=lr.namespace))
        summary.limit_ranges.append(summarize_limit_range(lr))

    for rq in sorted(resource_quotas, key=lambda r: (r.namespace, r.name)):
        summary = policies.setdefault(rq.namespace, PolicySummary(namespace=rq.namespace))
        summary.resource_quotas.append(summarize_resource_quota(rq))

    return [policies[ns] for ns in sorted(policies)]


def build_inventory(
    containers: Iterable[ContainerResource],
    limit_ranges: Iterable[LimitRangeRecord] = (),
    resource_quotas: Iterable[ResourceQuotaRecord] = (),
) -> Inventory:
    """
    Groups container facts by namespace and returns sorted inventories,
    the sorted container list and the per-namespace policy summaries.

    Any exception raised while iterating `containers` propagates; no partial
    inventory is returned.
    """
    all_containers: List[ContainerResource] = []
    namespaces: Dict[str, NamespaceInventory] = {}

    for cr in containers:
        inv = namespaces.get(cr.namespace)
        if inv is None:
            inv = namespaces[cr.namespace] = NamespaceInventory(namespace=cr.namespace)
        _add_to_namespace_inventory(inv, cr)
        all_containers.append(cr)

    all_containers.sort(key=container_sort_key)
    policies = build_policy_summaries(limit_ranges, resource_quotas)

    logger.debug(
        "Built inventory: %d namespaces, %d containers, %d policy summaries.",
        len(namespaces),
        len(all_containers),
        len(policies),
    )
    return Inventory(
        namespaces=[namespaces[ns] for ns in sorted(namespaces)],
        containers=all_containers,
        policies=policies,
    )


def build_pod_summaries(
    pods: Iterable[PodRecord],
    usage: Optional[Iterable[ContainerUsage]] = None,
) -> List[PodResourceSummary]:
    """
    Sums requests and limits of regular and init containers per pod.

    When `usage` is given, observed usage of the pod's containers is added and
    `has_usage` is set on pods with at least one matching container.
    """
    usage_by_key: Dict[Tuple[str, str, str], ContainerUsage] = {}
    for u in usage or ():
        usage_by_key[(u.namespace, u.pod, u.container)] = u

    summaries: Dict[Tuple[str, str], PodResourceSummary] = {}
    seen_containers = defaultdict(set)

    for pod in pods:
        key = (pod.namespace, pod.name)
        summary = summaries.get(key)
        if summary is None:
            summary = summaries[key] = PodResourceSummary(namespace=pod.namespace, pod=pod.name)

        for cr in extract_pod_resources(pod):
            summary.cpu_request += cr.cpu_request if cr.has_cpu_request else 0
            summary.cpu_limit += cr.cpu_limit if cr.has_cpu_limit else 0
            summary.mem_request += cr.mem_request if cr.has_mem_request else 0
            summary.mem_limit += cr.mem_limit if cr.has_mem_limit else 0

            if cr.is_init or cr.container in seen_containers[key]:
                continue
            seen_containers[key].add(cr.container)
            observed = usage_by_key.get((pod.namespace, pod.name, cr.container))
            if observed is not None:
                summary.cpu_usage += observed.cpu_usage
                summary.mem_usage += observed.mem_usage
                summary.has_usage = True

    return [summaries[k] for k in sorted(summaries)]
