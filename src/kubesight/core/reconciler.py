# src/kubesight/core/reconciler.py
"""
Joins declared requests/limits with observed usage, per container.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..models.resources import ContainerDiff, ContainerResource, ContainerUsage

logger = logging.getLogger(__name__)

UsageKey = Tuple[str, str, str]

SORT_KEYS: Dict[str, Callable[[ContainerDiff], Optional[float]]] = {
    "cpu": lambda d: d.cpu_usage_to_request,
    "memory": lambda d: d.mem_usage_to_request,
}


def _ratio(usage: int, request: int, has_request: bool, has_usage: bool) -> Optional[float]:
    if not has_usage or not has_request or request == 0:
        return None
    return usage / request


def build_diff(inventory: Iterable[ContainerResource], usage: Iterable[ContainerUsage]) -> List[ContainerDiff]:
    """
    One ContainerDiff per inventory record, keyed by (namespace, pod, container).

    Containers without a usage record get zero usage, `has_usage=False` and no
    ratios: unmeasured is not the same as idle. Neither input is modified.
    """
    usage_by_key: Dict[UsageKey, ContainerUsage] = {(u.namespace, u.pod, u.container): u for u in usage}

    diffs: List[ContainerDiff] = []
    unmatched = 0
    for cr in inventory:
        observed = usage_by_key.get((cr.namespace, cr.pod, cr.container))
        has_usage = observed is not None
        if not has_usage:
            unmatched += 1
        cpu_usage = observed.cpu_usage if has_usage else 0
        mem_usage = observed.mem_usage if has_usage else 0

        diffs.append(
            ContainerDiff(
                namespace=cr.namespace,
                pod=cr.pod,
                container=cr.container,
                cpu_usage=cpu_usage,
                cpu_request=cr.cpu_request,
                cpu_limit=cr.cpu_limit,
                has_cpu_request=cr.has_cpu_request,
                has_cpu_limit=cr.has_cpu_limit,
                mem_usage=mem_usage,
                mem_request=cr.mem_request,
                mem_limit=cr.mem_limit,
                has_mem_request=cr.has_mem_request,
                has_mem_limit=cr.has_mem_limit,
                has_usage=has_usage,
                cpu_usage_to_request=_ratio(cpu_usage, cr.cpu_request, cr.has_cpu_request, has_usage),
                mem_usage_to_request=_ratio(mem_usage, cr.mem_request, cr.has_mem_request, has_usage),
            )
        )

    # sort() is stable, so records sharing an identity keep inventory order
    diffs.sort(key=lambda d: (d.namespace, d.pod, d.container))
    if unmatched:
        logger.debug("%d of %d containers had no usage record.", unmatched, len(diffs))
    return diffs


def top_diffs(
    diffs: List[ContainerDiff],
    top: int,
    key: Callable[[ContainerDiff], Optional[float]] = SORT_KEYS["cpu"],
) -> List[ContainerDiff]:
    """
    The `top` diffs with the highest ratio under `key`; top <= 0 keeps all.

    Diffs without a ratio sort last, ties keep the identity order.
    """
    ranked = sorted(diffs, key=lambda d: (key(d) is None, -(key(d) or 0.0)))
    if top <= 0:
        return ranked
    return ranked[:top]
