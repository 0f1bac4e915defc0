# src/kubesight/collectors/policy_collector.py
"""
Collects LimitRange and ResourceQuota objects.
"""

import logging
from typing import List, Tuple

from ..core.exceptions import DataFetchError
from ..models.snapshot import LimitRangeItem, LimitRangeRecord, ResourceQuotaRecord
from .base_collector import FETCH_ERRORS, KubernetesCollector

logger = logging.getLogger(__name__)


def limit_range_to_record(lr) -> LimitRangeRecord:
    items = []
    for item in (lr.spec.limits if lr.spec else None) or []:
        items.append(
            LimitRangeItem(
                type=item.type or "",
                default=dict(item.default or {}),
                max=dict(item.max or {}),
                min=dict(item.min or {}),
            )
        )
    return LimitRangeRecord(namespace=lr.metadata.namespace, name=lr.metadata.name, limits=items)


def resource_quota_to_record(rq) -> ResourceQuotaRecord:
    status = rq.status
    return ResourceQuotaRecord(
        namespace=rq.metadata.namespace,
        name=rq.metadata.name,
        hard=dict((status.hard if status else None) or {}),
        used=dict((status.used if status else None) or {}),
    )


class PolicyCollector(KubernetesCollector):
    """Lists LimitRanges and ResourceQuotas in one namespace or cluster-wide."""

    async def collect(self) -> Tuple[List[LimitRangeRecord], List[ResourceQuotaRecord]]:
        api = await self._ensure_client()
        timeout = self.request_timeout

        try:
            if self.namespace:
                limit_ranges = await api.list_namespaced_limit_range(self.namespace, _request_timeout=timeout)
            else:
                limit_ranges = await api.list_limit_range_for_all_namespaces(_request_timeout=timeout)
        except FETCH_ERRORS as e:
            logger.error("Error listing limitranges: %s", e)
            raise DataFetchError(f"listing limitranges: {e}") from e

        try:
            if self.namespace:
                quotas = await api.list_namespaced_resource_quota(self.namespace, _request_timeout=timeout)
            else:
                quotas = await api.list_resource_quota_for_all_namespaces(_request_timeout=timeout)
        except FETCH_ERRORS as e:
            logger.error("Error listing resourcequotas: %s", e)
            raise DataFetchError(f"listing resourcequotas: {e}") from e

        lr_records = [limit_range_to_record(lr) for lr in limit_ranges.items]
        rq_records = [resource_quota_to_record(rq) for rq in quotas.items]
        logger.debug("Collected %d limitranges and %d resourcequotas.", len(lr_records), len(rq_records))
        return lr_records, rq_records
