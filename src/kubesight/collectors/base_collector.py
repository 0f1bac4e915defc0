# src/kubesight/collectors/base_collector.py
"""
This module defines the abstract base class for all data collectors.
Enforcing this interface ensures that all collectors have a consistent
method signature, making them interchangeable and easy to manage by the
analysis processor.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

from kubernetes_asyncio.client.rest import ApiException

from ..core.config import config
from ..core.exceptions import DataFetchError
from ..core.k8s_client import get_core_v1_api

logger = logging.getLogger(__name__)

# Errors that mean "the cluster could not be read", as opposed to bugs.
FETCH_ERRORS = (ApiException, OSError, asyncio.TimeoutError)


class BaseCollector(ABC):
    """
    Abstract Base Class for all cluster collectors.
    """

    @abstractmethod
    async def collect(self) -> Any:
        """
        The main method for a collector. It should fetch data from the
        Kubernetes API, translate it, and return Pydantic records.
        """
        pass

    async def close(self):
        """
        Clean up resources (e.g., close HTTP sessions or API clients).
        """
        pass


class KubernetesCollector(BaseCollector):
    """Shared client handling for collectors reading the core/v1 API."""

    def __init__(
        self,
        namespace: Optional[str] = None,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        request_timeout: Optional[int] = None,
    ):
        self.namespace = namespace or None
        self.kubeconfig = kubeconfig
        self.context = context
        self.request_timeout = request_timeout or config.REQUEST_TIMEOUT
        self._api = None

    async def _get_api(self):
        return await get_core_v1_api(self.kubeconfig, self.context)

    async def _ensure_client(self):
        """Lazily initialize the Kubernetes client."""
        if self._api:
            return self._api

        self._api = await self._get_api()
        if not self._api:
            raise DataFetchError(f"{type(self).__name__}: no Kubernetes configuration could be loaded.")
        logger.debug("%s initialized with centralized config.", type(self).__name__)
        return self._api

    async def close(self):
        """Close the Kubernetes API client if it exists."""
        if self._api:
            await self._api.api_client.close()
            logger.debug("%s Kubernetes client closed.", type(self).__name__)
            self._api = None
