# src/kubesight/models/nodeinfo.py
"""
Models for the per-node system and health view.
"""

from enum import Enum
from typing import Dict, List

from pydantic import BaseModel, Field


class NodeHealthStatus(str, Enum):
    HEALTHY = "HEALTHY"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class NodeInfo(BaseModel):
    """System details reported by the kubelet, plus health derived from node conditions."""

    name: str = Field(..., description="Node name")
    os_image: str = ""
    operating_system: str = ""
    architecture: str = ""
    kernel_version: str = ""
    kubelet_version: str = ""
    container_runtime: str = Field("", description="Runtime name, e.g. 'containerd'.")
    container_runtime_version: str = ""
    cpu_capacity: int = 0  # in millicores
    mem_capacity: int = 0  # in bytes
    gpus: Dict[str, int] = Field(default_factory=dict, description="GPU resource name to device count.")
    health: NodeHealthStatus = NodeHealthStatus.HEALTHY
    issues: List[str] = Field(default_factory=list)
