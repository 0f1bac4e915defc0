# src/kubesight/models/capacity.py
"""
Capacity and pressure models.

PressureLevel is ordered by rank, never by its string value, so
"SATURATED" > "HIGH" holds even though it does not alphabetically.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PressureLevel(str, Enum):
    """Ordered severity of resource pressure."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    SATURATED = "SATURATED"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other):
        if not isinstance(other, PressureLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, PressureLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, PressureLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, PressureLevel):
            return NotImplemented
        return self.rank >= other.rank


_RANKS = {
    PressureLevel.LOW: 0,
    PressureLevel.MEDIUM: 1,
    PressureLevel.HIGH: 2,
    PressureLevel.SATURATED: 3,
}


class PressureThresholds(BaseModel):
    """
    Utilization percentages at which each pressure level starts.

    Every value must be a finite number in [0, 100] and the four must be strictly
    increasing. Invalid combinations are rejected when the model is built.
    """

    model_config = ConfigDict(frozen=True)

    low: float = Field(50.0, allow_inf_nan=False, description="First rung; anything under 'medium' is LOW.")
    medium: float = Field(75.0, allow_inf_nan=False)
    high: float = Field(90.0, allow_inf_nan=False)
    saturated: float = Field(100.0, allow_inf_nan=False)

    @model_validator(mode="after")
    def _check_range_and_order(self):
        for name in ("low", "medium", "high", "saturated"):
            value = getattr(self, name)
            if value < 0 or value > 100:
                raise ValueError(f"pressure threshold '{name}' must be between 0 and 100, got {value:.1f}")
        pairs = (("low", "medium"), ("medium", "high"), ("high", "saturated"))
        for lower, upper in pairs:
            lo, hi = getattr(self, lower), getattr(self, upper)
            if lo >= hi:
                raise ValueError(f"pressure threshold '{lower}' ({lo:.1f}) must be less than '{upper}' ({hi:.1f})")
        return self


class NodeCapacity(BaseModel):
    """Allocatable and total capacity of a single node."""

    name: str
    cpu_allocatable: int = 0  # in millicores
    cpu_capacity: int = 0  # in millicores
    mem_allocatable: int = 0  # in bytes
    mem_capacity: int = 0  # in bytes


class ClusterCapacitySummary(BaseModel):
    """Node capacity summed over the cluster, next to requested/limited totals from pods."""

    total_cpu_capacity: int = 0
    total_cpu_allocatable: int = 0
    total_mem_capacity: int = 0
    total_mem_allocatable: int = 0

    total_cpu_requests: int = 0
    total_cpu_limits: int = 0
    total_mem_requests: int = 0
    total_mem_limits: int = 0


class NodePressure(BaseModel):
    """
    Requested resources against a node's allocatable.

    A level of None means the node reports no allocatable for that resource
    and was not classified.
    """

    node_name: str
    cpu_utilization: float = 0.0
    cpu_pressure: Optional[PressureLevel] = None
    mem_utilization: float = 0.0
    mem_pressure: Optional[PressureLevel] = None


class NamespacePressure(BaseModel):
    """Requests of a namespace as a share of cluster-wide allocatable."""

    namespace: str
    cpu_utilization: float = 0.0
    cpu_pressure: Optional[PressureLevel] = None
    mem_utilization: float = 0.0
    mem_pressure: Optional[PressureLevel] = None
    # Set only when utilization reaches the 'high' threshold
    cpu_status: str = ""
    mem_status: str = ""


class ClusterPressure(BaseModel):
    overall: PressureLevel = PressureLevel.LOW
    cpu_utilization: float = 0.0
    cpu_pressure: Optional[PressureLevel] = None
    mem_utilization: float = 0.0
    mem_pressure: Optional[PressureLevel] = None
    node_pressures: List[NodePressure] = Field(default_factory=list)
    namespace_pressures: List[NamespacePressure] = Field(default_factory=list)
