from .metrics_collector import MetricsCollector
from .node_collector import NodeCollector
from .pod_collector import PodCollector
from .policy_collector import PolicyCollector

__all__ = [
    "MetricsCollector",
    "NodeCollector",
    "PodCollector",
    "PolicyCollector",
]
