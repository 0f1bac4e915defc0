"""KubeSight: resource inventory, pressure and usage analysis for Kubernetes clusters."""

__version__ = "0.3.0"
