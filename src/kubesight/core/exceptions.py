class KubeSightError(Exception):
    """Base exception for KubeSight."""

    pass


class ConfigurationError(KubeSightError):
    """Raised when user configuration is missing, unreadable or invalid."""

    pass


class DataFetchError(KubeSightError):
    """Raised when nodes, pods or policies cannot be read from the cluster."""

    pass


class MetricsUnavailableError(DataFetchError):
    """Raised when the metrics.k8s.io API is required but not served."""

    pass


class InvalidQuantityError(KubeSightError, ValueError):
    """Raised when a Kubernetes resource quantity cannot be parsed."""

    pass
