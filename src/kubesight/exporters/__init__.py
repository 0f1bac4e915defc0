"""Exporters package for structured (JSON/YAML) report outputs."""

from .base_exporter import BaseExporter
from .json_exporter import JSONExporter
from .yaml_exporter import YAMLExporter

__all__ = ["BaseExporter", "JSONExporter", "YAMLExporter", "get_exporter"]


def get_exporter(output_format: str) -> BaseExporter:
    """Returns the exporter for 'json' or 'yaml'."""
    fmt = (output_format or "").lower()
    if fmt == "json":
        return JSONExporter()
    if fmt == "yaml":
        return YAMLExporter()
    raise ValueError(f"Unsupported output format '{output_format}'. Must be 'json' or 'yaml'.")
