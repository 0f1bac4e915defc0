from typing import Any

import yaml

from .base_exporter import BaseExporter, to_plain


class YAMLExporter(BaseExporter):
    DEFAULT_FILENAME = "kubesight-report.yaml"

    def render(self, data: Any) -> str:
        return yaml.safe_dump(to_plain(data), default_flow_style=False, sort_keys=False, allow_unicode=True)
