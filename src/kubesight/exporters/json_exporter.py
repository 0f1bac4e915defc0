import json
from typing import Any

from .base_exporter import BaseExporter, to_plain


class JSONExporter(BaseExporter):
    DEFAULT_FILENAME = "kubesight-report.json"

    def render(self, data: Any) -> str:
        return json.dumps(to_plain(data), ensure_ascii=False, indent=2)
