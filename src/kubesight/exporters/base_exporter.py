from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any

import aiofiles
from pydantic import BaseModel


def to_plain(data: Any) -> Any:
    """Converts pydantic models (or lists/tuples/dicts of them) to JSON-compatible values."""
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, (list, tuple)):
        return [to_plain(item) for item in data]
    if isinstance(data, dict):
        return {key: to_plain(value) for key, value in data.items()}
    return data


class BaseExporter(ABC):
    """Abstract base class for structured exporters.

    Subclasses provide a DEFAULT_FILENAME and implement `render`.
    """

    DEFAULT_FILENAME: str = "kubesight-report"

    @abstractmethod
    def render(self, data: Any) -> str:
        """Serialize the provided data to a string."""
        raise NotImplementedError()

    async def export(self, data: Any, path: str | None = None) -> str:
        """Write the rendered data to disk. Return the written path."""
        out_path = path or self.DEFAULT_FILENAME
        # Ensure parent directory exists
        os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)

        async with aiofiles.open(out_path, "w", encoding="utf-8") as fh:
            await fh.write(self.render(data))
        return out_path
