"""
JsonRenderer — Render data as JSON for piping

Clean data: keys starting with "_" are internal and never emitted.
"""

import json
from typing import TYPE_CHECKING, Any

from .base import BaseRenderer

if TYPE_CHECKING:
    from . import OutputSpec


class JsonRenderer(BaseRenderer):
    """
    Render data as JSON.

    Useful for CI annotations, jq pipelines and editor integrations.
    """

    def __init__(self, *args, compact: bool = False, **kwargs):
        super().__init__(*args, **kwargs)
        self.compact = compact

    def render(self, spec: "OutputSpec") -> str:
        data = self._clean_data(spec.data)

        if spec.title:
            output = {
                "title": spec.title,
                "data": data
            }
        else:
            output = data

        if self.compact:
            return json.dumps(output, default=self._json_serializer, ensure_ascii=False)
        return json.dumps(
            output,
            indent=2,
            default=self._json_serializer,
            ensure_ascii=False
        )

    def _clean_data(self, data: Any) -> Any:
        """Remove internal keys (starting with _) recursively."""
        if isinstance(data, dict):
            return {
                k: self._clean_data(v)
                for k, v in data.items()
                if not str(k).startswith("_")
            }
        elif isinstance(data, (list, tuple)):
            return [self._clean_data(item) for item in data]
        else:
            return data

    def _json_serializer(self, obj: Any) -> Any:
        """Serializer for records, enums and paths."""
        if hasattr(obj, "to_dict"):
            return obj.to_dict()
        if hasattr(obj, "value"):  # Enum
            return obj.value
        # Last resort: string representation
        return str(obj)
