"""
ListRenderer — Render data as bullet lists

Supports:
- Simple bullet lists
- Findings (location + message)
- Nested lists (one level of children)
"""

from typing import TYPE_CHECKING, List, Dict

from .base import BaseRenderer

if TYPE_CHECKING:
    from . import OutputSpec


class ListRenderer(BaseRenderer):
    """
    Render data as formatted lists.

    Expected data formats:
    - List of strings: ["item1", "item2"]
    - List of dicts: [{"text": "..."}, {"path": ..., "line": ..., "message": ...}]
    - Dict with "items" key: {"items": [...], "summary": "..."}
    """

    def render(self, spec: "OutputSpec") -> str:
        summary = None
        if isinstance(spec.data, list):
            items = spec.data
        elif isinstance(spec.data, dict):
            items = spec.data.get("items") or spec.data.get("rows", [])
            summary = spec.data.get("summary")
        else:
            items = []

        if not items:
            return f"{spec.empty_message}\n{summary}" if summary else spec.empty_message

        lines = []

        if spec.title:
            lines.append(f"{spec.title}\n")

        if self._is_findings(items):
            lines.extend(self._render_findings(items))
        elif self._is_nested(items):
            lines.extend(self._render_nested(items))
        else:
            lines.extend(self._render_bullets(items))

        if summary:
            lines.append("")
            lines.append(summary)

        return "\n".join(lines)

    # =========================================================================
    # Type Detection
    # =========================================================================

    def _is_findings(self, items: List) -> bool:
        if not items or not isinstance(items[0], dict):
            return False
        return "path" in items[0] and "message" in items[0]

    def _is_nested(self, items: List) -> bool:
        if not items or not isinstance(items[0], dict):
            return False
        return "children" in items[0]

    # =========================================================================
    # Renderers
    # =========================================================================

    def _item_text(self, item) -> str:
        if isinstance(item, dict):
            return self.safe_str(
                item.get("text") or
                item.get("message") or
                item.get("name") or
                item.get("description") or
                item
            )
        return str(item)

    def _render_bullets(self, items: List) -> List[str]:
        s = self.symbols
        return [
            f"  {s.bullet} {self.truncate(self._item_text(item), self.width - 4)}"
            for item in items
        ]

    def _render_findings(self, items: List[Dict]) -> List[str]:
        """Location line, then the message indented under it."""
        s = self.symbols
        lines = []
        for item in items:
            location = f"{item['path']}:{item['line']}" if item.get("line") else str(item["path"])
            feature = item.get("feature")
            header = f"{s.check_warn} {location}"
            if feature:
                header += f" {s.arrow} {feature}"
            lines.append(header)
            # Messages are never truncated: they carry the remediation
            lines.append(f"    {item['message']}")
        return lines

    def _render_nested(self, items: List[Dict]) -> List[str]:
        s = self.symbols
        lines = []
        for item in items:
            lines.append(f"  {s.bullet} {self.truncate(self._item_text(item), self.width - 4)}")
            for child in item.get("children") or []:
                text = self.truncate(self._item_text(child), self.width - 8)
                lines.append(f"      {s.arrow} {text}")
        return lines
