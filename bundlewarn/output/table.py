"""
TableRenderer — Boxed tables for gem listings, platform values and findings

Columns come from OutputSpec.columns/column_keys, or from the first row's
keys. Cells are cut with the symbol set's ellipsis so the table fits the
terminal unless full output was requested.
"""

from typing import TYPE_CHECKING, List, Sequence

from .base import BaseRenderer

if TYPE_CHECKING:
    from . import OutputSpec

MIN_COLUMN_WIDTH = 4


class TableRenderer(BaseRenderer):
    """
    Render rows as a table.

    Accepts a list of dicts, or {"rows": [...], "summary": "..."}; the
    summary line is printed under the table.
    """

    def render(self, spec: "OutputSpec") -> str:
        data = spec.data
        summary = data.get("summary") if isinstance(data, dict) else None
        if isinstance(data, dict):
            rows = data.get("rows") or data.get("items") or []
        else:
            rows = data if isinstance(data, list) else []

        if not rows:
            return f"{spec.empty_message}\n{summary}" if summary else spec.empty_message

        keys = spec.column_keys or list(rows[0].keys())
        headers = spec.columns or [k.replace("_", " ").title() for k in keys]
        cells = [[self.safe_str(row.get(key)) for key in keys] for row in rows]
        widths = self._widths(headers, cells)

        s = self.symbols
        lines = [f"{spec.title}\n"] if spec.title else []
        lines.append(self._border(widths, s.box_tl, s.box_t_down, s.box_tr))
        lines.append(self._line([h.center(w)[:w] for h, w in zip(headers, widths)]))
        lines.append(self._border(widths, s.box_t_right, s.box_cross, s.box_t_left))
        lines.extend(self._line(self._fit(row, widths)) for row in cells)
        lines.append(self._border(widths, s.box_bl, s.box_t_up, s.box_br))
        if summary:
            lines.append(summary)
        return "\n".join(lines)

    def _widths(self, headers: Sequence[str], cells: List[List[str]]) -> List[int]:
        widths = [max([len(h)] + [len(row[i]) for row in cells]) for i, h in enumerate(headers)]
        if self.full:
            return widths

        # Borders take one column per cell plus one
        available = self.width - len(widths) - 3
        total = sum(widths)
        if total > available:
            widths = [max(MIN_COLUMN_WIDTH, w * available // total) for w in widths]
        return widths

    def _fit(self, row: Sequence[str], widths: Sequence[int]) -> List[str]:
        return [self.truncate(value, width).ljust(width) for value, width in zip(row, widths)]

    def _border(self, widths: Sequence[int], left: str, cross: str, right: str) -> str:
        return left + cross.join(self.symbols.box_h * w for w in widths) + right

    def _line(self, values: Sequence[str]) -> str:
        bar = self.symbols.box_v
        return bar + bar.join(values) + bar

