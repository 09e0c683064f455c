"""
Output Module — View Layer for bundlewarn CLI

Separates data from presentation.
Commands return OutputSpec, renderers handle display.

Usage:
    from bundlewarn.output import OutputSpec, render

    # In command:
    return OutputSpec(
        data={"rows": [...]},
        shape="table",
        columns=["Gem", "Since", "Status"]
    )

    # In CLI layer:
    output = render(spec, format="auto", symbols=symbols)
    print(output)
"""

import builtins
from dataclasses import dataclass
from typing import Any, Optional, List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..presentation.symbols import SymbolSet

from .base import BaseRenderer
from .table import TableRenderer
from .list import ListRenderer
from .json import JsonRenderer


# =============================================================================
# OutputSpec — Data envelope for rendering
# =============================================================================

@dataclass
class OutputSpec:
    """
    Data envelope that commands return for rendering.

    Attributes:
        data: The actual data (dict, list, or any structure)
        shape: Rendering hint - "table" | "list" | "auto"
        title: Optional section title/header
        columns: For tables - column headers in order
        column_keys: For tables - dict keys corresponding to columns
        empty_message: Message when data is empty
    """
    data: Any
    shape: str = "auto"
    title: Optional[str] = None
    columns: Optional[List[str]] = None
    column_keys: Optional[List[str]] = None
    empty_message: str = "No data to display."


# =============================================================================
# Format Registry
# =============================================================================

RENDERERS = {
    "table": TableRenderer,
    "list": ListRenderer,
    "json": JsonRenderer,
}

# Valid format values for config/CLI
VALID_FORMATS = ("auto", "table", "list", "json")


# =============================================================================
# Auto-Detection
# =============================================================================

def auto_detect_shape(data: Any) -> str:
    """
    Infer best rendering shape from data structure.

    Homogeneous lists of two or more dicts render as tables,
    everything else as lists.
    """
    if isinstance(data, dict):
        data = data.get("rows") or data.get("items") or []

    if isinstance(data, builtins.list) and len(data) >= 2 and all(isinstance(x, dict) for x in data):
        first_keys = set(data[0].keys())
        if all(set(d.keys()) == first_keys for d in data):
            return "table"

    return "list"


# =============================================================================
# Main Render Function
# =============================================================================

def get_renderer(format: str, symbols: "SymbolSet", width: int = None, full: bool = False) -> BaseRenderer:
    """
    Get appropriate renderer instance.

    Raises:
        ValueError: If format is invalid
    """
    if format not in RENDERERS:
        valid = ", ".join(RENDERERS.keys())
        raise ValueError(f"Unknown format '{format}'. Valid: {valid}")

    renderer_class = RENDERERS[format]
    return renderer_class(symbols=symbols, width=width, full=full)


def render(
    spec: OutputSpec,
    format: str = "auto",
    symbols: "SymbolSet" = None,
    width: int = None,
    full: bool = False
) -> str:
    """
    Render OutputSpec to formatted string.

    Args:
        spec: OutputSpec from command
        format: "auto" | "table" | "list" | "json"
        symbols: SymbolSet for visual elements (auto-detect if None)
        width: Terminal width (auto-detect if None)
        full: If True, don't truncate content

    Returns:
        Formatted string ready for printing
    """
    import shutil
    from ..presentation.symbols import get_symbols

    if symbols is None:
        symbols = get_symbols()

    if width is None:
        width = shutil.get_terminal_size().columns

    if format == "auto":
        if spec.shape and spec.shape != "auto":
            effective_format = spec.shape
        else:
            effective_format = auto_detect_shape(spec.data)
    else:
        effective_format = format

    renderer = get_renderer(effective_format, symbols, width, full)
    return renderer.render(spec)


__all__ = [
    'OutputSpec', 'RENDERERS', 'VALID_FORMATS',
    'BaseRenderer', 'TableRenderer', 'ListRenderer', 'JsonRenderer',
    'auto_detect_shape', 'get_renderer', 'render',
]
