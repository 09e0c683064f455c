"""
Presentation — Symbols and safe terminal output
"""

from .symbols import (
    SymbolSet,
    UNICODE,
    ASCII,
    get_symbols,
    supports_unicode,
    safe_print,
)

__all__ = [
    'SymbolSet', 'UNICODE', 'ASCII',
    'get_symbols', 'supports_unicode', 'safe_print',
]
