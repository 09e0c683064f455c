"""
Symbols — Visual vocabulary for audit results

Progressive enhancement: Unicode when supported, ASCII fallback.
Configurable via display.symbols setting.

Also provides safe_print() for encoding-safe output of paths and
messages taken from the audited project.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Safe Output
# =============================================================================

# Unicode to ASCII replacements for display
UNICODE_TO_ASCII = {
    '→': '->',
    '…': '...',
    '•': '*',
    '✓': 'OK',
    '✗': 'X',
    '⚠': '!',
    '─': '-',
    '│': '|',
    '┌': '+',
    '┐': '+',
    '└': '+',
    '┘': '+',
    '┼': '+',
    '┬': '+',
    '┴': '+',
    '├': '+',
    '┤': '+',
}


def safe_print(text: str, end: str = '\n', file=None) -> None:
    """
    Print with graceful encoding fallback.

    Handles UnicodeEncodeError by replacing unencodable characters
    with ASCII equivalents or '?' as last resort.

    Args:
        text: Text to print (may contain any Unicode)
        end: String appended after text (default: newline)
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, end=end, file=file)
    except UnicodeEncodeError:
        safe_text = text
        for unicode_char, ascii_equiv in UNICODE_TO_ASCII.items():
            safe_text = safe_text.replace(unicode_char, ascii_equiv)

        try:
            print(safe_text, end=end, file=file)
        except UnicodeEncodeError:
            # Last resort: replace all unencodable chars with ?
            encoding = getattr(file, 'encoding', 'utf-8') or 'utf-8'
            encoded = safe_text.encode(encoding, errors='replace')
            print(encoded.decode(encoding), end=end, file=file)


# =============================================================================
# Symbol Sets
# =============================================================================

@dataclass(frozen=True)
class SymbolSet:
    """Complete set of symbols for audit output."""
    # Status markers
    check_pass: str
    check_warn: str
    check_fail: str
    arrow: str
    bullet: str

    # Box drawing
    box_h: str       # horizontal ─ or -
    box_v: str       # vertical │ or |
    box_tl: str      # top-left ┌ or +
    box_tr: str      # top-right ┐ or +
    box_bl: str      # bottom-left └ or +
    box_br: str      # bottom-right ┘ or +
    box_cross: str   # cross ┼ or +
    box_t_down: str  # T down ┬ or +
    box_t_up: str    # T up ┴ or +
    box_t_right: str # T right ├ or +
    box_t_left: str  # T left ┤ or +

    ellipsis: str    # … or ...


UNICODE = SymbolSet(
    check_pass='✓',
    check_warn='⚠',
    check_fail='✗',
    arrow='→',
    bullet='•',
    box_h='─',
    box_v='│',
    box_tl='┌',
    box_tr='┐',
    box_bl='└',
    box_br='┘',
    box_cross='┼',
    box_t_down='┬',
    box_t_up='┴',
    box_t_right='├',
    box_t_left='┤',
    ellipsis='…',
)

ASCII = SymbolSet(
    check_pass='[OK]',
    check_warn='[!]',
    check_fail='[X]',
    arrow='->',
    bullet='*',
    box_h='-',
    box_v='|',
    box_tl='+',
    box_tr='+',
    box_bl='+',
    box_br='+',
    box_cross='+',
    box_t_down='+',
    box_t_up='+',
    box_t_right='+',
    box_t_left='+',
    ellipsis='...',
)


def supports_unicode() -> bool:
    """
    Check if environment likely supports Unicode output.

    Conservative: defaults to ASCII if uncertain.
    """
    # Explicit environment override
    if os.environ.get('BUNDLEWARN_ASCII_ONLY', '').lower() in ('1', 'true', 'yes'):
        return False
    if os.environ.get('BUNDLEWARN_UNICODE', '').lower() in ('1', 'true', 'yes'):
        return True

    stdout_encoding = getattr(sys.stdout, 'encoding', None)
    if stdout_encoding:
        encoding_lower = stdout_encoding.lower().replace('-', '').replace('_', '')
        # Windows code pages and plain ASCII can't show our symbols
        if encoding_lower.startswith('cp') or encoding_lower in ('ascii', 'latin1', 'iso88591'):
            return False
        if encoding_lower.startswith('utf'):
            return True

    lang = os.environ.get('LANG', '').lower()
    lc_all = os.environ.get('LC_ALL', '').lower()
    if 'utf-8' in lang or 'utf8' in lang or 'utf-8' in lc_all or 'utf8' in lc_all:
        return True

    # Default: ASCII for safety
    return False


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get appropriate symbol set based on preference or auto-detection.

    Args:
        preference: "unicode", "ascii", or "auto" (None = auto)

    Returns:
        Appropriate SymbolSet for the environment
    """
    if preference == 'unicode':
        return UNICODE
    if preference == 'ascii':
        return ASCII
    return UNICODE if supports_unicode() else ASCII
