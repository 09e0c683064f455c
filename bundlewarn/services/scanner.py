"""
Require Scanner — Find require call sites in Ruby sources

Parses Ruby with tree-sitter (tree-sitter-language-pack grammar) and
records every `require "feature"` / `Kernel.require "feature"` whose
argument is a plain string literal. Interpolated or computed features
cannot be resolved statically and are skipped.

Usage:
    scanner = RequireScanner()
    for path in iter_ruby_files(Path(".")):
        for site in scanner.scan(path):
            print(site.path, site.line, site.feature)
"""

import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node, Parser

RUBY_EXTENSIONS = {'.rb', '.rake', '.ru', '.gemspec'}
RUBY_FILENAMES = {'Rakefile'}

DEFAULT_EXCLUDES = ('vendor', '.bundle', 'tmp', 'node_modules', '.git')

REQUIRE_METHODS = {'require'}
REQUIRE_RECEIVERS = {'Kernel'}

# Node types for method calls across tree-sitter-ruby versions
CALL_NODE_TYPES = {'call', 'method_call', 'command_call'}

MAX_FILE_SIZE = 1_000_000  # bytes


@dataclass(frozen=True)
class RequireSite:
    """One require call in a source file."""
    path: str
    line: int
    feature: str

    def to_dict(self) -> Dict:
        return {"path": self.path, "line": self.line, "feature": self.feature}


# Lazy check, as for other optional grammars
_language_pack_available = None


def _check_language_pack() -> bool:
    """Check if tree-sitter-language-pack is importable."""
    global _language_pack_available
    if _language_pack_available is None:
        try:
            import tree_sitter_language_pack  # noqa: F401
            _language_pack_available = True
        except ImportError:
            _language_pack_available = False
    return _language_pack_available


class RequireScanner:
    """
    Extracts require sites with a tree-sitter Ruby parser.

    A parser instance is not shared across threads: each thread gets its
    own, created on first use.
    """

    def __init__(self, max_file_size: int = MAX_FILE_SIZE):
        self.max_file_size = max_file_size
        self._parsers: Dict[int, 'Parser'] = {}

    @property
    def is_available(self) -> bool:
        """True if the Ruby grammar can be loaded."""
        return _check_language_pack()

    def _get_parser(self) -> Optional['Parser']:
        key = threading.get_ident()
        parser = self._parsers.get(key)
        if parser is not None:
            return parser
        if not _check_language_pack():
            return None
        from tree_sitter_language_pack import get_parser
        parser = get_parser('ruby')
        self._parsers[key] = parser
        return parser

    def scan(self, path: Path) -> List[RequireSite]:
        """Scan one file. Unreadable or oversized files yield no sites."""
        path = Path(path)
        try:
            if path.stat().st_size > self.max_file_size:
                return []
            source = path.read_bytes()
        except OSError:
            return []
        return self.scan_source(source, str(path))

    def scan_source(self, source, path: str = "<source>") -> List[RequireSite]:
        """Scan Ruby source (str or bytes)."""
        if isinstance(source, str):
            source = source.encode('utf-8')

        parser = self._get_parser()
        if parser is None:
            return []

        tree = parser.parse(source)
        sites: List[RequireSite] = []

        # Iterative walk: deeply nested sources must not hit the recursion limit
        pending = [tree.root_node]
        while pending:
            node = pending.pop()
            if node.type in CALL_NODE_TYPES:
                feature = self._required_feature(node, source)
                if feature:
                    sites.append(RequireSite(path=path, line=node.start_point[0] + 1, feature=feature))
            pending.extend(reversed(node.children))

        sites.sort(key=lambda s: s.line)
        return sites

    def _required_feature(self, node: 'Node', source: bytes) -> Optional[str]:
        """Feature string if `node` is a require call with a literal argument."""
        method = node.child_by_field_name('method')
        if method is None or _text(method, source) not in REQUIRE_METHODS:
            return None

        receiver = node.child_by_field_name('receiver')
        if receiver is not None and _text(receiver, source) not in REQUIRE_RECEIVERS:
            return None

        arguments = node.child_by_field_name('arguments')
        if arguments is None:
            return None
        args = arguments.named_children
        if len(args) != 1 or args[0].type != 'string':
            return None

        parts = args[0].named_children
        # Interpolation or escapes make the feature non-literal
        if len(parts) != 1 or parts[0].type != 'string_content':
            return None
        return _text(parts[0], source) or None


def _text(node: 'Node', source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')


def iter_ruby_files(root: Path, exclude: Iterable[str] = DEFAULT_EXCLUDES) -> Iterator[Path]:
    """
    Yield Ruby source files under `root` in sorted order.

    A file path yields just that file. Directories named in `exclude` are
    pruned wherever they appear.
    """
    root = Path(root)
    if root.is_file():
        yield root
        return

    excluded = set(exclude)
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in excluded)
        for filename in sorted(filenames):
            if Path(filename).suffix in RUBY_EXTENSIONS or filename in RUBY_FILENAMES:
                yield Path(dirpath) / filename
