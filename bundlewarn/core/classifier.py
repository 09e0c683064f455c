"""
Path Classifier — Map a resolved file path to a tracked library

Two-tier matching:
1. Exact: the whole candidate ("abbrev", "kconv") is a known name
2. Prefix: the first path segment ("csv" in "csv/parser") is a known
   namespace root

Exact always wins, so a file literally named after a namespace root is
never mistaken for a file inside that namespace.
"""

from dataclasses import dataclass
from typing import Optional

from .tables import ClassificationTables, LibraryRecord


@dataclass(frozen=True)
class Classification:
    """
    A path that belongs to a tracked library.

    Attributes:
        record: The matched LibraryRecord
        candidate: Library-relative name the path reduced to ("csv/parser")
        prefix: True if matched through the namespace root
    """
    record: LibraryRecord
    candidate: str
    prefix: bool = False

    @property
    def gem(self) -> str:
        """Gem that owns the path."""
        return self.record.gem

    @property
    def redirected(self) -> bool:
        """True when the owning gem differs from the matched name (alias or prefix)."""
        return self.prefix or self.record.alias is not None


class PathClassifier:
    """Classifies resolved paths against one set of tables."""

    def __init__(self, tables: ClassificationTables):
        self.tables = tables

    def candidate(self, path: Optional[str]) -> Optional[str]:
        """
        Reduce a path to its library-relative name.

        Returns None when the path lies outside both the architecture and
        the standard library directories.
        """
        if not path:
            return None

        platform = self.tables.platform
        path = str(path).replace("\\", "/")

        # Arch dir is usually nested inside lib dir: check it first
        if path.startswith(platform.arch_dir):
            rest = path[len(platform.arch_dir):]
            return platform.native_extension_suffix.sub("", rest)
        if path.startswith(platform.lib_dir):
            rest = path[len(platform.lib_dir):]
            return rest[:-3] if rest.endswith(".rb") else rest
        return None

    def classify(self, path: Optional[str]) -> Optional[Classification]:
        """Classify a resolved path, or return None if it is not tracked."""
        candidate = self.candidate(path)
        if candidate is None:
            return None

        record = self.tables.exact(candidate)
        if record is not None:
            return Classification(record=record, candidate=candidate)

        if "/" not in candidate:
            return None
        segment = candidate.split("/", 1)[0]
        record = self.tables.prefixed(segment)
        if record is not None:
            return Classification(record=record, candidate=candidate, prefix=True)
        return None


def classify(path: Optional[str], tables: ClassificationTables) -> Optional[Classification]:
    """Convenience wrapper around PathClassifier.classify()."""
    return PathClassifier(tables).classify(path)
