"""
Classification Tables — Which libraries left the default distribution, and when

Static, immutable data built once at startup:
- SINCE: gem name -> Ruby version at which it stopped being a default gem
- EXACT: names matched by exact feature equality (True, or an alias gem name)
- PREFIXED: namespace roots matched by the first path segment

Plus the platform configuration (library directories, native-extension
suffixes, running Ruby version) the classifier needs to turn a resolved
file path into a canonical library name.

Usage:
    platform = PlatformConfig.from_dict(rbconfig)
    tables = ClassificationTables.build(platform)
    tables.get("csv").unbundled_since  # -> "3.4.0"
"""

import os
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern, Tuple, Union

from .errors import PlatformConfigError, TablesError


# =============================================================================
# Default Tables
# =============================================================================

SINCE: Mapping[str, str] = MappingProxyType({
    "rexml": "3.0.0",
    "rss": "3.0.0",
    "webrick": "3.0.0",
    "matrix": "3.1.0",
    "net-ftp": "3.1.0",
    "net-imap": "3.1.0",
    "net-pop": "3.1.0",
    "net-smtp": "3.1.0",
    "prime": "3.1.0",
    "abbrev": "3.4.0",
    "base64": "3.4.0",
    "bigdecimal": "3.4.0",
    "csv": "3.4.0",
    "drb": "3.4.0",
    "getoptlong": "3.4.0",
    "mutex_m": "3.4.0",
    "nkf": "3.4.0",
    "observer": "3.4.0",
    "racc": "3.4.0",
    "resolv-replace": "3.4.0",
    "rinda": "3.4.0",
    "syslog": "3.4.0",
})

# True = matched under its own name; a string = alias to another gem
EXACT: Mapping[str, Union[bool, str]] = MappingProxyType({
    "abbrev": True,
    "base64": True,
    "bigdecimal": True,
    "csv": True,
    "drb": True,
    "getoptlong": True,
    "mutex_m": True,
    "nkf": True,
    "kconv": "nkf",
    "observer": True,
    "resolv-replace": True,
    "rinda": True,
    "syslog": True,
})

PREFIXED: Tuple[str, ...] = ("bigdecimal", "csv", "drb", "rinda", "syslog")

DEFAULT_RUNTIME_LABEL = "Ruby"
DEFAULT_REGISTRY_LABEL = "RubyGems"
DEFAULT_MANIFEST_LABEL = "Gemfile or gemspec"


# =============================================================================
# Versions
# =============================================================================

_NUMERIC_PREFIX = re.compile(r"^(\d+)")


def parse_version(version: str) -> Tuple[int, ...]:
    """
    Parse a dotted version into its numeric components.

    Components stop at the first one without a leading number, so
    pre-release tails are ignored: "3.4.0-preview1" -> (3, 4, 0).

    Raises:
        ValueError: If the version has no numeric component at all
    """
    parts = []
    for piece in str(version).strip().split("."):
        match = _NUMERIC_PREFIX.match(piece)
        if not match:
            break
        parts.append(int(match.group(1)))
        if match.end() != len(piece):
            break
    if not parts:
        raise ValueError(f"Not a version: {version!r}")
    return tuple(parts)


def version_older_than(version: str, threshold: str) -> bool:
    """True if `version` sorts strictly before `threshold` (3.4 == 3.4.0)."""
    left, right = parse_version(version), parse_version(threshold)
    width = max(len(left), len(right))
    left = left + (0,) * (width - len(left))
    right = right + (0,) * (width - len(right))
    return left < right


# =============================================================================
# Records
# =============================================================================

class MatchStrategy(Enum):
    """How a resolved path is matched to a record."""
    NONE = "none"        # Known unbundled gem, never matched by path
    EXACT = "exact"      # Whole candidate equals the name
    PREFIX = "prefix"    # First path segment equals the name (implies EXACT)


@dataclass(frozen=True)
class LibraryRecord:
    """One tracked library name."""
    name: str
    unbundled_since: Optional[str] = None
    match_strategy: MatchStrategy = MatchStrategy.NONE
    alias: Optional[str] = None

    @property
    def gem(self) -> str:
        """Gem that owns this name (the alias target, or the name itself)."""
        return self.alias or self.name

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "since": self.unbundled_since,
            "match": self.match_strategy.value,
            "alias": self.alias,
        }


# =============================================================================
# Platform
# =============================================================================

@dataclass(frozen=True)
class PlatformConfig:
    """
    Platform values read once from the target Ruby's RbConfig.

    lib_dir and arch_dir always end with "/" so prefix checks never match a
    sibling directory sharing the same stem.
    """
    lib_dir: str
    arch_dir: str
    runtime_version: str
    dlext: Tuple[str, ...] = ("so",)
    gem_paths: Tuple[str, ...] = ()
    load_path: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.lib_dir or not self.arch_dir:
            raise PlatformConfigError(
                "Ruby library directories are not configured (rubylibdir/rubyarchdir)"
            )
        if not self.dlext:
            raise PlatformConfigError("No native extension suffix configured (DLEXT)")
        try:
            parse_version(self.runtime_version)
        except ValueError as e:
            raise PlatformConfigError(f"Invalid Ruby version: {e}") from e

        object.__setattr__(self, "lib_dir", _with_slash(self.lib_dir))
        object.__setattr__(self, "arch_dir", _with_slash(self.arch_dir))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PlatformConfig":
        """
        Build from RbConfig-style keys.

        Accepts rubylibdir, rubyarchdir, DLEXT, ruby_version, gem_path and
        load_path. DLEXT is combined with "so" the way Ruby itself does.
        """
        if not data:
            raise PlatformConfigError("Empty platform configuration")

        dlext = data.get("DLEXT") or data.get("dlext") or "so"
        if isinstance(dlext, str):
            dlext = [dlext]
        suffixes: List[str] = []
        for ext in list(dlext) + ["so"]:
            ext = str(ext).lstrip(".")
            if ext and ext not in suffixes:
                suffixes.append(ext)

        return cls(
            lib_dir=str(data.get("rubylibdir") or ""),
            arch_dir=str(data.get("rubyarchdir") or ""),
            runtime_version=str(data.get("ruby_version") or ""),
            dlext=tuple(suffixes),
            gem_paths=_path_tuple(data.get("gem_path")),
            load_path=_path_tuple(data.get("load_path")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rubylibdir": self.lib_dir.rstrip("/"),
            "rubyarchdir": self.arch_dir.rstrip("/"),
            "ruby_version": self.runtime_version,
            "DLEXT": list(self.dlext),
            "gem_path": list(self.gem_paths),
            "load_path": list(self.load_path),
        }

    @property
    def native_extension_suffix(self) -> Pattern:
        """Regex for a trailing native-extension suffix (e.g. .so, .bundle)."""
        return re.compile(r"\.(?:%s)\Z" % "|".join(re.escape(e) for e in self.dlext))

    @property
    def any_library_suffix(self) -> Pattern:
        """Regex for any trailing library suffix (.rb or native)."""
        exts = ("rb",) + self.dlext
        return re.compile(r"\.(?:%s)\Z" % "|".join(re.escape(e) for e in exts))

    def strip_library_suffix(self, name: str) -> str:
        """Strip a library suffix: "foo.rb" / "foo.so" -> "foo"."""
        return self.any_library_suffix.sub("", name)


def _path_tuple(value: Any) -> Tuple[str, ...]:
    """A single directory or a list of them."""
    if not value:
        return ()
    if isinstance(value, (str, os.PathLike)):
        return (os.fspath(value),)
    return tuple(str(p) for p in value)


def _with_slash(path: str) -> str:
    path = str(path).replace("\\", "/")
    return path if path.endswith("/") else path + "/"


# =============================================================================
# Tables
# =============================================================================

@dataclass(frozen=True)
class ClassificationTables:
    """
    Immutable lookup tables for one target Ruby.

    Build with ClassificationTables.build(); direct construction skips the
    invariant checks.
    """
    records: Mapping[str, LibraryRecord]
    platform: PlatformConfig
    runtime_label: str = DEFAULT_RUNTIME_LABEL
    registry_label: str = DEFAULT_REGISTRY_LABEL
    manifest_label: str = DEFAULT_MANIFEST_LABEL
    _prefixed: frozenset = field(default=frozenset(), repr=False)

    @classmethod
    def build(
        cls,
        platform: PlatformConfig,
        since: Optional[Mapping[str, str]] = None,
        exact: Optional[Mapping[str, Union[bool, str]]] = None,
        prefixed: Optional[Iterable[str]] = None,
        extend_defaults: bool = True,
        **labels: str
    ) -> "ClassificationTables":
        """
        Build and validate tables.

        Args:
            platform: Target platform configuration
            since, exact, prefixed: Table data; merged over the defaults
                unless extend_defaults is False
            labels: Optional runtime_label / registry_label / manifest_label

        Raises:
            TablesError: If an invariant is violated
        """
        since_table = dict(SINCE) if extend_defaults else {}
        exact_table = dict(EXACT) if extend_defaults else {}
        prefixed_set = set(PREFIXED) if extend_defaults else set()
        since_table.update(since or {})
        exact_table.update(exact or {})
        prefixed_set.update(prefixed or ())

        for name, version in since_table.items():
            try:
                parse_version(version)
            except ValueError as e:
                raise TablesError(f"Invalid version for {name}: {e}") from e

        for name in prefixed_set:
            if name not in exact_table:
                raise TablesError(f"Prefixed entry {name!r} has no exact entry")

        records: Dict[str, LibraryRecord] = {}
        for name, version in since_table.items():
            records[name] = LibraryRecord(name=name, unbundled_since=version)

        for name, value in exact_table.items():
            if value is True:
                if name not in since_table:
                    raise TablesError(f"Exact entry {name!r} has no unbundled version")
                strategy = MatchStrategy.PREFIX if name in prefixed_set else MatchStrategy.EXACT
                records[name] = LibraryRecord(
                    name=name,
                    unbundled_since=since_table[name],
                    match_strategy=strategy,
                )
            elif isinstance(value, str) and value:
                if value not in since_table:
                    raise TablesError(f"Alias {name!r} points to unknown gem {value!r}")
                records[name] = LibraryRecord(
                    name=name,
                    match_strategy=MatchStrategy.EXACT,
                    alias=value,
                )
            else:
                raise TablesError(f"Exact entry {name!r} must be true or a gem name")

        return cls(
            records=MappingProxyType(records),
            platform=platform,
            _prefixed=frozenset(prefixed_set),
            **labels
        )

    def get(self, name: str) -> Optional[LibraryRecord]:
        """Record for a name, or None."""
        return self.records.get(name)

    def exact(self, name: str) -> Optional[LibraryRecord]:
        """Record matched by exact name, or None."""
        record = self.records.get(name)
        if record and record.match_strategy is not MatchStrategy.NONE:
            return record
        return None

    def prefixed(self, segment: str) -> Optional[LibraryRecord]:
        """Record whose namespace root is `segment`, or None."""
        if segment in self._prefixed:
            return self.records.get(segment)
        return None

    def since(self, gem: str) -> Optional[str]:
        """Version at which `gem` (or the gem it aliases) left the defaults."""
        record = self.records.get(gem)
        if record is None:
            return None
        if record.alias:
            return self.since(record.alias)
        return record.unbundled_since

    def is_unbundled_gem(self, name: str) -> bool:
        """True if `name` is a gem with an unbundled version (not an alias)."""
        record = self.records.get(name)
        return bool(record and record.unbundled_since)

    def names(self) -> List[str]:
        return sorted(self.records)
