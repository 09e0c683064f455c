"""
Feature Resolver — Find the file a require would load

Mirrors $LOAD_PATH.resolve_feature_path closely enough for classification:
- "./x", "../x", "~/x" and absolute paths are checked directly
- other features are searched in each load-path directory, in order
- "foo.rb" / "foo.so" are looked up as given; a bare "foo" tries ".rb"
  first, then each native extension suffix

A feature that cannot be found resolves to None; it never raises.
"""

import os
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.engine import ResolvedFeature, normalize_feature


class FeatureResolver:
    """
    Resolves feature names against a load path.

    Args:
        load_path: Directories searched in order
        dlext: Native extension suffixes, without the dot
    """

    def __init__(self, load_path: Iterable[str], dlext: Sequence[str] = ("so",)):
        self.load_path: List[str] = [str(p) for p in load_path if p]
        self.dlext: Tuple[str, ...] = tuple(e.lstrip(".") for e in dlext) or ("so",)

    @classmethod
    def for_platform(cls, platform, extra_paths: Iterable[str] = ()) -> "FeatureResolver":
        """
        Resolver for a PlatformConfig.

        Uses the probed $LOAD_PATH; falls back to lib and arch dirs when the
        platform carries no load path. `extra_paths` are searched first.
        """
        load_path = list(extra_paths) + list(platform.load_path or (platform.lib_dir, platform.arch_dir))
        return cls(load_path, platform.dlext)

    def candidates(self, feature: str) -> List[Tuple[str, str]]:
        """File names to try for a feature, as (kind, file name) pairs."""
        if feature.endswith(".rb"):
            return [("rb", feature)]
        for ext in self.dlext:
            if feature.endswith("." + ext):
                return [("so", feature)]
        return [("rb", feature + ".rb")] + [("so", f"{feature}.{ext}") for ext in self.dlext]

    def resolve_feature_path(self, feature) -> Optional[ResolvedFeature]:
        """Resolve a feature to (kind, absolute path), or None."""
        feature = normalize_feature(feature)
        if not feature:
            return None

        candidates = self.candidates(feature)

        if os.path.isabs(feature) or feature.startswith(("./", "../", "~")):
            for kind, name in candidates:
                path = os.path.abspath(os.path.expanduser(name))
                if os.path.isfile(path):
                    return ResolvedFeature(kind, normalize_feature(path))
            return None

        for directory in self.load_path:
            for kind, name in candidates:
                path = os.path.join(directory, name)
                if os.path.isfile(path):
                    return ResolvedFeature(kind, normalize_feature(os.path.abspath(path)))
        return None
