"""
Errors — Startup failures for bundlewarn

Only startup conditions raise. Per-load outcomes (unresolvable feature,
untracked path, duplicate warning) are plain "no warning" results.
"""


class BundleWarnError(Exception):
    """Base class for bundlewarn errors."""


class PlatformConfigError(BundleWarnError):
    """Platform configuration is missing or malformed. Fatal at startup."""


class TablesError(BundleWarnError):
    """Classification tables violate their invariants. Fatal at startup."""
