"""
Warning Engine — Decide whether a load gets an unbundled-gem warning

For each load request:
  1. Normalize the requested name to slash-separated form
  2. Skip if an installed spec already provides it
  3. Resolve it to a file through the loader
  4. Classify the file (tracked library or not)
  5. Find the requester among the caller frames
  6. Skip if the requester is itself a tracked library (no warning storms)
  7. Claim the display name in the ledger (at most once per name)
  8. For aliases and namespace files, also claim the owning gem
  9. Build the message

The engine returns the message and never prints it; the embedding loader
decides where it goes (see LoadHook).
"""

import logging
import os
from typing import Any, Iterable, NamedTuple, Optional, Protocol

from .classifier import PathClassifier
from .frames import (
    CallerFrame,
    CallerStack,
    DEFAULT_ATTRIBUTION_SKIP,
    DEFAULT_CALLER_SKIP,
    DEFAULT_FRAME_WINDOW,
    EMPTY_STACK,
)
from .ledger import WarnedLedger
from .message import MessageBuilder
from .tables import ClassificationTables

logger = logging.getLogger(__name__)


class ResolvedFeature(NamedTuple):
    """A feature resolved by the loader: ("rb" | "so", absolute path)."""
    kind: str
    path: str


class FeatureResolver(Protocol):
    """Loader-side feature resolution."""

    def resolve_feature_path(self, feature: str) -> Optional[ResolvedFeature]:
        ...


def normalize_feature(name: Any) -> str:
    """Accept a feature name, a str path or a PathLike; return "/"-separated text."""
    text = os.fspath(name)
    if isinstance(text, bytes):
        text = os.fsdecode(text)
    return text.replace("\\", "/")


def _spec_name(spec: Any) -> str:
    return getattr(spec, "name", spec)


class WarningEngine:
    """
    Stateful warning engine.

    Args:
        tables: Classification tables for the target runtime
        resolver: Object with resolve_feature_path(feature)
        ledger: Shared WarnedLedger (a fresh one if None)
        manifest_active: True when a manifest manager (Bundler) is in use
        gem_roots: Roots for second-order attribution (default: platform gem paths)
        caller_skip: Frames to skip before looking for the requester
        attribution_skip: Frames to skip before the attribution frame
        frame_window: Frames to inspect after skipping
    """

    def __init__(
        self,
        tables: ClassificationTables,
        resolver: FeatureResolver,
        ledger: Optional[WarnedLedger] = None,
        manifest_active: bool = False,
        gem_roots=None,
        caller_skip: int = DEFAULT_CALLER_SKIP,
        attribution_skip: int = DEFAULT_ATTRIBUTION_SKIP,
        frame_window: int = DEFAULT_FRAME_WINDOW
    ):
        self.tables = tables
        self.resolver = resolver
        self.ledger = ledger if ledger is not None else WarnedLedger()
        self.manifest_active = manifest_active
        self.classifier = PathClassifier(tables)
        self.messages = MessageBuilder(tables, manifest_active=manifest_active, gem_roots=gem_roots)
        self.caller_skip = caller_skip
        self.attribution_skip = attribution_skip
        self.frame_window = frame_window

    # =========================================================================
    # Load evaluation
    # =========================================================================

    def evaluate_load(
        self,
        requested_name: Any,
        satisfied_specs: Iterable[Any] = (),
        stack: Optional[CallerStack] = None
    ) -> Optional[str]:
        """
        Evaluate one load request.

        Args:
            requested_name: Feature name ("csv", "csv/parser") or file path
            satisfied_specs: Installed specs (objects with .name, or names)
            stack: Caller frames for requester attribution

        Returns:
            Rendered warning, or None when nothing should be flagged
        """
        platform = self.tables.platform
        name = normalize_feature(requested_name)
        display = platform.strip_library_suffix(name)

        if any(_spec_name(spec) == display for spec in satisfied_specs or ()):
            logger.debug("%s: provided by an installed spec", display)
            return None

        path = self._resolve(name)
        if path is None:
            logger.debug("%s: not resolvable", name)
            return None

        found = self.classifier.classify(path)
        if found is None:
            logger.debug("%s: %s is not a tracked library", name, path)
            return None

        stack = stack if stack is not None else EMPTY_STACK
        caller = self.find_caller(stack)
        if caller is not None and self.classifier.classify(caller.absolute_path):
            logger.debug("%s: requested from tracked library %s", name, caller.absolute_path)
            return None

        if not self.ledger.claim(display):
            logger.debug("%s: already warned", display)
            return None

        if found.redirected:
            gem = found.gem
            if not self.ledger.claim(gem):
                logger.debug("%s: owning gem %s already warned", display, gem)
                return None
            head = f"{display} is found in {gem}"
        else:
            gem = found.record.name
            # Absolute-path requests: also dedupe under the library's own name
            if gem != display and not self.ledger.claim(gem):
                logger.debug("%s: gem %s already warned", display, gem)
                return None
            head = display

        return head + self.messages.build(gem, self.find_attribution_frame(stack))

    def explain_missing(self, feature: Any) -> Optional[str]:
        """
        Explain a failed load of a gem that is no longer bundled.

        Only applies without a manifest manager (with Bundler the load-time
        warning already covers it). At most once per feature, and never for
        a feature that was already warned about.
        """
        if self.manifest_active:
            return None
        name = normalize_feature(feature)
        if not self.tables.is_unbundled_gem(name):
            return None
        if self.ledger.is_warned(name):
            return None
        if not self.ledger.claim_explanation(name):
            return None
        return name + self.messages.build(name)

    # =========================================================================
    # Helpers
    # =========================================================================

    def find_caller(self, stack: CallerStack) -> Optional[CallerFrame]:
        """First frame in the caller window with an absolute source path."""
        for frame in stack.window(self.caller_skip, self.frame_window):
            if frame is not None and frame.absolute_path:
                return frame
        return None

    def find_attribution_frame(self, stack: CallerStack) -> Optional[CallerFrame]:
        """Frame inspected for second-order attribution."""
        frames = stack.window(self.attribution_skip, self.frame_window)
        return frames[0] if frames else None

    def _resolve(self, feature: str) -> Optional[str]:
        result = self.resolver.resolve_feature_path(feature)
        if not result:
            return None
        if isinstance(result, str):
            return result
        path = getattr(result, "path", None)
        if path is None and isinstance(result, tuple):
            path = result[-1]
        return path
