"""
LoadHook — Explicit interception point for an embedding loader

The loader calls before_load() ahead of each require and on_load_error()
when a require fails. Messages go out through the warnings module, so the
embedding program controls filtering and display the usual way.
"""

import logging
import warnings
from typing import Any, Iterable, Optional, Type

from .engine import WarningEngine
from .frames import CallerStack

logger = logging.getLogger(__name__)


class UnbundledGemWarning(UserWarning):
    """A load touched a gem that is no longer part of the default gems."""


class LoadHook:
    """
    Surfaces WarningEngine results as Python warnings.

    Args:
        engine: The warning engine
        category: Warning category to emit
    """

    def __init__(self, engine: WarningEngine, category: Type[Warning] = UnbundledGemWarning):
        self.engine = engine
        self.category = category

    def before_load(
        self,
        feature: Any,
        specs: Iterable[Any] = (),
        stack: Optional[CallerStack] = None,
        stacklevel: int = 2
    ) -> Optional[str]:
        """Evaluate a load; emit and return the warning if there is one."""
        message = self.engine.evaluate_load(feature, specs, stack)
        if message:
            self._emit(message, stacklevel + 1)
        return message

    def on_load_error(self, feature: Any, stacklevel: int = 2) -> Optional[str]:
        """Explain a failed load; emit and return the explanation if any."""
        message = self.engine.explain_missing(feature)
        if message:
            self._emit(message, stacklevel + 1)
        return message

    def _emit(self, message: str, stacklevel: int) -> None:
        logger.info("unbundled gem: %s", message)
        warnings.warn(message, self.category, stacklevel=stacklevel)
