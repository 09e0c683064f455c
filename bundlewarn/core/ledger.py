"""
WarnedLedger — Insert-only record of names already warned about

Two independent sets:
- warned: library and display names a load warning was emitted for
- explained: names already explained after a failed load

Both only grow. claim() is an atomic check-and-insert so concurrent loads of
the same library from different threads emit at most one warning.
"""

import threading
from typing import FrozenSet, Set


class WarnedLedger:
    """Thread-safe, insert-only name sets."""

    def __init__(self):
        self._warned: Set[str] = set()
        self._explained: Set[str] = set()
        self._lock = threading.Lock()

    def claim(self, name: str) -> bool:
        """
        Mark `name` as warned.

        Returns:
            True if this call inserted it, False if it was already present
        """
        with self._lock:
            if name in self._warned:
                return False
            self._warned.add(name)
            return True

    def claim_explanation(self, name: str) -> bool:
        """Mark `name` as explained. True if this call inserted it."""
        with self._lock:
            if name in self._explained:
                return False
            self._explained.add(name)
            return True

    def is_warned(self, name: str) -> bool:
        with self._lock:
            return name in self._warned

    def is_explained(self, name: str) -> bool:
        with self._lock:
            return name in self._explained

    def __contains__(self, name: str) -> bool:
        return self.is_warned(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._warned)

    @property
    def warned(self) -> FrozenSet[str]:
        """Snapshot of warned names."""
        with self._lock:
            return frozenset(self._warned)

    @property
    def explained(self) -> FrozenSet[str]:
        """Snapshot of explained names."""
        with self._lock:
            return frozenset(self._explained)
