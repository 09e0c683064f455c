"""
Caller Frames — Who asked for the load

The engine never walks a stack itself. It asks a CallerStack for a small
window of frames (skip N, take M) and reads their source paths.

RecordedCallerStack serves a stack captured elsewhere, innermost frame
first. The audit service records one frame per require site: the file that
contains the require.
"""

import os
from dataclasses import dataclass
from typing import List, Optional, Protocol, Sequence

# Frames above the requester in a live stack: engine entry, loader shim,
# require itself. Attribution looks one frame closer.
DEFAULT_CALLER_SKIP = 3
DEFAULT_ATTRIBUTION_SKIP = 2
DEFAULT_FRAME_WINDOW = 3


@dataclass(frozen=True)
class CallerFrame:
    """
    One stack frame.

    Attributes:
        absolute_path: Resolved absolute source path, None if unknown
            (eval'd code, native frames)
        path: Path as reported by the runtime (may be relative)
        lineno: Line number, if known
    """
    absolute_path: Optional[str] = None
    path: Optional[str] = None
    lineno: Optional[int] = None

    @classmethod
    def for_file(cls, path: str, lineno: Optional[int] = None) -> "CallerFrame":
        """Frame for a real source file, absolute path resolved."""
        text = os.fspath(path)
        return cls(absolute_path=os.path.abspath(text), path=text, lineno=lineno)

    @property
    def location(self) -> Optional[str]:
        """Best available path for this frame."""
        return self.path or self.absolute_path


class CallerStack(Protocol):
    """Source of caller frames."""

    def window(self, skip: int, limit: int) -> List[CallerFrame]:
        """Return up to `limit` frames after skipping `skip` frames."""
        ...


class RecordedCallerStack:
    """
    A pre-recorded stack, innermost frame first.

    `internal_depth` is the number of frames the live runtime would place
    above the recorded ones (engine and loader frames). Skip counts are
    reduced by it, so the engine's default skips land on the first recorded
    frame.
    """

    def __init__(
        self,
        frames: Sequence[CallerFrame] = (),
        internal_depth: int = DEFAULT_CALLER_SKIP
    ):
        self.frames = list(frames)
        self.internal_depth = internal_depth

    def window(self, skip: int, limit: int) -> List[CallerFrame]:
        start = max(0, skip - self.internal_depth)
        return self.frames[start:start + max(0, limit)]

    def __len__(self) -> int:
        return len(self.frames)


EMPTY_STACK = RecordedCallerStack()
