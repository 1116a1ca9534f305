"""Nesting limits for recursive walks over KCL syntax trees.

Parsed programs are bounded by the parser's own nesting check, but ASTs
can also be built in code: a let-in nested inside a thousand invocations
would otherwise take the serializer or a visitor past the interpreter's
recursion limit. DepthGuard turns that into a KclError carrying the
NESTING_DEPTH_EXCEEDED diagnostic.

Python 3.13+.
"""

from __future__ import annotations

import logging
import sys

from kclparse.constants import MAX_DEPTH
from kclparse.diagnostics import KclError
from kclparse.diagnostics.templates import ErrorTemplate

__all__ = ["DepthGuard", "DepthLimitExceededError", "depth_clamp"]

logger = logging.getLogger(__name__)


class DepthLimitExceededError(KclError):
    """A syntax tree nests expressions deeper than the walker allows."""


class DepthGuard:
    """Counts nested expression levels during one tree walk.

    Each ``with guard:`` block is one level. Entering the block that would
    reach ``max_depth`` raises instead, leaving the count untouched.

        guard = DepthGuard(max_depth=3)
        with guard:          # level 1
            with guard:      # level 2
                ...
    """

    __slots__ = ("current_depth", "max_depth")

    def __init__(self, max_depth: int = MAX_DEPTH) -> None:
        self.max_depth = depth_clamp(max_depth)
        self.current_depth = 0

    def __enter__(self) -> DepthGuard:
        self.check()
        self.current_depth += 1
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        self.current_depth -= 1

    def check(self) -> None:
        """Raise if one more level would pass max_depth.

        Raises:
            DepthLimitExceededError: With the NESTING_DEPTH_EXCEEDED diagnostic
        """
        if self.current_depth >= self.max_depth:
            raise DepthLimitExceededError(ErrorTemplate.nesting_depth_exceeded(self.max_depth))


def depth_clamp(
    requested_depth: int,
    reserve_frames: int = 50,
    frames_per_level: int = 1,
) -> int:
    """Lower a nesting limit until it fits under sys.getrecursionlimit().

    The parser spends several frames per nested expression (expression,
    alternation, arithmetic, ...), tree walkers one; ``frames_per_level``
    says which. ``reserve_frames`` is left for the caller's own stack.

    Returns:
        ``requested_depth``, or the deepest level the stack can hold
        (never less than 1) with a warning logged

    Example:
        >>> import sys
        >>> sys.setrecursionlimit(200)
        >>> depth_clamp(100)
        100
        >>> depth_clamp(100, frames_per_level=8)
        18
    """
    stack_budget = sys.getrecursionlimit() - reserve_frames
    reachable = max(1, stack_budget // frames_per_level)
    if requested_depth <= reachable:
        return requested_depth

    logger.warning(
        "KCL nesting limit %d needs more than the %d-frame recursion limit; using %d. "
        "Raise sys.setrecursionlimit() to allow deeper programs.",
        requested_depth,
        sys.getrecursionlimit(),
        reachable,
    )
    return reachable
