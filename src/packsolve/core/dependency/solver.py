"""Backtracking combination solver.

Finds one item per group such that no two chosen items are rejected as a
pair. Items are tried in the order given by a comparison function, so the
first complete combination found is the one the ordering policy prefers
most greedily, not necessarily the best overall.

The search keeps an explicit stack of trial indexes (one per group) rather
than recursing, so resource use does not depend on the interpreter's
recursion limit.

Worst-case complexity is exponential in the number of groups; there is no
propagation beyond the pairwise check.
"""

from __future__ import annotations

import logging
import threading
from functools import cmp_to_key
from typing import Callable, Generic, Sequence, TypeVar

from packsolve.exceptions import ResolutionCancelled

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CombinationSolver(Generic[T]):
    """Greedy-ordered backtracking search over candidate groups.

    Args:
        compare: ``cmp``-style function ordering items inside a group;
            negative means try the first argument earlier.
        should_reject_pair: Returns True if two items cannot coexist.
        diagnostic_output: Called with the current assignment whenever the
            search reaches its deepest level so far, including assignments
            whose last item was rejected. The last call before a failed
            search is the best attempt for error reporting.
    """

    def __init__(
        self,
        compare: Callable[[T, T], int],
        should_reject_pair: Callable[[T, T], bool],
        diagnostic_output: Callable[[list[T]], None] | None = None,
    ) -> None:
        self._sort_key = cmp_to_key(compare)
        self._should_reject_pair = should_reject_pair
        self._diagnostic_output = diagnostic_output

    def find_solution(
        self,
        groups: Sequence[Sequence[T]],
        cancel_event: threading.Event | None = None,
    ) -> list[T] | None:
        """Search for a complete, pairwise compatible assignment.

        Args:
            groups: Candidate groups; the result holds one item per group,
                in group order.
            cancel_event: Checked once before the search starts.

        Returns:
            The first complete assignment found, or None if none exists.

        Raises:
            ResolutionCancelled: If *cancel_event* is already set.
        """
        if cancel_event is not None and cancel_event.is_set():
            raise ResolutionCancelled()

        sorted_groups = [sorted(group, key=self._sort_key) for group in groups]
        group_count = len(sorted_groups)
        if group_count == 0:
            return []

        trial = [-1] * group_count
        chosen: list[T] = []
        deepest = 0
        depth = 0

        while depth >= 0:
            group = sorted_groups[depth]
            index = trial[depth] + 1

            while index < len(group):
                item = group[index]
                rejected = any(self._should_reject_pair(item, other) for other in chosen)
                if depth + 1 >= deepest:
                    deepest = depth + 1
                    self._publish(chosen + [item])
                if not rejected:
                    break
                index += 1

            if index == len(group):
                # Exhausted this group: step back and advance the previous one.
                trial[depth] = -1
                depth -= 1
                if chosen:
                    chosen.pop()
                continue

            trial[depth] = index
            chosen.append(group[index])
            depth += 1

            if depth == group_count:
                logger.debug("Solution found across %d groups", group_count)
                return chosen

        logger.debug("No solution: search exhausted at depth %d of %d", deepest, group_count)
        return None

    def _publish(self, partial: list[T]) -> None:
        if self._diagnostic_output is not None:
            self._diagnostic_output(list(partial))
