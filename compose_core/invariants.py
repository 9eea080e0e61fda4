"""
Graph invariants.

An `InvariantSet` is an ordered list of boolean predicates over a whole graph.
It is held by the caller (or attached to a graph value for convenience) and is
never compared, copied into derived graphs, or serialized.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, List, Optional

from .errors import InvariantViolation

if TYPE_CHECKING:
    from .graph import GraphComposition

logger = logging.getLogger(__name__)

GraphPredicate = Callable[["GraphComposition"], bool]


class InvariantSet:
    """Ordered, append-only collection of graph predicates."""

    def __init__(self, predicates: Optional[Iterable[GraphPredicate]] = None):
        self._predicates: List[GraphPredicate] = list(predicates or [])

    def __len__(self) -> int:
        return len(self._predicates)

    def __iter__(self) -> Iterator[GraphPredicate]:
        return iter(self._predicates)

    def __repr__(self) -> str:
        return f"<{len(self._predicates)} invariants>"

    def with_predicate(self, predicate: GraphPredicate) -> "InvariantSet":
        """Return a new set with `predicate` appended; this set is unchanged."""
        return InvariantSet([*self._predicates, predicate])

    def violations(self, graph: "GraphComposition") -> List[int]:
        """Positions of every predicate that does not hold for `graph`."""
        return [i for i, pred in enumerate(self._predicates) if not pred(graph)]

    def check(self, graph: "GraphComposition") -> None:
        """
        Evaluate predicates in order.

        Raises:
            InvariantViolation: for the first predicate that returns False
        """
        for i, pred in enumerate(self._predicates):
            if not pred(graph):
                logger.debug("Invariant %d failed for graph %s", i, graph.id)
                raise InvariantViolation(i)

    def holds(self, graph: "GraphComposition") -> bool:
        return not self.violations(graph)
