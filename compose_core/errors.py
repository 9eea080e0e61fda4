"""
Composition error taxonomy.

Every failure surfaced by the engine is a `CompositionError` subclass so callers
can catch the whole family or match on a specific kind. Construction calls and
the algebra operators never raise under the default configuration; only
`check_invariants` and the explicitly fallible helpers do.
"""

from __future__ import annotations

from typing import Any


class CompositionError(Exception):
    """Base class for all graph composition failures."""


class IncompatibleTypes(CompositionError):
    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Incompatible composition types: {left} and {right}")


class _ReasonError(CompositionError):
    prefix = ""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"{self.prefix}: {reason}")


class InvalidComposition(_ReasonError):
    prefix = "Invalid composition"


class MorphismError(_ReasonError):
    prefix = "Morphism error"


class FunctorError(_ReasonError):
    prefix = "Functor error"


class MonadError(_ReasonError):
    prefix = "Monad error"


class InvariantViolation(CompositionError):
    """Raised by `check_invariants` for the first predicate (by position) that fails."""

    def __init__(self, index: int):
        self.index = index
        super().__init__(f"Invariant violation: Invariant {index} failed")


class NodeNotFound(CompositionError):
    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class CycleDetected(CompositionError):
    def __init__(self) -> None:
        super().__init__("Cycle detected in composition")


class MappingError(CompositionError, ValueError):
    """Raised when a domain type string cannot be mapped onto a tag."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(f"Mapping error: {message}")
