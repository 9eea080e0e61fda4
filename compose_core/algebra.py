"""
Composition algebra.

Named constructors (atomic, composite, entity, aggregate) and binary operators
(then, parallel, choice, compose) that build new graphs out of existing ones,
plus the structure-preserving map and the morphism/monad protocols.

`CompositionAlgebra` is mixed into `GraphComposition`; every operator returns a
new graph and leaves its operands untouched. Identifier collisions between
operands are resolved last-write-wins: the right-hand operand's entry replaces
the left-hand one.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from copy import deepcopy
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional, TypeVar

from .enums import (
    Atomic,
    BaseNodeType,
    BaseRelationshipType,
    Composite,
    Domain,
    DomainKind,
    Functor,
    Monad,
)
from .errors import FunctorError, MonadError, MorphismError
from .ids import GraphId
from .invariants import InvariantSet
from .records import CompositionNode, Metadata

if TYPE_CHECKING:
    from .config import ComposeConfig
    from .graph import GraphComposition

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


def _merge(first: Dict[K, V], second: Dict[K, V], kind: str) -> Dict[K, V]:
    """Deep copies of both maps combined; entries of `second` win on key collisions."""
    merged = deepcopy(first)
    for key, value in second.items():
        if key in merged:
            logger.debug("%s %s replaced during merge", kind, key)
        merged[key] = deepcopy(value)
    return merged


class CompositionAlgebra:
    """
    Operators shared by every `GraphComposition`.

    The named constructors and `then`/`parallel`/`choice` work over the base
    tag universe (BaseNodeType / BaseRelationshipType); `compose`, `fmap` and
    `bind` work for any tag universe.
    """

    # ------------------------------------------------------------------
    # Named constructors
    # ------------------------------------------------------------------

    @classmethod
    def atomic(
        cls, value_type: str, data: Any, config: Optional["ComposeConfig"] = None
    ) -> "GraphComposition":
        """Single-node graph whose root holds `data` and is labelled `value_type`."""
        graph = cls.new(BaseNodeType.VALUE, Atomic(value_type), config=config)
        return graph._relabel_root(value_type, data)._replace(
            metadata=Metadata(name=value_type)
        )

    @classmethod
    def composite(
        cls, structure_type: str, config: Optional["ComposeConfig"] = None
    ) -> "GraphComposition":
        """Empty structure: an Aggregate-typed root and nothing else."""
        graph = cls.new(BaseNodeType.AGGREGATE, Composite(structure_type), config=config)
        return graph._replace(metadata=Metadata(name=structure_type))

    @classmethod
    def entity(
        cls, entity_type: str, entity_id: Any, config: Optional["ComposeConfig"] = None
    ) -> "GraphComposition":
        """Entity reference graph; the root's data is `{"id": entity_id}`."""
        graph = cls.new(
            BaseNodeType.ENTITY_REFERENCE,
            Domain(DomainKind.ENTITY, entity_type),
            config=config,
        )
        return graph._relabel_root(entity_type, {"id": str(entity_id)})._replace(
            metadata=Metadata(name=entity_type)
        )

    @classmethod
    def aggregate(
        cls, aggregate_type: str, aggregate_id: Any, config: Optional["ComposeConfig"] = None
    ) -> "GraphComposition":
        """Aggregate root graph; the root's data is `{"id": aggregate_id}`."""
        graph = cls.new(
            BaseNodeType.AGGREGATE,
            Domain(DomainKind.AGGREGATE, aggregate_type),
            config=config,
        )
        return graph._relabel_root(aggregate_type, {"id": str(aggregate_id)})._replace(
            metadata=Metadata(name=aggregate_type)
        )

    def _relabel_root(self, label: str, data: Any) -> "GraphComposition":
        root = replace(self.nodes[self.composition_root], label=label, data=data)
        return self._replace(nodes={**self.nodes, root.id: root})

    # ------------------------------------------------------------------
    # Binary operators
    # ------------------------------------------------------------------

    def then(self, other: "GraphComposition") -> "GraphComposition":
        """
        Sequential composition: self followed by other.

        The result has a fresh GraphId, every node and edge of both operands,
        and one Sequence edge from each leaf of `self` (computed before the
        merge) to the root of `other`.
        """
        leaves = self.find_leaves()
        result = self._replace(
            id=GraphId.new(),
            nodes=_merge(self.nodes, other.nodes, "Node"),
            edges=_merge(self.edges, other.edges, "Edge"),
            composition_type=Composite("Sequential"),
            metadata=deepcopy(self.metadata),
            invariants=InvariantSet(),
        )
        for leaf in leaves:
            result = result.add_edge(leaf, other.composition_root, BaseRelationshipType.SEQUENCE)
        return result

    def parallel(self, other: "GraphComposition") -> "GraphComposition":
        """Both branches: a new root with Parallel edges to each operand's root."""
        return self._branch(other, "Parallel", BaseRelationshipType.PARALLEL)

    def choice(self, other: "GraphComposition") -> "GraphComposition":
        """One of the branches: a new root with Choice edges to each operand's root."""
        return self._branch(other, "Choice", BaseRelationshipType.CHOICE)

    def _branch(
        self, other: "GraphComposition", structure_type: str, relationship: BaseRelationshipType
    ) -> "GraphComposition":
        result = type(self).composite(structure_type, config=self.config)
        nodes = _merge(_merge(result.nodes, self.nodes, "Node"), other.nodes, "Node")
        edges = _merge(self.edges, other.edges, "Edge")
        root = result.composition_root
        return (
            result._replace(nodes=nodes, edges=edges)
            .add_edge(root, self.composition_root, relationship)
            .add_edge(root, other.composition_root, relationship)
        )

    def compose(self, other: "GraphComposition") -> "GraphComposition":
        """Merge `other` into a copy of `self` without adding any connecting edge."""
        return self._replace(
            nodes=_merge(self.nodes, other.nodes, "Node"),
            edges=_merge(self.edges, other.edges, "Edge"),
            metadata=deepcopy(self.metadata),
            invariants=InvariantSet(),
        )

    def can_compose_with(self, other: "GraphComposition") -> bool:
        return True

    # ------------------------------------------------------------------
    # Functor / monad
    # ------------------------------------------------------------------

    def fmap(self, f: Callable[[CompositionNode], CompositionNode]) -> "GraphComposition":
        """Structure-preserving map; see `GraphComposition.map_nodes`."""
        return self.map_nodes(f)

    @classmethod
    def pure(
        cls,
        node: CompositionNode,
        context_type: str = "Pure",
        config: Optional["ComposeConfig"] = None,
    ) -> "GraphComposition":
        """Lift a copy of a single node into a graph rooted at that node."""
        node = deepcopy(node)
        return cls(
            id=GraphId.new(),
            composition_root=node.id,
            composition_type=Monad(context_type),
            nodes={node.id: node},
            metadata=Metadata(name=context_type),
            config=config,
        )

    def bind(
        self,
        f: Callable[[CompositionNode], "GraphComposition"],
        context_type: str = "Bind",
    ) -> "GraphComposition":
        """
        Replace every node by the graph `f` returns for it and merge the results.

        The graph produced for the root node provides the result's root; the
        others are merged in node order with last-write-wins collisions.

        Raises:
            MonadError: if `f` returns something other than a graph
        """
        ordered = [self.nodes[self.composition_root]] + [
            node for nid, node in self.nodes.items() if nid != self.composition_root
        ]
        result = None
        for node in ordered:
            produced = f(node)
            if not isinstance(produced, CompositionAlgebra):
                raise MonadError(
                    f"bind function returned {type(produced).__name__} for node {node.id}"
                )
            result = produced.clone() if result is None else result.compose(produced)
        return result._replace(id=GraphId.new(), composition_type=Monad(context_type))


class GraphMorphism(ABC):
    """
    Transformation from one graph to another.

    Implementations raise `MorphismError` (or a more specific
    `CompositionError`) when the input cannot be mapped.
    """

    @abstractmethod
    def apply(self, graph: "GraphComposition") -> "GraphComposition":
        raise NotImplementedError

    def __call__(self, graph: "GraphComposition") -> "GraphComposition":
        return self.apply(graph)

    def and_then(self, other: "GraphMorphism") -> "GraphMorphism":
        """Morphism that applies `self` and feeds its result to `other`."""
        return MorphismChain(self, other)


class MorphismChain(GraphMorphism):
    def __init__(self, first: GraphMorphism, second: GraphMorphism):
        self.first = first
        self.second = second

    def apply(self, graph: "GraphComposition") -> "GraphComposition":
        return self.second.apply(self.first.apply(graph))


class FunctionMorphism(GraphMorphism):
    """Wraps a plain graph -> graph callable."""

    def __init__(self, fn: Callable[["GraphComposition"], "GraphComposition"], name: str = ""):
        self.fn = fn
        self.name = name or getattr(fn, "__name__", "morphism")

    def apply(self, graph: "GraphComposition") -> "GraphComposition":
        result = self.fn(graph)
        if not isinstance(result, CompositionAlgebra):
            raise MorphismError(f"{self.name} returned {type(result).__name__}, expected a graph")
        return result


class NodeMapMorphism(GraphMorphism):
    """
    Functor between node-type universes: maps every node with `f` and tags the
    result `Functor{source_type, target_type}`.
    """

    def __init__(
        self,
        f: Callable[[CompositionNode], CompositionNode],
        source_type: str,
        target_type: str,
    ):
        self.f = f
        self.source_type = source_type
        self.target_type = target_type

    def _checked(self, node: CompositionNode) -> CompositionNode:
        mapped = self.f(node)
        if not isinstance(mapped, CompositionNode):
            raise FunctorError(
                f"node {node.id} mapped to {type(mapped).__name__}, expected CompositionNode"
            )
        return mapped

    def apply(self, graph: "GraphComposition") -> "GraphComposition":
        mapped = graph.fmap(self._checked)
        return mapped._replace(composition_type=Functor(self.source_type, self.target_type))
