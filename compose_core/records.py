"""
Node, edge and annotation records for graph compositions.

This module defines the value types stored inside a `GraphComposition`:
- Metadata: name/description/tags/properties bag for a whole graph
- Relationship: tag plus annotations carried by an edge
- CompositionNode: typed, labelled node with structured data
- CompositionEdge: directed edge between two node ids

All records are frozen; the builder methods return modified copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Generic, List, Optional, TypeVar

from .enums import Custom
from .ids import EdgeId, NodeId

N = TypeVar("N")
R = TypeVar("R")

# Default for node data arguments; only an omitted argument becomes empty object data
MISSING: Any = object()


@dataclass(frozen=True)
class Metadata:
    """
    Annotations attached to a graph as a whole.

    Attributes:
        name: Human-readable name, set by the named constructors to the type name
        description: Optional free text
        tags: Ordered list of tags
        properties: Open string-keyed map of structured values
    """

    name: str = ""
    description: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    properties: Dict[str, Any] = field(default_factory=dict)

    def with_description(self, description: str) -> "Metadata":
        return replace(self, description=description)

    def with_tag(self, tag: str) -> "Metadata":
        return replace(self, tags=[*self.tags, tag])

    def with_property(self, key: str, value: Any) -> "Metadata":
        return replace(self, properties={**self.properties, key: value})


@dataclass(frozen=True)
class Relationship(Generic[R]):
    """
    Typed relationship carried by an edge.

    A bidirectional relationship makes the edge's source reachable from its
    target in `GraphComposition.get_connected_nodes`.
    """

    relationship_type: R
    """Tag describing the relationship (e.g. BaseRelationshipType.CONTAINS)."""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Open annotation map."""

    bidirectional: bool = False
    """Whether the relationship can be traversed target -> source."""

    def make_bidirectional(self) -> "Relationship[R]":
        return replace(self, bidirectional=True)

    def with_metadata(self, key: str, value: Any) -> "Relationship[R]":
        return replace(self, metadata={**self.metadata, key: value})


@dataclass(frozen=True)
class CompositionNode(Generic[N]):
    """
    A node in a graph composition.

    Attributes:
        id: Graph-local identifier
        node_type: Tag for the node (BaseNodeType, Custom, or a caller-defined tag)
        label: Name used by label lookups; not required to be unique
        data: Structured value tree (JSON-compatible)
        metadata: Open annotation map
    """

    id: NodeId
    node_type: N
    label: str
    data: Any = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def create(node_type: N, label: str, data: Any = MISSING) -> "CompositionNode[N]":
        return CompositionNode(
            id=NodeId.new(),
            node_type=node_type,
            label=label,
            data={} if data is MISSING else data,
        )

    def with_metadata(self, key: str, value: Any) -> "CompositionNode[N]":
        return replace(self, metadata={**self.metadata, key: value})

    def with_field(self, name: str, value: Any) -> "CompositionNode[N]":
        """Set `name` in object data; nodes whose data is not an object are returned as-is."""
        if not isinstance(self.data, dict):
            return self
        return replace(self, data={**self.data, name: value})

    def is_type(self, type_name: str) -> bool:
        """True only for a `Custom` node type carrying exactly `type_name`."""
        return isinstance(self.node_type, Custom) and self.node_type.name == type_name


@dataclass(frozen=True)
class CompositionEdge(Generic[R]):
    """
    A directed edge between two node ids.

    Endpoints are not required to exist in the owning graph's node map.
    """

    id: EdgeId
    source: NodeId
    target: NodeId
    relationship: Relationship[R]

    @staticmethod
    def create(source: NodeId, target: NodeId, relationship_type: R) -> "CompositionEdge[R]":
        return CompositionEdge(
            id=EdgeId.new(),
            source=source,
            target=target,
            relationship=Relationship(relationship_type),
        )

    @property
    def relationship_type(self) -> R:
        return self.relationship.relationship_type

