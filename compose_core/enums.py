"""
Tag enumerations for graph compositions.

This module defines the closed tag sets used to type nodes, relationships and
whole compositions, plus the `Custom` escape that carries a free-form name for
tags outside the closed set:
- BaseNodeType / BaseRelationshipType: closed node and edge tags
- Custom: open variant shared by both tag universes
- Atomic, Composite, Functor, Monad, Domain: how a composition was produced
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class BaseNodeType(Enum):
    """
    Closed set of node tags.

    Values are the canonical tag names used for display and serialization.
    """

    VALUE = "Value"
    """A plain value node."""

    ENTITY_REFERENCE = "EntityReference"
    """A node holding a reference (id) to an entity owned elsewhere."""

    ENTITY = "Entity"
    """A node standing for an entity."""

    AGGREGATE = "Aggregate"
    """An aggregate root node."""

    SERVICE = "Service"
    """A service node."""

    COMMAND = "Command"
    """A command node."""

    EVENT = "Event"
    """An event node."""

    def __str__(self) -> str:
        return self.value


class BaseRelationshipType(Enum):
    """
    Closed set of relationship tags carried by edges.
    """

    CONTAINS = "Contains"
    """Parent-child containment."""

    REFERENCES = "References"
    """Non-owning reference."""

    DEPENDS_ON = "DependsOn"
    """Source depends on target."""

    SEQUENCE = "Sequence"
    """Source happens before target."""

    PARALLEL = "Parallel"
    """Both branches apply."""

    CHOICE = "Choice"
    """Exactly one of the branches applies."""

    HIERARCHY = "Hierarchy"
    """Level-to-sublevel relation."""

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Custom:
    """Open tag variant; the name is significant for equality and display."""

    name: str

    def __str__(self) -> str:
        return f"Custom({self.name})"


NodeType = Union[BaseNodeType, Custom]
RelationshipType = Union[BaseRelationshipType, Custom]


# ---------------------------------------------------------------------
# Composition types
# ---------------------------------------------------------------------


@dataclass(frozen=True)
class Atomic:
    """Single node, no edges; represents a value."""

    value_type: str


@dataclass(frozen=True)
class Composite:
    """Several nodes and edges; represents a structure."""

    structure_type: str


@dataclass(frozen=True)
class Functor:
    """Maps one graph onto another."""

    source_type: str
    target_type: str


@dataclass(frozen=True)
class Monad:
    """Wraps a graph-returning computation."""

    context_type: str


class DomainKind(Enum):
    """Domain-driven-design concepts a composition can stand for."""

    ENTITY = "Entity"
    VALUE_OBJECT = "ValueObject"
    AGGREGATE = "Aggregate"
    SERVICE = "Service"
    EVENT = "Event"
    COMMAND = "Command"
    BOUNDED_CONTEXT = "BoundedContext"

    @property
    def field_name(self) -> str:
        """Name of the attribute that carries the type name for this kind."""
        return _DOMAIN_FIELDS[self]


_DOMAIN_FIELDS = {
    DomainKind.ENTITY: "entity_type",
    DomainKind.VALUE_OBJECT: "value_type",
    DomainKind.AGGREGATE: "aggregate_type",
    DomainKind.SERVICE: "service_type",
    DomainKind.EVENT: "event_type",
    DomainKind.COMMAND: "command_type",
    DomainKind.BOUNDED_CONTEXT: "domain",
}


@dataclass(frozen=True)
class Domain:
    """A composition that represents a domain concept of the given kind."""

    kind: DomainKind
    type_name: str

    def __str__(self) -> str:
        return f"Domain({self.kind.value}{{{self.kind.field_name}: {self.type_name}}})"


CompositionType = Union[Atomic, Composite, Functor, Monad, Domain]
