"""
Identifier spaces.

Entity identifiers (graphs, aggregates, bounded contexts) are globally unique and
carry a marker type so that ids from different domains are never interchangeable.
Node and edge identifiers are local: they only mean something inside one
`GraphComposition`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Type, TypeVar, Union
from uuid import UUID, uuid4

M = TypeVar("M")
I = TypeVar("I", bound="_UuidId")


class GraphMarker:
    """Marker for graph identities."""


class AggregateMarker:
    """Marker for aggregate identities."""


class BoundedContextMarker:
    """Marker for bounded context identities."""


@dataclass(frozen=True)
class _UuidId:
    uuid: UUID

    @classmethod
    def new(cls: Type[I]) -> I:
        """Generate a fresh random identifier."""
        return cls(uuid4())

    @classmethod
    def from_uuid(cls: Type[I], value: Union[UUID, str]) -> I:
        """Rebuild an identifier from a UUID or its canonical text form."""
        if isinstance(value, UUID):
            return cls(value)
        return cls(UUID(str(value)))

    def as_uuid(self) -> UUID:
        return self.uuid

    def __str__(self) -> str:
        return str(self.uuid)


@dataclass(frozen=True)
class EntityId(_UuidId, Generic[M]):
    """
    Globally unique, marker-typed identifier.

    Equality and hashing use the UUID only, but ids of different concrete
    classes (e.g. `GraphId` and `AggregateId`) never compare equal.
    """


class GraphId(EntityId[GraphMarker]):
    pass


class AggregateId(EntityId[AggregateMarker]):
    pass


class BoundedContextId(EntityId[BoundedContextMarker]):
    pass


@dataclass(frozen=True)
class NodeId(_UuidId):
    """Graph-local node identifier."""


@dataclass(frozen=True)
class EdgeId(_UuidId):
    """Graph-local edge identifier."""
