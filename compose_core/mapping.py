"""
Mapping between domain-specific type strings and base tags.

Domain adapters and the declarative compiler describe node and relationship
types as lower-case strings ("value_object", "depends_on", ...). Unknown
strings map to `Custom(<string>)` so no information is lost.
"""

from __future__ import annotations

from typing import Any, Dict

from .enums import BaseNodeType, BaseRelationshipType, Custom, NodeType, RelationshipType
from .errors import MappingError

_NODE_TYPES: Dict[str, BaseNodeType] = {
    "value": BaseNodeType.VALUE,
    "value_object": BaseNodeType.VALUE,
    "entity_reference": BaseNodeType.ENTITY_REFERENCE,
    "entity": BaseNodeType.ENTITY,
    "aggregate": BaseNodeType.AGGREGATE,
    "service": BaseNodeType.SERVICE,
    "event": BaseNodeType.EVENT,
    "command": BaseNodeType.COMMAND,
}

_NODE_NAMES: Dict[BaseNodeType, str] = {
    BaseNodeType.VALUE: "value_object",
    BaseNodeType.ENTITY_REFERENCE: "entity_reference",
    BaseNodeType.ENTITY: "entity",
    BaseNodeType.AGGREGATE: "aggregate",
    BaseNodeType.SERVICE: "service",
    BaseNodeType.EVENT: "event",
    BaseNodeType.COMMAND: "command",
}

_RELATIONSHIP_TYPES: Dict[str, BaseRelationshipType] = {
    "contains": BaseRelationshipType.CONTAINS,
    "references": BaseRelationshipType.REFERENCES,
    "depends_on": BaseRelationshipType.DEPENDS_ON,
    "sequence": BaseRelationshipType.SEQUENCE,
    "parallel": BaseRelationshipType.PARALLEL,
    "choice": BaseRelationshipType.CHOICE,
    "hierarchy": BaseRelationshipType.HIERARCHY,
}

_RELATIONSHIP_NAMES: Dict[BaseRelationshipType, str] = {
    tag: name for name, tag in _RELATIONSHIP_TYPES.items()
}


def _require_str(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise MappingError(f"{what} must be a non-empty string, got {value!r}")
    return value


class DomainNodeMapping:
    @staticmethod
    def from_string(type_str: str) -> NodeType:
        """Map a domain node type string to a tag; unknown strings become `Custom`."""
        type_str = _require_str(type_str, "node type")
        return _NODE_TYPES.get(type_str, Custom(type_str))

    @staticmethod
    def to_string(node_type: NodeType) -> str:
        if isinstance(node_type, Custom):
            return node_type.name
        return _NODE_NAMES[node_type]


class DomainRelationshipMapping:
    @staticmethod
    def from_string(type_str: str) -> RelationshipType:
        """Map a domain relationship string to a tag; unknown strings become `Custom`."""
        type_str = _require_str(type_str, "relationship type")
        return _RELATIONSHIP_TYPES.get(type_str, Custom(type_str))

    @staticmethod
    def to_string(rel_type: RelationshipType) -> str:
        if isinstance(rel_type, Custom):
            return rel_type.name
        return _RELATIONSHIP_NAMES[rel_type]
