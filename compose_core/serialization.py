"""
Structured serialization of graph compositions.

Graphs, nodes, edges, relationships and metadata convert to plain dicts (and
JSON text) with field-named objects. Open tag unions use a discriminant:
closed tags serialize as their bare name ("Value", "Contains") and the open
variant as {"Custom": "<name>"}. Identifiers serialize as UUID strings.
Invariants and config are never serialized; a deserialized graph starts with
an empty invariant list.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Dict, Generic, Optional, Type, TypeVar

from .enums import (
    Atomic,
    BaseNodeType,
    BaseRelationshipType,
    Composite,
    CompositionType,
    Custom,
    Domain,
    DomainKind,
    Functor,
    Monad,
)
from .errors import InvalidComposition
from .graph import GraphComposition
from .ids import EdgeId, GraphId, NodeId
from .records import CompositionEdge, CompositionNode, Metadata, Relationship

E = TypeVar("E", bound=Enum)


class TagCodec(Generic[E]):
    """
    Converts tags of one enum universe (plus `Custom`) to and from plain values.

    Enum members with string values serialize as that value, others as the
    member name.
    """

    def __init__(self, enum_cls: Type[E]):
        self.enum_cls = enum_cls

    def encode(self, tag: Any) -> Any:
        if isinstance(tag, Custom):
            return {"Custom": tag.name}
        if isinstance(tag, self.enum_cls):
            return tag.value if isinstance(tag.value, str) else tag.name
        raise InvalidComposition(f"cannot encode tag {tag!r} as {self.enum_cls.__name__}")

    def decode(self, raw: Any) -> Any:
        if isinstance(raw, dict) and set(raw) == {"Custom"}:
            return Custom(str(raw["Custom"]))
        if isinstance(raw, str):
            for member in self.enum_cls:
                if member.value == raw or member.name == raw:
                    return member
        raise InvalidComposition(f"unknown {self.enum_cls.__name__} tag {raw!r}")


NODE_TYPES: TagCodec = TagCodec(BaseNodeType)
RELATIONSHIP_TYPES: TagCodec = TagCodec(BaseRelationshipType)


# -------------------- Composition types --------------------


def composition_type_to_dict(ctype: CompositionType) -> Dict[str, Any]:
    if isinstance(ctype, Atomic):
        return {"Atomic": {"value_type": ctype.value_type}}
    if isinstance(ctype, Composite):
        return {"Composite": {"structure_type": ctype.structure_type}}
    if isinstance(ctype, Functor):
        return {"Functor": {"source_type": ctype.source_type, "target_type": ctype.target_type}}
    if isinstance(ctype, Monad):
        return {"Monad": {"context_type": ctype.context_type}}
    if isinstance(ctype, Domain):
        return {"Domain": {ctype.kind.value: {ctype.kind.field_name: ctype.type_name}}}
    raise InvalidComposition(f"unknown composition type {ctype!r}")


def composition_type_from_dict(data: Dict[str, Any]) -> CompositionType:
    if not isinstance(data, dict) or len(data) != 1:
        raise InvalidComposition(f"malformed composition type {data!r}")
    (tag, body), = data.items()
    if tag == "Atomic":
        return Atomic(body["value_type"])
    if tag == "Composite":
        return Composite(body["structure_type"])
    if tag == "Functor":
        return Functor(body["source_type"], body["target_type"])
    if tag == "Monad":
        return Monad(body["context_type"])
    if tag == "Domain" and isinstance(body, dict) and len(body) == 1:
        (kind_name, fields), = body.items()
        kind = DomainKind(kind_name)
        return Domain(kind, fields[kind.field_name])
    raise InvalidComposition(f"unknown composition type {tag!r}")


# -------------------- Records --------------------


def metadata_to_dict(metadata: Metadata) -> Dict[str, Any]:
    return {
        "name": metadata.name,
        "description": metadata.description,
        "tags": list(metadata.tags),
        "properties": dict(metadata.properties),
    }


def metadata_from_dict(data: Dict[str, Any]) -> Metadata:
    return Metadata(
        name=data.get("name", ""),
        description=data.get("description"),
        tags=list(data.get("tags", [])),
        properties=dict(data.get("properties", {})),
    )


def relationship_to_dict(rel: Relationship, codec: TagCodec = RELATIONSHIP_TYPES) -> Dict[str, Any]:
    return {
        "relationship_type": codec.encode(rel.relationship_type),
        "metadata": dict(rel.metadata),
        "bidirectional": rel.bidirectional,
    }


def relationship_from_dict(data: Dict[str, Any], codec: TagCodec = RELATIONSHIP_TYPES) -> Relationship:
    return Relationship(
        relationship_type=codec.decode(data["relationship_type"]),
        metadata=dict(data.get("metadata", {})),
        bidirectional=bool(data.get("bidirectional", False)),
    )


def node_to_dict(node: CompositionNode, codec: TagCodec = NODE_TYPES) -> Dict[str, Any]:
    return {
        "id": str(node.id),
        "node_type": codec.encode(node.node_type),
        "label": node.label,
        "data": node.data,
        "metadata": dict(node.metadata),
    }


def node_from_dict(data: Dict[str, Any], codec: TagCodec = NODE_TYPES) -> CompositionNode:
    return CompositionNode(
        id=NodeId.from_uuid(data["id"]),
        node_type=codec.decode(data["node_type"]),
        label=data["label"],
        data=data.get("data"),
        metadata=dict(data.get("metadata", {})),
    )


def edge_to_dict(edge: CompositionEdge, codec: TagCodec = RELATIONSHIP_TYPES) -> Dict[str, Any]:
    return {
        "id": str(edge.id),
        "source": str(edge.source),
        "target": str(edge.target),
        "relationship": relationship_to_dict(edge.relationship, codec),
    }


def edge_from_dict(data: Dict[str, Any], codec: TagCodec = RELATIONSHIP_TYPES) -> CompositionEdge:
    return CompositionEdge(
        id=EdgeId.from_uuid(data["id"]),
        source=NodeId.from_uuid(data["source"]),
        target=NodeId.from_uuid(data["target"]),
        relationship=relationship_from_dict(data["relationship"], codec),
    )


# -------------------- Graphs --------------------


def graph_to_dict(
    graph: GraphComposition,
    node_codec: TagCodec = NODE_TYPES,
    relationship_codec: TagCodec = RELATIONSHIP_TYPES,
) -> Dict[str, Any]:
    return {
        "id": str(graph.id),
        "composition_root": str(graph.composition_root),
        "composition_type": composition_type_to_dict(graph.composition_type),
        "nodes": {str(nid): node_to_dict(n, node_codec) for nid, n in graph.nodes.items()},
        "edges": {str(eid): edge_to_dict(e, relationship_codec) for eid, e in graph.edges.items()},
        "metadata": metadata_to_dict(graph.metadata),
    }


def graph_from_dict(
    data: Dict[str, Any],
    node_codec: TagCodec = NODE_TYPES,
    relationship_codec: TagCodec = RELATIONSHIP_TYPES,
    graph_cls: Type[GraphComposition] = GraphComposition,
) -> GraphComposition:
    """
    Rebuild a graph from `graph_to_dict` output.

    Raises:
        InvalidComposition: if a tag or composition type is not recognised, or
            the document does not have the expected shape
    """
    try:
        nodes = {NodeId.from_uuid(k): node_from_dict(v, node_codec) for k, v in data["nodes"].items()}
        edges = {
            EdgeId.from_uuid(k): edge_from_dict(v, relationship_codec) for k, v in data["edges"].items()
        }
        return graph_cls(
            id=GraphId.from_uuid(data["id"]),
            composition_root=NodeId.from_uuid(data["composition_root"]),
            composition_type=composition_type_from_dict(data["composition_type"]),
            nodes=nodes,
            edges=edges,
            metadata=metadata_from_dict(data.get("metadata", {})),
        )
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise InvalidComposition(f"malformed graph document: {e}") from e


def to_json(graph: GraphComposition, indent: Optional[int] = None, **codecs: Any) -> str:
    return json.dumps(graph_to_dict(graph, **codecs), indent=indent)


def from_json(text: str, **codecs: Any) -> GraphComposition:
    return graph_from_dict(json.loads(text), **codecs)
