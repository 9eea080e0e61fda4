"""
Unit tests for structured serialization.

Graphs must survive a JSON round trip structurally equal; the open tag
variant must keep its name; invariants are never serialized.
"""

import json
from enum import Enum, auto

import pytest

from compose_core.enums import (
    Atomic,
    BaseNodeType,
    BaseRelationshipType,
    Composite,
    Custom,
    Domain,
    DomainKind,
    Functor,
    Monad,
)
from compose_core.errors import InvalidComposition
from compose_core.graph import GraphComposition
from compose_core.records import Metadata
from compose_core.serialization import (
    NODE_TYPES,
    RELATIONSHIP_TYPES,
    TagCodec,
    composition_type_from_dict,
    composition_type_to_dict,
    from_json,
    graph_from_dict,
    graph_to_dict,
    to_json,
)


def sample_graph() -> GraphComposition:
    return (
        GraphComposition.composite("Order")
        .with_metadata(
            Metadata("Order").with_description("Customer order").with_tag("sales").with_property("version", 2)
        )
        .add_node(BaseNodeType.ENTITY_REFERENCE, "customer", {"id": "c-1"})
        .add_node(Custom("LineItem"), "line", {"qty": 2, "price": 9.5})
        .add_node(BaseNodeType.VALUE, "note", "gift wrap")
        .add_edge_by_label("root", "customer", BaseRelationshipType.REFERENCES)
        .add_edge_by_label("root", "line", Custom("has_line"), bidirectional=True, metadata={"w": 1})
        .add_edge_by_label("root", "note", BaseRelationshipType.CONTAINS)
    )


class TestTagCodec:
    """Test tag encoding and decoding."""

    def test_closed_tags_use_bare_names(self):
        """Test closed tags encode as their display names."""
        assert NODE_TYPES.encode(BaseNodeType.ENTITY_REFERENCE) == "EntityReference"
        assert RELATIONSHIP_TYPES.encode(BaseRelationshipType.DEPENDS_ON) == "DependsOn"

    def test_custom_uses_discriminant(self):
        """Test the open variant encodes as a Custom object."""
        assert NODE_TYPES.encode(Custom("Stage")) == {"Custom": "Stage"}
        assert NODE_TYPES.decode({"Custom": "Stage"}) == Custom("Stage")

    def test_unknown_tag_rejected(self):
        """Test unknown names and foreign tags raise InvalidComposition."""
        with pytest.raises(InvalidComposition):
            NODE_TYPES.decode("Nope")
        with pytest.raises(InvalidComposition):
            NODE_TYPES.encode(BaseRelationshipType.CONTAINS)

    def test_caller_defined_universe(self):
        """Test enums with non-string values encode by member name."""

        class Step(Enum):
            START = auto()
            END = auto()

        codec = TagCodec(Step)
        assert codec.encode(Step.START) == "START"
        assert codec.decode("END") is Step.END


class TestCompositionTypes:
    """Test composition type conversion."""

    @pytest.mark.parametrize(
        "ctype",
        [
            Atomic("Money"),
            Composite("Address"),
            Functor("A", "B"),
            Monad("Pure"),
            Domain(DomainKind.ENTITY, "User"),
            Domain(DomainKind.BOUNDED_CONTEXT, "Sales"),
        ],
    )
    def test_round_trip(self, ctype):
        """Test every composition type converts back to itself."""
        assert composition_type_from_dict(composition_type_to_dict(ctype)) == ctype

    def test_domain_shape(self):
        """Test domain types nest kind and field name."""
        assert composition_type_to_dict(Domain(DomainKind.ENTITY, "User")) == {
            "Domain": {"Entity": {"entity_type": "User"}}
        }

    def test_malformed(self):
        """Test ambiguous or unknown composition types are rejected."""
        with pytest.raises(InvalidComposition):
            composition_type_from_dict({"Atomic": {}, "Composite": {}})
        with pytest.raises(InvalidComposition):
            composition_type_from_dict({"Unknown": {}})


class TestGraphRoundTrip:
    """Test whole-graph serialization."""

    def test_json_round_trip_is_equal(self):
        """Test a graph survives JSON unchanged."""
        g = sample_graph()
        restored = from_json(to_json(g))
        assert restored == g
        assert restored.node_count() == 4
        assert restored.edge_count() == 3

    def test_custom_tags_survive(self):
        """Test Custom node and relationship tags keep their names."""
        restored = from_json(to_json(sample_graph()))
        assert restored.node_by_label("line").node_type == Custom("LineItem")
        rel_types = {e.relationship_type for e in restored.edges.values()}
        assert Custom("has_line") in rel_types

    def test_entity_graph_round_trip(self):
        """Test a domain entity graph round-trips with its type."""
        g = GraphComposition.entity("User", "user-123")
        restored = from_json(to_json(g, indent=2))
        assert restored == g
        assert restored.composition_type == Domain(DomainKind.ENTITY, "User")

    def test_null_data_round_trip(self):
        """Test null node data stays null."""
        g = GraphComposition.composite("X").add_node(BaseNodeType.VALUE, "n", None)
        assert from_json(to_json(g)).node_by_label("n").data is None

    def test_invariants_are_dropped(self):
        """Test a deserialized graph starts with no invariants."""
        g = sample_graph().with_invariant(lambda graph: False)
        restored = from_json(to_json(g))
        assert len(restored.invariants) == 0
        restored.check_invariants()

    def test_document_shape(self):
        """Test ids serialize as UUID text and tags as names."""
        g = sample_graph()
        doc = json.loads(to_json(g))
        assert doc["id"] == str(g.id)
        assert doc["composition_root"] == str(g.composition_root)
        assert doc["composition_type"] == {"Composite": {"structure_type": "Order"}}
        assert set(doc["nodes"]) == {str(n) for n in g.nodes}
        root_doc = doc["nodes"][str(g.composition_root)]
        assert root_doc["node_type"] == "Aggregate"
        assert doc["metadata"]["tags"] == ["sales"]

    def test_caller_defined_tags(self):
        """Test graphs over caller-defined tags round-trip with matching codecs."""

        class Step(Enum):
            START = auto()
            PROCESS = auto()

        class Flow(Enum):
            NEXT = auto()

        g = (
            GraphComposition.new(Step.START, Composite("Workflow"))
            .add_node(Step.PROCESS, "process")
            .add_edge_by_label("root", "process", Flow.NEXT)
        )
        codecs = {"node_codec": TagCodec(Step), "relationship_codec": TagCodec(Flow)}
        restored = from_json(to_json(g, **codecs), **codecs)
        assert restored == g


class TestMalformedDocuments:
    """Test malformed documents raise InvalidComposition."""

    def test_missing_fields_rejected(self):
        """Test a missing root id is rejected."""
        doc = graph_to_dict(sample_graph())
        del doc["composition_root"]
        with pytest.raises(InvalidComposition):
            graph_from_dict(doc)

    def test_bad_uuid_rejected(self):
        """Test a malformed graph id is rejected."""
        doc = graph_to_dict(sample_graph())
        doc["id"] = "not-a-uuid"
        with pytest.raises(InvalidComposition):
            graph_from_dict(doc)

    def test_nodes_as_list_rejected(self):
        """Test a node list instead of a node map is rejected."""
        doc = graph_to_dict(sample_graph())
        doc["nodes"] = []
        with pytest.raises(InvalidComposition):
            graph_from_dict(doc)

    def test_non_object_composition_body_rejected(self):
        """Test a scalar composition type body is rejected."""
        doc = graph_to_dict(sample_graph())
        doc["composition_type"] = {"Composite": "Order"}
        with pytest.raises(InvalidComposition):
            graph_from_dict(doc)

    def test_non_object_node_rejected(self):
        """Test a scalar node entry is rejected."""
        g = sample_graph()
        doc = graph_to_dict(g)
        doc["nodes"][str(g.composition_root)] = 5
        with pytest.raises(InvalidComposition):
            graph_from_dict(doc)
