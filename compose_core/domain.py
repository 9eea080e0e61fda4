"""
Domain adapter contract and sample compositions.

Domain aggregates expose their state as a graph by implementing `Composable`
and, optionally, rebuild themselves from such a graph by implementing
`Decomposable`. The engine never calls either; it only fixes the graph shapes:
one aggregate (or entity) root, one node per meaningful component, and
Contains edges from the root to each component.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Type, TypeVar

from .enums import BaseNodeType, BaseRelationshipType, CompositionType, Custom
from .errors import IncompatibleTypes, InvalidComposition
from .graph import GraphComposition
from .records import CompositionNode

D = TypeVar("D", bound="Decomposable")


class Composable(ABC):
    @abstractmethod
    def to_graph(self) -> GraphComposition:
        """Snapshot of the current state as a graph."""


class Decomposable(ABC):
    @classmethod
    @abstractmethod
    def from_graph(cls: Type[D], graph: GraphComposition) -> D:
        """
        Rebuild an instance from a graph snapshot.

        Raises:
            CompositionError: if required nodes or edges are missing or malformed
        """


def compose_knowledge_graph(objects: Iterable[Composable]) -> GraphComposition:
    """
    Combine the graph snapshots of several domain objects with `parallel`,
    left to right. No objects yield an empty `KnowledgeGraph` composite.
    """
    graph = None
    for obj in objects:
        snapshot = obj.to_graph()
        graph = snapshot if graph is None else graph.parallel(snapshot)
    if graph is None:
        return GraphComposition.composite("KnowledgeGraph")
    return graph


def expect_composition_type(graph: GraphComposition, expected: CompositionType) -> None:
    """
    Raises:
        IncompatibleTypes: if `graph` was not produced as `expected`
    """
    if graph.composition_type != expected:
        raise IncompatibleTypes(str(expected), str(graph.composition_type))


def contained_component(graph: GraphComposition, label: str) -> CompositionNode:
    """
    Node labelled `label` that the root reaches through a Contains edge.

    Raises:
        InvalidComposition: if no such component exists
    """
    node = graph.node_by_label(label)
    if node is None:
        raise InvalidComposition(f"missing component {label!r}")
    for edge in graph.edges.values():
        if (
            edge.source == graph.composition_root
            and edge.target == node.id
            and edge.relationship.relationship_type == BaseRelationshipType.CONTAINS
        ):
            return node
    raise InvalidComposition(f"component {label!r} is not contained by the root")


# -------------------- Sample compositions --------------------


def line_item_graph(product: str, quantity: int, price: float) -> GraphComposition:
    return (
        GraphComposition.composite("LineItem")
        .add_node(BaseNodeType.VALUE, "product", {"name": product})
        .add_node(BaseNodeType.VALUE, "quantity", quantity)
        .add_node(BaseNodeType.VALUE, "price", price)
        .add_node(BaseNodeType.VALUE, "total", quantity * price)
    )


def document_processing_pipeline() -> GraphComposition:
    """Four-stage document pipeline chained with Sequence edges from the root."""
    stage = Custom("Stage")
    return (
        GraphComposition.composite("DocumentPipeline")
        .add_node(stage, "ingest", {"type": "Document Ingestion", "accepts": ["pdf", "docx", "md", "txt"]})
        .add_node(stage, "extract", {"type": "Text Extraction", "output": "plain text"})
        .add_node(stage, "analyze", {"type": "NLP Analysis", "tasks": ["tokenization", "NER", "sentiment"]})
        .add_node(stage, "embed", {"type": "Semantic Embedding", "model": "text-embedding-3", "dimensions": 1536})
        .add_edge_by_label("root", "ingest", BaseRelationshipType.SEQUENCE)
        .add_edge_by_label("ingest", "extract", BaseRelationshipType.SEQUENCE)
        .add_edge_by_label("extract", "analyze", BaseRelationshipType.SEQUENCE)
        .add_edge_by_label("analyze", "embed", BaseRelationshipType.SEQUENCE)
    )


def agent_network() -> GraphComposition:
    agent_type = Custom("AgentType")
    capability = Custom("Capability")
    has_capability = Custom("has_capability")
    return (
        GraphComposition.composite("AgentNetwork")
        .add_node(agent_type, "human_agents", {"type": "Human Agents", "description": "Human-controlled agents in the system"})
        .add_node(agent_type, "ai_agents", {"type": "AI Agents", "description": "AI/ML model agents"})
        .add_node(agent_type, "system_agents", {"type": "System Agents", "description": "System/service agents"})
        .add_node(capability, "data_processing", {"name": "Data Processing", "description": "Ability to process and transform data"})
        .add_node(capability, "decision_making", {"name": "Decision Making", "description": "Ability to make autonomous decisions"})
        .add_edge_by_label("root", "human_agents", BaseRelationshipType.CONTAINS)
        .add_edge_by_label("root", "ai_agents", BaseRelationshipType.CONTAINS)
        .add_edge_by_label("root", "system_agents", BaseRelationshipType.CONTAINS)
        .add_edge_by_label("ai_agents", "data_processing", has_capability)
        .add_edge_by_label("ai_agents", "decision_making", has_capability)
    )


def org_hierarchy() -> GraphComposition:
    level = Custom("Level")
    graph = GraphComposition.composite("OrganizationalHierarchy")
    parent = "root"
    levels = [
        ("company", "Company", "Top-level organization"),
        ("division", "Division", "Major business divisions"),
        ("department", "Department", "Functional departments"),
        ("team", "Team", "Working teams"),
    ]
    for label, name, description in levels:
        graph = graph.add_node(level, label, {"level": name, "description": description})
        graph = graph.add_edge_by_label(parent, label, BaseRelationshipType.HIERARCHY)
        parent = label
    return graph
