"""
GraphComposition: a domain concept represented as a typed graph.

A composition is an identified collection of nodes and edges with one
designated root node. Construction calls never mutate the receiver; each one
returns a new graph value, so graphs are built by chaining:

    graph = (
        GraphComposition.composite("Address")
        .add_node(BaseNodeType.VALUE, "street", "123 Main St")
        .add_edge_by_label("root", "street", BaseRelationshipType.CONTAINS)
    )
"""

from __future__ import annotations

import logging
from copy import deepcopy
from functools import reduce
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

import networkx as nx

from .algebra import CompositionAlgebra
from .config import ComposeConfig
from .enums import CompositionType
from .errors import CycleDetected, NodeNotFound
from .ids import EdgeId, GraphId, NodeId
from .invariants import GraphPredicate, InvariantSet
from .records import MISSING, CompositionEdge, CompositionNode, Metadata, Relationship

logger = logging.getLogger(__name__)

N = TypeVar("N")
R = TypeVar("R")
N2 = TypeVar("N2")
T = TypeVar("T")

_GRAPHML_SCALARS = (str, int, float, bool)


class GraphComposition(CompositionAlgebra, Generic[N, R]):
    """
    Container for the nodes and edges of one composition.

    Attributes:
        id: Global identity of this graph
        composition_root: Id of the root node; always present in `nodes`
        composition_type: How the graph was produced (informational)
        nodes: Mapping NodeId -> CompositionNode
        edges: Mapping EdgeId -> CompositionEdge; endpoints may be absent from `nodes`
        metadata: Graph-level annotations
        invariants: Predicates checked on demand; excluded from equality and copies
        config: Construction policy inherited by derived graphs
    """

    def __init__(
        self,
        id: GraphId,
        composition_root: NodeId,
        composition_type: CompositionType,
        nodes: Optional[Dict[NodeId, CompositionNode[N]]] = None,
        edges: Optional[Dict[EdgeId, CompositionEdge[R]]] = None,
        metadata: Optional[Metadata] = None,
        invariants: Optional[InvariantSet] = None,
        config: Optional[ComposeConfig] = None,
    ):
        self.id = id
        self.composition_root = composition_root
        self.composition_type = composition_type
        self.nodes: Dict[NodeId, CompositionNode[N]] = dict(nodes or {})
        self.edges: Dict[EdgeId, CompositionEdge[R]] = dict(edges or {})
        self.metadata = metadata if metadata is not None else Metadata()
        self.invariants = invariants if invariants is not None else InvariantSet()
        self.config = config if config is not None else ComposeConfig()

    @classmethod
    def new(
        cls,
        root_type: N,
        composition_type: CompositionType,
        config: Optional[ComposeConfig] = None,
    ) -> "GraphComposition[N, R]":
        """Fresh graph holding only a root node of `root_type` labelled with the root label."""
        config = config if config is not None else ComposeConfig()
        root = CompositionNode.create(root_type, config.root_label, {})
        return cls(
            id=GraphId.new(),
            composition_root=root.id,
            composition_type=composition_type,
            nodes={root.id: root},
            config=config,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GraphComposition):
            return NotImplemented
        return (
            self.id == other.id
            and self.composition_root == other.composition_root
            and self.composition_type == other.composition_type
            and self.nodes == other.nodes
            and self.edges == other.edges
            and self.metadata == other.metadata
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"GraphComposition(id={self.id}, composition_root={self.composition_root}, "
            f"composition_type={self.composition_type!r}, nodes={len(self.nodes)}, "
            f"edges={len(self.edges)}, metadata={self.metadata!r}, invariants={self.invariants!r})"
        )

    def _replace(self, **changes: Any) -> "GraphComposition[N, R]":
        fields: Dict[str, Any] = {
            "id": self.id,
            "composition_root": self.composition_root,
            "composition_type": self.composition_type,
            "nodes": self.nodes,
            "edges": self.edges,
            "metadata": self.metadata,
            "invariants": self.invariants,
            "config": self.config,
        }
        fields.update(changes)
        return type(self)(**fields)

    def clone(self) -> "GraphComposition[N, R]":
        """Equal, independently owned copy of this graph without its invariants."""
        return self._replace(
            nodes=deepcopy(self.nodes),
            edges=deepcopy(self.edges),
            metadata=deepcopy(self.metadata),
            invariants=InvariantSet(),
        )

    def with_metadata(self, metadata: Metadata) -> "GraphComposition[N, R]":
        return self._replace(metadata=metadata)

    # -------------------- Construction --------------------

    def add_node(self, node_type: N, label: str, data: Any = MISSING) -> "GraphComposition[N, R]":
        """
        Add a node with a fresh NodeId. Duplicate labels are allowed.

        Omitted `data` becomes an empty object; an explicit None is stored as null.
        """
        return self._with_node(CompositionNode.create(node_type, label, data))

    def add_node_with_id(
        self, id: NodeId, node_type: N, label: str, data: Any = MISSING
    ) -> "GraphComposition[N, R]":
        """Add a node under a caller-supplied id, replacing any node already stored there."""
        if id in self.nodes:
            logger.debug("Node %s overwritten by add_node_with_id", id)
        return self._with_node(
            CompositionNode(id=id, node_type=node_type, label=label, data={} if data is MISSING else data)
        )

    def _with_node(self, node: CompositionNode[N]) -> "GraphComposition[N, R]":
        return self._replace(nodes={**self.nodes, node.id: node})

    def add_edge(
        self,
        source: NodeId,
        target: NodeId,
        relationship_type: R,
        *,
        bidirectional: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "GraphComposition[N, R]":
        """
        Add an edge with a fresh EdgeId.

        Endpoints are not checked unless `config.validate_endpoints` is set.

        Raises:
            NodeNotFound: if endpoint validation is enabled and an endpoint is missing
        """
        if self.config.validate_endpoints:
            for endpoint in (source, target):
                if endpoint not in self.nodes:
                    raise NodeNotFound(endpoint)
        edge = CompositionEdge(
            id=EdgeId.new(),
            source=source,
            target=target,
            relationship=Relationship(relationship_type, dict(metadata or {}), bidirectional),
        )
        return self._replace(edges={**self.edges, edge.id: edge})

    def add_edge_by_label(
        self,
        source_label: str,
        target_label: str,
        relationship_type: R,
        *,
        bidirectional: bool = False,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "GraphComposition[N, R]":
        """
        Add an edge between the first nodes carrying the given labels.

        The root label always resolves to `composition_root`. If either label
        is unresolved the graph is returned unchanged, unless
        `config.strict_labels` is set.

        Raises:
            NodeNotFound: if strict labels are enabled and a label is unresolved
        """
        source = self._resolve_label(source_label)
        target = self._resolve_label(target_label)
        if source is None or target is None:
            missing = source_label if source is None else target_label
            if self.config.strict_labels:
                raise NodeNotFound(missing)
            logger.debug("Label %r not found; edge %r -> %r not added", missing, source_label, target_label)
            return self
        return self.add_edge(
            source, target, relationship_type, bidirectional=bidirectional, metadata=metadata
        )

    def _resolve_label(self, label: str) -> Optional[NodeId]:
        if label == self.config.root_label:
            return self.composition_root
        node = self.node_by_label(label)
        return node.id if node is not None else None

    # -------------------- Invariants --------------------

    def with_invariant(self, predicate: GraphPredicate) -> "GraphComposition[N, R]":
        """Append a whole-graph predicate checked by `check_invariants`."""
        return self._replace(invariants=self.invariants.with_predicate(predicate))

    def check_invariants(self) -> None:
        """
        Raises:
            InvariantViolation: naming the first predicate (by position) that fails
        """
        self.invariants.check(self)

    # -------------------- Queries --------------------

    @property
    def root_node(self) -> CompositionNode[N]:
        return self.nodes[self.composition_root]

    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_by_label(self, label: str) -> Optional[CompositionNode[N]]:
        """First node carrying `label`, in insertion order."""
        for node in self.nodes.values():
            if node.label == label:
                return node
        return None

    def find_leaves(self) -> List[NodeId]:
        """Nodes that are not the source of any edge."""
        return [
            node_id
            for node_id in self.nodes
            if not any(e.source == node_id for e in self.edges.values())
        ]

    def find_roots(self) -> List[NodeId]:
        """Nodes that are not the target of any edge."""
        return [
            node_id
            for node_id in self.nodes
            if not any(e.target == node_id for e in self.edges.values())
        ]

    def get_connected_nodes(self, node_id: NodeId) -> List[NodeId]:
        """
        Targets of outgoing edges from `node_id`, plus the sources of
        bidirectional edges that end at `node_id`, in edge order.
        """
        connected = []
        for edge in self.edges.values():
            if edge.source == node_id:
                connected.append(edge.target)
            if edge.relationship.bidirectional and edge.target == node_id:
                connected.append(edge.source)
        return connected

    def map_nodes(
        self, f: Callable[[CompositionNode[N]], CompositionNode[N2]]
    ) -> "GraphComposition[N2, R]":
        """
        Replace every node by `f(node)` under its original id.

        Edges, root, composition type and metadata are kept; the invariant
        list is not, since its predicates may not apply to the new node type.
        `f` receives a copy of each node, so mutating its data in place leaves
        this graph untouched.
        """
        return type(self)(
            id=self.id,
            composition_root=self.composition_root,
            composition_type=self.composition_type,
            nodes={node_id: f(deepcopy(node)) for node_id, node in self.nodes.items()},
            edges=deepcopy(self.edges),
            metadata=deepcopy(self.metadata),
            config=self.config,
        )

    def fold(self, initial: T, f: Callable[[T, CompositionNode[N]], T]) -> T:
        return reduce(f, self.nodes.values(), initial)

    # -------------------- Integrity --------------------

    def dangling_edges(self) -> List[CompositionEdge[R]]:
        """Edges with at least one endpoint missing from the node map."""
        return [
            e for e in self.edges.values() if e.source not in self.nodes or e.target not in self.nodes
        ]

    def validate_endpoints(self) -> None:
        """
        Raises:
            NodeNotFound: for the first edge endpoint missing from the node map
        """
        for edge in self.edges.values():
            for endpoint in (edge.source, edge.target):
                if endpoint not in self.nodes:
                    raise NodeNotFound(endpoint)

    # -------------------- NetworkX interop --------------------

    def to_networkx(self) -> nx.MultiDiGraph:
        """
        Convert to a NetworkX MultiDiGraph keyed by NodeId / EdgeId.

        Scalar data and metadata entries are flattened into `data_*` and
        `meta_*` attributes so the result can be written as GraphML.
        """
        G = nx.MultiDiGraph()
        G.graph["id"] = str(self.id)
        G.graph["name"] = self.metadata.name
        G.graph["composition_root"] = str(self.composition_root)

        for node_id, node in self.nodes.items():
            attrs: Dict[str, Any] = {"label": node.label, "node_type": str(node.node_type)}
            if isinstance(node.data, dict):
                for k, v in node.data.items():
                    if isinstance(v, _GRAPHML_SCALARS):
                        attrs[f"data_{k}"] = v
            elif isinstance(node.data, _GRAPHML_SCALARS):
                attrs["data"] = node.data
            for k, v in node.metadata.items():
                if isinstance(v, _GRAPHML_SCALARS):
                    attrs[f"meta_{k}"] = v
            G.add_node(node_id, **attrs)

        for edge_id, edge in self.edges.items():
            G.add_edge(
                edge.source,
                edge.target,
                key=edge_id,
                relationship=str(edge.relationship.relationship_type),
                bidirectional=edge.relationship.bidirectional,
            )

        return G

    def export_graphml(self, filepath: str) -> None:
        nx.write_graphml(self.to_networkx(), filepath)

    def has_cycle(self) -> bool:
        return not nx.is_directed_acyclic_graph(self.to_networkx())

    def find_cycles(self) -> List[List[NodeId]]:
        """Elementary directed cycles, each as a list of node ids."""
        return [list(cycle) for cycle in nx.simple_cycles(nx.DiGraph(self.to_networkx()))]

    def topological_order(self) -> List[NodeId]:
        """
        Node ids ordered so that every edge points forward.

        Raises:
            CycleDetected: if the edges form a directed cycle
        """
        try:
            order = list(nx.topological_sort(self.to_networkx()))
        except nx.NetworkXUnfeasible:
            raise CycleDetected() from None
        return [node_id for node_id in order if node_id in self.nodes]
