"""
Compose Core Package.

This package contains the graph composition engine, which represents domain
concepts (entities, aggregates, pipelines, hierarchies) uniformly as typed
graphs, including:

- Identifier spaces (GraphId, NodeId, EdgeId, ...)
- Node/edge records and tag enumerations
- GraphComposition construction, queries and invariants
- Composition algebra (atomic, composite, then, parallel, choice, fmap)
- Structured serialization and a YAML compiler
"""

# Compose Core Package

__version__ = "0.3.0"

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
    NodeType,
    RelationshipType,
)
from .ids import AggregateId, BoundedContextId, EdgeId, EntityId, GraphId, NodeId
from .errors import (
    CompositionError,
    CycleDetected,
    FunctorError,
    IncompatibleTypes,
    InvalidComposition,
    InvariantViolation,
    MappingError,
    MonadError,
    MorphismError,
    NodeNotFound,
)
from .config import ComposeConfig
from .records import CompositionEdge, CompositionNode, Metadata, Relationship
from .invariants import InvariantSet
from .graph import GraphComposition
from .algebra import FunctionMorphism, GraphMorphism, NodeMapMorphism
from .mapping import DomainNodeMapping, DomainRelationshipMapping
from .domain import Composable, Decomposable, compose_knowledge_graph
from .serialization import from_json, graph_from_dict, graph_to_dict, to_json
from .compiler import compile_from_dict, compile_from_file, compile_from_yaml
