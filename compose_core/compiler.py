"""
YAML compiler for graph compositions.

This module compiles a YAML description into a `GraphComposition` using only
the public construction and algebra calls.

YAML schema (minimal):

composite: Order          # or atomic / entity / aggregate
id: order-42              # required for entity / aggregate
data: {...}               # atomic only
description: Customer order
tags: [sales]
nodes:
  - label: customer
    type: entity_reference   # mapped via DomainNodeMapping
    data: {id: cust-7}
  - label: total
    type: value
    data: 99.5
edges:
  - source: root
    target: customer
    relationship: references # mapped via DomainRelationshipMapping
    bidirectional: true
then:                     # each entry is a nested description
  - composite: Fulfilment
parallel: [...]
choice: [...]

Notes:
- Nodes without a label are skipped.
- An empty root kind value (`composite:` with no name) names the root "Composition".
- Edges use label resolution, so unknown labels are dropped (or raise
  NodeNotFound when the config has strict_labels set).
- `then`, `parallel` and `choice` are applied in that order, each entry in
  list order, to the graph built so far.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import yaml

from .config import ComposeConfig
from .errors import InvalidComposition
from .graph import GraphComposition
from .mapping import DomainNodeMapping, DomainRelationshipMapping

logger = logging.getLogger(__name__)

_ROOT_KINDS = ("composite", "atomic", "entity", "aggregate")


def _root_from_spec(spec: Dict[str, Any], config: Optional[ComposeConfig]) -> GraphComposition:
    kinds = [k for k in _ROOT_KINDS if k in spec]
    if len(kinds) > 1:
        raise InvalidComposition(f"description names more than one root kind: {kinds}")
    kind = kinds[0] if kinds else "composite"
    type_name = str(spec.get(kind) or "Composition")

    if kind == "atomic":
        return GraphComposition.atomic(type_name, spec.get("data"), config=config)
    if kind in ("entity", "aggregate"):
        if "id" not in spec:
            raise InvalidComposition(f"{kind} {type_name!r} needs an id")
        return getattr(GraphComposition, kind)(type_name, spec["id"], config=config)
    return GraphComposition.composite(type_name, config=config)


def compile_from_dict(spec: Dict[str, Any], config: Optional[ComposeConfig] = None) -> GraphComposition:
    """
    Compile a YAML-parsed dictionary into a `GraphComposition`.

    Args:
        spec: Parsed YAML dictionary
        config: Construction policy for every graph built from the description

    Returns:
        GraphComposition: The compiled graph

    Raises:
        InvalidComposition: if the description is not a mapping or is ambiguous
    """
    if not isinstance(spec, dict):
        raise InvalidComposition(f"expected a mapping, got {type(spec).__name__}")

    g = _root_from_spec(spec, config)

    metadata = g.metadata
    if spec.get("description"):
        metadata = metadata.with_description(str(spec["description"]))
    for tag in spec.get("tags", []) or []:
        metadata = metadata.with_tag(str(tag))
    g = g.with_metadata(metadata)

    for node in spec.get("nodes", []) or []:
        label = node.get("label")
        if not label:
            # skip ill-formed entry
            logger.debug("Skipping node without label: %r", node)
            continue
        node_type = DomainNodeMapping.from_string(node.get("type", "value"))
        g = g.add_node(node_type, str(label), node.get("data"))

    for edge in spec.get("edges", []) or []:
        rel = DomainRelationshipMapping.from_string(edge.get("relationship", "contains"))
        g = g.add_edge_by_label(
            str(edge.get("source", "")),
            str(edge.get("target", "")),
            rel,
            bidirectional=bool(edge.get("bidirectional", False)),
        )

    for op in ("then", "parallel", "choice"):
        for sub in spec.get(op, []) or []:
            g = getattr(g, op)(compile_from_dict(sub, config))

    return g


def compile_from_yaml(yaml_text: str, config: Optional[ComposeConfig] = None) -> GraphComposition:
    """Compile from YAML text into a `GraphComposition`."""
    data = yaml.safe_load(yaml_text) or {}
    return compile_from_dict(data, config)


def compile_from_file(path: str, config: Optional[ComposeConfig] = None) -> GraphComposition:
    """Compile from a YAML file path into a `GraphComposition`."""
    with open(path, "r", encoding="utf-8") as f:
        txt = f.read()
    return compile_from_yaml(txt, config)
