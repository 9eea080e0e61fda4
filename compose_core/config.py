"""
Configuration objects for graph compositions.

Exposes the policies that decide how strictly construction calls treat
unresolved labels and dangling edge endpoints. Defaults keep the permissive
behaviour: unresolved labels are a silent no-op and edges are never checked.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class ComposeConfig:
    """
    Configuration carried by a `GraphComposition` and inherited by every graph
    derived from it. Not part of equality or serialization.
    """

    # Label that always resolves to the composition root in label lookups
    root_label: str = "root"

    # Raise NodeNotFound from add_edge_by_label instead of returning the graph unchanged
    strict_labels: bool = False

    # Raise NodeNotFound from add_edge when an endpoint is not in the node map
    validate_endpoints: bool = False
