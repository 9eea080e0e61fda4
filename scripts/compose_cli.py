#!/usr/bin/env python3
"""
Compose CLI

Usage modes:
- Default run: compile YAML, print a summary of the resulting graph
- Validation: check dangling edges and cycles, print findings
- Export: write the graph as JSON or GraphML
- Utility: show version
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Dict, List

from compose_core import ComposeConfig, CompositionError, __version__  # type: ignore
from compose_core.compiler import compile_from_file  # type: ignore
from compose_core.graph import GraphComposition  # type: ignore
from compose_core.serialization import to_json  # type: ignore


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Compile a YAML composition and summarise or export it",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Utilities / meta
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")

    # Primary input
    p.add_argument("yaml", nargs="?", help="Path to YAML composition (e.g., order.yaml)")

    # Construction policy
    p.add_argument("--strict-labels", action="store_true", help="Fail on edges that name unknown labels")
    p.add_argument("--validate-endpoints", action="store_true", help="Fail on edges whose endpoints are missing")

    # Analysis / export
    p.add_argument("--validate", action="store_true", help="Report dangling edges and cycles")
    p.add_argument("--out", type=str, default="", help="Write the serialized graph as JSON to this path")
    p.add_argument("--export-graphml", type=str, default="", help="Export compiled graph to GraphML at given path")

    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> ComposeConfig:
    cfg = ComposeConfig()
    cfg.strict_labels = args.strict_labels
    cfg.validate_endpoints = args.validate_endpoints
    return cfg


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


def summarize(g: GraphComposition) -> Dict[str, Any]:
    return {
        "id": str(g.id),
        "name": g.metadata.name,
        "composition_type": str(g.composition_type),
        "nodes": g.node_count(),
        "edges": g.edge_count(),
        "leaves": sorted(g.nodes[n].label for n in g.find_leaves()),
        "roots": sorted(g.nodes[n].label for n in g.find_roots()),
    }


def validate(g: GraphComposition) -> Dict[str, Any]:
    return {
        "dangling_edges": [str(e.id) for e in g.dangling_edges()],
        "cycles": [[str(n) for n in cycle] for cycle in g.find_cycles()],
    }


def main(argv: List[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    if args.version:
        print(__version__)
        return 0

    if not args.yaml:
        print("error: missing YAML path", file=sys.stderr)
        return 2

    logging.info("Compiling composition from %s", args.yaml)
    try:
        g = compile_from_file(args.yaml, build_config(args))
    except CompositionError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.validate:
        findings = validate(g)
        logging.info(
            "Validation: %d dangling edges, %d cycles",
            len(findings["dangling_edges"]),
            len(findings["cycles"]),
        )
        print(json.dumps(findings, indent=2))
        # Non-zero exit on dangling edges
        return 1 if findings["dangling_edges"] else 0

    if args.export_graphml:
        logging.info("Exporting GraphML to %s", args.export_graphml)
        g.export_graphml(args.export_graphml)

    if args.out:
        logging.info("Writing JSON to %s", args.out)
        with open(args.out, "w", encoding="utf-8") as f:
            f.write(to_json(g, indent=2))

    print(json.dumps(summarize(g), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
