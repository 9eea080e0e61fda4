"""
Tests Package.

This package contains test suites for the graph composition engine, including
unit tests for identifiers, records, graph construction and queries, the
composition algebra, serialization, the YAML compiler and the CLI.
"""

# Tests Package
