"""
DOT front end for fsmentry.

Reads a plain Graphviz digraph with pydot and maps it onto the same
statement list as the DSL:

    digraph TrafficLight {
        Red -> RedAmber -> Green -> Amber -> Red;
        Broken;
    }

Only node names and edges are meaningful. Attributes, ports, subgraphs
and undirected graphs are rejected as unsupported.
"""

import logging
from pathlib import Path
from typing import Any

import pydot
import pyparsing

from . import ir
from .errors import ParseError, make_parse_error
from .strings import is_identifier, node_identifier

logger = logging.getLogger(__name__)

DEFAULT_STATEMENT_NAMES = ("node", "edge", "graph")


def parse_dot(text: str, file: Path | None = None, default_name: str = "State") -> ir.MachineDocument:
    """
    Parse DOT text into a MachineDocument.

    Args:
        text: DOT source text
        file: Source file path, used in error messages
        default_name: Machine name for an anonymous digraph

    Returns:
        MachineDocument with one node statement per DOT node and one
        transition statement per DOT edge

    Raises:
        ParseError: If the text is not a supported digraph
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except pyparsing.ParseBaseException as e:
        raise make_parse_error(f"Invalid DOT: {e.msg}", file, e.lineno, e.col) from e

    if not graphs:
        raise _error("No graph found in DOT input", file)
    if len(graphs) > 1:
        raise _error("Expected exactly one digraph, found several", file)

    graph = graphs[0]
    if graph.get_type() != "digraph":
        raise _error("Only `digraph` is supported", file)
    if graph.get_subgraphs():
        raise _error("Subgraphs are not supported", file)
    if graph.get_attributes():
        raise _error("Graph attributes are not supported", file)

    name = _clean_name(graph.get_name(), file) if graph.get_name() else default_name

    statements: list[ir.Statement] = []
    for node in graph.get_nodes():
        node_name = _clean_name(node.get_name(), file)
        if node_name in DEFAULT_STATEMENT_NAMES:
            raise _error(f"Default `{node_name}` statements are not supported", file)
        if node.get_attributes():
            raise _error(f"Attributes on node `{node_name}` are not supported", file)
        statements.append(ir.NodeStatement(node=ir.NodeRef(name=node_name)))

    for edge in graph.get_edges():
        source = _clean_endpoint(edge.get_source(), file)
        target = _clean_endpoint(edge.get_destination(), file)
        if edge.get_attributes():
            raise _error(f"Attributes on edge `{source} -> {target}` are not supported", file)
        statements.append(
            ir.TransitionStatement(
                first=ir.NodeGroup(members=[ir.NodeRef(name=source)]),
                rest=[(ir.Arrow(), ir.NodeGroup(members=[ir.NodeRef(name=target)]))],
            )
        )

    logger.debug("Parsed DOT digraph %s with %d statement(s)", name, len(statements))
    return ir.MachineDocument(name=name, statements=statements)


def _error(message: str, file: Path | None) -> ParseError:
    if file is None:
        return ParseError(message)
    return ParseError(f"{file}: {message}")


def _clean_endpoint(endpoint: Any, file: Path | None) -> str:
    """Edge endpoints are names; pydot represents `{a b}` endpoints as mappings."""
    if not isinstance(endpoint, str):
        raise _error("Subgraph edge endpoints are not supported", file)
    return _clean_name(endpoint, file)


def _clean_name(raw: str, file: Path | None) -> str:
    """
    Unquote a DOT id and check that it is a plain identifier.

    Examples:
        >>> _clean_name('"Start"', None)
        'Start'
    """
    name = raw
    if len(name) >= 2 and name.startswith('"') and name.endswith('"'):
        name = name[1:-1]
    if ":" in name:
        raise _error(f"Ports are not supported: `{raw}`", file)
    if not is_identifier(name):
        raise _error(f"Node names must be identifiers: `{raw}`", file)
    try:
        return node_identifier(name)
    except ValueError as e:
        raise _error(str(e), file) from e
