"""
Topology classification for fsmentry graphs.

Each node's role is a pure function of the edge set:

- ISOLATE: no edges
- SOURCE: outgoing edges only
- SINK: incoming edges only
- NON_TERMINAL: both

Nothing is cached; every query scans the graph.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from . import ir


class TopologyKind(str, Enum):
    ISOLATE = "isolate"
    SOURCE = "source"
    SINK = "sink"
    NON_TERMINAL = "non_terminal"


class Neighbor(NamedTuple):
    """The other end of an edge, with its data."""

    node_id: str
    node: ir.NodeData
    edge: ir.EdgeData


@dataclass(frozen=True)
class Topology:
    kind: TopologyKind
    incoming: tuple[Neighbor, ...] = ()
    outgoing: tuple[Neighbor, ...] = ()

    @property
    def has_connector(self) -> bool:
        """Sources and non-terminals get a connector struct."""
        return self.kind in (TopologyKind.SOURCE, TopologyKind.NON_TERMINAL)


def incoming(graph: ir.Graph, node_id: str) -> list[Neighbor]:
    """Edges ending at ``node_id``, ordered by source."""
    return [
        Neighbor(source, graph.nodes[source], edge)
        for (source, target), edge in graph.sorted_edges()
        if target == node_id
    ]


def outgoing(graph: ir.Graph, node_id: str) -> list[Neighbor]:
    """Edges leaving ``node_id``, ordered by destination."""
    return [
        Neighbor(target, graph.nodes[target], edge)
        for (source, target), edge in graph.sorted_edges()
        if source == node_id
    ]


def classify(graph: ir.Graph, node_id: str) -> Topology:
    """
    Classify a node by its incoming and outgoing edges.

    Raises:
        KeyError: If the node is not in the graph
    """
    if node_id not in graph.nodes:
        raise KeyError(node_id)

    into = tuple(incoming(graph, node_id))
    out = tuple(outgoing(graph, node_id))
    if into and out:
        kind = TopologyKind.NON_TERMINAL
    elif out:
        kind = TopologyKind.SOURCE
    elif into:
        kind = TopologyKind.SINK
    else:
        kind = TopologyKind.ISOLATE
    return Topology(kind=kind, incoming=into, outgoing=out)


def classify_all(graph: ir.Graph) -> Iterator[tuple[str, ir.NodeData, Topology]]:
    """Yield every node with its classification, in sorted order."""
    for node_id, node in graph.sorted_nodes():
        yield node_id, node, classify(graph, node_id)
