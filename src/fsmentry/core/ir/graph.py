"""
Graph types for fsmentry IR.

A Graph is folded from the statement list by the graph builder and is
read-only afterwards. Node ids are plain names; iteration is always in
sorted order so generated output is stable across runs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .statements import SourceSpan


class NodeData(BaseModel):
    """
    Data associated with a node.

    Attributes:
        ty: Payload type stored in the state variant, if any
        doc: Documentation fragments ("" separates merged declarations)
        span: Location of the first declaration
    """

    ty: str | None = None
    doc: list[str] = Field(default_factory=list)
    span: SourceSpan | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def has_payload(self) -> bool:
        return self.ty is not None


class EdgeData(BaseModel):
    """
    Data associated with a directed edge.

    Attributes:
        method_name: Name of the generated transition method
        doc: Documentation fragments for the transition method
        explicit: Whether the name came from a ``-name->`` arrow
        span: Location of the arrow that declared the edge
    """

    method_name: str
    doc: list[str] = Field(default_factory=list)
    explicit: bool = False
    span: SourceSpan | None = None

    model_config = ConfigDict(frozen=True)


class Graph(BaseModel):
    """
    A validated state graph.

    Attributes:
        nodes: All nodes by name; every node referenced by an edge is here
        edges: Directed edges keyed by (from, to); at most one per pair
    """

    nodes: dict[str, NodeData] = Field(default_factory=dict)
    edges: dict[tuple[str, str], EdgeData] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    def node_ids(self) -> list[str]:
        return sorted(self.nodes)

    def edge_keys(self) -> list[tuple[str, str]]:
        return sorted(self.edges)

    def sorted_nodes(self) -> list[tuple[str, NodeData]]:
        return [(node_id, self.nodes[node_id]) for node_id in self.node_ids()]

    def sorted_edges(self) -> list[tuple[tuple[str, str], EdgeData]]:
        return [(key, self.edges[key]) for key in self.edge_keys()]
