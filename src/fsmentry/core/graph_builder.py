"""
Graph builder for fsmentry.

Folds a parsed statement list into a validated Graph: repeated node
declarations are merged, chain references create implicit nodes, and every
hop of every chain becomes a uniquely keyed edge with a method name.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from . import ir
from .errors import ValidationError, make_validation_error
from .strings import escape_identifier, snake_case, strip_raw, types_equal

logger = logging.getLogger(__name__)


def append_docs(existing: list[str], extra: list[str]) -> list[str]:
    """
    Concatenate two runs of documentation with a blank line between them.

    Examples:
        >>> append_docs([" a"], [" b"])
        [' a', '', ' b']
        >>> append_docs([], [" b"])
        [' b']
    """
    if not existing:
        return list(extra)
    if not extra:
        return list(existing)
    return [*existing, "", *extra]


def derive_method_name(destination: str, rename_methods: bool = True) -> str:
    """
    Method name for an unnamed transition into ``destination``.

    Examples:
        >>> derive_method_name("BeautifulBridge")
        'beautiful_bridge'
        >>> derive_method_name("BeautifulBridge", rename_methods=False)
        'BeautifulBridge'
        >>> derive_method_name("Type")
        'r#type'
    """
    name = snake_case(destination) if rename_methods else strip_raw(destination)
    return escape_identifier(name)


@dataclass
class GraphBuilder:
    """
    Accumulates nodes and edges, checking every merge as it goes.

    Nodes are keyed by name in a single map: the first reference creates the
    node and later compatible references merge into it.
    """

    rename_methods: bool = True
    file: Path | None = None
    text: str | None = None

    nodes: dict[str, ir.NodeData] = field(default_factory=dict)
    edges: dict[tuple[str, str], ir.EdgeData] = field(default_factory=dict)

    def error(self, message: str, span: ir.SourceSpan | None) -> ValidationError:
        return make_validation_error(message, span, self.file, self.text)

    def add_node(self, ref: ir.NodeRef) -> None:
        """Insert a node, or merge ``ref`` into the existing node of that name."""
        existing = self.nodes.get(ref.name)
        if existing is None:
            self.nodes[ref.name] = ir.NodeData(ty=ref.ty, doc=list(ref.doc), span=ref.span)
            return

        if existing.ty is not None and ref.ty is not None and not types_equal(existing.ty, ref.ty):
            raise self.error(
                f"Incompatible redefinition of `{ref.name}`: "
                f"`{ref.ty}` does not match the earlier `{existing.ty}`",
                ref.span,
            )

        self.nodes[ref.name] = existing.model_copy(
            update={
                "ty": existing.ty if existing.ty is not None else ref.ty,
                "doc": append_docs(existing.doc, ref.doc),
            }
        )

    def add_edge(self, source: str, target: str, arrow: ir.Arrow, doc: list[str]) -> None:
        """Insert the edge ``source -> target``, rejecting duplicates."""
        key = (source, target)
        if key in self.edges:
            raise self.error(f"Duplicate edge definition `{source} -> {target}`", arrow.span)

        if arrow.method_name is not None:
            method_name = escape_identifier(arrow.method_name)
        else:
            method_name = derive_method_name(target, self.rename_methods)

        self.edges[key] = ir.EdgeData(
            method_name=method_name,
            doc=append_docs(doc, arrow.doc),
            explicit=arrow.is_named,
            span=arrow.span,
        )

    def add_transition(self, statement: ir.TransitionStatement) -> None:
        """Insert the cross product of edges for every hop of a chain."""
        for sources, arrow, targets in statement.hops():
            for source in sources.names:
                for target in targets.names:
                    self.add_edge(source, target, arrow, statement.doc)

    def resolve_method_names(self) -> None:
        """
        Make method names unique among the edges leaving each node.

        A clash involving an explicitly named arrow is an error. Clashing
        derived names are numbered in destination order: the first keeps
        its name and the rest get ``_2``, ``_3`` and so on.
        """
        sources = sorted({source for source, _ in self.edges})
        for source in sources:
            keys = sorted(key for key in self.edges if key[0] == source)
            taken: dict[str, tuple[str, str]] = {}

            for key in keys:
                edge = self.edges[key]
                if not edge.explicit:
                    continue
                if edge.method_name in taken:
                    raise self.error(
                        f"Duplicate method name `{edge.method_name}` on `{source}`",
                        edge.span,
                    )
                taken[edge.method_name] = key

            derived_names = {self.edges[key].method_name for key in keys}
            for key in keys:
                edge = self.edges[key]
                if edge.explicit:
                    continue
                name = edge.method_name
                if name in taken:
                    if self.edges[taken[name]].explicit:
                        raise self.error(
                            f"Duplicate method name `{name}` on `{source}`: "
                            f"the transition to `{key[1]}` clashes with the named "
                            f"transition to `{taken[name][1]}`",
                            self.edges[taken[name]].span,
                        )
                    name = _numbered(name, taken, derived_names)
                    logger.debug(
                        "Renamed transition %s -> %s to %s to avoid a clash",
                        source,
                        key[1],
                        name,
                    )
                    self.edges[key] = edge.model_copy(update={"method_name": name})
                taken[name] = key

    def check_generated_type_names(
        self, reserved: Iterable[str], anchor: ir.SourceSpan | None = None
    ) -> None:
        """
        Nodes with outgoing edges become connector structs, which must not
        share a name with the state or entry enums.
        """
        connectors = {source for source, _ in self.edges}
        for name in reserved:
            if name in connectors:
                raise self.error(
                    f"Node name collides with generated type `{name}`",
                    self.nodes[name].span or anchor,
                )

    def build(self) -> ir.Graph:
        return ir.Graph(nodes=dict(self.nodes), edges=dict(self.edges))


def _numbered(name: str, taken: dict[str, tuple[str, str]], reserved: set[str]) -> str:
    base = strip_raw(name)
    n = 2
    while f"{base}_{n}" in taken or f"{base}_{n}" in reserved:
        n += 1
    return f"{base}_{n}"


def build_graph(
    statements: list[ir.Statement],
    rename_methods: bool = True,
    *,
    reserved_names: Iterable[str] = (),
    anchor: ir.SourceSpan | None = None,
    file: Path | None = None,
    text: str | None = None,
) -> ir.Graph:
    """
    Fold a statement list into a validated Graph.

    Args:
        statements: Node and transition statements, in source order
        rename_methods: Derive method names as snake_case of the destination
        reserved_names: Names of generated types that connectors may not use
        anchor: Location reported when the machine as a whole is invalid
        file: Source file path, for error messages
        text: Source text, for error snippets

    Returns:
        The validated Graph

    Raises:
        ValidationError: On incompatible redefinitions, duplicate edges,
            duplicate method names, generated type clashes, or no edges
    """
    builder = GraphBuilder(rename_methods=rename_methods, file=file, text=text)

    # Node statements first, wherever they appear
    for statement in statements:
        if isinstance(statement, ir.NodeStatement):
            builder.add_node(statement.node)

    transitions = [s for s in statements if isinstance(s, ir.TransitionStatement)]
    for transition in transitions:
        for ref in transition.node_refs():
            builder.add_node(ref)

    for transition in transitions:
        builder.add_transition(transition)

    if not builder.edges:
        raise builder.error("Must define at least one edge `A -> B`", anchor)

    builder.resolve_method_names()
    builder.check_generated_type_names(reserved_names, anchor)

    graph = builder.build()
    logger.debug("Built graph with %d node(s) and %d edge(s)", len(graph.nodes), len(graph.edges))
    return graph


def build_machine_graph(
    document: ir.MachineDocument,
    file: Path | None = None,
    text: str | None = None,
) -> ir.Graph:
    """Build the graph for a parsed machine, honouring its generator options."""
    config = document.config
    return build_graph(
        document.statements,
        config.rename_methods,
        reserved_names=(document.name, config.resolve_entry_name(document.name)),
        anchor=document.span,
        file=file,
        text=text,
    )
