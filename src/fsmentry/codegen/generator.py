"""
Rust code generator for fsmentry.

Emits the typestate "entry API" for a validated graph:

- the state enum, one variant per node
- the entry enum, whose variants wrap either nothing, a reference to the
  payload, or a connector struct
- `From<&mut State>` for the entry enum and `State::entry`
- one connector struct per node with outgoing edges, holding the only
  reference to the whole state
- accessors and `AsRef`/`AsMut` for connectors with payloads
- one transition method per edge, consuming the connector

The shape of every item is decided by the node's topology and whether it
carries a payload. Output is ordered by node name, then destination name,
so identical input always produces identical text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core import ir
from ..core.graph_builder import build_machine_graph
from ..core.rust_syntax import (
    ENTRY_LIFETIME,
    generic_params,
    impl_generics,
    type_generics,
    where_clause,
    with_lifetime,
)
from ..core.strings import snake_case
from ..core.topology import Neighbor, Topology, classify_all
from .diagram import MermaidRenderer, Renderer, mermaid_text
from .source import SourceItem, SourceUnit, doc_lines

logger = logging.getLogger(__name__)

PANIC_MESSAGE = "entry struct was instantiated with a mismatched state"
NEEDLESS_LIFETIMES = "#[allow(clippy::needless_lifetimes)]"

LT = ENTRY_LIFETIME


def _vis(vis: str) -> str:
    return f"{vis} " if vis else ""


@dataclass(frozen=True)
class _Context:
    """Names and generics shared by every generated item."""

    state: str
    state_vis: str
    state_generics: str
    entry: str
    entry_vis: str
    core: str
    trust: ir.Trust
    params: tuple[str, ...]
    predicates: tuple[str, ...]

    @classmethod
    def from_document(cls, document: ir.MachineDocument) -> _Context:
        config = document.config
        return cls(
            state=document.name,
            state_vis=document.vis,
            state_generics=document.generics,
            entry=config.resolve_entry_name(document.name),
            entry_vis=config.resolve_entry_vis(document.vis),
            core=config.path_to_core,
            trust=config.trust,
            params=tuple(generic_params(document.generics)),
            predicates=tuple(document.where_predicates),
        )

    @property
    def entry_params(self) -> list[str]:
        return with_lifetime(LT, list(self.params))

    @property
    def state_type(self) -> str:
        return f"{self.state}{type_generics(list(self.params))}"

    @property
    def entry_type(self) -> str:
        return f"{self.entry}{type_generics(self.entry_params)}"

    def connector_type(self, node_id: str) -> str:
        return f"{node_id}{type_generics(self.entry_params)}"

    @property
    def panic(self) -> str:
        if self.trust == ir.Trust.TRUSTED:
            return f"unsafe {{ {self.core}::hint::unreachable_unchecked() }}"
        return f'{self.core}::panic!("{PANIC_MESSAGE}")'

    def open(self, header: str) -> str:
        """``header {``, with the where clause between them when there is one."""
        where = where_clause(list(self.predicates))
        if not where:
            return f"{header} {{"
        return f"{header}{where}\n{{"

    def open_entry_impl(self, target: str) -> str:
        return self.open(f"impl{impl_generics(self.entry_params)} {target}")


# =============================================================================
# Documentation
# =============================================================================


def reachability_docs(ctx: _Context, node_id: str, topology: Topology) -> list[str]:
    """Docs for an entry variant: what it represents and how it is reached."""
    docs = [f" Represents [`{ctx.state}::{node_id}`]"]
    if topology.incoming:
        docs.extend(["", " This state is reachable from the following:"])
        for other, _, edge in topology.incoming:
            docs.append(
                f" - [`{other}`]({ctx.state}::{other}) via [`{edge.method_name}`]({other}::{edge.method_name})"
            )
    if topology.outgoing:
        docs.extend(["", " This state can transition to the following:"])
        for other, _, edge in topology.outgoing:
            docs.append(
                f" - [`{other}`]({ctx.state}::{other}) via [`{edge.method_name}`]({node_id}::{edge.method_name})"
            )
    return docs


def accessor_names(node_id: str, topology: Topology) -> tuple[str, str]:
    """
    Names for a connector's payload accessors.

    ``get`` and ``get_mut`` unless a transition already uses one of them,
    then ``get_<node>`` and ``get_<node>_mut``, padded with underscores
    until both are free.
    """
    taken = {neighbor.edge.method_name for neighbor in topology.outgoing}
    stem = "get"
    if stem in taken or f"{stem}_mut" in taken:
        stem = f"get_{snake_case(node_id)}"
    while stem in taken or f"{stem}_mut" in taken:
        stem = f"{stem}_"
    return stem, f"{stem}_mut"


# =============================================================================
# Items
# =============================================================================


def _state_enum(ctx: _Context, document: ir.MachineDocument, graph: ir.Graph) -> SourceItem:
    lines = [ctx.open(f"{_vis(ctx.state_vis)}enum {ctx.state}{ctx.state_generics}")]
    for node_id, node in graph.sorted_nodes():
        lines.extend(doc_lines(node.doc, "    "))
        if node.has_payload:
            lines.append(f"    {node_id}({node.ty}),")
        else:
            lines.append(f"    {node_id},")
    lines.append("}")
    return SourceItem(
        body="\n".join(lines),
        doc=tuple(document.doc),
        attrs=tuple(document.attrs),
    )


def _entry_enum(
    ctx: _Context,
    classified: list[tuple[str, ir.NodeData, Topology]],
    docs: list[str],
) -> SourceItem:
    header = f"{_vis(ctx.entry_vis)}enum {ctx.entry}{impl_generics(ctx.entry_params)}"
    lines = [ctx.open(header)]
    for node_id, node, topology in classified:
        lines.extend(doc_lines(reachability_docs(ctx, node_id, topology), "    "))
        if topology.has_connector:
            lines.append(f"    {node_id}({ctx.connector_type(node_id)}),")
        elif node.has_payload:
            lines.append(f"    {node_id}(&{LT} mut {node.ty}),")
        else:
            lines.append(f"    {node_id},")
    lines.append("}")
    return SourceItem(body="\n".join(lines), doc=tuple(docs))


def _from_arm(ctx: _Context, node_id: str, node: ir.NodeData, topology: Topology) -> str:
    if topology.has_connector:
        pattern = f"{ctx.state}::{node_id}(_)" if node.has_payload else f"{ctx.state}::{node_id}"
        return f"{pattern} => {ctx.entry}::{node_id}({node_id}(value)),"
    if node.has_payload:
        return f"{ctx.state}::{node_id}(it) => {ctx.entry}::{node_id}(it),"
    return f"{ctx.state}::{node_id} => {ctx.entry}::{node_id},"


def _from_impl(ctx: _Context, classified: list[tuple[str, ir.NodeData, Topology]]) -> SourceItem:
    reference = f"&{LT} mut {ctx.state_type}"
    lines = [
        ctx.open_entry_impl(f"{ctx.core}::convert::From<{reference}> for {ctx.entry_type}"),
        f"    fn from(value: {reference}) -> Self {{",
        "        match value {",
    ]
    for node_id, node, topology in classified:
        lines.append(f"            {_from_arm(ctx, node_id, node, topology)}")
    lines.extend(["        }", "    }", "}"])
    return SourceItem(body="\n".join(lines))


def _entry_method(ctx: _Context) -> SourceItem:
    lines = [
        ctx.open(f"impl{impl_generics(list(ctx.params))} {ctx.state_type}"),
        f"    {NEEDLESS_LIFETIMES}",
        f"    {_vis(ctx.entry_vis)}fn entry<{LT}>(&{LT} mut self) -> {ctx.entry_type} {{",
        "        self.into()",
        "    }",
        "}",
    ]
    return SourceItem(body="\n".join(lines))


def _connector_struct(ctx: _Context, node_id: str) -> SourceItem:
    where = where_clause(list(ctx.predicates))
    lines = [
        f"{_vis(ctx.entry_vis)}struct {node_id}{impl_generics(ctx.entry_params)}(",
        f"    /// MUST match [`{ctx.entry}::{node_id}`]",
        f"    &{LT} mut {ctx.state_type},",
        # A tuple struct's where clause comes after the fields
        f"){where.rstrip(',')};",
    ]
    return SourceItem(
        body="\n".join(lines),
        doc=(f" See [`{ctx.entry}::{node_id}`]",),
    )


def _payload_match(ctx: _Context, node_id: str, scrutinee: str, indent: str) -> list[str]:
    return [
        f"{indent}match {scrutinee} {{",
        f"{indent}    {ctx.state}::{node_id}(it) => it,",
        f"{indent}    _ => {ctx.panic},",
        f"{indent}}}",
    ]


def _accessors(ctx: _Context, node_id: str, node: ir.NodeData, topology: Topology) -> list[SourceItem]:
    """Inherent getters plus `AsRef` and `AsMut` for a connector with a payload."""
    get, get_mut = accessor_names(node_id, topology)
    connector = ctx.connector_type(node_id)

    inherent = [
        ctx.open_entry_impl(connector),
        f"    /// Borrow the data stored in [`{ctx.state}::{node_id}`]",
        f"    pub fn {get}(&self) -> &{node.ty} {{",
        *_payload_match(ctx, node_id, "&self.0", "        "),
        "    }",
        f"    /// Mutably borrow the data stored in [`{ctx.state}::{node_id}`]",
        f"    pub fn {get_mut}(&mut self) -> &mut {node.ty} {{",
        *_payload_match(ctx, node_id, "&mut self.0", "        "),
        "    }",
        "}",
    ]
    as_ref = [
        ctx.open_entry_impl(f"{ctx.core}::convert::AsRef<{node.ty}> for {connector}"),
        f"    fn as_ref(&self) -> &{node.ty} {{",
        *_payload_match(ctx, node_id, "&self.0", "        "),
        "    }",
        "}",
    ]
    as_mut = [
        ctx.open_entry_impl(f"{ctx.core}::convert::AsMut<{node.ty}> for {connector}"),
        f"    fn as_mut(&mut self) -> &mut {node.ty} {{",
        *_payload_match(ctx, node_id, "&mut self.0", "        "),
        "    }",
        "}",
    ]
    return [
        SourceItem(body="\n".join(lines), attrs=(NEEDLESS_LIFETIMES,))
        for lines in (inherent, as_ref, as_mut)
    ]


def _transition(ctx: _Context, node_id: str, node: ir.NodeData, neighbor: Neighbor) -> SourceItem:
    """
    One transition method, in one of four shapes.

    The destination's payload, if any, is taken as ``next``; the source's
    payload, if any, is moved out and returned.
    """
    target, target_node, edge = neighbor

    params = f"self, next: {target_node.ty}" if target_node.has_payload else "self"
    returns = f" -> {node.ty}" if node.has_payload else ""
    replacement = (
        f"{ctx.state}::{target}(next)" if target_node.has_payload else f"{ctx.state}::{target}"
    )
    expected = (
        f"{ctx.state}::{node_id}(it) => it," if node.has_payload else f"{ctx.state}::{node_id} => {{}}"
    )

    docs = list(edge.doc)
    if docs:
        docs.append("")
    docs.append(f" Transition to [`{ctx.state}::{target}`]")

    lines = [
        ctx.open_entry_impl(ctx.connector_type(node_id)),
        *doc_lines(docs, "    "),
        f"    pub fn {edge.method_name}({params}){returns} {{",
        f"        match {ctx.core}::mem::replace(self.0, {replacement}) {{",
        f"            {expected}",
        f"            _ => {ctx.panic},",
        "        }",
        "    }",
        "}",
    ]
    return SourceItem(body="\n".join(lines), attrs=(NEEDLESS_LIFETIMES,))


# =============================================================================
# Entry point
# =============================================================================


def generate(
    document: ir.MachineDocument,
    graph: ir.Graph | None = None,
    renderer: Renderer | None = None,
) -> SourceUnit:
    """
    Generate the Rust entry API for a machine.

    Args:
        document: Parsed machine, supplying names, generics and options
        graph: Validated graph; built from ``document`` when omitted
        renderer: Renderer for the mermaid diagram, used when the machine
            enables ``mermaid``; defaults to MermaidRenderer

    Returns:
        SourceUnit with every generated item, in a fixed order

    Raises:
        ValidationError: If ``graph`` is omitted and the document is invalid
    """
    if graph is None:
        graph = build_machine_graph(document)

    ctx = _Context.from_document(document)
    classified = list(classify_all(graph))

    entry_docs = [
        f" Progress through variants of [`{ctx.state}`], "
        f"created by its [`entry`]({ctx.state}::entry) method."
    ]
    if document.config.mermaid:
        rendered = (renderer or MermaidRenderer()).render(mermaid_text(graph))
        if rendered is not None:
            entry_docs.extend(["", rendered])

    items = [
        _state_enum(ctx, document, graph),
        _entry_enum(ctx, classified, entry_docs),
        _from_impl(ctx, classified),
        _entry_method(ctx),
    ]

    connectors = [(node_id, node, topology) for node_id, node, topology in classified if topology.has_connector]
    items.extend(_connector_struct(ctx, node_id) for node_id, _, _ in connectors)
    for node_id, node, topology in connectors:
        if node.has_payload:
            items.extend(_accessors(ctx, node_id, node, topology))
    for node_id, node, topology in connectors:
        items.extend(_transition(ctx, node_id, node, neighbor) for neighbor in topology.outgoing)

    logger.debug("Generated %d item(s) for %s", len(items), ctx.state)
    return SourceUnit(items=tuple(items))


__all__ = ["PANIC_MESSAGE", "accessor_names", "generate", "reachability_docs"]
