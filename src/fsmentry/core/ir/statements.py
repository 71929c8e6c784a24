"""
Statement types for fsmentry IR.

This module contains the parser output: node declarations, transition
chains, and the machine document that wraps them.

Example DSL:
    /// A traffic light
    pub TrafficLight {
        /// Waiting for the lights to change
        Red;
        Amber: Duration;

        Red -> Green -"slow down"-> Amber -stop-> Red;
    }
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .config import GeneratorConfig


class SourceSpan(BaseModel):
    """
    Location of a construct in the DSL source.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        length: Width of the construct, in characters
    """

    line: int
    column: int
    length: int = 1

    model_config = ConfigDict(frozen=True)


class NodeRef(BaseModel):
    """
    A reference to a node, either in a node statement or in a transition chain.

    Attributes:
        name: Node name, used verbatim as the enum variant name
        ty: Optional payload type, normalised Rust type text
        doc: Documentation fragments attached to the node
        span: Location of the node name
    """

    name: str
    ty: str | None = None
    doc: list[str] = Field(default_factory=list)
    span: SourceSpan | None = None

    model_config = ConfigDict(frozen=True)


class NodeStatement(BaseModel):
    """A node declaration: ``/// doc`` ``Name: Type;``."""

    node: NodeRef

    model_config = ConfigDict(frozen=True)


class NodeGroup(BaseModel):
    """
    One or more nodes joined by ``&`` at a single position of a chain.

    A transition into a group is a transition into each member.
    """

    members: list[NodeRef]

    model_config = ConfigDict(frozen=True)

    @property
    def is_group(self) -> bool:
        return len(self.members) > 1

    @property
    def names(self) -> list[str]:
        return [member.name for member in self.members]


class ArrowKind(str, Enum):
    """Spelling of an arrow in a transition chain."""

    PLAIN = "plain"  # ->
    LONG = "long"  # -->
    DOCUMENTED = "documented"  # -"docs"->
    NAMED = "named"  # -method_name->


class Arrow(BaseModel):
    """
    An arrow between two positions of a transition chain.

    Attributes:
        kind: Arrow spelling (plain and long arrows are equivalent)
        method_name: Explicit transition method name, for named arrows
        doc: Inline documentation carried by the arrow
        span: Location of the arrow
    """

    kind: ArrowKind = ArrowKind.PLAIN
    method_name: str | None = None
    doc: list[str] = Field(default_factory=list)
    span: SourceSpan | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_named(self) -> bool:
        return self.method_name is not None


class TransitionStatement(BaseModel):
    """
    A chain of transitions: ``/// doc`` ``A -> B -"doc"-> C;``.

    Attributes:
        doc: Documentation shared by every edge of the chain
        first: The first position of the chain
        rest: Arrow and destination for every following position
    """

    doc: list[str] = Field(default_factory=list)
    first: NodeGroup
    rest: list[tuple[Arrow, NodeGroup]] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def groups(self) -> list[NodeGroup]:
        """All positions of the chain, in order."""
        return [self.first] + [group for _, group in self.rest]

    def node_refs(self) -> list[NodeRef]:
        """Every node reference appearing in the chain, in order."""
        return [member for group in self.groups() for member in group.members]

    def hops(self) -> list[tuple[NodeGroup, Arrow, NodeGroup]]:
        """Consecutive (source, arrow, destination) triples."""
        hops = []
        previous = self.first
        for arrow, group in self.rest:
            hops.append((previous, arrow, group))
            previous = group
        return hops


Statement = NodeStatement | TransitionStatement


class MachineDocument(BaseModel):
    """
    Complete parser output for one state machine.

    Attributes:
        name: Name of the generated state enum
        vis: Rust visibility of the state enum ("" for private)
        doc: Documentation for the state enum
        attrs: Other outer attributes, copied verbatim (e.g. ``#[derive(Debug)]``)
        generics: Generic parameter list including brackets, or ""
        where_predicates: Where clause predicates, without the ``where`` keyword
        config: Generator options from ``#[fsmentry(...)]``
        statements: Node and transition statements, in source order
        span: Location of the machine name
    """

    name: str = "State"
    vis: str = "pub"
    doc: list[str] = Field(default_factory=list)
    attrs: list[str] = Field(default_factory=list)
    generics: str = ""
    where_predicates: list[str] = Field(default_factory=list)
    config: GeneratorConfig = Field(default_factory=GeneratorConfig)
    statements: list[Statement] = Field(default_factory=list)
    span: SourceSpan | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def node_statements(self) -> list[NodeStatement]:
        return [s for s in self.statements if isinstance(s, NodeStatement)]

    @property
    def transition_statements(self) -> list[TransitionStatement]:
        return [s for s in self.statements if isinstance(s, TransitionStatement)]
