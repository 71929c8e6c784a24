"""
End-to-end pipeline: text in, generated Rust out.

Used by the CLI and by library callers that do not need the individual
stages.

Usage:
    from fsmentry.core.pipeline import InputLanguage, compile_machine

    machine = compile_machine(text, InputLanguage.DSL, file=path)
    print(machine.render())
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from ..codegen.diagram import Renderer, render_svg_docs
from ..codegen.generator import generate
from ..codegen.source import SourceUnit
from . import ir
from .dot_parser import parse_dot
from .dsl_parser_impl import parse_dsl
from .graph_builder import build_machine_graph

logger = logging.getLogger(__name__)


class InputLanguage(str, Enum):
    DSL = "dsl"
    DOT = "dot"


@dataclass(frozen=True)
class LoadedMachine:
    """A parsed machine and its validated graph."""

    document: ir.MachineDocument
    graph: ir.Graph


@dataclass(frozen=True)
class GeneratedMachine:
    """A loaded machine and the source generated for it."""

    document: ir.MachineDocument
    graph: ir.Graph
    source: SourceUnit

    def render(self) -> str:
        return self.source.render()


def parse_machine(
    text: str,
    language: InputLanguage = InputLanguage.DSL,
    file: Path | None = None,
) -> ir.MachineDocument:
    """Parse ``text`` with the front end for ``language``."""
    if language == InputLanguage.DOT:
        return parse_dot(text, file)
    return parse_dsl(text, file)


def apply_overrides(
    document: ir.MachineDocument,
    *,
    name: str | None = None,
    vis: str | None = None,
    config: dict[str, Any] | None = None,
) -> ir.MachineDocument:
    """
    Replace the machine name, visibility, or generator options.

    Args:
        document: Parsed machine
        name: New state enum name
        vis: New visibility
        config: GeneratorConfig fields to update

    Returns:
        Updated copy of the document
    """
    updates: dict[str, Any] = {}
    if name is not None:
        updates["name"] = name
    if vis is not None:
        updates["vis"] = vis
    if config:
        updates["config"] = document.config.model_copy(update=config)
    if not updates:
        return document
    logger.debug("Applying overrides: %s", sorted(updates))
    return document.model_copy(update=updates)


def load_machine(
    text: str,
    language: InputLanguage = InputLanguage.DSL,
    file: Path | None = None,
    *,
    name: str | None = None,
    vis: str | None = None,
    config: dict[str, Any] | None = None,
) -> LoadedMachine:
    """
    Parse and validate a machine.

    Raises:
        ParseError: If the text cannot be parsed
        ValidationError: If the statements do not form a valid graph
    """
    document = parse_machine(text, language, file)
    document = apply_overrides(document, name=name, vis=vis, config=config)
    graph = build_machine_graph(document, file=file, text=text)
    return LoadedMachine(document=document, graph=graph)


def compile_machine(
    text: str,
    language: InputLanguage = InputLanguage.DSL,
    file: Path | None = None,
    *,
    name: str | None = None,
    vis: str | None = None,
    config: dict[str, Any] | None = None,
    mermaid_renderer: Renderer | None = None,
    svg_renderer: Renderer | None = None,
) -> GeneratedMachine:
    """
    Parse, validate and generate code for a machine.

    Args:
        text: Input text
        language: Input language
        file: Source file path, used in error messages
        name: Override the state enum name
        vis: Override the visibility
        config: GeneratorConfig fields to override
        mermaid_renderer: Renderer for the mermaid diagram, when enabled
        svg_renderer: Renderer for an SVG diagram attached to the state enum

    Returns:
        GeneratedMachine with the document, graph and generated source

    Raises:
        ParseError: If the text cannot be parsed
        ValidationError: If the statements do not form a valid graph
        RenderError: If a strict svg_renderer fails
    """
    loaded = load_machine(text, language, file, name=name, vis=vis, config=config)
    source = generate(loaded.document, loaded.graph, mermaid_renderer)
    if svg_renderer is not None:
        source = source.with_docs(render_svg_docs(loaded.graph, loaded.document.name, svg_renderer))

    return GeneratedMachine(document=loaded.document, graph=loaded.graph, source=source)
