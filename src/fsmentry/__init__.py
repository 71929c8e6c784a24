"""
fsmentry - typestate state machine code generator.

Reads a small state machine DSL (or a Graphviz digraph) and generates a
Rust "entry API": a state enum, an entry enum, and connector types whose
transition methods make illegal transitions unrepresentable.
"""

from __future__ import annotations

from ._version import get_version
from .codegen.diagram import (
    CallableRenderer,
    GraphvizRenderer,
    MermaidRenderer,
    NullRenderer,
    OptionalRenderer,
    Renderer,
)
from .codegen.generator import generate
from .codegen.source import SourceItem, SourceUnit

# Re-export commonly used types for convenience
from .core import ir
from .core.dot_parser import parse_dot
from .core.dsl_parser_impl import parse_dsl
from .core.errors import FsmEntryError, ParseError, RenderError, ValidationError
from .core.graph_builder import build_graph, build_machine_graph
from .core.ir import GeneratorConfig, Trust
from .core.pipeline import InputLanguage, compile_machine, load_machine
from .core.topology import TopologyKind, classify

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    # Errors
    "FsmEntryError",
    "ParseError",
    "RenderError",
    "ValidationError",
    # Front ends
    "parse_dsl",
    "parse_dot",
    # Graph
    "build_graph",
    "build_machine_graph",
    "classify",
    "TopologyKind",
    # Generation
    "GeneratorConfig",
    "Trust",
    "generate",
    "SourceItem",
    "SourceUnit",
    # Pipeline
    "InputLanguage",
    "compile_machine",
    "load_machine",
    # Renderers
    "Renderer",
    "NullRenderer",
    "OptionalRenderer",
    "CallableRenderer",
    "MermaidRenderer",
    "GraphvizRenderer",
]
