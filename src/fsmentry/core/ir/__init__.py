"""
fsmentry Intermediate Representation (IR) types.

This package contains all IR type definitions for the fsmentry DSL.
Types are organized into logical submodules and re-exported here.
"""

# Generator configuration
from .config import (
    GeneratorConfig,
    Trust,
)

# Graph
from .graph import (
    EdgeData,
    Graph,
    NodeData,
)

# Statements
from .statements import (
    Arrow,
    ArrowKind,
    MachineDocument,
    NodeGroup,
    NodeRef,
    NodeStatement,
    SourceSpan,
    Statement,
    TransitionStatement,
)

__all__ = [
    # Config
    "GeneratorConfig",
    "Trust",
    # Graph
    "EdgeData",
    "Graph",
    "NodeData",
    # Statements
    "Arrow",
    "ArrowKind",
    "MachineDocument",
    "NodeGroup",
    "NodeRef",
    "NodeStatement",
    "SourceSpan",
    "Statement",
    "TransitionStatement",
]
