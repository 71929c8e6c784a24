"""Core fsmentry functionality: lexer, parsers, IR, graph building and topology."""

from . import ir
from .errors import (
    ErrorContext,
    FsmEntryError,
    ParseError,
    RenderError,
    ValidationError,
)

__all__ = [
    "ir",
    "ErrorContext",
    "FsmEntryError",
    "ParseError",
    "RenderError",
    "ValidationError",
]
