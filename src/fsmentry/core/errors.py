"""
Error types for fsmentry DSL parsing, graph validation, and diagram rendering.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .ir import SourceSpan


class FsmEntryError(Exception):
    """Base exception for all fsmentry errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(FsmEntryError):
    """
    Raised when DSL or DOT text cannot be parsed.

    Examples:
    - Unexpected characters or tokens
    - Unterminated strings and comments
    - Named transitions into a group of nodes
    - Unknown or repeated generator options
    """

    pass


class ValidationError(FsmEntryError):
    """
    Raised when a parsed machine does not form a valid graph.

    Examples:
    - Incompatible redefinition of a node's payload type
    - Duplicate edge between the same two nodes
    - Duplicate transition method names
    - A machine without any edges
    """

    pass


class RenderError(FsmEntryError):
    """
    Raised when a strict diagram renderer fails.

    Examples:
    - The `dot` executable is not installed
    - `dot` exits with a non-zero status
    """

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred (None for stdin/strings)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        length: Width of the offending span, in characters
        snippet: Optional source lines around the error location
    """

    file: Path | None
    line: int
    column: int
    length: int = 1
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "machine.fsm:10:5"
        """
        location = f"{self.file or '<input>'}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippets start at most 2 lines before the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^" * max(1, self.length))

        return "\n".join(formatted)


def source_snippet(text: str, line: int, context: int = 2) -> str:
    """
    Extract the lines around ``line`` for use in an ErrorContext.

    Args:
        text: Full source text
        line: Line number of the error (1-indexed)
        context: Number of lines to show before and after

    Returns:
        The selected lines joined with newlines
    """
    lines = text.split("\n")
    start = max(1, line - context)
    end = min(len(lines), line + context)
    return "\n".join(lines[start - 1 : end])


def make_parse_error(
    message: str,
    file: Path | None,
    line: int,
    column: int,
    length: int = 1,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        length: Width of the offending span
        snippet: Optional code snippet

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, length=length, snippet=snippet)
    return ParseError(message, context)


def make_validation_error(
    message: str,
    span: SourceSpan | None = None,
    file: Path | None = None,
    text: str | None = None,
) -> ValidationError:
    """
    Helper to create a ValidationError with optional context.

    Args:
        message: Error description
        span: Optional location of the offending declaration
        file: Optional source file path
        text: Optional source text, used to build a snippet

    Returns:
        ValidationError with context if a location is known
    """
    if span is None:
        return ValidationError(message)
    snippet = source_snippet(text, span.line) if text is not None else None
    context = ErrorContext(
        file=file,
        line=span.line,
        column=span.column,
        length=span.length,
        snippet=snippet,
    )
    return ValidationError(message, context)
