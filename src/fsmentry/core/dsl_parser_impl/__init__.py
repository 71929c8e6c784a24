"""
fsmentry DSL Parser Package.

This package provides a modular parser for the fsmentry DSL.
The parser is built using mixins to separate parsing logic by construct type.

The main exports are:
- Parser: The complete parser class
- parse_dsl: Convenience function to parse DSL text

Usage:
    from fsmentry.core.dsl_parser_impl import parse_dsl

    document = parse_dsl(text, file)
"""

import logging
from pathlib import Path

from .. import ir
from ..lexer import TokenType, tokenize
from .attributes import AttributeParserMixin
from .base import BaseParser
from .header import HeaderParserMixin
from .statements import StatementParserMixin

logger = logging.getLogger(__name__)


class Parser(
    BaseParser,
    AttributeParserMixin,
    HeaderParserMixin,
    StatementParserMixin,
):
    """
    Complete fsmentry DSL Parser.

    - AttributeParserMixin: Docs, attributes, visibility, generator options
    - HeaderParserMixin: Machine name, generics and where clause
    - StatementParserMixin: Node statements, transition chains and arrows
    """

    def parse(self) -> ir.MachineDocument:
        """
        Parse a whole document.

        Returns:
            MachineDocument with header information and statements
        """
        if not self.looks_like_header():
            start = self.current_token()
            statements = self.parse_statements(TokenType.EOF)
            return ir.MachineDocument(statements=statements, span=self.span(start))

        docs, attrs, config = self.parse_outer()
        vis, name, generics, predicates = self.parse_header()
        self.expect(TokenType.LBRACE)
        statements = self.parse_statements(TokenType.RBRACE)
        self.expect(TokenType.RBRACE)
        self.expect(TokenType.EOF)

        return ir.MachineDocument(
            name=name.value,
            vis=vis,
            doc=docs,
            attrs=attrs,
            generics=generics,
            where_predicates=predicates,
            config=config,
            statements=statements,
            span=self.span(name),
        )


def parse_dsl(text: str, file: Path | None = None) -> ir.MachineDocument:
    """
    Parse fsmentry DSL text.

    Args:
        text: DSL source text
        file: Source file path, used in error messages

    Returns:
        The parsed MachineDocument

    Raises:
        ParseError: On the first syntax error
    """
    tokens = tokenize(text, file)
    parser = Parser(tokens, file, text)
    document = parser.parse()
    logger.debug(
        "Parsed machine %s with %d statement(s) from %s",
        document.name,
        len(document.statements),
        file or "<input>",
    )
    return document


__all__ = ["Parser", "parse_dsl"]
