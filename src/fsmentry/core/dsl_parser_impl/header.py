"""
Machine header parser mixin for the fsmentry DSL.

DSL Syntax:

    pub(crate) enum Machine<'a, T: Ord = u8>
    where
        T: Clone,
    {
        ...
    }

The ``enum`` keyword is optional. Generic parameters and where predicates
are captured as opaque Rust text.
"""

from typing import TYPE_CHECKING, Any

from ..lexer import Token, TokenType
from ..strings import split_top_level

ENUM_KEYWORD = "enum"


class HeaderParserMixin:
    """Parser mixin for the machine header."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        peek_token: Any
        current_token: Any
        error: Any
        span: Any
        capture_balanced: Any
        parse_visibility: Any

    def looks_like_header(self) -> bool:
        """
        Look past leading docs and attributes to decide whether the input
        starts with a machine header rather than a bare statement.
        """
        offset = 0
        while True:
            token = self.peek_token(offset)
            if token.type == TokenType.DOC:
                offset += 1
            elif token.type == TokenType.POUND:
                offset = self._skip_attribute(offset)
            else:
                break

        token = self.peek_token(offset)
        if token.type == TokenType.PUB:
            return True
        if token.type != TokenType.IDENTIFIER:
            return False
        if token.value == ENUM_KEYWORD and self.peek_token(offset + 1).type == TokenType.IDENTIFIER:
            return True
        return self.peek_token(offset + 1).type in (
            TokenType.LBRACE,
            TokenType.LESS_THAN,
            TokenType.WHERE,
        )

    def parse_header(self) -> tuple[str, Token, str, list[str]]:
        """
        Parse ``vis? enum? NAME generics? where_clause?``.

        Returns:
            Tuple of (visibility, name token, generics, where predicates)
        """
        vis = self.parse_visibility()

        if (
            self.match(TokenType.IDENTIFIER)
            and self.current_token().value == ENUM_KEYWORD
            and self.peek_token().type == TokenType.IDENTIFIER
        ):
            self.advance()

        name = self.expect(TokenType.IDENTIFIER)
        generics = self.parse_generics()
        predicates = self.parse_where_clause()
        return vis, name, generics, predicates

    def parse_generics(self) -> str:
        """Parse an optional ``<...>`` parameter list, returned with brackets."""
        if not self.match(TokenType.LESS_THAN):
            return ""
        self.advance()
        if self.match(TokenType.GREATER_THAN):
            self.advance()
            return ""
        params = self.capture_balanced((TokenType.GREATER_THAN,), "generic parameters")
        self.expect(TokenType.GREATER_THAN)
        return f"<{', '.join(split_top_level(params))}>"

    def parse_where_clause(self) -> list[str]:
        """Parse an optional where clause, up to the opening brace."""
        if not self.match(TokenType.WHERE):
            return []
        where = self.advance()
        if self.match(TokenType.LBRACE):
            return []
        predicates = split_top_level(self.capture_balanced((TokenType.LBRACE,), "where clause"))
        if not predicates:
            raise self.error("Expected where predicates", where)
        return predicates

    def _skip_attribute(self, offset: int) -> int:
        """Offset just past the ``#[...]`` starting at ``offset``."""
        offset += 1
        if self.peek_token(offset).type != TokenType.LBRACKET:
            return offset
        depth = 0
        while True:
            token = self.peek_token(offset)
            if token.type == TokenType.EOF:
                return offset
            if token.type == TokenType.LBRACKET:
                depth += 1
            elif token.type == TokenType.RBRACKET:
                depth -= 1
                if depth == 0:
                    return offset + 1
            offset += 1

