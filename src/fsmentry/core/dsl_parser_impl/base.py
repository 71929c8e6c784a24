"""
Base parser class for the fsmentry DSL.

Provides common token manipulation and utility methods used by all parser mixins.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable

from .. import ir
from ..errors import ParseError, make_parse_error, source_snippet
from ..lexer import Token, TokenType
from ..strings import normalize_type

OPENING_BRACKETS = (
    TokenType.LESS_THAN,
    TokenType.LPAREN,
    TokenType.LBRACKET,
    TokenType.LBRACE,
)
CLOSING_BRACKETS = (
    TokenType.GREATER_THAN,
    TokenType.RPAREN,
    TokenType.RBRACKET,
    TokenType.RBRACE,
)

# Keywords that are accepted where an identifier is expected
KEYWORD_AS_IDENTIFIER_TYPES = (
    TokenType.PUB,
    TokenType.WHERE,
    TokenType.TRUE,
    TokenType.FALSE,
)


@runtime_checkable
class ParserProtocol(Protocol):
    """
    Protocol defining the interface available to parser mixins.

    This allows mypy to understand that mixins will have access to
    BaseParser methods when combined in the final Parser class.
    """

    tokens: list[Token]
    file: Path | None
    text: str
    pos: int

    def current_token(self) -> Token: ...
    def peek_token(self, offset: int = 1) -> Token: ...
    def advance(self) -> Token: ...
    def expect(self, token_type: TokenType) -> Token: ...
    def expect_identifier_or_keyword(self) -> Token: ...
    def match(self, *token_types: TokenType) -> bool: ...
    def error(self, message: str, token: Token | None = None) -> ParseError: ...
    def span(self, first: Token, last: Token | None = None) -> ir.SourceSpan: ...
    def capture_balanced(self, stop_types: tuple[TokenType, ...], what: str) -> str: ...

    # Methods from other mixins that may be called cross-mixin
    def parse_visibility(self) -> str: ...
    def parse_docs(self) -> list[str]: ...


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], file: Path | None, text: str):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer
            file: Source file path (for error reporting)
            text: Source text (for snippets and verbatim type capture)
        """
        self.tokens = tokens
        self.file = file
        self.text = text
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def error(self, message: str, token: Token | None = None) -> ParseError:
        """Build a ParseError pointing at ``token`` (default: the current token)."""
        token = token or self.current_token()
        return make_parse_error(
            message,
            self.file,
            token.line,
            token.column,
            length=token.length,
            snippet=source_snippet(self.text, token.line),
        )

    def span(self, first: Token, last: Token | None = None) -> ir.SourceSpan:
        """Source span covering ``first`` through ``last``."""
        last = last or first
        if last.line == first.line:
            length = max(1, last.end - first.start)
        else:
            length = first.length
        return ir.SourceSpan(line=first.line, column=first.column, length=length)

    def describe(self, token: Token) -> str:
        if token.type == TokenType.EOF:
            return "end of input"
        if token.type == TokenType.DOC:
            return "doc comment"
        if token.type == TokenType.STRING:
            return f'"{token.value}"'
        return f"`{token.value}`"

    def expect(self, token_type: TokenType) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            ParseError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            if token_type == TokenType.IDENTIFIER:
                expected = "identifier"
            else:
                expected = f"`{token_type.value}`"
            raise self.error(f"Expected {expected}, got {self.describe(token)}", token)
        return self.advance()

    def expect_identifier_or_keyword(self) -> Token:
        """
        Expect an identifier or accept a keyword as an identifier.

        Used for method names, where a keyword is escaped later on.
        """
        token = self.current_token()
        if token.type == TokenType.IDENTIFIER or token.type in KEYWORD_AS_IDENTIFIER_TYPES:
            return self.advance()
        raise self.error(f"Expected identifier, got {self.describe(token)}", token)

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def capture_balanced(self, stop_types: tuple[TokenType, ...], what: str) -> str:
        """
        Consume tokens up to one of ``stop_types`` at bracket depth 0.

        The consumed tokens are returned as their source text, with
        whitespace normalised. An arrow directly after a closing parenthesis
        belongs to the captured text (``fn(u8) -> u16``).

        Raises:
            ParseError: On unbalanced brackets, end of input, or empty capture
        """
        depth = 0
        first: Token | None = None
        last: Token | None = None

        while True:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.error(f"Unexpected end of input in {what}", token)

            if depth == 0 and token.type in stop_types:
                arrow_after_paren = (
                    token.type == TokenType.ARROW
                    and last is not None
                    and last.type == TokenType.RPAREN
                )
                if not arrow_after_paren:
                    break

            if token.type in OPENING_BRACKETS:
                depth += 1
            elif token.type in CLOSING_BRACKETS:
                if depth == 0:
                    raise self.error(f"Unbalanced {self.describe(token)} in {what}", token)
                depth -= 1

            if first is None:
                first = token
            last = self.advance()

        if first is None or last is None:
            raise self.error(f"Expected {what}, got {self.describe(self.current_token())}")
        return normalize_type(self.text[first.start : last.end])
