"""
Lexer/Tokenizer for the fsmentry DSL.

Converts raw DSL text into a stream of tokens with source location tracking.
Whitespace and newlines are insignificant; statements end with ``;``.
Outer doc comments (``///`` and ``/** */``) become DOC tokens, every other
comment is skipped.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from .errors import make_parse_error, source_snippet


class TokenType(Enum):
    """Token types in the fsmentry DSL."""

    # Literals
    IDENTIFIER = "IDENTIFIER"
    LIFETIME = "LIFETIME"
    STRING = "STRING"
    NUMBER = "NUMBER"
    DOC = "DOC"

    # Keywords
    PUB = "pub"
    WHERE = "where"
    TRUE = "true"
    FALSE = "false"

    # Operators
    SEMICOLON = ";"
    COLON = ":"
    PATH_SEP = "::"
    COMMA = ","
    DOT = "."
    ARROW = "->"
    MINUS = "-"
    AMPERSAND = "&"
    POUND = "#"
    EQUALS = "="
    BANG = "!"
    STAR = "*"
    PLUS = "+"
    QUESTION = "?"
    PIPE = "|"
    LESS_THAN = "<"
    GREATER_THAN = ">"
    LPAREN = "("
    RPAREN = ")"
    LBRACKET = "["
    RBRACKET = "]"
    LBRACE = "{"
    RBRACE = "}"

    # Special
    EOF = "EOF"


KEYWORDS = {
    "pub",
    "where",
    "true",
    "false",
}

# Single-character punctuation that maps directly onto a token type
_SINGLE_CHAR_TOKENS = {
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "&": TokenType.AMPERSAND,
    "#": TokenType.POUND,
    "=": TokenType.EQUALS,
    "!": TokenType.BANG,
    "*": TokenType.STAR,
    "+": TokenType.PLUS,
    "?": TokenType.QUESTION,
    "|": TokenType.PIPE,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}


@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        value: String value of the token
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        start: Offset of the first character in the source text
        end: Offset one past the last character in the source text
    """

    type: TokenType
    value: str
    line: int
    column: int
    start: int = 0
    end: int = 0

    @property
    def length(self) -> int:
        return max(1, self.end - self.start)

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """
    Lexer for the fsmentry DSL.

    Converts source text into a stream of tokens.
    """

    def __init__(self, text: str, file: Path | None = None):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            file: Source file path (for error reporting)
        """
        self.text = text
        self.file = file
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def error(self, message: str, line: int, column: int, length: int = 1) -> Exception:
        return make_parse_error(
            message,
            self.file,
            line,
            column,
            length=length,
            snippet=source_snippet(self.text, line),
        )

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, including newlines."""
        while self.current_char() in (" ", "\t", "\r", "\n"):
            self.advance()

    def is_outer_doc_line(self) -> bool:
        """`///` is a doc comment, `////` is an ordinary comment."""
        return self.text.startswith("///", self.pos) and not self.text.startswith("////", self.pos)

    def is_outer_doc_block(self) -> bool:
        """`/**` is a doc comment, `/***` and the empty `/**/` are not."""
        return (
            self.text.startswith("/**", self.pos)
            and not self.text.startswith("/***", self.pos)
            and not self.text.startswith("/**/", self.pos)
        )

    def read_line_comment(self) -> str:
        """Read from the current position to the end of the line."""
        chars = []
        while self.current_char() is not None and self.current_char() != "\n":
            chars.append(self.current_char())
            self.advance()
        return "".join(chars)

    def read_block_comment(self) -> str:
        """Read a (possibly nested) block comment, returning its inner text."""
        start_line = self.line
        start_col = self.column
        self.advance()  # /
        self.advance()  # *
        depth = 1
        chars = []
        while depth:
            ch = self.current_char()
            if ch is None:
                raise self.error("Unterminated block comment", start_line, start_col, 2)
            if ch == "/" and self.peek_char() == "*":
                depth += 1
            elif ch == "*" and self.peek_char() == "/":
                depth -= 1
                if depth == 0:
                    self.advance()
                    self.advance()
                    break
            chars.append(ch)
            self.advance()
        return "".join(chars)

    def read_string(self) -> str:
        """Read a double-quoted string."""
        start_line = self.line
        start_col = self.column
        self.advance()  # skip opening quote

        chars = []
        while True:
            current = self.current_char()
            if not current or current == '"':
                break

            if current == "\\":
                self.advance()
                escape_char = self.current_char()
                if escape_char == "n":
                    chars.append("\n")
                elif escape_char == "t":
                    chars.append("\t")
                elif escape_char == "r":
                    chars.append("\r")
                elif escape_char == "0":
                    chars.append("\0")
                elif escape_char in ("\\", '"', "'"):
                    chars.append(escape_char)
                elif escape_char == "\n":
                    # Line continuation: skip the newline and leading whitespace
                    self.advance()
                    while self.current_char() in (" ", "\t", "\r", "\n"):
                        self.advance()
                    continue
                elif escape_char:
                    raise self.error(
                        f"Unknown character escape: \\{escape_char}",
                        self.line,
                        self.column - 1,
                        2,
                    )
                self.advance()
            else:
                chars.append(current)
                self.advance()

        if self.current_char() != '"':
            raise self.error("Unterminated string literal", start_line, start_col)

        self.advance()  # skip closing quote
        return "".join(chars)

    def read_number(self) -> str:
        """Read an integer literal, allowing `_` separators and type suffixes."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier or keyword."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def add(self, token_type: TokenType, value: str, line: int, column: int, start: int) -> None:
        self.tokens.append(Token(token_type, value, line, column, start, self.pos))

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            ParseError: If syntax error encountered
        """
        while True:
            self.skip_whitespace()

            ch = self.current_char()
            if ch is None:
                break

            # Save position for token
            token_line = self.line
            token_col = self.column
            token_start = self.pos

            # Comments and doc comments
            if ch == "/" and self.peek_char() == "/":
                if self.is_outer_doc_line():
                    self.advance()
                    self.advance()
                    self.advance()
                    doc = self.read_line_comment()
                    self.add(TokenType.DOC, doc.rstrip("\r"), token_line, token_col, token_start)
                else:
                    self.read_line_comment()

            elif ch == "/" and self.peek_char() == "*":
                is_doc = self.is_outer_doc_block()
                body = self.read_block_comment()
                if is_doc:
                    # Drop the second `*` of the opening `/**`
                    self.add(TokenType.DOC, body[1:], token_line, token_col, token_start)

            # Strings
            elif ch == '"':
                value = self.read_string()
                self.add(TokenType.STRING, value, token_line, token_col, token_start)

            # Lifetimes ('a, 'static)
            elif ch == "'":
                self.advance()
                if not (self.current_char() and (self.current_char().isalpha() or self.current_char() == "_")):
                    raise self.error("Expected lifetime name after `'`", token_line, token_col)
                name = self.read_identifier()
                self.add(TokenType.LIFETIME, f"'{name}", token_line, token_col, token_start)

            # Numbers
            elif ch.isdigit():
                value = self.read_number()
                self.add(TokenType.NUMBER, value, token_line, token_col, token_start)

            # Raw identifiers (r#type)
            elif ch == "r" and self.peek_char() == "#" and (
                (self.peek_char(2) or "").isalpha() or self.peek_char(2) == "_"
            ):
                self.advance()
                self.advance()
                value = "r#" + self.read_identifier()
                self.add(TokenType.IDENTIFIER, value, token_line, token_col, token_start)

            # Identifiers and keywords
            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                if value in KEYWORDS:
                    token_type = TokenType(value)
                else:
                    token_type = TokenType.IDENTIFIER
                self.add(token_type, value, token_line, token_col, token_start)

            elif ch == ":":
                if self.peek_char() == ":":
                    self.advance()
                    self.advance()
                    self.add(TokenType.PATH_SEP, "::", token_line, token_col, token_start)
                else:
                    self.advance()
                    self.add(TokenType.COLON, ":", token_line, token_col, token_start)

            elif ch == "-":
                if self.peek_char() == ">":
                    self.advance()
                    self.advance()
                    self.add(TokenType.ARROW, "->", token_line, token_col, token_start)
                else:
                    self.advance()
                    self.add(TokenType.MINUS, "-", token_line, token_col, token_start)

            elif ch in _SINGLE_CHAR_TOKENS:
                self.advance()
                self.add(_SINGLE_CHAR_TOKENS[ch], ch, token_line, token_col, token_start)

            else:
                raise self.error(f"Unexpected character: {ch!r}", token_line, token_col)

        # Add EOF token
        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column, self.pos, self.pos))

        return self.tokens


def tokenize(text: str, file: Path | None = None) -> list[Token]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text
        file: Source file path

    Returns:
        List of tokens
    """
    lexer = Lexer(text, file)
    return lexer.tokenize()
