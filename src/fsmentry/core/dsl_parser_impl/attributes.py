"""
Attribute parser mixin for the fsmentry DSL.

Parses documentation, outer attributes, visibility, and the generator
options carried by ``#[fsmentry(...)]``.

DSL Syntax:

    /// Documentation
    #[doc = "More documentation"]
    #[derive(Debug, Clone)]
    #[fsmentry(entry = pub(crate) MyEntry, unsafe(true))]
    pub(crate) Machine { ... }
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType
from ..strings import normalize_type

CONFIG_ATTRIBUTE = "fsmentry"


class AttributeParserMixin:
    """Parser mixin for attributes, documentation, and visibility."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        peek_token: Any
        current_token: Any
        error: Any
        describe: Any
        expect_identifier_or_keyword: Any
        text: str

    def parse_docs(self) -> list[str]:
        """
        Parse doc comments and ``#[doc = "..."]`` attributes.

        Returns:
            Documentation fragments, one per line

        Raises:
            ParseError: If a non-doc attribute is found
        """
        docs: list[str] = []
        while True:
            if self.match(TokenType.DOC):
                docs.extend(self.advance().value.split("\n"))
            elif self.match(TokenType.POUND):
                if not self._at_doc_attribute():
                    raise self.error(
                        "Only documentation attributes are allowed on statements",
                        self.current_token(),
                    )
                docs.extend(self._parse_doc_attribute().split("\n"))
            else:
                return docs

    def parse_outer(self) -> tuple[list[str], list[str], ir.GeneratorConfig]:
        """
        Parse the doc comments and attributes in front of a machine header.

        Returns:
            Tuple of (docs, verbatim attributes, generator config)
        """
        docs: list[str] = []
        attrs: list[str] = []
        options: dict[str, Any] = {}
        seen: set[str] = set()

        while True:
            if self.match(TokenType.DOC):
                docs.extend(self.advance().value.split("\n"))
            elif self.match(TokenType.POUND):
                if self._at_doc_attribute():
                    docs.extend(self._parse_doc_attribute().split("\n"))
                elif self._at_attribute_named(CONFIG_ATTRIBUTE):
                    self._parse_config_attribute(options, seen)
                else:
                    attrs.append(self._parse_verbatim_attribute())
            else:
                break

        return docs, attrs, ir.GeneratorConfig(**options)

    def parse_visibility(self) -> str:
        """
        Parse an optional visibility.

        Grammar:
            'pub' ( '(' ('crate' | 'super' | 'self' | 'in' path) ')' )?

        Returns:
            Normalised visibility, "" when absent
        """
        if not self.match(TokenType.PUB):
            return ""
        self.advance()

        if not self.match(TokenType.LPAREN):
            return "pub"

        # `pub (` only starts a restriction when followed by one of these
        restriction = self.peek_token()
        if restriction.type != TokenType.IDENTIFIER or restriction.value not in (
            "crate",
            "super",
            "self",
            "in",
        ):
            return "pub"

        self.advance()  # (
        scope = self.advance().value
        if scope == "in":
            scope = f"in {self.parse_module_path()}"
        self.expect(TokenType.RPAREN)
        return f"pub({scope})"

    def parse_module_path(self) -> str:
        """Parse a module path such as ``::core`` or ``crate::shim``."""
        parts = []
        if self.match(TokenType.PATH_SEP):
            self.advance()
            parts.append("")
        parts.append(self.expect(TokenType.IDENTIFIER).value)
        while self.match(TokenType.PATH_SEP):
            self.advance()
            parts.append(self.expect(TokenType.IDENTIFIER).value)
        return "::".join(parts)

    # =========================================================================
    # Attribute helpers
    # =========================================================================

    def _at_attribute_named(self, name: str) -> bool:
        ident = self.peek_token(2)
        return (
            self.match(TokenType.POUND)
            and self.peek_token().type == TokenType.LBRACKET
            and ident.type == TokenType.IDENTIFIER
            and ident.value == name
        )

    def _at_doc_attribute(self) -> bool:
        return self._at_attribute_named("doc") and self.peek_token(3).type == TokenType.EQUALS

    def _parse_doc_attribute(self) -> str:
        """Parse ``#[doc = "..."]`` and return the string."""
        self.expect(TokenType.POUND)
        self.expect(TokenType.LBRACKET)
        self.expect(TokenType.IDENTIFIER)  # doc
        self.expect(TokenType.EQUALS)
        value = self.expect(TokenType.STRING).value
        self.expect(TokenType.RBRACKET)
        return value

    def _parse_verbatim_attribute(self) -> str:
        """Parse ``#[...]`` and return its source text."""
        first = self.expect(TokenType.POUND)
        self.expect(TokenType.LBRACKET)
        depth = 1
        last = first
        while depth:
            token = self.current_token()
            if token.type == TokenType.EOF:
                raise self.error("Unterminated attribute", first)
            if token.type == TokenType.LBRACKET:
                depth += 1
            elif token.type == TokenType.RBRACKET:
                depth -= 1
            last = self.advance()
        return normalize_type(self.text[first.start : last.end])

    def _parse_config_attribute(self, options: dict[str, Any], seen: set[str]) -> None:
        """
        Parse ``#[fsmentry(key = value, key(value), ...)]`` into ``options``.

        Each recognised key may appear at most once across all
        ``#[fsmentry]`` attributes of a machine.

        Raises:
            ParseError: On unknown or repeated keys, or malformed values
        """
        self.expect(TokenType.POUND)
        self.expect(TokenType.LBRACKET)
        self.expect(TokenType.IDENTIFIER)  # fsmentry
        self.expect(TokenType.LPAREN)

        handlers: dict[str, Callable[[], dict[str, Any]]] = {
            "entry": self._parse_entry_option,
            "mermaid": lambda: {"mermaid": self._parse_bool()},
            "path_to_core": lambda: {"path_to_core": self.parse_module_path()},
            "rename_methods": lambda: {"rename_methods": self._parse_bool()},
            "unsafe": self._parse_unsafe_option,
        }

        while not self.match(TokenType.RPAREN):
            key_token = self.expect(TokenType.IDENTIFIER)
            key = key_token.value
            if key not in handlers:
                raise self.error(f"Expected one of {sorted(handlers)}", key_token)
            if key in seen:
                raise self.error(f"Duplicate value for key `{key}`", key_token)
            seen.add(key)

            # key = value  *or*  key(value)
            if self.match(TokenType.EQUALS):
                self.advance()
                options.update(handlers[key]())
            else:
                self.expect(TokenType.LPAREN)
                options.update(handlers[key]())
                self.expect(TokenType.RPAREN)

            if not self.match(TokenType.COMMA):
                break
            self.advance()

        self.expect(TokenType.RPAREN)
        self.expect(TokenType.RBRACKET)

    def _parse_bool(self) -> bool:
        token = self.current_token()
        if token.type == TokenType.TRUE:
            self.advance()
            return True
        if token.type == TokenType.FALSE:
            self.advance()
            return False
        raise self.error(f"Expected `true` or `false`, got {self.describe(token)}", token)

    def _parse_unsafe_option(self) -> dict[str, Any]:
        trusted = self._parse_bool()
        return {"trust": ir.Trust.TRUSTED if trusted else ir.Trust.CHECKED}

    def _parse_entry_option(self) -> dict[str, Any]:
        """Parse ``entry = vis? Ident``."""
        vis = self.parse_visibility()
        name = self.expect(TokenType.IDENTIFIER).value
        return {"entry_vis": vis, "entry_name": name}
