"""
Statement parser mixin for the fsmentry DSL.

DSL Syntax:

    /// A node declaration, with an optional payload type
    Bridge: Vec<u8>;

    /// Shared by every edge of the chain
    Fountain -> Bridge --> Plank -"inline docs"-> Grave;

    /// Named arrows override the method name
    Fountain -launch "and document it"-> Stream;

    /// Groups fan out to every member
    Start -> Left & Right;
"""

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import Token, TokenType
from ..strings import node_identifier

# A chain reference's type runs until the next arrow or the end of the statement
TYPE_STOP_TYPES = (TokenType.ARROW, TokenType.MINUS, TokenType.SEMICOLON)


class StatementParserMixin:
    """Parser mixin for node and transition statements."""

    if TYPE_CHECKING:
        expect: Any
        advance: Any
        match: Any
        peek_token: Any
        current_token: Any
        error: Any
        describe: Any
        span: Any
        capture_balanced: Any
        expect_identifier_or_keyword: Any
        parse_docs: Any

    def parse_statements(self, terminator: TokenType) -> list[ir.Statement]:
        """Parse statements until ``terminator`` (not consumed)."""
        statements: list[ir.Statement] = []
        while not self.match(terminator):
            if self.match(TokenType.EOF):
                raise self.error(f"Expected `{terminator.value}`, got end of input")
            statements.append(self.parse_statement())
        return statements

    def parse_statement(self) -> ir.Statement:
        """
        Parse a node statement or a transition chain.

        The two share a prefix, so the first group is parsed before deciding:
        a single node followed by ``;`` is a node statement.
        """
        docs = self.parse_docs()
        first = self.parse_group(node_docs=docs)

        if self.match(TokenType.SEMICOLON) and not first.is_group:
            self.advance()
            return ir.NodeStatement(node=first.members[0])

        # The docs were attached to the node refs speculatively; for a chain
        # they belong to the statement.
        first = ir.NodeGroup(
            members=[member.model_copy(update={"doc": []}) for member in first.members]
        )

        rest: list[tuple[ir.Arrow, ir.NodeGroup]] = []
        while not self.match(TokenType.SEMICOLON):
            arrow = self.parse_arrow()
            group_start = self.current_token()
            group = self.parse_group()
            if arrow.is_named and group.is_group:
                raise self.error(
                    "Named transitions into a group of nodes are not supported",
                    group_start,
                )
            rest.append((arrow, group))
        if not rest:
            raise self.error("Expected `->` after a group of nodes")
        self.expect(TokenType.SEMICOLON)

        return ir.TransitionStatement(doc=docs, first=first, rest=rest)

    def parse_group(self, node_docs: list[str] | None = None) -> ir.NodeGroup:
        """
        Parse ``node_ref ('&' node_ref)*``.

        Grammar:
            node_ref := NAME (':' type)?
        """
        members = [self.parse_node_ref(node_docs or [])]
        while self.match(TokenType.AMPERSAND):
            self.advance()
            members.append(self.parse_node_ref([]))
        return ir.NodeGroup(members=members)

    def parse_node_ref(self, docs: list[str]) -> ir.NodeRef:
        name = self.current_token()
        if name.type != TokenType.IDENTIFIER:
            raise self.error(f"Expected node name, got {self.describe(name)}", name)
        self.advance()
        try:
            node_name = node_identifier(name.value)
        except ValueError as e:
            raise self.error(str(e), name) from e

        ty = None
        if self.match(TokenType.COLON):
            self.advance()
            ty = self.capture_balanced(TYPE_STOP_TYPES, "type")

        return ir.NodeRef(name=node_name, ty=ty, doc=docs, span=self.span(name))

    def parse_arrow(self) -> ir.Arrow:
        """
        Parse an arrow.

        Grammar:
            arrow := '->'
                   | '-' '->'
                   | '-' '-'? (NAME | STRING | NAME STRING) '-'? '->'

        Returns:
            Arrow with its kind, method name and inline documentation
        """
        first = self.current_token()

        if self.match(TokenType.ARROW):
            self.advance()
            return ir.Arrow(kind=ir.ArrowKind.PLAIN, span=self.span(first))

        if not self.match(TokenType.MINUS):
            raise self.error(f"Expected `->` or `;`, got {self.describe(first)}", first)
        self.advance()

        if self.match(TokenType.ARROW):
            last = self.advance()
            return ir.Arrow(kind=ir.ArrowKind.LONG, span=self.span(first, last))

        if self.match(TokenType.MINUS):
            self.advance()

        method_name: str | None = None
        doc: list[str] = []
        if not self.match(TokenType.STRING):
            method_name = self.expect_identifier_or_keyword().value
        if self.match(TokenType.STRING):
            doc = [f" {line}" for line in self.advance().value.split("\n")]

        if self.match(TokenType.MINUS):
            self.advance()
        last = self._expect_arrow_head()

        kind = ir.ArrowKind.NAMED if method_name is not None else ir.ArrowKind.DOCUMENTED
        return ir.Arrow(
            kind=kind,
            method_name=method_name,
            doc=doc,
            span=self.span(first, last),
        )

    def _expect_arrow_head(self) -> Token:
        token = self.current_token()
        if token.type != TokenType.ARROW:
            raise self.error(
                f"Expected `->` to close the arrow, got {self.describe(token)}",
                token,
            )
        return self.advance()
