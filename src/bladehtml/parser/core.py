"""Recursive-descent template parser: token stream → node tree.

One pass builds the whole tree, so nesting is resolved structurally rather
than by re-scanning text. Malformed structure (an opener with no closer, a
stray ``@endif``) degrades to literal text unless the parser is strict, in
which case it raises ``TemplateSyntaxError`` with a source snippet.

Thread-Safety:
    A Parser holds position state for one token stream; create one per
    parse. The resulting tree is immutable and safe to share.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from bladehtml._types import Token, TokenType
from bladehtml.environment.exceptions import ErrorCode
from bladehtml.lexer import Lexer
from bladehtml.nodes import Data, DirectiveCall, Extends, Node, Output, Template
from bladehtml.parser.blocks.components import ComponentBlockParsingMixin
from bladehtml.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from bladehtml.parser.blocks.core import BlockFrame
from bladehtml.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

# Directives that only make sense as the end (or middle) of a block
CLOSING_DIRECTIVES = frozenset(
    {"elseif", "else", "endif", "endforeach", "endfor", "endsection", "endcomponent", "endslot"}
)


class Parser(
    ControlFlowBlockParsingMixin,
    TemplateStructureBlockParsingMixin,
    ComponentBlockParsingMixin,
):
    """Parse a template token stream.

    Example:
        >>> tree = Parser(Lexer("@if(x)yes@endif").tokenize()).parse()
        >>> type(tree.body[0]).__name__
        'If'

    """

    def __init__(
        self,
        tokens: Iterable[Token],
        name: str | None = None,
        source: str | None = None,
        *,
        strict: bool = False,
    ):
        self._tokens = list(tokens)
        if not self._tokens or self._tokens[-1].type != TokenType.EOF:
            self._tokens.append(Token(TokenType.EOF, "", 1, 0))
        self._pos = 0
        self._name = name
        self._source = source
        self._strict = strict
        self._block_stack: list[BlockFrame] = []
        self._slot_spans: list[list[tuple[int, int]]] = []
        self._extends: Extends | None = None

        self._block_parsers: dict[str, Callable[[], list[Node]]] = {
            "if": self._parse_if,
            "foreach": self._parse_foreach,
            "for": self._parse_for,
            "extends": self._parse_extends,
            "section": self._parse_section,
            "yield": self._parse_yield,
            "include": self._parse_include,
            "component": self._parse_component,
        }

    def parse(self) -> Template:
        body, _ = self._parse_body(frozenset())
        return Template(lineno=1, col_offset=0, body=tuple(body), extends=self._extends)

    # -- navigation --------------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type != TokenType.EOF:
            self._pos += 1
        return token

    def _raw_between(self, start: int, end: int, skip: list[tuple[int, int]]) -> str:
        """Original source of tokens ``start``…``end``, minus ``skip`` spans."""
        return "".join(
            self._tokens[i].raw
            for i in range(start, end)
            if not any(lo <= i < hi for lo, hi in skip)
        )

    # -- bodies ------------------------------------------------------------

    def _parse_body(self, closers: frozenset[str]) -> tuple[list[Node], Token | None]:
        """Parse nodes until one of ``closers`` (left unconsumed) or EOF.

        Returns the nodes and the closing token, or None when the body
        ended at EOF or at a closer belonging to an enclosing block.
        """
        nodes: list[Node] = []
        while True:
            token = self._current
            if token.type == TokenType.EOF:
                return nodes, None

            if token.type == TokenType.TEXT:
                self._advance()
                nodes.append(Data(token.lineno, token.col_offset, token.value))
            elif token.type == TokenType.ECHO:
                self._advance()
                nodes.append(Output(token.lineno, token.col_offset, token.value, escape=True))
            elif token.type == TokenType.RAW_ECHO:
                self._advance()
                nodes.append(Output(token.lineno, token.col_offset, token.value, escape=False))
            else:
                if token.value in closers:
                    return nodes, token
                if self._closes_enclosing(token.value):
                    return nodes, None
                nodes.extend(self._parse_directive())

    def _parse_directive(self) -> list[Node]:
        token = self._current
        name = token.value

        if name in CLOSING_DIRECTIVES:
            self._advance()
            if self._strict:
                raise self._syntax_error(
                    f"Unexpected @{name} with no open block",
                    token,
                    ErrorCode.UNEXPECTED_DIRECTIVE,
                )
            return [Data(token.lineno, token.col_offset, token.raw)]

        if name == "slot" and self._in_component_body():
            return self._parse_slot()

        block_parser = self._block_parsers.get(name)
        if block_parser is not None:
            return block_parser()

        self._advance()
        return [DirectiveCall(token.lineno, token.col_offset, name, token.args or "", token.raw)]


def parse(source: str, name: str | None = None, *, strict: bool = False) -> Template:
    """Lex and parse ``source`` into a Template node."""
    return Parser(Lexer(source).tokenize(), name, source, strict=strict).parse()
