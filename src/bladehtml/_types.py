"""Token types shared by the template lexer and the expression lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Token categories.

    Template level (produced by ``bladehtml.lexer.Lexer``):
        TEXT, ECHO, RAW_ECHO, DIRECTIVE, EOF

    Expression level (produced by ``bladehtml.expressions.parser``):
        NAME, STRING, NUMBER, OPERATOR, LPAREN, RPAREN, LBRACKET,
        RBRACKET, DOT, COMMA, QUESTION, COLON
    """

    # Template stream
    TEXT = "text"
    ECHO = "echo"
    RAW_ECHO = "raw_echo"
    DIRECTIVE = "directive"
    EOF = "eof"

    # Expressions
    NAME = "name"
    STRING = "string"
    NUMBER = "number"
    OPERATOR = "operator"
    LPAREN = "lparen"
    RPAREN = "rparen"
    LBRACKET = "lbracket"
    RBRACKET = "rbracket"
    DOT = "dot"
    COMMA = "comma"
    QUESTION = "question"
    COLON = "colon"


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token.

    Attributes:
        type: Token category
        value: Literal text, expression source, or directive name
        lineno: 1-based source line
        col_offset: 0-based column
        args: Directive argument text (without the surrounding parens),
            or None for a bare directive such as ``@else``
        raw: Exact source slice the token was produced from, used to
            re-emit malformed directives as literal text
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int
    args: str | None = None
    raw: str = ""

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
