"""Expression tokenizer and recursive-descent parser.

Compiles expression source text into the immutable nodes defined in
``bladehtml.nodes.expressions``. Compilation is cached by source text, so a
template rendered in a loop parses each distinct expression once.

Precedence (lowest to highest):
    1. ``cond ? a : b``
    2. ``||`` (fallback), ``or``
    3. ``&&``, ``and``
    4. ``not``
    5. ``== != === !== < <= > >=``
    6. ``+ -``
    7. ``* / %``
    8. unary ``- + !``
    9. postfix ``.name`` and ``[expr]``
    10. literals, names, ``( … )``

Calls are rejected: ``name(`` raises ExpressionError, as does any
character outside the grammar.
"""

from __future__ import annotations

import re
from functools import lru_cache

from bladehtml._types import Token, TokenType
from bladehtml.environment.exceptions import ExpressionError
from bladehtml.nodes.expressions import (
    BinOp,
    BoolOp,
    Compare,
    CondExpr,
    Const,
    Expr,
    Fallback,
    Getattr,
    Getitem,
    Name,
    UnaryOp,
)

_TOKEN_RE = re.compile(
    r"""
    (?P<ws>\s+)
  | (?P<number>\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)
  | (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<name>\$?[A-Za-z_][A-Za-z0-9_]*)
  | (?P<operator>===|!==|==|!=|<=|>=|&&|\|\||[<>+\-*/%!])
  | (?P<punct>[()\[\].,?:])
    """,
    re.VERBOSE | re.DOTALL,
)

_PUNCT_TYPES = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ".": TokenType.DOT,
    ",": TokenType.COMMA,
    "?": TokenType.QUESTION,
    ":": TokenType.COLON,
}

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "b": "\b", "f": "\f", "v": "\v"}

KEYWORD_CONSTANTS: dict[str, bool | None] = {
    "true": True,
    "True": True,
    "false": False,
    "False": False,
    "null": None,
    "None": None,
    "undefined": None,
}

_COMPARE_OPS = frozenset({"==", "!=", "===", "!==", "<", "<=", ">", ">="})


def tokenize(source: str) -> list[Token]:
    """Split expression source into tokens, ending with an EOF token."""
    tokens: list[Token] = []
    pos = 0
    length = len(source)
    while pos < length:
        match = _TOKEN_RE.match(source, pos)
        if match is None:
            raise ExpressionError(f"Unexpected character {source[pos]!r} at {pos} in {source!r}")
        kind = match.lastgroup
        text = match.group()
        if kind == "number":
            tokens.append(Token(TokenType.NUMBER, text, 1, pos))
        elif kind == "string":
            tokens.append(Token(TokenType.STRING, _unquote(text), 1, pos))
        elif kind == "name":
            tokens.append(Token(TokenType.NAME, text.lstrip("$"), 1, pos))
        elif kind == "operator":
            tokens.append(Token(TokenType.OPERATOR, text, 1, pos))
        elif kind == "punct":
            tokens.append(Token(_PUNCT_TYPES[text], text, 1, pos))
        pos = match.end()
    tokens.append(Token(TokenType.EOF, "", 1, length))
    return tokens


def _unquote(text: str) -> str:
    body = text[1:-1]
    if "\\" not in body:
        return body
    out: list[str] = []
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\" and i + 1 < len(body):
            nxt = body[i + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            i += 2
            continue
        out.append(char)
        i += 1
    return "".join(out)


class ExpressionParser:
    """Recursive-descent parser over a token list.

    Use ``parse_expression()`` rather than instantiating directly; it caches
    results by source text.
    """

    __slots__ = ("_pos", "_source", "_tokens")

    def __init__(self, source: str):
        self._source = source
        self._tokens = tokenize(source)
        self._pos = 0

    # -- navigation --------------------------------------------------------

    @property
    def _current(self) -> Token:
        return self._tokens[self._pos]

    def _advance(self) -> Token:
        token = self._tokens[self._pos]
        if token.type != TokenType.EOF:
            self._pos += 1
        return token

    def _match(self, type_: TokenType, value: str | None = None) -> bool:
        token = self._current
        return token.type == type_ and (value is None or token.value == value)

    def _match_keyword(self, word: str) -> bool:
        return self._match(TokenType.NAME, word)

    def _expect(self, type_: TokenType) -> Token:
        if not self._match(type_):
            raise self._error(f"Expected {type_.value}, got {self._current.value or 'end of expression'!r}")
        return self._advance()

    def _error(self, message: str) -> ExpressionError:
        return ExpressionError(f"{message} in {self._source!r}")

    # -- grammar -----------------------------------------------------------

    def parse(self) -> Expr:
        if self._match(TokenType.EOF):
            raise self._error("Empty expression")
        expr = self._parse_ternary()
        if not self._match(TokenType.EOF):
            raise self._error(f"Unexpected {self._current.value!r}")
        return expr

    def _parse_ternary(self) -> Expr:
        test = self._parse_or()
        if not self._match(TokenType.QUESTION):
            return test
        self._advance()
        if_true = self._parse_ternary()
        self._expect(TokenType.COLON)
        if_false = self._parse_ternary()
        return CondExpr(test.lineno, test.col_offset, test, if_true, if_false)

    def _parse_or(self) -> Expr:
        left = self._parse_and()
        while True:
            if self._match(TokenType.OPERATOR, "||"):
                self._advance()
                right = self._parse_and()
                left = Fallback(left.lineno, left.col_offset, left, right)
            elif self._match_keyword("or"):
                self._advance()
                right = self._parse_and()
                left = BoolOp(left.lineno, left.col_offset, "or", (left, right))
            else:
                return left

    def _parse_and(self) -> Expr:
        values = [self._parse_not()]
        while self._match(TokenType.OPERATOR, "&&") or self._match_keyword("and"):
            self._advance()
            values.append(self._parse_not())
        if len(values) == 1:
            return values[0]
        return BoolOp(values[0].lineno, values[0].col_offset, "and", tuple(values))

    def _parse_not(self) -> Expr:
        if self._match_keyword("not"):
            start = self._advance()
            operand = self._parse_not()
            return UnaryOp(start.lineno, start.col_offset, "not", operand)
        return self._parse_compare()

    def _parse_compare(self) -> Expr:
        left = self._parse_additive()
        while self._current.type == TokenType.OPERATOR and self._current.value in _COMPARE_OPS:
            op = self._advance().value
            right = self._parse_additive()
            left = Compare(left.lineno, left.col_offset, op, left, right)
        return left

    def _parse_additive(self) -> Expr:
        left = self._parse_multiplicative()
        while self._match(TokenType.OPERATOR, "+") or self._match(TokenType.OPERATOR, "-"):
            op = self._advance().value
            right = self._parse_multiplicative()
            left = BinOp(left.lineno, left.col_offset, op, left, right)
        return left

    def _parse_multiplicative(self) -> Expr:
        left = self._parse_unary()
        while self._current.type == TokenType.OPERATOR and self._current.value in ("*", "/", "%"):
            op = self._advance().value
            right = self._parse_unary()
            left = BinOp(left.lineno, left.col_offset, op, left, right)
        return left

    def _parse_unary(self) -> Expr:
        token = self._current
        if token.type == TokenType.OPERATOR and token.value in ("-", "+", "!"):
            self._advance()
            operand = self._parse_unary()
            op = "not" if token.value == "!" else token.value
            return UnaryOp(token.lineno, token.col_offset, op, operand)
        return self._parse_postfix()

    def _parse_postfix(self) -> Expr:
        expr = self._parse_primary()
        while True:
            if self._match(TokenType.DOT):
                self._advance()
                token = self._advance()
                if token.type == TokenType.NAME:
                    expr = Getattr(expr.lineno, expr.col_offset, expr, token.value)
                elif token.type == TokenType.NUMBER and token.value.isdigit():
                    key = Const(token.lineno, token.col_offset, int(token.value))
                    expr = Getitem(expr.lineno, expr.col_offset, expr, key)
                else:
                    raise self._error("Expected attribute name after '.'")
            elif self._match(TokenType.LBRACKET):
                self._advance()
                key = self._parse_ternary()
                self._expect(TokenType.RBRACKET)
                expr = Getitem(expr.lineno, expr.col_offset, expr, key)
            elif self._match(TokenType.LPAREN):
                raise self._error("Function calls are not supported")
            else:
                return expr

    def _parse_primary(self) -> Expr:
        token = self._current

        if token.type == TokenType.NUMBER:
            self._advance()
            text = token.value
            value: int | float = float(text) if any(c in text for c in ".eE") else int(text)
            return Const(token.lineno, token.col_offset, value)

        if token.type == TokenType.STRING:
            self._advance()
            return Const(token.lineno, token.col_offset, token.value)

        if token.type == TokenType.NAME:
            self._advance()
            if token.value in KEYWORD_CONSTANTS:
                return Const(token.lineno, token.col_offset, KEYWORD_CONSTANTS[token.value])
            return Name(token.lineno, token.col_offset, token.value)

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_ternary()
            self._expect(TokenType.RPAREN)
            return expr

        raise self._error(f"Unexpected {token.value or 'end of expression'!r}")


@lru_cache(maxsize=1024)
def parse_expression(source: str) -> Expr:
    """Compile expression source into a node tree.

    Results are cached by the exact source text.

    Raises:
        ExpressionError: Source is outside the expression grammar
    """
    return ExpressionParser(source.strip()).parse()
