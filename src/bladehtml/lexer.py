"""Template lexer: source text → flat token stream.

Produces four kinds of tokens:

- ``TEXT``: literal text (also ``@@`` → ``@`` and ``@{{ … }}`` verbatim)
- ``ECHO``: ``{{ expr }}`` (escaped interpolation)
- ``RAW_ECHO``: ``{!! expr !!}`` (unescaped interpolation)
- ``DIRECTIVE``: ``@name(args)`` or a bare closer such as ``@endif``

``{{-- comment --}}`` is dropped entirely.

Directive Recognition:
``@`` followed by an identifier and ``(`` (spaces allowed in between) is a
directive with arguments; the argument text runs to the matching ``)``,
skipping parentheses inside quoted strings. A bare ``@`` that starts one of
the known closing keywords (``@else``, ``@endif`` …) is a bare directive even
when text follows immediately, so ``@if(a)X@elseY@endif`` works. Anything
else (email addresses, CSS at-rules without a registered directive) stays
literal text.

The lexer never raises: unterminated ``{{``, ``{!!`` or ``(`` fall back to
literal text.

"""

from __future__ import annotations

import re
from collections.abc import Iterator

from bladehtml._types import Token, TokenType

# Longest first so ``@endforeach`` is not read as ``@endfor`` + "each"
BARE_DIRECTIVES: tuple[str, ...] = (
    "endcomponent",
    "endforeach",
    "endsection",
    "endslot",
    "endfor",
    "endif",
    "else",
)

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# A template reference such as ``layouts.app`` or ``admin::users.index``
TEMPLATE_NAME_RE = re.compile(r"(?:[\w\-]+::)?[\w.\-/]+")
_PAREN_GAP_RE = re.compile(r"[ \t]*\(")
# Rest of an email domain after a bare keyword, as in ``me@else.com``
_DOMAIN_TAIL_RE = re.compile(r"[\w-]*\.[A-Za-z]")


class Lexer:
    """Tokenize template source.

    Example:
        >>> [t.type.name for t in Lexer("Hi {{ name }}@if(x)!@endif").tokenize()]
        ['TEXT', 'ECHO', 'DIRECTIVE', 'TEXT', 'DIRECTIVE', 'EOF']

    Thread-Safety:
        Instances hold per-call position state; create one per source.
    """

    __slots__ = ("_line_start", "_lineno", "_pos", "_scanned", "_source", "_text_start")

    def __init__(self, source: str):
        self._source = source
        self._pos = 0
        self._text_start = 0
        # Incremental line tracking; token starts are requested in order
        self._scanned = 0
        self._lineno = 1
        self._line_start = 0

    def tokenize(self) -> Iterator[Token]:
        source = self._source
        length = len(source)

        while self._pos < length:
            char = source[self._pos]
            if char == "{":
                yield from self._lex_brace()
            elif char == "@":
                yield from self._lex_at()
            else:
                self._pos += 1

        yield from self._flush_text(length)
        lineno, col = self._location(length)
        yield Token(TokenType.EOF, "", lineno, col)

    # -- helpers -----------------------------------------------------------

    def _location(self, index: int) -> tuple[int, int]:
        if index > self._scanned:
            self._lineno += self._source.count("\n", self._scanned, index)
            newline = self._source.rfind("\n", self._scanned, index)
            if newline != -1:
                self._line_start = newline + 1
            self._scanned = index
        return self._lineno, index - self._line_start

    def _flush_text(self, end: int) -> Iterator[Token]:
        if end > self._text_start:
            text = self._source[self._text_start:end]
            lineno, col = self._location(self._text_start)
            yield Token(TokenType.TEXT, text, lineno, col, raw=text)
        self._text_start = end

    def _emit(self, type_: TokenType, value: str, start: int, end: int, args: str | None = None) -> Iterator[Token]:
        yield from self._flush_text(start)
        lineno, col = self._location(start)
        yield Token(type_, value, lineno, col, args=args, raw=self._source[start:end])
        self._pos = end
        self._text_start = end

    def _lex_brace(self) -> Iterator[Token]:
        source = self._source
        start = self._pos

        if source.startswith("{{--", start):
            end = source.find("--}}", start + 4)
            if end == -1:
                self._pos += 1
                return
            yield from self._flush_text(start)
            self._pos = self._text_start = end + 4
            return

        if source.startswith("{!!", start):
            end = find_closing(source, start + 3, "!!}")
            if end == -1:
                self._pos += 1
                return
            yield from self._emit(TokenType.RAW_ECHO, source[start + 3:end].strip(), start, end + 3)
            return

        if source.startswith("{{", start):
            end = find_closing(source, start + 2, "}}")
            if end == -1:
                self._pos += 2
                return
            yield from self._emit(TokenType.ECHO, source[start + 2:end].strip(), start, end + 2)
            return

        self._pos += 1

    def _in_address(self, start: int, keyword: str) -> bool:
        """``@keyword`` glued to a word on the left and a domain on the right."""
        source = self._source
        if start == 0 or not (source[start - 1].isalnum() or source[start - 1] == "_"):
            return False
        return _DOMAIN_TAIL_RE.match(source, start + 1 + len(keyword)) is not None

    def _lex_at(self) -> Iterator[Token]:
        source = self._source
        start = self._pos

        if source.startswith("@@", start):
            yield from self._emit(TokenType.TEXT, "@", start, start + 2)
            return

        if source.startswith("@{{", start):
            end = find_closing(source, start + 3, "}}")
            stop = start + 3 if end == -1 else end + 2
            yield from self._emit(TokenType.TEXT, source[start + 1:stop], start, stop)
            return

        ident = _IDENT_RE.match(source, start + 1)
        if ident:
            gap = None
            if ident.group() not in BARE_DIRECTIVES:
                gap = _PAREN_GAP_RE.match(source, ident.end())
            if gap:
                open_paren = gap.end() - 1
                close = find_matching_paren(source, open_paren)
                if close != -1:
                    yield from self._emit(
                        TokenType.DIRECTIVE,
                        ident.group(),
                        start,
                        close + 1,
                        args=source[open_paren + 1:close],
                    )
                    return

            for keyword in BARE_DIRECTIVES:
                if source.startswith(keyword, start + 1) and not self._in_address(start, keyword):
                    yield from self._emit(TokenType.DIRECTIVE, keyword, start, start + 1 + len(keyword))
                    return

        self._pos += 1


def find_closing(source: str, pos: int, delimiter: str) -> int:
    """Index of ``delimiter`` at or after ``pos``, skipping quoted strings.

    Returns -1 when the delimiter never appears outside quotes.
    """
    quote: str | None = None
    length = len(source)
    i = pos
    while i < length:
        char = source[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif source.startswith(delimiter, i):
            return i
        i += 1
    return -1


def find_matching_paren(source: str, open_pos: int) -> int:
    """Index of the ``)`` matching the ``(`` at ``open_pos``, or -1.

    Nested parentheses are depth-counted; quoted strings are skipped.
    """
    depth = 0
    quote: str | None = None
    length = len(source)
    i = open_pos
    while i < length:
        char = source[i]
        if quote:
            if char == "\\":
                i += 2
                continue
            if char == quote:
                quote = None
        elif char in "'\"":
            quote = char
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1
