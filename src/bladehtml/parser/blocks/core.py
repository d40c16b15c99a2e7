"""Block stack management shared by the block parsing mixins."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from bladehtml.environment.exceptions import ErrorCode, TemplateSyntaxError
from bladehtml.nodes import Data, Node

if TYPE_CHECKING:
    from bladehtml._types import Token

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BlockFrame:
    """An open block: its opening token and the directives that end it."""

    name: str
    token: Token
    closers: frozenset[str]


class BlockStackMixin:
    """Track open blocks and degrade malformed ones.

    Required Host Attributes:
        - _strict: bool
        - _name: str | None
        - _source: str | None
    """

    _block_stack: list[BlockFrame]
    _strict: bool
    _name: str | None
    _source: str | None

    def _push_block(self, token: Token, closers: frozenset[str]) -> None:
        self._block_stack.append(BlockFrame(token.value, token, closers))

    def _pop_block(self) -> BlockFrame:
        return self._block_stack.pop()

    def _closes_enclosing(self, name: str) -> bool:
        """True when ``name`` ends some block that is currently open."""
        return any(name in frame.closers for frame in self._block_stack)

    def _syntax_error(self, message: str, token: Token, code: ErrorCode) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            lineno=token.lineno,
            name=self._name,
            source=self._source,
            col_offset=token.col_offset,
            code=code,
        )

    def _unclosed(self, opener: Token, expected: str, parts: list[Node]) -> list[Node]:
        """Handle a block that reached EOF (or an outer closer) unterminated.

        Strict mode raises. Otherwise the opener is emitted as literal text
        and whatever was parsed as its body follows as ordinary siblings.
        """
        if self._strict:
            raise self._syntax_error(
                f"Unclosed @{opener.value}: expected @{expected}",
                opener,
                ErrorCode.UNCLOSED_BLOCK,
            )
        logger.debug(
            "Unclosed @%s at %s:%d rendered as text", opener.value, self._name or "<template>", opener.lineno
        )
        return [Data(opener.lineno, opener.col_offset, opener.raw), *parts]

    def _invalid_arguments(self, token: Token, expected: str) -> None:
        if self._strict:
            raise self._syntax_error(
                f"Invalid arguments for @{token.value}: expected {expected}",
                token,
                ErrorCode.INVALID_ARGUMENTS,
            )
        logger.debug("Invalid @%s(%s) rendered as text", token.value, token.args)
