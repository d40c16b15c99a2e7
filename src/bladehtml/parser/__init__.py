"""Template parser: tokens → immutable node tree."""

from bladehtml.parser.core import CLOSING_DIRECTIVES, Parser, parse

__all__ = ["CLOSING_DIRECTIVES", "Parser", "parse"]
