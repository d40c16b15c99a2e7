"""Custom directive handlers shipped with bladehtml."""

from bladehtml.directives.builtin import (
    BUILTIN_DIRECTIVES,
    class_directive,
    coerce_datetime,
    date_directive,
    dump_directive,
    json_directive,
    raw_directive,
    style_directive,
)

__all__ = [
    "BUILTIN_DIRECTIVES",
    "class_directive",
    "coerce_datetime",
    "date_directive",
    "dump_directive",
    "json_directive",
    "raw_directive",
    "style_directive",
]
