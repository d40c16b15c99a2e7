"""Exceptions for the bladehtml template system.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Unknown template, or parent layout missing
├── AliasNotFoundError        # ``namespace::name`` with unregistered namespace
├── ComponentNotFoundError    # Environment.render_component() on unknown name
├── TemplateSyntaxError       # Malformed directive structure (strict mode)
└── TemplateRuntimeError      # Render-time failure with context
    └── RenderDepthError      # include/extends/component recursion bound hit

ExpressionError is not a TemplateError: it never leaves the
expression evaluator, which converts it into an empty value.

Failure Policy:
Only the fatal class propagates out of ``Environment.render()``: missing
templates, missing aliases, missing parent layouts and recursion overflow.
Everything else (unknown component, missing include, directive exceptions,
expression errors) degrades to a placeholder comment or empty string so a
single bad fragment never aborts the page.

Example:
    ```
    B-TPL-001: Template 'pages.hme' not found. Did you mean 'pages.home'?
      Docs: https://bladehtml.readthedocs.io/en/latest/errors.html#b-tpl-001
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from bladehtml.environment import terminal

_DOCS_BASE = "https://bladehtml.readthedocs.io/en/latest/errors.html"


class ErrorCode(Enum):
    """Searchable error codes.

    Format: B-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), RUN (runtime), TPL (template resolution),
    CMP (components)
    """

    # Parser errors (B-PAR-xxx)
    UNCLOSED_BLOCK = "B-PAR-001"
    UNEXPECTED_DIRECTIVE = "B-PAR-002"
    INVALID_ARGUMENTS = "B-PAR-003"

    # Runtime errors (B-RUN-xxx)
    RUNTIME_ERROR = "B-RUN-001"
    RENDER_DEPTH = "B-RUN-002"

    # Template resolution errors (B-TPL-xxx)
    TEMPLATE_NOT_FOUND = "B-TPL-001"
    ALIAS_NOT_FOUND = "B-TPL-002"
    PARENT_NOT_FOUND = "B-TPL-003"

    # Component errors (B-CMP-xxx)
    COMPONENT_NOT_FOUND = "B-CMP-001"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "RUN": "runtime",
            "TPL": "template",
            "CMP": "component",
        }.get(prefix, "unknown")


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template source lines around an error.

    Attributes:
        lines: (line_number, line_content) pairs around the error
        error_line: 1-based line number of the error
        column: Optional column for a caret pointer
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int
    column: int | None = None

    def format(self) -> str:
        parts: list[str] = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        if self.column is not None:
            parts.append(f"{terminal.dim_text('   |')}  {' ' * self.column}^")
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(
    source: str,
    error_line: int,
    *,
    context_lines: int = 2,
    column: int | None = None,
) -> SourceSnippet:
    """Collect ``context_lines`` lines either side of ``error_line``."""
    first = max(1, error_line - context_lines)
    window = source.splitlines()[first - 1 : error_line + context_lines]
    return SourceSnippet(
        lines=tuple(enumerate(window, start=first)),
        error_line=error_line,
        column=column,
    )


class TemplateError(Exception):
    """Base exception for all bladehtml template errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format as ``CODE: message`` plus a docs link, without traceback noise."""
        message = str(self)
        if self.code is None:
            return message
        if self.code.value not in message:
            message = terminal.format_error_header(self.code.value, message)
        return f"{message}\n  {terminal.dim_text('Docs:')} {self.code.docs_url}"


class TemplateNotFoundError(TemplateError):
    """No registered template, loader, or alias target provides the name.

    Example:
        >>> env.render("missing.page")
        TemplateNotFoundError: Template 'missing.page' not found

    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, message: str, *, name: str | None = None):
        self.name = name
        super().__init__(message)


class AliasNotFoundError(TemplateError):
    """A ``namespace::name`` reference used an unregistered namespace."""

    code: ErrorCode | None = ErrorCode.ALIAS_NOT_FOUND

    def __init__(self, namespace: str, reference: str):
        self.namespace = namespace
        self.reference = reference
        super().__init__(
            f"Alias '{namespace}' is not registered (while resolving '{reference}'). "
            f"Register it with env.register_alias({namespace!r}, target)"
        )


class ComponentNotFoundError(TemplateError):
    """Raised by ``Environment.render_component()`` for unknown components.

    Inside templates an unknown component renders a placeholder comment
    instead.
    """

    code: ErrorCode | None = ErrorCode.COMPONENT_NOT_FOUND

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Component '{name}' not found")


class TemplateSyntaxError(TemplateError):
    """Malformed directive structure.

    Only raised when the environment is created with ``strict=True``;
    otherwise malformed directives degrade to literal text.
    """

    code: ErrorCode | None = ErrorCode.UNCLOSED_BLOCK

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        source: str | None = None,
        col_offset: int | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.source = source
        self.col_offset = col_offset
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        header = f"Syntax Error: {self.message}\n  --> {terminal.location(location)}"
        if self.source and self.lineno:
            snippet = build_source_snippet(self.source, self.lineno, column=self.col_offset)
            return f"{header}\n{snippet.format()}"
        return header


class TemplateRuntimeError(TemplateError):
    """Render-time error with template context.

    Attributes:
        message: Error description
        template_name: Template being rendered
        suggestion: Actionable fix suggestion
        template_stack: Chain of template names leading to the error
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        template_name: str | None = None,
        suggestion: str | None = None,
        template_stack: list[str] | None = None,
    ):
        self.message = message
        self.template_name = template_name
        self.suggestion = suggestion
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]
        if self.template_name:
            parts.append(f"  Location: {terminal.location(self.template_name)}")
        if self.template_stack:
            parts.append(terminal.dim_text("  Template stack:"))
            parts.extend(f"    • {terminal.location(name)}" for name in self.template_stack)
        if self.suggestion:
            parts.append(f"  {terminal.hint('Suggestion:')} {self.suggestion}")
        return "\n".join(parts)


class RenderDepthError(TemplateRuntimeError):
    """Nested include/extends/component/yield rendering exceeded ``max_depth``.

    Propagates through every soft-failure handler so a reference cycle
    surfaces as an error instead of a stack overflow or a page of
    placeholders.
    """

    code: ErrorCode | None = ErrorCode.RENDER_DEPTH


class ExpressionError(Exception):
    """Internal expression parse/evaluation failure.

    Caught by ``bladehtml.expressions.evaluate()``; never reaches callers.
    """
