"""Environment, loaders, registries and errors for bladehtml."""

from bladehtml.environment.exceptions import (
    AliasNotFoundError,
    ComponentNotFoundError,
    ErrorCode,
    RenderDepthError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    build_source_snippet,
)
from bladehtml.environment.loaders import (
    ChoiceLoader,
    DictLoader,
    FileSystemLoader,
    FunctionLoader,
    Loader,
    PrefixLoader,
)
from bladehtml.environment.registry import (
    ComponentRegistry,
    DirectiveRegistry,
    Registry,
    TemplateRegistry,
)
from bladehtml.environment.core import Environment, is_template_name

__all__ = [
    "AliasNotFoundError",
    "ChoiceLoader",
    "ComponentNotFoundError",
    "ComponentRegistry",
    "DictLoader",
    "DirectiveRegistry",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "Loader",
    "PrefixLoader",
    "Registry",
    "RenderDepthError",
    "SourceSnippet",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "build_source_snippet",
    "is_template_name",
]
