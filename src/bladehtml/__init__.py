"""bladehtml: directive-annotated HTML templates for Python.

Literal text interleaved with ``{{ interpolation }}``, control-flow
directives, layout inheritance and reusable components, rendered against a
data mapping. Expressions are a restricted data-query language, so template
authors can be less trusted than the host application.

Quickstart:
    >>> from bladehtml import Environment
    >>> env = Environment()
    >>> env.render("Hello, {{ name }}!", {"name": "World"})
    'Hello, World!'

Layouts:
    >>> env.register_template("layout", "<b>@yield('c', 'Def')</b>")
    >>> env.render("@extends('layout')@section('c')Hi@endsection")
    '<b>Hi</b>'

Components:
    >>> class Alert(Component):
    ...     template = '<div class="alert-{{ type }}">{{ content }}</div>'
    >>> env.register_component("alert", Alert)
    >>> env.render("@component('alert', {type: 'info'})Saved@endcomponent")
    '<div class="alert-info">Saved</div>'

Architecture:
Template Source → Lexer → Parser → node tree → Renderer → str

1. **Lexer**: splits source into text, interpolation and directive tokens
2. **Parser**: builds an immutable node tree in one recursive-descent pass
3. **Renderer**: resolves extends/sections/yields, walks blocks, includes,
   components and custom directives, then interpolates

Failure Model:
Missing templates, unregistered aliases and runaway recursion raise.
Missing includes or components, and failing components or directives,
render an HTML comment placeholder. Bad expressions render as empty text.

"""

from bladehtml._types import Token, TokenType
from bladehtml.environment import (
    AliasNotFoundError,
    ChoiceLoader,
    ComponentNotFoundError,
    DictLoader,
    Environment,
    ErrorCode,
    FileSystemLoader,
    FunctionLoader,
    PrefixLoader,
    RenderDepthError,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    build_source_snippet,
)
from bladehtml.analysis import DependencyAnalyzer, DependencyGraph
from bladehtml.components import Component, ComponentAdapter, TemplateComponent
from bladehtml.expressions import evaluate, evaluate_condition, evaluate_object
from bladehtml.render_context import RenderContext, get_render_context, render_context
from bladehtml.template import LoopContext, Template
from bladehtml.utils.html import Markup, html_escape

__version__ = "0.1.0"

__all__ = [
    "AliasNotFoundError",
    "ChoiceLoader",
    "Component",
    "ComponentAdapter",
    "ComponentNotFoundError",
    "DependencyAnalyzer",
    "DependencyGraph",
    "DictLoader",
    "Environment",
    "ErrorCode",
    "FileSystemLoader",
    "FunctionLoader",
    "LoopContext",
    "Markup",
    "PrefixLoader",
    "RenderContext",
    "RenderDepthError",
    "SourceSnippet",
    "Template",
    "TemplateComponent",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "__version__",
    "build_source_snippet",
    "evaluate",
    "evaluate_condition",
    "evaluate_object",
    "get_render_context",
    "html_escape",
    "render_context",
]
