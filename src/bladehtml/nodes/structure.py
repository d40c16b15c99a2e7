"""Template structure nodes: inheritance, includes, components."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from bladehtml.nodes.base import Node


@dataclass(frozen=True, slots=True)
class Extends(Node):
    """Template inheritance: ``@extends('layouts.app')``"""

    template: str


@dataclass(frozen=True, slots=True)
class Section(Node):
    """Named section captured for a parent layout: ``@section('content') … @endsection``"""

    name: str
    body: Sequence[Node]


@dataclass(frozen=True, slots=True)
class Yield(Node):
    """Section placeholder: ``@yield('content'[, 'default'])``"""

    name: str
    default: str | None = None


@dataclass(frozen=True, slots=True)
class Include(Node):
    """Include another template: ``@include('partials.nav'[, {active: 'home'}])``"""

    template: str
    data: str | None = None


@dataclass(frozen=True, slots=True)
class Slot(Node):
    """Named slot inside a component body: ``@slot('footer') … @endslot``"""

    name: str
    body: Sequence[Node]
    raw: str


@dataclass(frozen=True, slots=True)
class Component(Node):
    """Component invocation: ``@component('alert'[, {type: 'info'}]) … @endcomponent``

    ``content`` is the raw source of the default slot (the body minus any
    ``@slot`` blocks); it is handed to the component unrendered. ``body``
    keeps the parsed form for static analysis.
    """

    name: str
    props: str | None
    content: str
    body: Sequence[Node]
    slots: Sequence[Slot] = ()


@dataclass(frozen=True, slots=True)
class Template(Node):
    """Root node representing a complete template."""

    body: Sequence[Node]
    extends: Extends | None = None
