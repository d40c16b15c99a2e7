"""Where template source comes from when the registry does not have it.

The Environment asks its loader (or the loader registered for a
``namespace::`` alias) for ``(source, filename)`` the first time a name is
rendered, then registers the source so later renders skip the loader.

Template names are dot-namespaced. On disk ``layouts.app`` lives at
``layouts/app.blade.html`` or ``layouts/app.html``.

Anything with ``get_source(name)`` and ``list_templates()`` can act as a
loader, for example a CMS table:

    ```python
    class PageTableLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            page = Page.objects.filter(slug=name).first()
            if page is None:
                raise TemplateNotFoundError(f"Template '{name}' not found", name=name)
            return page.markup, f"cms://{name}"

        def list_templates(self) -> list[str]:
            return list(Page.objects.values_list("slug", flat=True))
    ```

Loaders hold no per-render state and may be shared between environments.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from difflib import get_close_matches
from pathlib import Path
from typing import Protocol

from bladehtml.environment.exceptions import TemplateNotFoundError

DEFAULT_EXTENSIONS: tuple[str, ...] = (".blade.html", ".html")


class Loader(Protocol):
    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_templates(self) -> list[str]: ...


def name_to_paths(name: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> list[str]:
    """Relative file paths a dot-namespaced template name may live at.

    ``layouts.app`` → ``layouts/app.blade.html``, ``layouts/app.html``;
    the name itself is tried last so ``pages/home.html`` also works.
    """
    candidates = []
    if "/" not in name:
        stem = name.replace(".", "/")
        candidates.extend(stem + ext for ext in extensions)
    candidates.append(name)
    return candidates


def path_to_name(relative: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> str | None:
    """Inverse of ``name_to_paths`` for ``list_templates()``."""
    for ext in extensions:
        if relative.endswith(ext):
            return relative[: -len(ext)].replace("/", ".")
    return None


def _missing(name: str, detail: str = "", known: Iterable[str] = ()) -> TemplateNotFoundError:
    message = f"Template '{name}' not found"
    if detail:
        message += f" {detail}"
    close = get_close_matches(name, list(known), n=1, cutoff=0.6)
    if close:
        message += f". Did you mean '{close[0]}'?"
    return TemplateNotFoundError(message, name=name)


class FileSystemLoader:
    """Read templates from one or more directories, first match wins.

    Example:
        >>> loader = FileSystemLoader(["themes/custom/", "themes/default/"])
        >>> source, filename = loader.get_source("layouts.app")
        >>> filename
        'themes/custom/layouts/app.blade.html'

    Names containing ``..`` or starting with ``/`` are refused.
    """

    __slots__ = ("_encoding", "_extensions", "_paths")

    def __init__(
        self,
        paths: str | Path | Sequence[str | Path],
        encoding: str = "utf-8",
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
    ):
        roots = [paths] if isinstance(paths, (str, Path)) else paths
        self._paths = [Path(root) for root in roots]
        self._encoding = encoding
        self._extensions = tuple(extensions)

    @property
    def paths(self) -> list[Path]:
        return list(self._paths)

    def get_source(self, name: str) -> tuple[str, str]:
        if name.startswith("/") or ".." in Path(name).parts:
            raise _missing(name, "(outside the template directories)")

        candidates = name_to_paths(name, self._extensions)
        for root in self._paths:
            for relative in candidates:
                path = root / relative
                if path.is_file():
                    return path.read_text(self._encoding), str(path)

        searched = ", ".join(str(root) for root in self._paths)
        raise _missing(name, f"in {searched}")

    def list_templates(self) -> list[str]:
        """Dot-namespaced names of every template file under the roots."""
        found = {
            path_to_name(path.relative_to(root).as_posix(), self._extensions)
            for root in self._paths
            if root.is_dir()
            for path in root.rglob("*")
            if path.is_file()
        }
        found.discard(None)
        return sorted(found)


class DictLoader:
    """Serve templates from a name → source mapping.

    Example:
        >>> loader = DictLoader({
        ...     "layouts.app": "<main>@yield('content')</main>",
        ...     "pages.home": "@extends('layouts.app')@section('content')Hi@endsection",
        ... })
        >>> Environment(loader=loader).render("pages.home")
        '<main>Hi</main>'

    Unknown names raise ``TemplateNotFoundError`` with a close-match hint.
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: Mapping[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        try:
            return self._mapping[name], None
        except KeyError:
            raise _missing(name, known=self._mapping) from None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping)


class ChoiceLoader:
    """Ask each loader in turn; used for theme overrides over a base theme."""

    __slots__ = ("_loaders",)

    def __init__(self, loaders: Sequence[Loader]):
        self._loaders = list(loaders)

    def get_source(self, name: str) -> tuple[str, str | None]:
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                pass
        raise _missing(name, f"in any of {len(self._loaders)} loaders")

    def list_templates(self) -> list[str]:
        return sorted({name for loader in self._loaders for name in loader.list_templates()})


class PrefixLoader:
    """Route ``namespace::name`` to the loader registered for ``namespace``.

    ``Environment.register_alias()`` follows the same convention without
    needing a PrefixLoader.

    Example:
        >>> loader = PrefixLoader({
        ...     "admin": FileSystemLoader("templates/admin/"),
        ...     "mail": DictLoader({"welcome": "Hello {{ name }}"}),
        ... })
        >>> loader.get_source("mail::welcome")
        ('Hello {{ name }}', None)
    """

    __slots__ = ("_delimiter", "_mapping")

    def __init__(self, mapping: Mapping[str, Loader], delimiter: str = "::"):
        self._mapping = mapping
        self._delimiter = delimiter

    def get_source(self, name: str) -> tuple[str, str | None]:
        namespace, sep, rest = name.partition(self._delimiter)
        if not sep:
            raise _missing(name, f"(expected 'namespace{self._delimiter}name')")
        if namespace not in self._mapping:
            raise _missing(name, f"(namespaces: {', '.join(sorted(self._mapping))})")
        return self._mapping[namespace].get_source(rest)

    def list_templates(self) -> list[str]:
        return sorted(
            f"{namespace}{self._delimiter}{name}"
            for namespace, loader in self._mapping.items()
            for name in loader.list_templates()
        )


class FunctionLoader:
    """Adapt a lookup callable into a loader.

    The callable returns the source, a ``(source, filename)`` pair, or
    ``None`` for an unknown name:

        >>> env = Environment(loader=FunctionLoader(cms.lookup))
    """

    __slots__ = ("_load_func",)

    def __init__(self, load_func: Callable[[str], str | tuple[str, str | None] | None]):
        self._load_func = load_func

    def get_source(self, name: str) -> tuple[str, str | None]:
        result = self._load_func(name)
        if result is None:
            raise _missing(name)
        if isinstance(result, str):
            return result, None
        return result

    def list_templates(self) -> list[str]:
        return []
