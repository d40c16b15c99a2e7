"""Fixtures shared by the runnable bladehtml examples.

Every example is a directory holding an ``app.py`` that builds an
Environment at import time and stores rendered output in module globals,
next to a ``test_<name>.py`` that asserts on those globals.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest


def load_example(app_path: Path) -> ModuleType:
    """Execute ``app_path`` as a throwaway module and return it.

    The module is never added to ``sys.modules``, so each load builds its
    registries from scratch.
    """
    spec = importlib.util.spec_from_file_location(f"bladehtml_example_{app_path.parent.name}", app_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load example app at {app_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_dir(request: pytest.FixtureRequest) -> Path:
    """Directory of the example whose test is running."""
    return Path(request.path).parent


@pytest.fixture
def example_app(example_dir: Path) -> ModuleType:
    """The sibling ``app.py``, freshly executed."""
    return load_example(example_dir / "app.py")
