"""Shared fixtures for the LOCUS test-suite.

The :class:`FakeProvider` stands in for the OS queries so the location
logic can be exercised against a temporary directory tree.
"""

import sys
from pathlib import Path

import pytest

# Ensure the locus package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from locus.locator import Locator, set_default_locator
from locus.path_utils import normalize_path
from locus.platform_providers import PlatformPathProvider


class FakeProvider(PlatformPathProvider):
    """Provider returning canned paths and counting executable queries."""

    name = "fake"

    def __init__(self, executable: str = "", libraries: dict = None):
        self.executable = executable
        self.libraries = dict(libraries or {})
        self.calls = 0

    def executable_path(self) -> str:
        self.calls += 1
        return self.executable

    def library_path(self, address: int) -> str:
        return self.libraries.get(address, "")


def unified(path) -> str:
    """Forward-slash form of a ``Path`` for comparisons."""
    return normalize_path(str(path))


@pytest.fixture
def app_dir(tmp_path):
    """Directory holding the (fake) application executable."""
    path = tmp_path / "app"
    path.mkdir()
    return path


@pytest.fixture
def share_dir(tmp_path):
    """Stand-in for ``/usr/share``."""
    path = tmp_path / "share"
    path.mkdir()
    return path


@pytest.fixture
def make_locator(app_dir, share_dir, monkeypatch):
    """Factory for locators rooted in the temporary tree.

    ``LOCUS_PATH`` is cleared so the developer's environment cannot leak
    into the search.
    """
    monkeypatch.delenv("LOCUS_PATH", raising=False)

    def _make(libraries=None, anchor=None, system_dirs=None):
        provider = FakeProvider(str(app_dir / "myapp"), libraries)
        if system_dirs is None:
            system_dirs = [unified(share_dir)]
        return Locator(provider=provider, anchor=anchor, system_dirs=system_dirs)

    return _make


@pytest.fixture
def search_path(monkeypatch):
    """Set ``LOCUS_PATH`` from a list of directories."""
    import os

    def _set(*dirs):
        monkeypatch.setenv("LOCUS_PATH", os.pathsep.join(str(d) for d in dirs))

    return _set


@pytest.fixture
def reset_default_locator():
    """Drop any default locator installed by a test."""
    yield set_default_locator
    set_default_locator(None)
