"""
LOCUS - Location Utilities for Shipped resources
Location Resolver

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

Finds executables, libraries, resource files and module descriptors
relative to wherever the application happens to be installed.

Resource lookup order (first existing path wins):

1. the module directory (or the directory of the library owning the
   caller's symbol)
2. every entry ``<p>`` of the ``LOCUS_PATH`` environment variable, first
   as ``<p>/<rel>`` and then as ``<p>/<leaf>/<rel>``
3. the standard system directories joined with the caller's
   ``system_dir`` (``/usr/share/<system_dir>/<rel>`` …)

Every query returns ``""`` (or an empty descriptor) instead of raising.
"""

import logging
import os
import sys
import threading
from typing import Iterable, List, NamedTuple, Optional, Sequence

from .identity import LazyIdentity, SystemIdentity
from .modinfo import ModuleDescriptor, modinfo_filename
from .path_utils import join_path, leaf_name, normalize_path, parent_dir, split_search_path
from .platform_providers import PlatformPathProvider, Symbol, get_provider

logger = logging.getLogger(__name__)

DEFAULT_ENV_VAR = "LOCUS_PATH"
DEFAULT_POSIX_SYSTEM_DIRS = ("/usr/share", "/usr/local/share")
DEFAULT_WINDOWS_SYSTEM_DIRS = ("${ProgramFiles}",)
_PROGRAM_FILES_FALLBACK = "C:/Program Files"


class SearchCandidate(NamedTuple):
    """A base directory and the relative path expected beneath it."""

    base_dir: str
    rel_path: str

    @property
    def full_path(self) -> str:
        return join_path(self.base_dir, self.rel_path)


def default_system_dirs(platform: Optional[str] = None) -> List[str]:
    """Return the standard installation roots for *platform*.

    ``${ProgramFiles}`` expands to the ``ProgramFiles`` environment
    variable at call time.
    """
    platform = platform or sys.platform
    if platform == "win32":
        return expand_system_dirs(DEFAULT_WINDOWS_SYSTEM_DIRS)
    return list(DEFAULT_POSIX_SYSTEM_DIRS)


def expand_system_dirs(dirs: Iterable[str]) -> List[str]:
    """Expand ``${ProgramFiles}`` and normalise every entry."""
    program_files = os.environ.get("ProgramFiles") or _PROGRAM_FILES_FALLBACK
    expanded = []
    for entry in dirs:
        entry = normalize_path(entry.replace("${ProgramFiles}", program_files))
        if entry:
            expanded.append(entry)
    return expanded


def path_exists(path: str) -> bool:
    """Return ``True`` if *path* is an existing file or directory."""
    return os.path.exists(path)


class Locator:
    """Resolves executable, library and resource locations.

    Args:
        provider:    Platform path provider.  Defaults to the provider for
                     the running OS (see :func:`get_provider`).
        anchor:      Symbol owned by the calling library.  Set this when the
                     code runs as a plugin inside another executable so the
                     module path is the plugin's directory.
        env_var:     Name of the search-path environment variable.
        system_dirs: Standard installation roots searched last.  ``None``
                     uses :func:`default_system_dirs`.
    """

    def __init__(
        self,
        provider: Optional[PlatformPathProvider] = None,
        anchor: Optional[Symbol] = None,
        env_var: str = DEFAULT_ENV_VAR,
        system_dirs: Optional[Sequence[str]] = None,
    ):
        self.provider = provider if provider is not None else get_provider()
        self.env_var = env_var
        self._system_dirs = list(system_dirs) if system_dirs is not None else None
        self._identity = LazyIdentity(self.provider, anchor)

    @classmethod
    def from_config(cls, config: dict, anchor: Optional[Symbol] = None) -> "Locator":
        """Build a locator from the ``search`` section of a LOCUS config."""
        search = config.get("search", {})
        dirs_cfg = search.get("system_dirs", {})
        key = "windows" if sys.platform == "win32" else "posix"
        system_dirs = dirs_cfg.get(key)
        return cls(
            provider=get_provider(search.get("provider", "auto")),
            anchor=anchor,
            env_var=search.get("env_var", DEFAULT_ENV_VAR) or DEFAULT_ENV_VAR,
            system_dirs=expand_system_dirs(system_dirs) if system_dirs is not None else None,
        )

    # -- System identity ----------------------------------------------------
    @property
    def identity(self) -> SystemIdentity:
        return self._identity.get()

    def executable_path(self) -> str:
        """Path of the running executable, including the filename."""
        return self.identity.executable_path

    def bundle_path(self) -> str:
        """Root of the macOS ``.app`` bundle, or ``""``."""
        return self.identity.bundle_path

    def module_path(self) -> str:
        """Directory of the executable (or of the anchoring library)."""
        return self.identity.module_path

    def library_path(self, symbol: Optional[Symbol]) -> str:
        """Path of the loaded library that owns *symbol*, or ``""``."""
        if symbol is None:
            return ""
        return normalize_path(self.provider.library_path(symbol.address))

    # -- Search configuration -----------------------------------------------
    @property
    def system_dirs(self) -> List[str]:
        if self._system_dirs is None:
            return default_system_dirs()
        return list(self._system_dirs)

    def search_path_entries(self) -> List[str]:
        """Entries of the search-path environment variable, read now."""
        return split_search_path(os.environ.get(self.env_var, ""))

    # -- Resolution ---------------------------------------------------------
    def _module_dir(self, symbol: Optional[Symbol]) -> str:
        if symbol is not None:
            return parent_dir(self.library_path(symbol))
        return self.module_path()

    def candidates(
        self,
        rel_path: str,
        system_dir: str = "",
        symbol: Optional[Symbol] = None,
    ) -> List[SearchCandidate]:
        """Return the ordered search candidates for *rel_path*.

        ``system_dir`` only shapes the standard-directory candidates.
        """
        rel_path = normalize_path(rel_path)
        system_dir = normalize_path(system_dir)
        result: List[SearchCandidate] = []

        module_dir = self._module_dir(symbol)
        if module_dir:
            result.append(SearchCandidate(module_dir, rel_path))

        leaf = leaf_name(rel_path)
        for entry in self.search_path_entries():
            result.append(SearchCandidate(entry, rel_path))
            if leaf:
                result.append(SearchCandidate(join_path(entry, leaf), rel_path))

        for standard_dir in self.system_dirs:
            result.append(SearchCandidate(join_path(standard_dir, system_dir), rel_path))
        return result

    def _first_existing(self, candidates: Iterable[SearchCandidate], exists=path_exists) -> str:
        for candidate in candidates:
            if exists(candidate.full_path):
                logger.debug("Found %s under %s", candidate.rel_path, candidate.base_dir)
                return candidate.base_dir
        return ""

    def locate_path(
        self,
        rel_path: str,
        system_dir: str = "",
        symbol: Optional[Symbol] = None,
    ) -> str:
        """Return the base directory from which *rel_path* exists.

        Args:
            rel_path:   Relative path of a file or directory, e.g.
                        ``"data/logo.png"``.
            system_dir: Subdirectory used under the standard system
                        directories, e.g. ``"myapp"``.
            symbol:     Symbol of the calling library.  When given, the
                        library's directory replaces the module path.

        Returns:
            The base directory (``base + "/" + rel_path`` exists) or ``""``.
        """
        if not normalize_path(rel_path):
            return ""
        found = self._first_existing(self.candidates(rel_path, system_dir, symbol))
        if not found:
            logger.debug("Could not locate %r (system_dir=%r)", rel_path, system_dir)
        return found

    def find_module(self, name: str) -> ModuleDescriptor:
        """Locate and load ``<name>.modinfo``.

        Searches the module directory, then ``<p>/<name>.modinfo`` and
        ``<p>/<name>/<name>.modinfo`` for every search-path entry, then
        ``<s>/<name>.modinfo`` and ``<s>/<name>/<name>.modinfo`` for every
        standard directory.  Only regular files count as
        descriptors.  Returns an empty descriptor if nothing is
        found or the file cannot be parsed.
        """
        descriptor = ModuleDescriptor()
        if not name:
            return descriptor
        filename = modinfo_filename(name)

        candidates: List[SearchCandidate] = []
        module_dir = self.module_path()
        if module_dir:
            candidates.append(SearchCandidate(module_dir, filename))
        for entry in self.search_path_entries():
            candidates.append(SearchCandidate(entry, filename))
            candidates.append(SearchCandidate(join_path(entry, name), filename))
        for standard_dir in self.system_dirs:
            candidates.append(SearchCandidate(standard_dir, filename))
            candidates.append(SearchCandidate(join_path(standard_dir, name), filename))

        base_dir = self._first_existing(candidates, os.path.isfile)
        if not base_dir:
            logger.info("Module '%s' not found", name)
            return descriptor
        descriptor.load(join_path(base_dir, filename))
        return descriptor


# ---------------------------------------------------------------------------
# Process-wide default locator
# ---------------------------------------------------------------------------
_lock = threading.Lock()
_default_locator: Optional[Locator] = None


def get_default_locator() -> Locator:
    """Return the shared locator, creating it on first use."""
    global _default_locator
    with _lock:
        if _default_locator is None:
            _default_locator = Locator()
        return _default_locator


def set_default_locator(locator: Optional[Locator]) -> None:
    """Replace the shared locator (``None`` recreates it on next use)."""
    global _default_locator
    with _lock:
        _default_locator = locator


def get_executable_path() -> str:
    return get_default_locator().executable_path()


def get_bundle_path() -> str:
    return get_default_locator().bundle_path()


def get_module_path() -> str:
    return get_default_locator().module_path()


def get_library_path(symbol) -> str:
    """Path of the library owning *symbol* (a :class:`Symbol`, ctypes object or address)."""
    return get_default_locator().library_path(Symbol.of(symbol))


def locate_path(rel_path: str, system_dir: str = "", symbol=None) -> str:
    """Module-level shortcut for :meth:`Locator.locate_path`."""
    return get_default_locator().locate_path(rel_path, system_dir, Symbol.of(symbol))


def find_module(name: str) -> ModuleDescriptor:
    """Module-level shortcut for :meth:`Locator.find_module`."""
    return get_default_locator().find_module(name)
