"""
LOCUS - Location Utilities for Shipped resources
Module Descriptor Files

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

Reads and writes ``<name>.modinfo`` files – small ``key=value`` text
files that describe an installed module::

    # mymodule.modinfo
    name=mymodule
    version=1.2.0
    dataPath=${ModulePath}/data

``${ModulePath}`` inside a value is replaced with the directory that
contains the descriptor file.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from .path_utils import normalize_path, parent_dir

logger = logging.getLogger(__name__)

MODINFO_SUFFIX = ".modinfo"
MODULE_PATH_PLACEHOLDER = "${ModulePath}"


class ModinfoParseError(ValueError):
    """Raised when a descriptor file is not valid ``key=value`` text."""


def modinfo_filename(name: str) -> str:
    """Return the descriptor filename for module *name*."""
    return f"{name}{MODINFO_SUFFIX}"


def parse_modinfo(text: str) -> Dict[str, str]:
    """Parse descriptor *text* into a dictionary.

    Blank lines and lines starting with ``#`` are skipped.  Keys and
    values are stripped; a later duplicate key overrides an earlier one.

    Raises:
        ModinfoParseError: a non-comment line has no ``=`` or an empty key.
    """
    values: Dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ModinfoParseError(f"Line {lineno}: expected 'key=value', got {line!r}")
        values[key] = value.strip()
    return values


class ModuleDescriptor:
    """Key/value metadata about an installed module.

    A descriptor that was never successfully loaded is *empty*; that is
    the only signal :func:`locus.locator.find_module` gives for a module
    that could not be found.
    """

    def __init__(self, values: Optional[Dict[str, str]] = None, base_dir: str = ""):
        self._values: Dict[str, str] = dict(values or {})
        self.base_dir = normalize_path(base_dir)

    # -- Queries ------------------------------------------------------------
    def empty(self) -> bool:
        return not self._values

    @property
    def values(self) -> Dict[str, str]:
        """Copy of all key/value pairs."""
        return dict(self._values)

    def value(self, key: str, default: str = "") -> str:
        return self._values.get(key, default)

    def set_value(self, key: str, value: str) -> None:
        self._values[key] = value

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __bool__(self) -> bool:
        return not self.empty()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModuleDescriptor):
            return NotImplemented
        return self._values == other._values and self.base_dir == other.base_dir

    def __repr__(self) -> str:
        return f"ModuleDescriptor(base_dir={self.base_dir!r}, values={self._values!r})"

    # -- Persistence --------------------------------------------------------
    def load(self, path: "str | Path") -> bool:
        """Replace the contents with the descriptor file at *path*.

        On success the descriptor is anchored at the file's directory and
        ``True`` is returned.  Unreadable or malformed files leave the
        descriptor empty and return ``False``.
        """
        self._values = {}
        self.base_dir = ""
        try:
            text = Path(path).read_text(encoding="utf-8")
            values = parse_modinfo(text)
        except (OSError, UnicodeDecodeError, ModinfoParseError) as exc:
            logger.warning("Could not load module descriptor %s: %s", path, exc)
            return False

        base_dir = parent_dir(str(path))
        self._values = {
            key: value.replace(MODULE_PATH_PLACEHOLDER, base_dir)
            for key, value in values.items()
        }
        self.base_dir = base_dir
        logger.debug("Loaded %d keys from %s", len(self._values), path)
        return True

    def save(self, path: "str | Path") -> bool:
        """Write the descriptor to *path* as sorted ``key=value`` lines."""
        lines = [f"{key}={self._values[key]}" for key in sorted(self._values)]
        try:
            Path(path).write_text("\n".join(lines) + "\n", encoding="utf-8")
        except OSError as exc:
            logger.error("Failed to save module descriptor %s: %s", path, exc)
            return False
        logger.info("Module descriptor saved to %s", path)
        return True

    def format(self) -> str:
        """Human-readable dump used by the ``locus find-module`` command."""
        if self.empty():
            return "(empty)"
        width = max(len(key) for key in self._values)
        lines = [f"base_dir: {self.base_dir}"]
        lines += [f"  {key:<{width}} = {self._values[key]}" for key in sorted(self._values)]
        return "\n".join(lines)
