"""
LOCUS - Location Utilities for Shipped resources
Path Utilities

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

String helpers that turn raw, native-format paths (backslashes on
Windows, trailing separators, ``PATH``-style lists) into the unified
forward-slash form returned by every LOCUS query.  Nothing in here
touches the filesystem.
"""

import os
from typing import List


def normalize_path(raw: str) -> str:
    """Return *raw* in unified form.

    * every ``\\`` becomes ``/``
    * trailing ``/`` characters are stripped

    The result is not canonicalised (``..`` and symlinks are kept) and
    its existence is not checked.  ``normalize_path("/")`` is ``""``.
    """
    if not raw:
        return ""
    return raw.replace("\\", "/").rstrip("/")


def join_path(base: str, *parts: str) -> str:
    """Join *base* and *parts* with ``/``, skipping empty parts."""
    pieces = [normalize_path(base)]
    for part in parts:
        part = normalize_path(part).lstrip("/")
        if part:
            pieces.append(part)
    return "/".join(pieces)


def parent_dir(path: str) -> str:
    """Return the directory portion of *path* (``""`` if there is none)."""
    path = normalize_path(path)
    head, sep, _ = path.rpartition("/")
    if not sep:
        return ""
    return head


def leaf_name(rel_path: str) -> str:
    """Return the last segment of *rel_path* without its extension.

    ``leaf_name("data/logo.png")`` is ``"logo"``; used for the
    ``<entry>/<leaf>/<rel_path>`` search form where a package is installed
    under a directory named after itself.
    """
    last = normalize_path(rel_path).rpartition("/")[2]
    stem, dot, _ = last.rpartition(".")
    if dot and stem:
        return stem
    return last


def split_search_path(value: str, separator: str = os.pathsep) -> List[str]:
    """Split a ``PATH``-style *value* into normalised, non-empty entries."""
    if not value:
        return []
    entries = []
    for entry in value.split(separator):
        entry = normalize_path(entry.strip())
        if entry:
            entries.append(entry)
    return entries


def bundle_from_executable(executable_path: str) -> str:
    """Return the ``.app`` bundle root if *executable_path* lives inside one.

    The executable of a macOS application bundle is located at
    ``<bundle>.app/Contents/MacOS/<name>``.  Any other layout yields ``""``.
    """
    parts = normalize_path(executable_path).split("/")
    if len(parts) < 4:
        return ""
    if parts[-2] != "MacOS" or parts[-3] != "Contents":
        return ""
    if not parts[-4].endswith(".app") or parts[-4] == ".app":
        return ""
    return "/".join(parts[:-3])
