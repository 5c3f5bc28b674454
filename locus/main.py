"""
LOCUS - Location Utilities for Shipped resources
Command-Line Entry Point

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

``locus`` prints the locations LOCUS resolves for the current
environment.  Every command prints one result; an empty result exits
with status 1 so the tool can be used from shell scripts::

    $ locus locate data/logo.png --system-dir myapp
    /opt/myapp
"""

import argparse
import ctypes
import logging
import sys
from typing import List, Optional

from .config import load_config, setup_logging
from .locator import Locator
from .platform_providers import Symbol

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locus",
        description="Locate executables, libraries and resource files at runtime",
    )
    parser.add_argument("--config", default=None, help="Path to locus.yaml")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("exe", help="Print the path of the running executable")
    sub.add_parser("bundle", help="Print the application bundle root (macOS)")
    sub.add_parser("module-path", help="Print the module directory")

    loc_parser = sub.add_parser("locate", help="Locate a relative file or directory")
    loc_parser.add_argument("rel_path", help="Relative path, e.g. data/logo.png")
    loc_parser.add_argument(
        "--system-dir", default="", help="Subdirectory under the system install roots"
    )

    mod_parser = sub.add_parser("find-module", help="Find and print <name>.modinfo")
    mod_parser.add_argument("name", help="Module name")

    lib_parser = sub.add_parser("library", help="Print the library owning a symbol")
    lib_parser.add_argument("library", help="Shared library to load (name or path)")
    lib_parser.add_argument("symbol", help="Exported function or variable name")

    return parser


def _print_result(value: str) -> int:
    if not value:
        return 1
    print(value)
    return 0


def _cmd_library(locator: Locator, args: argparse.Namespace) -> int:
    try:
        lib = ctypes.CDLL(args.library)
        func = getattr(lib, args.symbol)
    except (OSError, AttributeError) as exc:
        print(f"[locus] {exc}", file=sys.stderr)
        return 1
    return _print_result(locator.library_path(Symbol.of(func)))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(config, "DEBUG" if args.verbose else None)
    locator = Locator.from_config(config)

    if args.command == "exe":
        return _print_result(locator.executable_path())
    if args.command == "bundle":
        return _print_result(locator.bundle_path())
    if args.command == "module-path":
        return _print_result(locator.module_path())
    if args.command == "locate":
        return _print_result(locator.locate_path(args.rel_path, args.system_dir))
    if args.command == "find-module":
        descriptor = locator.find_module(args.name)
        if descriptor.empty():
            print(f"[locus] Module '{args.name}' not found", file=sys.stderr)
            return 1
        print(descriptor.format())
        return 0
    if args.command == "library":
        return _cmd_library(locator, args)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
