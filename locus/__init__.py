"""
LOCUS - Location Utilities for Shipped resources
Package initialization

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.
"""

__version__ = "0.1.0"
__author__ = "LOCUS Development Team"
__description__ = "Runtime location of executables, libraries and resource files"

from .locator import (
    Locator,
    SearchCandidate,
    find_module,
    get_bundle_path,
    get_default_locator,
    get_executable_path,
    get_library_path,
    get_module_path,
    locate_path,
    set_default_locator,
)
from .modinfo import ModuleDescriptor
from .path_utils import normalize_path
from .platform_providers import PlatformPathProvider, Symbol, get_provider

__all__ = [
    'Locator',
    'SearchCandidate',
    'ModuleDescriptor',
    'PlatformPathProvider',
    'Symbol',
    'find_module',
    'get_bundle_path',
    'get_default_locator',
    'get_executable_path',
    'get_library_path',
    'get_module_path',
    'get_provider',
    'locate_path',
    'normalize_path',
    'set_default_locator',
]
