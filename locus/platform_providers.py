"""
LOCUS - Location Utilities for Shipped resources
Platform Path Providers

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

Thin wrappers around the operating-system queries LOCUS depends on:

* **executable_path** – path of the running executable image
* **bundle_path**     – application bundle root (macOS only)
* **library_path**    – the loaded image that owns a memory address

One provider exists per target OS; :func:`get_provider` picks the right
one for the running interpreter.  Providers return raw, native-format
strings and ``""`` on failure – normalisation happens in the locator.
"""

import abc
import ctypes
import ctypes.util
import logging
import os
import sys
from dataclasses import dataclass
from typing import Any, Optional

from .path_utils import bundle_from_executable

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Symbol reference
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Symbol:
    """Address of a function or variable inside a loaded image.

    ``None`` is used wherever "no symbol" is a valid argument.
    """

    address: int

    @classmethod
    def of(cls, obj: Any) -> Optional["Symbol"]:
        """Build a symbol from a ctypes function/object or a raw address.

        Returns ``None`` for ``None``, for null addresses and for objects
        that have no address (plain Python functions, arbitrary objects).
        """
        if obj is None:
            return None
        if isinstance(obj, Symbol):
            return obj
        if isinstance(obj, int):
            address = obj
        else:
            try:
                address = ctypes.cast(obj, ctypes.c_void_p).value
            except (ctypes.ArgumentError, TypeError):
                try:
                    address = ctypes.addressof(obj)
                except TypeError:
                    logger.debug("%r has no address – treating as absent", obj)
                    return None
        if not address:
            return None
        return cls(address)


# ---------------------------------------------------------------------------
# Abstract provider
# ---------------------------------------------------------------------------
class PlatformPathProvider(abc.ABC):
    """OS-specific raw path queries."""

    name = "abstract"

    @abc.abstractmethod
    def executable_path(self) -> str:
        """Return the native path of the running executable, or ``""``."""

    @abc.abstractmethod
    def library_path(self, address: int) -> str:
        """Return the native path of the image owning *address*, or ``""``."""

    def bundle_path(self, executable_path: str) -> str:
        """Return the application bundle root for *executable_path*.

        Platforms without a bundle concept always return ``""``.
        """
        return ""


# ---------------------------------------------------------------------------
# POSIX (dladdr based)
# ---------------------------------------------------------------------------
class _DlInfo(ctypes.Structure):
    _fields_ = [
        ("dli_fname", ctypes.c_char_p),
        ("dli_fbase", ctypes.c_void_p),
        ("dli_sname", ctypes.c_char_p),
        ("dli_saddr", ctypes.c_void_p),
    ]


class _DladdrProvider(PlatformPathProvider):
    """Shared ``dladdr(3)`` lookup for Linux and macOS."""

    def __init__(self):
        self._dladdr = None

    def _load_dladdr(self):
        if self._dladdr is not None:
            return self._dladdr
        try:
            func = ctypes.CDLL(None).dladdr
        except AttributeError:
            # glibc < 2.34 keeps dladdr in libdl
            libdl = ctypes.util.find_library("dl")
            if not libdl:
                raise OSError("dladdr is not available on this system")
            func = ctypes.CDLL(libdl).dladdr
        func.argtypes = [ctypes.c_void_p, ctypes.POINTER(_DlInfo)]
        func.restype = ctypes.c_int
        self._dladdr = func
        return func

    def library_path(self, address: int) -> str:
        try:
            dladdr = self._load_dladdr()
        except OSError as exc:
            logger.warning("Cannot resolve library paths: %s", exc)
            return ""
        info = _DlInfo()
        if dladdr(ctypes.c_void_p(address), ctypes.byref(info)) == 0:
            logger.debug("Address 0x%x is not owned by any loaded image", address)
            return ""
        if not info.dli_fname:
            return ""
        return os.fsdecode(info.dli_fname)


class LinuxProvider(_DladdrProvider):
    """Linux: ``/proc/self/exe`` and ``dladdr``."""

    name = "linux"

    def executable_path(self) -> str:
        try:
            return os.readlink("/proc/self/exe")
        except OSError as exc:
            logger.debug("readlink(/proc/self/exe) failed: %s", exc)
            return sys.executable or ""


class DarwinProvider(_DladdrProvider):
    """macOS: ``_NSGetExecutablePath``, ``dladdr`` and ``.app`` bundles."""

    name = "darwin"

    def executable_path(self) -> str:
        try:
            ns_get_path = ctypes.CDLL(None)._NSGetExecutablePath
        except (AttributeError, OSError) as exc:
            logger.debug("_NSGetExecutablePath unavailable: %s", exc)
            return sys.executable or ""
        ns_get_path.argtypes = [ctypes.c_char_p, ctypes.POINTER(ctypes.c_uint32)]
        ns_get_path.restype = ctypes.c_int

        size = ctypes.c_uint32(0)
        ns_get_path(None, ctypes.byref(size))  # reports the required size
        buf = ctypes.create_string_buffer(size.value)
        if ns_get_path(buf, ctypes.byref(size)) != 0:
            return ""
        return os.path.realpath(os.fsdecode(buf.value))

    def bundle_path(self, executable_path: str) -> str:
        return bundle_from_executable(executable_path)


# ---------------------------------------------------------------------------
# Windows
# ---------------------------------------------------------------------------
GET_MODULE_HANDLE_EX_FLAG_FROM_ADDRESS = 0x00000004
GET_MODULE_HANDLE_EX_FLAG_UNCHANGED_REFCOUNT = 0x00000002
_MAX_LONG_PATH = 32768


class WindowsProvider(PlatformPathProvider):
    """Windows: ``GetModuleFileNameW`` and ``GetModuleHandleExW``."""

    name = "windows"

    def __init__(self):
        self._kernel32 = None

    def _load_kernel32(self):
        if self._kernel32 is not None:
            return self._kernel32
        from ctypes import wintypes

        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        kernel32.GetModuleFileNameW.argtypes = [
            wintypes.HMODULE,
            wintypes.LPWSTR,
            wintypes.DWORD,
        ]
        kernel32.GetModuleFileNameW.restype = wintypes.DWORD
        kernel32.GetModuleHandleExW.argtypes = [
            wintypes.DWORD,
            ctypes.c_void_p,
            ctypes.POINTER(wintypes.HMODULE),
        ]
        kernel32.GetModuleHandleExW.restype = wintypes.BOOL
        self._kernel32 = kernel32
        return kernel32

    def _module_file_name(self, hmodule) -> str:
        kernel32 = self._load_kernel32()
        size = 260
        while size <= _MAX_LONG_PATH:
            buf = ctypes.create_unicode_buffer(size)
            length = kernel32.GetModuleFileNameW(hmodule, buf, size)
            if length == 0:
                logger.debug("GetModuleFileNameW failed (error %d)", ctypes.get_last_error())
                return ""
            if length < size:
                return buf.value
            size *= 2
        return ""

    def executable_path(self) -> str:
        try:
            return self._module_file_name(None)
        except (AttributeError, OSError) as exc:
            logger.debug("Cannot query executable path: %s", exc)
            return sys.executable or ""

    def library_path(self, address: int) -> str:
        try:
            from ctypes import wintypes

            kernel32 = self._load_kernel32()
            hmodule = wintypes.HMODULE()
            flags = (
                GET_MODULE_HANDLE_EX_FLAG_FROM_ADDRESS
                | GET_MODULE_HANDLE_EX_FLAG_UNCHANGED_REFCOUNT
            )
            if not kernel32.GetModuleHandleExW(flags, ctypes.c_void_p(address), ctypes.byref(hmodule)):
                logger.debug("Address 0x%x is not owned by any loaded module", address)
                return ""
            return self._module_file_name(hmodule)
        except (AttributeError, OSError) as exc:
            logger.warning("Cannot resolve library paths: %s", exc)
            return ""


# ---------------------------------------------------------------------------
# Fallback
# ---------------------------------------------------------------------------
class GenericProvider(PlatformPathProvider):
    """Interpreter-only fallback for platforms without a native provider."""

    name = "generic"

    def executable_path(self) -> str:
        return sys.executable or ""

    def library_path(self, address: int) -> str:
        logger.debug("Library lookup is not supported on %s", sys.platform)
        return ""


_PROVIDERS = {
    "linux": LinuxProvider,
    "darwin": DarwinProvider,
    "windows": WindowsProvider,
    "generic": GenericProvider,
}


def get_provider(name: Optional[str] = None) -> PlatformPathProvider:
    """Factory that returns a path provider by name.

    ``None`` or ``"auto"`` selects the provider for :data:`sys.platform`.
    Unknown names fall back to :class:`GenericProvider`.
    """
    name = (name or "auto").lower().strip()
    if name == "auto":
        if sys.platform.startswith("linux"):
            name = "linux"
        elif sys.platform == "darwin":
            name = "darwin"
        elif sys.platform == "win32":
            name = "windows"
        else:
            name = "generic"
    provider_cls = _PROVIDERS.get(name)
    if provider_cls is None:
        logger.warning("Unknown path provider '%s' – using generic", name)
        provider_cls = GenericProvider
    return provider_cls()
