"""
LOCUS - Location Utilities for Shipped resources
System Identity

Copyright (c) 2026 Kay Schäfer. All Rights Reserved.
Proprietary and confidential. See LICENSE for details.

The executable, bundle and module paths of the running process.  They
are computed at most once per :class:`LazyIdentity` and are assumed
not to change while the process is alive.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .path_utils import normalize_path, parent_dir
from .platform_providers import PlatformPathProvider, Symbol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SystemIdentity:
    """Immutable snapshot of where the running process lives on disk."""

    executable_path: str = ""
    bundle_path: str = ""
    module_path: str = ""

    @classmethod
    def detect(
        cls,
        provider: PlatformPathProvider,
        anchor: Optional[Symbol] = None,
    ) -> "SystemIdentity":
        """Query *provider* once and build the identity.

        When *anchor* is given the process is treated as a loaded module
        (plugin): the module path is the directory of the image owning
        the anchor instead of the executable's directory.
        """
        executable = normalize_path(provider.executable_path())
        bundle = normalize_path(provider.bundle_path(executable)) if executable else ""

        module = ""
        if anchor is not None:
            module = parent_dir(provider.library_path(anchor.address))
            if not module:
                logger.warning(
                    "Anchor 0x%x is not owned by a loaded module – "
                    "falling back to the executable directory",
                    anchor.address,
                )
        if not module:
            module = parent_dir(executable)

        if not executable:
            logger.warning("Executable path could not be determined")
        logger.debug(
            "System identity: executable=%r bundle=%r module=%r",
            executable, bundle, module,
        )
        return cls(executable_path=executable, bundle_path=bundle, module_path=module)


class LazyIdentity:
    """Thread-safe, compute-once holder for a :class:`SystemIdentity`.

    The first caller of :meth:`get` runs the provider queries while
    holding the lock; concurrent callers block until the value is ready
    and then all observe the same object.
    """

    def __init__(self, provider: PlatformPathProvider, anchor: Optional[Symbol] = None):
        self._provider = provider
        self._anchor = anchor
        self._lock = threading.Lock()
        self._identity: Optional[SystemIdentity] = None

    @property
    def resolved(self) -> bool:
        """``True`` once the identity has been computed."""
        return self._identity is not None

    def get(self) -> SystemIdentity:
        """Return the cached identity, computing it on first use."""
        identity = self._identity
        if identity is not None:
            return identity
        with self._lock:
            if self._identity is None:
                self._identity = SystemIdentity.detect(self._provider, self._anchor)
            return self._identity
