"""Tests for the compute-once system identity in ``locus/identity.py``."""

import sys
import threading
import time
from pathlib import Path

# Ensure the locus package is importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from conftest import FakeProvider
from locus.identity import LazyIdentity, SystemIdentity
from locus.platform_providers import DarwinProvider, Symbol


class SlowProvider(FakeProvider):
    """Provider whose executable query takes long enough to race."""

    def executable_path(self) -> str:
        time.sleep(0.05)
        return super().executable_path()


class FakeMacProvider(DarwinProvider):
    def __init__(self, executable: str):
        super().__init__()
        self._executable = executable

    def executable_path(self) -> str:
        return self._executable


class TestSystemIdentity:
    def test_detect(self):
        identity = SystemIdentity.detect(FakeProvider("C:\\Apps\\Tool\\tool.exe"))
        assert identity.executable_path == "C:/Apps/Tool/tool.exe"
        assert identity.module_path == "C:/Apps/Tool"
        assert identity.bundle_path == ""

    def test_unknown_executable(self):
        identity = SystemIdentity.detect(FakeProvider(""))
        assert identity == SystemIdentity("", "", "")

    def test_anchor_sets_module_path(self):
        provider = FakeProvider("/usr/bin/host", {0x10: "/opt/plugins/libfoo.so"})
        identity = SystemIdentity.detect(provider, Symbol(0x10))
        assert identity.executable_path == "/usr/bin/host"
        assert identity.module_path == "/opt/plugins"

    def test_unowned_anchor_falls_back_to_executable(self):
        identity = SystemIdentity.detect(FakeProvider("/usr/bin/host"), Symbol(0x10))
        assert identity.module_path == "/usr/bin"

    def test_bundle_detected_on_macos(self):
        provider = FakeMacProvider("/Applications/Foo.app/Contents/MacOS/Foo")
        identity = SystemIdentity.detect(provider)
        assert identity.bundle_path == "/Applications/Foo.app"
        assert identity.module_path == "/Applications/Foo.app/Contents/MacOS"

    def test_no_bundle_outside_app(self):
        identity = SystemIdentity.detect(FakeMacProvider("/usr/local/bin/foo"))
        assert identity.bundle_path == ""


class TestLazyIdentity:
    def test_computed_once(self):
        provider = FakeProvider("/opt/app/app")
        lazy = LazyIdentity(provider)
        assert not lazy.resolved
        first = lazy.get()
        for _ in range(5):
            assert lazy.get() is first
        assert lazy.resolved
        assert provider.calls == 1

    def test_empty_result_is_cached(self):
        provider = FakeProvider("")
        lazy = LazyIdentity(provider)
        assert lazy.get().executable_path == ""
        provider.executable = "/opt/app/app"
        assert lazy.get().executable_path == ""
        assert provider.calls == 1

    def test_concurrent_first_use(self):
        provider = SlowProvider("/opt/app/app")
        lazy = LazyIdentity(provider)
        barrier = threading.Barrier(16)
        results = []
        results_lock = threading.Lock()

        def worker():
            barrier.wait()
            identity = lazy.get()
            with results_lock:
                results.append(identity)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert len(results) == 16
        assert all(identity is results[0] for identity in results)
        assert results[0].executable_path == "/opt/app/app"
        assert provider.calls == 1
