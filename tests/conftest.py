import logging
import signal
import sys
from pathlib import Path

import pytest

# Ensure `src` is on sys.path for tests run from the repository root
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the developer's own settings and config file out of every test."""
    for name in ("REX_DISABLE_SUDO", "REX_SUDO_HELPER", "REX_SUDO_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


@pytest.fixture
def fake_bin(tmp_path):
    """Directory for fake executables; returns a factory creating one by name."""
    bindir = tmp_path / "bin"
    bindir.mkdir()

    def make(name, body="#!/bin/sh\nexit 0\n"):
        p = bindir / name
        p.write_text(body)
        p.chmod(0o755)
        return p

    make.dir = bindir
    return make


@pytest.fixture(autouse=True)
def restore_root_logging():
    """The CLI reconfigures the root logger; put it back after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    """replace_process resets SIGPIPE/SIGXFSZ even when execvp is faked."""
    names = [n for n in ("SIGPIPE", "SIGXFSZ") if hasattr(signal, n)]
    saved = {getattr(signal, n): signal.getsignal(getattr(signal, n)) for n in names}
    yield
    for signum, handler in saved.items():
        signal.signal(signum, handler)
