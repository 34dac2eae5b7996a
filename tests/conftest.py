"""
Shared fixtures: scripted entropy readers and settings overrides.
"""

import os
import sys
import threading
import time
from pathlib import Path

import pytest

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from genpass.settings import load_app_config, CONFIG_ENV_VAR


class CountingReader:
    """os.urandom wrapper that counts calls and can be slowed down."""

    def __init__(self, delay: float = 0.0):
        self.calls = 0
        self.delay = delay
        self._lock = threading.Lock()

    def __call__(self, n: int) -> bytes:
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        return os.urandom(n)


class StuckHighReader:
    """Returns all-0xFF bytes while `stuck`, real entropy otherwise."""

    def __init__(self):
        self.stuck = True
        self.calls = 0

    def __call__(self, n: int) -> bytes:
        self.calls += 1
        if self.stuck:
            return b"\xff" * n
        return os.urandom(n)


class FailingReader:
    """Always fails like a broken OS entropy pool."""

    def __init__(self):
        self.calls = 0

    def __call__(self, n: int) -> bytes:
        self.calls += 1
        raise OSError("entropy pool unavailable")


@pytest.fixture
def counting_reader():
    return CountingReader()


@pytest.fixture
def slow_reader():
    return CountingReader(delay=0.01)


@pytest.fixture
def stuck_reader():
    return StuckHighReader()


@pytest.fixture
def failing_reader():
    return FailingReader()


@pytest.fixture
def custom_settings(tmp_path, monkeypatch):
    """Point the settings loader at a temporary app.yaml."""
    path = tmp_path / "app.yaml"

    def write(text: str) -> Path:
        path.write_text(text)
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))
        load_app_config.cache_clear()
        return path

    yield write
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    load_app_config.cache_clear()
