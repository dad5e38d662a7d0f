"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from reloader_core.models import ReloaderConfig, WatchRule  # noqa: E402


class ManualClock:
    """Clock whose time only moves when a test says so."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingDispatcher:
    """Stands in for CommandDispatcher; remembers what would have run."""

    def __init__(self):
        self.calls: list[tuple[str, str]] = []

    @property
    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]

    def dispatch(self, command, tag=""):
        self.calls.append((command, tag))


class FakeEventSource:
    """In-memory EventSource fed by the test."""

    def __init__(self):
        self.started = False
        self.stopped = False
        self._events: asyncio.Queue = asyncio.Queue()
        self._errors: asyncio.Queue = asyncio.Queue()

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def push(self, event):
        self._events.put_nowait(event)

    def push_error(self, error):
        self._errors.put_nowait(error)

    async def events(self):
        while True:
            yield await self._events.get()

    async def errors(self):
        while True:
            yield await self._errors.get()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def make_config():
    """Build a ReloaderConfig from WatchRule keyword dicts."""

    def _make(*rules: dict, skip_folders=None) -> ReloaderConfig:
        return ReloaderConfig(
            rules=[WatchRule(**r) for r in rules],
            skip_folders=list(skip_folders or []),
        )

    return _make


@pytest.fixture
def tmp_config(tmp_path):
    """Create a temporary reloader.toml."""
    config = tmp_path / "reloader.toml"
    config.write_text(
        """
[skip]
folders = [".git", "node_modules"]

[[watch]]
pattern = "*.txt"
command = "echo hi"
debounce_ms = 1000

[[watch]]
pattern = "*.go"
command = "go build"
log = "logs/app.log"
log_tag = "app"
start = true
"""
    )
    return config


@pytest.fixture
def event_source():
    return FakeEventSource()
