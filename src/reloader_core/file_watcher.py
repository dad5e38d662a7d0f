"""Directory watcher built on watchdog, bridged into asyncio queues."""

import asyncio
import logging
import os
from collections.abc import AsyncIterator, Iterable
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from reloader_core.models import EventKind, RawEvent

logger = logging.getLogger(__name__)

# watchdog event types that mean "this path now has new content".
# A move counts through its destination (editors that save by rename).
_MODIFY_TYPES = {"modified", "created", "moved"}


class _QueueingHandler(FileSystemEventHandler):
    """Forwards watchdog events from the observer thread to the loop."""

    def __init__(self, source: "WatchdogEventSource"):
        self.source = source

    def dispatch(self, event: FileSystemEvent) -> None:
        try:
            raw = self.source.classify(event)
            if raw is not None:
                self.source._put(self.source._events, raw)
        except Exception as e:
            # Keep the observer thread alive; the loop logs it
            self.source._put(self.source._errors, e)


class WatchdogEventSource:
    """Watches a directory tree and exposes changes as async sequences.

    Events inside any folder whose name is in skip_folders are dropped here
    and never reach the consumer.
    """

    def __init__(
        self,
        root: str | Path,
        skip_folders: Iterable[str] = (),
        loop: asyncio.AbstractEventLoop | None = None,
    ):
        """Initialize watcher.

        Args:
            root: Directory to watch recursively
            skip_folders: Directory names to ignore at any depth
            loop: Event loop that consumes the events (defaults to the running loop on start)

        Raises:
            FileNotFoundError: If root does not exist
            NotADirectoryError: If root is not a directory
        """
        self.root = Path(root).resolve()
        if not self.root.exists():
            raise FileNotFoundError(f"Watch directory does not exist: {self.root}")
        if not self.root.is_dir():
            raise NotADirectoryError(f"Watch path is not a directory: {self.root}")

        self.skip_folders = frozenset(skip_folders)
        self.loop = loop
        self.observer = Observer()
        self._events: asyncio.Queue[RawEvent] = asyncio.Queue()
        self._errors: asyncio.Queue[Exception] = asyncio.Queue()

    def is_skipped(self, path: str | Path, is_directory: bool = False) -> bool:
        """True if path is inside a skip folder, or is one when is_directory."""
        try:
            parts = Path(path).relative_to(self.root).parts
        except ValueError:
            parts = Path(path).parts
        if not is_directory:
            parts = parts[:-1]
        return any(part in self.skip_folders for part in parts)

    def classify(self, event: FileSystemEvent) -> RawEvent | None:
        """Turn a watchdog event into a RawEvent, or None if it is skipped."""
        path = event.src_path
        if event.event_type == "moved":
            path = event.dest_path
        path = os.fsdecode(path)

        if self.is_skipped(path, event.is_directory):
            return None

        if event.is_directory or event.event_type not in _MODIFY_TYPES:
            return RawEvent(path=path, kind=EventKind.OTHER)
        return RawEvent(path=path, kind=EventKind.MODIFY)

    def _put(self, queue: asyncio.Queue, item) -> None:
        # Called from the observer thread
        if self.loop is None or self.loop.is_closed():
            return
        self.loop.call_soon_threadsafe(queue.put_nowait, item)

    def start(self) -> None:
        """Start the observer thread."""
        if self.loop is None:
            self.loop = asyncio.get_running_loop()
        self.observer.schedule(_QueueingHandler(self), str(self.root), recursive=True)
        self.observer.daemon = True
        self.observer.start()
        logger.info(f"Watching {self.root} (skipping {sorted(self.skip_folders)})")

    def stop(self) -> None:
        """Stop the observer thread."""
        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join(timeout=2.0)
            logger.info("Stopped file watcher")

    async def events(self) -> AsyncIterator[RawEvent]:
        while True:
            yield await self._events.get()

    async def errors(self) -> AsyncIterator[Exception]:
        while True:
            yield await self._errors.get()
