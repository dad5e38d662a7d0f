"""Abstract event source protocol for directory watching implementations."""

from collections.abc import AsyncIterator
from typing import Protocol

from reloader_core.models import RawEvent


class EventSource(Protocol):
    """Protocol for directory watchers feeding the reloader event loop.

    Both sequences are lazy and unbounded; neither can be restarted.
    """

    def start(self) -> None:
        """Start watching."""
        ...

    def stop(self) -> None:
        """Stop watching."""
        ...

    def events(self) -> AsyncIterator[RawEvent]:
        """Change notifications in delivery order."""
        ...

    def errors(self) -> AsyncIterator[Exception]:
        """Asynchronous watcher failures."""
        ...
