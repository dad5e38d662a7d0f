"""Notification hook for programs that embed the reloader controller.

The controller always logs through `logging`; a notifier additionally
receives a short summary of each dispatch, startup run and watcher error,
for hosts that show them somewhere other than the log.
"""

from typing import Protocol


class ReloaderNotifier(Protocol):
    """Receives controller notices; host provides the implementation."""

    def info(self, message: str) -> None:
        """A command was started or watching began."""
        ...

    def warning(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        """The watcher reported an error."""
        ...


class NoOpNotifier:
    """Default when nothing embeds the controller; the log already has it all."""

    def info(self, msg: str) -> None:
        pass

    def warning(self, msg: str) -> None:
        pass

    def error(self, msg: str) -> None:
        pass
