"""Ctrl+C handling: say goodbye and leave immediately."""

import asyncio
import logging
import os
import signal
import sys
from collections.abc import Callable
from typing import TextIO

logger = logging.getLogger(__name__)

FAREWELL = " Auf Wiederschaun!"


class ShutdownHandler:
    """Terminates the process on interrupt without waiting for anything.

    Running commands and log followers are abandoned; child processes keep
    running if they ignore the terminal's SIGINT.
    """

    def __init__(
        self,
        message: str = FAREWELL,
        exit: Callable[[int], object] = os._exit,
        out: TextIO | None = None,
    ):
        self.message = message
        self._exit = exit
        self.out = out

    def __call__(self) -> None:
        print(self.message, file=self.out or sys.stdout, flush=True)
        sys.stderr.flush()
        self._exit(0)

    def install(self, loop: asyncio.AbstractEventLoop) -> None:
        """Register for SIGINT on loop, or via signal.signal where unsupported."""
        try:
            loop.add_signal_handler(signal.SIGINT, self)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no add_signal_handler
            signal.signal(signal.SIGINT, lambda signum, frame: self())
        logger.debug("Interrupt handler installed")
