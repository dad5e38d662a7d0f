"""Tail -f style forwarding of a rule's log file to our stdout."""

import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import BinaryIO, TextIO

logger = logging.getLogger(__name__)


class LogFollower:
    """Forwards lines appended to a log file to an output stream.

    Starts at the current end of the file, so history is not replayed. A
    file that does not exist yet is waited for and then read from the
    start. Rotation (the path now names a different file) and truncation
    are followed from the start of the new content. A partial last line
    is held until its newline arrives; if the file is rotated first, it is
    written out as a complete line since nothing more can follow it.
    """

    def __init__(
        self,
        path: str | Path,
        tag: str | None = None,
        out: TextIO | None = None,
        poll_interval: float = 0.25,
    ):
        """Initialize follower.

        Args:
            path: Log file to follow
            tag: Optional prefix; lines are written as "[tag] line"
            out: Stream to write to (defaults to sys.stdout at write time)
            poll_interval: Seconds between checks for new data
        """
        self.path = Path(path)
        self.tag = tag
        self.out = out
        self.poll_interval = poll_interval

    async def run(self) -> None:
        """Follow the file until cancelled or an unrecoverable error occurs."""
        try:
            await self._follow()
        except OSError as e:
            logger.error(f"[error] [{self.path}] log follower stopped: {e}")

    def _emit(self, raw: bytes) -> None:
        line = raw.rstrip(b"\r").decode("utf-8", errors="replace")
        if self.tag:
            line = f"[{self.tag}] {line}"
        print(line, file=self.out or sys.stdout, flush=True)

    async def _open(self, seek_end: bool) -> BinaryIO:
        """Open the log, polling while it does not exist."""
        waiting = False
        while True:
            try:
                f = open(self.path, "rb")
            except FileNotFoundError:
                if not waiting:
                    logger.debug(f"Waiting for {self.path} to appear")
                    waiting = True
                await asyncio.sleep(self.poll_interval)
                continue
            # Content that appeared while we waited is new
            if seek_end and not waiting:
                f.seek(0, os.SEEK_END)
            logger.info(f"tail -f {self.path}")
            return f

    def _replaced(self, f: BinaryIO) -> bool:
        """True if the path now names a different file than f."""
        try:
            st = os.stat(self.path)
        except FileNotFoundError:
            # Rotated away, new file not created yet
            return False
        return st.st_ino != os.fstat(f.fileno()).st_ino

    async def _follow(self) -> None:
        seek_end = True
        while True:
            f = await self._open(seek_end)
            seek_end = False
            pending = b""
            with f:
                while True:
                    chunk = f.read()
                    if chunk:
                        pending += chunk
                        *lines, pending = pending.split(b"\n")
                        for line in lines:
                            self._emit(line)
                        continue

                    if os.fstat(f.fileno()).st_size < f.tell():
                        logger.debug(f"{self.path} truncated, reading from start")
                        f.seek(0)
                        pending = b""
                        continue

                    if self._replaced(f):
                        logger.debug(f"{self.path} rotated, reopening")
                        break

                    await asyncio.sleep(self.poll_interval)
            if pending:
                # Rotated away mid-line
                self._emit(pending)
