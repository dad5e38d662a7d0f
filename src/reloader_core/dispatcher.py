"""Fire-and-forget launching of shell commands."""

import asyncio
import logging

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Runs shell commands as child processes sharing our stdin/stdout/stderr.

    dispatch() schedules the launch and returns at once; commands run
    concurrently with each other and with the caller. Failures are logged
    and never propagate.

    Only the asyncio tasks are tracked, to keep them referenced until done.
    Child processes are not terminated when reloader exits and may outlive it.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        """Initialize dispatcher.

        Args:
            loop: Event loop to run on (defaults to the running loop at dispatch time)
        """
        self._loop = loop
        self._tasks: set[asyncio.Task] = set()

    @property
    def active(self) -> int:
        """Number of dispatched commands that have not finished yet."""
        return len(self._tasks)

    def dispatch(self, command: str, tag: str = "") -> asyncio.Task:
        """Start command through the system shell without waiting for it.

        Args:
            command: Shell command line
            tag: Context (pattern or path) used in failure messages

        Returns:
            Task whose result is the exit status (None if launch failed)
        """
        loop = self._loop or asyncio.get_running_loop()
        logger.info(f"Run {command} ...")
        task = loop.create_task(self._run(command, tag or command))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info("restart complete")
        return task

    async def _run(self, command: str, tag: str) -> int | None:
        # None for stdin/stdout/stderr means the child inherits ours
        try:
            proc = await asyncio.create_subprocess_shell(command)
        except OSError as e:
            logger.error(f"[error] [{tag}] failed to start `{command}`: {e}")
            return None

        returncode = await proc.wait()
        if returncode != 0:
            logger.error(f"[error] [{tag}] `{command}` exited with status {returncode}")
        else:
            logger.debug(f"`{command}` finished")
        return returncode
