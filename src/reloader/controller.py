"""Event loop tying watcher, matcher, fingerprints, debounce and dispatch together. Primary embed point."""

import asyncio
import logging
import time
from collections.abc import Callable
from pathlib import Path

from reloader.log_follower import LogFollower
from reloader_core.config import load_config
from reloader_core.debounce import DebounceGate
from reloader_core.dispatcher import CommandDispatcher
from reloader_core.fingerprint import FingerprintStore
from reloader_core.matcher import RuleMatcher
from reloader_core.models import RawEvent, ReloaderConfig, WatchRule
from reloader_core.notifier import NoOpNotifier, ReloaderNotifier
from reloader_core.watchers import EventSource

logger = logging.getLogger(__name__)


class ReloaderController:
    """Owns the fingerprint store and debounce state and runs the event loop.

    Both pieces of state are touched only from run() (or the handle_*
    methods it calls) on one event loop, so nothing is locked. Commands and
    log followers run as independent tasks that share only the read-only
    rules.
    """

    def __init__(
        self,
        config: ReloaderConfig,
        notifier: ReloaderNotifier | None = None,
        dispatcher: CommandDispatcher | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """Initialize controller.

        Args:
            config: Loaded rules and skip folders
            notifier: Optional notification handler (defaults to NoOpNotifier - silent)
            dispatcher: Command launcher (defaults to a shell CommandDispatcher)
            clock: Time source for debouncing, in seconds
        """
        self.config = config
        self.notifier = notifier or NoOpNotifier()
        self.dispatcher = dispatcher or CommandDispatcher()
        self.matcher = RuleMatcher(config.rules)
        self.fingerprints = FingerprintStore()
        self.debounce = DebounceGate(clock)
        self.followers: list[LogFollower] = []
        self._follower_tasks: set[asyncio.Task] = set()

    @classmethod
    def from_config_file(cls, config_path: str | Path, **kwargs) -> "ReloaderController":
        """Load config_path and build a controller from it."""
        try:
            config = load_config(config_path)
        except Exception as e:
            logger.error(f"Failed to load config from {config_path}: {e}")
            raise
        return cls(config, **kwargs)

    @property
    def rules(self) -> list[WatchRule]:
        return self.config.rules

    def run_startup_rules(self) -> list[WatchRule]:
        """Dispatch every rule flagged to run at startup.

        Ignores and does not touch debounce state.
        """
        started = []
        for rule in self.config.startup_rules:
            self.dispatcher.dispatch(rule.command, tag=rule.pattern)
            self.notifier.info(f"Started at launch: {rule.command}")
            started.append(rule)
        return started

    def start_log_followers(self) -> list[asyncio.Task]:
        """Start one LogFollower task per rule with a log path."""
        loop = asyncio.get_running_loop()
        tasks = []
        for rule in self.config.logged_rules:
            logger.info(f"log: {rule.log_path}")
            follower = LogFollower(rule.log_path, tag=rule.log_tag)
            task = loop.create_task(follower.run())
            self.followers.append(follower)
            self._follower_tasks.add(task)
            task.add_done_callback(self._follower_tasks.discard)
            tasks.append(task)
        return tasks

    def handle_event(self, event: RawEvent) -> list[WatchRule]:
        """Route one watcher event, dispatching commands for real changes.

        Returns:
            Rules whose command was dispatched
        """
        if not event.is_modify:
            return []

        rules = self.matcher.match(event.base_name)
        if not rules:
            return []

        # One read per event; every matching rule sees the same answer
        if not self.fingerprints.observe(event.path):
            logger.debug(f"{event.path} unchanged, ignoring")
            return []

        dispatched = []
        for rule in rules:
            logger.info(f"{event.path} changed, match: {rule.pattern}")
            if not self.debounce.allow(rule):
                logger.debug(f"'{rule.pattern}' within {rule.debounce_ms}ms of last run, skipping")
                continue
            self.dispatcher.dispatch(rule.command, tag=f"{rule.pattern}: {event.base_name}")
            self.notifier.info(f"{event.base_name} changed, running: {rule.command}")
            dispatched.append(rule)
        return dispatched

    def handle_error(self, error: Exception) -> None:
        """Log an asynchronous watcher error; the loop keeps going."""
        logger.error(f"[error] {error}")
        self.notifier.error(f"Watcher error: {error}")

    async def run(self, source: EventSource) -> None:
        """Start source, fire startup rules and followers, then route events.

        Waits on the event and error sequences at the same time and handles
        whichever has an item first. Runs until cancelled or until both
        sequences are exhausted.
        """
        source.start()
        self.run_startup_rules()
        self.start_log_followers()
        self.notifier.info(f"Watching with {len(self.rules)} rule(s)")

        streams = {
            "event": source.events().__aiter__(),
            "error": source.errors().__aiter__(),
        }
        waiting = {asyncio.ensure_future(it.__anext__()): name for name, it in streams.items()}
        try:
            while waiting:
                done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
                for future in done:
                    name = waiting.pop(future)
                    try:
                        item = future.result()
                    except StopAsyncIteration:
                        logger.debug(f"{name} stream ended")
                        continue

                    if name == "event":
                        self.handle_event(item)
                    else:
                        self.handle_error(item)
                    waiting[asyncio.ensure_future(streams[name].__anext__())] = name
        finally:
            for future in waiting:
                future.cancel()
            source.stop()
