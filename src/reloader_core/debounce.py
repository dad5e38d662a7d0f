"""Per-rule launch cooldown."""

import time
from collections.abc import Callable

from reloader_core.models import WatchRule


class DebounceGate:
    """Suppresses launches of a rule until its debounce delay has passed.

    State is keyed by the rule's pattern string, so two rules with the same
    pattern share one timer. Owned by a single event loop, no locking.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize gate.

        Args:
            clock: Returns the current time in seconds (monotonic by default)
        """
        self._clock = clock
        self._last_launch: dict[str, float] = {}

    def last_launch(self, rule: WatchRule) -> float | None:
        return self._last_launch.get(rule.pattern)

    def allow(self, rule: WatchRule) -> bool:
        """Decide whether rule may launch now, recording the launch if so.

        The boundary is inclusive: exactly debounce_ms after the previous
        launch is allowed.
        """
        now = self._clock()
        last = self._last_launch.get(rule.pattern)
        if last is not None and now < last + rule.debounce_seconds:
            return False
        self._last_launch[rule.pattern] = now
        return True
