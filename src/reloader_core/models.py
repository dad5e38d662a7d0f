"""Shared data models for reloader_core."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EventKind(str, Enum):
    """Classification of a raw filesystem notification."""

    MODIFY = "modify"
    OTHER = "other"


@dataclass(frozen=True)
class RawEvent:
    """A single change notification produced by a watcher."""

    path: str
    """Absolute path of the file that changed."""

    kind: EventKind = EventKind.MODIFY
    """Whether the watcher classified this as a content modification."""

    @property
    def is_modify(self) -> bool:
        return self.kind is EventKind.MODIFY

    @property
    def base_name(self) -> str:
        """File name with directory components stripped."""
        return Path(self.path).name


@dataclass(frozen=True)
class WatchRule:
    """One (pattern, command, options) entry from the configuration."""

    pattern: str
    """Glob matched against a changed file's base name."""

    command: str
    """Shell command line run when a matching file changes."""

    log_path: Path | None = None
    """Optional file whose new lines are forwarded to stdout."""

    log_tag: str | None = None
    """Optional prefix for forwarded log lines."""

    debounce_ms: int = 0
    """Minimum milliseconds between two launches of this rule."""

    run_at_startup: bool = False
    """Whether the command runs once when the watcher starts."""

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000.0


@dataclass
class ReloaderConfig:
    """Everything loaded from a reloader config file."""

    rules: list[WatchRule] = field(default_factory=list)
    """Watch rules in file order."""

    skip_folders: list[str] = field(default_factory=list)
    """Directory names excluded from watching at any depth."""

    @property
    def startup_rules(self) -> list[WatchRule]:
        return [rule for rule in self.rules if rule.run_at_startup]

    @property
    def logged_rules(self) -> list[WatchRule]:
        return [rule for rule in self.rules if rule.log_path is not None]
