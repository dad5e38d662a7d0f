"""Configuration parsing for reloader."""

import logging
from collections import Counter
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from reloader_core.models import ReloaderConfig, WatchRule

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "reloader.toml"

# Starter config written by `reloader --init`
DEFAULT_CONFIG_TEMPLATE = """\
# Auto-generated reloader.toml

[skip]
folders = [".git", "__pycache__", ".venv", "node_modules"]

[[watch]]
pattern = "*.py"
command = "pytest -q"
debounce_ms = 1000

# [[watch]]
# pattern = "*.go"
# command = "go build -o app . && ./app"
# log = "app.log"
# debounce_ms = 500
# start = true
"""


def create_default_config(config_path: Path) -> bool:
    """
    Create a default reloader.toml if it doesn't exist.

    Args:
        config_path: Path where config should be created

    Returns:
        True if config was created, False if it already exists

    Raises:
        PermissionError: If unable to write to the directory
        OSError: If other file system errors occur
    """
    if config_path.exists():
        return False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
    return True


def _parse_rule(raw: object, index: int, base_dir: Path, path: Path) -> WatchRule:
    """Validate one [[watch]] table and turn it into a WatchRule."""
    where = f"{path}: watch rule #{index + 1}"

    if not isinstance(raw, dict):
        raise ValueError(f"{where} must be a table")

    pattern = raw.get("pattern")
    if not isinstance(pattern, str) or not pattern:
        raise ValueError(f"{where} needs a non-empty string 'pattern'")

    command = raw.get("command")
    if not isinstance(command, str) or not command.strip():
        raise ValueError(f"{where} needs a non-empty string 'command'")

    debounce_ms = raw.get("debounce_ms", 0)
    # bool is an int subclass
    if isinstance(debounce_ms, bool) or not isinstance(debounce_ms, int) or debounce_ms < 0:
        raise ValueError(f"{where}: 'debounce_ms' must be a non-negative integer, got {debounce_ms!r}")

    start = raw.get("start", False)
    if not isinstance(start, bool):
        raise ValueError(f"{where}: 'start' must be true or false, got {start!r}")

    log = raw.get("log")
    if log is not None and (not isinstance(log, str) or not log):
        raise ValueError(f"{where}: 'log' must be a non-empty string")

    log_tag = raw.get("log_tag")
    if log_tag is not None and not isinstance(log_tag, str):
        raise ValueError(f"{where}: 'log_tag' must be a string")

    return WatchRule(
        pattern=pattern,
        command=command,
        log_path=(base_dir / log) if log else None,
        log_tag=log_tag or None,
        debounce_ms=debounce_ms,
        run_at_startup=start,
    )


def load_config(path: str | Path) -> ReloaderConfig:
    """Load watch rules and skip folders from a TOML file.

    Args:
        path: Path to TOML config file

    Returns:
        Parsed ReloaderConfig

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be read, is not valid TOML, or breaks the schema
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\nPlease create {path.name}, or run 'reloader --init' to write a starter config."
        )

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Failed to parse config file {path}: {e}") from e
    except OSError as e:
        raise ValueError(f"Failed to read config file {path}: {e}") from e

    skip = raw.get("skip", {})
    if not isinstance(skip, dict):
        raise ValueError(f"{path}: [skip] must be a table")
    skip_folders = skip.get("folders", [])
    if not isinstance(skip_folders, list) or not all(isinstance(f, str) for f in skip_folders):
        raise ValueError(f"{path}: 'skip.folders' must be a list of folder names")

    watch = raw.get("watch", [])
    if not isinstance(watch, list):
        raise ValueError(f"{path}: 'watch' must be an array of tables ([[watch]])")

    base_dir = path.resolve().parent
    rules = [_parse_rule(w, i, base_dir, path) for i, w in enumerate(watch)]

    # Debounce state is keyed by pattern, so these rules share one timer
    for pattern, count in Counter(r.pattern for r in rules).items():
        if count > 1:
            logger.warning(f"Pattern '{pattern}' is used by {count} rules; they share one debounce timer")

    return ReloaderConfig(rules=rules, skip_folders=list(skip_folders))
