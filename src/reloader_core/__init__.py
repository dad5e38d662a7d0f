"""reloader-core: Models and building blocks shared by reloader frontends."""

__version__ = "0.1.0"

# Config
from reloader_core.config import load_config

# Components
from reloader_core.debounce import DebounceGate
from reloader_core.dispatcher import CommandDispatcher
from reloader_core.fingerprint import FingerprintStore
from reloader_core.matcher import RuleMatcher

# Models
from reloader_core.models import EventKind, RawEvent, ReloaderConfig, WatchRule

__all__ = [
    "__version__",
    # Models
    "EventKind",
    "RawEvent",
    "ReloaderConfig",
    "WatchRule",
    # Components
    "CommandDispatcher",
    "DebounceGate",
    "FingerprintStore",
    "RuleMatcher",
    # Config
    "load_config",
]
