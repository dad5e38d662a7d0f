"""reloader: rerun shell commands when watched files really change."""

__version__ = "0.1.0"

# Public API
from reloader.controller import ReloaderController
from reloader.log_follower import LogFollower

__all__ = [
    "__version__",
    "ReloaderController",
    "LogFollower",
]
