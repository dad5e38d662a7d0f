#!/usr/bin/env python3
"""
Example: Embedding reloader in another asyncio program.

This example demonstrates:
- Building a ReloaderController from a config file
- Receiving notifications through a custom notifier
- Running the watch loop for a fixed time instead of until Ctrl+C
"""

import asyncio
import sys
from pathlib import Path

try:
    from reloader import ReloaderController
    from reloader_core.file_watcher import WatchdogEventSource
except ImportError:
    print("Error: Install reloader first: pip install reloader")
    sys.exit(1)


class PrintNotifier:
    """Prints controller notices with a marker."""

    def info(self, message: str) -> None:
        print(f"✓ {message}")

    def warning(self, message: str) -> None:
        print(f"⚠️ {message}")

    def error(self, message: str) -> None:
        print(f"❌ {message}")


async def watch_for(config_path: Path, root: Path, seconds: float) -> None:
    controller = ReloaderController.from_config_file(config_path, notifier=PrintNotifier())
    source = WatchdogEventSource(root, controller.config.skip_folders)

    try:
        await asyncio.wait_for(controller.run(source), timeout=seconds)
    except asyncio.TimeoutError:
        print(f"Stopped after {seconds:.0f}s, {len(controller.fingerprints)} file(s) fingerprinted")


if __name__ == "__main__":
    config = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(__file__).with_name("reloader.toml")
    asyncio.run(watch_for(config, Path.cwd(), seconds=60))
