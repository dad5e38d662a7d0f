"""CLI entry point for reloader: watch the current directory and rerun commands."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from reloader import __version__
from reloader.controller import ReloaderController
from reloader.shutdown import FAREWELL, ShutdownHandler
from reloader_core.config import DEFAULT_CONFIG_NAME, create_default_config, load_config
from reloader_core.file_watcher import WatchdogEventSource
from reloader_core.models import ReloaderConfig

try:
    import resource
except ImportError:  # Windows
    resource = None

logger = logging.getLogger("reloader")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="reloader",
        description="Rerun shell commands when matching files in the current directory change.",
        epilog="Examples:\n"
        "  reloader                       # Use ./reloader.toml\n"
        "  reloader --config dev.toml     # Use custom config\n"
        "  reloader --init                # Write a starter reloader.toml",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_NAME,
        help=f"Path to config file (default: {DEFAULT_CONFIG_NAME})",
    )

    parser.add_argument(
        "--init",
        action="store_true",
        help="Write a starter config file and exit",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S",
    )
    # watchdog is chatty at DEBUG
    logging.getLogger("watchdog").setLevel(logging.INFO)


def log_open_file_limit() -> None:
    """Log RLIMIT_NOFILE; large trees need one watch descriptor per directory."""
    if resource is None:
        return
    soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
    logger.info(f"open file limit, soft={soft} hard={hard}")


async def serve(config: ReloaderConfig, root: Path) -> None:
    """Watch root with config until the process is interrupted."""
    loop = asyncio.get_running_loop()
    ShutdownHandler().install(loop)

    source = WatchdogEventSource(root, config.skip_folders, loop=loop)
    controller = ReloaderController(config)
    await controller.run(source)


def main(argv: list[str] | None = None) -> None:
    """
    Main entry point for reloader CLI.

    Handles:
    - Argument parsing
    - --init config creation
    - Config loading and startup diagnostics
    - Running the watch loop
    - Error handling and exit codes
    """
    args = parse_args(argv)
    setup_logging(args.verbose)

    config_path = Path(args.config)

    if args.init:
        try:
            if create_default_config(config_path):
                print(f"Created default config at: {config_path.resolve()}")
            else:
                print(f"Config already exists: {config_path.resolve()}")
        except OSError as e:
            print(f"Error: Failed to create config: {e}", file=sys.stderr)
            sys.exit(1)
        return

    try:
        config = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        root = Path.cwd()
    except OSError:
        print("Error: Unable to get current directory.", file=sys.stderr)
        sys.exit(1)

    log_open_file_limit()
    logger.info(f"skip folders, {config.skip_folders}")

    try:
        asyncio.run(serve(config, root))
    except KeyboardInterrupt:
        # Only reached if Ctrl+C lands before the handler is installed
        print(FAREWELL)
        sys.exit(0)
    except OSError as e:
        print(f"Error: Failed to start watcher: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
