"""URLHealth - on-demand reachability checks for a fixed set of URL paths."""

import argparse
import logging
import signal
import sys
from threading import Event
from typing import Optional

__version__ = "0.1.0"

# Set by SIGINT/SIGTERM; _cmd_run blocks on it while the server runs
_shutdown_event: Optional[Event] = None

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False) -> None:
    """Configure logging for the application."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def _handle_shutdown(signum: int, frame: object) -> None:
    """Signal handler for graceful shutdown."""
    sig_name = signal.Signals(signum).name
    logger.info("Received %s, initiating shutdown...", sig_name)
    if _shutdown_event is not None:
        _shutdown_event.set()


def _cmd_run(args: argparse.Namespace) -> None:
    """Start the HTTP server and open the dashboard in a browser."""
    global _shutdown_event

    _setup_logging(args.verbose)

    logger.info("URLHealth %s starting...", __version__)

    # Imported on use so --help and --version skip the HTTP stack
    from .api import ApiError, ApiServer
    from .browser import open_browser_later
    from .config import ConfigError, ServerConfig, load_settings

    # 1. Load settings; nothing is bound until this succeeds
    try:
        settings = load_settings(args.config)
        logger.info("Settings loaded from %s", args.config)
        logger.info("%d paths, %d domains configured", len(settings.paths), len(settings.domains))
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        sys.exit(1)

    server_config = ServerConfig()

    # 2. Bind the listener
    api_server = ApiServer(settings, server_config)
    try:
        api_server.start()
    except ApiError as e:
        logger.error("Failed to start server: %s", e)
        sys.exit(1)

    # 3. Stop on SIGINT or SIGTERM
    _shutdown_event = Event()
    signal.signal(signal.SIGTERM, _handle_shutdown)
    signal.signal(signal.SIGINT, _handle_shutdown)

    logger.info("Server running on %s", server_config.local_url)

    # 4. Open the dashboard once the listener is up
    if not args.no_browser:
        open_browser_later(server_config.local_url)

    try:
        _shutdown_event.wait()
    except KeyboardInterrupt:
        # SIGINT with the default handler still in place
        logger.info("Keyboard interrupt received")
    finally:
        api_server.stop()
        logger.info("Shutdown complete")


def main(argv: Optional[list[str]] = None) -> None:
    """Main entry point for the urlhealth package."""
    parser = argparse.ArgumentParser(
        description="URLHealth - check configured URL paths across domains"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"urlhealth {__version__}",
    )
    parser.add_argument(
        "-c", "--config",
        default="appsettings.json",
        help="Path to settings file (default: appsettings.json)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose (debug) logging",
    )
    parser.add_argument(
        "--no-browser",
        action="store_true",
        help="Do not open the dashboard in a browser on startup",
    )
    parser.set_defaults(func=_cmd_run)

    args = parser.parse_args(argv)
    args.func(args)
