"""
Custom Workspaces daemon.

Connects to Sway/i3, enables the session and runs the IPC event loop until
SIGINT/SIGTERM, then disables the session.
"""
# Module can be run with: python -m custom_workspaces run

import asyncio
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Optional, Set

try:
    from systemd import journal
    SYSTEMD_AVAILABLE = True
except ImportError:
    SYSTEMD_AVAILABLE = False

from .backends.sway import SwayWindowSystem
from .config import ConfigLoader
from .errors import ErrorReporter
from .session import SessionController

logger = logging.getLogger(__name__)


class SessionDaemon:
    """Main daemon wiring the Sway backend to a SessionController."""

    def __init__(self, config_path: Optional[Path] = None, window_system: Optional[SwayWindowSystem] = None):
        """
        Initialize daemon.

        Args:
            config_path: Configuration file (defaults to the per-user path)
            window_system: Backend to use (a new SwayWindowSystem if None)
        """
        self.reporter = ErrorReporter()
        self.window_system = window_system or SwayWindowSystem()
        self.controller = SessionController(
            self.window_system,
            loader=ConfigLoader(config_path, reporter=self.reporter),
            reporter=self.reporter,
        )
        self.running = False
        self._shutdown_tasks: Set[asyncio.Task] = set()

    async def start(self) -> None:
        """Connect, enable the session and block on the IPC event loop."""
        logger.info("Starting Custom Workspaces daemon")

        await self.window_system.connect()
        await self.controller.enable()

        self.running = True
        try:
            await self.window_system.sway.main()
        except asyncio.CancelledError:
            logger.info("Event loop cancelled")
        finally:
            self.controller.disable()
            self.running = False
            logger.info(f"Daemon stopped ({self.reporter.summary()})")

    async def stop(self) -> None:
        """Disable the session and leave the IPC event loop."""
        logger.info("Stopping daemon...")
        self.controller.disable()
        if self.window_system.sway:
            self.window_system.sway.main_quit()

    def request_stop(self) -> asyncio.Task:
        """Schedule stop() from a signal handler."""
        logger.info("Received shutdown signal")
        task = asyncio.create_task(self.stop())
        self._shutdown_tasks.add(task)
        task.add_done_callback(self._shutdown_tasks.discard)
        return task


def setup_logging() -> None:
    """Setup logging to systemd journal or stderr."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if SYSTEMD_AVAILABLE:
        handler = journal.JournalHandler(SYSLOG_IDENTIFIER="custom-workspaces")
    else:
        handler = logging.StreamHandler(sys.stderr)

    formatter = logging.Formatter(
        "%(levelname)s [%(name)s] %(message)s"
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logger.info(f"Logging configured: level={log_level}")


async def main_async(config_path: Optional[Path] = None) -> int:
    """
    Async main function.

    Returns:
        Exit code (0 = success, non-zero = error)
    """
    daemon = SessionDaemon(config_path)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, daemon.request_stop)

    try:
        await daemon.start()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    return 0


def main(config_path: Optional[Path] = None) -> None:
    """Main entry point."""
    setup_logging()

    logger.info("Custom Workspaces daemon starting...")
    logger.info(f"PID: {os.getpid()}")

    try:
        sys.exit(asyncio.run(main_async(config_path)))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
