"""Fire-and-forget command launcher.

Command lines from the configuration are split with shell-word rules and
started as detached processes looked up on PATH. Nothing is supervised
after launch.
"""

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import List, Optional

from .errors import CommandParseError, ErrorCode, ExternalAPIError, Outcome

logger = logging.getLogger(__name__)


def expand_tilde(command: str) -> str:
    """Expand a leading `~/` to the user's home directory.

    Examples:
        "~/bin/start.sh --fast" → "/home/me/bin/start.sh --fast"
        "firefox ~/notes" → "firefox ~/notes" (only a leading ~/ is expanded)
    """
    if command and command.startswith("~/"):
        return f"{Path.home()}/{command[2:]}"
    return command


def parse_command(command: str) -> List[str]:
    """
    Split a command line into argv.

    Raises:
        CommandParseError: If quoting is unbalanced or the line is empty
    """
    expanded = expand_tilde(command)
    try:
        argv = shlex.split(expanded)
    except ValueError as e:
        raise CommandParseError(command, str(e)) from e

    if not argv:
        raise CommandParseError(command, "empty command", code=ErrorCode.COMMAND_EMPTY)
    return argv


class CommandLauncher:
    """Launches configured command lines as detached processes."""

    def __init__(self, cwd: Optional[Path] = None):
        """
        Args:
            cwd: Working directory for launched processes (defaults to $HOME)
        """
        self.cwd = cwd or Path.home()

    def spawn(self, command: str) -> Outcome:
        """Launch `command`. Parse and launch failures are returned, not raised."""
        try:
            argv = parse_command(command)
        except CommandParseError as e:
            return Outcome.fail(e)

        try:
            process = subprocess.Popen(
                argv,
                cwd=str(self.cwd),
                env=dict(os.environ),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True  # Detach from parent
            )
        except (OSError, ValueError) as e:
            return Outcome.fail(
                ExternalAPIError(f"spawn '{command}'", str(e), code=ErrorCode.SPAWN_FAILED)
            )

        logger.info(f"spawn: {command} (PID: {process.pid})")
        return Outcome.ok()
