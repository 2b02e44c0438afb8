"""
Error handling for the session helper.

Every call that crosses into the window manager or the OS returns an
Outcome instead of raising. Failures are funnelled into one ErrorReporter
per session, which logs them uniformly and keeps counters.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """
    Error codes for the session helper.

    - 1100-1199: Configuration errors
    - 1200-1299: Command errors
    - 1300-1399: Rule errors
    - 1400-1499: Window manager / OS errors
    - 1500-1599: Scheduler errors
    """

    # Configuration errors (1100-1199)
    CONFIG_NOT_FOUND = 1100
    CONFIG_READ_FAILED = 1101
    CONFIG_PARSE_FAILED = 1102
    CONFIG_INVALID = 1103

    # Command errors (1200-1299)
    COMMAND_PARSE_FAILED = 1200
    COMMAND_EMPTY = 1201

    # Rule errors (1300-1399)
    INVALID_REGEX = 1300

    # Window manager / OS errors (1400-1499)
    IPC_FAILED = 1400
    IPC_NOT_CONNECTED = 1401
    SPAWN_FAILED = 1402

    # Scheduler errors (1500-1599)
    ACTION_FAILED = 1500


class SessionError(Exception):
    """Base exception for session helper errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize session error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a JSON-compatible dictionary."""
        result = {
            "code": self.code.value,
            "type": type(self).__name__,
            "message": self.message
        }

        if self.context:
            result["context"] = self.context

        return result


class ConfigurationError(SessionError):
    """Configuration is missing, unreadable or malformed."""

    def __init__(self, code: ErrorCode, file_path: str, reason: str):
        super().__init__(
            code=code,
            message=f"Failed to load configuration from {file_path}: {reason}",
            context={"file_path": file_path, "reason": reason}
        )


class ExternalAPIError(SessionError):
    """A window manager or OS call failed."""

    def __init__(self, operation: str, reason: str, code: ErrorCode = ErrorCode.IPC_FAILED):
        super().__init__(
            code=code,
            message=f"{operation} failed: {reason}",
            context={"operation": operation, "reason": reason}
        )


class RuleCompilationError(SessionError):
    """A rule's title pattern does not compile."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            code=ErrorCode.INVALID_REGEX,
            message=f"Invalid regex '{pattern}': {reason}",
            context={"pattern": pattern, "reason": reason}
        )


class CommandParseError(SessionError):
    """A command line cannot be split into arguments."""

    def __init__(self, command: str, reason: str, code: ErrorCode = ErrorCode.COMMAND_PARSE_FAILED):
        super().__init__(
            code=code,
            message=f"Cannot parse command '{command}': {reason}",
            context={"command": command, "reason": reason}
        )


@dataclass
class Outcome:
    """Result of a single external call."""

    success: bool
    error: Optional[SessionError] = None

    @staticmethod
    def ok() -> "Outcome":
        return Outcome(success=True)

    @staticmethod
    def fail(error: SessionError) -> "Outcome":
        return Outcome(success=False, error=error)


@dataclass
class ErrorReporter:
    """Single logging sink for non-fatal failures.

    Components never log failures of external calls themselves; they hand
    the Outcome (or the error) to the reporter injected at construction.
    """

    errors_total: int = 0
    counts_by_code: Dict[str, int] = field(default_factory=dict)
    _reported_keys: Set[str] = field(default_factory=set)

    def report(self, error: SessionError) -> None:
        """Log a non-fatal error and count it."""
        self.errors_total += 1
        name = error.code.name
        self.counts_by_code[name] = self.counts_by_code.get(name, 0) + 1
        logger.warning(f"{type(error).__name__} [{error.code.value}]: {error.message}")

    def report_once(self, key: str, error: SessionError) -> None:
        """Log an error only the first time `key` is seen by this reporter."""
        if key in self._reported_keys:
            return
        self._reported_keys.add(key)
        self.report(error)

    def report_exception(self, operation: str, exc: BaseException) -> None:
        """Log an exception escaping a scheduled action."""
        if isinstance(exc, SessionError):
            self.report(exc)
            return
        self.errors_total += 1
        name = ErrorCode.ACTION_FAILED.name
        self.counts_by_code[name] = self.counts_by_code.get(name, 0) + 1
        logger.warning(f"{operation} failed: {exc}", exc_info=exc)

    def capture(self, outcome: Outcome) -> bool:
        """Report a failed Outcome. Returns True when the call succeeded."""
        if outcome.success:
            return True
        if outcome.error is not None:
            self.report(outcome.error)
        return False

    def summary(self) -> Dict[str, Any]:
        return {
            "errors_total": self.errors_total,
            "by_code": dict(self.counts_by_code),
        }
