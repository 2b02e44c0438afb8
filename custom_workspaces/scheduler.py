"""
Delayed-action scheduler on the asyncio event loop.

Actions are registered with loop.call_later and fire on the loop thread.
Only bulk cancellation is offered: nothing ever cancels a single action.
"""

import asyncio
import inspect
import itertools
import logging
from typing import Any, Callable, Dict, Optional, Set

from .errors import ErrorReporter

logger = logging.getLogger(__name__)

Action = Callable[[], Any]


class Scheduler:
    """Registry of pending delayed actions.

    An action runs at most once. If it raises, or returns an awaitable that
    raises, the error goes to the reporter and nothing else is affected.
    """

    def __init__(
        self,
        reporter: Optional[ErrorReporter] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ):
        """
        Initialize scheduler.

        Args:
            reporter: Error sink for failing actions
            loop: Event loop to use (defaults to the running loop)
        """
        self.reporter = reporter or ErrorReporter()
        self._loop = loop
        self._pending: Dict[int, asyncio.TimerHandle] = {}
        self._handles = itertools.count(1)
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        """Number of registered actions that have not fired yet."""
        return len(self._pending)

    def schedule(self, delay_ms: int, action: Action) -> int:
        """
        Run `action` no earlier than `delay_ms` milliseconds from now.

        Args:
            delay_ms: Non-negative delay in milliseconds
            action: Zero-argument callable; may return an awaitable

        Returns:
            Opaque handle of the registered action
        """
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")

        loop = self._loop or asyncio.get_running_loop()
        handle = next(self._handles)
        self._pending[handle] = loop.call_later(delay_ms / 1000, self._fire, handle, action)
        return handle

    def cancel_all(self) -> None:
        """Cancel every action that has not fired yet."""
        count = len(self._pending)
        for timer in self._pending.values():
            timer.cancel()
        self._pending.clear()
        if count:
            logger.debug(f"Cancelled {count} pending actions")

    def _fire(self, handle: int, action: Action) -> None:
        self._pending.pop(handle, None)

        try:
            result = action()
        except Exception as e:
            self.reporter.report_exception("Scheduled action", e)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self.reporter.report_exception("Scheduled action", exc)
