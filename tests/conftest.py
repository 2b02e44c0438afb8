"""
Pytest configuration and fixtures for Custom Workspaces tests.

Provides a virtual-clock scheduler and a recording window system so the
startup playlist and rule dispatch can be checked without real timers or a
running compositor.
"""

import heapq
import inspect
import itertools
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest

from custom_workspaces.errors import CommandParseError, ErrorReporter, ExternalAPIError, Outcome
from custom_workspaces.models import WindowDescriptor


class VirtualScheduler:
    """Scheduler double driven by a virtual millisecond clock."""

    def __init__(self):
        self.now = 0
        self._queue: List[Tuple[int, int, Callable]] = []
        self._handles = itertools.count(1)

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def schedule(self, delay_ms: int, action: Callable) -> int:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        handle = next(self._handles)
        heapq.heappush(self._queue, (self.now + delay_ms, handle, action))
        return handle

    def cancel_all(self) -> None:
        self._queue.clear()

    async def advance(self, ms: Optional[int] = None) -> None:
        """Fire every action due within `ms` (all actions if None)."""
        deadline = None if ms is None else self.now + ms
        while self._queue and (deadline is None or self._queue[0][0] <= deadline):
            due, _, action = heapq.heappop(self._queue)
            self.now = due
            result = action()
            if inspect.isawaitable(result):
                await result
        if deadline is not None:
            self.now = deadline


@dataclass(frozen=True)
class FakeWindow:
    id: int
    app_id: Optional[str] = None
    title: str = ""


class FakeWindowSystem:
    """Records every window-manager call with the virtual time it happened."""

    def __init__(self, clock: Optional[VirtualScheduler] = None):
        self.clock = clock
        self.calls: List[Tuple[Any, ...]] = []
        self.handlers: Dict[int, Callable] = {}
        self._subscriptions = itertools.count(1)
        self.failing_operations: set = set()
        self.closed_windows: set = set()

    def _now(self) -> int:
        return self.clock.now if self.clock else 0

    def _outcome(self, operation: str) -> Outcome:
        if operation in self.failing_operations:
            return Outcome.fail(ExternalAPIError(operation, "simulated failure"))
        return Outcome.ok()

    async def set_workspace_policy(self, count: int) -> Outcome:
        self.calls.append(("policy", count, self._now()))
        return self._outcome("policy")

    async def activate_workspace(self, index: int) -> Outcome:
        self.calls.append(("activate", index, self._now()))
        return self._outcome("activate")

    async def move_window_to_workspace(self, window: Any, index: int) -> Outcome:
        self.calls.append(("move", window.id, index, self._now()))
        return self._outcome("move")

    def subscribe_window_created(self, handler: Callable) -> int:
        subscription = next(self._subscriptions)
        self.handlers[subscription] = handler
        return subscription

    def unsubscribe(self, subscription: int) -> None:
        self.handlers.pop(subscription, None)

    async def describe_window(self, window: FakeWindow) -> Optional[WindowDescriptor]:
        if window.id in self.closed_windows:
            return None
        return WindowDescriptor(app_id=window.app_id, title=window.title)

    def emit_window_created(self, window: FakeWindow) -> None:
        for handler in list(self.handlers.values()):
            handler(window)


class FakeLauncher:
    """CommandLauncher double recording spawns."""

    def __init__(self, clock: Optional[VirtualScheduler] = None, failing: Optional[set] = None):
        self.clock = clock
        self.spawned: List[Tuple[str, int]] = []
        self.failing = failing or set()

    def spawn(self, command: str) -> Outcome:
        if command in self.failing:
            return Outcome.fail(CommandParseError(command, "simulated parse failure"))
        self.spawned.append((command, self.clock.now if self.clock else 0))
        return Outcome.ok()


@pytest.fixture
def clock() -> VirtualScheduler:
    return VirtualScheduler()


@pytest.fixture
def window_system(clock) -> FakeWindowSystem:
    return FakeWindowSystem(clock)


@pytest.fixture
def launcher(clock) -> FakeLauncher:
    return FakeLauncher(clock)


@pytest.fixture
def reporter() -> ErrorReporter:
    return ErrorReporter()


@pytest.fixture
def write_config(tmp_path) -> Callable[[Any], Path]:
    """Write a config file (dict → JSON, str → raw text) and return its path."""

    def _write(content: Any) -> Path:
        path = tmp_path / "config.json"
        if isinstance(content, str):
            path.write_text(content)
        else:
            path.write_text(json.dumps(content))
        return path

    return _write


@pytest.fixture
def example_config() -> dict:
    """Two groups, one command, focus back to the first workspace."""
    return {
        "workspaceCount": 4,
        "startupDelayMs": 1000,
        "stepDelayMs": 500,
        "focusWorkspaceIndexAfter": 0,
        "workspaces": [
            {"index": 0, "commands": ["a"]},
            {"index": 1, "commands": []},
        ],
    }
