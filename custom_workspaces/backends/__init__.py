"""
Window-system backends.

The session core only talks to the desktop through the WindowSystem
protocol below. Backends:
- sway: Sway / i3 over i3ipc
"""

from typing import Any, Callable, Optional, Protocol

from ..errors import Outcome
from ..models import WindowDescriptor

WindowCreatedHandler = Callable[[Any], None]


class WindowSystem(Protocol):
    """Narrow interface to the window manager."""

    async def set_workspace_policy(self, count: int) -> Outcome:
        """Disable dynamic workspaces and fix the workspace count."""
        ...

    async def activate_workspace(self, index: int) -> Outcome:
        """Focus workspace `index`; no-op if it does not resolve."""
        ...

    async def move_window_to_workspace(self, window: Any, index: int) -> Outcome:
        """Move `window` to workspace `index`; no-op if it does not resolve."""
        ...

    def subscribe_window_created(self, handler: WindowCreatedHandler) -> Any:
        """Call `handler(window)` for each new window. Returns a subscription."""
        ...

    def unsubscribe(self, subscription: Any) -> None:
        ...

    async def describe_window(self, window: Any) -> Optional[WindowDescriptor]:
        """Describe the current state of `window`; None if it is gone."""
        ...


__all__ = [
    "WindowCreatedHandler",
    "WindowSystem",
]
