"""Sway/i3 window-system backend over i3ipc.

Workspace index i (zero-based) addresses workspace number i + 1. Sway has
no switch for dynamic workspaces, so the workspace policy is enforced here:
once a count is set, indices at or above it do not resolve and requests for
them are no-ops.
"""

import logging
from typing import Any, List, Optional

from i3ipc import Event
from i3ipc.aio import Connection

from ..constants import LAUNCHER_FILE_SUFFIX
from ..errors import ErrorCode, ExternalAPIError, Outcome
from ..models import WindowDescriptor
from . import WindowCreatedHandler

logger = logging.getLogger(__name__)


def strip_launcher_suffix(app_id: str) -> str:
    """Strip a trailing `.desktop` from an application id.

    Examples:
        "firefox.desktop" → "firefox"
        "org.gnome.Nautilus" → "org.gnome.Nautilus"
    """
    if app_id.endswith(LAUNCHER_FILE_SUFFIX):
        return app_id[: -len(LAUNCHER_FILE_SUFFIX)]
    return app_id


def get_window_app_id(container) -> Optional[str]:
    """Stable application id of a container.

    Prefers the Wayland app_id (launcher suffix stripped), falls back to
    the X11 window class, else None.
    """
    app_id = getattr(container, "app_id", None)
    if app_id:
        return strip_launcher_suffix(app_id)

    window_class = getattr(container, "window_class", None)
    if window_class:
        return window_class

    window_properties = getattr(container, "window_properties", None)
    if isinstance(window_properties, dict):
        return window_properties.get("class") or None

    return None


def get_window_title(container) -> str:
    return getattr(container, "name", None) or ""


class SwayWindowSystem:
    """WindowSystem implementation for Sway and i3."""

    def __init__(self, sway_connection: Optional[Connection] = None):
        """
        Initialize backend.

        Args:
            sway_connection: Async i3ipc Connection (created by connect() if None)
        """
        self.sway = sway_connection
        self.workspace_count: Optional[int] = None

    async def connect(self) -> Connection:
        """Open the IPC connection if not already connected."""
        if self.sway is None:
            self.sway = await Connection(auto_reconnect=True).connect()
            logger.info("Connected to Sway IPC")
        return self.sway

    def resolve_workspace(self, index: int) -> Optional[int]:
        """Map a zero-based index to a workspace number, or None."""
        if index < 0:
            return None
        if self.workspace_count is not None and index >= self.workspace_count:
            return None
        return index + 1

    async def set_workspace_policy(self, count: int) -> Outcome:
        if count < 1:
            return Outcome.fail(
                ExternalAPIError("set_workspace_policy", f"count must be >= 1, got {count}")
            )
        self.workspace_count = count
        logger.info(f"Workspace policy: {count} fixed workspaces (numbers 1-{count})")
        return Outcome.ok()

    async def activate_workspace(self, index: int) -> Outcome:
        number = self.resolve_workspace(index)
        if number is None:
            logger.debug(f"Workspace index {index} does not resolve, not activating")
            return Outcome.ok()
        return await self._command(f"workspace number {number}", f"activate_workspace({index})")

    async def move_window_to_workspace(self, window: Any, index: int) -> Outcome:
        number = self.resolve_workspace(index)
        if number is None:
            logger.debug(f"Workspace index {index} does not resolve, not moving window")
            return Outcome.ok()
        return await self._command(
            f"[con_id={window.id}] move container to workspace number {number}",
            f"move_window_to_workspace({index})"
        )

    def subscribe_window_created(self, handler: WindowCreatedHandler) -> Any:
        if self.sway is None:
            raise RuntimeError("Not connected to Sway IPC")

        def on_window_new(sway, event):
            handler(event.container)

        self.sway.on(Event.WINDOW_NEW, on_window_new)
        logger.debug("Subscribed to window::new")
        return on_window_new

    def unsubscribe(self, subscription: Any) -> None:
        if self.sway is None or subscription is None:
            return
        try:
            self.sway.off(subscription)
        except Exception as e:
            logger.warning(f"Failed to unsubscribe from window::new: {e}")

    async def describe_window(self, window: Any) -> Optional[WindowDescriptor]:
        """Describe the current state of `window`.

        Event containers are snapshots taken when the event fired, so the
        window is re-fetched from the tree by id. Returns None if the window
        no longer exists.
        """
        container = await self._refresh(window)
        if container is None:
            return None
        return WindowDescriptor(
            app_id=get_window_app_id(container),
            title=get_window_title(container),
        )

    async def _refresh(self, window: Any) -> Any:
        if self.sway is None:
            return window

        try:
            tree = await self.sway.get_tree()
        except Exception as e:
            logger.warning(f"Failed to re-fetch window {window.id}, using event snapshot: {e}")
            return window

        fresh_container = tree.find_by_id(window.id)
        if not fresh_container:
            logger.debug(f"Window {window.id} no longer exists")
        return fresh_container

    async def _command(self, command: str, operation: str) -> Outcome:
        if self.sway is None:
            return Outcome.fail(
                ExternalAPIError(operation, "not connected", code=ErrorCode.IPC_NOT_CONNECTED)
            )

        try:
            replies: List[Any] = await self.sway.command(command)
        except Exception as e:
            return Outcome.fail(ExternalAPIError(operation, str(e)))

        for reply in replies or []:
            if not reply.success:
                return Outcome.fail(ExternalAPIError(operation, reply.error or "command failed"))

        logger.debug(f"Sway command ok: {command}")
        return Outcome.ok()
