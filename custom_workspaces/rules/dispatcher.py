"""
Dynamic rule dispatcher.

Moves newly created windows to the workspace of the first matching rule.
Evaluation is delayed by a short settle time because app_id and title are
often still unset when the window-created event arrives.
"""

import logging
from typing import Any, List, Optional

from ..backends import WindowSystem
from ..constants import WINDOW_SETTLE_DELAY_MS
from ..errors import ErrorReporter
from ..models import Configuration, Rule
from ..scheduler import Scheduler
from .matcher import select_rule

logger = logging.getLogger(__name__)


class DynamicRuleDispatcher:
    """Applies dynamic rules to new windows while enabled."""

    def __init__(
        self,
        window_system: WindowSystem,
        scheduler: Scheduler,
        reporter: Optional[ErrorReporter] = None,
        settle_delay_ms: int = WINDOW_SETTLE_DELAY_MS
    ):
        """
        Initialize dispatcher.

        Args:
            window_system: Window manager backend
            scheduler: Scheduler used for the delayed evaluations
            reporter: Error sink
            settle_delay_ms: Wait between window creation and matching
        """
        self.window_system = window_system
        self.scheduler = scheduler
        self.reporter = reporter or ErrorReporter()
        self.settle_delay_ms = settle_delay_ms
        self.rules: List[Rule] = []
        self._subscription: Any = None

    @property
    def enabled(self) -> bool:
        return self._subscription is not None

    def enable(self, config: Configuration) -> bool:
        """
        Subscribe to window-created events if rules are configured.

        Returns:
            True if the dispatcher is enabled after the call
        """
        if self.enabled:
            return True

        if not config.dynamic_rules_enabled:
            logger.debug("Dynamic rules disabled in configuration")
            return False

        if not config.dynamic_rules:
            logger.debug("Dynamic rules enabled but none configured")
            return False

        self.rules = list(config.dynamic_rules)
        self._subscription = self.window_system.subscribe_window_created(self._on_window_created)
        logger.info(f"Dynamic rules enabled ({len(self.rules)} rules).")
        return True

    def disable(self) -> None:
        """Unsubscribe from window-created events.

        Evaluations already scheduled stay registered with the Scheduler.
        """
        if self._subscription is None:
            return

        self.window_system.unsubscribe(self._subscription)
        self._subscription = None
        logger.info("Dynamic rules disabled")

    def _on_window_created(self, window: Any) -> None:
        self.scheduler.schedule(self.settle_delay_ms, lambda: self.evaluate(window))

    async def evaluate(self, window: Any) -> Optional[Rule]:
        """
        Match `window` against the rules and move it on the first match.

        Returns:
            The applied rule, or None if no rule matched
        """
        descriptor = await self.window_system.describe_window(window)
        if descriptor is None:
            logger.debug("Window closed before rules were evaluated")
            return None

        rule = select_rule(descriptor, self.rules, self.reporter)

        if rule is None:
            logger.debug(f"No rule for window app_id={descriptor.app_id!r} title={descriptor.title!r}")
            return None

        outcome = await self.window_system.move_window_to_workspace(window, rule.workspace_index)
        if self.reporter.capture(outcome):
            logger.info(
                f"Moved window app_id={descriptor.app_id!r} to workspace {rule.workspace_index}"
            )
        return rule
