"""
Session controller.

Owns all per-session state: the loaded configuration, the scheduler with its
pending actions, the dynamic-rule subscription and the bootstrapped flag.
"""

import logging
from typing import Optional

from .backends import WindowSystem
from .config import ConfigLoader
from .errors import ErrorReporter
from .launcher import CommandLauncher
from .models import Configuration, StartupPlan
from .rules import DynamicRuleDispatcher
from .scheduler import Scheduler
from .sequencer import StartupSequencer

logger = logging.getLogger(__name__)


class SessionController:
    """Enable/disable lifecycle for one session.

    enable() bootstraps at most once until disable() is called. disable()
    is always safe: it unsubscribes, cancels every pending action and
    clears the bootstrapped flag.
    """

    def __init__(
        self,
        window_system: WindowSystem,
        loader: Optional[ConfigLoader] = None,
        launcher: Optional[CommandLauncher] = None,
        reporter: Optional[ErrorReporter] = None,
        scheduler: Optional[Scheduler] = None
    ):
        self.reporter = reporter or ErrorReporter()
        self.window_system = window_system
        self.loader = loader or ConfigLoader(reporter=self.reporter)
        self.launcher = launcher or CommandLauncher()
        self.scheduler = scheduler or Scheduler(self.reporter)

        self.sequencer = StartupSequencer(
            window_system, self.launcher, self.scheduler, self.reporter
        )
        self.dispatcher = DynamicRuleDispatcher(window_system, self.scheduler, self.reporter)

        self.config: Optional[Configuration] = None
        self.plan: Optional[StartupPlan] = None
        self._bootstrapped = False

    @property
    def bootstrapped(self) -> bool:
        return self._bootstrapped

    async def enable(self) -> bool:
        """
        Load the configuration and start the session.

        Returns:
            True if a bootstrap ran during this call
        """
        logger.info("Enabling...")

        if self._bootstrapped:
            logger.info("Already bootstrapped, skipping.")
            return False

        config = self.loader.load()
        if config is None:
            logger.info("No config; nothing to do.")
            return False

        self.config = config
        self.dispatcher.enable(config)
        self.plan = await self.sequencer.start(config)
        self._bootstrapped = True

        logger.info("Enabled.")
        return True

    def disable(self) -> None:
        """Stop reacting to windows and drop all pending actions."""
        logger.info("Disabling...")
        self.dispatcher.disable()
        self.scheduler.cancel_all()
        self._bootstrapped = False
