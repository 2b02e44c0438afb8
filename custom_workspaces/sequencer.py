"""
Startup sequencer.

Turns the configured workspace groups into a linear playlist: activate a
group's workspace, launch its commands one step apart, move on to the next
group, and finally focus the configured workspace. The playlist starts
`startupDelayMs` after enable; each entry is an independent scheduled
action, so a failing command never holds up the rest.
"""

import logging
from typing import Callable

from .backends import WindowSystem
from .errors import ErrorReporter
from .launcher import CommandLauncher
from .models import Configuration, PlannedStep, StartupPlan, StepKind
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


def build_startup_plan(config: Configuration) -> StartupPlan:
    """
    Compute the startup playlist for `config`.

    Offsets are relative to the start of the playlist; due times add the
    startup delay. With N groups holding C commands in total the plan has
    N + C + 1 steps in non-decreasing time order.

    Examples:
        >>> config = Configuration.model_validate({
        ...     "startupDelayMs": 1000, "stepDelayMs": 500,
        ...     "workspaces": [{"index": 0, "commands": ["a"]}, {"index": 1}],
        ... })
        >>> [(s.due_ms, s.describe()) for s in build_startup_plan(config).steps]
        [(1000, 'activate workspace 0'), (1500, 'spawn a'), (2000, 'activate workspace 1'), (3000, 'activate workspace 0')]
    """
    step = config.step_delay_ms
    start = config.startup_delay_ms
    steps = []
    t = 0

    for group in config.workspaces:
        steps.append(PlannedStep(t, start + t, StepKind.ACTIVATE_WORKSPACE, group.index))
        t += step

        for command in group.commands:
            steps.append(PlannedStep(t, start + t, StepKind.SPAWN_COMMAND, command))
            t += step

    t += step
    steps.append(
        PlannedStep(t, start + t, StepKind.ACTIVATE_WORKSPACE, config.focus_workspace_index_after)
    )

    return StartupPlan(startup_delay_ms=start, steps=steps)


class StartupSequencer:
    """Plays the startup playlist through the Scheduler."""

    def __init__(
        self,
        window_system: WindowSystem,
        launcher: CommandLauncher,
        scheduler: Scheduler,
        reporter: ErrorReporter
    ):
        self.window_system = window_system
        self.launcher = launcher
        self.scheduler = scheduler
        self.reporter = reporter

    async def start(self, config: Configuration) -> StartupPlan:
        """
        Apply the workspace policy now and schedule the playlist.

        Args:
            config: Session configuration

        Returns:
            The plan that was scheduled
        """
        outcome = await self.window_system.set_workspace_policy(config.workspace_count)
        if self.reporter.capture(outcome):
            logger.info(f"set static workspaces = {config.workspace_count}")

        plan = build_startup_plan(config)
        self.scheduler.schedule(plan.startup_delay_ms, lambda: self._play(plan))
        logger.info(
            f"Startup playlist of {len(plan)} actions scheduled in {plan.startup_delay_ms}ms"
        )
        return plan

    def _play(self, plan: StartupPlan) -> None:
        # Scheduled from one call stack so increasing offsets keep their order
        for step in plan.steps:
            self.scheduler.schedule(step.offset_ms, self._action_for(step))

    def _action_for(self, step: PlannedStep) -> Callable:
        if step.kind == StepKind.ACTIVATE_WORKSPACE:
            return lambda: self._activate(step.target)
        return lambda: self._spawn(step.target)

    async def _activate(self, index: int) -> None:
        outcome = await self.window_system.activate_workspace(index)
        self.reporter.capture(outcome)

    def _spawn(self, command: str) -> None:
        outcome = self.launcher.spawn(command)
        self.reporter.capture(outcome)
