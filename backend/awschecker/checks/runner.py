"""Periodic runner driving one service's check catalog."""

import asyncio
from enum import Enum
from typing import Optional

from awschecker.checks.sequencer import ThrottledSequencer
from awschecker.checks.types import CheckGroup
from awschecker.core.cancellation import CancellationSignal
from awschecker.core.logging import logger


class RunnerState(str, Enum):
    """Lifecycle of a periodic runner."""

    waiting = "waiting"
    running = "running"
    stopped = "stopped"


class PeriodicRunner:
    """Runs a check group, waits ``interval`` after each cycle, repeats.

    The wait is measured from the end of a cycle, so cycles of one service
    never overlap.  Cancellation interrupts the wait immediately; a running
    cycle notices it between chains and between steps.
    """

    def __init__(
        self,
        group: CheckGroup,
        sequencer: ThrottledSequencer,
        cancel: CancellationSignal,
        interval: float,
    ) -> None:
        self._group = group
        self._sequencer = sequencer
        self._cancel = cancel
        self._interval = interval
        self._state = RunnerState.waiting
        self._task: Optional[asyncio.Task] = None
        self.cycles: int = 0
        self._logger = logger.with_context(component="runner", service=group.service)

    @property
    def service(self) -> str:
        return self._group.service

    @property
    def state(self) -> RunnerState:
        return self._state

    async def run(self) -> None:
        """Loop until the cancellation signal fires."""
        self._logger.info(f"Checking {len(self._group.chains)} methods every {self._interval}s")
        try:
            while not await self._cancel.wait(self._interval):
                self._state = RunnerState.running
                try:
                    await self._run_cycle()
                except Exception:
                    self._logger.exception("Check cycle failed unexpectedly")
                self.cycles += 1
                self._state = RunnerState.waiting
        finally:
            self._state = RunnerState.stopped
            self._logger.info("Runner stopped")

    async def _run_cycle(self) -> None:
        for chain in self._group.checks():
            if self._cancel.fired:
                return
            await self._sequencer.run(self._group.service, chain)

    def start(self) -> None:
        """Spawn ``run()`` as a background task."""
        if self._task is None:
            self._task = asyncio.create_task(
                self.run(), name=f"checker-{self._group.service.lower()}"
            )

    async def wait_stopped(self) -> None:
        """Wait for the background task to reach the stopped state."""
        if self._task is None:
            return
        await self._task
