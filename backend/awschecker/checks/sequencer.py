"""Throttled execution of check chains."""

import time
from typing import Optional

from awschecker.checks.types import CheckChain, Observation, Outcome
from awschecker.core.cancellation import CancellationSignal
from awschecker.core.logging import logger
from awschecker.core.protocols.probe_metrics import ProbeMetrics


class ThrottledSequencer:
    """Runs the steps of a chain one at a time and records the result.

    A fixed delay separates consecutive steps of one chain so successive
    calls to the same downstream resource stay under its throughput limit.
    No delay follows the last step.
    """

    def __init__(
        self,
        metrics: ProbeMetrics,
        cancel: CancellationSignal,
        delay: float,
    ) -> None:
        """Initialize the sequencer.

        Args:
            metrics: Recorder receiving one observation per completed chain.
            cancel: Shared stop signal, checked before every step and during delays.
            delay: Seconds to wait between consecutive steps of a chain.
        """
        self._metrics = metrics
        self._cancel = cancel
        self._delay = delay
        self._logger = logger.with_context(component="sequencer")

    async def run(self, service: str, chain: CheckChain) -> Optional[Observation]:
        """Run ``chain`` and record its observation.

        Returns:
            The recorded observation, or None if cancellation abandoned the chain.
        """
        start = time.monotonic()
        error: Optional[Exception] = None
        last = len(chain.steps) - 1

        for index, step in enumerate(chain.steps):
            if self._cancel.fired:
                return None

            try:
                await step.execute()
            except Exception as e:
                error = e
                break

            if index < last and await self._cancel.wait(self._delay):
                return None

        duration = time.monotonic() - start
        outcome = Outcome.success if error is None else Outcome.failure
        if error is not None:
            self._logger.with_context(service=service, method=chain.method).error(
                f"{chain.method} failed: {error}"
            )

        self._metrics.record(service, chain.method, outcome, duration)
        return Observation(service, chain.method, outcome, duration)
