"""Lifecycle facade for the checker.

Composes the outcome recorder, the /metrics sidecar server and one periodic
runner per monitored service behind a single start/stop API, so callers
(main.py, tests) deal with one object instead of the individual pieces.
"""

import asyncio
from collections.abc import Sequence
from typing import Optional

from awschecker.api.metrics_server import MetricsServer
from awschecker.checks.runner import PeriodicRunner
from awschecker.checks.sequencer import ThrottledSequencer
from awschecker.checks.types import CheckGroup
from awschecker.core.cancellation import CancellationSignal
from awschecker.core.logging import logger
from awschecker.core.protocols.probe_metrics import ProbeMetrics


class ShutdownError(Exception):
    """The metrics server did not stop within its grace period."""


class ProberService:
    """Owns the recorder, the metrics server and the per-service runners."""

    def __init__(
        self,
        groups: Sequence[CheckGroup],
        metrics: ProbeMetrics,
        *,
        check_interval: float,
        api_call_interval: float,
        host: str = "0.0.0.0",
        port: int = 8080,
        shutdown_timeout: float = 5.0,
    ) -> None:
        self._groups = tuple(groups)
        self._metrics = metrics
        self._check_interval = check_interval
        self._api_call_interval = api_call_interval
        self._shutdown_timeout = shutdown_timeout
        self.server = MetricsServer(metrics, port=port, host=host)
        self.runners: list[PeriodicRunner] = []
        self._server_started = False
        self._stopped = False
        self._cancel: Optional[CancellationSignal] = None
        self._logger = logger.with_context(component="prober_service")

    async def start(self, cancel: CancellationSignal) -> None:
        """Start the metrics server, then one runner per check group.

        A metrics server that cannot bind is logged; the checks still run.
        ``stop()`` fires ``cancel`` if nothing else has.
        """
        try:
            await self.server.start()
            self._server_started = True
        except OSError as e:
            self._logger.error(f"Metrics server failed to start: {e}")

        self._cancel = cancel
        sequencer = ThrottledSequencer(self._metrics, cancel, self._api_call_interval)
        for group in self._groups:
            runner = PeriodicRunner(group, sequencer, cancel, self._check_interval)
            runner.start()
            self.runners.append(runner)

    async def stop(self) -> None:
        """Drain runners, stop the server, unregister metrics.

        Fires the cancellation signal given to ``start()``.  Safe to call twice.

        Raises:
            ShutdownError: If the metrics server exceeds the grace period.
        """
        if self._stopped:
            return
        self._stopped = True
        if self._cancel is not None:
            self._cancel.fire()

        try:
            await asyncio.gather(*(runner.wait_stopped() for runner in self.runners))
            self._logger.info("All runners stopped")

            if self._server_started:
                try:
                    await asyncio.wait_for(self.server.stop(), timeout=self._shutdown_timeout)
                except asyncio.TimeoutError as e:
                    raise ShutdownError(
                        f"failed to shutdown http server within {self._shutdown_timeout}s"
                    ) from e
                self._logger.info("HTTP server shut down successfully")
        finally:
            self._metrics.close()

    @property
    def port(self) -> Optional[int]:
        return self.server.port
