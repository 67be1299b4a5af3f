"""Runner for the checker and its metrics server."""

import asyncio
import signal
from collections.abc import Sequence
from typing import Optional

from prometheus_client import CollectorRegistry

from awschecker.adapters.probe_metrics import PrometheusProbeMetrics
from awschecker.aws.clients import build_clients
from awschecker.checks.groups import CATALOG, build_check_groups
from awschecker.checks.types import CheckGroup
from awschecker.core.cancellation import CancellationSignal
from awschecker.core.config import Settings, get_settings
from awschecker.core.logging import LoggerConfigurator
from awschecker.core.logging import logger as global_logger
from awschecker.core.prober_service import ProberService

logger = global_logger.with_context(component="main")


async def run(
    cancel: CancellationSignal,
    settings: Settings,
    *,
    groups: Optional[Sequence[CheckGroup]] = None,
    registry: Optional[CollectorRegistry] = None,
) -> None:
    """Run the checker until ``cancel`` fires, then shut down.

    Args:
        cancel: Stop signal, fired by the signal handlers in ``main``.
        settings: Resolved configuration.
        groups: Check groups to run; built from ``settings`` and boto3 clients when None.
        registry: Collector registry for the histogram; a private one when None.

    Raises:
        StartupError: If the AWS clients cannot be built.
        ShutdownError: If the metrics server does not stop within its grace period.
    """
    if groups is None:
        groups = build_check_groups(settings, build_clients(settings))

    metrics = PrometheusProbeMetrics(registry, catalog=CATALOG)
    service = ProberService(
        groups,
        metrics,
        check_interval=settings.CHECK_INTERVAL,
        api_call_interval=settings.AWS_API_CALL_INTERVAL,
        host=settings.METRICS_HOST,
        port=settings.METRICS_PORT,
        shutdown_timeout=settings.SHUTDOWN_TIMEOUT,
    )

    await service.start(cancel)
    try:
        await cancel.wait()
    finally:
        cancel.fire()
        await service.stop()


def _on_signal(cancel: CancellationSignal, signum: signal.Signals) -> None:
    if not cancel.fired:
        logger.info(f"Received {signum.name}, exiting...")
    cancel.fire()


async def main() -> None:
    """Wire signal handling and run the checker.

    Raises:
        StartupError: If the configuration or the AWS clients are invalid.
        ShutdownError: If shutdown did not complete in time.
    """
    settings = get_settings()
    LoggerConfigurator.set_level(settings.LOG_LEVEL)

    cancel = CancellationSignal()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, _on_signal, cancel, signum)

    logger.info("Starting aws-checker")
    try:
        await run(cancel, settings)
    finally:
        for signum in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(signum)
    logger.info("aws-checker shut down cleanly")


if __name__ == "__main__":
    asyncio.run(main())
