"""Prometheus implementation of the ProbeMetrics protocol.

Creates a dedicated CollectorRegistry so checker metrics are isolated from
the default global registry.  The histogram is registered on construction
and unregistered by ``close()`` at shutdown.

The label space is closed: every (service, method) pair comes from the
check catalog, crossed with the two outcomes.  When a catalog is given,
observations outside it are dropped with a warning instead of minting a
new series.
"""

from collections.abc import Mapping, Sequence
from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Histogram, generate_latest

from awschecker.checks.types import Outcome
from awschecker.core.logging import logger

# 0.01s doubling over 10 buckets: 0.01 .. 5.12s
_DURATION_BUCKETS = tuple(round(0.01 * 2**i, 2) for i in range(10))


class PrometheusProbeMetrics:
    """Prometheus-backed check latency/outcome histogram."""

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        catalog: Optional[Mapping[str, Sequence[str]]] = None,
    ) -> None:
        """Register the histogram.

        Args:
            registry: Registry to register on; a private one when None.
            catalog: Allowed methods per service.  None accepts any label.
        """
        self._registry = registry or CollectorRegistry()
        self._catalog = catalog
        self._closed = False
        self._logger = logger.with_context(component="probe_metrics")

        self._request_duration = Histogram(
            "aws_request_duration_seconds",
            "Time spent in requests for aws.",
            ["service", "method", "status"],
            buckets=_DURATION_BUCKETS,
            registry=self._registry,
        )

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    # -- ProbeMetrics protocol methods --

    def record(
        self,
        service: str,
        method: str,
        outcome: Outcome,
        duration: float,
    ) -> None:
        if self._catalog is not None and method not in self._catalog.get(service, ()):
            self._logger.warning(f"Dropping observation outside the catalog: {service}/{method}")
            return
        self._request_duration.labels(
            service=service,
            method=method,
            status=Outcome(outcome).value,
        ).observe(max(duration, 0.0))

    @property
    def content_type(self) -> str:
        return CONTENT_TYPE_LATEST

    def render(self) -> bytes:
        # Empty once closed: the histogram is no longer in the registry.
        return generate_latest(self._registry)

    def close(self) -> None:
        if self._closed:
            return
        self._registry.unregister(self._request_duration)
        self._closed = True
