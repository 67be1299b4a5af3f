"""ProbeMetrics protocol for check outcome instrumentation.

Abstracts latency/outcome collection so the sequencer depends on a
protocol rather than a concrete library.  Production uses Prometheus;
tests inject a fake that records observations in memory.

The recorder also owns the scrape side: whatever it collected is what
``GET /metrics`` serves, so there is a single object per process holding
the label space.
"""

from typing import Protocol, runtime_checkable

from awschecker.checks.types import Outcome


@runtime_checkable
class ProbeMetrics(Protocol):
    """Protocol for recording check chain observations and exposing them."""

    def record(
        self,
        service: str,
        method: str,
        outcome: Outcome,
        duration: float,
    ) -> None:
        """Fold one completed chain into the latency distribution.

        Must not raise and must not block on I/O.  Called concurrently
        from every service runner.

        Args:
            service: Monitored service (S3, DynamoDB, SQS).
            method: Catalog method name of the chain.
            outcome: Success or Failure.
            duration: Chain duration in seconds.
        """
        ...

    @property
    def content_type(self) -> str:
        """MIME type of ``render()`` output."""
        ...

    def render(self) -> bytes:
        """Serialize the observations recorded so far for a scrape."""
        ...

    def close(self) -> None:
        """Unregister the metrics from the exposition registry."""
        ...
