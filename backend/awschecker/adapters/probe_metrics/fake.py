"""Fake ProbeMetrics for testing.

Records all observations in memory so tests can assert on metrics
behaviour without reaching into prometheus-client internals.
"""

import threading
from collections import Counter

from awschecker.checks.types import Observation, Outcome


class FakeProbeMetrics:
    """In-memory spy implementing the ProbeMetrics protocol.

    Usage:
        fake = FakeProbeMetrics()
        # … inject into sequencer / service …
        assert fake.observations[0].outcome == Outcome.success
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.observations: list[Observation] = []
        self.closed: bool = False
        self.render_calls: int = 0

    def record(
        self,
        service: str,
        method: str,
        outcome: Outcome,
        duration: float,
    ) -> None:
        with self._lock:
            self.observations.append(Observation(service, method, Outcome(outcome), duration))

    @property
    def content_type(self) -> str:
        return "text/plain"

    def render(self) -> bytes:
        """One ``service/method/status count`` line per observed triple."""
        with self._lock:
            self.render_calls += 1
            counts = Counter((o.service, o.method, o.outcome.value) for o in self.observations)
        lines = [f"{s}/{m}/{st} {n}" for (s, m, st), n in sorted(counts.items())]
        return "".join(line + "\n" for line in lines).encode()

    def close(self) -> None:
        self.closed = True

    # -- test helpers --

    def for_service(self, service: str) -> list[Observation]:
        """Observations recorded for one service, in emission order."""
        with self._lock:
            return [o for o in self.observations if o.service == service]

    def labels(self) -> set[tuple[str, str, str]]:
        """Distinct (service, method, status) triples observed so far."""
        with self._lock:
            return {(o.service, o.method, o.outcome.value) for o in self.observations}
