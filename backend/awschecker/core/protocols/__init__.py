"""Core protocols for dependency injection."""

from awschecker.core.protocols.probe_metrics import ProbeMetrics

__all__ = [
    "ProbeMetrics",
]
