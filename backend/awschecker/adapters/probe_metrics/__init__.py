"""Probe metrics adapters."""

from awschecker.adapters.probe_metrics.fake import FakeProbeMetrics
from awschecker.adapters.probe_metrics.prometheus import PrometheusProbeMetrics

__all__ = ["PrometheusProbeMetrics", "FakeProbeMetrics"]
