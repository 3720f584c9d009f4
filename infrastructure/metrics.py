"""Prometheus metrics for the progression service.

Metrics carry musical context (key quality, modulation) so dashboards show
what people generate, not just HTTP traffic.

Metrics:
    dpg_progressions_generated_total   Counter by starting key quality
    dpg_chords_generated_total         Counter of emitted chords
    dpg_modulations_total              Progressions that changed key
    dpg_generation_errors_total        Rejected requests by reason
    dpg_generation_latency_seconds     Histogram of generation latency

Usage::

    from infrastructure.metrics import LatencyTimer, record_generation

    with LatencyTimer() as t:
        progressions = generate_examples(request, count)
    record_generation(progressions, latency_seconds=t.elapsed)
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)

from core.music_theory.types import Progression

logger = logging.getLogger(__name__)

_REGISTRY = CollectorRegistry()

progressions_generated_total = Counter(
    "dpg_progressions_generated_total",
    "Generated progressions by starting key quality",
    ["quality"],
    registry=_REGISTRY,
)

chords_generated_total = Counter(
    "dpg_chords_generated_total",
    "Chords emitted across all generated progressions",
    registry=_REGISTRY,
)

modulations_total = Counter(
    "dpg_modulations_total",
    "Generated progressions that modulated to a related key",
    registry=_REGISTRY,
)

generation_errors_total = Counter(
    "dpg_generation_errors_total",
    "Generation requests rejected before or during generation",
    ["reason"],
    registry=_REGISTRY,
)

generation_latency_seconds = Histogram(
    "dpg_generation_latency_seconds",
    "Wall-clock time spent generating one request",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.05, 0.1, 0.5],
    registry=_REGISTRY,
)


# ---------------------------------------------------------------------------
# Public helpers
# ---------------------------------------------------------------------------


def record_generation(
    progressions: Sequence[Progression],
    *,
    latency_seconds: float,
) -> None:
    """Record one successful generation request.

    Args:
        progressions: Every progression returned to the caller.
        latency_seconds: Wall-clock generation time in seconds.
    """
    for progression in progressions:
        progressions_generated_total.labels(
            quality=progression.initial_key.quality.value
        ).inc()
        chords_generated_total.inc(len(progression))
        if progression.modulated:
            modulations_total.inc()
    generation_latency_seconds.observe(latency_seconds)


def record_generation_error(reason: str) -> None:
    """Increment the rejected-request counter.

    Args:
        reason: Short machine-readable cause, e.g. "unknown_note".
    """
    generation_errors_total.labels(reason=reason).inc()


def get_metrics_response() -> tuple[bytes, str]:
    """Generate Prometheus text exposition format.

    Returns:
        Tuple of (body_bytes, content_type_string).
    """
    return generate_latest(_REGISTRY), CONTENT_TYPE_LATEST


class LatencyTimer:
    """Context manager for measuring latency.

    Usage::

        with LatencyTimer() as t:
            run_generation()
        print(t.elapsed)
    """

    def __init__(self) -> None:
        self._start: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> LatencyTimer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, *_: object) -> None:
        self.elapsed = time.perf_counter() - self._start
