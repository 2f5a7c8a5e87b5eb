"""Metrics hook protocol and no-op default implementation.

gfmify reports a handful of counters and timings per call.  By default a
:class:`NoopMetricsHook` discards them; pass any object satisfying
:class:`MetricsHook` as ``RenderOptions(metrics=...)`` to route them to
StatsD, Prometheus, or similar.

Emitted metric names:

* ``gfmify.render_total``        -- counter, tagged ``mode=block|inline``
* ``gfmify.render_duration_ms``  -- timing
* ``gfmify.strip_total``         -- counter
* ``gfmify.math_errors_total``   -- counter, tagged ``display=block|inline``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* keys and values are strings; backends translate them into
    their own labelling scheme.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric by *value*."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Metrics backend that silently discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
