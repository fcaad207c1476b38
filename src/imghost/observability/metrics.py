"""Metrics hook protocol and no-op default implementation.

imghost emits a handful of counters and timings.  A :class:`NoopMetricsHook`
is used unless ``UploadConfig.metrics`` supplies an object satisfying
:class:`MetricsHook`.

Emitted metric names:

* ``imghost.requests_total``         -- counter, tags ``method``, ``host``, ``status``
* ``imghost.retries_total``          -- counter, tags ``host``, ``reason``
* ``imghost.request_duration_ms``    -- timing
* ``imghost.upload_success_total``   -- counter, tag ``provider``
* ``imghost.upload_failure_total``   -- counter, tags ``provider``, ``category``
* ``imghost.upload_bytes``           -- gauge, tag ``provider``
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

Tags = dict[str, str]
"""Metric tags; keys and values are plain strings."""


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol any metrics backend must satisfy."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: Tags | None = None,
    ) -> None:
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: Tags | None = None,
    ) -> None:
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: Tags | None = None,
    ) -> None:
        ...


class NoopMetricsHook:
    """Discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: Tags | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: Tags | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: Tags | None = None,
    ) -> None:
        pass
