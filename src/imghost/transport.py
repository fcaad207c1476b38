"""Retrying HTTP transport shared by every provider adapter.

Each call to :meth:`HttpTransport.request` runs an explicit bounded loop of
``max_retries + 1`` attempts:

1. Send the request with a per-attempt ``httpx.Timeout``.
2. On ``2xx`` -- return the response.
3. On ``5xx`` -- transient; sleep ``retry_delay`` and retry while budget
   remains.
4. On any other non-``2xx`` status -- raise ``NETWORK_ERROR`` immediately
   with the HTTP status line.  Client errors are never retried.
5. On a timeout or connection fault -- transient; retry like ``5xx``.
6. On an already-classified fatal :class:`UploadError` -- re-raise without
   consuming budget.
7. Budget exhausted -- raise ``NETWORK_ERROR`` wrapping the last fault.

The delay is fixed: no exponential backoff and no jitter.
"""

from __future__ import annotations

import json
import sys
import time
from typing import Any

import httpx

from imghost.config import UploadConfig
from imghost.errors import UploadError, network_error
from imghost.observability import NoopMetricsHook, get_logger
from imghost.utils.redact import redact

log = get_logger("imghost.transport")

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_DELAY = 1.0


def _host(url: str) -> str:
    try:
        return httpx.URL(url).host
    except httpx.InvalidURL:
        return ""


def _describe_files(files: Any) -> Any:
    """Summarise a multipart ``files`` mapping without the payload bytes."""
    if not isinstance(files, dict):
        return files
    summary: dict[str, Any] = {}
    for field_name, value in files.items():
        if isinstance(value, tuple) and len(value) >= 2:
            filename, content = value[0], value[1]
            size = len(content) if isinstance(content, (bytes, str)) else None
            summary[field_name] = {"filename": filename, "size": size}
        else:
            summary[field_name] = value
    return summary


def _dump_exchange(
    method: str,
    url: str,
    request_kwargs: dict[str, Any],
    response: httpx.Response | None,
) -> None:
    """Write a redacted summary of one attempt to stderr."""
    dump: dict[str, Any] = {"method": method, "url": url}
    for key in ("params", "headers", "data"):
        if request_kwargs.get(key):
            dump[key] = dict(request_kwargs[key])
    if request_kwargs.get("files"):
        dump["files"] = _describe_files(request_kwargs["files"])
    if request_kwargs.get("content") is not None:
        dump["content"] = request_kwargs["content"]
    if response is not None:
        dump["response_status"] = response.status_code
        dump["response_body"] = response.text[:1000]
    print(json.dumps(redact(dump), indent=2, default=str), file=sys.stderr)


class HttpTransport:
    """Synchronous HTTP transport with timeout and fixed-delay retry.

    Parameters
    ----------
    timeout_seconds:
        Default per-attempt timeout.
    max_retries:
        Default number of retries after the first attempt.
    retry_delay:
        Seconds to sleep between attempts.
    http_proxy:
        Optional proxy URL for the owned ``httpx.Client``.
    metrics:
        A :class:`~imghost.observability.MetricsHook`; defaults to no-op.
    debug_dump_payload:
        Dump a redacted summary of every attempt to stderr.
    client:
        An ``httpx.Client`` to use instead of creating one.  An injected
        client is not closed by :meth:`close`.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
        http_proxy: str | None = None,
        metrics: Any | None = None,
        debug_dump_payload: bool = False,
        client: httpx.Client | None = None,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._max_retries = max_retries
        self._retry_delay = retry_delay
        self._metrics = metrics if metrics is not None else NoopMetricsHook()
        self._debug_dump_payload = debug_dump_payload
        self._owns_client = client is None
        self._client = client if client is not None else httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            proxy=http_proxy,
            follow_redirects=True,
        )

    @classmethod
    def from_config(cls, config: UploadConfig) -> HttpTransport:
        return cls(
            timeout_seconds=config.timeout_seconds,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
            http_proxy=config.http_proxy,
            metrics=config.metrics,
            debug_dump_payload=config.debug_dump_payload,
        )

    # -- public API --------------------------------------------------------

    def request(
        self,
        method: str,
        url: str,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request, retrying transient failures.

        Parameters
        ----------
        method:
            HTTP method.
        url:
            Absolute URL.
        timeout:
            Per-attempt timeout in seconds; defaults to the transport's.
        max_retries:
            Retry budget for this call; defaults to the transport's.
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``data=``,
            ``files=``, ``content=``, ``params=``, ``headers=``).

        Returns
        -------
        httpx.Response
            The first ``2xx`` response.

        Raises
        ------
        UploadError
            ``NETWORK_ERROR`` for 4xx responses (immediately) and for 5xx
            or network faults once the budget is spent; any fatal
            :class:`UploadError` raised while sending, unchanged.
        """
        timeout_s = self._timeout_seconds if timeout is None else timeout
        budget = self._max_retries if max_retries is None else max_retries
        attempts = budget + 1
        host = _host(url)
        last_error: UploadError | None = None

        for attempt in range(attempts):
            t0 = time.monotonic()
            try:
                response = self._client.request(
                    method, url, timeout=httpx.Timeout(timeout_s), **kwargs,
                )
            except UploadError as exc:
                if exc.fatal:
                    raise
                last_error = exc
                reason = "classified"
            except httpx.TimeoutException as exc:
                last_error = network_error(
                    f"Request timed out after {timeout_s:g}s",
                    cause=exc,
                    url=url,
                    attempt=attempt + 1,
                )
                reason = "timeout"
            except httpx.TransportError as exc:
                last_error = network_error(
                    str(exc) or "Network request failed",
                    cause=exc,
                    url=url,
                    attempt=attempt + 1,
                )
                reason = "network_error"
            else:
                elapsed_ms = (time.monotonic() - t0) * 1000
                status = response.status_code
                tags = {"method": method, "host": host, "status": str(status)}
                self._metrics.increment("imghost.requests_total", tags=tags)
                self._metrics.timing("imghost.request_duration_ms", elapsed_ms, tags=tags)
                if self._debug_dump_payload:
                    _dump_exchange(method, url, kwargs, response)

                if response.is_success:
                    return response

                status_error = network_error(
                    f"HTTP {status}: {response.reason_phrase}",
                    url=url,
                    status_code=status,
                    attempt=attempt + 1,
                )
                if status < 500:
                    raise status_error
                last_error = status_error
                reason = "server_error"

            if attempt + 1 >= attempts:
                break

            log.warning(
                "Retrying request",
                extra={
                    "extra_fields": {
                        "op": "request",
                        "method": method,
                        "host": host,
                        "attempt": attempt + 1,
                        "reason": reason,
                        "error": last_error.message,
                    }
                },
            )
            self._metrics.increment(
                "imghost.retries_total", tags={"host": host, "reason": reason},
            )
            time.sleep(self._retry_delay)

        assert last_error is not None
        last_error.context.setdefault("attempts", attempts)
        raise last_error

    def post(self, url: str, **kwargs: Any) -> httpx.Response:
        return self.request("POST", url, **kwargs)

    def close(self) -> None:
        """Close the owned HTTP client."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
