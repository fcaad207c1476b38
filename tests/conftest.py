"""Shared test fixtures for the imghost test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any

import httpx
import pytest

from imghost.config import UploadConfig
from imghost.transport import HttpTransport

# 8-byte PNG signature plus two payload bytes.
PNG_10 = b"\x89PNG\r\n\x1a\n\x00\x00"

SECRETS: dict[str, dict[str, str]] = {
    "imgbb": {"api_key": "imgbb-key-12345678"},
    "imgur": {"client_id": "imgur-client-abcdef"},
    "freeimage": {"api_key": "freeimage-key-9876"},
    "imghippo": {"api_key": "imghippo-key-5555"},
    "weibo": {"cookies": "SUB=session-cookie-value"},
}


class RecordingHandler:
    """``httpx.MockTransport`` handler that records requests.

    *responses* are served in order and the last one repeats.  An item may
    be an ``httpx.Response``, an exception instance (raised), or a callable
    taking the request.
    """

    def __init__(self, responses: Iterable[Any]) -> None:
        self._responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if len(self._responses) > 1:
            item = self._responses.pop(0)
        else:
            item = self._responses[0]
        if isinstance(item, BaseException):
            raise item
        if callable(item) and not isinstance(item, httpx.Response):
            return item(request)
        return item

    @property
    def calls(self) -> int:
        return len(self.requests)


class RecordingMetricsHook:
    """A metrics backend that records all calls for assertion."""

    def __init__(self) -> None:
        self.increments: list[dict[str, Any]] = []
        self.timings: list[dict[str, Any]] = []
        self.gauges: list[dict[str, Any]] = []

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.increments.append({"name": name, "value": value, "tags": tags})

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.timings.append({"name": name, "ms": ms, "tags": tags})

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        self.gauges.append({"name": name, "value": value, "tags": tags})

    def names(self) -> list[str]:
        return [entry["name"] for entry in self.increments]


@pytest.fixture
def mock_transport() -> Callable[..., tuple[HttpTransport, RecordingHandler]]:
    """Factory: ``mock_transport(responses, **kw) -> (transport, handler)``.

    The transport is backed by ``httpx.MockTransport`` and has no retry
    delay unless one is passed.
    """

    def factory(responses: Iterable[Any], **overrides: Any):
        handler = RecordingHandler(responses)
        kwargs: dict[str, Any] = {"retry_delay": 0.0}
        kwargs.update(overrides)
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpTransport(client=client, **kwargs), handler

    return factory


@pytest.fixture
def metrics() -> RecordingMetricsHook:
    return RecordingMetricsHook()


@pytest.fixture
def png_bytes() -> bytes:
    return PNG_10


@pytest.fixture
def png_file(tmp_path):
    path = tmp_path / "screenshot.png"
    path.write_bytes(PNG_10)
    return path


@pytest.fixture
def secrets() -> dict[str, dict[str, str]]:
    return {name: dict(cfg) for name, cfg in SECRETS.items()}


@pytest.fixture
def config(secrets) -> UploadConfig:
    """Configuration with credentials for every provider."""
    return UploadConfig(providers=secrets, retry_delay=0.0)
