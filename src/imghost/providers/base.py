"""The adapter contract every hosting provider implements.

A provider is constructed once per upload from an already-resolved
:data:`~imghost.models.ProviderConfig` bag.  Missing secrets fail in
``__init__`` with a fatal ``CONFIG_ERROR``; nothing is validated lazily at
upload time.

Subclasses implement :meth:`ImageProvider._upload`, which builds the wire
request and parses the response.  The public :meth:`ImageProvider.upload`
wraps it so every adapter classifies failures the same way:

* an :class:`UploadError` propagates unchanged;
* anything else becomes ``NETWORK_ERROR`` with the original as its cause.
"""

from __future__ import annotations

import abc
from collections.abc import Mapping
from typing import Any, ClassVar

import httpx

from imghost.errors import UploadError, config_error, invalid_response_error, network_error
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.observability import get_logger
from imghost.transport import HttpTransport

log = get_logger("imghost.providers")

_KEY_ALIASES: dict[str, tuple[str, ...]] = {
    "api_key": ("api_key", "apiKey"),
    "client_id": ("client_id", "clientId"),
    "user_hash": ("user_hash", "userHash", "userhash"),
    "cookies": ("cookies", "cookie"),
}


def config_value(config: ProviderConfig | None, key: str) -> str | None:
    """Read *key* (or one of its camelCase aliases) from *config*.

    Empty strings count as absent.
    """
    if not config:
        return None
    for alias in _KEY_ALIASES.get(key, (key,)):
        value = config.get(alias)
        if value:
            return str(value)
    return None


def optional_int(value: Any) -> int | None:
    """Coerce a numeric field some APIs return as a string."""
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def optional_str(value: Any) -> str | None:
    return str(value) if value else None


class ImageProvider(abc.ABC):
    """Base class for hosting provider adapters.

    Parameters
    ----------
    config:
        Provider secrets.  Each adapter reads only the keys it needs.
    transport:
        The :class:`HttpTransport` used for the request.  A default one is
        created when omitted and closed by :meth:`close`.
    """

    descriptor: ClassVar[ProviderDescriptor]

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._owns_transport = transport is None
        self._transport = transport if transport is not None else HttpTransport()

    # -- descriptor read-through ------------------------------------------

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def display_name(self) -> str:
        return self.descriptor.display_name

    @property
    def requires_config(self) -> bool:
        return self.descriptor.requires_config

    @property
    def max_file_size(self) -> int:
        return self.descriptor.max_file_size

    @property
    def supported_types(self) -> frozenset[str]:
        return self.descriptor.supported_types

    # -- upload ------------------------------------------------------------

    def upload(
        self,
        data: bytes,
        filename: str | None = None,
        mime_type: str | None = None,
    ) -> UploadResult:
        """Upload *data* and return the normalized result.

        Parameters
        ----------
        data:
            Raw image bytes.
        filename:
            Name sent to the provider; ``image<ext>`` is synthesised when
            absent.
        mime_type:
            Sniffed MIME type of *data*.

        Raises
        ------
        UploadError
            Classified failure.  Unexpected exceptions are wrapped as
            ``NETWORK_ERROR``.
        """
        log.info(
            "Upload started",
            extra={
                "extra_fields": {
                    "op": "upload",
                    "provider": self.name,
                    "size_bytes": len(data),
                    "mime": mime_type,
                }
            },
        )
        try:
            result = self._upload(data, filename, mime_type)
        except UploadError:
            raise
        except Exception as exc:
            raise network_error(
                str(exc) or f"Upload to {self.display_name} failed",
                cause=exc,
                provider=self.name,
            ) from exc

        log.info(
            "Upload complete",
            extra={
                "extra_fields": {
                    "op": "upload",
                    "provider": self.name,
                    "id": result.id,
                    "url": result.url,
                }
            },
        )
        return result

    @abc.abstractmethod
    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        """Provider-specific request building and response parsing."""

    # -- helpers for subclasses --------------------------------------------

    def _require(self, config: ProviderConfig | None, key: str, hint: str) -> str:
        value = config_value(config, key)
        if value is None:
            raise config_error(self.display_name, hint)
        return value

    def _json(self, response: httpx.Response) -> dict[str, Any]:
        """Decode a JSON object body or raise ``INVALID_RESPONSE``."""
        try:
            body = response.json()
        except ValueError as exc:
            raise invalid_response_error(
                f"{self.display_name} returned a non-JSON body: {response.text[:200]!r}",
                cause=exc,
                provider=self.name,
            ) from exc
        if not isinstance(body, Mapping):
            raise invalid_response_error(
                f"{self.display_name} returned unexpected JSON: {type(body).__name__}",
                provider=self.name,
            )
        return dict(body)

    def _field(self, payload: Mapping[str, Any], key: str) -> str:
        """Read a required string field from a success payload."""
        value = payload.get(key)
        if not value:
            raise invalid_response_error(
                f"{self.display_name} response is missing '{key}'",
                provider=self.name,
            )
        return str(value)

    # -- lifecycle ---------------------------------------------------------

    def close(self) -> None:
        """Close the transport if this provider created it."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> ImageProvider:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
