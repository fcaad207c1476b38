"""Upload pipeline: resolve, read, sniff, validate, upload.

:func:`upload_image` is the main entry point.  The steps run in order and
each one short-circuits on failure:

1. Resolve the provider name (explicit, else configured, else ``catbox``).
2. Construct the adapter -- fatal ``CONFIG_ERROR`` on missing secrets.
3. Read the file -- ``FILE_NOT_FOUND`` on a missing or non-regular path.
4. Sniff the MIME type from magic bytes.
5. Validate type (``FILE_TYPE_RESTRICT``) then size
   (``FILE_SIZE_OVERFLOW``) -- both before any network traffic.
6. Derive the upload name from the override or the file stem.
7. Delegate to the adapter.

Adapter-level failures are not retried here; transient network faults have
already been retried inside :class:`~imghost.transport.HttpTransport`.
"""

from __future__ import annotations

import os
from pathlib import Path

from imghost.config import UploadConfig
from imghost.errors import (
    UploadError,
    file_not_found_error,
    file_size_error,
    file_type_error,
)
from imghost.mime import detect_mime_type
from imghost.models import UploadResult
from imghost.observability import NoopMetricsHook, get_logger
from imghost.providers import ImageProvider, create_provider
from imghost.transport import HttpTransport

log = get_logger("imghost.upload")


def read_image(path: str | os.PathLike[str]) -> bytes:
    """Read a local image file.

    Raises
    ------
    UploadError
        ``FILE_NOT_FOUND`` when *path* does not exist, is not a regular file,
        or cannot be read.
    """
    resolved = Path(path).expanduser().resolve()
    if not resolved.exists():
        raise file_not_found_error(f"File not found: {resolved}", path=str(resolved))
    if not resolved.is_file():
        raise file_not_found_error(f"Path is not a file: {resolved}", path=str(resolved))
    try:
        return resolved.read_bytes()
    except OSError as exc:
        raise file_not_found_error(
            f"Failed to read file: {exc}", path=str(resolved), cause=exc,
        ) from exc


def validate_image(data: bytes, mime_type: str, provider: ImageProvider) -> None:
    """Check *data* against *provider*'s type and size constraints.

    Raises
    ------
    UploadError
        ``FILE_TYPE_RESTRICT`` if *mime_type* is empty or unsupported;
        ``FILE_SIZE_OVERFLOW`` if *data* exceeds ``max_file_size``.
    """
    if not provider.descriptor.accepts(mime_type):
        raise file_type_error(mime_type, provider.supported_types, provider.display_name)
    if len(data) > provider.max_file_size:
        raise file_size_error(len(data), provider.max_file_size, provider.display_name)


def upload_name(path: str | os.PathLike[str], name: str | None = None) -> str:
    """The display name: an explicit override, else the file stem."""
    return name or Path(path).stem


class UploadPipeline:
    """Run one upload per call against a fixed configuration snapshot.

    Parameters
    ----------
    config:
        Configuration; defaults to ``UploadConfig()`` (anonymous Catbox).
    transport:
        Shared :class:`HttpTransport`.  When omitted, one is built from
        *config* for each upload and closed afterwards.
    """

    def __init__(
        self,
        config: UploadConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._config = config if config is not None else UploadConfig()
        self._transport = transport
        self._metrics = (
            self._config.metrics if self._config.metrics is not None else NoopMetricsHook()
        )

    @property
    def config(self) -> UploadConfig:
        return self._config

    def resolve_provider_name(self, provider: str | None = None) -> str:
        return (provider or self._config.recommended_provider()).lower()

    def upload(
        self,
        path: str | os.PathLike[str],
        *,
        provider: str | None = None,
        name: str | None = None,
    ) -> UploadResult:
        """Upload the image at *path*.

        Parameters
        ----------
        path:
            Local image file.
        provider:
            Provider name; see :meth:`resolve_provider_name`.
        name:
            Display name override for the formatted output.

        Raises
        ------
        UploadError
            Any classified failure; inspect ``fatal`` to decide whether the
            configuration needs fixing.
        """
        provider_name = self.resolve_provider_name(provider)
        transport = self._transport or HttpTransport.from_config(self._config)
        try:
            adapter = create_provider(
                provider_name,
                self._config.provider_config(provider_name),
                transport=transport,
            )
            result = self._run(adapter, path, name)
        except UploadError as exc:
            self._metrics.increment(
                "imghost.upload_failure_total",
                tags={"provider": provider_name, "category": exc.code},
            )
            log.warning(
                "Upload failed",
                extra={
                    "extra_fields": {
                        "op": "upload_image",
                        "provider": provider_name,
                        "category": exc.code,
                        "fatal": exc.fatal,
                        "error": exc.message,
                    }
                },
            )
            raise
        finally:
            if self._transport is None:
                transport.close()

        self._metrics.increment(
            "imghost.upload_success_total", tags={"provider": provider_name},
        )
        return result

    def _run(
        self,
        adapter: ImageProvider,
        path: str | os.PathLike[str],
        name: str | None,
    ) -> UploadResult:
        data = read_image(path)
        mime_type = detect_mime_type(data)
        validate_image(data, mime_type, adapter)
        self._metrics.gauge(
            "imghost.upload_bytes", len(data), tags={"provider": adapter.name},
        )
        return adapter.upload(data, upload_name(path, name), mime_type)


def upload_image(
    path: str | os.PathLike[str],
    *,
    provider: str | None = None,
    name: str | None = None,
    config: UploadConfig | None = None,
    transport: HttpTransport | None = None,
) -> UploadResult:
    """Upload one image file and return the normalized result.

    Usage::

        from imghost import upload_image

        result = upload_image("./screenshot.png")
        print(result.formatted.markdown)
    """
    return UploadPipeline(config, transport).upload(path, provider=provider, name=name)
