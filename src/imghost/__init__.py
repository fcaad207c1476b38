"""imghost -- upload local images to third-party hosting services.

Public re-exports
-----------------

* **Pipeline:** :func:`upload_image`, :class:`UploadPipeline`
* **Configuration:** :class:`UploadConfig`, :func:`load_config`
* **Providers:** :func:`create_provider`, :func:`describe_providers`, ...
* **Errors:** :class:`UploadError` and :class:`ErrorCategory`
* **Models:** :class:`UploadResult`, :class:`FormattedOutput`,
  :class:`ProviderDescriptor`

Usage::

    from imghost import UploadConfig, upload_image

    config = UploadConfig(provider="imgbb", providers={"imgbb": {"api_key": "..."}})
    result = upload_image("./screenshot.png", config=config)
    print(result.formatted.markdown)
"""

from __future__ import annotations

# ── Configuration ───────────────────────────────────────────────────────
from imghost.config import DEFAULT_PROVIDER, UploadConfig

# ── Errors ──────────────────────────────────────────────────────────────
from imghost.errors import ErrorCategory, UploadError

# ── Formatting ──────────────────────────────────────────────────────────
from imghost.formatting import format_result

# ── MIME sniffing ───────────────────────────────────────────────────────
from imghost.mime import detect_mime_type

# ── Models ──────────────────────────────────────────────────────────────
from imghost.models import FormattedOutput, ProviderConfig, ProviderDescriptor, UploadResult

# ── Providers ───────────────────────────────────────────────────────────
from imghost.providers import (
    ImageProvider,
    ProviderName,
    available_providers,
    create_provider,
    describe_providers,
    is_valid_provider,
)
from imghost.settings import load_config

# ── Transport ───────────────────────────────────────────────────────────
from imghost.transport import HttpTransport

# ── Pipeline ────────────────────────────────────────────────────────────
from imghost.upload import UploadPipeline, upload_image

__all__ = [
    # Pipeline
    "UploadPipeline",
    "upload_image",
    # Configuration
    "DEFAULT_PROVIDER",
    "UploadConfig",
    "load_config",
    # Errors
    "ErrorCategory",
    "UploadError",
    # Models
    "FormattedOutput",
    "ProviderConfig",
    "ProviderDescriptor",
    "UploadResult",
    # Providers
    "ImageProvider",
    "ProviderName",
    "available_providers",
    "create_provider",
    "describe_providers",
    "is_valid_provider",
    # Transport / helpers
    "HttpTransport",
    "detect_mime_type",
    "format_result",
]

__version__ = "0.1.0"
