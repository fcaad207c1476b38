"""Configuration for imghost.

:class:`UploadConfig` captures every tuneable knob of the upload pipeline and
the per-provider secrets it hands to adapters.  It is a plain dataclass: the
core never reads the environment itself, see :mod:`imghost.settings` for the
environment / ``.env`` loader.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any

from imghost.utils.redact import mask_secret

DEFAULT_PROVIDER = "catbox"
"""Works without any configuration, so it is the fallback everywhere."""


@dataclass
class UploadConfig:
    """Complete configuration for an upload.

    Parameters
    ----------
    provider:
        Preferred provider name.  Used when no provider is passed
        explicitly; see :meth:`recommended_provider`.
    timeout_seconds:
        Per-attempt HTTP timeout.
    max_retries:
        Retries after the first attempt for transient failures.
    retry_delay:
        Fixed delay in seconds between attempts.  No backoff, no jitter.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    providers:
        Per-provider secret bags keyed by provider name, e.g.
        ``{"imgbb": {"api_key": "..."}}``.
    metrics:
        Optional :class:`~imghost.observability.MetricsHook` backend.
    debug_dump_payload:
        Write a redacted request/response summary to *stderr* for each
        attempt.
    """

    provider: str = DEFAULT_PROVIDER

    timeout_seconds: float = 30.0

    max_retries: int = 2

    retry_delay: float = 1.0

    http_proxy: str | None = None

    providers: dict[str, dict[str, Any]] = field(default_factory=dict)

    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if self.retry_delay < 0:
            raise ValueError(f"retry_delay must be >= 0, got {self.retry_delay}")
        self.provider = (self.provider or DEFAULT_PROVIDER).lower()
        self.providers = {name.lower(): dict(cfg) for name, cfg in self.providers.items()}

    def provider_config(self, name: str) -> dict[str, Any]:
        """Return a copy of the secret bag for *name* (empty if none)."""
        return dict(self.providers.get(name.lower(), {}))

    def recommended_provider(self) -> str:
        """Pick the provider to use when the caller did not name one.

        The configured :attr:`provider` wins if it is the default provider
        or has a non-empty secret bag; otherwise fall back to
        :data:`DEFAULT_PROVIDER`.
        """
        if self.provider == DEFAULT_PROVIDER:
            return DEFAULT_PROVIDER
        if any(v for v in self.providers.get(self.provider, {}).values()):
            return self.provider
        return DEFAULT_PROVIDER

    def __repr__(self) -> str:
        """Mask provider secrets to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "providers":
                masked = {
                    name: {k: mask_secret(str(v)) for k, v in cfg.items()}
                    for name, cfg in val.items()
                }
                parts.append(f"providers={masked!r}")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"UploadConfig({', '.join(parts)})"
