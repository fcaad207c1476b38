"""Build an :class:`UploadConfig` from environment variables and ``.env``.

This is the only place imghost reads the environment.  Recognised keys:

============================  ===============================================
``IMAGE_UPLOAD_PROVIDER``     preferred provider (default ``catbox``)
``IMAGE_UPLOAD_TIMEOUT``      request timeout in milliseconds (default 30000)
``CATBOX_USERHASH``           optional Catbox account hash
``IMGBB_API_KEY``             ImgBB API key
``IMGUR_CLIENT_ID``           Imgur Client-ID
``FREEIMAGE_API_KEY``         Freeimage.host API key
``IMGHIPPO_API_KEY``          ImgHippo API key
``WEIBO_COOKIES``             Weibo session cookie string
============================  ===============================================

Real environment variables take precedence over values from the ``.env``
file.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from imghost.config import DEFAULT_PROVIDER, UploadConfig
from imghost.errors import ErrorCategory, UploadError

DEFAULT_TIMEOUT_MS = 30_000

# provider name -> (environment variable, config key)
PROVIDER_ENV_KEYS: dict[str, tuple[str, str]] = {
    "catbox": ("CATBOX_USERHASH", "user_hash"),
    "imgbb": ("IMGBB_API_KEY", "api_key"),
    "imgur": ("IMGUR_CLIENT_ID", "client_id"),
    "freeimage": ("FREEIMAGE_API_KEY", "api_key"),
    "imghippo": ("IMGHIPPO_API_KEY", "api_key"),
    "weibo": ("WEIBO_COOKIES", "cookies"),
}


def env_file_candidates(env_file: str | os.PathLike[str] | None = None) -> list[Path]:
    """Locations searched for a ``.env`` file, in priority order."""
    candidates: list[Path] = []
    if env_file is not None:
        candidates.append(Path(env_file).expanduser())
    candidates.append(Path.cwd() / ".env")
    candidates.append(Path.home() / ".imghost" / ".env")
    return candidates


def find_env_file(env_file: str | os.PathLike[str] | None = None) -> Path | None:
    for candidate in env_file_candidates(env_file):
        if candidate.is_file():
            return candidate
    return None


def _parse_timeout(raw: str | None) -> float:
    if not raw:
        return DEFAULT_TIMEOUT_MS / 1000
    try:
        timeout_ms = int(raw)
    except ValueError:
        raise UploadError(
            f"IMAGE_UPLOAD_TIMEOUT must be an integer number of milliseconds, got {raw!r}",
            ErrorCategory.CONFIG_ERROR,
        ) from None
    if timeout_ms <= 0:
        raise UploadError(
            f"IMAGE_UPLOAD_TIMEOUT must be positive, got {timeout_ms}",
            ErrorCategory.CONFIG_ERROR,
        )
    return timeout_ms / 1000


def config_from_mapping(values: Mapping[str, Any], **overrides: Any) -> UploadConfig:
    """Build an :class:`UploadConfig` from an environment-style mapping."""
    providers: dict[str, dict[str, Any]] = {}
    for provider, (env_key, config_key) in PROVIDER_ENV_KEYS.items():
        value = values.get(env_key)
        providers[provider] = {config_key: value} if value else {}

    kwargs: dict[str, Any] = {
        "provider": values.get("IMAGE_UPLOAD_PROVIDER") or DEFAULT_PROVIDER,
        "timeout_seconds": _parse_timeout(values.get("IMAGE_UPLOAD_TIMEOUT")),
        "providers": providers,
    }
    kwargs.update(overrides)
    return UploadConfig(**kwargs)


def load_config(
    env_file: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> UploadConfig:
    """Load configuration from a ``.env`` file and the process environment.

    Parameters
    ----------
    env_file:
        Explicit ``.env`` path, tried before the default locations.  It must
        exist; a missing explicit file is a fatal ``CONFIG_ERROR``.
    environ:
        Environment mapping; defaults to ``os.environ``.
    **overrides:
        Extra :class:`UploadConfig` fields (``metrics=...``, ...).
    """
    if env_file is not None and not Path(env_file).expanduser().is_file():
        raise UploadError(
            f"Env file not found: {env_file}",
            ErrorCategory.CONFIG_ERROR,
            context={"path": str(env_file)},
        )

    values: dict[str, Any] = {}
    path = find_env_file(env_file)
    if path is not None:
        values.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    values.update(os.environ if environ is None else environ)
    return config_from_mapping(values, **overrides)
