"""Secret and payload redaction for safe logging.

:func:`redact` is applied to every structured log field and every debug dump
before it leaves the process:

* **Credential values** (API keys, Imgur Client-IDs, Catbox user hashes,
  Weibo cookies, ``Authorization`` headers) are masked to their last four
  characters via :func:`mask_secret`.
* **Base64 image payloads** (long runs of base64 alphabet) become
  ``<base64:N_chars>``.
* **Raw bytes** become ``<binary:N_bytes>``.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

# Keys whose value is always a credential, matched case-insensitively.
_SENSITIVE_KEYS: frozenset[str] = frozenset({
    "key",
    "api_key",
    "apikey",
    "client_id",
    "clientid",
    "userhash",
    "user_hash",
    "cookie",
    "cookies",
    "authorization",
})

# Substrings that mark a key as sensitive wherever they appear.
_SENSITIVE_KEY_PATTERNS: tuple[str, ...] = ("secret", "token", "password", "cookie")

# A base64 run this long is an image payload, not a word.
_BASE64_RE = re.compile(r"[A-Za-z0-9+/]{200,}={0,2}")

# Authorization header schemes used by the providers.
_AUTH_SCHEME_RE = re.compile(r"\b(Client-ID|Bearer)\s+\S+")


def mask_secret(value: str | None) -> str:
    """Return ``...abcd`` for a secret, or ``****`` when it is too short."""
    if not value:
        return "<unset>"
    if len(value) < 8:
        return "****"
    return f"...{value[-4:]}"


def _is_sensitive(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return lowered in _SENSITIVE_KEYS or any(p in lowered for p in _SENSITIVE_KEY_PATTERNS)


def _redact_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {
            k: (mask_secret(str(v)) if _is_sensitive(k) and v else _redact_value(v))
            for k, v in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact_value(item) for item in value]
    if isinstance(value, (bytes, bytearray)):
        return f"<binary:{len(value)}_bytes>"
    if isinstance(value, str):
        value = _BASE64_RE.sub(lambda m: f"<base64:{len(m.group(0))}_chars>", value)
        return _AUTH_SCHEME_RE.sub(lambda m: f"{m.group(1)} <redacted>", value)
    return value


def redact(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Return a new dict with credentials and binary payloads masked.

    The input is never mutated.

    Examples
    --------
    >>> redact({"Authorization": "Client-ID 0123456789abcdef"})
    {'Authorization': '...cdef'}
    >>> redact({"image": b"\\x89PNG"})
    {'image': '<binary:4_bytes>'}
    """
    return _redact_value(payload)
