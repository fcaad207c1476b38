"""Error taxonomy for the imghost upload pipeline.

Every failure the package raises is an :class:`UploadError`.  Each carries a
machine-readable ``category`` (from :class:`ErrorCategory`), a human-readable
``message``, a ``fatal`` flag, an optional structured ``context`` dict, and an
optional ``cause`` (chained exception).

Fatality is a field rather than a subclass: callers inspect ``error.fatal``
to decide between "fix your configuration" and "try again / pick another
provider".  Only :attr:`ErrorCategory.CONFIG_ERROR` and
:attr:`ErrorCategory.AUTH_FAILURE` are fatal.

Categories are a :class:`str` enum so they serialise naturally to JSON and
can be matched with simple ``==`` comparisons.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Category enum
# ---------------------------------------------------------------------------

class ErrorCategory(str, Enum):
    """Closed set of failure categories."""

    FILE_SIZE_OVERFLOW = "FILE_SIZE_OVERFLOW"
    FILE_TYPE_RESTRICT = "FILE_TYPE_RESTRICT"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    AUTH_FAILURE = "AUTH_FAILURE"
    NETWORK_ERROR = "NETWORK_ERROR"
    API_ERROR = "API_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"
    CONFIG_ERROR = "CONFIG_ERROR"


FATAL_CATEGORIES: frozenset[ErrorCategory] = frozenset({
    ErrorCategory.CONFIG_ERROR,
    ErrorCategory.AUTH_FAILURE,
})

_USER_PREFIXES: dict[ErrorCategory, str] = {
    ErrorCategory.FILE_SIZE_OVERFLOW: "File too large",
    ErrorCategory.FILE_TYPE_RESTRICT: "Unsupported file type",
    ErrorCategory.FILE_NOT_FOUND: "File not found",
    ErrorCategory.AUTH_FAILURE: "Authentication failed",
    ErrorCategory.NETWORK_ERROR: "Network error",
    ErrorCategory.API_ERROR: "API error",
    ErrorCategory.INVALID_RESPONSE: "Invalid response",
    ErrorCategory.CONFIG_ERROR: "Configuration error",
}


# ---------------------------------------------------------------------------
# Error type
# ---------------------------------------------------------------------------

class UploadError(Exception):
    """The single exception type raised by imghost.

    Parameters
    ----------
    message:
        A developer-friendly description of what went wrong.
    category:
        A value from :class:`ErrorCategory` identifying the failure class.
    fatal:
        ``True`` when retrying the same request cannot succeed and the caller
        must change configuration or credentials.  Defaults to whether
        *category* is in :data:`FATAL_CATEGORIES`.
    cause:
        The underlying exception, if this error wraps another.
    context:
        Arbitrary structured data providing extra diagnostic detail
        (``provider``, ``status_code``, ``url``, ``attempts``, ...).
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        fatal: bool | None = None,
        cause: BaseException | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        self.message: str = message
        self.category: ErrorCategory = ErrorCategory(category)
        self.fatal: bool = (
            self.category in FATAL_CATEGORIES if fatal is None else fatal
        )
        self.cause: BaseException | None = cause
        self.context: dict[str, Any] = context or {}
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def code(self) -> str:
        """The category value, for JSON output and log fields."""
        return self.category.value

    def to_user_message(self) -> str:
        """Return a one-line, category-prefixed message for end users."""
        prefix = _USER_PREFIXES.get(self.category)
        if prefix is None:
            return self.message
        return f"{prefix}: {self.message}"

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return (
            f"{type(self).__name__}(category={self.category.value!r}, "
            f"fatal={self.fatal!r}, message={self.message!r}{ctx})"
        )


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------

def file_size_error(actual: int, maximum: int, provider: str) -> UploadError:
    """The file is larger than *provider* accepts."""
    actual_mb = actual / 1024 / 1024
    max_mb = maximum / 1024 / 1024
    return UploadError(
        f"File size ({actual_mb:.2f}MB) exceeds {provider} limit ({max_mb:.0f}MB)",
        ErrorCategory.FILE_SIZE_OVERFLOW,
        context={"provider": provider, "size_bytes": actual, "max_bytes": maximum},
    )


def file_type_error(
    mime_type: str,
    supported_types: Iterable[str],
    provider: str,
) -> UploadError:
    """The sniffed MIME type is not in *provider*'s supported set."""
    supported = sorted(supported_types)
    return UploadError(
        f"File type '{mime_type or 'unknown'}' is not supported by {provider}. "
        f"Supported: {', '.join(supported)}",
        ErrorCategory.FILE_TYPE_RESTRICT,
        context={
            "provider": provider,
            "detected_mime": mime_type,
            "allowed_mimes": supported,
        },
    )


def file_not_found_error(
    message: str,
    path: str | None = None,
    cause: BaseException | None = None,
) -> UploadError:
    return UploadError(
        message,
        ErrorCategory.FILE_NOT_FOUND,
        cause=cause,
        context={"path": path} if path is not None else None,
    )


def auth_error(provider: str, detail: str | None = None) -> UploadError:
    """Credentials were rejected or have expired."""
    if detail:
        message = f"{provider} authentication failed: {detail}"
    else:
        message = (
            f"{provider} requires authentication. "
            "Please configure API key or credentials."
        )
    return UploadError(
        message,
        ErrorCategory.AUTH_FAILURE,
        context={"provider": provider},
    )


def config_error(provider: str, missing: str) -> UploadError:
    """A required configuration value is absent."""
    return UploadError(
        f"{provider} requires {missing}. Please check your .env configuration.",
        ErrorCategory.CONFIG_ERROR,
        context={"provider": provider},
    )


def network_error(
    message: str,
    cause: BaseException | None = None,
    **context: Any,
) -> UploadError:
    return UploadError(
        message,
        ErrorCategory.NETWORK_ERROR,
        cause=cause,
        context=context,
    )


def api_error(message: str, **context: Any) -> UploadError:
    return UploadError(message, ErrorCategory.API_ERROR, context=context)


def invalid_response_error(
    message: str,
    cause: BaseException | None = None,
    **context: Any,
) -> UploadError:
    return UploadError(
        message,
        ErrorCategory.INVALID_RESPONSE,
        cause=cause,
        context=context,
    )
