"""Provider registry and factory.

The set of providers is closed: :class:`ProviderName` enumerates them and
:data:`PROVIDERS` maps each to its adapter class.  Metadata for listings is
read from each class's ``descriptor``, so it is available without
credentials and cannot drift from the adapters' own limits.
"""

from __future__ import annotations

from enum import Enum

from imghost.config import DEFAULT_PROVIDER
from imghost.errors import ErrorCategory, UploadError
from imghost.models import ProviderConfig, ProviderDescriptor
from imghost.transport import HttpTransport

from .base import ImageProvider
from .catbox import CatboxProvider
from .freeimage import FreeimageProvider
from .imgbb import ImgBBProvider
from .imghippo import ImgHippoProvider
from .imgur import ImgurProvider
from .weibo import WeiboProvider


class ProviderName(str, Enum):
    """Closed enumeration of supported providers."""

    CATBOX = "catbox"
    IMGBB = "imgbb"
    IMGUR = "imgur"
    FREEIMAGE = "freeimage"
    IMGHIPPO = "imghippo"
    WEIBO = "weibo"


PROVIDERS: dict[ProviderName, type[ImageProvider]] = {
    ProviderName.CATBOX: CatboxProvider,
    ProviderName.IMGBB: ImgBBProvider,
    ProviderName.IMGUR: ImgurProvider,
    ProviderName.FREEIMAGE: FreeimageProvider,
    ProviderName.IMGHIPPO: ImgHippoProvider,
    ProviderName.WEIBO: WeiboProvider,
}


def available_providers() -> list[str]:
    """Provider names in registry order."""
    return [name.value for name in PROVIDERS]


def is_valid_provider(name: str) -> bool:
    return name.lower() in available_providers()


def describe_providers() -> tuple[ProviderDescriptor, ...]:
    """Static metadata for every provider, without constructing any."""
    return tuple(cls.descriptor for cls in PROVIDERS.values())


def _resolve(name: str) -> ProviderName:
    try:
        return ProviderName(name.lower())
    except ValueError:
        raise UploadError(
            f"Unknown provider: {name}. "
            f"Available providers: {', '.join(available_providers())}",
            ErrorCategory.CONFIG_ERROR,
            context={"provider": name},
        ) from None


def create_provider(
    name: str,
    config: ProviderConfig | None = None,
    *,
    transport: HttpTransport | None = None,
) -> ImageProvider:
    """Construct the adapter registered under *name* (case-insensitive).

    Raises
    ------
    UploadError
        Fatal ``CONFIG_ERROR`` for an unknown name or missing secrets.
    """
    provider_cls = PROVIDERS[_resolve(name)]
    return provider_cls(config or {}, transport=transport)


__all__ = [
    "DEFAULT_PROVIDER",
    "PROVIDERS",
    "ProviderName",
    "available_providers",
    "create_provider",
    "describe_providers",
    "is_valid_provider",
]
