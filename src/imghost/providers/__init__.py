"""imghost.providers -- hosting provider adapters and their registry.

* :mod:`.base` -- the :class:`ImageProvider` contract.
* :mod:`.catbox`, :mod:`.imgbb`, :mod:`.imgur`, :mod:`.freeimage`,
  :mod:`.imghippo`, :mod:`.weibo` -- one adapter per service.
* :mod:`.registry` -- name lookup, construction, and listing metadata.
"""

from __future__ import annotations

from .base import ImageProvider
from .catbox import CatboxProvider
from .freeimage import FreeimageProvider
from .imgbb import ImgBBProvider
from .imghippo import ImgHippoProvider
from .imgur import ImgurProvider
from .registry import (
    DEFAULT_PROVIDER,
    PROVIDERS,
    ProviderName,
    available_providers,
    create_provider,
    describe_providers,
    is_valid_provider,
)
from .weibo import WeiboProvider

__all__ = [
    "DEFAULT_PROVIDER",
    "PROVIDERS",
    "CatboxProvider",
    "FreeimageProvider",
    "ImageProvider",
    "ImgBBProvider",
    "ImgHippoProvider",
    "ImgurProvider",
    "ProviderName",
    "WeiboProvider",
    "available_providers",
    "create_provider",
    "describe_providers",
    "is_valid_provider",
]
