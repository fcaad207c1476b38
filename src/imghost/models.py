"""Public data models for imghost.

All types are plain dataclasses.  :class:`UploadResult` and
:class:`ProviderDescriptor` are frozen: a result is produced once per
successful upload and a descriptor never changes after its provider class is
defined.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

ProviderConfig = Mapping[str, Any]
"""Open key/value bag of already-resolved provider secrets."""


@dataclass(frozen=True)
class FormattedOutput:
    """Display strings derived from an image URL and a display name."""

    url: str
    markdown: str
    html: str
    bbcode: str

    @classmethod
    def build(cls, url: str, name: str = "image") -> FormattedOutput:
        return cls(
            url=url,
            markdown=f"![{name}]({url})",
            html=f'<img src="{url}" alt="{name}">',
            bbcode=f"[IMG]{url}[/IMG]",
        )


@dataclass(frozen=True)
class UploadResult:
    """Normalized outcome of one successful upload.

    Attributes
    ----------
    id:
        Provider-native identifier (opaque).
    url:
        Direct URL of the hosted image.
    viewer_url:
        Landing page for the image, when the provider has one.
    delete_url:
        Deletion link, when the provider returns one.
    size, width, height:
        Byte size and pixel dimensions, when the provider reports them.
    formatted:
        Pre-rendered URL / Markdown / HTML / BBCode strings.  Always derived
        from ``url`` and the display name via :meth:`create`.
    """

    id: str
    url: str
    formatted: FormattedOutput
    viewer_url: str | None = None
    delete_url: str | None = None
    size: int | None = None
    width: int | None = None
    height: int | None = None

    @classmethod
    def create(
        cls,
        *,
        id: str,
        url: str,
        name: str = "image",
        viewer_url: str | None = None,
        delete_url: str | None = None,
        size: int | None = None,
        width: int | None = None,
        height: int | None = None,
    ) -> UploadResult:
        return cls(
            id=id,
            url=url,
            formatted=FormattedOutput.build(url, name),
            viewer_url=viewer_url,
            delete_url=delete_url,
            size=size,
            width=width,
            height=height,
        )


@dataclass(frozen=True)
class ProviderDescriptor:
    """Static metadata for a hosting provider.

    Available without constructing the provider, so listings can be rendered
    with no credentials present.
    """

    name: str
    display_name: str
    requires_config: bool
    max_file_size: int
    supported_types: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.name or self.name != self.name.lower():
            raise ValueError(f"provider name must be lowercase, got {self.name!r}")
        if self.max_file_size <= 0:
            raise ValueError(f"max_file_size must be > 0, got {self.max_file_size}")
        if not self.supported_types:
            raise ValueError(f"{self.name}: supported_types must not be empty")
        # Accept any iterable at construction time.
        object.__setattr__(self, "supported_types", frozenset(self.supported_types))

    def accepts(self, mime_type: str) -> bool:
        return bool(mime_type) and mime_type in self.supported_types
