"""Freeimage.host adapter.

``POST https://freeimage.host/api/1/upload/`` with the API ``key``,
``action=upload``, the base64 ``source`` and ``format=json``.  Success is
``status_code == 200`` with an ``image`` object.
"""

from __future__ import annotations

import base64

from imghost.errors import api_error
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.transport import HttpTransport

from .base import ImageProvider, optional_int, optional_str

API_URL = "https://freeimage.host/api/1/upload/"


class FreeimageProvider(ImageProvider):
    descriptor = ProviderDescriptor(
        name="freeimage",
        display_name="Freeimage.host",
        requires_config=True,
        max_file_size=64 * 1024 * 1024,
        supported_types=frozenset({
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/webp",
            "image/bmp",
        }),
    )

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._api_key = self._require(
            config,
            "api_key",
            "API key (get one free at https://freeimage.host/page/api)",
        )
        super().__init__(config, transport)

    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        files = {
            "key": (None, self._api_key),
            "action": (None, "upload"),
            "source": (None, base64.b64encode(data).decode("ascii")),
            "format": (None, "json"),
        }

        response = self._transport.post(API_URL, files=files)
        body = self._json(response)

        image = body.get("image")
        if body.get("status_code") != 200 or not isinstance(image, dict):
            error = body.get("error")
            message = error.get("message") if isinstance(error, dict) else None
            raise api_error(
                message or "Upload failed",
                provider=self.name,
                status_code=body.get("status_code"),
            )

        image_name = str(image.get("name") or "")
        return UploadResult.create(
            id=image_name,
            url=self._field(image, "url"),
            name=filename or image_name or "image",
            viewer_url=optional_str(image.get("url_viewer")),
            delete_url=optional_str(image.get("delete_url")),
            size=optional_int(image.get("size")),
            width=optional_int(image.get("width")),
            height=optional_int(image.get("height")),
        )
