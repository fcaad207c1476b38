"""ImgBB adapter.

``POST https://api.imgbb.com/1/upload`` as multipart form data with the API
``key``, the base64-encoded ``image`` and an optional ``name``.
"""

from __future__ import annotations

import base64

from imghost.errors import api_error
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.transport import HttpTransport

from .base import ImageProvider, optional_int, optional_str

API_URL = "https://api.imgbb.com/1/upload"


class ImgBBProvider(ImageProvider):
    descriptor = ProviderDescriptor(
        name="imgbb",
        display_name="ImgBB",
        requires_config=True,
        max_file_size=32 * 1024 * 1024,
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
            config, "api_key", "API key (get one free at https://api.imgbb.com/)",
        )
        super().__init__(config, transport)

    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        # (None, value) parts keep the request multipart without a filename.
        files = {
            "key": (None, self._api_key),
            "image": (None, base64.b64encode(data).decode("ascii")),
        }
        if filename:
            files["name"] = (None, filename)

        response = self._transport.post(API_URL, files=files)
        body = self._json(response)

        payload = body.get("data")
        if not body.get("success") or not isinstance(payload, dict):
            error = body.get("error")
            message = error.get("message") if isinstance(error, dict) else None
            raise api_error(message or "Upload failed", provider=self.name)

        return UploadResult.create(
            id=str(payload.get("id") or ""),
            url=self._field(payload, "url"),
            name=payload.get("title") or filename or "image",
            viewer_url=optional_str(payload.get("url_viewer")),
            delete_url=optional_str(payload.get("delete_url")),
            size=optional_int(payload.get("size")),
            width=optional_int(payload.get("width")),
            height=optional_int(payload.get("height")),
        )
