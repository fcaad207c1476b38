"""ImgHippo adapter.

``POST https://api.imghippo.com/v1/upload`` as multipart form data with
``api_key`` and the raw bytes in ``file``.
"""

from __future__ import annotations

from imghost.errors import api_error
from imghost.mime import default_filename
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.transport import HttpTransport

from .base import ImageProvider, optional_int, optional_str

API_URL = "https://api.imghippo.com/v1/upload"


class ImgHippoProvider(ImageProvider):
    descriptor = ProviderDescriptor(
        name="imghippo",
        display_name="ImgHippo",
        requires_config=True,
        max_file_size=50 * 1024 * 1024,
        supported_types=frozenset({
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/webp",
        }),
    )

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._api_key = self._require(
            config, "api_key", "API key (get one at https://www.imghippo.com/)",
        )
        super().__init__(config, transport)

    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        upload_name = filename or default_filename(mime_type, ".png")
        response = self._transport.post(
            API_URL,
            data={"api_key": self._api_key},
            files={"file": (upload_name, data, mime_type or "application/octet-stream")},
        )
        body = self._json(response)

        payload = body.get("data")
        if not body.get("success") or not isinstance(payload, dict):
            raise api_error(
                body.get("message") or "Upload failed",
                provider=self.name,
                status=body.get("status"),
            )

        return UploadResult.create(
            id=str(payload.get("id") or ""),
            url=self._field(payload, "url"),
            name=payload.get("title") or filename or "image",
            viewer_url=optional_str(payload.get("view_url")),
            delete_url=optional_str(payload.get("delete_url")),
            size=optional_int(payload.get("size")),
            width=optional_int(payload.get("width")),
            height=optional_int(payload.get("height")),
        )
