"""Imgur adapter.

``POST https://api.imgur.com/3/image`` with an ``Authorization: Client-ID``
header and a multipart body carrying the base64 ``image`` plus
``type=base64``.  Anonymous uploads are tied to the registered client.
"""

from __future__ import annotations

import base64

from imghost.errors import api_error
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.transport import HttpTransport

from .base import ImageProvider, optional_int

API_URL = "https://api.imgur.com/3/image"
VIEWER_URL = "https://imgur.com/{id}"
DELETE_URL = "https://imgur.com/delete/{deletehash}"


class ImgurProvider(ImageProvider):
    descriptor = ProviderDescriptor(
        name="imgur",
        display_name="Imgur",
        requires_config=True,
        max_file_size=20 * 1024 * 1024,
        supported_types=frozenset({
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/apng",
            "image/tiff",
        }),
    )

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._client_id = self._require(
            config,
            "client_id",
            "Client-ID (register at https://api.imgur.com/oauth2/addclient)",
        )
        super().__init__(config, transport)

    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        files = {
            "image": (None, base64.b64encode(data).decode("ascii")),
            "type": (None, "base64"),
        }
        if filename:
            files["name"] = (None, filename)

        response = self._transport.post(
            API_URL,
            headers={"Authorization": f"Client-ID {self._client_id}"},
            files=files,
        )
        body = self._json(response)

        payload = body.get("data")
        if not body.get("success") or not isinstance(payload, dict):
            raise api_error(
                f"Upload failed with status {body.get('status')}",
                provider=self.name,
                status=body.get("status"),
            )

        image_id = self._field(payload, "id")
        deletehash = payload.get("deletehash")
        return UploadResult.create(
            id=image_id,
            url=self._field(payload, "link"),
            name=payload.get("title") or filename or "image",
            viewer_url=VIEWER_URL.format(id=image_id),
            delete_url=DELETE_URL.format(deletehash=deletehash) if deletehash else None,
            size=optional_int(payload.get("size")),
            width=optional_int(payload.get("width")),
            height=optional_int(payload.get("height")),
        )
