"""Catbox.moe adapter.

``POST https://catbox.moe/user/api.php`` as multipart form data with
``reqtype=fileupload`` and the raw bytes in ``fileToUpload``.  Anonymous
uploads need no configuration; an optional ``user_hash`` attaches the file to
an account.  The response body is the bare file URL.
"""

from __future__ import annotations

from imghost.errors import api_error
from imghost.mime import default_filename
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.transport import HttpTransport

from .base import ImageProvider, config_value

API_URL = "https://catbox.moe/user/api.php"


class CatboxProvider(ImageProvider):
    descriptor = ProviderDescriptor(
        name="catbox",
        display_name="Catbox.moe",
        requires_config=False,
        max_file_size=200 * 1024 * 1024,
        supported_types=frozenset({
            "image/jpeg",
            "image/png",
            "image/gif",
            "image/webp",
            "image/bmp",
            "image/x-icon",
        }),
    )

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._user_hash = config_value(config, "user_hash")
        super().__init__(config, transport)

    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        form = {"reqtype": "fileupload"}
        if self._user_hash:
            form["userhash"] = self._user_hash

        upload_name = filename or default_filename(mime_type, ".png")
        files = {
            "fileToUpload": (upload_name, data, mime_type or "application/octet-stream"),
        }

        response = self._transport.post(API_URL, data=form, files=files)
        text = response.text

        if not text.startswith("https://"):
            raise api_error(
                text.strip() or "Upload failed - no URL returned",
                provider=self.name,
            )

        url = text.strip()
        file_id = url.rsplit("/", 1)[-1]
        return UploadResult.create(id=file_id, url=url, name=filename or file_id)
