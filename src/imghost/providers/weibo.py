"""Weibo (legacy) adapter.

``POST https://picupload.weibo.com/interface/pic_upload.php`` with the raw
bytes as the request body, options in the query string, and the logged-in
session in the ``Cookie`` header.  The XML response carries only the picture
id (``<pid>``); the public URL is assembled here from one of eight
equivalent CDN hosts picked at random.
"""

from __future__ import annotations

import random
import re

from imghost.errors import auth_error, invalid_response_error
from imghost.mime import mime_to_extension
from imghost.models import ProviderConfig, ProviderDescriptor, UploadResult
from imghost.transport import HttpTransport

from .base import ImageProvider

API_URL = "https://picupload.weibo.com/interface/pic_upload.php"

IMAGE_HOSTS: tuple[str, ...] = (
    "tvax1.sinaimg.cn",
    "tvax2.sinaimg.cn",
    "tvax3.sinaimg.cn",
    "tvax4.sinaimg.cn",
    "tva1.sinaimg.cn",
    "tva2.sinaimg.cn",
    "tva3.sinaimg.cn",
    "tva4.sinaimg.cn",
)

_PID_RE = re.compile(r"<pid>([^<]+)</pid>")
_LOGIN_MARKERS: tuple[str, ...] = ("login", "请登录")


def image_url(pid: str, mime_type: str | None, rng: random.Random | None = None) -> str:
    host = (rng or random).choice(IMAGE_HOSTS)
    return f"https://{host}/large/{pid}{mime_to_extension(mime_type, '.jpg')}"


class WeiboProvider(ImageProvider):
    descriptor = ProviderDescriptor(
        name="weibo",
        display_name="Weibo (Legacy)",
        requires_config=True,
        max_file_size=20 * 1024 * 1024 - 1,
        supported_types=frozenset({
            "image/jpeg",
            "image/png",
            "image/apng",
            "image/gif",
        }),
    )

    def __init__(
        self,
        config: ProviderConfig | None = None,
        transport: HttpTransport | None = None,
    ) -> None:
        self._cookies = self._require(
            config,
            "cookies",
            "cookies (export from browser after logging into weibo.com)",
        )
        super().__init__(config, transport)

    def _upload(
        self,
        data: bytes,
        filename: str | None,
        mime_type: str | None,
    ) -> UploadResult:
        params = {
            "s": "xml",
            "ori": "1",
            "data": "1",
            "rotate": "0",
            "wm": "",
            "app": "miniblog",
            "mime": mime_type or "image/jpeg",
        }
        response = self._transport.post(
            API_URL,
            params=params,
            headers={"Cookie": self._cookies, "Referer": "https://weibo.com/"},
            content=data,
        )
        text = response.text

        match = _PID_RE.search(text)
        if match is None:
            if any(marker in text for marker in _LOGIN_MARKERS):
                raise auth_error(
                    self.display_name,
                    "session expired. Please update your cookies.",
                )
            raise invalid_response_error(
                "Failed to parse Weibo response - no PID found",
                provider=self.name,
            )

        pid = match.group(1)
        url = image_url(pid, mime_type)
        return UploadResult.create(id=pid, url=url, name=filename or pid)
