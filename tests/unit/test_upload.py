"""End-to-end tests for the upload pipeline against mocked providers."""

from __future__ import annotations

import dataclasses

import httpx
import pytest

from imghost.config import UploadConfig
from imghost.errors import ErrorCategory, UploadError
from imghost.providers import PROVIDERS, ProviderName
from imghost.transport import HttpTransport
from imghost.upload import (
    UploadPipeline,
    read_image,
    upload_image,
    upload_name,
    validate_image,
)

ALL_PROVIDERS = [name.value for name in ProviderName]

# A success response every adapter accepts, keyed by provider.
SUCCESS_RESPONSES = {
    "catbox": lambda: httpx.Response(200, text="https://files.catbox.moe/abc.png"),
    "imgbb": lambda: httpx.Response(
        200, json={"success": True, "data": {"id": "i", "url": "https://i.ibb.co/i.png"}},
    ),
    "imgur": lambda: httpx.Response(
        200, json={"success": True, "data": {"id": "i", "link": "https://i.imgur.com/i.png"}},
    ),
    "freeimage": lambda: httpx.Response(
        200, json={"status_code": 200, "image": {"name": "i", "url": "https://iili.io/i.png"}},
    ),
    "imghippo": lambda: httpx.Response(
        200, json={"success": True, "data": {"url": "https://i.imghippo.com/files/i.png"}},
    ),
    "weibo": lambda: httpx.Response(200, text="<pid>abcpid</pid>"),
}


class TestReadImage:
    def test_reads_bytes(self, png_file, png_bytes):
        assert read_image(png_file) == png_bytes

    def test_missing_file(self, tmp_path):
        with pytest.raises(UploadError) as exc_info:
            read_image(tmp_path / "nope.png")
        assert exc_info.value.category is ErrorCategory.FILE_NOT_FOUND
        assert exc_info.value.message.startswith("File not found: ")
        assert not exc_info.value.fatal

    def test_directory_is_not_a_file(self, tmp_path):
        with pytest.raises(UploadError) as exc_info:
            read_image(tmp_path)
        assert exc_info.value.category is ErrorCategory.FILE_NOT_FOUND
        assert "not a file" in exc_info.value.message


class TestUploadName:
    def test_stem(self):
        assert upload_name("/tmp/holiday.photo.png") == "holiday.photo"

    def test_override(self):
        assert upload_name("/tmp/a.png", "Cover") == "Cover"


class TestEndToEnd:
    @pytest.mark.parametrize("provider", ALL_PROVIDERS)
    def test_every_provider_succeeds(self, provider, config, png_file, mock_transport):
        transport, handler = mock_transport([SUCCESS_RESPONSES[provider]()])
        result = upload_image(png_file, provider=provider, config=config, transport=transport)
        assert handler.calls == 1
        assert result.url.startswith("https://")
        assert result.formatted.url == result.url

    def test_catbox_default_with_empty_config(self, png_file, mock_transport):
        transport, handler = mock_transport([SUCCESS_RESPONSES["catbox"]()])
        result = upload_image(png_file, transport=transport)
        assert str(handler.requests[0].url) == "https://catbox.moe/user/api.php"
        assert result.formatted.markdown == "![screenshot](https://files.catbox.moe/abc.png)"

    def test_name_override(self, png_file, mock_transport):
        transport, _ = mock_transport([SUCCESS_RESPONSES["catbox"]()])
        result = upload_image(png_file, name="Diagram", transport=transport)
        assert result.formatted.html == '<img src="https://files.catbox.moe/abc.png" alt="Diagram">'

    def test_configured_provider_used_when_credentialed(self, config, png_file, mock_transport):
        config.provider = "imgur"
        transport, handler = mock_transport([SUCCESS_RESPONSES["imgur"]()])
        upload_image(png_file, config=config, transport=transport)
        assert handler.requests[0].url.host == "api.imgur.com"

    def test_configured_provider_without_secret_falls_back(self, png_file, mock_transport):
        config = UploadConfig(provider="imgbb")
        transport, handler = mock_transport([SUCCESS_RESPONSES["catbox"]()])
        upload_image(png_file, config=config, transport=transport)
        assert handler.requests[0].url.host == "catbox.moe"

    def test_metrics_on_success(self, config, png_file, mock_transport, metrics):
        config.metrics = metrics
        transport, _ = mock_transport([SUCCESS_RESPONSES["catbox"]()])
        UploadPipeline(config, transport).upload(png_file, provider="catbox")
        assert "imghost.upload_success_total" in metrics.names()
        assert metrics.gauges[0] == {
            "name": "imghost.upload_bytes", "value": 10, "tags": {"provider": "catbox"},
        }


class TestValidation:
    @pytest.mark.parametrize("provider", ALL_PROVIDERS)
    def test_size_overflow_before_network(
        self, provider, config, png_file, mock_transport, monkeypatch,
    ):
        cls = PROVIDERS[ProviderName(provider)]
        monkeypatch.setattr(
            cls, "descriptor", dataclasses.replace(cls.descriptor, max_file_size=8),
        )
        transport, handler = mock_transport([SUCCESS_RESPONSES[provider]()])
        with pytest.raises(UploadError) as exc_info:
            upload_image(png_file, provider=provider, config=config, transport=transport)
        assert exc_info.value.category is ErrorCategory.FILE_SIZE_OVERFLOW
        assert handler.calls == 0

    @pytest.mark.parametrize("provider", ALL_PROVIDERS)
    def test_unknown_type_before_network(self, provider, config, tmp_path, mock_transport):
        path = tmp_path / "notes.png"
        path.write_bytes(b"just some text, not an image")
        transport, handler = mock_transport([SUCCESS_RESPONSES[provider]()])
        with pytest.raises(UploadError) as exc_info:
            upload_image(path, provider=provider, config=config, transport=transport)
        assert exc_info.value.category is ErrorCategory.FILE_TYPE_RESTRICT
        assert "'unknown'" in exc_info.value.message
        assert handler.calls == 0

    def test_type_checked_against_provider(self, config, tmp_path, mock_transport):
        path = tmp_path / "pic.webp"
        path.write_bytes(b"RIFF\x00\x00\x00\x00WEBPVP8 ")
        transport, handler = mock_transport([SUCCESS_RESPONSES["imgur"]()])
        with pytest.raises(UploadError) as exc_info:
            upload_image(path, provider="imgur", config=config, transport=transport)
        assert exc_info.value.category is ErrorCategory.FILE_TYPE_RESTRICT
        assert "image/webp" in exc_info.value.message
        assert handler.calls == 0

    def test_file_name_does_not_affect_type(self, tmp_path, mock_transport):
        path = tmp_path / "photo.jpg"
        path.write_bytes(b"\x89PNG\r\n\x1a\n\x00")
        transport, handler = mock_transport([SUCCESS_RESPONSES["catbox"]()])
        upload_image(path, transport=transport)
        assert b"Content-Type: image/png" in handler.requests[0].content

    def test_type_checked_through_descriptor(self, mock_transport, monkeypatch):
        cls = PROVIDERS[ProviderName.CATBOX]
        monkeypatch.setattr(
            cls, "descriptor",
            dataclasses.replace(cls.descriptor, supported_types=frozenset({"image/gif"})),
        )
        transport, _ = mock_transport([])
        provider = cls(transport=transport)
        validate_image(b"GIF89a", "image/gif", provider)
        for mime in ("image/png", ""):
            with pytest.raises(UploadError) as exc_info:
                validate_image(b"\x89PNG", mime, provider)
            assert exc_info.value.category is ErrorCategory.FILE_TYPE_RESTRICT


class TestFailures:
    def test_unknown_provider(self, png_file, mock_transport):
        transport, handler = mock_transport([httpx.Response(200)])
        with pytest.raises(UploadError) as exc_info:
            upload_image(png_file, provider="notaprovider", transport=transport)
        assert exc_info.value.category is ErrorCategory.CONFIG_ERROR
        assert exc_info.value.fatal
        assert handler.calls == 0

    def test_missing_secret(self, png_file, mock_transport):
        transport, handler = mock_transport([httpx.Response(200)])
        with pytest.raises(UploadError) as exc_info:
            upload_image(png_file, provider="imgbb", transport=transport)
        assert exc_info.value.category is ErrorCategory.CONFIG_ERROR
        assert handler.calls == 0

    def test_missing_file(self, tmp_path, mock_transport):
        transport, handler = mock_transport([httpx.Response(200)])
        with pytest.raises(UploadError) as exc_info:
            upload_image(tmp_path / "missing.png", transport=transport)
        assert exc_info.value.category is ErrorCategory.FILE_NOT_FOUND
        assert handler.calls == 0

    def test_failure_metric(self, png_file, mock_transport, metrics):
        config = UploadConfig(metrics=metrics)
        transport, _ = mock_transport([httpx.Response(200, text="nope")])
        with pytest.raises(UploadError):
            UploadPipeline(config, transport).upload(png_file)
        failure = next(
            e for e in metrics.increments if e["name"] == "imghost.upload_failure_total"
        )
        assert failure["tags"] == {"provider": "catbox", "category": "API_ERROR"}

    def test_server_error_retried_then_reported(self, png_file, mock_transport):
        transport, handler = mock_transport([httpx.Response(502)], max_retries=2)
        with pytest.raises(UploadError) as exc_info:
            upload_image(png_file, transport=transport)
        assert exc_info.value.category is ErrorCategory.NETWORK_ERROR
        assert handler.calls == 3


class TestPipeline:
    def test_resolve_provider_name(self):
        config = UploadConfig(provider="imgbb", providers={"imgbb": {"api_key": "k"}})
        pipeline = UploadPipeline(config)
        assert pipeline.resolve_provider_name() == "imgbb"
        assert pipeline.resolve_provider_name("WEIBO") == "weibo"

    def test_injected_transport_left_open(self, png_file, mock_transport):
        transport, _ = mock_transport([SUCCESS_RESPONSES["catbox"]()])
        UploadPipeline(transport=transport).upload(png_file)
        assert not transport._client.is_closed

    def test_owned_transport_closed(self, png_file, monkeypatch):
        client = httpx.Client(
            transport=httpx.MockTransport(
                lambda request: httpx.Response(200, text="https://files.catbox.moe/x.png"),
            ),
        )
        owned = HttpTransport(client=client, retry_delay=0.0)
        closed = []
        monkeypatch.setattr(owned, "close", lambda: closed.append(True))
        monkeypatch.setattr(HttpTransport, "from_config", lambda config: owned)

        UploadPipeline().upload(png_file)
        assert closed == [True]
