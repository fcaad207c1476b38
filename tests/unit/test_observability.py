"""Tests for structured logging, metrics hooks and redaction."""

from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from imghost.observability import (
    MetricsHook,
    NoopMetricsHook,
    StructuredFormatter,
    get_logger,
    set_level,
)
from imghost.observability.logger import _configured_loggers
from imghost.utils import mask_secret, redact


def _record(msg: str = "hello", **extra_fields) -> logging.LogRecord:
    record = logging.LogRecord(
        name="imghost.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    if extra_fields:
        record.extra_fields = extra_fields
    return record


class TestStructuredFormatter:
    def test_required_keys(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert set(entry) == {"ts", "level", "logger", "message"}
        assert entry["level"] == "INFO"
        assert entry["logger"] == "imghost.test"
        assert entry["message"] == "hello"

    def test_extra_fields_are_merged_and_redacted(self):
        line = StructuredFormatter().format(
            _record(provider="imgbb", api_key="abcdefgh12345678", size_bytes=10),
        )
        entry = json.loads(line)
        assert entry["provider"] == "imgbb"
        assert entry["size_bytes"] == 10
        assert entry["api_key"] == "...5678"
        assert "abcdefgh" not in line

    def test_non_ascii_kept(self):
        line = StructuredFormatter().format(_record("请登录"))
        assert "请登录" in line

    def test_exception_included(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad" in entry["exception"]


class TestGetLogger:
    def test_idempotent(self):
        stream = io.StringIO()
        first = get_logger("imghost.test_idempotent", stream=stream)
        second = get_logger("imghost.test_idempotent", stream=stream)
        assert first is second
        assert len(first.handlers) == 1
        assert not first.propagate

    def test_emits_json(self):
        stream = io.StringIO()
        log = get_logger("imghost.test_emit", level="info", stream=stream)
        log.info("upload complete", extra={"extra_fields": {"provider": "catbox"}})
        entry = json.loads(stream.getvalue())
        assert entry["message"] == "upload complete"
        assert entry["provider"] == "catbox"

    def test_default_level_is_warning(self):
        stream = io.StringIO()
        log = get_logger("imghost.test_quiet", stream=stream)
        log.info("hidden")
        assert stream.getvalue() == ""

    def test_set_level_applies_to_all(self):
        log = get_logger("imghost.test_set_level", stream=io.StringIO())
        try:
            set_level(logging.DEBUG)
            assert log.level == logging.DEBUG
            for name in _configured_loggers:
                assert logging.getLogger(name).level == logging.DEBUG
        finally:
            set_level(logging.WARNING)


class TestMetricsHook:
    def test_noop_satisfies_protocol(self):
        assert isinstance(NoopMetricsHook(), MetricsHook)

    def test_recording_hook_satisfies_protocol(self, metrics):
        assert isinstance(metrics, MetricsHook)

    def test_noop_accepts_all_calls(self):
        hook = NoopMetricsHook()
        hook.increment("imghost.requests_total", tags={"status": "200"})
        hook.timing("imghost.request_duration_ms", 1.5)
        hook.gauge("imghost.upload_bytes", 10)

    def test_noop_has_no_instance_dict(self):
        assert not hasattr(NoopMetricsHook(), "__dict__")


class TestMaskSecret:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, "<unset>"),
            ("", "<unset>"),
            ("short", "****"),
            ("1234567", "****"),
            ("12345678", "...5678"),
            ("imgbb-key-abcdef", "...cdef"),
        ],
    )
    def test_mask(self, value, expected):
        assert mask_secret(value) == expected


class TestRedact:
    def test_sensitive_keys_case_insensitive(self):
        out = redact({
            "Authorization": "Client-ID 0123456789abcdef",
            "Cookie": "SUB=_2A25Lsession",
            "userhash": "catbox-hash-0001",
            "clientId": "imgur-client-9999",
        })
        assert out == {
            "Authorization": "...cdef",
            "Cookie": "...sion",
            "userhash": "...0001",
            "clientId": "...9999",
        }

    def test_pattern_keys(self):
        out = redact({"refresh_token": "tok-123456789", "db_password": "hunter2hunter2"})
        assert out["refresh_token"] == "...6789"
        assert out["db_password"] == "...ter2"

    def test_nested(self):
        out = redact({"data": {"key": "imgbb-secret-key"}, "items": [{"api_key": "abcdefghij"}]})
        assert out["data"]["key"] == "...-key"
        assert out["items"][0]["api_key"] == "...ghij"

    def test_long_base64_replaced(self):
        blob = "A" * 300
        assert redact({"image": blob}) == {"image": "<base64:300_chars>"}

    def test_short_strings_kept(self):
        assert redact({"reqtype": "fileupload"}) == {"reqtype": "fileupload"}

    def test_bytes(self):
        assert redact({"content": b"\x89PNG"}) == {"content": "<binary:4_bytes>"}

    def test_auth_scheme_in_free_text(self):
        out = redact({"error": "rejected header Client-ID abc123"})
        assert out["error"] == "rejected header Client-ID <redacted>"

    def test_does_not_mutate(self):
        payload = {"api_key": "abcdefghij", "nested": {"cookie": "SUB=abcdefgh"}}
        redact(payload)
        assert payload == {"api_key": "abcdefghij", "nested": {"cookie": "SUB=abcdefgh"}}

    def test_empty_secret_left_alone(self):
        assert redact({"api_key": ""}) == {"api_key": ""}
