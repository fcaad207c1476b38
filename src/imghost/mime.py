"""Magic-byte MIME sniffing.

The type of an upload is decided from its first bytes, never from its file
name.  The pattern table follows the WHATWG MIME Sniffing rules for images:
each entry is matched from the first byte that is not in its ``ignored`` set,
and every candidate byte is compared as ``(byte & mask) == pattern``.

Anything unmatched is reported as :data:`UNKNOWN_MIME` (the empty string),
which is in no provider's supported set.
"""

from __future__ import annotations

from typing import NamedTuple

UNKNOWN_MIME = ""


class BitmapPattern(NamedTuple):
    pattern: bytes
    mask: bytes
    ignored: frozenset[int]
    mime: str
    note: str = ""


# Order matters: first match wins.
BITMAP_PATTERNS: tuple[BitmapPattern, ...] = (
    BitmapPattern(
        b"\x00\x00\x01\x00", b"\xff\xff\xff\xff", frozenset(),
        "image/x-icon", "Windows Icon",
    ),
    BitmapPattern(
        b"\x00\x00\x02\x00", b"\xff\xff\xff\xff", frozenset(),
        "image/x-icon", "Windows Cursor",
    ),
    BitmapPattern(b"BM", b"\xff\xff", frozenset(), "image/bmp", "BMP"),
    BitmapPattern(
        b"GIF87a", b"\xff" * 6, frozenset(), "image/gif", "GIF87a",
    ),
    BitmapPattern(
        b"GIF89a", b"\xff" * 6, frozenset(), "image/gif", "GIF89a",
    ),
    BitmapPattern(
        b"RIFF\x00\x00\x00\x00WEBPVP",
        b"\xff\xff\xff\xff\x00\x00\x00\x00\xff\xff\xff\xff\xff\xff",
        frozenset(),
        "image/webp",
        "RIFF, four length bytes, WEBPVP",
    ),
    BitmapPattern(
        b"\x89PNG\r\n\x1a\n", b"\xff" * 8, frozenset(), "image/png", "PNG",
    ),
    BitmapPattern(
        b"\xff\xd8\xff", b"\xff\xff\xff", frozenset(), "image/jpeg",
        "JPEG SOI followed by another marker",
    ),
)

_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/apng": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "image/bmp": ".bmp",
    "image/x-icon": ".ico",
    "image/tiff": ".tiff",
}


def _matches(data: bytes, entry: BitmapPattern) -> bool:
    pattern, mask, ignored = entry.pattern, entry.mask, entry.ignored
    if len(data) < len(pattern):
        return False

    start = 0
    while start < len(data) and data[start] in ignored:
        start += 1

    if len(data) - start < len(pattern):
        return False

    for offset, expected in enumerate(pattern):
        if data[start + offset] & mask[offset] != expected:
            return False
    return True


def detect_mime_type(data: bytes) -> str:
    """Return the image MIME type of *data*, or ``""`` when unrecognised.

    Parameters
    ----------
    data:
        The leading bytes of the file (the whole file is fine).

    Returns
    -------
    str
        One of the MIME strings in :data:`BITMAP_PATTERNS`, or
        :data:`UNKNOWN_MIME`.
    """
    for entry in BITMAP_PATTERNS:
        if _matches(data, entry):
            return entry.mime
    return UNKNOWN_MIME


def mime_to_extension(mime_type: str | None, default: str = "") -> str:
    """Map a MIME type to a file extension including the dot."""
    return _EXTENSIONS.get(mime_type or "", default)


def default_filename(mime_type: str | None, default_ext: str = ".png") -> str:
    """Synthesize ``image<ext>`` for uploads that carry no file name."""
    return f"image{mime_to_extension(mime_type, default_ext)}"
