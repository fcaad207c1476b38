"""Display formatting for upload results and provider listings."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from imghost.models import ProviderDescriptor, UploadResult

OutputFormat = Literal["url", "markdown", "html", "bbcode", "all"]


def format_result(result: UploadResult, fmt: OutputFormat = "all") -> str:
    """Render *result* in one of the supported output formats."""
    if fmt == "url":
        return result.url
    if fmt == "markdown":
        return result.formatted.markdown
    if fmt == "html":
        return result.formatted.html
    if fmt == "bbcode":
        return result.formatted.bbcode
    return "\n".join([
        f"URL: {result.url}",
        f"Markdown: {result.formatted.markdown}",
        f"HTML: {result.formatted.html}",
        f"BBCode: {result.formatted.bbcode}",
    ])


def format_size(num_bytes: int) -> str:
    return f"{round(num_bytes / 1024 / 1024)}MB"


def format_provider_table(descriptors: Iterable[ProviderDescriptor]) -> str:
    """Markdown-style table of providers, as printed by ``imghost --list``."""
    lines = [
        "| Provider        | Key       | Max Size | Config Required |",
        "|-----------------|-----------|----------|-----------------|",
    ]
    for d in descriptors:
        required = "Yes" if d.requires_config else "No"
        lines.append(
            f"| {d.display_name:<15} | {d.name:<9} | {format_size(d.max_file_size):<8} "
            f"| {required:<15} |"
        )
    return "\n".join(lines)
