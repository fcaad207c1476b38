"""Command line interface: ``imghost <image-path> [options]``.

Exit status is 0 on success and for ``--help`` / ``--list``; 1 on any upload
error or when no path is given.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

import typer

from imghost.errors import UploadError
from imghost.formatting import format_provider_table, format_result
from imghost.observability import set_level
from imghost.providers import describe_providers
from imghost.settings import load_config
from imghost.upload import upload_image

EPILOG = (
    "Configuration is read from the environment or a .env file "
    "(IMAGE_UPLOAD_PROVIDER, IMGBB_API_KEY, IMGUR_CLIENT_ID, FREEIMAGE_API_KEY, "
    "IMGHIPPO_API_KEY, WEIBO_COOKIES, CATBOX_USERHASH). Catbox works without any "
    "configuration."
)

app = typer.Typer(
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
    help="Upload an image to a hosting provider and print shareable links.",
    epilog=EPILOG,
)


class OutputChoice(str, Enum):
    ALL = "all"
    URL = "url"
    MARKDOWN = "markdown"
    HTML = "html"
    BBCODE = "bbcode"


def print_providers() -> None:
    typer.echo("\nAvailable Image Hosting Providers:\n")
    typer.echo(format_provider_table(describe_providers()))
    typer.echo("\nTo use a provider, set IMAGE_UPLOAD_PROVIDER in your .env file")
    typer.echo("or use the --provider flag.\n")


@app.command()
def main(
    image_path: Path | None = typer.Argument(
        None, help="Path to the local image file to upload.", show_default=False,
    ),
    provider: str | None = typer.Option(
        None, "--provider", "-p", help="Provider to use (default: configured, else catbox).",
    ),
    name: str | None = typer.Option(
        None, "--name", "-n", help="Display name used in the Markdown/HTML output.",
    ),
    list_providers: bool = typer.Option(
        False, "--list", "-l", help="List available providers and exit.",
    ),
    output_format: OutputChoice = typer.Option(
        OutputChoice.ALL, "--format", "-f", help="What to print on success.",
    ),
    env_file: Path | None = typer.Option(
        None, "--env-file", help="Path to a .env file with provider credentials.",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Emit structured progress logs on stderr.",
    ),
) -> None:
    """Upload IMAGE_PATH and print its URL, Markdown, HTML and BBCode."""
    if list_providers:
        print_providers()
        raise typer.Exit(0)

    if image_path is None:
        typer.echo("Error: No image path provided.\n", err=True)
        typer.echo("Run 'imghost --help' for usage.", err=True)
        raise typer.Exit(1)

    if verbose:
        set_level(logging.INFO)

    try:
        config = load_config(env_file)
        typer.echo(f"Uploading {image_path}...")
        result = upload_image(image_path, provider=provider, name=name, config=config)
    except UploadError as exc:
        typer.echo(f"\nError: {exc.to_user_message()}", err=True)
        if exc.fatal:
            typer.echo("This is a fatal error. Please check your configuration.", err=True)
        raise typer.Exit(1) from exc

    typer.echo("\nUpload successful!\n")
    typer.echo(format_result(result, output_format.value))
    if result.viewer_url:
        typer.echo(f"\nViewer: {result.viewer_url}")
    if result.delete_url:
        typer.echo(f"Delete: {result.delete_url}")


def run() -> None:
    """Console-script entry point."""
    app()
