"""Entrypoint for the command line interface."""

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from faviconkit.config_logging import configure_logging
from faviconkit.exceptions import FaviconError, InvalidArgumentError, NotFoundError
from faviconkit.favicon import fetch_favicon, find_candidates
from faviconkit.models import ImageFormat, ImageSize
from faviconkit.utils.http_client import HttpClient

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INVALID_ARGUMENTS = 2

# CLI Options
size_option = typer.Option(
    None,
    "--size",
    "-s",
    help="Target size: small (16x16), medium (32x32), large (64x64) or W,H",
)

format_option = typer.Option(
    None,
    "--format",
    "-f",
    help="Output format (png, ico, jpeg, gif, webp, bmp). Defaults to the --path extension",
)

path_option = typer.Option(
    None,
    "--path",
    "-p",
    help="File to write the favicon to. The raw bytes go to stdout when omitted",
    dir_okay=False,
)

url_only_option = typer.Option(
    False,
    "--url",
    help="Only print the URL of the selected favicon, without downloading it",
)

header_option = typer.Option(
    None,
    "--header",
    "-H",
    help='Extra request header as "Name: Value", can be repeated',
)

cli = typer.Typer(no_args_is_help=True, add_completion=False)


@cli.callback()
def setup():
    """Find, download and convert website favicons."""
    configure_logging()


@cli.command()
def fetch(
    host: str = typer.Argument(..., help="Website URL or host name, e.g. example.com"),
    size: Optional[str] = size_option,
    image_format: Optional[str] = format_option,
    path: Optional[Path] = path_option,
    url_only: bool = url_only_option,
    header: Optional[list[str]] = header_option,
):
    """Fetch the favicon of a website."""
    try:
        requested_size = ImageSize.parse(size) if size else None
        requested_format = ImageFormat.from_name(image_format) if image_format else None
        if requested_format is None and path is not None:
            requested_format = ImageFormat.from_path(path)
        headers = parse_headers(header or [])
    except InvalidArgumentError as e:
        _exit_with_error(e, EXIT_INVALID_ARGUMENTS)

    with HttpClient.from_settings(headers=headers) as client:
        try:
            if url_only:
                candidates = find_candidates(host, requested_size, client=client)
                typer.echo(candidates[0].url)
                return

            favicon = fetch_favicon(
                host, size=requested_size, image_format=requested_format, client=client
            )
            if path is not None:
                favicon.export(path, favicon.format)
            else:
                typer.echo(favicon.export_bytes(), nl=False)
        except InvalidArgumentError as e:
            _exit_with_error(e, EXIT_INVALID_ARGUMENTS)
        except FaviconError as e:
            _exit_with_error(e, EXIT_FAILURE)


def parse_headers(values: list[str]) -> dict[str, str]:
    """Parse "Name: Value" strings into a header mapping.

    Raises:
        InvalidArgumentError: a value has no colon, an empty name or non-ASCII characters.
    """
    headers: dict[str, str] = {}
    for value in values:
        name, separator, content = value.partition(":")
        if not separator or not name.strip():
            raise InvalidArgumentError(f'Invalid header {value!r}: expected "Name: Value"')
        if not value.isascii():
            raise InvalidArgumentError(f"Invalid header {value!r}: only ASCII is allowed")
        headers[name.strip()] = content.strip()
    return headers


def _exit_with_error(error: FaviconError, code: int) -> NoReturn:
    message = error.describe() if isinstance(error, NotFoundError) else str(error)
    logger.debug(f"Exiting with code {code}: {message}")
    typer.echo(f"Error: {type(error).__name__}: {message}", err=True)
    raise typer.Exit(code=code)


if __name__ == "__main__":
    cli()
