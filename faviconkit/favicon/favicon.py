"""The Favicon entity and the fetch pipeline that produces it"""

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from faviconkit.configs import settings
from faviconkit.exceptions import EncodeError, ExportError, InvalidArgumentError
from faviconkit.favicon.discovery import FaviconDiscovery
from faviconkit.favicon.favicon_fetcher import FaviconFetcher
from faviconkit.favicon.favicon_selector import CandidateSelector
from faviconkit.favicon.transformer import FaviconTransformer, Raster
from faviconkit.models import Candidate, ImageFormat, ImageSize
from faviconkit.utils.http_client import Client, HttpClient
from faviconkit.utils.image_signature import sniff_image_format
from faviconkit.utils.url import parse_site_url

logger = logging.getLogger(__name__)

EXPORT_FILE_MODE = 0o644

_default_transformer = FaviconTransformer()


class Favicon(BaseModel):
    """An encoded favicon image and where it was fetched from.

    Instances are immutable: `resize` and `change_format` return new favicons.
    """

    model_config = ConfigDict(frozen=True)

    content: bytes
    width: int
    height: int
    format: ImageFormat
    source: str

    @model_validator(mode="after")
    def _check_format(self) -> "Favicon":
        detected = sniff_image_format(self.content)
        if detected != self.format:
            raise ValueError(
                f"Favicon content is {detected.value if detected else 'not an image'},"
                f" not {self.format.value}"
            )
        return self

    @classmethod
    def fetch(
        cls,
        url: str,
        size: Optional[ImageSize] = None,
        client: Optional[Client] = None,
        transformer: Optional[FaviconTransformer] = None,
    ) -> "Favicon":
        """Discover, select and download the favicon of the site at `url`.

        `size` only steers which candidate is fetched first; the image is
        returned at its original size. A client is built from settings only
        when none is given.

        Raises:
            InvalidUrlError: `url` is not a valid site URL.
            NotFoundError: no candidate returned an image.
            DecodeError: the selected image can't be decoded.
        """
        with _client_scope(client) as http_client:
            ordered = _ordered_candidates(url, size, http_client)
            content, candidate = FaviconFetcher(http_client).fetch(ordered)
        return cls.build(candidate.url, content, transformer)

    @classmethod
    def build(
        cls, source: str, content: bytes, transformer: Optional[FaviconTransformer] = None
    ) -> "Favicon":
        """Build a favicon from image bytes without any network access.

        Raises:
            DecodeError: `content` is not a supported image.
        """
        raster = (transformer or _default_transformer).decode(content)
        return cls(
            content=content,
            width=raster.width,
            height=raster.height,
            format=raster.source_format,
            source=source,
        )

    @property
    def mime_type(self) -> str:
        """MIME type of the content."""
        return self.format.mime_type

    def resize(
        self, size: ImageSize, transformer: Optional[FaviconTransformer] = None
    ) -> "Favicon":
        """Return a copy stretched to exactly `size`, in the same format.

        ICO favicons are limited to 256x256, larger sizes are scaled down to fit.
        """
        transformer = transformer or _default_transformer
        raster = transformer.resize(transformer.decode(self.content), size)
        return self._from_raster(raster, self.format, transformer)

    def change_format(
        self, image_format: ImageFormat, transformer: Optional[FaviconTransformer] = None
    ) -> "Favicon":
        """Return a copy re-encoded as `image_format`, downscaled if the format requires it."""
        if image_format == self.format:
            return self.model_copy()
        transformer = transformer or _default_transformer
        return self._from_raster(transformer.decode(self.content), image_format, transformer)

    def export(self, path: str | Path, image_format: Optional[ImageFormat] = None) -> Path:
        """Atomically write the favicon to `path` and return the path.

        The output format is `image_format` when given, otherwise the format
        implied by the path suffix, otherwise the current format.

        Raises:
            EncodeError: the suffix names no supported format, or encoding failed.
            ExportError: the file can't be written.
        """
        target = Path(path)
        if image_format is None:
            try:
                image_format = ImageFormat.from_path(target) or self.format
            except InvalidArgumentError as e:
                raise EncodeError(f"Cannot infer image format from {target.name!r}: {e}") from e

        content = self.change_format(image_format).content
        _atomic_write(target, content)
        logger.info(f"Exported {image_format.value} favicon from {self.source} to {target}")
        return target

    def export_bytes(self) -> bytes:
        """Return the encoded image bytes."""
        return self.content

    def _from_raster(
        self, raster: Raster, image_format: ImageFormat, transformer: FaviconTransformer
    ) -> "Favicon":
        raster = transformer.fit(raster, image_format)
        return Favicon(
            content=transformer.encode(raster, image_format),
            width=raster.width,
            height=raster.height,
            format=image_format,
            source=self.source,
        )


def find_candidates(
    url: str, size: Optional[ImageSize] = None, client: Optional[Client] = None
) -> list[Candidate]:
    """Return the favicon candidates of a site in fetch order, without downloading any icon."""
    with _client_scope(client) as http_client:
        return _ordered_candidates(url, size, http_client)


def fetch_favicon(
    url: str,
    size: Optional[ImageSize] = None,
    image_format: Optional[ImageFormat] = None,
    client: Optional[Client] = None,
) -> Favicon:
    """Fetch a site's favicon, then resize it and change its format when requested."""
    favicon = Favicon.fetch(url, size=size, client=client)
    if size is not None:
        favicon = favicon.resize(size)
    if image_format is not None:
        favicon = favicon.change_format(image_format)
    return favicon


def _ordered_candidates(url: str, size: Optional[ImageSize], client: Client) -> list[Candidate]:
    site = parse_site_url(url, add_www=bool(settings.discovery.add_www))
    candidates = FaviconDiscovery(client).discover(site)
    return CandidateSelector.order(candidates, size)


@contextlib.contextmanager
def _client_scope(client: Optional[Client]):
    """Yield `client`, or a client built from settings that is closed on exit."""
    if client is not None:
        yield client
        return
    with HttpClient.from_settings() as default_client:
        yield default_client


def _atomic_write(target: Path, content: bytes) -> None:
    """Write to a temporary file next to `target`, then rename it over `target`."""
    temp_path: Optional[str] = None
    try:
        fd, temp_path = tempfile.mkstemp(
            dir=target.parent, prefix=f".{target.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "wb") as temp_file:
            temp_file.write(content)
        # mkstemp creates owner-only files
        os.chmod(temp_path, EXPORT_FILE_MODE)
        os.replace(temp_path, target)
    except OSError as e:
        if temp_path is not None:
            with contextlib.suppress(OSError):
                os.unlink(temp_path)
        raise ExportError(f"Failed to write favicon to {target}: {e}") from e
