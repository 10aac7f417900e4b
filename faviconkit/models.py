"""Data models for favicon discovery and retrieval"""

import re
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, PositiveInt, field_validator

from faviconkit.exceptions import InvalidArgumentError
from faviconkit.utils.url import is_absolute_url

SizeHint = tuple[int, int]

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*[,xX]\s*(\d+)\s*$")


class SourceKind(str, Enum):
    """Where in a site a favicon candidate was found."""

    LINK_ICON = "link"
    APPLE_TOUCH_ICON = "apple-touch-icon"
    META_ICON = "meta"
    MANIFEST = "manifest"
    DEFAULT_ICO = "default"


class ImageFormat(str, Enum):
    """Raster container formats that favicons can be decoded from and encoded to."""

    PNG = "png"
    ICO = "ico"
    JPEG = "jpeg"
    GIF = "gif"
    WEBP = "webp"
    BMP = "bmp"

    @property
    def pil_format(self) -> str:
        """Return the format name Pillow uses for this format."""
        return self.name

    @property
    def mime_type(self) -> str:
        """Return the MIME type of this format."""
        return _MIME_TYPES[self]

    @property
    def extensions(self) -> tuple[str, ...]:
        """Return the file suffixes (with the leading dot) used for this format."""
        return _EXTENSIONS[self]

    @classmethod
    def from_name(cls, name: str) -> "ImageFormat":
        """Parse a format name such as `png` or `jpg`."""
        normalized = name.strip().lower().lstrip(".")
        for image_format in cls:
            if normalized == image_format.value or f".{normalized}" in image_format.extensions:
                return image_format
        raise InvalidArgumentError(f"Unsupported image format: {name!r}")

    @classmethod
    def from_path(cls, path: str | Path) -> Optional["ImageFormat"]:
        """Infer the format from a file suffix, or None if the path has no suffix.

        Raises:
            InvalidArgumentError: the suffix names no supported format.
        """
        suffix = Path(path).suffix
        if not suffix:
            return None
        return cls.from_name(suffix)

    @classmethod
    def from_pil_format(cls, pil_format: str | None) -> Optional["ImageFormat"]:
        """Map a Pillow format name to an ImageFormat, or None if unsupported."""
        if not pil_format:
            return None
        # Pillow reports multi-picture JPEGs as MPO
        name = "JPEG" if pil_format.upper() == "MPO" else pil_format.upper()
        return cls.__members__.get(name)


_MIME_TYPES: dict[ImageFormat, str] = {
    ImageFormat.PNG: "image/png",
    ImageFormat.ICO: "image/x-icon",
    ImageFormat.JPEG: "image/jpeg",
    ImageFormat.GIF: "image/gif",
    ImageFormat.WEBP: "image/webp",
    ImageFormat.BMP: "image/bmp",
}

_EXTENSIONS: dict[ImageFormat, tuple[str, ...]] = {
    ImageFormat.PNG: (".png",),
    ImageFormat.ICO: (".ico",),
    ImageFormat.JPEG: (".jpeg", ".jpg", ".jpe"),
    ImageFormat.GIF: (".gif",),
    ImageFormat.WEBP: (".webp",),
    ImageFormat.BMP: (".bmp",),
}


class ImageSize(BaseModel):
    """Target dimensions of a favicon.

    Use `small()`, `medium()`, `large()` or `custom()`. The original size of an
    image is requested by passing None instead of an ImageSize.
    """

    model_config = ConfigDict(frozen=True)

    width: PositiveInt
    height: PositiveInt
    name: str = "custom"

    @classmethod
    def small(cls) -> "ImageSize":
        """16x16"""
        return cls(width=16, height=16, name="small")

    @classmethod
    def medium(cls) -> "ImageSize":
        """32x32"""
        return cls(width=32, height=32, name="medium")

    @classmethod
    def large(cls) -> "ImageSize":
        """64x64"""
        return cls(width=64, height=64, name="large")

    @classmethod
    def custom(cls, width: int, height: int) -> "ImageSize":
        """Return a size with explicit dimensions, both of which must be positive."""
        if width <= 0 or height <= 0:
            raise InvalidArgumentError(
                f"Image dimensions must be positive, got {width}x{height}"
            )
        return cls(width=width, height=height)

    @classmethod
    def parse(cls, value: str) -> "ImageSize":
        """Parse `small`, `medium`, `large`, `W,H` or `WxH`."""
        presets = {"small": cls.small, "medium": cls.medium, "large": cls.large}
        normalized = value.strip().lower()
        if normalized in presets:
            return presets[normalized]()

        match = _SIZE_PATTERN.match(normalized)
        if match is None:
            raise InvalidArgumentError(
                f"Invalid size {value!r}: expected small, medium, large or W,H"
            )
        return cls.custom(int(match.group(1)), int(match.group(2)))

    @property
    def dimensions(self) -> SizeHint:
        """Return (width, height)."""
        return self.width, self.height

    @property
    def area(self) -> int:
        """Return the number of pixels."""
        return self.width * self.height


class IconLink(BaseModel):
    """An icon reference found in markup or a manifest, before URL resolution."""

    model_config = ConfigDict(frozen=True)

    href: str
    size_hint: Optional[SizeHint] = None
    kind: SourceKind


class Candidate(BaseModel):
    """A discovered, not yet fetched, favicon location."""

    model_config = ConfigDict(frozen=True)

    url: str
    size_hint: Optional[SizeHint] = None
    source_kind: SourceKind

    @field_validator("url")
    @classmethod
    def _check_absolute(cls, value: str) -> str:
        if not is_absolute_url(value):
            raise ValueError(f"Candidate URL must be an absolute http(s) URL: {value!r}")
        return value


class FetchAttempt(BaseModel):
    """A candidate URL that was tried and the reason it was not usable."""

    url: str
    reason: str


class HttpResponse(BaseModel):
    """Result of an HTTP GET request."""

    url: str
    status_code: int
    content: bytes = b""
    content_type: Optional[str] = None

    @property
    def is_success(self) -> bool:
        """Whether the status code is 2xx."""
        return 200 <= self.status_code < 300
