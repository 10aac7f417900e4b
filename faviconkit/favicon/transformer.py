"""Favicon transformer for decoding, resizing and re-encoding favicon images"""

import logging
import struct
from io import BytesIO
from typing import Any, Optional, Protocol

from PIL import Image as PILImage
from pydantic import BaseModel, ConfigDict

from faviconkit.constants import MAX_ICO_DIMENSION
from faviconkit.exceptions import DecodeError, EncodeError
from faviconkit.models import ImageFormat, ImageSize

logger = logging.getLogger(__name__)

# Pixel layouts kept as decoded, everything else is converted to RGBA
NATIVE_MODES: tuple[str, ...] = ("RGB", "RGBA", "L")

RESAMPLING_FILTER = PILImage.Resampling.LANCZOS

JPEG_BACKGROUND: tuple[int, int, int] = (255, 255, 255)

_PIL_DECODE_ERRORS = (
    OSError,
    ValueError,
    SyntaxError,
    struct.error,
    PILImage.DecompressionBombError,
)


class Raster(BaseModel):
    """Decoded pixel buffer along with the format it was decoded from."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    image: PILImage.Image
    source_format: Optional[ImageFormat] = None

    @property
    def width(self) -> int:
        """Width in pixels."""
        return int(self.image.width)

    @property
    def height(self) -> int:
        """Height in pixels."""
        return int(self.image.height)

    @property
    def mode(self) -> str:
        """Pillow pixel layout, one of NATIVE_MODES."""
        return str(self.image.mode)


class ImageCodec(Protocol):
    """Protocol for the image codec the transformer depends on."""

    def decode(self, content: bytes) -> Raster:  # pragma: no cover
        """Decode image bytes, detecting their actual format."""
        ...

    def encode(self, raster: Raster, image_format: ImageFormat) -> bytes:  # pragma: no cover
        """Encode a raster into the given container format."""
        ...


class PillowCodec:
    """Image codec backed by Pillow."""

    def decode(self, content: bytes) -> Raster:
        """Decode image bytes. The format is detected from the bytes, never assumed.

        ICO files decode to their largest entry, animated images to their first frame.

        Raises:
            DecodeError: the bytes are empty, corrupt, or in a format faviconkit doesn't support.
        """
        if not content:
            raise DecodeError("Image data is empty")

        try:
            with PILImage.open(BytesIO(content)) as image:
                image.load()
                detected = ImageFormat.from_pil_format(image.format)
                if detected is None:
                    raise DecodeError(f"Unsupported image format: {image.format}")
                normalized = self._normalize(image)
        except _PIL_DECODE_ERRORS as e:
            raise DecodeError(f"Unable to decode image: {e}") from e

        return Raster(image=normalized, source_format=detected)

    def encode(self, raster: Raster, image_format: ImageFormat) -> bytes:
        """Encode a raster. ICO output holds a single entry of the raster's size.

        Raises:
            EncodeError: the raster can't be represented in `image_format`.
        """
        image = raster.image
        save_kwargs: dict[str, Any] = {}

        match image_format:
            case ImageFormat.ICO:
                if max(raster.width, raster.height) > MAX_ICO_DIMENSION:
                    raise EncodeError(
                        f"ICO entries are limited to {MAX_ICO_DIMENSION}x{MAX_ICO_DIMENSION},"
                        f" got {raster.width}x{raster.height}"
                    )
                save_kwargs["sizes"] = [(raster.width, raster.height)]
            case ImageFormat.JPEG:
                image = self._flatten(image)
                save_kwargs["quality"] = 95
            case ImageFormat.WEBP:
                save_kwargs["lossless"] = True

        buffer = BytesIO()
        try:
            image.save(buffer, format=image_format.pil_format, **save_kwargs)
        except (OSError, ValueError, KeyError) as e:
            raise EncodeError(f"Unable to encode image as {image_format.value}: {e}") from e
        return buffer.getvalue()

    @staticmethod
    def _normalize(image: PILImage.Image) -> PILImage.Image:
        if image.mode in NATIVE_MODES:
            return image.copy()
        return image.convert("RGBA")

    @staticmethod
    def _flatten(image: PILImage.Image) -> PILImage.Image:
        """JPEG has no alpha channel: composite transparent images onto a white background."""
        if image.mode == "RGBA":
            background = PILImage.new("RGB", image.size, JPEG_BACKGROUND)
            background.paste(image, mask=image.getchannel("A"))
            return background
        return image


class FaviconTransformer:
    """Decode, resize and re-encode favicon images."""

    def __init__(self, codec: Optional[ImageCodec] = None) -> None:
        self.codec = codec or PillowCodec()

    def decode(self, content: bytes) -> Raster:
        """Decode image bytes into a raster."""
        return self.codec.decode(content)

    def resize(self, raster: Raster, size: ImageSize) -> Raster:
        """Stretch the raster to exactly `size`, the aspect ratio is not preserved."""
        if (raster.width, raster.height) == size.dimensions:
            return raster

        logger.debug(
            f"Resizing favicon from {raster.width}x{raster.height} to {size.width}x{size.height}"
        )
        resized = raster.image.resize(size.dimensions, RESAMPLING_FILTER)
        return Raster(image=resized, source_format=raster.source_format)

    def fit(self, raster: Raster, image_format: ImageFormat) -> Raster:
        """Downscale the raster, keeping its aspect ratio, to what `image_format` can hold.

        Only ICO has a size limit: its directory entries describe at most 256x256.
        """
        largest_edge = max(raster.width, raster.height)
        if image_format != ImageFormat.ICO or largest_edge <= MAX_ICO_DIMENSION:
            return raster

        scale = MAX_ICO_DIMENSION / largest_edge
        size = ImageSize.custom(
            max(1, round(raster.width * scale)), max(1, round(raster.height * scale))
        )
        return self.resize(raster, size)

    def encode(self, raster: Raster, image_format: ImageFormat) -> bytes:
        """Encode a raster into `image_format`."""
        return self.codec.encode(raster, image_format)
