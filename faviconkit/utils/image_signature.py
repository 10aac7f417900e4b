"""Image format detection from leading bytes ("magic numbers")."""

from typing import Optional

from faviconkit.models import ImageFormat

# Leading byte signatures of the raster formats faviconkit can decode
IMAGE_SIGNATURES: tuple[tuple[bytes, ImageFormat], ...] = (
    (b"\x89PNG\r\n\x1a\n", ImageFormat.PNG),
    (b"\x00\x00\x01\x00", ImageFormat.ICO),
    (b"\xff\xd8\xff", ImageFormat.JPEG),
    (b"GIF87a", ImageFormat.GIF),
    (b"GIF89a", ImageFormat.GIF),
    (b"BM", ImageFormat.BMP),
)


def sniff_image_format(content: bytes) -> Optional[ImageFormat]:
    """Return the format whose signature starts `content`, or None.

    This only probes the header, a match does not guarantee the rest of the
    payload decodes.
    """
    if not content:
        return None

    # WebP is a RIFF container: "RIFF" <size:4> "WEBP"
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return ImageFormat.WEBP

    for signature, image_format in IMAGE_SIGNATURES:
        if content.startswith(signature):
            return image_format

    return None
