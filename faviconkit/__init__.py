"""Find, download and convert website favicons."""

from faviconkit.exceptions import (
    DecodeError,
    EncodeError,
    ExportError,
    FaviconError,
    InvalidArgumentError,
    InvalidUrlError,
    NotFoundError,
    ParseError,
    TransportError,
)
from faviconkit.favicon import Favicon, fetch_favicon, find_candidates
from faviconkit.models import Candidate, ImageFormat, ImageSize, SourceKind
from faviconkit.utils.http_client import HttpClient

__all__ = [
    "Candidate",
    "DecodeError",
    "EncodeError",
    "ExportError",
    "Favicon",
    "FaviconError",
    "HttpClient",
    "ImageFormat",
    "ImageSize",
    "InvalidArgumentError",
    "InvalidUrlError",
    "NotFoundError",
    "ParseError",
    "SourceKind",
    "TransportError",
    "fetch_favicon",
    "find_candidates",
]
