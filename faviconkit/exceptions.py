"""faviconkit specific exceptions."""


class FaviconError(Exception):
    """Base class for every error raised by faviconkit."""


class TransportError(FaviconError):
    """Raised when an HTTP request fails to complete (connection, timeout)."""


class ParseError(FaviconError):
    """Raised for markup or manifest content that can't be parsed."""


class DecodeError(FaviconError):
    """Raised when image bytes are corrupt or in an unsupported format."""


class EncodeError(FaviconError):
    """Raised when an image can't be encoded into the requested format."""


class ExportError(FaviconError):
    """Raised when a favicon can't be written to the file system."""


class InvalidArgumentError(FaviconError, ValueError):
    """Raised for invalid user input such as a malformed size or header."""


class InvalidUrlError(InvalidArgumentError):
    """Raised when a URL is not an absolute http(s) URL."""


class NotFoundError(FaviconError):
    """Raised when every favicon candidate has been tried without success."""

    def __init__(self, attempts) -> None:
        self.attempts = list(attempts)
        super().__init__(
            f"No favicon found after {len(self.attempts)} attempt(s)"
        )

    def describe(self) -> str:
        """Summarize the attempted URLs with their failure reasons on one line."""
        details = "; ".join(f"{attempt.url} ({attempt.reason})" for attempt in self.attempts)
        return f"{self}: {details}" if details else str(self)
