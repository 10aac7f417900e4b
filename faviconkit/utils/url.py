"""URL manipulation utilities for favicon discovery"""

from typing import Optional
from urllib.parse import urljoin, urlparse, urlunparse

from faviconkit.exceptions import InvalidUrlError

ALLOWED_SCHEMES: tuple[str, ...] = ("http", "https")


def is_absolute_url(url: str) -> bool:
    """Check if URL is an absolute http(s) URL with a host."""
    if not url:
        return False
    try:
        parsed = urlparse(url)
        # Accessing the port validates it
        parsed.port
    except ValueError:
        return False
    return parsed.scheme in ALLOWED_SCHEMES and bool(parsed.hostname)


def parse_site_url(url: str, add_www: bool = False) -> str:
    """Validate and normalize the URL of the site to fetch a favicon for.

    Bare hosts (`example.com`) and protocol-relative URLs (`//example.com`) are
    accepted and assumed to use https. A missing path is normalized to `/`.

    Raises:
        InvalidUrlError: the value can't be turned into an absolute http(s) URL.
    """
    candidate = (url or "").strip()
    if not candidate:
        raise InvalidUrlError("URL must not be empty")

    if candidate.startswith("//"):
        candidate = f"https:{candidate}"
    elif "://" not in candidate:
        candidate = f"https://{candidate}"

    if not is_absolute_url(candidate):
        raise InvalidUrlError(f"Invalid site URL: {url!r}")

    parsed = urlparse(candidate)
    netloc = parsed.netloc
    if add_www and not parsed.hostname.startswith("www."):  # type: ignore[union-attr]
        netloc = f"www.{netloc}"

    return urlunparse(
        (parsed.scheme.lower(), netloc, parsed.path or "/", parsed.params, parsed.query, "")
    )


def resolve_url(href: str, base_url: str) -> Optional[str]:
    """Resolve a possibly relative href against an absolute base URL.

    Returns None when the result is not an absolute http(s) URL, e.g. for
    `data:` or `javascript:` references.
    """
    from faviconkit.constants import UNFETCHABLE_SCHEMES

    reference = (href or "").strip()
    if not reference or reference.lower().startswith(UNFETCHABLE_SCHEMES):
        return None

    try:
        resolved = urljoin(base_url, reference)
    except ValueError:
        return None

    # Drop fragments, they never change what the server returns
    resolved = urlunparse(urlparse(resolved)._replace(fragment=""))
    return resolved if is_absolute_url(resolved) else None


def join_url(base: str, path: str) -> str:
    """Join base URL with path."""
    return urljoin(base, path)
