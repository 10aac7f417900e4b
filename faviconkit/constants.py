"""Constants for favicon discovery, selection and retrieval"""

from faviconkit.models import SourceKind

# Scraper selectors
LINK_SELECTOR: str = "link[rel][href]"

META_SELECTOR: str = "meta[name][content]"

PARSER: str = "html.parser"

# `rel` tokens (lowercased) mapped to the kind of icon they reference
LINK_REL_KINDS: dict[str, SourceKind] = {
    "icon": SourceKind.LINK_ICON,
    "favicon": SourceKind.LINK_ICON,
    "fluid-icon": SourceKind.LINK_ICON,
    "apple-touch-icon": SourceKind.APPLE_TOUCH_ICON,
    "apple-touch-icon-precomposed": SourceKind.APPLE_TOUCH_ICON,
}

MANIFEST_REL: str = "manifest"

# `<meta name=...>` values (lowercased) whose content is an icon URL
META_NAME_KINDS: dict[str, SourceKind] = {
    "apple-touch-icon": SourceKind.APPLE_TOUCH_ICON,
    "msapplication-tileimage": SourceKind.META_ICON,
}

DEFAULT_FAVICON_PATH: str = "/favicon.ico"

# Schemes that can never point to a fetchable favicon
UNFETCHABLE_SCHEMES: tuple[str, ...] = ("javascript:", "mailto:", "data:", "blob:")

# Source priority for candidates without a size hint (lower is better)
SOURCE_KIND_PRIORITY: dict[SourceKind, int] = {
    SourceKind.LINK_ICON: 1,
    SourceKind.APPLE_TOUCH_ICON: 2,
    SourceKind.META_ICON: 3,
    SourceKind.MANIFEST: 4,
    SourceKind.DEFAULT_ICO: 5,
}

# HTTP request configuration
REQUEST_HEADERS: dict[str, str] = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-GB,en-US;q=0.9,en;q=0.8",
    "DNT": "1",
}

MANIFEST_HEADERS: dict[str, str] = {
    "Accept": "application/manifest+json,application/json;q=0.9,*/*;q=0.8",
}

IMAGE_HEADERS: dict[str, str] = {
    "Accept": "image/avif,image/webp,image/png,image/x-icon,image/*;q=0.8,*/*;q=0.5",
}

# Largest edge the ICO container can describe in its directory entry
MAX_ICO_DIMENSION: int = 256
