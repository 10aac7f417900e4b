"""Markup parser for extracting favicon references from HTML pages and web app manifests"""

import json
import logging
import re
from typing import Any, Optional, Protocol

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from faviconkit.constants import (
    LINK_REL_KINDS,
    LINK_SELECTOR,
    MANIFEST_REL,
    META_NAME_KINDS,
    META_SELECTOR,
    PARSER,
)
from faviconkit.exceptions import ParseError
from faviconkit.models import IconLink, SizeHint, SourceKind

logger = logging.getLogger(__name__)

_SIZE_TOKEN = re.compile(r"^(\d+)[xX](\d+)$")


def parse_sizes(value: Optional[str]) -> Optional[SizeHint]:
    """Parse a `sizes` attribute such as "32x32" or "16x16 32x32".

    When several sizes are declared the largest one wins. Returns None for
    "any", missing or malformed values.
    """
    if not value:
        return None

    best: Optional[SizeHint] = None
    for token in value.split():
        match = _SIZE_TOKEN.match(token)
        if match is None:
            continue
        width, height = int(match.group(1)), int(match.group(2))
        if width <= 0 or height <= 0:
            continue
        if best is None or width * height > best[0] * best[1]:
            best = (width, height)
    return best


class MarkupParser(Protocol):
    """Protocol for the markup parser favicon discovery depends on."""

    def extract_icon_links(self, html: str | bytes) -> list[IconLink]:  # pragma: no cover
        """Return icon and manifest references found in an HTML document."""
        ...

    def extract_manifest_icons(self, manifest: str | bytes) -> list[IconLink]:  # pragma: no cover
        """Return icons declared in a web app manifest."""
        ...


class SoupMarkupParser:
    """Extract favicon references from link tags, meta tags and manifests using BeautifulSoup."""

    def extract_icon_links(self, html: str | bytes) -> list[IconLink]:
        """Extract icon links, meta icons and manifest references in document order.

        Raises:
            ParseError: the document can't be parsed at all.
        """
        try:
            page = BeautifulSoup(html, PARSER)
        except ParserRejectedMarkup as e:
            raise ParseError(f"Unable to parse HTML document: {e}") from e

        links = [link for tag in page.select(LINK_SELECTOR) if (link := self._from_link(tag))]
        metas = [meta for tag in page.select(META_SELECTOR) if (meta := self._from_meta(tag))]
        return links + metas

    def extract_manifest_icons(self, manifest: str | bytes) -> list[IconLink]:
        """Extract the `icons` array of a web app manifest.

        Raises:
            ParseError: the manifest is not a JSON object.
        """
        try:
            json_data = json.loads(manifest)
        except (ValueError, TypeError) as e:
            raise ParseError(f"Invalid manifest JSON: {e}") from e

        if not isinstance(json_data, dict):
            raise ParseError("Manifest must be a JSON object")

        icons = json_data.get("icons", [])
        if not isinstance(icons, list):
            raise ParseError("Manifest `icons` must be a list")

        result = []
        for icon in icons:
            if not isinstance(icon, dict) or not isinstance(icon.get("src"), str):
                logger.debug(f"Skipping malformed manifest icon entry: {icon!r}")
                continue
            sizes = icon.get("sizes")
            result.append(
                IconLink(
                    href=icon["src"],
                    size_hint=parse_sizes(sizes if isinstance(sizes, str) else None),
                    kind=SourceKind.MANIFEST,
                )
            )
        return result

    @staticmethod
    def _rel_tokens(tag: Any) -> list[str]:
        rel = tag.get("rel") or []
        if isinstance(rel, str):
            rel = rel.split()
        return [token.lower() for token in rel]

    def _from_link(self, tag: Any) -> Optional[IconLink]:
        tokens = self._rel_tokens(tag)
        href = str(tag.get("href", "")).strip()

        if MANIFEST_REL in tokens:
            return IconLink(href=href, kind=SourceKind.MANIFEST)

        for token in tokens:
            if token in LINK_REL_KINDS:
                return IconLink(
                    href=href,
                    size_hint=parse_sizes(tag.get("sizes")),
                    kind=LINK_REL_KINDS[token],
                )
        return None

    @staticmethod
    def _from_meta(tag: Any) -> Optional[IconLink]:
        kind = META_NAME_KINDS.get(str(tag.get("name", "")).lower())
        if kind is None:
            return None
        return IconLink(href=str(tag.get("content", "")).strip(), kind=kind)
