"""Favicon discovery: enumerate candidate favicon locations for a site"""

import logging
from typing import Optional

from faviconkit.configs import settings
from faviconkit.constants import DEFAULT_FAVICON_PATH, MANIFEST_HEADERS, REQUEST_HEADERS
from faviconkit.exceptions import ParseError, TransportError
from faviconkit.models import Candidate, IconLink, SourceKind
from faviconkit.scrapers.markup_parser import MarkupParser, SoupMarkupParser
from faviconkit.utils.http_client import Client
from faviconkit.utils.url import join_url, resolve_url

logger = logging.getLogger(__name__)


class FaviconDiscovery:
    """Find favicon candidates in a page's link tags, meta tags, manifest and default location.

    Discovery never raises for a reachable or unreachable site: in the worst
    case it returns only the default `/favicon.ico` candidate, which is always
    the last element.
    """

    def __init__(
        self,
        client: Client,
        parser: Optional[MarkupParser] = None,
        max_candidates: Optional[int] = None,
        process_manifest: Optional[bool] = None,
    ) -> None:
        self.client = client
        self.parser = parser or SoupMarkupParser()
        self.max_candidates = (
            max_candidates
            if max_candidates is not None
            else int(settings.discovery.max_candidates)
        )
        self.process_manifest = (
            process_manifest
            if process_manifest is not None
            else bool(settings.discovery.process_manifest)
        )

    def discover(self, site: str) -> list[Candidate]:
        """Return the candidates for `site` in discovery order, default favicon last."""
        candidates: list[Candidate] = []

        page = self._fetch_page(site)
        if page is not None:
            page_url, html = page
            candidates = self._candidates_from_page(html, page_url)

        candidates.append(self._default_candidate(site))
        logger.debug(f"Discovered {len(candidates)} favicon candidate(s) for {site}")
        return candidates

    def _fetch_page(self, site: str) -> Optional[tuple[str, bytes]]:
        """Download the site page, returning its final URL and body, or None on failure."""
        try:
            response = self.client.get(site, headers=REQUEST_HEADERS)
        except TransportError as e:
            logger.info(f"Unable to fetch {site}, using the default favicon only: {e}")
            return None

        if not response.is_success:
            logger.info(
                f"Fetching {site} returned HTTP {response.status_code},"
                " using the default favicon only"
            )
            return None

        return response.url or site, response.content

    def _candidates_from_page(self, html: bytes, page_url: str) -> list[Candidate]:
        try:
            links = self.parser.extract_icon_links(html)
        except ParseError as e:
            logger.warning(f"Exception extracting favicons from {page_url}: {e}")
            return []

        icon_links = [link for link in links if link.kind != SourceKind.MANIFEST]
        manifest_links = [link for link in links if link.kind == SourceKind.MANIFEST]

        candidates = self._resolve_links(icon_links, page_url)

        # Only process first manifest to limit requests
        if self.process_manifest and manifest_links and len(candidates) < self.max_candidates:
            candidates.extend(self._manifest_candidates(manifest_links[0], page_url))

        return self._deduplicate(candidates)[: self.max_candidates]

    def _resolve_links(self, links: list[IconLink], base_url: str) -> list[Candidate]:
        candidates = []
        for link in links:
            url = resolve_url(link.href, base_url)
            if url is None:
                logger.debug(f"Dropping favicon link that can't be resolved: {link.href!r}")
                continue
            candidates.append(Candidate(url=url, size_hint=link.size_hint, source_kind=link.kind))
        return candidates

    def _manifest_candidates(self, manifest_link: IconLink, page_url: str) -> list[Candidate]:
        manifest_url = resolve_url(manifest_link.href, page_url)
        if manifest_url is None:
            logger.debug(f"Dropping manifest link that can't be resolved: {manifest_link.href!r}")
            return []

        try:
            response = self.client.get(manifest_url, headers=MANIFEST_HEADERS)
        except TransportError as e:
            logger.info(f"Unable to fetch manifest {manifest_url}: {e}")
            return []

        if not response.is_success:
            logger.info(f"Fetching manifest {manifest_url} returned HTTP {response.status_code}")
            return []

        try:
            icons = self.parser.extract_manifest_icons(response.content)
        except ParseError as e:
            logger.warning(f"Error processing manifest {manifest_url}: {e}")
            return []

        # Manifest icon paths are relative to the manifest, not the page
        return self._resolve_links(icons, response.url or manifest_url)

    @staticmethod
    def _deduplicate(candidates: list[Candidate]) -> list[Candidate]:
        seen: set[str] = set()
        unique = []
        for candidate in candidates:
            if candidate.url in seen:
                continue
            seen.add(candidate.url)
            unique.append(candidate)
        return unique

    @staticmethod
    def _default_candidate(site: str) -> Candidate:
        return Candidate(
            url=join_url(site, DEFAULT_FAVICON_PATH),
            size_hint=None,
            source_kind=SourceKind.DEFAULT_ICO,
        )
