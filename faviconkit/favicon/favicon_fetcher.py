"""Favicon fetcher for downloading the first viable favicon candidate"""

import logging
from typing import Optional, Sequence

from faviconkit.constants import IMAGE_HEADERS
from faviconkit.exceptions import NotFoundError, TransportError
from faviconkit.models import Candidate, FetchAttempt, HttpResponse
from faviconkit.utils.http_client import Client
from faviconkit.utils.image_signature import sniff_image_format

logger = logging.getLogger(__name__)


class FaviconFetcher:
    """Try candidates in order and return the first response that looks like an image.

    A candidate is never retried: on failure the fetcher moves to the next one.
    """

    def __init__(self, client: Client, timeout: Optional[float] = None) -> None:
        self.client = client
        self.timeout = timeout

    def fetch(self, candidates: Sequence[Candidate]) -> tuple[bytes, Candidate]:
        """Return the body and candidate of the first viable response.

        Raises:
            NotFoundError: no candidate was viable, with one attempt per URL tried.
        """
        attempts: list[FetchAttempt] = []
        attempted_urls: set[str] = set()

        for candidate in candidates:
            if candidate.url in attempted_urls:
                logger.debug(f"Skipping already attempted favicon URL {candidate.url}")
                continue
            attempted_urls.add(candidate.url)

            try:
                response = self.client.get(
                    candidate.url, headers=IMAGE_HEADERS, timeout=self.timeout
                )
            except TransportError as e:
                attempts.append(FetchAttempt(url=candidate.url, reason=f"transport error: {e}"))
                continue

            reason = self.rejection_reason(response)
            if reason is not None:
                logger.debug(f"Favicon candidate {candidate.url} is not viable: {reason}")
                attempts.append(FetchAttempt(url=candidate.url, reason=reason))
                continue

            logger.info(f"Fetched favicon from {candidate.url}")
            return response.content, candidate

        raise NotFoundError(attempts)

    @staticmethod
    def rejection_reason(response: HttpResponse) -> Optional[str]:
        """Return why a response can't be used as a favicon, or None if it's viable."""
        if not response.is_success:
            return f"HTTP {response.status_code}"
        if not response.content:
            return "empty body"
        if sniff_image_format(response.content) is None:
            return "unrecognized image signature"
        return None
