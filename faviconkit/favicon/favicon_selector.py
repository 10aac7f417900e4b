"""Favicon selection logic for ordering candidates against a requested size"""

from typing import Optional, Sequence

from faviconkit.constants import SOURCE_KIND_PRIORITY
from faviconkit.models import Candidate, ImageSize

# Ranking tiers (lower is better)
EXACT_MATCH_TIER = 0
SIZED_TIER = 1
UNSIZED_TIER = 2

RankKey = tuple[int, int, int, int, int]


class CandidateSelector:
    """Order favicon candidates by how well they match a requested size.

    1. Candidates declaring exactly the requested dimensions.
    2. Other candidates declaring a size, closest area first, larger preferred on ties.
    3. Candidates without a size, by source kind (link, apple-touch-icon, meta, manifest, default).

    Ties keep discovery order. When no size is requested, declared sizes rank
    largest first.
    """

    @staticmethod
    def rank(candidate: Candidate, index: int, requested: Optional[ImageSize]) -> RankKey:
        """Return the sort key of a candidate found at position `index`."""
        if candidate.size_hint is None:
            priority = SOURCE_KIND_PRIORITY.get(candidate.source_kind, len(SOURCE_KIND_PRIORITY))
            return UNSIZED_TIER, 0, 0, priority, index

        width, height = candidate.size_hint
        declared_area = width * height

        if requested is None:
            return SIZED_TIER, -declared_area, 0, 0, index

        if candidate.size_hint == requested.dimensions:
            return EXACT_MATCH_TIER, 0, 0, 0, index

        distance = abs(declared_area - requested.area)
        smaller = 0 if declared_area >= requested.area else 1
        return SIZED_TIER, distance, smaller, 0, index

    @staticmethod
    def order(
        candidates: Sequence[Candidate], requested: Optional[ImageSize] = None
    ) -> list[Candidate]:
        """Return the candidates in the order they should be fetched."""
        ranked = sorted(
            enumerate(candidates),
            key=lambda item: CandidateSelector.rank(item[1], item[0], requested),
        )
        return [candidate for _, candidate in ranked]

    @staticmethod
    def select(
        candidates: Sequence[Candidate], requested: Optional[ImageSize] = None
    ) -> Optional[Candidate]:
        """Return the best candidate, or None if there are none."""
        ordered = CandidateSelector.order(candidates, requested)
        return ordered[0] if ordered else None
